"""
Sous-package `models` de l'optimiseur de prix.

- `cost_model.py` : coûts ajustés par scénario, point mort, marges,
- `demand_model.py` : projection de volume par élasticité prix.
"""

from .cost_model import (
    calculate_adjusted_costs,
    calculate_base_costs,
    calculate_break_even_price,
    calculate_margin,
    calculate_price_for_margin,
)
from .demand_model import (
    calculate_volume_projection,
    project_market_share,
    resolve_price_elasticity,
)

__all__ = [
    "calculate_adjusted_costs",
    "calculate_base_costs",
    "calculate_break_even_price",
    "calculate_margin",
    "calculate_price_for_margin",
    "calculate_volume_projection",
    "project_market_share",
    "resolve_price_elasticity",
]
