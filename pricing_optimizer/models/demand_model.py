"""
Modèle de demande de l'optimiseur de prix.

Modèle à élasticité constante : `%ΔQ = élasticité * %ΔP`.
Le volume projeté est ensuite corrigé par un facteur propre à la stratégie
de prix, puis borné à 0.
"""

from typing import Optional

from ..config import get_default_optimizer_config
from ..schemas import Product


def resolve_price_elasticity(
    product: Product,
    default: Optional[float] = None,
) -> float:
    """Élasticité du produit, ou la valeur par défaut (configuration) si absente."""
    if product.price_elasticity is None:
        if default is None:
            default = get_default_optimizer_config().default_price_elasticity
        return default
    return product.price_elasticity


def calculate_volume_projection(
    current_volume: float,
    current_price: float,
    new_price: float,
    price_elasticity: float,
    adjustment_factor: float = 1.0,
) -> float:
    """
    Projette le volume de ventes pour un nouveau prix.

    Paramètres :
    - current_volume: volume de ventes actuel
    - current_price: prix actuel (> 0)
    - new_price: prix évalué
    - price_elasticity: élasticité prix de la demande (négative pour un bien normal)
    - adjustment_factor: correction multiplicative (stratégie), 1.0 par défaut

    Le volume retourné n'est jamais négatif.
    """
    price_change_ratio = (new_price - current_price) / current_price
    volume_change_ratio = price_elasticity * price_change_ratio

    new_volume = current_volume * (1 + volume_change_ratio) * adjustment_factor
    return max(0.0, new_volume)


def project_market_share(
    product: Product,
    volume: float,
    factor: Optional[float] = None,
) -> Optional[float]:
    """
    Projette la part de marché proportionnellement au volume.

    Retourne None si le produit n'a pas de part de marché connue.
    """
    if product.market_share_current is None:
        return None
    share = product.market_share_current * (volume / product.sales_volume_current)
    if factor is not None:
        share *= factor
    return share
