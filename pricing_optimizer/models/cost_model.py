"""
Modèle de coûts de l'optimiseur de prix.

Ce module fournit :
- l'ajustement des coûts unitaires d'un produit selon un scénario
  (matière, douane, transport, change),
- le prix de point mort,
- la marge pour un prix donné, et le prix nécessaire pour une marge cible.

Aucune fonction ne lève d'exception sur les cas limites arithmétiques :
des valeurs de repli explicites sont retournées à la place.
"""

import math
from typing import Optional

from ..schemas import AdjustedCosts, Product, Scenario


def _percent_factor(change: Optional[float]) -> float:
    """Facteur multiplicatif pour une variation en %, neutre si absente."""
    if not change:
        return 1.0
    return 1 + change / 100


def calculate_adjusted_costs(product: Product, scenario: Scenario) -> AdjustedCosts:
    """
    Applique les ajustements du scénario aux coûts du produit.

    - matière : `unit_cost * (1 + material_cost_change / 100)`
    - douane : le taux augmente de `tariff_increase` points (additif)
    - transport : `shipping_cost * (1 + shipping_cost_change / 100)`
    - change : un facteur `1 + currency_fluctuation / 100` s'applique
      uniformément à tous les montants (pas au taux de douane).
    """
    unit_cost = product.unit_cost * _percent_factor(scenario.material_cost_change)

    tariff_rate = product.tariff_rate + (scenario.tariff_increase or 0.0)
    tariff_cost = unit_cost * (tariff_rate / 100)

    shipping_cost = product.shipping_cost * _percent_factor(scenario.shipping_cost_change)

    total_unit_cost = unit_cost + tariff_cost + shipping_cost

    currency_factor = _percent_factor(scenario.currency_fluctuation)

    return AdjustedCosts(
        unit_cost=unit_cost * currency_factor,
        tariff_rate=tariff_rate,
        tariff_cost=tariff_cost * currency_factor,
        shipping_cost=shipping_cost * currency_factor,
        total_unit_cost=total_unit_cost * currency_factor,
        fixed_costs=product.fixed_costs * currency_factor,
        variable_costs=product.variable_costs * currency_factor,
    )


def calculate_base_costs(product: Product) -> AdjustedCosts:
    """Coûts non ajustés du produit (scénario neutre)."""
    return calculate_adjusted_costs(product, Scenario(name="base"))


def calculate_break_even_price(
    costs: AdjustedCosts,
    amortization_volume: float = 100.0,
) -> float:
    """
    Prix de point mort simplifié.

    Les coûts fixes sont amortis sur un volume constant (100 unités par
    défaut), sans lien avec le volume de ventes réel du produit.
    """
    return costs.total_unit_cost + costs.variable_costs + costs.fixed_costs / amortization_volume


def calculate_margin(price: float, costs: AdjustedCosts) -> float:
    """
    Marge (%) pour un prix donné : `(prix - coût unitaire complet) / prix * 100`.

    Un prix nul ou négatif n'a pas de marge définie : on retourne 0.0.
    """
    if price <= 0:
        return 0.0
    unit_cost = costs.total_unit_cost + costs.variable_costs
    return (price - unit_cost) / price * 100


def calculate_price_for_margin(costs: AdjustedCosts, target_margin: float) -> float:
    """
    Prix permettant d'atteindre la marge cible.

    Pour une marge cible >= 100 % le prix diverge : on retourne `math.inf`,
    ce qui exclut naturellement le candidat de toute fenêtre de prix.
    """
    if target_margin >= 100:
        return math.inf
    unit_cost = costs.total_unit_cost + costs.variable_costs
    return unit_cost / (1 - target_margin / 100)
