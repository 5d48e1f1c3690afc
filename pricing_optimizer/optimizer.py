"""
Logique d'optimisation de prix.

Ce module est responsable de :
- évaluer, pour chaque scénario, une grille de prix candidats
  (prix issus des stratégies + remplissage régulier de la fenêtre),
- choisir le prix le plus profitable et évaluer le risque associé,
- synthétiser une recommandation globale et une analyse de sensibilité,
- réutiliser un résultat récent stocké, et stocker les nouveaux résultats.

Il s'appuie sur les modèles définis dans `models.cost_model` et
`models.demand_model`, et sur le catalogue de `strategies`.
"""

import logging
import math
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np  # type: ignore

from .config import OptimizerConfig, get_default_optimizer_config
from .interfaces.data_access import (
    find_recent_result,
    is_result_fresh,
    store_result,
    utc_now,
)
from .models.cost_model import (
    calculate_adjusted_costs,
    calculate_base_costs,
    calculate_break_even_price,
    calculate_margin,
    calculate_price_for_margin,
)
from .models.demand_model import (
    calculate_volume_projection,
    project_market_share,
    resolve_price_elasticity,
)
from .schemas import (
    AdjustedCosts,
    CompetitorComparison,
    OptimizationRequest,
    OptimizationResult,
    PricePoint,
    PriceRange,
    PricingStrategy,
    Product,
    Recommendations,
    RiskAssessment,
    Scenario,
    ScenarioResult,
    SensitivityAnalysis,
)
from .strategies import select_pricing_strategies

logger = logging.getLogger(__name__)

# Deux prix plus proches que cet écart sont considérés comme identiques
PRICE_DEDUP_DELTA = 0.01

RISK_LEVELS = ("low", "medium", "high")


def generate_unique_id() -> str:
    return "opt-" + uuid.uuid4().hex[:26]


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC à la milliseconde, suffixe `Z` (ex: 2024-01-01T12:00:00.000Z)."""
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def build_price_grid(min_price: float, max_price: float, step: float) -> List[float]:
    """
    Construit une grille uniforme de `min_price` à `max_price` (inclus).

    Les prix sont calculés comme `min + i * step` pour éviter la dérive
    d'une addition répétée. Les prix nuls ou négatifs sont exclus.
    Une borne ou un pas non fini donne une grille vide.
    """
    if not all(math.isfinite(v) for v in (min_price, max_price, step)):
        return []
    if step <= 0 or max_price < min_price:
        return []

    price_grid: List[float] = []
    i = 0
    while True:
        price = min_price + i * step
        if price > max_price + 1e-9:
            break
        if price > 0:
            price_grid.append(price)
        i += 1
    return price_grid


def resolve_price_window(
    product: Product,
    break_even_price: float,
    price_range: Optional[PriceRange] = None,
    config: Optional[OptimizerConfig] = None,
) -> Tuple[float, float, float]:
    """
    Détermine la fenêtre de prix évaluée (min, max, pas).

    Par défaut :
    - min = max(point mort, prix minimum viable)
    - max = prix actuel * 1.5
    - pas = 1
    Chaque borne peut être surchargée par la requête.
    """
    config = config or get_default_optimizer_config()
    price_range = price_range or PriceRange(step=config.default_price_step)

    step = price_range.step if price_range.step else config.default_price_step
    min_price = (
        price_range.min
        if price_range.min is not None
        else max(break_even_price, product.minimum_viable_price)
    )
    max_price = (
        price_range.max
        if price_range.max is not None
        else product.current_price * config.max_price_multiplier
    )
    return min_price, max_price, step


def evaluate_price_point(
    product: Product,
    costs: AdjustedCosts,
    price: float,
    target_margin: float,
    price_elasticity: float,
    volume_factor: float = 1.0,
    market_share_factor: Optional[float] = None,
    include_market_share: bool = True,
    margin_tolerance: float = 5.0,
) -> PricePoint:
    """
    Calcule les métriques d'un prix candidat.

    profit = revenu - (coût unitaire total * volume + coûts fixes + coûts variables * volume)
    """
    margin = calculate_margin(price, costs)
    volume = calculate_volume_projection(
        product.sales_volume_current,
        product.current_price,
        price,
        price_elasticity,
        volume_factor,
    )

    revenue = price * volume
    total_cost = (
        costs.total_unit_cost * volume
        + costs.fixed_costs
        + costs.variable_costs * volume
    )
    profit = revenue - total_cost

    market_share = (
        project_market_share(product, volume, market_share_factor)
        if include_market_share
        else None
    )

    return PricePoint(
        price=price,
        margin_percentage=margin,
        profit=profit,
        revenue=revenue,
        volume_projection=volume,
        market_share_projection=market_share,
        price_change_percentage=(price - product.current_price) / product.current_price * 100,
        is_recommended=abs(margin - target_margin) < margin_tolerance,
    )


def compare_with_competitors(
    optimal_price: float,
    competitor_prices: Optional[Sequence[float]],
) -> Optional[CompetitorComparison]:
    """
    Positionne le prix optimal par rapport à la moyenne des concurrents.

    Retourne None sans prix concurrents exploitables (liste vide ou moyenne nulle).
    """
    if not competitor_prices:
        return None

    average = sum(competitor_prices) / len(competitor_prices)
    if average <= 0:
        return None

    difference = (optimal_price - average) / average * 100

    position = "similar"
    if difference > 5:
        position = "higher"
    elif difference < -5:
        position = "lower"

    return CompetitorComparison(
        average_competitor_price=average,
        price_difference_percentage=difference,
        relative_position=position,
    )


def _escalate(current: str, level: str) -> str:
    # Le niveau de risque ne redescend jamais
    return max(current, level, key=RISK_LEVELS.index)


def assess_risk(
    product: Product,
    optimal_price: float,
    optimal_margin: float,
    break_even_price: float,
    competitor_comparison: Optional[CompetitorComparison] = None,
) -> RiskAssessment:
    """Accumule les facteurs de risque du prix optimal d'un scénario."""
    factors: List[str] = []
    level = "low"

    if optimal_price > product.current_price * 1.2:
        factors.append("Significant price increase may reduce customer retention")
        level = _escalate(level, "medium")

    if optimal_price < product.current_price * 0.8:
        factors.append("Significant price decrease may impact brand perception")
        level = _escalate(level, "medium")

    if optimal_price < break_even_price:
        factors.append("Optimal price is below break-even point")
        level = _escalate(level, "high")

    if optimal_margin < 10:
        factors.append("Low profit margin increases vulnerability to cost fluctuations")
        level = _escalate(level, "medium")

    if (
        competitor_comparison is not None
        and competitor_comparison.relative_position == "higher"
        and competitor_comparison.price_difference_percentage > 15
    ):
        factors.append("Price significantly higher than competitors may reduce market share")
        level = _escalate(level, "medium")

    return RiskAssessment(level=level, factors=factors)


def calculate_scenario_result(
    product: Product,
    scenario: Scenario,
    target_margin: float,
    strategies: Sequence[PricingStrategy],
    price_range: Optional[PriceRange] = None,
    config: Optional[OptimizerConfig] = None,
) -> ScenarioResult:
    """
    Évalue un scénario.

    Étapes :
    1. Coûts ajustés et point mort.
    2. Fenêtre de prix [min, max] et pas.
    3. Un prix candidat par stratégie (ignoré s'il sort de la fenêtre).
    4. Remplissage de la fenêtre au pas donné, sans doublon (écart < 0.01).
    5. Tri par profit décroissant, prix optimal = premier de la liste.
    6. Comparaison concurrentielle et évaluation du risque.
    """
    config = config or get_default_optimizer_config()

    costs = calculate_adjusted_costs(product, scenario)
    break_even_price = calculate_break_even_price(costs, config.break_even_amortization_volume)
    min_price, max_price, step = resolve_price_window(product, break_even_price, price_range, config)
    elasticity = resolve_price_elasticity(product, config.default_price_elasticity)

    price_points: List[PricePoint] = []

    for strategy in strategies:
        base_price = (
            calculate_price_for_margin(costs, strategy.target_margin)
            if strategy.target_margin is not None
            else product.current_price
        )
        strategic_price = base_price * strategy.price_adjustment_factor

        if strategic_price < min_price or strategic_price > max_price or strategic_price <= 0:
            continue

        price_points.append(
            evaluate_price_point(
                product,
                costs,
                strategic_price,
                target_margin,
                elasticity,
                volume_factor=strategy.volume_projection_factor or 1.0,
                market_share_factor=strategy.market_share_projection_factor,
                include_market_share=bool(strategy.market_share_projection_factor),
                margin_tolerance=config.recommendation_margin_tolerance,
            )
        )

    for price in build_price_grid(min_price, max_price, step):
        if any(abs(pp.price - price) < PRICE_DEDUP_DELTA for pp in price_points):
            continue
        price_points.append(
            evaluate_price_point(
                product,
                costs,
                price,
                target_margin,
                elasticity,
                margin_tolerance=config.recommendation_margin_tolerance,
            )
        )

    price_points.sort(key=lambda pp: pp.profit, reverse=True)

    if price_points:
        optimal_price = price_points[0].price
        optimal_margin = price_points[0].margin_percentage
    else:
        optimal_price = product.current_price
        optimal_margin = 0.0

    competitor_comparison = compare_with_competitors(optimal_price, product.competitor_prices)
    risk = assess_risk(product, optimal_price, optimal_margin, break_even_price, competitor_comparison)

    return ScenarioResult(
        scenario_name=scenario.name,
        base_costs=costs,
        price_points=price_points,
        optimal_price=optimal_price,
        optimal_margin=optimal_margin,
        break_even_price=break_even_price,
        competitor_comparison=competitor_comparison,
        risk_assessment=risk,
    )


def generate_recommendations(
    product: Product,
    scenario_results: Sequence[ScenarioResult],
    target_margin: float,
) -> Recommendations:
    """
    Synthétise une recommandation à partir du prix le plus profitable,
    tous scénarios confondus.
    """
    best_scenario: Optional[ScenarioResult] = None
    best_point: Optional[PricePoint] = None
    for scenario in scenario_results:
        for point in scenario.price_points:
            if best_point is None or point.profit > best_point.profit:
                best_point = point
                best_scenario = scenario

    if best_scenario is None or best_point is None:
        return Recommendations(
            optimal_strategy="Maintain current pricing",
            price_suggestion=product.current_price,
            expected_margin=0.0,
            expected_profit=0.0,
            expected_revenue=0.0,
            key_insights=[
                "Insufficient data to generate optimal pricing strategy",
                "Consider providing more detailed cost and market information",
            ],
        )

    insights: List[str] = []

    if best_point.price > product.current_price * 1.05:
        insights.append(
            f"Price increase of {best_point.price_change_percentage:.1f}% "
            "is recommended to optimize profitability"
        )
    elif best_point.price < product.current_price * 0.95:
        insights.append(
            f"Price decrease of {abs(best_point.price_change_percentage):.1f}% "
            "is recommended to optimize profitability"
        )
    else:
        insights.append("Current pricing is close to optimal")

    if best_point.margin_percentage < target_margin - 5:
        insights.append(
            f"Achieving target margin of {target_margin:g}% may require cost optimization"
        )
    elif best_point.margin_percentage > target_margin + 5:
        insights.append(
            f"Margin exceeds target by {best_point.margin_percentage - target_margin:.1f}%, "
            "consider competitive pricing to gain market share"
        )

    if best_point.volume_projection < product.sales_volume_current * 0.9:
        insights.append("Expected volume decrease may require operational adjustments")
    elif best_point.volume_projection > product.sales_volume_current * 1.1:
        insights.append("Prepare for increased production volume to meet projected demand")

    risk_level = best_scenario.risk_assessment.level
    if risk_level == "high":
        insights.append("High risk strategy: Consider phased implementation and close monitoring")
    elif risk_level == "medium":
        insights.append("Medium risk strategy: Monitor key performance indicators closely")

    comparison = best_scenario.competitor_comparison
    if comparison is not None:
        if comparison.relative_position == "higher":
            insights.append(
                f"Price will be {comparison.price_difference_percentage:.1f}% higher "
                "than competitors, emphasize value proposition"
            )
        elif comparison.relative_position == "lower":
            insights.append(
                f"Price will be {abs(comparison.price_difference_percentage):.1f}% lower "
                "than competitors, potential to gain market share"
            )

    optimal_strategy = "Balanced Pricing"
    if best_point.price > product.current_price * 1.1:
        optimal_strategy = "Premium Positioning"
    elif best_point.price < product.current_price * 0.9:
        optimal_strategy = "Competitive Pricing"

    return Recommendations(
        optimal_strategy=optimal_strategy,
        price_suggestion=best_point.price,
        expected_margin=best_point.margin_percentage,
        expected_profit=best_point.profit,
        expected_revenue=best_point.revenue,
        key_insights=insights,
    )


def generate_sensitivity_analysis(
    product: Product,
    config: Optional[OptimizerConfig] = None,
) -> SensitivityAnalysis:
    """
    Balaye [0.7 * prix, 1.3 * prix] en 11 points avec les coûts non ajustés.

    Indépendant des scénarios et des stratégies.
    """
    config = config or get_default_optimizer_config()
    costs = calculate_base_costs(product)
    elasticity = resolve_price_elasticity(product, config.default_price_elasticity)

    prices = np.linspace(
        product.current_price * config.sensitivity_low_ratio,
        product.current_price * config.sensitivity_high_ratio,
        config.sensitivity_points,
    )

    margin_impact: List[Dict[str, float]] = []
    volume_impact: List[Dict[str, float]] = []
    profit_impact: List[Dict[str, float]] = []

    for raw_price in prices:
        price = float(raw_price)
        margin = calculate_margin(price, costs)
        volume = calculate_volume_projection(
            product.sales_volume_current,
            product.current_price,
            price,
            elasticity,
        )
        total_cost = (
            costs.total_unit_cost * volume
            + costs.fixed_costs
            + costs.variable_costs * volume
        )
        margin_impact.append({"price": price, "margin": margin})
        volume_impact.append({"price": price, "volume": volume})
        profit_impact.append({"price": price, "profit": price * volume - total_cost})

    return SensitivityAnalysis(
        margin_impact_by_price=margin_impact,
        volume_impact_by_price=volume_impact,
        profit_impact_by_price=profit_impact,
    )


def run_optimization(
    request: OptimizationRequest,
    config: Optional[OptimizerConfig] = None,
    now: Optional[datetime] = None,
) -> OptimizationResult:
    """
    Calcul pur de l'optimisation (sans cache ni stockage).

    Le produit doit porter un identifiant : voir `optimize_pricing`.
    """
    config = config or get_default_optimizer_config()
    product = request.product
    strategies = select_pricing_strategies(request.strategies)

    scenario_results = [
        calculate_scenario_result(
            product,
            scenario,
            request.target_margin,
            strategies,
            request.price_range,
            config,
        )
        for scenario in request.scenarios
    ]

    return OptimizationResult(
        id=generate_unique_id(),
        product=product,
        target_margin=request.target_margin,
        scenarios=scenario_results,
        recommendations=generate_recommendations(product, scenario_results, request.target_margin),
        sensitivity_analysis=generate_sensitivity_analysis(product, config),
        created_at=format_timestamp(now or utc_now()),
    )


def optimize_pricing(
    request: OptimizationRequest,
    client: Optional[Any] = None,
    config: Optional[OptimizerConfig] = None,
    use_cache: bool = True,
    persist: bool = True,
) -> Dict[str, Any]:
    """
    Point d'entrée de haut niveau de l'optimiseur.

    1. Si un résultat stocké pour ce produit a moins de 24 h, il est
       retourné tel quel (aucun calcul).
    2. Sinon, le résultat est calculé puis stocké (best-effort).

    Retourne le résultat sous forme de dict JSON-sérialisable.
    Les erreurs de calcul sont propagées à l'appelant.
    """
    config = config or get_default_optimizer_config()
    product = request.product

    if use_cache and product.id:
        try:
            cached = find_recent_result(product.id, client=client)
        except Exception as e:
            logger.warning(f"Cache lookup failed for product {product.id}: {e}")
            cached = None

        if cached is not None and is_result_fresh(cached, max_age_hours=config.cache_max_age_hours):
            logger.info(f"Reusing optimization {cached.get('id')} for product {product.id}")
            return cached

    if not product.id:
        request = request.with_product(replace(product, id=generate_unique_id()))

    result = run_optimization(request, config)
    logger.info(
        f"Computed optimization {result.id} for product {result.product.id} "
        f"({len(result.scenarios)} scenarios)"
    )

    if persist:
        store_result(result, client=client)

    return result.to_dict()
