"""
Structures de données de l'optimiseur de prix.

Entrées (fournies par la requête) :
- `Product`, `Scenario`, `PriceRange`, `OptimizationRequest`.

Sorties (créées à chaque exécution, jamais modifiées ensuite) :
- `AdjustedCosts`, `PricePoint`, `ScenarioResult`, `Recommendations`,
  `SensitivityAnalysis`, `OptimizationResult`.

Les champs optionnels valent `None` lorsqu'ils sont absents. La sérialisation
(`to_dict`) omet les champs optionnels absents, comme le faisait l'API JSON.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, List, Optional


def _drop_none(data: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if v is not None}


@dataclass(frozen=True)
class Product:
    """Produit à optimiser (entrée immuable d'une exécution)."""

    name: str
    sku: str
    category: str
    current_price: float
    unit_cost: float
    fixed_costs: float
    variable_costs: float
    tariff_rate: float  # en %
    shipping_cost: float
    minimum_viable_price: float
    sales_volume_current: float
    id: Optional[str] = None
    competitor_prices: Optional[List[float]] = None
    price_elasticity: Optional[float] = None
    market_share_current: Optional[float] = None  # en %, [0, 100]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Product":
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        if values.get("competitor_prices") is not None:
            values["competitor_prices"] = [float(p) for p in values["competitor_prices"]]
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none(asdict(self))


@dataclass(frozen=True)
class Scenario:
    """
    Scénario "what-if" appliqué aux coûts de base du produit.

    `competitor_price_change`, `demand_change` et `marketing_spend_change`
    sont acceptés mais n'interviennent dans aucun calcul.
    """

    name: str
    tariff_increase: Optional[float] = None  # points de %
    material_cost_change: Optional[float] = None  # %
    shipping_cost_change: Optional[float] = None  # %
    competitor_price_change: Optional[float] = None
    currency_fluctuation: Optional[float] = None  # %
    demand_change: Optional[float] = None
    marketing_spend_change: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Scenario":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none(asdict(self))


@dataclass(frozen=True)
class PriceRange:
    """Surcharge de la fenêtre de prix évaluée."""

    min: Optional[float] = None
    max: Optional[float] = None
    step: float = 1.0

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none(asdict(self))


@dataclass(frozen=True)
class OptimizationRequest:
    product: Product
    scenarios: List[Scenario]
    target_margin: float = 20.0
    price_range: Optional[PriceRange] = None
    strategies: Optional[List[str]] = None

    def with_product(self, product: Product) -> "OptimizationRequest":
        return OptimizationRequest(
            product=product,
            scenarios=self.scenarios,
            target_margin=self.target_margin,
            price_range=self.price_range,
            strategies=self.strategies,
        )


@dataclass(frozen=True)
class PricingStrategy:
    """Posture de prix du catalogue statique (voir `strategies.py`)."""

    name: str
    description: str
    price_adjustment_factor: float
    target_margin: Optional[float] = None
    volume_projection_factor: Optional[float] = None
    market_share_projection_factor: Optional[float] = None
    recommended_for: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class AdjustedCosts:
    """Coûts unitaires après application d'un scénario."""

    unit_cost: float
    tariff_rate: float
    tariff_cost: float
    shipping_cost: float
    total_unit_cost: float
    fixed_costs: float
    variable_costs: float

    def to_dict(self) -> Dict[str, Any]:
        # Le taux de douane ajusté n'est pas exposé dans `base_costs`
        data = asdict(self)
        data.pop("tariff_rate")
        return data


@dataclass(frozen=True)
class PricePoint:
    price: float
    margin_percentage: float
    profit: float
    revenue: float
    volume_projection: float
    price_change_percentage: float
    is_recommended: bool
    market_share_projection: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none(asdict(self))


@dataclass(frozen=True)
class CompetitorComparison:
    average_competitor_price: float
    price_difference_percentage: float
    relative_position: str  # 'higher' | 'lower' | 'similar'

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class RiskAssessment:
    level: str  # 'low' | 'medium' | 'high'
    factors: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {"level": self.level, "factors": list(self.factors)}


@dataclass(frozen=True)
class ScenarioResult:
    scenario_name: str
    base_costs: AdjustedCosts
    price_points: List[PricePoint]
    optimal_price: float
    optimal_margin: float
    break_even_price: float
    risk_assessment: RiskAssessment
    competitor_comparison: Optional[CompetitorComparison] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "scenario_name": self.scenario_name,
            "base_costs": self.base_costs.to_dict(),
            "price_points": [pp.to_dict() for pp in self.price_points],
            "optimal_price": self.optimal_price,
            "optimal_margin": self.optimal_margin,
            "break_even_price": self.break_even_price,
            "risk_assessment": self.risk_assessment.to_dict(),
        }
        if self.competitor_comparison is not None:
            data["competitor_comparison"] = self.competitor_comparison.to_dict()
        return data


@dataclass(frozen=True)
class Recommendations:
    optimal_strategy: str
    price_suggestion: float
    expected_margin: float
    expected_profit: float
    expected_revenue: float
    key_insights: List[str]

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["key_insights"] = list(self.key_insights)
        return data


@dataclass(frozen=True)
class SensitivityAnalysis:
    margin_impact_by_price: List[Dict[str, float]]
    volume_impact_by_price: List[Dict[str, float]]
    profit_impact_by_price: List[Dict[str, float]]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class OptimizationResult:
    id: str
    product: Product
    target_margin: float
    scenarios: List[ScenarioResult]
    recommendations: Recommendations
    sensitivity_analysis: SensitivityAnalysis
    created_at: str  # ISO-8601 UTC

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "product": self.product.to_dict(),
            "target_margin": self.target_margin,
            "scenarios": [s.to_dict() for s in self.scenarios],
            "recommendations": self.recommendations.to_dict(),
            "sensitivity_analysis": self.sensitivity_analysis.to_dict(),
            "created_at": self.created_at,
        }
