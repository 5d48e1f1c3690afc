"""
Validation des requêtes d'optimisation.

Transforme un payload JSON (dict) en `OptimizationRequest` typée, ou lève
`RequestValidationError` avec le détail des erreurs par champ
(ex: {"product.name": ["Product name is required"]}).

Le moteur suppose ensuite des entrées valides et ne revalide pas les bornes.
"""

import logging
import math
from typing import Any, Dict, List, Optional

from .config import get_default_optimizer_config
from .schemas import OptimizationRequest, PriceRange, Product, Scenario

logger = logging.getLogger(__name__)


class RequestValidationError(ValueError):
    """Payload de requête invalide."""

    def __init__(self, details: Dict[str, List[str]]):
        self.details = details
        super().__init__("Invalid request parameters")

    def to_dict(self) -> Dict[str, Any]:
        return {"error": str(self), "details": self.details}


class _Collector:
    def __init__(self) -> None:
        self.errors: Dict[str, List[str]] = {}

    def add(self, path: str, message: str) -> None:
        self.errors.setdefault(path, []).append(message)


def _is_number(value: Any) -> bool:
    # bool est une sous-classe de int : on l'exclut explicitement.
    # json.loads accepte NaN et Infinity : seuls les nombres finis passent.
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    return math.isfinite(value)


def _number(
    data: Dict[str, Any],
    key: str,
    path: str,
    errors: _Collector,
    required: bool = True,
    positive: bool = False,
    nonnegative: bool = False,
    maximum: Optional[float] = None,
    message: Optional[str] = None,
) -> Optional[float]:
    value = data.get(key)
    if value is None:
        if required:
            errors.add(path, "Required")
        return None
    if not _is_number(value):
        errors.add(path, "Expected number")
        return None
    if positive and value <= 0:
        errors.add(path, message or "Number must be greater than 0")
    elif nonnegative and value < 0:
        errors.add(path, message or "Number must be greater than or equal to 0")
    elif maximum is not None and value > maximum:
        errors.add(path, f"Number must be less than or equal to {maximum:g}")
    return float(value)


def _string(
    data: Dict[str, Any],
    key: str,
    path: str,
    errors: _Collector,
    required: bool = True,
    message: Optional[str] = None,
) -> Optional[str]:
    value = data.get(key)
    if value is None:
        if required:
            errors.add(path, message or "Required")
        return None
    if not isinstance(value, str):
        errors.add(path, "Expected string")
        return None
    if required and not value:
        errors.add(path, message or "Required")
    return value


def _parse_product(data: Any, errors: _Collector) -> Optional[Dict[str, Any]]:
    if not isinstance(data, dict):
        errors.add("product", "Expected object")
        return None

    product = {
        "id": _string(data, "id", "product.id", errors, required=False),
        "name": _string(data, "name", "product.name", errors, message="Product name is required"),
        "sku": _string(data, "sku", "product.sku", errors, message="SKU is required"),
        "category": _string(data, "category", "product.category", errors, message="Category is required"),
        "current_price": _number(
            data, "current_price", "product.current_price", errors,
            positive=True, message="Current price must be positive",
        ),
        "sales_volume_current": _number(
            data, "sales_volume_current", "product.sales_volume_current", errors,
            positive=True, message="Current sales volume must be positive",
        ),
        "price_elasticity": _number(data, "price_elasticity", "product.price_elasticity", errors, required=False),
        "market_share_current": _number(
            data, "market_share_current", "product.market_share_current", errors,
            required=False, nonnegative=True, maximum=100,
        ),
    }

    nonnegative_fields = {
        "unit_cost": "Unit cost must be non-negative",
        "fixed_costs": "Fixed costs must be non-negative",
        "variable_costs": "Variable costs must be non-negative",
        "tariff_rate": "Tariff rate must be non-negative",
        "shipping_cost": "Shipping cost must be non-negative",
        "minimum_viable_price": "Minimum viable price must be non-negative",
    }
    for key, message in nonnegative_fields.items():
        product[key] = _number(data, key, f"product.{key}", errors, nonnegative=True, message=message)

    competitor_prices = data.get("competitor_prices")
    if competitor_prices is not None:
        if not isinstance(competitor_prices, list):
            errors.add("product.competitor_prices", "Expected array")
        else:
            for i, price in enumerate(competitor_prices):
                path = f"product.competitor_prices.{i}"
                if not _is_number(price):
                    errors.add(path, "Expected number")
                elif price < 0:
                    errors.add(path, "Number must be greater than or equal to 0")
            product["competitor_prices"] = competitor_prices

    return product


def _parse_scenarios(data: Any, errors: _Collector) -> List[Dict[str, Any]]:
    if not isinstance(data, list):
        errors.add("scenarios", "Expected array" if data is not None else "Required")
        return []
    if not data:
        errors.add("scenarios", "Array must contain at least 1 element(s)")
        return []

    scenarios = []
    for i, raw in enumerate(data):
        prefix = f"scenarios.{i}"
        if not isinstance(raw, dict):
            errors.add(prefix, "Expected object")
            continue
        scenario = {
            "name": _string(raw, "name", f"{prefix}.name", errors, message="Scenario name is required"),
        }
        for key in (
            "tariff_increase",
            "material_cost_change",
            "shipping_cost_change",
            "competitor_price_change",
            "currency_fluctuation",
            "demand_change",
            "marketing_spend_change",
        ):
            scenario[key] = _number(raw, key, f"{prefix}.{key}", errors, required=False)
        scenarios.append(scenario)
    return scenarios


def _parse_price_range(data: Any, errors: _Collector) -> Optional[PriceRange]:
    if data is None:
        return None
    if not isinstance(data, dict):
        errors.add("price_range", "Expected object")
        return None

    min_price = _number(data, "min", "price_range.min", errors, required=False)
    max_price = _number(data, "max", "price_range.max", errors, required=False)
    step = _number(data, "step", "price_range.step", errors, required=False, positive=True)
    return PriceRange(min=min_price, max=max_price, step=step if step is not None else 1.0)


def _parse_strategies(data: Any, errors: _Collector) -> Optional[List[str]]:
    if data is None:
        return None
    if not isinstance(data, list):
        errors.add("strategies", "Expected array")
        return None
    for i, name in enumerate(data):
        if not isinstance(name, str):
            errors.add(f"strategies.{i}", "Expected string")
    return list(data)


def parse_optimization_request(payload: Any) -> OptimizationRequest:
    """
    Valide un payload de requête d'optimisation.

    Règles principales :
    - produit : nom, SKU et catégorie non vides, prix actuel et volume > 0,
      coûts >= 0, part de marché dans [0, 100] ;
    - au moins un scénario, chacun nommé ;
    - marge cible dans [0, 100] (20 par défaut) ;
    - pas de la fenêtre de prix > 0 (1 par défaut).
    """
    if not isinstance(payload, dict):
        raise RequestValidationError({"": ["Expected object"]})

    errors = _Collector()

    product = _parse_product(payload.get("product"), errors)
    if payload.get("product") is None:
        errors.errors["product"] = ["Required"]

    scenarios = _parse_scenarios(payload.get("scenarios"), errors)

    target_margin = get_default_optimizer_config().default_target_margin
    if payload.get("target_margin") is not None:
        parsed = _number(payload, "target_margin", "target_margin", errors, nonnegative=True, maximum=100)
        if parsed is not None:
            target_margin = parsed

    price_range = _parse_price_range(payload.get("price_range"), errors)
    strategies = _parse_strategies(payload.get("strategies"), errors)

    if errors.errors:
        logger.info(f"Rejected optimization request: {sorted(errors.errors)}")
        raise RequestValidationError(errors.errors)

    return OptimizationRequest(
        product=Product.from_dict(product),
        scenarios=[Scenario.from_dict(s) for s in scenarios],
        target_margin=target_margin,
        price_range=price_range,
        strategies=strategies,
    )
