"""
Catalogue statique des stratégies de prix.

Chaque stratégie est une simple ligne de paramètres numériques :
- `price_adjustment_factor` : multiplicateur appliqué au prix de base,
- `target_margin` : marge (%) qui fixe le prix de base,
- `volume_projection_factor` / `market_share_projection_factor` :
  corrections appliquées aux projections de volume et de part de marché.
"""

from typing import Iterable, List, Optional

from .schemas import PricingStrategy


PRICING_STRATEGIES = (
    PricingStrategy(
        name="Cost Plus",
        description="Simple markup over costs to achieve target margin",
        price_adjustment_factor=1.0,
        target_margin=20,
        volume_projection_factor=1.0,
        market_share_projection_factor=1.0,
        recommended_for=["Commodities", "Wholesale", "B2B"],
    ),
    PricingStrategy(
        name="Value Based",
        description="Pricing based on perceived value to customer",
        price_adjustment_factor=1.2,
        target_margin=35,
        volume_projection_factor=0.9,
        market_share_projection_factor=0.95,
        recommended_for=["Premium Products", "Unique Solutions", "Branded Goods"],
    ),
    PricingStrategy(
        name="Competitive Match",
        description="Match or slightly undercut competitor pricing",
        price_adjustment_factor=0.98,
        target_margin=15,
        volume_projection_factor=1.15,
        market_share_projection_factor=1.1,
        recommended_for=["Commoditized Markets", "High Competition", "Market Entry"],
    ),
    PricingStrategy(
        name="Penetration Pricing",
        description="Lower initial pricing to gain market share",
        price_adjustment_factor=0.85,
        target_margin=10,
        volume_projection_factor=1.5,
        market_share_projection_factor=1.4,
        recommended_for=["New Products", "Market Entry", "High Volume Products"],
    ),
    PricingStrategy(
        name="Premium Pricing",
        description="Higher pricing to signal quality and exclusivity",
        price_adjustment_factor=1.35,
        target_margin=45,
        volume_projection_factor=0.7,
        market_share_projection_factor=0.75,
        recommended_for=["Luxury Goods", "High-End Products", "Exclusive Services"],
    ),
    PricingStrategy(
        name="Skimming",
        description="High initial price that gradually reduces",
        price_adjustment_factor=1.5,
        target_margin=50,
        volume_projection_factor=0.6,
        market_share_projection_factor=0.65,
        recommended_for=["Innovative Products", "Early Adopter Markets", "Limited Competition"],
    ),
    PricingStrategy(
        name="Economy Pricing",
        description="Minimal price with focus on volume",
        price_adjustment_factor=0.8,
        target_margin=8,
        volume_projection_factor=1.7,
        market_share_projection_factor=1.5,
        recommended_for=["Basic Products", "Price Sensitive Markets", "High Volume"],
    ),
    PricingStrategy(
        name="Psychological Pricing",
        description="Prices set to create psychological effect (e.g., $9.99)",
        price_adjustment_factor=0.99,
        target_margin=25,
        volume_projection_factor=1.05,
        market_share_projection_factor=1.02,
        recommended_for=["Retail", "Consumer Products", "Impulse Purchases"],
    ),
    PricingStrategy(
        name="Bundle Pricing",
        description="Combined products at a discount",
        price_adjustment_factor=0.9,
        target_margin=30,
        volume_projection_factor=1.25,
        market_share_projection_factor=1.15,
        recommended_for=["Complementary Products", "Service Packages", "Cross-Selling"],
    ),
    PricingStrategy(
        name="Dynamic Pricing",
        description="Flexible pricing based on demand, time, and other factors",
        price_adjustment_factor=1.1,
        target_margin=32,
        volume_projection_factor=1.05,
        market_share_projection_factor=1.03,
        recommended_for=["E-commerce", "Seasonal Products", "High Demand Variation"],
    ),
)


def get_available_pricing_strategies() -> List[PricingStrategy]:
    """Retourne toutes les stratégies du catalogue, dans l'ordre du catalogue."""
    return list(PRICING_STRATEGIES)


def select_pricing_strategies(names: Optional[Iterable[str]] = None) -> List[PricingStrategy]:
    """
    Restreint le catalogue aux stratégies demandées.

    Une liste vide ou absente sélectionne tout le catalogue.
    Les noms inconnus sont ignorés.
    """
    requested = set(names or [])
    if not requested:
        return get_available_pricing_strategies()
    return [s for s in PRICING_STRATEGIES if s.name in requested]
