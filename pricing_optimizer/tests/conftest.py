"""
Fixtures partagées pour les tests.
"""

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Ajouter la racine du projet au path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from pricing_optimizer.schemas import OptimizationRequest, Product, Scenario


@pytest.fixture
def base_product():
    """Produit de référence (exemple de bout en bout)."""
    return Product(
        id="prod-001",
        name="Widget",
        sku="WG-001",
        category="Hardware",
        current_price=100.0,
        unit_cost=40.0,
        fixed_costs=1000.0,
        variable_costs=5.0,
        tariff_rate=5.0,
        shipping_cost=10.0,
        minimum_viable_price=50.0,
        sales_volume_current=1000.0,
    )


@pytest.fixture
def market_product():
    """Produit avec données marché (concurrents, élasticité, part de marché)."""
    return Product(
        id="prod-abc-123",
        name="Advanced Widget",
        sku="AW-001",
        category="Electronics",
        current_price=100.0,
        unit_cost=40.0,
        fixed_costs=10000.0,
        variable_costs=10.0,
        tariff_rate=5.0,
        shipping_cost=5.0,
        minimum_viable_price=60.0,
        sales_volume_current=1000.0,
        competitor_prices=[95.0, 105.0, 110.0],
        price_elasticity=-1.8,
        market_share_current=15.0,
    )


@pytest.fixture
def baseline_scenario():
    return Scenario(name="baseline")


@pytest.fixture
def request_payload():
    """Payload JSON d'une requête d'optimisation valide."""
    return {
        "product": {
            "id": "prod-abc-123",
            "name": "Advanced Widget",
            "sku": "AW-001",
            "category": "Electronics",
            "current_price": 100,
            "unit_cost": 40,
            "fixed_costs": 10000,
            "variable_costs": 10,
            "tariff_rate": 5,
            "shipping_cost": 5,
            "minimum_viable_price": 60,
            "competitor_prices": [95, 105, 110],
            "price_elasticity": -1.8,
            "sales_volume_current": 1000,
            "market_share_current": 15,
        },
        "target_margin": 30,
        "scenarios": [
            {"name": "Base Case", "tariff_increase": 0, "material_cost_change": 0},
            {"name": "Tariff Hike 10%", "tariff_increase": 10, "material_cost_change": 0},
            {"name": "Material Cost Up 5%", "tariff_increase": 0, "material_cost_change": 5},
        ],
        "price_range": {"min": 80, "max": 120, "step": 5},
        "strategies": ["Cost Plus", "Value Based"],
    }


@pytest.fixture
def optimization_request(market_product):
    return OptimizationRequest(
        product=market_product,
        scenarios=[Scenario(name="Base Case"), Scenario(name="Tariff Hike 10%", tariff_increase=10)],
        target_margin=30.0,
    )


def make_supabase_client(cached_rows=None):
    """
    Mock du client Supabase.

    `table().select().eq().order().limit().execute().data` retourne `cached_rows`.
    """
    client = MagicMock()
    query = client.table.return_value.select.return_value.eq.return_value.order.return_value.limit.return_value
    query.execute.return_value = MagicMock(data=cached_rows or [])
    return client


@pytest.fixture
def mock_supabase_client():
    """Mock du client Supabase sans résultat en cache."""
    return make_supabase_client()


@pytest.fixture
def supabase_client_factory():
    """Fabrique de mocks Supabase avec des lignes en cache."""
    return make_supabase_client
