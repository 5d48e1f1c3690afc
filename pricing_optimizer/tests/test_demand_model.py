"""
Tests unitaires pour models/demand_model.py
"""

import sys
from dataclasses import replace
from pathlib import Path

import pytest

# Ajouter le répertoire parent au path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from pricing_optimizer.config import get_default_optimizer_config
from pricing_optimizer.models.demand_model import (
    calculate_volume_projection,
    project_market_share,
    resolve_price_elasticity,
)


class TestVolumeProjection:
    """Tests pour calculate_volume_projection."""

    @pytest.mark.parametrize(
        "volume, price, elasticity",
        [(1000.0, 100.0, -1.5), (250.0, 19.99, -0.4), (1.0, 5000.0, -3.0), (80.0, 10.0, 0.5)],
    )
    def test_no_price_change_keeps_volume(self, volume, price, elasticity):
        assert calculate_volume_projection(volume, price, price, elasticity) == pytest.approx(volume)

    def test_price_increase_reduces_volume(self):
        """+10 % de prix avec élasticité -1.5 : -15 % de volume."""
        assert calculate_volume_projection(1000.0, 100.0, 110.0, -1.5) == pytest.approx(850.0)

    def test_price_decrease_increases_volume(self):
        assert calculate_volume_projection(1000.0, 100.0, 80.0, -1.5) == pytest.approx(1300.0)

    def test_adjustment_factor(self):
        assert calculate_volume_projection(1000.0, 100.0, 110.0, -1.5, 1.5) == pytest.approx(1275.0)

    def test_volume_is_floored_at_zero(self):
        """Doubler le prix avec élasticité -1.5 donnerait un volume négatif."""
        assert calculate_volume_projection(1000.0, 100.0, 200.0, -1.5) == 0.0


class TestElasticityAndMarketShare:
    """Tests pour resolve_price_elasticity et project_market_share."""

    def test_default_elasticity_when_absent(self, base_product):
        """La valeur par défaut vient de la configuration de l'optimiseur."""
        default = get_default_optimizer_config().default_price_elasticity

        assert resolve_price_elasticity(base_product) == default == -1.5

    def test_explicit_default_elasticity(self, base_product):
        assert resolve_price_elasticity(base_product, default=-0.8) == -0.8

    def test_product_elasticity_is_used(self, market_product):
        assert resolve_price_elasticity(market_product) == -1.8

    def test_zero_elasticity_is_explicit(self, base_product):
        product = replace(base_product, price_elasticity=0.0)

        assert resolve_price_elasticity(product) == 0.0

    def test_market_share_scales_with_volume(self, market_product):
        assert project_market_share(market_product, 1100.0) == pytest.approx(16.5)

    def test_market_share_with_strategy_factor(self, market_product):
        assert project_market_share(market_product, 1100.0, 1.1) == pytest.approx(18.15)

    def test_market_share_absent(self, base_product):
        assert project_market_share(base_product, 1100.0, 1.1) is None
