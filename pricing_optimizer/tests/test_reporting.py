"""
Tests unitaires pour reporting.py
"""

import sys
from pathlib import Path

import pytest

# Ajouter le répertoire parent au path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from pricing_optimizer.optimizer import run_optimization
from pricing_optimizer.reporting import (
    PRICE_POINT_COLUMNS,
    SCENARIO_COLUMNS,
    price_points_to_dataframe,
    scenarios_to_dataframe,
    sensitivity_to_dataframe,
)


@pytest.fixture
def result(optimization_request):
    return run_optimization(optimization_request).to_dict()


class TestReporting:
    """Tests des conversions en DataFrame."""

    def test_sensitivity_dataframe(self, result):
        df = sensitivity_to_dataframe(result["sensitivity_analysis"])

        assert list(df.columns) == ["price", "margin", "volume", "profit"]
        assert len(df) == 11
        assert df["price"].is_monotonic_increasing
        assert df["volume"].is_monotonic_decreasing

    def test_scenarios_dataframe(self, result):
        df = scenarios_to_dataframe(result)

        assert list(df.columns) == SCENARIO_COLUMNS
        assert list(df["scenario_name"]) == ["Base Case", "Tariff Hike 10%"]
        assert df.loc[1, "break_even_price"] > df.loc[0, "break_even_price"]
        assert df["competitor_position"].notna().all()

    def test_price_points_dataframe(self, result):
        df = price_points_to_dataframe(result["scenarios"][0])

        assert list(df.columns) == PRICE_POINT_COLUMNS
        assert len(df) == len(result["scenarios"][0]["price_points"])
        assert df["profit"].is_monotonic_decreasing

    def test_empty_result(self):
        assert scenarios_to_dataframe({}).empty
        assert sensitivity_to_dataframe({}).empty
