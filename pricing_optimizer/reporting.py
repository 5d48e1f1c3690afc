"""
Mise en forme tabulaire des résultats d'optimisation.

Convertit les résultats (dicts JSON, frais ou relus depuis le cache) en
`pd.DataFrame` pour les graphiques et exports du tableau de bord.
"""

from typing import Any, Dict

import pandas as pd  # type: ignore


SCENARIO_COLUMNS = [
    "scenario_name",
    "optimal_price",
    "optimal_margin",
    "break_even_price",
    "total_unit_cost",
    "risk_level",
    "price_point_count",
    "competitor_position",
]

PRICE_POINT_COLUMNS = [
    "price",
    "margin_percentage",
    "profit",
    "revenue",
    "volume_projection",
    "market_share_projection",
    "price_change_percentage",
    "is_recommended",
]


def sensitivity_to_dataframe(analysis: Dict[str, Any]) -> pd.DataFrame:
    """
    Fusionne les trois séries de sensibilité sur la colonne `price`.

    Colonnes : price, margin, volume, profit.
    """
    margin_df = pd.DataFrame(analysis.get("margin_impact_by_price", []), columns=["price", "margin"])
    volume_df = pd.DataFrame(analysis.get("volume_impact_by_price", []), columns=["price", "volume"])
    profit_df = pd.DataFrame(analysis.get("profit_impact_by_price", []), columns=["price", "profit"])

    # Les trois séries partagent la même grille de prix, dans le même ordre
    df = margin_df.copy()
    df["volume"] = volume_df["volume"]
    df["profit"] = profit_df["profit"]
    return df


def scenarios_to_dataframe(result: Dict[str, Any]) -> pd.DataFrame:
    """Une ligne par scénario évalué."""
    rows = []
    for scenario in result.get("scenarios", []):
        comparison = scenario.get("competitor_comparison") or {}
        rows.append(
            {
                "scenario_name": scenario.get("scenario_name"),
                "optimal_price": scenario.get("optimal_price"),
                "optimal_margin": scenario.get("optimal_margin"),
                "break_even_price": scenario.get("break_even_price"),
                "total_unit_cost": (scenario.get("base_costs") or {}).get("total_unit_cost"),
                "risk_level": (scenario.get("risk_assessment") or {}).get("level"),
                "price_point_count": len(scenario.get("price_points", [])),
                "competitor_position": comparison.get("relative_position"),
            }
        )
    return pd.DataFrame(rows, columns=SCENARIO_COLUMNS)


def price_points_to_dataframe(scenario: Dict[str, Any]) -> pd.DataFrame:
    """Prix évalués d'un scénario, dans l'ordre (profit décroissant)."""
    return pd.DataFrame(scenario.get("price_points", []), columns=PRICE_POINT_COLUMNS)
