"""
Tests unitaires pour server.py
"""

import json
import sys
from datetime import datetime, timedelta
from pathlib import Path
from unittest.mock import patch

import pytz

# Ajouter le répertoire parent au path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from pricing_optimizer.server import handle_optimization_request, process_line


class TestHandleOptimizationRequest:
    """Tests pour handle_optimization_request."""

    def test_unauthenticated(self, request_payload, mock_supabase_client):
        status, body = handle_optimization_request({"request": request_payload}, client=mock_supabase_client)

        assert status == 401
        assert body == {"error": "Authentication required"}
        mock_supabase_client.table.assert_not_called()

    def test_invalid_request(self, request_payload, mock_supabase_client):
        request_payload["scenarios"] = []

        status, body = handle_optimization_request(
            {"user_id": "user-42", "request": request_payload}, client=mock_supabase_client
        )

        assert status == 400
        assert body["error"] == "Invalid request parameters"
        assert "scenarios" in body["details"]

    def test_successful_optimization(self, request_payload, mock_supabase_client):
        status, body = handle_optimization_request(
            {"user_id": "user-42", "request": request_payload}, client=mock_supabase_client
        )

        assert status == 200
        assert body["id"].startswith("opt-")
        assert body["target_margin"] == 30.0
        assert len(body["scenarios"]) == 3
        assert len(body["sensitivity_analysis"]["profit_impact_by_price"]) == 11

        # Un insert pour le résultat, un pour l'historique
        inserts = mock_supabase_client.table.return_value.insert.call_args_list
        assert len(inserts) == 2
        history = inserts[-1][0][0]
        assert history["user_id"] == "user-42"
        assert history["result_id"] == body["id"]
        assert history["scenario_count"] == 3

    def test_prices_respect_requested_window(self, request_payload, mock_supabase_client):
        status, body = handle_optimization_request(
            {"user_id": "user-42", "request": request_payload}, client=mock_supabase_client
        )

        assert status == 200
        for scenario in body["scenarios"]:
            assert all(80 <= pp["price"] <= 120 for pp in scenario["price_points"])

    def test_cached_result_is_returned(self, request_payload, supabase_client_factory):
        cached = {
            "id": "opt-cached",
            "product_id": "prod-abc-123",
            "created_at": (datetime.now(pytz.UTC) - timedelta(hours=2)).isoformat(),
        }
        client = supabase_client_factory([cached])

        status, body = handle_optimization_request(
            {"user_id": "user-42", "request": request_payload}, client=client
        )

        assert status == 200
        assert body == cached
        history = client.table.return_value.insert.call_args[0][0]
        assert history["result_id"] == "opt-cached"

    def test_history_failure_does_not_fail_request(self, request_payload, mock_supabase_client):
        mock_supabase_client.table.return_value.insert.return_value.execute.side_effect = Exception(
            "DB write error"
        )

        status, body = handle_optimization_request(
            {"user_id": "user-42", "request": request_payload}, client=mock_supabase_client
        )

        assert status == 200
        assert body["id"].startswith("opt-")

    @patch("pricing_optimizer.server.optimize_pricing")
    def test_unexpected_error(self, mock_optimize, request_payload, mock_supabase_client):
        mock_optimize.side_effect = ZeroDivisionError("boom")

        status, body = handle_optimization_request(
            {"user_id": "user-42", "request": request_payload}, client=mock_supabase_client
        )

        assert status == 500
        assert body == {"error": "An error occurred during price optimization"}


class TestProcessLine:
    """Tests pour process_line."""

    def test_invalid_json(self):
        assert process_line("{not json") == {
            "status": 500,
            "body": {"error": "An error occurred during price optimization"},
        }

    def test_non_object_line(self):
        response = process_line("[1, 2, 3]")

        assert response["status"] == 400

    def test_envelope(self, request_payload, mock_supabase_client):
        line = json.dumps({"user_id": "user-42", "request": request_payload})

        response = process_line(line, client=mock_supabase_client)

        assert response["status"] == 200
        assert response["body"]["recommendations"]["optimal_strategy"] in {
            "Premium Positioning", "Competitive Pricing", "Balanced Pricing",
        }
        json.dumps(response)

    def test_non_finite_number_is_rejected(self, request_payload, mock_supabase_client):
        """NaN et Infinity du JSON produisent une 400 avec le chemin du champ."""
        line = json.dumps({"user_id": "user-42", "request": request_payload})
        line = line.replace('"price_elasticity": -1.8', '"price_elasticity": NaN')
        line = line.replace('"max": 120', '"max": Infinity')

        response = process_line(line, client=mock_supabase_client)

        assert response["status"] == 400
        assert response["body"]["details"] == {
            "product.price_elasticity": ["Expected number"],
            "price_range.max": ["Expected number"],
        }
        mock_supabase_client.table.assert_not_called()
