"""
Script pour lancer l'optimiseur de prix sur une requête JSON.

Usage (depuis la racine du projet) :

    python -m scripts.optimize_pricing --request request.json
    python -m scripts.optimize_pricing --request request.json --no-store --report
    python -m scripts.optimize_pricing --request request.json --sensitivity-csv sensitivity.csv

Le résultat JSON est écrit sur stdout ; les tableaux et messages sur stderr.
"""

import argparse
import json
import logging
import sys

from pricing_optimizer.optimizer import optimize_pricing
from pricing_optimizer.reporting import scenarios_to_dataframe, sensitivity_to_dataframe
from pricing_optimizer.settings import configure_logging
from pricing_optimizer.validation import RequestValidationError, parse_optimization_request

logger = logging.getLogger(__name__)


def main() -> None:
    parser = argparse.ArgumentParser(description="Optimise le prix d'un produit pour un ensemble de scénarios.")
    parser.add_argument("--request", required=True, help="Fichier JSON de la requête d'optimisation.")
    parser.add_argument("--no-store", action="store_true", help="Ne pas lire le cache ni stocker le résultat.")
    parser.add_argument("--report", action="store_true", help="Afficher le tableau des scénarios sur stderr.")
    parser.add_argument("--sensitivity-csv", help="Chemin CSV pour exporter l'analyse de sensibilité.")

    args = parser.parse_args()
    configure_logging()

    try:
        with open(args.request, encoding="utf-8") as f:
            payload = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        print(f"❌ Erreur: Impossible de lire la requête {args.request}: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        request = parse_optimization_request(payload)
    except RequestValidationError as e:
        print(json.dumps(e.to_dict(), indent=2, ensure_ascii=False), file=sys.stderr)
        sys.exit(1)

    try:
        result = optimize_pricing(
            request,
            use_cache=not args.no_store,
            persist=not args.no_store,
        )
    except Exception as e:
        logger.error(f"Optimization failed: {e}", exc_info=True)
        sys.exit(1)

    if args.report:
        print(scenarios_to_dataframe(result).to_string(index=False), file=sys.stderr)

    if args.sensitivity_csv:
        sensitivity_to_dataframe(result.get("sensitivity_analysis", {})).to_csv(args.sensitivity_csv, index=False)
        print(f"✅ Sensibilité exportée: {args.sensitivity_csv}", file=sys.stderr)

    print(json.dumps(result, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
