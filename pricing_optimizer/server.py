"""
Serveur Python persistant pour l'optimiseur de prix.

Ce script attend les requêtes via stdin et répond via stdout.
Il est conçu pour être robuste : si une requête plante, le serveur loggue
l'erreur mais ne s'arrête pas.

Communication :
- Entrée : JSON ligne par ligne sur stdin
- Sortie : JSON ligne par ligne sur stdout, `{"status": <code HTTP>, "body": {...}}`
- Logs : stderr
"""

import json
import logging
import os
import sys
from typing import Any, Dict, Optional, Tuple

from .interfaces.data_access import log_optimization_history
from .optimizer import optimize_pricing
from .settings import configure_logging
from .validation import RequestValidationError, parse_optimization_request

logger = logging.getLogger(__name__)

AUTH_REQUIRED_ERROR = "Authentication required"
INTERNAL_ERROR = "An error occurred during price optimization"


def handle_optimization_request(
    data: Dict[str, Any],
    client: Optional[Any] = None,
) -> Tuple[int, Dict[str, Any]]:
    """
    Traite une requête d'optimisation unique.

    Format attendu :
    {
        "user_id": "uuid",          # utilisateur authentifié (requis)
        "request": {                # corps de la requête d'optimisation
            "product": {...},
            "target_margin": 20,
            "scenarios": [{"name": "baseline"}],
            "price_range": {"min": 80, "max": 120, "step": 5},  # optionnel
            "strategies": ["Cost Plus"]                          # optionnel
        }
    }

    Retourne (code HTTP, corps JSON) :
    - 401 si l'utilisateur n'est pas authentifié,
    - 400 si la requête est invalide (avec le détail par champ),
    - 500 pour toute erreur inattendue,
    - 200 avec le résultat d'optimisation sinon.
    """
    try:
        user_id = data.get("user_id")
        if not user_id:
            return 401, {"error": AUTH_REQUIRED_ERROR}

        try:
            request = parse_optimization_request(data.get("request"))
        except RequestValidationError as e:
            return 400, e.to_dict()

        result = optimize_pricing(request, client=client)

        log_optimization_history(user_id, request, result["id"], client=client)

        return 200, result

    except Exception as e:
        logger.error(f"Pricing optimizer error: {e}", exc_info=True)
        return 500, {"error": INTERNAL_ERROR}


def process_line(line: str, client: Optional[Any] = None) -> Dict[str, Any]:
    """Parse une ligne JSON et construit l'enveloppe de réponse."""
    try:
        data = json.loads(line)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON request line: {e}")
        return {"status": 500, "body": {"error": INTERNAL_ERROR}}

    if not isinstance(data, dict):
        return {"status": 400, "body": {"error": "Invalid request parameters", "details": {"": ["Expected object"]}}}

    status, body = handle_optimization_request(data, client=client)
    return {"status": status, "body": body}


def main() -> None:
    configure_logging()
    logger.info(f"Pricing optimizer service started (PID: {os.getpid()})")

    # Boucle infinie de lecture sur stdin
    while True:
        try:
            line = sys.stdin.readline()
            if not line:
                break  # Fin du flux (le processus parent a fermé stdin)

            line = line.strip()
            if not line:
                continue

            response = process_line(line)
            sys.stdout.write(json.dumps(response) + "\n")
            sys.stdout.flush()

        except KeyboardInterrupt:
            break
        except Exception as global_error:
            logger.critical(f"Critical error in main loop: {global_error}", exc_info=True)


if __name__ == "__main__":
    main()
