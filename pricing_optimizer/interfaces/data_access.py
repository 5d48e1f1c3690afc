"""
Accès au stockage externe (Supabase/PostgreSQL) pour l'optimiseur de prix.

Ce module fournit une couche d'abstraction entre le moteur et la base :
- relire le dernier résultat d'optimisation d'un produit (cache 24 h),
- stocker un nouveau résultat,
- journaliser l'historique d'optimisation d'un utilisateur.

IMPORTANT :
- Les écritures sont "best-effort" : une erreur est loggée puis ignorée,
  elle ne fait jamais échouer la requête.
- Les fonctions acceptent un `client` explicite pour faciliter le mocking ;
  à défaut, le client partagé `get_supabase_client()` est utilisé.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

import pytz
from dateutil import parser as date_parser
from supabase import Client, create_client  # type: ignore

from ..schemas import OptimizationRequest, OptimizationResult
from ..settings import Settings

logger = logging.getLogger(__name__)

_supabase_client: Optional[Client] = None


def get_supabase_client() -> Client:
    """
    Retourne un client Supabase initialisé (singleton paresseux).

    Lève RuntimeError si les variables d'environnement ne sont pas configurées.
    """
    global _supabase_client

    if _supabase_client is not None:
        return _supabase_client

    settings = Settings.from_env()
    if not settings.supabase_url or not settings.supabase_key:
        raise RuntimeError(
            "Les variables d'environnement SUPABASE_URL et SUPABASE_SERVICE_ROLE_KEY/SUPABASE_KEY "
            "doivent être configurées pour utiliser l'optimiseur de prix."
        )

    _supabase_client = create_client(settings.supabase_url, settings.supabase_key)
    return _supabase_client


def utc_now() -> datetime:
    return datetime.now(pytz.UTC)


def is_result_fresh(
    record: Dict[str, Any],
    now: Optional[datetime] = None,
    max_age_hours: float = 24.0,
) -> bool:
    """
    Indique si un résultat stocké est assez récent pour être réutilisé.

    Un `created_at` absent ou illisible rend le résultat périmé.
    """
    created_at = record.get("created_at")
    if not created_at:
        return False

    try:
        created = date_parser.isoparse(str(created_at))
    except (TypeError, ValueError):
        logger.warning(f"Unparsable created_at on stored optimization: {created_at!r}")
        return False

    if created.tzinfo is None:
        created = pytz.UTC.localize(created)

    now = now or utc_now()
    return now - created < timedelta(hours=max_age_hours)


def find_recent_result(
    product_id: str,
    client: Optional[Client] = None,
    settings: Optional[Settings] = None,
) -> Optional[Dict[str, Any]]:
    """
    Récupère le résultat d'optimisation le plus récent pour un produit.

    Retourne la ligne brute (dict) ou None si aucune ligne n'existe.
    Les erreurs de lecture sont propagées à l'appelant.
    """
    client = client or get_supabase_client()
    settings = settings or Settings.from_env()

    response = (
        client.table(settings.optimizations_table)
        .select("*")
        .eq("product_id", product_id)
        .order("created_at", desc=True)
        .limit(1)
        .execute()
    )

    # Vérifier si response.data existe (compatible avec différentes versions de Supabase)
    if not hasattr(response, "data"):
        raise RuntimeError("Réponse Supabase invalide: pas d'attribut 'data'")

    rows = response.data or []
    return rows[0] if rows else None


def store_result(
    result: OptimizationResult,
    client: Optional[Client] = None,
    settings: Optional[Settings] = None,
) -> bool:
    """
    Stocke un résultat d'optimisation (best-effort).

    Retourne True si l'insertion a réussi, False sinon.
    """
    try:
        client = client or get_supabase_client()
        settings = settings or Settings.from_env()
        payload = result.to_dict()

        (
            client.table(settings.optimizations_table)
            .insert(
                {
                    "id": result.id,
                    "product_id": result.product.id,
                    "product_name": result.product.name,
                    "target_margin": result.target_margin,
                    "scenarios": payload["scenarios"],
                    "recommendations": payload["recommendations"],
                    "sensitivity_analysis": payload["sensitivity_analysis"],
                    "created_at": result.created_at,
                }
            )
            .execute()
        )
    except Exception as e:
        logger.error(f"Failed to store optimization results: {e}", exc_info=True)
        return False

    logger.info(f"Stored optimization {result.id} for product {result.product.id}")
    return True


def log_optimization_history(
    user_id: str,
    request: OptimizationRequest,
    result_id: str,
    client: Optional[Client] = None,
    settings: Optional[Settings] = None,
) -> bool:
    """
    Journalise une optimisation dans l'historique de l'utilisateur (best-effort).
    """
    try:
        client = client or get_supabase_client()
        settings = settings or Settings.from_env()

        (
            client.table(settings.history_table)
            .insert(
                {
                    "user_id": user_id,
                    "product_id": request.product.id,
                    "product_name": request.product.name,
                    "optimization_type": "pricing",
                    "target_margin": request.target_margin,
                    "scenario_count": len(request.scenarios),
                    "result_id": result_id,
                    "created_at": utc_now().isoformat(),
                }
            )
            .execute()
        )
    except Exception as e:
        logger.error(f"Failed to log optimization history: {e}", exc_info=True)
        return False

    return True
