"""
Configuration d'environnement de l'optimiseur de prix.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Charger .env depuis la racine du projet
project_root = Path(__file__).parent.parent
load_dotenv(dotenv_path=project_root / ".env")

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


@dataclass
class Settings:
    """Configuration globale (base de données, tables, logging)."""

    # Base de données
    supabase_url: str
    supabase_key: str

    # Tables Supabase
    optimizations_table: str = "pricing_optimizations"
    history_table: str = "user_optimization_history"

    # Logging
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Crée une instance Settings depuis les variables d'environnement."""
        return cls(
            supabase_url=os.getenv("SUPABASE_URL", ""),
            supabase_key=os.getenv("SUPABASE_SERVICE_ROLE_KEY", os.getenv("SUPABASE_KEY", "")),
            optimizations_table=os.getenv("PRICING_OPTIMIZATIONS_TABLE", "pricing_optimizations"),
            history_table=os.getenv("OPTIMIZATION_HISTORY_TABLE", "user_optimization_history"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Configure le logging racine avec le niveau défini dans les settings."""
    settings = settings or Settings.from_env()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
