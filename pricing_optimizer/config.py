"""
Configuration centrale de l'optimiseur de prix.

Ce module définit les constantes du modèle :
- marge cible et élasticité par défaut,
- fenêtre de prix évaluée (pas, multiplicateur du prix maximum),
- volume d'amortissement des coûts fixes pour le point mort,
- durée de validité d'un résultat en cache,
- bornes et taille du balayage de sensibilité.
"""

from dataclasses import dataclass


@dataclass
class OptimizerConfig:
    """
    Paramètres de haut niveau pour l'optimiseur.

    Les valeurs par défaut reproduisent le comportement historique du moteur.
    """

    # Marge cible (%) si la requête n'en précise pas
    default_target_margin: float = 20.0

    # Élasticité prix utilisée si le produit n'en fournit pas
    default_price_elasticity: float = -1.5

    # Volume sur lequel les coûts fixes sont amortis pour le point mort.
    # Constante indépendante de `sales_volume_current`.
    break_even_amortization_volume: float = 100.0

    # Prix maximum évalué = prix actuel * ce multiplicateur
    max_price_multiplier: float = 1.5

    # Pas de la grille de prix (en unité monétaire)
    default_price_step: float = 1.0

    # Un résultat stocké plus jeune que cette durée est réutilisé tel quel
    cache_max_age_hours: float = 24.0

    # Écart absolu (points de %) entre marge et marge cible pour `is_recommended`
    recommendation_margin_tolerance: float = 5.0

    # Balayage de sensibilité : [prix * low, prix * high] en N points
    sensitivity_low_ratio: float = 0.7
    sensitivity_high_ratio: float = 1.3
    sensitivity_points: int = 11


def get_default_optimizer_config() -> OptimizerConfig:
    """Retourne une instance de configuration par défaut."""
    return OptimizerConfig()
