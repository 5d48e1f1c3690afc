"""
Optimiseur de stratégie de prix (TradeNavigatorPro).

Ce package contient :
- la configuration du moteur et de l'environnement,
- les modèles de coûts et de demande,
- le catalogue des stratégies de prix,
- la logique d'optimisation par scénario et la synthèse des recommandations,
- l'interface vers le stockage externe (Supabase) et le serveur de requêtes.
"""
