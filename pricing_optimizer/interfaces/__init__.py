"""
Sous-package `interfaces` de l'optimiseur de prix.

Responsabilités :
- isoler le moteur des systèmes externes (Supabase/PostgreSQL),
- centraliser la lecture du cache et les écritures best-effort,
- faciliter le test (en permettant le mocking de cette couche).
"""
