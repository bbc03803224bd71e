"""
Couche adaptateurs (infrastructure).

Les adaptateurs implémentent les ports définis dans core/ports/ et fournissent
des implémentations concrètes pour les systèmes externes.

Sous-packages :
- cli/ : Interface ligne de commande (Typer + Rich)
- api/ : Store distant Supabase/PostgREST (httpx)

Chaque adaptateur dépend de core/ mais core/ ne dépend jamais des adaptateurs.
"""
