"""
Monynha Fun - Catalogue de vidéos curé par la communauté.

Les vidéos soumises passent par une phase de votation avant publication ;
le catalogue publié se filtre par catégorie, tags, langue et texte libre.

Architecture : Hexagonale (Ports et Adaptateurs)
- core/ : Couche domaine (entités, ports, objets valeur)
- services/ : Couche application (filtrage, seuil de votes, soumission, catalogue)
- adapters/ : CLI (Typer) et store Supabase (httpx)
- infrastructure/ : Store local SQLite (SQLModel)
"""

__version__ = "0.1.0"
