"""
Ports (interfaces abstraites) définissant les contrats pour les adaptateurs.

Les ports sont les frontières de l'architecture hexagonale. Ils définissent
ce dont le domaine a besoin du monde extérieur sans spécifier
comment ces besoins sont satisfaits.

- IVideoStore : Accès au store externe (vidéos, catégories, tags, votes)
- NewVideo : Ligne vidéo à insérer lors d'une soumission
"""

from src.core.ports.store import IVideoStore, NewVideo

__all__ = [
    "IVideoStore",
    "NewVideo",
]
