"""
Objets valeur immutables representant des concepts du domaine sans identite.

Exports :
- FacetQuery : Etat des filtres (categorie, tags, langue, recherche)
- VoteProgress : Progression d'une video vers le seuil de publication
- VideoPlatform : Plateformes video reconnues
- RecognizedPlatform / ExternalLink : Union fermee des references de plateforme
- NormalizedUrl : Resultat de la normalisation d'une URL soumise
"""

from src.core.value_objects.facet_query import FacetQuery
from src.core.value_objects.platform_reference import (
    ExternalLink,
    NormalizedUrl,
    PlatformReference,
    RecognizedPlatform,
    VideoPlatform,
)
from src.core.value_objects.vote_progress import VoteProgress

__all__ = [
    "FacetQuery",
    "VoteProgress",
    "VideoPlatform",
    "RecognizedPlatform",
    "ExternalLink",
    "PlatformReference",
    "NormalizedUrl",
]
