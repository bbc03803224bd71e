"""
Moteur de filtrage par facettes des videos.

filter_videos reduit une collection de VideoRecord selon une FacetQuery.
Toutes les clauses sont combinees en ET ; une clause dont le champ
n'est pas defini est ignoree:
- Categorie: le slug demande fait partie des categories de la video
- Tags: au moins un des tags demandes est attache a la video (OU interne)
- Langue: egalite insensible a la casse
- Texte: sous-chaine du titre, de la description ou d'un nom de tag

Le filtrage est une fonction pure: meme entree, meme sortie, ordre conserve.
"""

from typing import Iterable, Optional

from src.core.entities.video import VideoRecord
from src.core.value_objects.facet_query import FacetQuery


def fold_case(text: str) -> str:
    """
    Normalise la casse pour la comparaison.

    Utilise casefold() (pliage Unicode complet) : "Ç" et "ç" sont equivalents,
    mais les accents ne sont pas retires ("gatos" ne trouve pas "gátos").
    """
    return text.casefold()


def _normalize_search(search: Optional[str]) -> str:
    """Nettoie le texte de recherche (espaces de bord retires, casse pliee)."""
    if not search:
        return ""
    return fold_case(search.strip())


def _matches_category(video: VideoRecord, category: Optional[str]) -> bool:
    if not category:
        return True
    return category in video.category_slugs


def _matches_tags(video: VideoRecord, tags: frozenset[str]) -> bool:
    if not tags:
        return True
    return not tags.isdisjoint(video.tag_names)


def _matches_language(video: VideoRecord, language: Optional[str]) -> bool:
    if not language:
        return True
    return fold_case(video.language or "") == fold_case(language)


def _matches_search(video: VideoRecord, needle: str) -> bool:
    """
    Verifie si le texte apparait dans le titre, la description ou un tag.

    needle doit deja etre normalise via _normalize_search.
    """
    if not needle:
        return True
    if needle in fold_case(video.title or ""):
        return True
    if video.description and needle in fold_case(video.description):
        return True
    return any(needle in fold_case(tag.name) for tag in video.tags)


def matches(video: VideoRecord, query: FacetQuery) -> bool:
    """Evalue toutes les clauses de la requete pour une video."""
    return (
        _matches_category(video, query.category)
        and _matches_tags(video, query.tags)
        and _matches_language(video, query.language)
        and _matches_search(video, _normalize_search(query.search))
    )


def filter_videos(
    videos: Iterable[VideoRecord], query: FacetQuery
) -> list[VideoRecord]:
    """
    Filtre une collection de videos selon une requete par facettes.

    Args:
        videos: Videos a filtrer (non modifiees)
        query: Etat courant des filtres

    Returns:
        Nouvelle liste contenant les videos retenues, dans l'ordre d'origine
    """
    return [video for video in videos if matches(video, query)]
