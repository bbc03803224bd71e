"""
Fonctions utilitaires partagees dans le projet Monynha Fun.

Ce module centralise les conversions de lignes brutes du store vers les
entites du domaine :
- parse_datetime : horodatage ISO 8601 (suffixe Z accepte)
- parse_video_row : ligne 'videos' avec jointures video_tags / video_categories
- parse_category_row / parse_tag_row : donnees de reference
"""

from datetime import datetime
from typing import Any, Optional

from src.core.entities.catalog import Category, Tag
from src.core.entities.video import TagRef, VideoRecord, VideoStatus
from src.utils.constants import DEFAULT_LANGUAGE, REMOTE_STORAGE_MODE


def parse_datetime(value: Any) -> Optional[datetime]:
    """Convertit un horodatage ISO 8601 en datetime (None si absent ou invalide)."""
    if value is None or isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def _joined(entry: Any, *keys: str) -> Optional[dict]:
    """Extrait l'objet imbrique d'une ligne de jointure (alias ou nom de table)."""
    if not isinstance(entry, dict):
        return None
    for key in keys:
        value = entry.get(key)
        if isinstance(value, dict):
            return value
    return None


def _parse_tag_refs(video_tags: Any) -> tuple[TagRef, ...]:
    refs = []
    for entry in video_tags or []:
        tag = _joined(entry, "tags", "tag")
        if tag and tag.get("name"):
            refs.append(
                TagRef(
                    name=tag["name"],
                    is_special=bool(tag.get("is_special")),
                    color=tag.get("color"),
                )
            )
    return tuple(refs)


def _parse_category_slugs(video_categories: Any) -> frozenset[str]:
    slugs = set()
    for entry in video_categories or []:
        category = _joined(entry, "category", "categories")
        if category and category.get("slug"):
            slugs.add(category["slug"])
    return frozenset(slugs)


def parse_video_row(row: dict[str, Any]) -> VideoRecord:
    """
    Convertit une ligne 'videos' en VideoRecord.

    Les jointures absentes (ligne issue d'un insert) donnent des ensembles vides.
    Un statut inconnu est traite comme 'pending'.
    """
    try:
        status = VideoStatus(row.get("status") or VideoStatus.PENDING.value)
    except ValueError:
        status = VideoStatus.PENDING

    return VideoRecord(
        id=str(row["id"]),
        title=row.get("title") or "",
        embed_url=row.get("embed_url") or "",
        platform=row.get("platform") or "",
        platform_id=row.get("platform_id") or "",
        language=row.get("language") or DEFAULT_LANGUAGE,
        status=status,
        votes_count=max(int(row.get("votes_count") or 0), 0),
        description=row.get("description") or None,
        submitted_by=row.get("submitted_by"),
        created_at=parse_datetime(row.get("created_at")),
        category_slugs=_parse_category_slugs(row.get("video_categories")),
        tags=_parse_tag_refs(row.get("video_tags")),
        storage_mode=row.get("storage_mode") or REMOTE_STORAGE_MODE,
    )


def parse_category_row(row: dict[str, Any]) -> Category:
    """Convertit une ligne 'categories' en Category."""
    return Category(
        id=str(row["id"]),
        slug=row["slug"],
        title_pt=row.get("title_pt") or row["slug"],
        title_en=row.get("title_en") or "",
        title_es=row.get("title_es") or "",
        title_fr=row.get("title_fr") or "",
    )


def parse_tag_row(row: dict[str, Any]) -> Tag:
    """Convertit une ligne 'tags' en Tag."""
    return Tag(
        id=str(row["id"]),
        name=row["name"],
        is_special=bool(row.get("is_special")),
        color=row.get("color"),
    )
