"""
Modeles SQLModel pour le store local Monynha Fun.

Ces modeles reproduisent le schema du store distant (Supabase) pour un
fonctionnement hors ligne. Ils sont distincts des entites de domaine
(dataclass dans core/entities/) selon l'architecture hexagonale.

Tables:
- videos: Videos soumises (pending ou approved)
- categories: Categories avec titres localises
- tags: Tags, dont les tags speciaux
- video_categories / video_tags: Associations N-N
- suggestions: Votes, uniques par (video_id, user_id)
"""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


def _new_id() -> str:
    return str(uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class VideoModel(SQLModel, table=True):
    """Modele representant une video soumise."""

    __tablename__ = "videos"

    id: str = Field(default_factory=_new_id, primary_key=True)
    title: str = Field(index=True)
    description: str | None = None
    embed_url: str
    platform: str
    platform_id: str = ""
    language: str = Field(default="pt", index=True)
    status: str = Field(default="pending", index=True)  # pending, approved
    votes_count: int = Field(default=0, ge=0)
    storage_mode: str = "remote"
    submitted_by: str | None = Field(default=None, index=True)
    created_at: datetime | None = Field(default_factory=_utcnow)


class CategoryModel(SQLModel, table=True):
    """Modele representant une categorie avec ses titres localises."""

    __tablename__ = "categories"

    id: str = Field(default_factory=_new_id, primary_key=True)
    slug: str = Field(unique=True, index=True)
    title_pt: str
    title_en: str = ""
    title_es: str = ""
    title_fr: str = ""


class TagModel(SQLModel, table=True):
    """Modele representant un tag."""

    __tablename__ = "tags"

    id: str = Field(default_factory=_new_id, primary_key=True)
    name: str = Field(unique=True, index=True)
    is_special: bool = False
    color: str | None = None


class VideoCategoryModel(SQLModel, table=True):
    """Association video <-> categorie."""

    __tablename__ = "video_categories"

    video_id: str = Field(foreign_key="videos.id", primary_key=True)
    category_id: str = Field(foreign_key="categories.id", primary_key=True)


class VideoTagModel(SQLModel, table=True):
    """Association video <-> tag."""

    __tablename__ = "video_tags"

    video_id: str = Field(foreign_key="videos.id", primary_key=True)
    tag_id: str = Field(foreign_key="tags.id", primary_key=True)


class SuggestionModel(SQLModel, table=True):
    """
    Vote d'un utilisateur pour une video en attente.

    La contrainte d'unicite (video_id, user_id) garantit qu'un utilisateur
    ne compte qu'une fois par video.
    """

    __tablename__ = "suggestions"
    __table_args__ = (
        UniqueConstraint("video_id", "user_id", name="uq_suggestions_video_user"),
    )

    id: int | None = Field(default=None, primary_key=True)
    video_id: str = Field(foreign_key="videos.id", index=True)
    user_id: str = Field(index=True)
    vote: int = 1
    created_at: datetime | None = Field(default_factory=_utcnow)
