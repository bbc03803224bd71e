"""
Service de soumission de videos.

Ce module fournit :
- parse_video_url / normalize_video_url : classification d'une URL arbitraire
  en plateforme reconnue ou lien externe, sans jamais lever d'exception
- SubmissionForm : validation du formulaire de soumission (pydantic)
- SubmissionService : insertion de la video et de ses associations dans le store
- build_speculative_record : record optimiste affiche avant la confirmation du store
"""

from dataclasses import dataclass
from typing import Any, Iterable, Optional
from urllib.parse import parse_qs, urlsplit

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from src.core.entities.catalog import Category, Tag
from src.core.entities.video import VideoRecord
from src.core.errors import AuthenticationRequiredError, InvalidSubmissionError
from src.core.ports.store import IVideoStore, NewVideo
from src.core.value_objects.platform_reference import (
    ExternalLink,
    NormalizedUrl,
    PlatformReference,
    RecognizedPlatform,
    VideoPlatform,
)
from src.utils.constants import (
    DEFAULT_LANGUAGE,
    YOUTUBE_CANONICAL_HOSTS,
    YOUTUBE_SHORT_HOSTS,
)


def _host_matches(host: str, domains: frozenset[str]) -> bool:
    """Vrai si host est l'un des domaines ou l'un de leurs sous-domaines."""
    return any(host == domain or host.endswith(f".{domain}") for domain in domains)


def _last_path_segment(path: str) -> str:
    segments = [segment for segment in path.split("/") if segment]
    return segments[-1] if segments else ""


def parse_video_url(raw_url: str) -> PlatformReference:
    """
    Classe une URL soumise.

    1. URL illisible (pas de schema ou d'hote) -> ExternalLink sans hote
    2. Domaine court YouTube (youtu.be) -> identifiant dans le chemin
    3. Domaine canonique YouTube -> parametre ?v=, sinon dernier segment du chemin
    4. Autre domaine -> ExternalLink avec l'hote

    Ne leve jamais d'exception.
    """
    try:
        parts = urlsplit(raw_url.strip())
        host = parts.hostname
    except ValueError:
        logger.warning(f"URL impossible a analyser: {raw_url!r}")
        return ExternalLink(url=raw_url)

    if not parts.scheme or not host:
        logger.warning(f"URL impossible a analyser: {raw_url!r}")
        return ExternalLink(url=raw_url)

    if _host_matches(host, YOUTUBE_SHORT_HOSTS):
        video_id = parts.path.lstrip("/").split("/")[0]
        if video_id:
            return RecognizedPlatform(VideoPlatform.YOUTUBE, video_id)
    elif _host_matches(host, YOUTUBE_CANONICAL_HOSTS):
        video_id = parse_qs(parts.query).get("v", [""])[0] or _last_path_segment(parts.path)
        if video_id:
            return RecognizedPlatform(VideoPlatform.YOUTUBE, video_id)

    return ExternalLink(url=raw_url, host=host)


def normalize_video_url(raw_url: str) -> NormalizedUrl:
    """Retourne (platform, platform_id, embed_url) pour une URL soumise."""
    return parse_video_url(raw_url).normalized()


def thumbnail_url(video: VideoRecord) -> Optional[str]:
    """URL de miniature derivee de la reference embed, si la plateforme en fournit."""
    return parse_video_url(video.embed_url).thumbnail_url


class SubmissionForm(BaseModel):
    """Formulaire de soumission d'une video."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=3)
    url: str
    description: Optional[str] = None
    language: str = Field(default=DEFAULT_LANGUAGE, min_length=2)
    category_ids: list[str] = Field(min_length=1)
    tag_ids: list[str] = Field(default_factory=list)

    @field_validator("url")
    @classmethod
    def check_url(cls, v: str) -> str:
        """Exige une URL absolue (schema + hote)."""
        try:
            parts = urlsplit(v)
        except ValueError as e:
            raise ValueError("URL invalide") from e
        if not parts.scheme or not parts.netloc:
            raise ValueError("URL invalide")
        return v

    @field_validator("description")
    @classmethod
    def empty_description_to_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None


def validate_submission(data: dict[str, Any]) -> SubmissionForm:
    """
    Valide les donnees brutes du formulaire.

    Raises:
        InvalidSubmissionError: Avec un message par champ invalide
    """
    try:
        return SubmissionForm.model_validate(data)
    except ValidationError as e:
        errors = {
            ".".join(str(part) for part in error["loc"]) or "form": error["msg"]
            for error in e.errors()
        }
        raise InvalidSubmissionError(errors) from e


def build_new_video(form: SubmissionForm, user_id: str) -> NewVideo:
    """Construit la ligne video a inserer a partir du formulaire."""
    normalized = normalize_video_url(form.url)
    return NewVideo(
        title=form.title,
        description=form.description,
        embed_url=normalized.embed_url,
        platform=normalized.platform,
        platform_id=normalized.platform_id,
        language=form.language,
        submitted_by=user_id,
    )


@dataclass(frozen=True)
class SubmittedVideo:
    """Video creee par le store et identifiants choisis dans le formulaire."""

    video: VideoRecord
    category_ids: tuple[str, ...] = ()
    tag_ids: tuple[str, ...] = ()


def build_speculative_record(
    submitted: SubmittedVideo,
    categories: Iterable[Category],
    tags: Iterable[Tag],
) -> VideoRecord:
    """
    Complete le record cree avec les slugs et tags resolus localement.

    Les identifiants inconnus des donnees de reference sont ignores.
    """
    slugs_by_id = {category.id: category.slug for category in categories}
    tags_by_id = {tag.id: tag for tag in tags}

    slugs = {slugs_by_id[cid] for cid in submitted.category_ids if cid in slugs_by_id}
    tag_refs = tuple(tags_by_id[tid].as_ref() for tid in submitted.tag_ids if tid in tags_by_id)

    video = submitted.video
    return VideoRecord(
        id=video.id,
        title=video.title,
        embed_url=video.embed_url,
        platform=video.platform,
        platform_id=video.platform_id,
        language=video.language,
        status=video.status,
        votes_count=video.votes_count,
        description=video.description,
        submitted_by=video.submitted_by,
        created_at=video.created_at,
        category_slugs=frozenset(slugs) | video.category_slugs,
        tags=video.tags or tag_refs,
        storage_mode=video.storage_mode,
    )


class SubmissionService:
    """
    Service de soumission.

    Insere la video (statut pending), puis ses associations categories/tags.
    Une soumission sans utilisateur est refusee avant tout appel au store.
    """

    def __init__(self, store: IVideoStore) -> None:
        self._store = store

    async def submit(self, user_id: Optional[str], form: SubmissionForm) -> SubmittedVideo:
        """
        Soumet une video pour la votation.

        Args:
            user_id: Utilisateur connecte (None si non authentifie)
            form: Formulaire valide

        Returns:
            SubmittedVideo avec le record cree et les identifiants choisis

        Raises:
            AuthenticationRequiredError: Si aucun utilisateur n'est connecte
            StoreError: Si l'insertion echoue
        """
        if not user_id:
            raise AuthenticationRequiredError("submit")

        new_video = build_new_video(form, user_id)
        video = await self._store.insert_video(new_video)
        logger.info(f"Video soumise: {video.id} ({new_video.platform})")

        if form.category_ids:
            await self._store.link_categories(video.id, form.category_ids)
        if form.tag_ids:
            await self._store.link_tags(video.id, form.tag_ids)

        return SubmittedVideo(
            video=video,
            category_ids=tuple(form.category_ids),
            tag_ids=tuple(form.tag_ids),
        )
