"""
Implementation SQLModel du store video (mode local / hors ligne).

Reproduit le comportement du store distant :
- contrainte d'unicite (video_id, user_id) sur les votes
- incrementation de votes_count a chaque vote
- promotion pending -> approved quand le seuil de votes est atteint
- refus des votes sur une video deja publiee

Les operations SQL sont synchrones ; elles sont executees dans un
executor pour ne pas bloquer la boucle d'evenements.
"""

import asyncio
from collections import defaultdict
from functools import partial
from typing import Callable, Optional, Sequence, TypeVar

from loguru import logger
from sqlalchemy import Engine, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, col, select

from src.core.entities.catalog import Category, Tag
from src.core.entities.video import TagRef, VideoRecord, VideoStatus
from src.core.entities.vote import Vote
from src.core.errors import DuplicateVoteError, StoreError
from src.core.ports.store import IVideoStore, NewVideo
from src.infrastructure.persistence.models import (
    CategoryModel,
    SuggestionModel,
    TagModel,
    VideoCategoryModel,
    VideoModel,
    VideoTagModel,
)
from src.utils.constants import DEFAULT_CATEGORIES, DEFAULT_VOTES_TO_PUBLISH, SPECIAL_TAGS

T = TypeVar("T")


class SQLModelStore(IVideoStore):
    """
    Store local SQLite.

    Chaque operation ouvre sa propre session : le store peut etre
    appele en parallele depuis plusieurs taches.
    """

    def __init__(self, engine: Engine, votes_to_publish: int = DEFAULT_VOTES_TO_PUBLISH) -> None:
        """
        Initialise le store.

        Args :
            engine : Engine SQLAlchemy avec tables creees (init_db)
            votes_to_publish : Seuil de promotion, identique a celui du client
        """
        self._engine = engine
        self._votes_to_publish = votes_to_publish

    @property
    def votes_to_publish(self) -> int:
        return self._votes_to_publish

    async def _run(self, operation: str, func: Callable[..., T], *args) -> T:
        """Execute une operation synchrone dans l'executor par defaut."""
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, partial(func, *args))
        except StoreError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"{operation}: {e}")
            raise StoreError(f"Erreur SQL: {e}", operation=operation) from e
        except (TypeError, ValueError) as e:
            logger.error(f"{operation}: donnees invalides - {e!r}")
            raise StoreError("Donnees du store invalides", operation=operation) from e

    # Conversion modele -> entite

    def _to_entity(
        self,
        model: VideoModel,
        slugs: Optional[set[str]] = None,
        tags: Optional[list[TagRef]] = None,
    ) -> VideoRecord:
        """
        Convertit un modele DB en entite domaine.

        Args :
            model : Le modele VideoModel
            slugs : Slugs des categories associees
            tags : Tags associes

        Retourne :
            Le VideoRecord correspondant
        """
        return VideoRecord(
            id=model.id,
            title=model.title,
            embed_url=model.embed_url,
            platform=model.platform,
            platform_id=model.platform_id or "",
            language=model.language,
            status=VideoStatus(model.status),
            votes_count=model.votes_count,
            description=model.description,
            submitted_by=model.submitted_by,
            created_at=model.created_at,
            category_slugs=frozenset(slugs or ()),
            tags=tuple(tags or ()),
            storage_mode=model.storage_mode,
        )

    @staticmethod
    def _to_category(model: CategoryModel) -> Category:
        return Category(
            id=model.id,
            slug=model.slug,
            title_pt=model.title_pt,
            title_en=model.title_en,
            title_es=model.title_es,
            title_fr=model.title_fr,
        )

    @staticmethod
    def _to_tag(model: TagModel) -> Tag:
        return Tag(id=model.id, name=model.name, is_special=model.is_special, color=model.color)

    # Lectures

    def _fetch_videos(self, status: VideoStatus) -> list[VideoRecord]:
        order = (
            col(VideoModel.created_at).desc()
            if status is VideoStatus.APPROVED
            else col(VideoModel.votes_count).desc()
        )
        with Session(self._engine) as session:
            models = session.exec(
                select(VideoModel).where(VideoModel.status == status.value).order_by(order)
            ).all()
            ids = [m.id for m in models]
            if not ids:
                return []

            slugs: dict[str, set[str]] = defaultdict(set)
            for video_id, slug in session.exec(
                select(VideoCategoryModel.video_id, CategoryModel.slug)
                .join(CategoryModel, CategoryModel.id == VideoCategoryModel.category_id)
                .where(col(VideoCategoryModel.video_id).in_(ids))
            ).all():
                slugs[video_id].add(slug)

            tags: dict[str, list[TagRef]] = defaultdict(list)
            for video_id, tag in session.exec(
                select(VideoTagModel.video_id, TagModel)
                .join(TagModel, TagModel.id == VideoTagModel.tag_id)
                .where(col(VideoTagModel.video_id).in_(ids))
            ).all():
                tags[video_id].append(self._to_tag(tag).as_ref())

            return [self._to_entity(m, slugs.get(m.id), tags.get(m.id)) for m in models]

    async def fetch_videos(self, status: VideoStatus) -> list[VideoRecord]:
        return await self._run("fetch_videos", self._fetch_videos, status)

    def _fetch_categories(self) -> list[Category]:
        with Session(self._engine) as session:
            models = session.exec(select(CategoryModel).order_by(CategoryModel.title_pt)).all()
            return [self._to_category(m) for m in models]

    async def fetch_categories(self) -> list[Category]:
        return await self._run("fetch_categories", self._fetch_categories)

    def _fetch_tags(self) -> list[Tag]:
        with Session(self._engine) as session:
            models = session.exec(select(TagModel).order_by(TagModel.name)).all()
            return [self._to_tag(m) for m in models]

    async def fetch_tags(self) -> list[Tag]:
        return await self._run("fetch_tags", self._fetch_tags)

    def _fetch_user_votes(self, user_id: str, video_ids: Sequence[str]) -> set[str]:
        with Session(self._engine) as session:
            rows = session.exec(
                select(SuggestionModel.video_id).where(
                    SuggestionModel.user_id == user_id,
                    col(SuggestionModel.video_id).in_(list(video_ids)),
                )
            ).all()
            return set(rows)

    async def fetch_user_votes(self, user_id: str, video_ids: Sequence[str]) -> set[str]:
        if not video_ids:
            return set()
        return await self._run("fetch_user_votes", self._fetch_user_votes, user_id, video_ids)

    # Ecritures

    def _insert_vote(self, vote: Vote) -> None:
        """
        Enregistre un vote, incremente le compteur et promeut au seuil.

        Le compteur et le statut sont mis a jour par des UPDATE SQL dans la
        transaction du vote : deux votes concurrents sont tous deux comptes.
        """
        with Session(self._engine) as session:
            video = session.get(VideoModel, vote.video_id)
            if video is None:
                raise StoreError(f"Video introuvable: {vote.video_id}", operation="insert_vote")
            if video.status != VideoStatus.PENDING.value:
                raise StoreError(f"Video deja publiee: {vote.video_id}", operation="insert_vote")

            session.add(
                SuggestionModel(video_id=vote.video_id, user_id=vote.user_id, vote=vote.weight)
            )
            try:
                session.flush()
            except IntegrityError as e:
                session.rollback()
                raise DuplicateVoteError(vote.video_id, vote.user_id) from e

            session.exec(
                update(VideoModel)
                .where(col(VideoModel.id) == vote.video_id)
                .values(votes_count=VideoModel.votes_count + vote.weight)
            )
            promoted = session.exec(
                update(VideoModel)
                .where(
                    col(VideoModel.id) == vote.video_id,
                    col(VideoModel.status) == VideoStatus.PENDING.value,
                    col(VideoModel.votes_count) >= self._votes_to_publish,
                )
                .values(status=VideoStatus.APPROVED.value)
            )
            session.commit()

        if promoted.rowcount:
            logger.info(f"Video publiee: {vote.video_id} (seuil {self._votes_to_publish} votes)")

    async def insert_vote(self, vote: Vote) -> None:
        await self._run("insert_vote", self._insert_vote, vote)

    def _insert_video(self, video: NewVideo) -> VideoRecord:
        with Session(self._engine) as session:
            model = VideoModel(
                title=video.title,
                description=video.description,
                embed_url=video.embed_url,
                platform=video.platform,
                platform_id=video.platform_id,
                language=video.language,
                status=video.status.value,
                storage_mode=video.storage_mode,
                submitted_by=video.submitted_by,
            )
            session.add(model)
            session.commit()
            session.refresh(model)
            return self._to_entity(model)

    async def insert_video(self, video: NewVideo) -> VideoRecord:
        return await self._run("insert_video", self._insert_video, video)

    def _link(self, rows: list) -> None:
        with Session(self._engine) as session:
            session.add_all(rows)
            session.commit()

    async def link_categories(self, video_id: str, category_ids: Sequence[str]) -> None:
        rows = [VideoCategoryModel(video_id=video_id, category_id=cid) for cid in category_ids]
        if rows:
            await self._run("link_categories", self._link, rows)

    async def link_tags(self, video_id: str, tag_ids: Sequence[str]) -> None:
        rows = [VideoTagModel(video_id=video_id, tag_id=tid) for tid in tag_ids]
        if rows:
            await self._run("link_tags", self._link, rows)

    def seed_reference_data(self) -> tuple[int, int]:
        """
        Insere les categories et tags speciaux de reference manquants.

        Retourne :
            Nombre de categories et de tags crees
        """
        created_categories = 0
        created_tags = 0
        with Session(self._engine) as session:
            existing_slugs = set(session.exec(select(CategoryModel.slug)).all())
            for slug, (pt, en, es, fr) in DEFAULT_CATEGORIES.items():
                if slug not in existing_slugs:
                    session.add(
                        CategoryModel(slug=slug, title_pt=pt, title_en=en, title_es=es, title_fr=fr)
                    )
                    created_categories += 1

            existing_tags = set(session.exec(select(TagModel.name)).all())
            for name in SPECIAL_TAGS:
                if name not in existing_tags:
                    session.add(TagModel(name=name, is_special=True))
                    created_tags += 1
            session.commit()

        logger.info(
            f"Donnees de reference: {created_categories} categorie(s), {created_tags} tag(s) crees"
        )
        return created_categories, created_tags
