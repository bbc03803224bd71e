"""
Service d'orchestration du catalogue.

CatalogService possede l'etat client : les quatre collections chargees depuis
le store (videos approuvees, videos en attente, categories, tags), le registre
de votes de l'utilisateur courant et les soumissions optimistes.

Chargement:
- Les quatre sections sont chargees en parallele (asyncio.gather) ; chacune
  porte son propre etat de chargement/erreur et l'echec de l'une n'affecte pas
  les autres.
- Le registre de votes attend la section des videos en attente.
- Chaque chargement porte un numero de generation ; un resultat arrivant apres
  un chargement plus recent (ou un changement d'utilisateur) est ignore.

Soumissions optimistes:
- Un record speculatif est affiche jusqu'a ce qu'un chargement du store renvoie
  le meme identifiant ; il est alors remplace, jamais duplique.

Le filtrage et l'evaluation du seuil sont des fonctions pures appelees sur
l'etat courant, sans effet de bord.
"""

import asyncio
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Awaitable, Callable, Iterable, Optional

from loguru import logger

from src.core.entities.catalog import Category, Tag
from src.core.entities.video import VideoRecord, VideoStatus
from src.core.errors import InvalidSubmissionError, StoreError
from src.core.ports.store import IVideoStore
from src.core.value_objects.facet_query import FacetQuery
from src.core.value_objects.vote_progress import VoteProgress
from src.services.submission import SubmittedVideo, build_speculative_record
from src.services.video_filter import filter_videos
from src.services.vote_ledger import VoteLedger, VoteOutcome
from src.services.vote_threshold import VoteThresholdEvaluator
from src.utils.constants import SPECIAL_TAGS


class Section(Enum):
    """Sections chargees independamment depuis le store."""

    APPROVED = "approved"
    PENDING = "pending"
    CATEGORIES = "categories"
    TAGS = "tags"


@dataclass(frozen=True)
class SectionState:
    """
    Etat d'une section.

    Attributs :
        items : Derniers elements charges avec succes
        loading : Chargement en cours
        error : Message de la derniere erreur (None si le dernier chargement a reussi)
        loaded : Au moins un chargement a reussi
    """

    items: tuple[Any, ...] = ()
    loading: bool = False
    error: Optional[str] = None
    loaded: bool = False


@dataclass(frozen=True)
class PendingView:
    """Video en attente avec sa progression et l'etat de vote de l'utilisateur."""

    video: VideoRecord
    progress: VoteProgress
    has_voted: bool = False


@dataclass(frozen=True)
class CatalogSnapshot:
    """Copie immuable de l'etat du catalogue."""

    sections: dict[Section, SectionState] = field(default_factory=dict)
    voted_ids: frozenset[str] = frozenset()
    user_id: Optional[str] = None

    def section(self, section: Section) -> SectionState:
        return self.sections.get(section, SectionState())

    @property
    def errors(self) -> dict[Section, str]:
        """Erreurs par section, pour l'affichage et la relance."""
        return {
            section: state.error
            for section, state in self.sections.items()
            if state.error is not None
        }


class CatalogService:
    """
    Orchestrateur de l'etat client.

    Example:
        catalog = CatalogService(store, VoteThresholdEvaluator(10), user_id="u1")
        await catalog.refresh()
        visible = catalog.approved_videos(FacetQuery(category="memes"))
        for view in catalog.pending_videos():
            print(view.video.title, view.progress.label)
    """

    def __init__(
        self,
        store: IVideoStore,
        evaluator: VoteThresholdEvaluator,
        user_id: Optional[str] = None,
    ) -> None:
        self._store = store
        self._evaluator = evaluator
        self._ledger = VoteLedger(store, user_id)
        self._generation = 0
        self._sections: dict[Section, SectionState] = {
            section: SectionState() for section in Section
        }
        self._speculative: dict[str, VideoRecord] = {}

    # ------------------------------------------------------------------
    # Etat
    # ------------------------------------------------------------------

    @property
    def user_id(self) -> Optional[str]:
        return self._ledger.user_id

    @property
    def ledger(self) -> VoteLedger:
        return self._ledger

    @property
    def threshold(self) -> int:
        return self._evaluator.threshold

    @property
    def generation(self) -> int:
        return self._generation

    def snapshot(self) -> CatalogSnapshot:
        return CatalogSnapshot(
            sections=dict(self._sections),
            voted_ids=self._ledger.voted_ids,
            user_id=self.user_id,
        )

    @property
    def categories(self) -> list[Category]:
        return list(self._sections[Section.CATEGORIES].items)

    @property
    def tags(self) -> list[Tag]:
        return list(self._sections[Section.TAGS].items)

    def special_tags(self) -> list[Tag]:
        """Tags speciaux proposes en filtre rapide, dans l'ordre d'affichage."""
        by_name = {tag.name: tag for tag in self.tags}
        return [
            by_name.get(name) or Tag(id=name, name=name, is_special=True)
            for name in SPECIAL_TAGS
        ]

    # ------------------------------------------------------------------
    # Chargement
    # ------------------------------------------------------------------

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    async def refresh(self) -> CatalogSnapshot:
        """
        Recharge les quatre sections en parallele, puis le registre de votes.

        Les erreurs du store sont capturees par section (jamais propagees).
        """
        self._generation += 1
        generation = self._generation
        ledger = self._ledger

        for section in Section:
            self._sections[section] = replace(self._sections[section], loading=True)

        await asyncio.gather(
            self._load_section(
                Section.APPROVED,
                generation,
                lambda: self._store.fetch_videos(VideoStatus.APPROVED),
            ),
            self._load_pending_and_votes(generation, ledger),
            self._load_section(Section.CATEGORIES, generation, self._store.fetch_categories),
            self._load_section(Section.TAGS, generation, self._store.fetch_tags),
        )
        return self.snapshot()

    async def switch_user(self, user_id: Optional[str]) -> CatalogSnapshot:
        """
        Change l'utilisateur courant et recharge.

        Les chargements en cours pour l'utilisateur precedent deviennent perimes.
        """
        if (user_id or None) == self.user_id:
            return self.snapshot()
        logger.debug(f"Changement d'utilisateur: {self.user_id} -> {user_id}")
        self._ledger = VoteLedger(self._store, user_id)
        return await self.refresh()

    async def _load_section(
        self,
        section: Section,
        generation: int,
        fetch: Callable[[], Awaitable[list[Any]]],
    ) -> bool:
        """Charge une section ; retourne True si le resultat a ete applique."""
        try:
            items = await fetch()
        except StoreError as e:
            if not self._is_current(generation):
                return False
            logger.warning(f"Echec du chargement '{section.value}': {e}")
            previous = self._sections[section]
            self._sections[section] = replace(previous, loading=False, error=str(e))
            return False

        if not self._is_current(generation):
            logger.debug(f"Resultat perime ignore: {section.value} (generation {generation})")
            return False

        if section in (Section.APPROVED, Section.PENDING):
            self._confirm_speculative(items)
        self._sections[section] = SectionState(items=tuple(items), loaded=True)
        return True

    async def _load_pending_and_votes(self, generation: int, ledger: VoteLedger) -> None:
        """Charge les videos en attente puis, sur ce perimetre, le registre de votes."""
        loaded = await self._load_section(
            Section.PENDING,
            generation,
            lambda: self._store.fetch_videos(VideoStatus.PENDING),
        )
        if not self._is_current(generation):
            return

        pending_ids = [video.id for video in self._merged(Section.PENDING)] if loaded else []
        try:
            voted = await ledger.fetch(pending_ids)
        except StoreError as e:
            logger.warning(f"Echec du chargement des votes: {e}")
            voted = frozenset()

        if self._is_current(generation) and ledger is self._ledger:
            ledger.apply(pending_ids, voted)

    # ------------------------------------------------------------------
    # Cache reconcilie (soumissions optimistes)
    # ------------------------------------------------------------------

    def _confirm_speculative(self, items: Iterable[VideoRecord]) -> None:
        """Retire les records speculatifs confirmes par le store."""
        for video in items:
            if self._speculative.pop(video.id, None) is not None:
                logger.debug(f"Soumission confirmee par le store: {video.id}")

    def _merged(self, section: Section) -> list[VideoRecord]:
        """Videos d'une section, completees par les records speculatifs."""
        items: list[VideoRecord] = list(self._sections[section].items)
        status = VideoStatus.APPROVED if section is Section.APPROVED else VideoStatus.PENDING
        known = {video.id for video in items}
        extra = [
            video
            for video in self._speculative.values()
            if video.status is status and video.id not in known
        ]
        if section is Section.PENDING:
            return sorted(items + extra, key=lambda video: video.votes_count, reverse=True)
        return extra + items

    def apply_submission(self, submitted: SubmittedVideo) -> VideoRecord:
        """
        Insere localement une soumission avant confirmation par le store.

        Returns:
            Le record speculatif (ou le record du store s'il est deja charge)
        """
        record = build_speculative_record(submitted, self.categories, self.tags)
        section = Section.APPROVED if record.status is VideoStatus.APPROVED else Section.PENDING
        for video in self._sections[section].items:
            if video.id == record.id:
                return video
        self._speculative[record.id] = record
        return record

    # ------------------------------------------------------------------
    # Vues
    # ------------------------------------------------------------------

    def approved_videos(self, query: Optional[FacetQuery] = None) -> list[VideoRecord]:
        """Videos publiees filtrees par la requete."""
        return filter_videos(self._merged(Section.APPROVED), query or FacetQuery())

    def pending_videos(self, query: Optional[FacetQuery] = None) -> list[PendingView]:
        """Videos en attente filtrees, avec progression et etat de vote."""
        videos = filter_videos(self._merged(Section.PENDING), query or FacetQuery())
        return [
            PendingView(
                video=video,
                progress=progress,
                has_voted=self._ledger.has_voted(video.id),
            )
            for video, progress in self._evaluator.annotate(videos)
        ]

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def vote(self, video_id: str) -> VoteOutcome:
        """
        Vote pour une video en attente, puis recharge le catalogue.

        Le compteur est incremente localement en attendant le rechargement.

        Raises:
            AuthenticationRequiredError: Si aucun utilisateur n'est connecte
            StoreError: Si l'insertion du vote echoue
        """
        outcome = await self._ledger.vote(video_id)
        if outcome is VoteOutcome.RECORDED:
            self._patch_vote(video_id)
            await self.refresh()
        return outcome

    def _patch_vote(self, video_id: str) -> None:
        state = self._sections[Section.PENDING]
        patched = tuple(
            video.with_vote_added() if video.id == video_id else video
            for video in state.items
        )
        self._sections[Section.PENDING] = replace(state, items=patched)
        if video_id in self._speculative:
            self._speculative[video_id] = self._speculative[video_id].with_vote_added()

    def resolve_category_ids(self, slugs: Iterable[str]) -> list[str]:
        """
        Convertit des slugs de categorie en identifiants.

        Raises:
            InvalidSubmissionError: Si un slug est inconnu
        """
        slugs = list(slugs)
        by_slug = {category.slug: category.id for category in self.categories}
        unknown = [slug for slug in slugs if slug not in by_slug]
        if unknown:
            raise InvalidSubmissionError({"categories": f"inconnue(s): {', '.join(unknown)}"})
        return [by_slug[slug] for slug in slugs]

    def resolve_tag_ids(self, names: Iterable[str]) -> list[str]:
        """
        Convertit des noms de tag en identifiants.

        Raises:
            InvalidSubmissionError: Si un tag est inconnu
        """
        names = list(names)
        by_name = {tag.name: tag.id for tag in self.tags}
        unknown = [name for name in names if name not in by_name]
        if unknown:
            raise InvalidSubmissionError({"tags": f"inconnu(s): {', '.join(unknown)}"})
        return [by_name[name] for name in names]
