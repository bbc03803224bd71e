"""
Registre client des votes de l'utilisateur courant.

VoteLedger est un cache en lecture : il retient les videos deja votees par
l'utilisateur parmi les videos en attente visibles, pour ne pas renvoyer
un vote deja enregistre. L'autorite reste le store, dont la contrainte
d'unicite (video_id, user_id) rejette les doublons concurrents.
"""

from enum import Enum
from typing import Iterable, Optional

from loguru import logger

from src.core.entities.vote import Vote
from src.core.errors import AuthenticationRequiredError, DuplicateVoteError, StoreError
from src.core.ports.store import IVideoStore


class VoteOutcome(Enum):
    """Resultat d'une tentative de vote."""

    RECORDED = "recorded"
    ALREADY_VOTED = "already_voted"  # Bloque par le registre, aucun appel au store
    REJECTED_DUPLICATE = "rejected_duplicate"  # Refuse par la contrainte du store


class VoteLedger:
    """
    Cache des votes de l'utilisateur courant.

    Sans utilisateur ou sans video en attente, le registre est vide.

    Example:
        ledger = VoteLedger(store, user_id="u1")
        await ledger.refresh(["v1", "v2"])
        if not ledger.has_voted("v1"):
            outcome = await ledger.vote("v1")
    """

    def __init__(self, store: IVideoStore, user_id: Optional[str] = None) -> None:
        self._store = store
        self._user_id = user_id or None
        self._scope: tuple[str, ...] = ()
        self._voted: frozenset[str] = frozenset()
        # Votes confirmes pendant la session, conserves si le store tarde a les refleter
        self._recorded: set[str] = set()

    @property
    def user_id(self) -> Optional[str]:
        return self._user_id

    @property
    def scope(self) -> tuple[str, ...]:
        return self._scope

    @property
    def voted_ids(self) -> frozenset[str]:
        return self._voted

    def has_voted(self, video_id: str) -> bool:
        """Vrai si l'utilisateur a deja vote pour cette video."""
        return video_id in self._voted

    async def fetch(self, pending_ids: Iterable[str]) -> frozenset[str]:
        """
        Interroge le store sans modifier le registre.

        Retourne un ensemble vide sans appel au store si aucun utilisateur
        n'est connecte ou si aucune video n'est en attente.
        """
        scope = tuple(pending_ids)
        if not self._user_id or not scope:
            return frozenset()
        voted = await self._store.fetch_user_votes(self._user_id, scope)
        return (frozenset(voted) | self._recorded) & frozenset(scope)

    def apply(self, pending_ids: Iterable[str], voted: Iterable[str]) -> None:
        """Remplace le perimetre et les votes connus."""
        self._scope = tuple(pending_ids)
        self._voted = frozenset(voted)

    async def refresh(self, pending_ids: Optional[Iterable[str]] = None) -> frozenset[str]:
        """
        Recharge les votes de l'utilisateur depuis le store.

        Args:
            pending_ids: Nouveau perimetre de videos en attente (conserve si None)

        Returns:
            Ensemble des videos votees

        Raises:
            StoreError: Si la requete echoue (le contenu precedent est conserve)
        """
        scope = self._scope if pending_ids is None else tuple(pending_ids)
        voted = await self.fetch(scope)
        self.apply(scope, voted)
        return self._voted

    async def vote(self, video_id: str) -> VoteOutcome:
        """
        Vote pour une video en attente.

        Le vote n'est envoye que si le registre ne le connait pas deja.
        Apres un vote enregistre, le registre est rafraichi.

        Raises:
            AuthenticationRequiredError: Si aucun utilisateur n'est connecte
            StoreError: Si l'insertion echoue
        """
        if not self._user_id:
            raise AuthenticationRequiredError("vote")

        if self.has_voted(video_id):
            logger.debug(f"Vote ignore, deja enregistre: {video_id}")
            return VoteOutcome.ALREADY_VOTED

        try:
            await self._store.insert_vote(Vote(user_id=self._user_id, video_id=video_id))
        except DuplicateVoteError:
            logger.info(f"Vote en double refuse par le store: {video_id}")
            return VoteOutcome.REJECTED_DUPLICATE

        logger.info(f"Vote enregistre: {video_id}")
        scope = self._scope if video_id in self._scope else (*self._scope, video_id)
        self._recorded.add(video_id)
        self.apply(scope, self._voted | {video_id})
        try:
            await self.refresh()
        except StoreError as e:
            logger.warning(f"Rafraichissement des votes impossible: {e}")
        return VoteOutcome.RECORDED
