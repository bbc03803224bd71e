"""
Interface port pour le store de données externe.

Le store (backend relationnel distant) assure la persistance durable,
les contraintes d'unicité et l'exécution des requêtes. Les implémentations
(adaptateurs) fournissent l'accès concret : Supabase/PostgREST via httpx,
ou SQLite local via SQLModel.

Toutes les opérations sont asynchrones : ce sont les points de suspension
autour des entrées/sorties.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence

from src.core.entities.catalog import Category, Tag
from src.core.entities.video import VideoRecord, VideoStatus
from src.core.entities.vote import Vote
from src.utils.constants import REMOTE_STORAGE_MODE


@dataclass(frozen=True)
class NewVideo:
    """
    Ligne vidéo à insérer lors d'une soumission.

    Attributs :
        title : Titre saisi
        embed_url : Référence embed issue de la normalisation de l'URL
        platform : Plateforme dérivée
        platform_id : Identifiant sur la plateforme
        language : Code langue principal
        submitted_by : Utilisateur auteur de la soumission
        description : Description optionnelle
        status : Toujours "pending" à la création
        storage_mode : Toujours "remote" (lien externe)
    """

    title: str
    embed_url: str
    platform: str
    platform_id: str
    language: str
    submitted_by: str
    description: Optional[str] = None
    status: VideoStatus = VideoStatus.PENDING
    storage_mode: str = REMOTE_STORAGE_MODE


class IVideoStore(ABC):
    """
    Interface du store externe.

    Les erreurs réseau ou backend sont levées sous forme de StoreError ;
    un vote en double est levé sous forme de DuplicateVoteError.
    """

    @abstractmethod
    async def fetch_videos(self, status: VideoStatus) -> list[VideoRecord]:
        """
        Récupère les vidéos d'un statut avec leurs catégories et tags.

        Les vidéos approuvées sont triées par date de création décroissante,
        les vidéos en attente par nombre de votes décroissant.
        """
        ...

    @abstractmethod
    async def fetch_categories(self) -> list[Category]:
        """Récupère les catégories, triées par titre portugais."""
        ...

    @abstractmethod
    async def fetch_tags(self) -> list[Tag]:
        """Récupère les tags de référence."""
        ...

    @abstractmethod
    async def fetch_user_votes(
        self, user_id: str, video_ids: Sequence[str]
    ) -> set[str]:
        """
        Récupère les vidéos votées par un utilisateur parmi une sélection.

        Args :
            user_id : Utilisateur courant
            video_ids : Vidéos visibles concernées (en attente)

        Retourne :
            Sous-ensemble de video_ids déjà voté par l'utilisateur
        """
        ...

    @abstractmethod
    async def insert_vote(self, vote: Vote) -> None:
        """Enregistre un vote. Lève DuplicateVoteError si déjà présent."""
        ...

    @abstractmethod
    async def insert_video(self, video: NewVideo) -> VideoRecord:
        """Insère une vidéo et retourne l'enregistrement créé par le store."""
        ...

    @abstractmethod
    async def link_categories(self, video_id: str, category_ids: Sequence[str]) -> None:
        """Crée les associations video_categories."""
        ...

    @abstractmethod
    async def link_tags(self, video_id: str, tag_ids: Sequence[str]) -> None:
        """Crée les associations video_tags."""
        ...
