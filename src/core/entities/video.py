"""
Entités vidéo.

Représentation normalisée en mémoire d'une vidéo soumise par la communauté,
avec ses catégories, ses tags et son état de vote.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Optional

from src.utils.constants import BISCOITO_TAG, DEFAULT_LANGUAGE, REMOTE_STORAGE_MODE


class VideoStatus(Enum):
    """Statut de publication d'une vidéo."""

    PENDING = "pending"
    APPROVED = "approved"


@dataclass(frozen=True)
class TagRef:
    """
    Tag attaché à une vidéo.

    Attributs :
        name : Nom du tag (clé d'affichage et de filtrage)
        is_special : Tag promotionnel/thématique mis en avant
        color : Indication de couleur optionnelle
    """

    name: str
    is_special: bool = False
    color: Optional[str] = None


@dataclass(frozen=True)
class VideoRecord:
    """
    Une vidéo et son état de publication.

    Le record est immuable : les mises à jour (vote optimiste, approbation)
    produisent une nouvelle instance, ce qui permet au moteur de filtrage de
    travailler sans jamais modifier ses entrées.

    Le statut ne passe que de PENDING à APPROVED, jamais l'inverse.

    Attributs :
        id : Identifiant opaque attribué par le store
        title : Titre de la vidéo
        embed_url : Référence lisible par le lecteur (URL embed canonique ou lien brut)
        platform : Plateforme dérivée de l'URL soumise ("youtube", hostname ou "external")
        platform_id : Identifiant de la vidéo sur la plateforme
        language : Code langue (pt, en, es, fr)
        status : Statut de publication
        votes_count : Nombre de votes reçus (entier >= 0)
        description : Description optionnelle
        submitted_by : Identifiant de l'utilisateur ayant soumis la vidéo
        created_at : Date de création côté store
        category_slugs : Ensemble des slugs de catégorie
        tags : Tags attachés (ordre sans importance)
        storage_mode : Mode de stockage ("remote" pour un lien externe)
    """

    id: str
    title: str
    embed_url: str
    platform: str
    platform_id: str = ""
    language: str = DEFAULT_LANGUAGE
    status: VideoStatus = VideoStatus.PENDING
    votes_count: int = 0
    description: Optional[str] = None
    submitted_by: Optional[str] = None
    created_at: Optional[datetime] = None
    category_slugs: frozenset[str] = field(default_factory=frozenset)
    tags: tuple[TagRef, ...] = ()
    storage_mode: str = REMOTE_STORAGE_MODE

    def __post_init__(self) -> None:
        if self.votes_count < 0:
            raise ValueError(f"votes_count negatif pour la video {self.id}")
        # Accepte des iterables quelconques a la construction
        if not isinstance(self.category_slugs, frozenset):
            object.__setattr__(self, "category_slugs", frozenset(self.category_slugs))
        if not isinstance(self.tags, tuple):
            object.__setattr__(self, "tags", tuple(self.tags))

    @property
    def is_pending(self) -> bool:
        """Vérifie si la vidéo attend encore des votes."""
        return self.status is VideoStatus.PENDING

    @property
    def tag_names(self) -> frozenset[str]:
        """Noms des tags attachés."""
        return frozenset(tag.name for tag in self.tags)

    @property
    def has_special_tag(self) -> bool:
        """Vérifie si au moins un tag spécial est attaché."""
        return any(tag.is_special for tag in self.tags)

    @property
    def is_biscoito(self) -> bool:
        """Vérifie si la vidéo porte le tag 'biscoito' (rendu mis en avant)."""
        return BISCOITO_TAG in self.tag_names

    def with_vote_added(self) -> "VideoRecord":
        """Retourne une copie avec un vote de plus (patch optimiste local)."""
        return replace(self, votes_count=self.votes_count + 1)
