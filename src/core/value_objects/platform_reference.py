"""
Objets valeur pour les références de plateforme vidéo.

Une URL soumise est classée dans une union fermée :
- RecognizedPlatform : plateforme connue, identifiant extrait, embed canonique
- ExternalLink : lien générique intégré tel quel

Toute la logique spécifique à une plateforme (URL embed, miniature) est portée
par l'enum VideoPlatform, ce qui rend le traitement exhaustif.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from src.utils.constants import (
    EXTERNAL_PLATFORM,
    YOUTUBE_EMBED_URL,
    YOUTUBE_THUMBNAIL_URL,
)


class VideoPlatform(Enum):
    """Plateformes vidéo reconnues."""

    YOUTUBE = "youtube"

    @property
    def embed_template(self) -> str:
        return _EMBED_TEMPLATES[self]

    @property
    def thumbnail_template(self) -> Optional[str]:
        return _THUMBNAIL_TEMPLATES.get(self)


_EMBED_TEMPLATES = {
    VideoPlatform.YOUTUBE: YOUTUBE_EMBED_URL,
}

_THUMBNAIL_TEMPLATES = {
    VideoPlatform.YOUTUBE: YOUTUBE_THUMBNAIL_URL,
}


@dataclass(frozen=True)
class NormalizedUrl:
    """
    Résultat de la normalisation d'une URL soumise.

    Attributs :
        platform : "youtube", hostname du lien, ou "external" si illisible
        platform_id : Identifiant vidéo (ou l'URL brute pour un lien externe)
        embed_url : Référence lisible par le lecteur
    """

    platform: str
    platform_id: str
    embed_url: str


@dataclass(frozen=True)
class RecognizedPlatform:
    """Vidéo hébergée sur une plateforme reconnue."""

    platform: VideoPlatform
    video_id: str

    @property
    def embed_url(self) -> str:
        return self.platform.embed_template.format(video_id=self.video_id)

    @property
    def thumbnail_url(self) -> Optional[str]:
        template = self.platform.thumbnail_template
        return template.format(video_id=self.video_id) if template else None

    def normalized(self) -> NormalizedUrl:
        return NormalizedUrl(
            platform=self.platform.value,
            platform_id=self.video_id,
            embed_url=self.embed_url,
        )


@dataclass(frozen=True)
class ExternalLink:
    """
    Lien générique, intégré tel quel.

    Attributs :
        url : URL brute soumise
        host : Hostname du lien, None si l'URL n'a pas pu être analysée
    """

    url: str
    host: Optional[str] = None

    @property
    def thumbnail_url(self) -> Optional[str]:
        return None

    def normalized(self) -> NormalizedUrl:
        return NormalizedUrl(
            platform=self.host or EXTERNAL_PLATFORM,
            platform_id=self.url,
            embed_url=self.url,
        )


PlatformReference = Union[RecognizedPlatform, ExternalLink]
