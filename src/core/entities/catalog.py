"""
Données de référence du catalogue.

Catégories et tags chargés depuis le store externe, en lecture seule.
"""

from dataclasses import dataclass
from typing import Optional

from src.core.entities.video import TagRef
from src.utils.constants import DEFAULT_LANGUAGE


@dataclass(frozen=True)
class Category:
    """
    Catégorie de vidéos avec titres localisés.

    Attributs :
        id : Identifiant dans le store
        slug : Clé machine stable (utilisée par le filtre)
        title_pt : Titre portugais (langue de référence)
        title_en : Titre anglais
        title_es : Titre espagnol
        title_fr : Titre français
    """

    id: str
    slug: str
    title_pt: str
    title_en: str = ""
    title_es: str = ""
    title_fr: str = ""

    def title_for(self, language: Optional[str] = None) -> str:
        """
        Retourne le titre dans la langue demandée.

        Retombe sur le titre portugais si la langue est inconnue
        ou si la traduction est vide.
        """
        code = (language or DEFAULT_LANGUAGE).lower()
        title = getattr(self, f"title_{code}", "") if code.isalpha() else ""
        return title or self.title_pt


@dataclass(frozen=True)
class Tag:
    """
    Tag de référence.

    Attributs :
        id : Identifiant dans le store
        name : Nom (clé d'affichage et de filtrage)
        is_special : Tag promotionnel mis en avant
        color : Couleur optionnelle
    """

    id: str
    name: str
    is_special: bool = False
    color: Optional[str] = None

    def as_ref(self) -> TagRef:
        """Convertit en TagRef attachable à une vidéo."""
        return TagRef(name=self.name, is_special=self.is_special, color=self.color)
