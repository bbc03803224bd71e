"""
Objet valeur pour la requête de filtrage par facettes.

La requête est immuable et passée par valeur au moteur de filtrage à chaque
évaluation. Les méthodes de transition reproduisent les actions du panneau
de filtres (sélection de catégorie, bascule de tag ou de langue, remise à zéro).
"""

from dataclasses import dataclass, field, replace
from typing import Iterable, Optional


@dataclass(frozen=True)
class FacetQuery:
    """
    État courant des filtres.

    Un champ non défini (None, ensemble vide, chaîne vide) désactive
    la clause correspondante.

    Attributs :
        category : Slug de catégorie requis
        tags : Noms de tags acceptés (au moins un doit être présent)
        language : Code langue requis (comparaison insensible à la casse)
        search : Texte libre recherché dans titre, description et tags
    """

    category: Optional[str] = None
    tags: frozenset[str] = field(default_factory=frozenset)
    language: Optional[str] = None
    search: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.tags, frozenset):
            object.__setattr__(self, "tags", frozenset(self.tags))

    @classmethod
    def build(
        cls,
        category: Optional[str] = None,
        tags: Optional[Iterable[str]] = None,
        language: Optional[str] = None,
        search: Optional[str] = None,
    ) -> "FacetQuery":
        """Construit une requête en normalisant les valeurs vides en None."""
        return cls(
            category=category or None,
            tags=frozenset(tag for tag in (tags or ()) if tag),
            language=language or None,
            search=search or None,
        )

    @property
    def is_active(self) -> bool:
        """Vrai si une facette du panneau (catégorie, tags, langue) est active."""
        return bool(self.category or self.tags or self.language)

    def with_category(self, slug: Optional[str]) -> "FacetQuery":
        """Sélectionne une catégorie (None = toutes)."""
        return replace(self, category=slug or None)

    def toggle_tag(self, name: str) -> "FacetQuery":
        """Ajoute le tag s'il est absent, le retire sinon."""
        if name in self.tags:
            return replace(self, tags=self.tags - {name})
        return replace(self, tags=self.tags | {name})

    def toggle_language(self, code: str) -> "FacetQuery":
        """Sélectionne la langue, ou la désélectionne si elle est déjà active."""
        if self.language == code:
            return replace(self, language=None)
        return replace(self, language=code)

    def with_search(self, text: Optional[str]) -> "FacetQuery":
        """Remplace le texte de recherche."""
        return replace(self, search=text or None)

    def cleared(self) -> "FacetQuery":
        """Réinitialise catégorie, tags et langue (la recherche est conservée)."""
        return FacetQuery(search=self.search)
