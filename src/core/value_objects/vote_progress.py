"""
Objet valeur pour la progression des votes d'une vidéo en attente.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class VoteProgress:
    """
    Progression d'une vidéo vers le seuil de publication.

    Purement indicatif : la transition pending -> approved est appliquée
    par le store, avec le même seuil.

    Attributs :
        votes_count : Votes reçus
        threshold : Seuil de publication configuré
        remaining : Votes manquants (jamais négatif)
        progress_percent : Pourcentage atteint, borné à 100
        is_ready : Vrai quand le seuil est atteint
    """

    votes_count: int
    threshold: int
    remaining: int
    progress_percent: float
    is_ready: bool

    @property
    def displayed_votes(self) -> int:
        """Votes affichés dans le compteur 'x/seuil' (bornés au seuil)."""
        return min(self.votes_count, self.threshold)

    @property
    def label(self) -> str:
        """Libellé de progression affiché sous la vidéo."""
        if self.remaining > 0:
            plural = "" if self.remaining == 1 else "s"
            return f"{self.remaining} voto{plural} para publicar"
        return "Pronto para aprovação!"
