"""
Evaluateur du seuil de votes pour la publication.

Calcule, a partir du nombre de votes et du seuil configure:
- remaining = max(seuil - votes, 0)
- progress_percent = min(votes / seuil * 100, 100)
- is_ready = remaining == 0

L'evaluateur est purement indicatif : il ne modifie jamais les compteurs.
Le passage pending -> approved est applique par le store avec le meme seuil,
lu a un seul endroit (Settings.votes_to_publish).
"""

import math
from typing import Any, Iterable

from src.core.entities.video import VideoRecord
from src.core.value_objects.vote_progress import VoteProgress
from src.utils.constants import DEFAULT_VOTES_TO_PUBLISH


def parse_threshold(raw: Any) -> int:
    """
    Convertit une valeur de configuration en seuil de votes.

    Toute valeur absente, non numerique, non entiere ou non positive
    retombe sur DEFAULT_VOTES_TO_PUBLISH (10).

    Examples:
        parse_threshold("15") -> 15
        parse_threshold("abc") -> 10
        parse_threshold(0) -> 10
    """
    if raw is None or isinstance(raw, bool):
        return DEFAULT_VOTES_TO_PUBLISH
    try:
        value = float(str(raw).strip())
    except ValueError:
        return DEFAULT_VOTES_TO_PUBLISH
    if not math.isfinite(value) or value <= 0 or not value.is_integer():
        return DEFAULT_VOTES_TO_PUBLISH
    return int(value)


def evaluate_votes(votes_count: int, threshold: Any = DEFAULT_VOTES_TO_PUBLISH) -> VoteProgress:
    """
    Calcule la progression d'une video vers la publication.

    Args:
        votes_count: Nombre de votes recus (>= 0)
        threshold: Seuil configure (normalise via parse_threshold)

    Returns:
        VoteProgress avec votes restants, pourcentage borne et disponibilite

    Raises:
        ValueError: Si votes_count est negatif
    """
    if votes_count < 0:
        raise ValueError(f"votes_count doit etre >= 0 (recu: {votes_count})")

    limit = parse_threshold(threshold)
    remaining = max(limit - votes_count, 0)
    progress = min(votes_count / limit * 100, 100.0)

    return VoteProgress(
        votes_count=votes_count,
        threshold=limit,
        remaining=remaining,
        progress_percent=progress,
        is_ready=remaining == 0,
    )


class VoteThresholdEvaluator:
    """
    Evaluateur lie au seuil de l'application.

    Instancie une seule fois par le container avec Settings.votes_to_publish,
    le meme seuil que celui passe au store pour la promotion.
    """

    def __init__(self, threshold: Any = DEFAULT_VOTES_TO_PUBLISH) -> None:
        self._threshold = parse_threshold(threshold)

    @property
    def threshold(self) -> int:
        return self._threshold

    def evaluate(self, video: VideoRecord) -> VoteProgress:
        """Calcule la progression d'une video."""
        return evaluate_votes(video.votes_count, self._threshold)

    def annotate(
        self, videos: Iterable[VideoRecord]
    ) -> list[tuple[VideoRecord, VoteProgress]]:
        """Associe a chaque video sa progression, ordre conserve."""
        return [(video, self.evaluate(video)) for video in videos]
