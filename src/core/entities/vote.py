"""
Entité vote.

Un vote est unique par couple (user_id, video_id). Cette unicité est garantie
par le store externe ; le client n'en garde qu'une copie en cache.
"""

from dataclasses import dataclass

# Poids fixe d'un vote
VOTE_WEIGHT = 1


@dataclass(frozen=True)
class Vote:
    """Vote d'un utilisateur pour la publication d'une vidéo en attente."""

    user_id: str
    video_id: str
    weight: int = VOTE_WEIGHT
