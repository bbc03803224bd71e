"""
Utilitaires et constantes pour Monynha Fun.

Ce module contient les constantes et fonctions utilitaires partagees.
"""

from src.utils.constants import (
    DEFAULT_LANGUAGE,
    DEFAULT_VOTES_TO_PUBLISH,
    SPECIAL_TAGS,
    SUPPORTED_LANGUAGES,
)

__all__ = [
    "DEFAULT_VOTES_TO_PUBLISH",
    "DEFAULT_LANGUAGE",
    "SUPPORTED_LANGUAGES",
    "SPECIAL_TAGS",
]
