"""Sous-package CLI commands - re-exporte les commandes publiques."""

from src.adapters.cli.commands.browse_commands import (
    categories,
    pending,
    tags,
    videos,
)
from src.adapters.cli.commands.submit_commands import submit
from src.adapters.cli.commands.vote_commands import vote

__all__ = [
    "videos",
    "pending",
    "categories",
    "tags",
    "vote",
    "submit",
]
