"""
Affichage Rich du catalogue.

Tables des videos publiees, des videos en attente (avec progression),
des categories localisees et des tags.
"""

from typing import Iterable, Optional

from rich.table import Table

from src.core.entities.catalog import Category, Tag
from src.core.entities.video import VideoRecord
from src.core.value_objects.vote_progress import VoteProgress
from src.services.catalog import PendingView
from src.services.submission import thumbnail_url
from src.utils.constants import SUPPORTED_LANGUAGES


def format_tags(video: VideoRecord) -> str:
    """Tags separes par des virgules, les tags speciaux en gras."""
    parts = []
    for tag in sorted(video.tags, key=lambda t: t.name):
        parts.append(f"[bold magenta]{tag.name}[/bold magenta]" if tag.is_special else tag.name)
    return ", ".join(parts)


def format_progress(progress: VoteProgress, width: int = 10) -> str:
    """Barre de progression textuelle: '[#####-----] 5/10'."""
    filled = round(progress.progress_percent / 100 * width)
    color = "green" if progress.is_ready else "yellow"
    bar = "#" * filled + "-" * (width - filled)
    return f"[{color}]{bar}[/{color}] {progress.displayed_votes}/{progress.threshold}"


def render_videos_table(videos: Iterable[VideoRecord], show_thumbnails: bool = False) -> Table:
    """Table des videos publiees."""
    table = Table(title="Videos publicados", show_lines=False)
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Titulo", style="bold cyan")
    table.add_column("Categorias")
    table.add_column("Tags")
    table.add_column("Idioma", justify="center")
    table.add_column("Plataforma")
    if show_thumbnails:
        table.add_column("Miniatura", style="dim")

    for video in videos:
        title = f"🍪 {video.title}" if video.is_biscoito else video.title
        row = [
            video.id,
            title,
            ", ".join(sorted(video.category_slugs)),
            format_tags(video),
            video.language,
            video.platform,
        ]
        if show_thumbnails:
            row.append(thumbnail_url(video) or "-")
        table.add_row(*row)
    return table


def render_pending_table(views: Iterable[PendingView]) -> Table:
    """Table des videos en attente avec progression et etat de vote."""
    table = Table(title="Em votação")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Titulo", style="bold cyan")
    table.add_column("Tags")
    table.add_column("Votos")
    table.add_column("Estado")
    table.add_column("", justify="center")

    for view in views:
        table.add_row(
            view.video.id,
            view.video.title,
            format_tags(view.video),
            format_progress(view.progress),
            view.progress.label,
            "[green]✓[/green]" if view.has_voted else "",
        )
    return table


def render_categories_table(
    categories: Iterable[Category], language: Optional[str] = None
) -> Table:
    """Table des categories, titres dans la langue demandee."""
    table = Table(title="Categorias")
    table.add_column("Slug", style="dim")
    table.add_column("Titulo", style="bold")
    for category in categories:
        table.add_row(category.slug, category.title_for(language))
    return table


def render_tags_table(tags: Iterable[Tag]) -> Table:
    table = Table(title="Tags")
    table.add_column("Nome", style="bold")
    table.add_column("Especial", justify="center")
    table.add_column("Cor", style="dim")
    for tag in tags:
        table.add_row(tag.name, "★" if tag.is_special else "", tag.color or "")
    return table


def language_label(code: Optional[str]) -> str:
    """Libelle d'un code langue (le code lui-meme s'il est inconnu)."""
    if not code:
        return "todas"
    return SUPPORTED_LANGUAGES.get(code.lower(), code)
