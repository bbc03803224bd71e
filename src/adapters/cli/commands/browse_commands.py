"""
Commandes de consultation du catalogue: videos, pending, categories, tags.

Les filtres (--category, --tag, --lang, --search) sont combines en ET ;
plusieurs --tag sont combines en OU. --special ajoute les tags speciaux
a cette clause OU.
"""

import asyncio
from typing import Annotated, Optional

import typer

from src.adapters.cli.display import (
    language_label,
    render_categories_table,
    render_pending_table,
    render_tags_table,
    render_videos_table,
)
from src.adapters.cli.helpers import (
    build_query,
    console,
    load_catalog,
    suppress_loguru,
    with_container,
)
from src.services.catalog import CatalogService, Section

CategoryOption = Annotated[
    Optional[str], typer.Option("--category", "-c", help="Slug de categorie")
]
TagOption = Annotated[
    Optional[list[str]], typer.Option("--tag", "-t", help="Tag (repetable, OU)")
]
LanguageOption = Annotated[
    Optional[str], typer.Option("--lang", "-l", help="Code langue (pt, en, es, fr)")
]
SearchOption = Annotated[
    Optional[str], typer.Option("--search", "-s", help="Texte recherche")
]
UserOption = Annotated[
    Optional[str], typer.Option("--user", "-u", help="Identifiant utilisateur")
]
SpecialOption = Annotated[
    bool, typer.Option("--special", help="Filtre rapide: biscoito, viral, clássico")
]


def _with_special_tags(
    catalog: CatalogService, tags: Optional[list[str]], special: bool
) -> Optional[list[str]]:
    """Ajoute les tags speciaux aux tags demandes (clause OU)."""
    if not special:
        return tags
    names = [tag.name for tag in catalog.special_tags()]
    return list(dict.fromkeys([*(tags or []), *names]))


def _print_section_errors(catalog: CatalogService, *sections: Section) -> bool:
    """Affiche les erreurs de chargement ; retourne True si une section a echoue."""
    errors = catalog.snapshot().errors
    failed = False
    for section in sections:
        if section in errors:
            console.print(f"[red]Erreur de chargement ({section.value}): {errors[section]}[/red]")
            failed = True
    return failed


def videos(
    category: CategoryOption = None,
    tag: TagOption = None,
    lang: LanguageOption = None,
    search: SearchOption = None,
    thumbnails: Annotated[
        bool, typer.Option("--thumbnails", help="Afficher les URLs de miniature")
    ] = False,
    special: SpecialOption = False,
) -> None:
    """Affiche les videos publiees."""
    asyncio.run(_videos_async(category, tag, lang, search, thumbnails, special))


@with_container()
async def _videos_async(
    container,
    category: Optional[str],
    tags: Optional[list[str]],
    language: Optional[str],
    search: Optional[str],
    thumbnails: bool = False,
    special: bool = False,
) -> None:
    """Implementation async de la commande videos."""
    catalog = await load_catalog(container)

    if _print_section_errors(catalog, Section.APPROVED):
        raise typer.Exit(1)

    tags = _with_special_tags(catalog, tags, special)
    query = build_query(category, tags, language, search)
    visible = catalog.approved_videos(query)

    if not visible:
        console.print("[yellow]Aucune video ne correspond aux filtres.[/yellow]")
        return

    with suppress_loguru():
        console.print(render_videos_table(visible, show_thumbnails=thumbnails))
        console.print(
            f"\n[bold]Total: {len(visible)} video(s)[/bold] "
            f"[dim](langue: {language_label(query.language)})[/dim]"
        )


def pending(
    category: CategoryOption = None,
    tag: TagOption = None,
    lang: LanguageOption = None,
    search: SearchOption = None,
    user: UserOption = None,
    special: SpecialOption = False,
) -> None:
    """Affiche les videos en attente de votes."""
    asyncio.run(_pending_async(category, tag, lang, search, user, special))


@with_container()
async def _pending_async(
    container,
    category: Optional[str],
    tags: Optional[list[str]],
    language: Optional[str],
    search: Optional[str],
    user: Optional[str] = None,
    special: bool = False,
) -> None:
    """Implementation async de la commande pending."""
    catalog = await load_catalog(container, user)

    if _print_section_errors(catalog, Section.PENDING):
        raise typer.Exit(1)

    tags = _with_special_tags(catalog, tags, special)
    query = build_query(category, tags, language, search)
    views = catalog.pending_videos(query)
    if not views:
        console.print("[yellow]Aucune video en attente.[/yellow]")
        return

    with suppress_loguru():
        console.print(render_pending_table(views))
        console.print(
            f"\n[bold]Total: {len(views)} video(s) en attente[/bold] "
            f"[dim](seuil: {catalog.threshold} votes)[/dim]"
        )


def categories(
    lang: LanguageOption = None,
) -> None:
    """Affiche les categories."""
    asyncio.run(_categories_async(lang))


@with_container()
async def _categories_async(container, language: Optional[str]) -> None:
    catalog = await load_catalog(container)

    if _print_section_errors(catalog, Section.CATEGORIES):
        raise typer.Exit(1)

    console.print(
        render_categories_table(catalog.categories, language or container.config().default_language)
    )


def tags() -> None:
    """Affiche les tags (les tags speciaux sont marques d'une etoile)."""
    asyncio.run(_tags_async())


@with_container()
async def _tags_async(container) -> None:
    catalog = await load_catalog(container)

    if _print_section_errors(catalog, Section.TAGS):
        raise typer.Exit(1)

    console.print(render_tags_table(catalog.tags))
