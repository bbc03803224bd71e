"""
Commande de soumission d'une video.

Les categories et tags sont saisis par slug / nom, puis convertis en
identifiants a partir des donnees de reference du store.
"""

import asyncio
from typing import Annotated, Optional

import typer
from loguru import logger

from src.adapters.cli.helpers import console, load_catalog, with_container
from src.core.errors import AuthenticationRequiredError, InvalidSubmissionError, StoreError
from src.services.submission import validate_submission
from src.utils.constants import DEFAULT_LANGUAGE


def submit(
    title: Annotated[str, typer.Option("--title", help="Titre de la video")],
    url: Annotated[str, typer.Option("--url", help="URL de la video")],
    category: Annotated[
        list[str], typer.Option("--category", "-c", help="Slug de categorie (repetable)")
    ],
    tag: Annotated[
        Optional[list[str]], typer.Option("--tag", "-t", help="Nom de tag (repetable)")
    ] = None,
    description: Annotated[
        Optional[str], typer.Option("--description", "-d", help="Description")
    ] = None,
    lang: Annotated[str, typer.Option("--lang", "-l", help="Code langue")] = DEFAULT_LANGUAGE,
    user: Annotated[
        Optional[str], typer.Option("--user", "-u", help="Identifiant utilisateur")
    ] = None,
) -> None:
    """Soumet une video a la votation de la communaute."""
    asyncio.run(_submit_async(title, url, category, tag or [], description, lang, user))


@with_container()
async def _submit_async(
    container,
    title: str,
    url: str,
    category_slugs: list[str],
    tag_names: list[str],
    description: Optional[str],
    language: str,
    user: Optional[str] = None,
) -> None:
    """Implementation async de la commande submit."""
    catalog = await load_catalog(container, user)

    try:
        form = validate_submission(
            {
                "title": title,
                "url": url,
                "description": description,
                "language": language,
                "category_ids": catalog.resolve_category_ids(category_slugs),
                "tag_ids": catalog.resolve_tag_ids(tag_names),
            }
        )
        submitted = await container.submission_service().submit(catalog.user_id, form)
    except AuthenticationRequiredError:
        console.print("[red]Connectez-vous pour soumettre (--user ou MONYNHA_USER_ID).[/red]")
        raise typer.Exit(1)
    except InvalidSubmissionError as e:
        for field, message in e.errors.items():
            console.print(f"[red]{field}: {message}[/red]")
        raise typer.Exit(1)
    except StoreError as e:
        logger.error(f"Soumission impossible: {e}")
        console.print(f"[red]Erreur du store: {e}[/red]")
        raise typer.Exit(1)

    record = catalog.apply_submission(submitted)
    console.print(f"[green]Video soumise:[/green] {record.title}")
    console.print(f"[dim]ID: {record.id} | plateforme: {record.platform}[/dim]")
    console.print(f"En attente de {catalog.threshold} votes pour publication.")
