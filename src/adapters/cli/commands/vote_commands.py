"""
Commande de vote pour une video en attente.
"""

import asyncio
from typing import Annotated, Optional

import typer
from loguru import logger

from src.adapters.cli.helpers import console, load_catalog, with_container
from src.core.errors import AuthenticationRequiredError, StoreError
from src.services.vote_ledger import VoteOutcome


def vote(
    video_id: Annotated[str, typer.Argument(help="Identifiant de la video")],
    user: Annotated[
        Optional[str], typer.Option("--user", "-u", help="Identifiant utilisateur")
    ] = None,
) -> None:
    """Vote pour une video en attente (un vote par utilisateur)."""
    asyncio.run(_vote_async(video_id, user))


@with_container()
async def _vote_async(container, video_id: str, user: Optional[str] = None) -> None:
    """Implementation async de la commande vote."""
    catalog = await load_catalog(container, user)

    try:
        outcome = await catalog.vote(video_id)
    except AuthenticationRequiredError:
        console.print("[red]Connectez-vous pour voter (--user ou MONYNHA_USER_ID).[/red]")
        raise typer.Exit(1)
    except StoreError as e:
        logger.error(f"Vote impossible: {e}")
        console.print(f"[red]Erreur du store: {e}[/red]")
        raise typer.Exit(1)

    if outcome is VoteOutcome.RECORDED:
        console.print("[green]Vote enregistre.[/green]")
        for view in catalog.pending_videos():
            if view.video.id == video_id:
                console.print(f"{view.video.title}: {view.progress.label}")
                break
        else:
            if any(video.id == video_id for video in catalog.approved_videos()):
                console.print("[bold green]Video publiee ![/bold green]")
    else:
        console.print("[yellow]Vous avez deja vote pour cette video.[/yellow]")
