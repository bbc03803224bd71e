"""
Point d'entrée CLI de Monynha Fun.

Configure le logging et monte les commandes de consultation, de vote
et de soumission.
"""

from typing import Annotated

import typer
from loguru import logger

from . import __version__
from .adapters.cli.commands import categories, pending, submit, tags, videos, vote
from .config import Settings
from .container import Container
from .logging_config import configure_logging

app = typer.Typer(
    name="monynha",
    help="Catalogue de videos communautaire avec votation",
)
container = Container()


@app.callback()
def main_callback(
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Mode silencieux (erreurs uniquement)"),
    ] = False,
) -> None:
    """Monynha Fun - videos curees par la communaute."""
    if quiet:
        logger.disable("src")


app.command()(videos)
app.command()(pending)
app.command()(categories)
app.command()(tags)
app.command()(vote)
app.command()(submit)


def get_config() -> Settings:
    """Récupère les paramètres de l'application depuis le container DI."""
    return container.config()


@app.command()
def info() -> None:
    """Affiche la configuration actuelle."""
    config = get_config()
    logger.info("Configuration Monynha Fun")
    typer.echo(f"Store : {config.store_backend}")
    typer.echo(f"Base de données : {config.database_url}")
    typer.echo(f"Supabase : {'configuré' if config.supabase_enabled else 'non configuré'}")
    typer.echo(f"Votes pour publier : {config.votes_to_publish}")
    typer.echo(f"Langue par défaut : {config.default_language}")
    typer.echo(f"Utilisateur : {config.user_id or 'anonyme'}")
    typer.echo(f"Niveau de log : {config.log_level}")


@app.command()
def version() -> None:
    """Affiche les informations de version."""
    typer.echo(f"Monynha Fun v{__version__}")


@app.command(name="init-db")
def init_db_command(
    seed: Annotated[
        bool, typer.Option("--seed/--no-seed", help="Créer les catégories et tags de référence")
    ] = True,
) -> None:
    """Crée les tables du store local (et les données de référence)."""
    container.database.init()
    typer.echo(f"Base initialisée : {get_config().database_url}")
    if seed:
        created_categories, created_tags = container.local_store().seed_reference_data()
        typer.echo(f"Catégories créées : {created_categories}, tags créés : {created_tags}")


def main() -> None:
    """Point d'entrée de l'application."""
    settings = container.config()
    configure_logging(
        log_level=settings.log_level,
        log_file=settings.log_file,
        rotation_size=settings.log_rotation_size,
        retention_count=settings.log_retention_count,
        store_backend=settings.store_backend,
    )

    logger.info("Démarrage de Monynha Fun", version=__version__, store=settings.store_backend)

    app()


if __name__ == "__main__":
    main()
