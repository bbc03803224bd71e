"""
Utilitaires partages pour les commandes CLI de Monynha Fun.

Ce module fournit :
- console : instance Rich Console partagee
- suppress_loguru : context manager pour desactiver/reactiver les logs loguru
- with_container : decorateur injectant un container initialise
- close_store : fermeture du client HTTP du store distant
- build_query : construction d'une FacetQuery depuis les options CLI
- load_catalog : service catalogue charge pour l'utilisateur courant
"""

import inspect
from contextlib import contextmanager
from functools import wraps
from typing import Optional

from loguru import logger as loguru_logger
from rich.console import Console

from src.container import Container
from src.core.value_objects.facet_query import FacetQuery

# Console globale pour tous les affichages
console = Console()


@contextmanager
def suppress_loguru():
    """
    Context manager pour desactiver les logs loguru pendant l'affichage Rich.

    Usage:
        with suppress_loguru():
            console.print(...)
    """
    loguru_logger.disable("src")
    try:
        yield
    finally:
        loguru_logger.enable("src")


def with_container(requires_db: bool = True):
    """
    Decorateur qui injecte un container initialise en premier argument.

    Args:
        requires_db: Si True (defaut), cree les tables du store local
            quand celui-ci est le store actif.

    Usage:
        @with_container()
        async def my_command(container, ...):
            catalog = container.catalog_service()
    """
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            container = Container()
            if requires_db and container.config().store_backend == "local":
                container.database.init()
            try:
                return await func(container, *args, **kwargs)
            finally:
                await close_store(container.store())
        return wrapper
    return decorator


async def close_store(store) -> None:
    """Ferme le store s'il expose une methode close() asynchrone."""
    close = getattr(store, "close", None)
    if close is not None and inspect.iscoroutinefunction(close):
        await close()


def resolve_user(container, user: Optional[str]) -> Optional[str]:
    """Utilisateur de l'option --user, sinon celui de la configuration."""
    return user or container.config().user_id


def build_query(
    category: Optional[str] = None,
    tags: Optional[list[str]] = None,
    language: Optional[str] = None,
    search: Optional[str] = None,
) -> FacetQuery:
    """Construit la requete de filtrage a partir des options CLI."""
    return FacetQuery.build(category=category, tags=tags, language=language, search=search)


async def load_catalog(container, user: Optional[str] = None):
    """Cree le service catalogue pour l'utilisateur courant et le charge."""
    catalog = container.catalog_service()
    user_id = resolve_user(container, user)
    if user_id != catalog.user_id:
        await catalog.switch_user(user_id)
    else:
        await catalog.refresh()
    return catalog
