"""
Container d'injection de dependances via dependency-injector.

Fournit le store actif (local SQLite ou Supabase) et les services du
catalogue a la CLI. Le seuil de publication est lu une seule fois
(Settings.votes_to_publish) et transmis a l'evaluateur comme au store local.
"""

from dependency_injector import containers, providers

from .adapters.api.cache import ReferenceCache
from .adapters.api.supabase_store import SupabaseStore
from .config import Settings
from .infrastructure.persistence.database import create_db_engine, init_db
from .infrastructure.persistence.sqlmodel_store import SQLModelStore
from .services.catalog import CatalogService
from .services.submission import SubmissionService
from .services.vote_threshold import VoteThresholdEvaluator


class Container(containers.DeclarativeContainer):
    """Container DI de l'application.

    Utilisation :
        container = Container()
        container.database.init()  # Cree les tables du store local
        catalog = container.catalog_service()
        await catalog.refresh()
    """

    # Configuration - singleton charge une seule fois
    config = providers.Singleton(Settings)

    # Database - engine unique, tables creees via Resource
    engine = providers.Singleton(create_db_engine, database_url=config.provided.database_url)
    database = providers.Resource(init_db, engine=engine)

    # Cache disque des categories et tags du store distant
    reference_cache = providers.Singleton(
        ReferenceCache,
        cache_dir=config.provided.reference_cache_dir,
    )

    # Stores - implementations concretes de IVideoStore
    local_store = providers.Singleton(
        SQLModelStore,
        engine=database,
        votes_to_publish=config.provided.votes_to_publish,
    )
    supabase_store = providers.Singleton(
        SupabaseStore,
        base_url=config.provided.supabase_url,
        api_key=config.provided.supabase_anon_key,
        cache=reference_cache,
    )
    store = providers.Selector(
        config.provided.store_backend,
        local=local_store,
        supabase=supabase_store,
    )

    # Services
    evaluator = providers.Singleton(
        VoteThresholdEvaluator,
        threshold=config.provided.votes_to_publish,
    )
    submission_service = providers.Factory(SubmissionService, store=store)
    catalog_service = providers.Factory(
        CatalogService,
        store=store,
        evaluator=evaluator,
        user_id=config.provided.user_id,
    )
