"""
Configuration de la base de donnees SQLite du store local.

Ce module fournit :
- Engine SQLite configure pour un usage multi-thread (run_in_executor)
- Fonction d'initialisation des tables

La base de donnees est configuree via MONYNHA_DATABASE_URL
(defaut: sqlite:///data/monynha.db).
"""

from pathlib import Path
from typing import Optional

from sqlalchemy import Engine
from sqlmodel import SQLModel, create_engine

# Engine global - initialise lors du premier appel a get_engine()
_engine: Optional[Engine] = None


def create_db_engine(database_url: str) -> Engine:
    """
    Cree un engine pour l'URL donnee.

    Le repertoire parent d'un fichier SQLite est cree si necessaire.
    """
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
        if database_url.startswith("sqlite:///") and ":memory:" not in database_url:
            db_path = Path(database_url.replace("sqlite:///", "", 1))
            db_path.parent.mkdir(exist_ok=True, parents=True)

    return create_engine(database_url, echo=False, connect_args=connect_args)


def get_engine(database_url: Optional[str] = None) -> Engine:
    """
    Retourne l'engine global, en le creant si necessaire.

    Sans URL explicite, utilise la configuration de l'application.
    """
    global _engine
    if _engine is None:
        if database_url is None:
            from src.config import Settings

            database_url = Settings().database_url
        _engine = create_db_engine(database_url)
    return _engine


def init_db(engine: Optional[Engine] = None) -> Engine:
    """
    Initialise la base de donnees en creant toutes les tables.

    Les modeles sont importes ici pour enregistrer leurs metadonnees
    dans SQLModel.metadata sans import circulaire.

    Args:
        engine: Engine cible (defaut: engine global)

    Returns:
        L'engine initialise
    """
    from src.infrastructure.persistence import models  # noqa: F401

    engine = engine or get_engine()
    SQLModel.metadata.create_all(engine)
    return engine
