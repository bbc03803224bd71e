"""
Module de persistance SQLite du store local.

- database.py : Engine SQLite et initialisation des tables
- models.py : Modeles SQLModel (schema identique au store distant)
- sqlmodel_store.py : Implementation de IVideoStore

Usage:
    from src.infrastructure.persistence import SQLModelStore, create_db_engine, init_db

    engine = init_db(create_db_engine("sqlite:///data/monynha.db"))
    store = SQLModelStore(engine, votes_to_publish=10)
"""

from src.infrastructure.persistence.database import create_db_engine, get_engine, init_db
from src.infrastructure.persistence.models import (
    CategoryModel,
    SuggestionModel,
    TagModel,
    VideoCategoryModel,
    VideoModel,
    VideoTagModel,
)
from src.infrastructure.persistence.sqlmodel_store import SQLModelStore

__all__ = [
    "create_db_engine",
    "get_engine",
    "init_db",
    "SQLModelStore",
    "VideoModel",
    "CategoryModel",
    "TagModel",
    "VideoCategoryModel",
    "VideoTagModel",
    "SuggestionModel",
]
