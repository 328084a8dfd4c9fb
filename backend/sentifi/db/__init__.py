# backend/sentifi/db/__init__.py
"""Database package - MongoDB article store"""

from .mongo import (
    ARTICLES,
    connect_to_mongo,
    close_mongo_connection,
    ensure_indexes,
    get_db,
    get_client,
    to_object_id,
    get_repository,
)

from .schemas import (
    ArticleDocument,
    PyObjectId,
    MongoBaseModel,
)

from .repositories import (
    BaseRepository,
    ArticleRepository,
)

__all__ = [
    # Connection management
    "ARTICLES",
    "connect_to_mongo",
    "close_mongo_connection",
    "ensure_indexes",
    "get_db",
    "get_client",
    "to_object_id",
    "get_repository",

    # Schemas
    "ArticleDocument",
    "PyObjectId",
    "MongoBaseModel",

    # Repositories
    "BaseRepository",
    "ArticleRepository",
]
