# backend/sentifi/db/mongo.py
"""MongoDB connection and database management"""

from __future__ import annotations
import os
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from bson import ObjectId
from sentifi.core.config import settings
from sentifi.logger import get_logger

log = get_logger(__name__)

ARTICLES = "articles"

# Global client and database instances
_client: Optional[AsyncIOMotorClient] = None
_db: Optional[AsyncIOMotorDatabase] = None


def _uri() -> str:
    """Get MongoDB URI from environment or settings"""
    return os.getenv("MONGO_URI") or settings.MONGO_URI


def _db_name() -> str:
    """Get database name from environment or settings"""
    return os.getenv("MONGO_DB_NAME") or settings.MONGO_DB_NAME


def _new_client() -> AsyncIOMotorClient:
    return AsyncIOMotorClient(
        _uri(),
        maxPoolSize=10,
        minPoolSize=1,
        maxIdleTimeMS=60000,
        serverSelectionTimeoutMS=5000,
    )


async def connect_to_mongo():
    """Initialize MongoDB connection"""
    global _client, _db

    _client = _new_client()
    _db = _client[_db_name()]

    # Verify connection
    await _client.server_info()
    log.info("Connected to MongoDB: %s", _db_name())

    await ensure_indexes(_db)


async def close_mongo_connection():
    """Close MongoDB connection"""
    global _client, _db
    if _client is not None:
        _client.close()
        log.info("Disconnected from MongoDB")
    _client = None
    _db = None
    _repositories.clear()


def get_client() -> AsyncIOMotorClient:
    """Get MongoDB client instance"""
    global _client
    if _client is None:
        _client = _new_client()
    return _client


def get_db() -> AsyncIOMotorDatabase:
    """Get MongoDB database instance"""
    global _db
    if _db is None:
        _db = get_client()[_db_name()]
    return _db


def to_object_id(value: str) -> ObjectId:
    """Convert string to ObjectId with validation"""
    try:
        return ObjectId(value)
    except Exception as e:
        raise ValueError(f"Invalid ObjectId: {value}") from e


async def ensure_indexes(db: Optional[AsyncIOMotorDatabase] = None) -> None:
    """Create all required indexes (idempotent)"""
    if db is None:
        db = get_db()

    # The unique title index is what finally arbitrates racing inserts.
    await db[ARTICLES].create_index("title", unique=True)
    await db[ARTICLES].create_index([("published_at", -1)])
    await db[ARTICLES].create_index("source")
    await db[ARTICLES].create_index("asset")
    log.info("MongoDB indexes created/verified")


# Repository instances (singleton pattern)
_repositories = {}


def get_repository(repo_class):
    """Get or create repository instance"""
    class_name = repo_class.__name__
    if class_name not in _repositories:
        _repositories[class_name] = repo_class(get_db())
    return _repositories[class_name]
