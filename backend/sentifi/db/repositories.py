# backend/sentifi/db/repositories.py
"""Repository pattern for MongoDB operations"""

from __future__ import annotations
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase, AsyncIOMotorCollection
from pymongo import ASCENDING, DESCENDING

from sentifi.db.mongo import ARTICLES, to_object_id
from sentifi.db.schemas import ArticleDocument


class BaseRepository:
    """Base repository with common read/insert operations"""

    def __init__(self, db: AsyncIOMotorDatabase, collection_name: str):
        self.db = db
        self.collection: AsyncIOMotorCollection = db[collection_name]

    async def create(self, document: dict) -> str:
        """Create a new document"""
        result = await self.collection.insert_one(document)
        return str(result.inserted_id)

    async def find_by_id(self, id: str) -> Optional[dict]:
        """Find document by ID"""
        return await self.collection.find_one({"_id": to_object_id(id)})

    async def find_one(self, filter: dict) -> Optional[dict]:
        """Find single document by filter"""
        return await self.collection.find_one(filter)

    async def count(self, filter: dict) -> int:
        return await self.collection.count_documents(filter)


class ArticleRepository(BaseRepository):
    """Article store. Inserts only; articles are immutable once written."""

    def __init__(self, db: AsyncIOMotorDatabase):
        super().__init__(db, ARTICLES)

    async def insert_article(self, article: ArticleDocument) -> str:
        """Insert an analyzed article.

        Raises pymongo.errors.DuplicateKeyError when the title already exists.
        """
        return await self.create(article.to_document())

    async def exists_title(self, title: str) -> bool:
        """Exact-match lookup on the unique title index"""
        doc = await self.collection.find_one({"title": title}, projection={"_id": 1})
        return doc is not None

    async def find_page(
        self,
        filter: dict,
        *,
        sort_field: str,
        descending: bool,
        skip: int,
        limit: int,
    ) -> List[dict]:
        direction = DESCENDING if descending else ASCENDING
        cursor = (
            self.collection.find(filter)
            .sort([(sort_field, direction), ("_id", direction)])
            .skip(skip)
            .limit(limit)
        )
        return await cursor.to_list(length=limit)

    async def find_latest(self, limit: int) -> List[dict]:
        cursor = self.collection.find({}).sort([("published_at", DESCENDING), ("_id", DESCENDING)]).limit(limit)
        return await cursor.to_list(length=limit)

    async def find_published_between(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        *,
        fields: Iterable[str] = (),
        extra: Optional[Dict[str, Any]] = None,
    ) -> List[dict]:
        """All articles with published_at in [start, end]; open bounds are ignored"""
        window: Dict[str, Any] = {}
        if start is not None:
            window["$gte"] = start
        if end is not None:
            window["$lte"] = end

        filter: Dict[str, Any] = dict(extra or {})
        if window:
            filter["published_at"] = window

        projection = {f: 1 for f in fields} or None
        cursor = self.collection.find(filter, projection=projection).sort("published_at", ASCENDING)
        return await cursor.to_list(length=None)
