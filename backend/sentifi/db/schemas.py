# backend/sentifi/db/schemas.py
"""MongoDB document schemas using Pydantic for validation"""

from __future__ import annotations
from datetime import datetime
from typing import Any, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, GetCoreSchemaHandler, GetJsonSchemaHandler
from pydantic_core import core_schema

from sentifi.core.sentiment import DEFAULT_SCORE, Sentiment
from sentifi.utils.validators import utcnow


class PyObjectId(ObjectId):
    """MongoDB ObjectId type with Pydantic v2 support."""
    @classmethod
    def __get_pydantic_core_schema__(cls, _source: Any, handler: GetCoreSchemaHandler):
        def validate(v: Any) -> ObjectId:
            if isinstance(v, ObjectId):
                return v
            if isinstance(v, str) and ObjectId.is_valid(v):
                return ObjectId(v)
            raise ValueError("Invalid ObjectId")
        return core_schema.no_info_after_validator_function(
            validate,
            core_schema.union_schema([
                core_schema.is_instance_schema(ObjectId),
                core_schema.str_schema(),
            ])
        )

    @classmethod
    def __get_pydantic_json_schema__(cls, core_schema_, handler: GetJsonSchemaHandler):
        js = handler(core_schema_)
        js.update(type="string", examples=["64f1a2b3c4d5e67890ab12cd"])
        return js


class MongoBaseModel(BaseModel):
    """Base model for MongoDB documents"""
    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    id: PyObjectId = Field(default_factory=ObjectId, alias="_id")
    created_at: datetime = Field(default_factory=utcnow)


class ArticleDocument(MongoBaseModel):
    """Analyzed article; written once by the ingestion cycle, never updated"""
    title: str = Field(..., min_length=1)
    content: str = ""
    source: str
    url: Optional[str] = None
    published_at: datetime = Field(default_factory=utcnow)
    analyzed_at: datetime = Field(default_factory=utcnow)

    sentiment_score: int = Field(default=DEFAULT_SCORE, ge=0, le=100)
    sentiment_label: Sentiment = Sentiment.NEUTRAL

    # Classifier tags
    asset: Optional[str] = None
    category: Optional[str] = None
    chain: Optional[str] = None
    keywords: Optional[str] = None

    def to_document(self) -> dict:
        doc = self.model_dump(by_alias=True)
        doc["_id"] = ObjectId(str(self.id))
        doc["sentiment_label"] = self.sentiment_label.value
        return doc
