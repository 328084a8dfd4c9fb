from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from sentifi.core.sentiment import DEFAULT_SCORE


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ArticleOut(CamelModel):
    id: str
    title: str
    content: str = ""
    source: str
    url: Optional[str] = None
    published_at: datetime
    analyzed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    sentiment_score: int
    sentiment: str
    asset: Optional[str] = None
    category: Optional[str] = None
    chain: Optional[str] = None
    keywords: Optional[str] = None

    @classmethod
    def from_document(cls, doc: dict) -> "ArticleOut":
        return cls(
            id=str(doc["_id"]),
            title=doc["title"],
            content=doc.get("content") or "",
            source=doc.get("source") or "",
            url=doc.get("url"),
            published_at=doc["published_at"],
            analyzed_at=doc.get("analyzed_at"),
            created_at=doc.get("created_at"),
            sentiment_score=DEFAULT_SCORE if doc.get("sentiment_score") is None else doc["sentiment_score"],
            sentiment=doc.get("sentiment_label") or "NEUTRAL",
            asset=doc.get("asset"),
            category=doc.get("category"),
            chain=doc.get("chain"),
            keywords=doc.get("keywords"),
        )


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int


class ArticleListOut(BaseModel):
    articles: List[ArticleOut]
    pagination: Pagination


class LatestArticlesOut(BaseModel):
    articles: List[ArticleOut]
