# backend/sentifi/services/analytics.py
"""Windowed aggregations over the article store.

Rows are selected by ``published_at`` in Mongo and grouped here, so every
sentiment count passes through ``bucket_for_score``.
"""

from __future__ import annotations
import math
import re
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from sentifi.core.sentiment import (
    DEFAULT_SCORE,
    Sentiment,
    bucket_for_score,
    dominant_bucket,
    empty_counts,
    score_range,
)
from sentifi.db.repositories import ArticleRepository
from sentifi.utils.validators import utcnow

MAX_PAGE_SIZE = 100

SORT_FIELDS = {
    "publishedAt": "published_at",
    "analyzedAt": "analyzed_at",
    "createdAt": "created_at",
}

TAG_FIELDS = ("source", "asset", "category", "chain")


@dataclass
class ArticleQuery:
    page: int = 1
    limit: int = 20
    sentiment: Optional[Sentiment] = None
    source: Optional[str] = None
    asset: Optional[str] = None
    category: Optional[str] = None
    chain: Optional[str] = None
    search: Optional[str] = None
    days: Optional[int] = None
    order_by: str = "publishedAt"
    order: str = "desc"


def _lookback(days: Optional[int] = None, hours: Optional[int] = None, now: Optional[datetime] = None) -> datetime:
    now = now or utcnow()
    if hours is not None:
        return now - timedelta(hours=hours)
    return now - timedelta(days=days if days is not None else 7)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _sentiment_filter(sentiment: Sentiment) -> dict:
    if sentiment == Sentiment.ERROR:
        return {"sentiment_label": Sentiment.ERROR.value}
    low, high = score_range(sentiment)
    in_range = {"sentiment_score": {"$gte": low, "$lte": high}}
    if low <= DEFAULT_SCORE <= high:
        # rows without a score count as the default
        return {"$or": [in_range, {"sentiment_score": None}]}
    return in_range


def build_article_filter(q: ArticleQuery, now: Optional[datetime] = None) -> dict:
    clauses: List[dict] = []
    if q.sentiment is not None:
        clauses.append(_sentiment_filter(q.sentiment))
    for name in TAG_FIELDS:
        value = getattr(q, name)
        if value:
            clauses.append({name: value})
    if q.search:
        pattern = {"$regex": re.escape(q.search), "$options": "i"}
        clauses.append({"$or": [{"title": pattern}, {"content": pattern}]})
    if q.days:
        clauses.append({"published_at": {"$gte": _lookback(days=q.days, now=now)}})

    if not clauses:
        return {}
    if len(clauses) == 1:
        return clauses[0]
    return {"$and": clauses}


def count_buckets(rows: List[dict]) -> Dict[str, int]:
    counts = empty_counts()
    for row in rows:
        counts[bucket_for_score(row.get("sentiment_score")).value] += 1
    counts["total"] = len(rows)
    return counts


def rank_by_field(rows: List[dict], field: str, limit: int) -> List[dict]:
    """Group rows by ``field`` (null values dropped) and rank groups by size"""
    groups: Dict[str, dict] = {}
    for row in rows:
        name = row.get(field)
        if name is None:
            continue
        group = groups.setdefault(name, {"count": 0, "scores": [], "buckets": empty_counts()})
        group["count"] += 1
        score = row.get("sentiment_score")
        if score is not None:
            group["scores"].append(score)
        group["buckets"][bucket_for_score(score).value] += 1

    ranked = []
    for name, group in groups.items():
        scores = group["scores"]
        avg = _round_half_up(sum(scores) / len(scores)) if scores else DEFAULT_SCORE
        ranked.append({
            "name": name,
            "count": group["count"],
            "avgSentimentScore": avg,
            "sentiment": dominant_bucket(group["buckets"]).value,
        })

    ranked.sort(key=lambda g: (-g["count"], g["name"]))
    return ranked[:limit]


def tally_keywords(rows: List[dict], limit: int) -> List[dict]:
    counter: Counter = Counter()
    for row in rows:
        raw = row.get("keywords")
        if not raw:
            continue
        for term in raw.split(","):
            term = term.strip()
            if term:
                counter[term] += 1
    return [{"keyword": k, "count": c} for k, c in counter.most_common(limit)]


def trend_key(published_at: datetime, granularity: str) -> str:
    if granularity == "hourly":
        return published_at.strftime("%Y-%m-%d %H:00")
    return published_at.strftime("%Y-%m-%d")


class ArticleAnalytics:
    """Read-only statistics over the article store"""

    def __init__(self, repo: ArticleRepository):
        self.repo = repo

    async def list_articles(self, q: ArticleQuery) -> dict:
        if q.page < 1 or q.limit < 1:
            raise ValueError("page and limit must be positive integers")
        if q.order_by not in SORT_FIELDS:
            raise ValueError(f"orderBy must be one of {sorted(SORT_FIELDS)}")
        if q.order not in ("asc", "desc"):
            raise ValueError("order must be 'asc' or 'desc'")

        limit = min(q.limit, MAX_PAGE_SIZE)
        filter = build_article_filter(q)
        total = await self.repo.count(filter)
        articles = await self.repo.find_page(
            filter,
            sort_field=SORT_FIELDS[q.order_by],
            descending=q.order == "desc",
            skip=(q.page - 1) * limit,
            limit=limit,
        )
        return {
            "articles": articles,
            "pagination": {
                "page": q.page,
                "limit": limit,
                "total": total,
                "totalPages": math.ceil(total / limit),
            },
        }

    async def latest(self, limit: int = 10) -> List[dict]:
        return await self.repo.find_latest(max(1, min(limit, MAX_PAGE_SIZE)))

    async def get_article(self, article_id: str) -> Optional[dict]:
        return await self.repo.find_by_id(article_id)

    async def sentiment_stats(
        self, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> Dict[str, int]:
        rows = await self.repo.find_published_between(start, end, fields=("sentiment_score",))
        return count_buckets(rows)

    async def sentiment_trend(
        self,
        hours: Optional[int] = None,
        days: int = 7,
        granularity: str = "daily",
        now: Optional[datetime] = None,
    ) -> List[dict]:
        """Per sub-interval bucket counts, oldest first; empty sub-intervals are omitted"""
        if granularity not in ("daily", "hourly"):
            raise ValueError("granularity must be 'daily' or 'hourly'")
        start = _lookback(days=days, hours=hours, now=now)
        rows = await self.repo.find_published_between(start, fields=("published_at", "sentiment_score"))

        trend: Dict[str, dict] = {}
        for row in rows:
            key = trend_key(row["published_at"], granularity)
            point = trend.get(key)
            if point is None:
                point = trend[key] = {"date": key, **empty_counts(), "total": 0}
            point[bucket_for_score(row.get("sentiment_score")).value] += 1
            point["total"] += 1

        return [trend[k] for k in sorted(trend)]

    async def _ranked(self, field: str, days: int, limit: int) -> List[dict]:
        extra = None if field == "source" else {field: {"$ne": None}}
        rows = await self.repo.find_published_between(
            _lookback(days=days), fields=(field, "sentiment_score"), extra=extra
        )
        return rank_by_field(rows, field, limit)

    async def top_sources(self, days: int = 7, limit: int = 5) -> List[dict]:
        return await self._ranked("source", days, limit)

    async def asset_stats(self, days: int = 7, limit: int = 10) -> List[dict]:
        return await self._ranked("asset", days, limit)

    async def category_stats(self, days: int = 7, limit: int = 10) -> List[dict]:
        return await self._ranked("category", days, limit)

    async def chain_stats(self, days: int = 7, limit: int = 10) -> List[dict]:
        return await self._ranked("chain", days, limit)

    async def trending_keywords(self, days: int = 7, limit: int = 10) -> List[dict]:
        rows = await self.repo.find_published_between(
            _lookback(days=days), fields=("keywords",), extra={"keywords": {"$ne": None}}
        )
        return tally_keywords(rows, limit)
