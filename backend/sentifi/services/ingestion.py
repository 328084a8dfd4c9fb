# backend/sentifi/services/ingestion.py
"""Fetch -> dedupe -> classify -> persist.

Candidates are handled one at a time in fetch order. Every candidate produces
an ``IngestResult``; the cycle summary is the tally of those results.
"""

from __future__ import annotations
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Awaitable, Callable, List, Optional

from pymongo.errors import DuplicateKeyError

from sentifi.db.repositories import ArticleRepository
from sentifi.db.schemas import ArticleDocument
from sentifi.logger import get_logger
from sentifi.services.classifier import (
    Analysis,
    SentimentClassifier,
    article_text,
    degraded_analysis,
    get_classifier,
)
from sentifi.services.feeds import FeedItem, fetch_news
from sentifi.utils.validators import to_naive_utc, utcnow

log = get_logger(__name__)

Fetcher = Callable[[], Awaitable[List[FeedItem]]]


class IngestOutcome(str, Enum):
    CREATED = "created"
    SKIPPED = "skipped"   # title already stored
    FAILED = "failed"     # persistence error


@dataclass
class IngestResult:
    outcome: IngestOutcome
    title: str
    article_id: Optional[str] = None
    degraded: bool = False
    error: Optional[str] = None


@dataclass
class CycleSummary:
    started_at: datetime
    fetched: int = 0
    fetch_failed: bool = False
    duration_ms: int = 0
    results: List[IngestResult] = field(default_factory=list)

    def _count(self, outcome: IngestOutcome) -> int:
        return sum(1 for r in self.results if r.outcome == outcome)

    @property
    def new(self) -> int:
        return self._count(IngestOutcome.CREATED)

    @property
    def skipped(self) -> int:
        return self._count(IngestOutcome.SKIPPED)

    @property
    def errors(self) -> int:
        return self._count(IngestOutcome.FAILED)

    @property
    def degraded(self) -> int:
        return sum(1 for r in self.results if r.outcome == IngestOutcome.CREATED and r.degraded)

    def as_dict(self) -> dict:
        return {
            "started_at": self.started_at.isoformat(),
            "fetched": self.fetched,
            "fetch_failed": self.fetch_failed,
            "new": self.new,
            "skipped": self.skipped,
            "errors": self.errors,
            "degraded": self.degraded,
            "duration_ms": self.duration_ms,
        }


async def _classify(classifier: SentimentClassifier, item: FeedItem) -> Analysis:
    try:
        return await classifier.analyze(article_text(item.title, item.content))
    except Exception:
        log.exception("[INGEST] classifier raised for %r; using neutral default", item.title[:80])
        return degraded_analysis()


async def ingest_item(
    repo: ArticleRepository,
    classifier: SentimentClassifier,
    item: FeedItem,
) -> IngestResult:
    """Run one candidate through check, classify and persist"""
    try:
        if await repo.exists_title(item.title):
            return IngestResult(IngestOutcome.SKIPPED, item.title)
    except Exception as e:
        log.exception("[INGEST] duplicate check failed for %r", item.title[:80])
        return IngestResult(IngestOutcome.FAILED, item.title, error=str(e))

    analysis = await _classify(classifier, item)

    try:
        article = ArticleDocument(
            title=item.title,
            content=item.content,
            source=item.source,
            url=item.url,
            published_at=to_naive_utc(item.published_at) or utcnow(),
            analyzed_at=utcnow(),
            sentiment_score=analysis.sentiment_score,
            sentiment_label=analysis.label,
            asset=analysis.asset,
            category=analysis.category,
            chain=analysis.chain,
            keywords=analysis.keywords,
        )
        article_id = await repo.insert_article(article)
    except DuplicateKeyError:
        # Another cycle stored the same title between check and insert.
        log.info("[INGEST] duplicate on insert, skipping %r", item.title[:80])
        return IngestResult(IngestOutcome.SKIPPED, item.title)
    except Exception as e:
        log.exception("[INGEST] failed to store %r", item.title[:80])
        return IngestResult(IngestOutcome.FAILED, item.title, error=str(e))

    log.info("[NEWS] %-8s %3d -> %s", analysis.label.value, analysis.sentiment_score, item.title[:80])
    return IngestResult(IngestOutcome.CREATED, item.title, article_id=article_id, degraded=analysis.degraded)


async def run_ingestion_cycle(
    repo: ArticleRepository,
    classifier: Optional[SentimentClassifier] = None,
    fetcher: Optional[Fetcher] = None,
) -> CycleSummary:
    """One full cycle. Never raises; failures end up in the summary."""
    classifier = classifier or get_classifier()
    fetcher = fetcher or fetch_news

    summary = CycleSummary(started_at=utcnow())
    t0 = time.perf_counter()
    log.info("[INGEST] starting news analysis cycle at %s", summary.started_at.isoformat())

    try:
        items = await fetcher()
    except Exception:
        log.exception("[INGEST] fetch failed; skipping cycle")
        summary.fetch_failed = True
        summary.duration_ms = int((time.perf_counter() - t0) * 1000)
        return summary

    summary.fetched = len(items)
    if not items:
        log.warning("[INGEST] no candidates fetched; skipping cycle")
        summary.duration_ms = int((time.perf_counter() - t0) * 1000)
        return summary

    for item in items:
        summary.results.append(await ingest_item(repo, classifier, item))

    summary.duration_ms = int((time.perf_counter() - t0) * 1000)
    log.info(
        "[INGEST] cycle complete: %d new, %d skipped, %d errors (%d degraded) in %dms",
        summary.new, summary.skipped, summary.errors, summary.degraded, summary.duration_ms,
    )
    return summary
