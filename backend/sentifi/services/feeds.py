# backend/sentifi/services/feeds.py
"""RSS feed registry and fetcher.

Each feed is fetched and parsed independently; a broken feed contributes zero
items and never stops the others.
"""

from __future__ import annotations
import asyncio
import html
import re
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

import feedparser
import requests
from pydantic import BaseModel

from sentifi.core.config import settings
from sentifi.logger import get_logger

log = get_logger(__name__)

_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "application/rss+xml, application/xml, text/xml",
}
_TAG_RE = re.compile(r"<[^>]+>")
_WS_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class FeedSource:
    name: str
    url: str


FEED_SOURCES: List[FeedSource] = [
    FeedSource("CoinDesk", "https://www.coindesk.com/arc/outboundfeeds/rss/"),
    FeedSource("The Block", "https://www.theblock.co/rss.xml"),
    FeedSource("Decrypt", "https://decrypt.co/feed"),
    FeedSource("NewsBTC", "https://www.newsbtc.com/feed/"),
    FeedSource("Bitcoinist", "https://bitcoinist.com/feed/"),
    FeedSource("BeInCrypto", "https://beincrypto.com/feed/"),
    FeedSource("Blockworks", "https://blockworks.co/feed"),
]


class FeedItem(BaseModel):
    """A fetched, not yet deduplicated article candidate"""
    title: str
    content: str = ""
    source: str
    url: Optional[str] = None
    published_at: Optional[datetime] = None


def _plain_text(raw: str) -> str:
    text = _TAG_RE.sub(" ", raw or "")
    return _WS_RE.sub(" ", html.unescape(text)).strip()


def _published(entry) -> Optional[datetime]:
    # feedparser normalises dates to UTC struct_time
    parsed = entry.get("published_parsed") or entry.get("updated_parsed")
    if not parsed:
        return None
    try:
        return datetime(*parsed[:6])
    except (TypeError, ValueError):
        log.warning("Could not parse feed date: %r", parsed)
        return None


def parse_feed(source: FeedSource, payload: bytes, limit: int) -> List[FeedItem]:
    """Normalise the first ``limit`` entries of a raw RSS/Atom payload"""
    feed = feedparser.parse(payload)
    if feed.bozo and not feed.entries:
        raise ValueError(f"unparseable feed: {feed.get('bozo_exception')}")

    items: List[FeedItem] = []
    for entry in feed.entries[:limit]:
        title = _plain_text(entry.get("title", ""))
        if not title:
            continue
        items.append(FeedItem(
            title=title,
            content=_plain_text(entry.get("summary") or entry.get("description") or ""),
            source=source.name,
            url=entry.get("link") or None,
            published_at=_published(entry),
        ))
    return items


def fetch_feed(source: FeedSource, limit: int, timeout: float) -> List[FeedItem]:
    resp = requests.get(source.url, headers=_HEADERS, timeout=timeout)
    resp.raise_for_status()
    return parse_feed(source, resp.content, limit)


async def fetch_news(
    sources: Optional[List[FeedSource]] = None,
    limit: Optional[int] = None,
) -> List[FeedItem]:
    """Fetch every registered feed in order and concatenate the results.

    Per-feed errors are logged and treated as zero items.
    """
    sources = FEED_SOURCES if sources is None else sources
    limit = limit or settings.FEED_ITEMS_PER_SOURCE
    timeout = settings.FEED_TIMEOUT_SECONDS

    articles: List[FeedItem] = []
    for source in sources:
        try:
            items = await asyncio.to_thread(fetch_feed, source, limit, timeout)
        except Exception as e:
            log.warning("Failed to fetch from %s: %s", source.name, e)
            continue
        log.info("[FEED] %s: %d items", source.name, len(items))
        articles.extend(items)

    log.info("Fetched %d articles from %d feeds", len(articles), len(sources))
    return articles
