# backend/sentifi/core/sentiment.py
"""Sentiment buckets.

Every place that turns a 0-100 ``sentiment_score`` into a BULLISH / BEARISH /
NEUTRAL count goes through ``bucket_for_score``. The listing filter uses
``score_range``, which is derived from the same two thresholds.
"""

from __future__ import annotations
from enum import Enum
from typing import Dict, Optional, Tuple


class Sentiment(str, Enum):
    BULLISH = "BULLISH"
    BEARISH = "BEARISH"
    NEUTRAL = "NEUTRAL"
    ERROR = "ERROR"


BUCKETS = (Sentiment.BULLISH, Sentiment.BEARISH, Sentiment.NEUTRAL)

MIN_SCORE = 0
MAX_SCORE = 100
DEFAULT_SCORE = 50
BULLISH_THRESHOLD = 67   # score >= 67
BEARISH_THRESHOLD = 33   # score <= 33

# Scores assigned to label-only classifications
LABEL_SCORES: Dict[Sentiment, int] = {
    Sentiment.BULLISH: 75,
    Sentiment.BEARISH: 25,
    Sentiment.NEUTRAL: DEFAULT_SCORE,
    Sentiment.ERROR: DEFAULT_SCORE,
}


def bucket_for_score(score: Optional[int]) -> Sentiment:
    """Map a score to its bucket; a missing score counts as neutral."""
    if score is None:
        score = DEFAULT_SCORE
    if score >= BULLISH_THRESHOLD:
        return Sentiment.BULLISH
    if score <= BEARISH_THRESHOLD:
        return Sentiment.BEARISH
    return Sentiment.NEUTRAL


def score_range(bucket: Sentiment) -> Tuple[int, int]:
    """Inclusive (low, high) score range covered by a bucket."""
    if bucket == Sentiment.BULLISH:
        return BULLISH_THRESHOLD, MAX_SCORE
    if bucket == Sentiment.BEARISH:
        return MIN_SCORE, BEARISH_THRESHOLD
    if bucket == Sentiment.NEUTRAL:
        return BEARISH_THRESHOLD + 1, BULLISH_THRESHOLD - 1
    raise ValueError(f"{bucket.value} has no score range")


def clamp_score(value) -> int:
    """Coerce a classifier score to an int in [0, 100]; unparseable -> 50."""
    try:
        score = int(float(value))
    except (TypeError, ValueError):
        return DEFAULT_SCORE
    return max(MIN_SCORE, min(MAX_SCORE, score))


def normalize_label(raw: Optional[str]) -> Sentiment:
    """Case-insensitive substring match of a free-text model answer."""
    text = (raw or "").upper()
    if "BULL" in text:
        return Sentiment.BULLISH
    if "BEAR" in text:
        return Sentiment.BEARISH
    if "NEUTRAL" in text:
        return Sentiment.NEUTRAL
    return Sentiment.ERROR


def empty_counts() -> Dict[str, int]:
    return {b.value: 0 for b in BUCKETS}


def dominant_bucket(counts: Dict[str, int]) -> Sentiment:
    """Strict plurality of BULLISH or BEARISH wins, anything else is NEUTRAL."""
    bull = counts.get(Sentiment.BULLISH.value, 0)
    bear = counts.get(Sentiment.BEARISH.value, 0)
    neutral = counts.get(Sentiment.NEUTRAL.value, 0)
    if bull > bear and bull > neutral:
        return Sentiment.BULLISH
    if bear > bull and bear > neutral:
        return Sentiment.BEARISH
    return Sentiment.NEUTRAL
