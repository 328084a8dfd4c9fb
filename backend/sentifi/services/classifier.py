# backend/sentifi/services/classifier.py
from __future__ import annotations
import json
from typing import Optional

from openai import AsyncOpenAI
from pydantic import BaseModel, Field

from sentifi.core.config import settings
from sentifi.core.sentiment import (
    DEFAULT_SCORE,
    LABEL_SCORES,
    Sentiment,
    bucket_for_score,
    clamp_score,
    normalize_label,
)
from sentifi.logger import get_logger

log = get_logger(__name__)

SYSTEM_PROMPT = """You are an expert cryptocurrency market analyst. Analyze the provided news article and return a JSON object.

1. sentimentScore: integer 0-100, the only sentiment indicator.
   0-10 extremely bearish, 11-25 very bearish, 26-40 moderately bearish,
   41-59 neutral or mixed, 60-74 moderately bullish, 75-89 very bullish,
   90-100 extremely bullish.
2. asset: ticker of the primary cryptocurrency ("BTC", "ETH", "SOL", ...),
   "GENERAL" when no single coin is the focus, "OTHER" for minor altcoins.
3. category: one of "Price Movement", "Regulation", "Technology", "DeFi", "NFT",
   "Adoption", "Security", "Mining", "Staking", "Meme", "Gaming", "AI", "RWA",
   "Infrastructure", "Metaverse", "General".
4. chain: blockchain ecosystem ("Bitcoin", "Ethereum", "Solana", ...) or "GENERAL".
5. keywords: 1-3 specific crypto keywords or phrases, comma-separated.

Return ONLY valid JSON:
{"sentimentScore": <0-100>, "asset": "<TICKER>", "category": "<category>", "chain": "<chain>", "keywords": "<k1, k2>"}"""

LABEL_PROMPT = (
    'You are a trader who rates crypto news as "Bullish", "Bearish" or "Neutral". '
    "Answer with one word only."
)


class Analysis(BaseModel):
    sentiment_score: int = Field(default=DEFAULT_SCORE, ge=0, le=100)
    label: Sentiment = Sentiment.NEUTRAL
    asset: Optional[str] = None
    category: Optional[str] = None
    chain: Optional[str] = None
    keywords: Optional[str] = None
    degraded: bool = False


def degraded_analysis() -> Analysis:
    """Result used whenever classification fails"""
    return Analysis(sentiment_score=DEFAULT_SCORE, label=Sentiment.ERROR, degraded=True)


def article_text(title: str, content: str) -> str:
    return f"{title}\n\n{content or ''}"


def parse_analysis(raw: str) -> Analysis:
    """Validate and normalise the model's JSON answer"""
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError("analysis is not a JSON object")

    score = clamp_score(data.get("sentimentScore"))
    keywords = str(data.get("keywords") or "").strip()
    return Analysis(
        sentiment_score=score,
        label=bucket_for_score(score),
        asset=str(data.get("asset") or "GENERAL").strip().upper(),
        category=str(data.get("category") or "General").strip(),
        chain=str(data.get("chain") or "GENERAL").strip(),
        keywords=keywords or None,
    )


class SentimentClassifier:
    """OpenAI-backed classifier. ``analyze`` never raises."""

    def __init__(self, client: Optional[AsyncOpenAI] = None, mode: Optional[str] = None):
        self._client = client
        self.mode = mode or settings.CLASSIFIER_MODE

    def _get_client(self) -> Optional[AsyncOpenAI]:
        if self._client is None and settings.OPENAI_API_KEY:
            self._client = AsyncOpenAI(
                api_key=settings.OPENAI_API_KEY,
                timeout=settings.CLASSIFIER_TIMEOUT_SECONDS,
                max_retries=settings.OPENAI_MAX_RETRIES,
            )
        return self._client

    def is_available(self) -> bool:
        return self._get_client() is not None

    async def analyze(self, text: str) -> Analysis:
        client = self._get_client()
        if client is None:
            log.warning("OPENAI_API_KEY not set; storing neutral default")
            return degraded_analysis()
        try:
            if self.mode == "label":
                return await self._analyze_label(client, text)
            return await self._analyze_score(client, text)
        except Exception as e:
            log.error("OpenAI sentiment analysis failed: %s", e)
            return degraded_analysis()

    async def _analyze_score(self, client: AsyncOpenAI, text: str) -> Analysis:
        res = await client.chat.completions.create(
            model=settings.OPENAI_MODEL,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": f"Analyze this cryptocurrency news article:\n\n{text}"},
            ],
            max_completion_tokens=800,
            response_format={"type": "json_object"},
        )
        raw = (res.choices[0].message.content or "").strip() if res.choices else ""
        if not raw:
            raise ValueError("empty response from OpenAI")
        log.debug("AI raw response: %s", raw)
        return parse_analysis(raw)

    async def _analyze_label(self, client: AsyncOpenAI, text: str) -> Analysis:
        res = await client.chat.completions.create(
            model=settings.OPENAI_MODEL,
            messages=[
                {"role": "system", "content": LABEL_PROMPT},
                {"role": "user", "content": text},
            ],
            max_completion_tokens=10,
        )
        raw = (res.choices[0].message.content or "").strip() if res.choices else ""
        label = normalize_label(raw)
        return Analysis(
            sentiment_score=LABEL_SCORES[label],
            label=label,
            degraded=label == Sentiment.ERROR,
        )


_classifier: Optional[SentimentClassifier] = None


def get_classifier() -> SentimentClassifier:
    global _classifier
    if _classifier is None:
        _classifier = SentimentClassifier()
    return _classifier
