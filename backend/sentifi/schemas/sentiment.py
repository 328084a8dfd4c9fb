from typing import List

from pydantic import BaseModel

from sentifi.schemas.article import CamelModel


class SentimentStatsOut(BaseModel):
    BULLISH: int = 0
    BEARISH: int = 0
    NEUTRAL: int = 0
    total: int = 0


class TrendPointOut(SentimentStatsOut):
    date: str


class TrendOut(BaseModel):
    trend: List[TrendPointOut]


class RankedGroupOut(CamelModel):
    name: str
    count: int
    avg_sentiment_score: int
    sentiment: str


class SourcesOut(BaseModel):
    sources: List[RankedGroupOut]


class AssetsOut(BaseModel):
    assets: List[RankedGroupOut]


class CategoriesOut(BaseModel):
    categories: List[RankedGroupOut]


class ChainsOut(BaseModel):
    chains: List[RankedGroupOut]


class KeywordOut(BaseModel):
    keyword: str
    count: int


class KeywordsOut(BaseModel):
    keywords: List[KeywordOut]
