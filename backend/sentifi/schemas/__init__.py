"""API response models"""

from .article import ArticleOut, ArticleListOut, LatestArticlesOut, Pagination
from .sentiment import (
    SentimentStatsOut,
    TrendPointOut,
    TrendOut,
    RankedGroupOut,
    SourcesOut,
    AssetsOut,
    CategoriesOut,
    ChainsOut,
    KeywordOut,
    KeywordsOut,
)

__all__ = [
    "ArticleOut",
    "ArticleListOut",
    "LatestArticlesOut",
    "Pagination",
    "SentimentStatsOut",
    "TrendPointOut",
    "TrendOut",
    "RankedGroupOut",
    "SourcesOut",
    "AssetsOut",
    "CategoriesOut",
    "ChainsOut",
    "KeywordOut",
    "KeywordsOut",
]
