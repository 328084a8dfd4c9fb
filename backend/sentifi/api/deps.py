# backend/sentifi/api/deps.py
"""API dependencies"""

from fastapi import Depends

from sentifi.db import get_repository
from sentifi.db.repositories import ArticleRepository
from sentifi.services.analytics import ArticleAnalytics


def get_article_repository() -> ArticleRepository:
    return get_repository(ArticleRepository)


def get_analytics(repo: ArticleRepository = Depends(get_article_repository)) -> ArticleAnalytics:
    return ArticleAnalytics(repo)
