# backend/sentifi/routers/articles.py
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from sentifi.api.deps import get_analytics
from sentifi.core.sentiment import Sentiment
from sentifi.schemas.article import ArticleListOut, ArticleOut, LatestArticlesOut
from sentifi.services.analytics import ArticleAnalytics, ArticleQuery
from sentifi.utils.validators import validate_article_id

router = APIRouter(prefix="/articles", tags=["articles"])


@router.get("", response_model=ArticleListOut)
async def list_articles(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    sentiment: Optional[Sentiment] = None,
    source: Optional[str] = Query(None, min_length=1, max_length=100),
    asset: Optional[str] = Query(None, min_length=1, max_length=30),
    category: Optional[str] = Query(None, min_length=1, max_length=60),
    chain: Optional[str] = Query(None, min_length=1, max_length=60),
    search: Optional[str] = Query(None, min_length=1, max_length=200),
    days: Optional[int] = Query(None, ge=1, le=365),
    orderBy: Literal["publishedAt", "analyzedAt", "createdAt"] = "publishedAt",
    order: Literal["asc", "desc"] = "desc",
    analytics: ArticleAnalytics = Depends(get_analytics),
):
    """Paginated article listing with filters and free-text search"""
    result = await analytics.list_articles(ArticleQuery(
        page=page,
        limit=limit,
        sentiment=sentiment,
        source=source,
        asset=asset,
        category=category,
        chain=chain,
        search=search,
        days=days,
        order_by=orderBy,
        order=order,
    ))
    return {
        "articles": [ArticleOut.from_document(d) for d in result["articles"]],
        "pagination": result["pagination"],
    }


@router.get("/latest", response_model=LatestArticlesOut)
async def latest_articles(
    limit: int = Query(10, ge=1, le=100),
    analytics: ArticleAnalytics = Depends(get_analytics),
):
    docs = await analytics.latest(limit)
    return {"articles": [ArticleOut.from_document(d) for d in docs]}


@router.get("/{article_id}", response_model=ArticleOut)
async def get_article(article_id: str, analytics: ArticleAnalytics = Depends(get_analytics)):
    try:
        aid = validate_article_id(article_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    doc = await analytics.get_article(aid)
    if doc is None:
        raise HTTPException(status_code=404, detail="Article not found")
    return ArticleOut.from_document(doc)
