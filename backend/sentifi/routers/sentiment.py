# backend/sentifi/routers/sentiment.py
from datetime import timedelta
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from sentifi.api.deps import get_analytics
from sentifi.logger import get_logger
from sentifi.schemas.sentiment import (
    AssetsOut,
    CategoriesOut,
    ChainsOut,
    KeywordsOut,
    SentimentStatsOut,
    SourcesOut,
    TrendOut,
)
from sentifi.services.analytics import ArticleAnalytics
from sentifi.utils.validators import parse_date_bound, utcnow, validate_date_range

log = get_logger(__name__)

router = APIRouter(prefix="/sentiment", tags=["sentiment"])


@router.get("/stats", response_model=SentimentStatsOut)
async def sentiment_stats(
    days: Optional[int] = Query(None, ge=1, le=365),
    startDate: Optional[str] = Query(None, description="ISO date or datetime"),
    endDate: Optional[str] = Query(None, description="ISO date or datetime; a bare date includes that whole day"),
    analytics: ArticleAnalytics = Depends(get_analytics),
):
    """Bucket counts for a date range.

    ``days`` wins over an explicit range; with neither, all articles count.
    """
    if days:
        end = utcnow()
        start = end - timedelta(days=days)
    else:
        try:
            start = parse_date_bound(startDate)
            end = parse_date_bound(endDate, end=True)
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e))
        try:
            start, end = validate_date_range(start, end)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
    return await analytics.sentiment_stats(start, end)


@router.get("/trend", response_model=TrendOut)
async def sentiment_trend(
    hours: Optional[int] = Query(None, ge=1, le=168, description="Overrides days when set"),
    days: int = Query(7, ge=1, le=365),
    granularity: Literal["hourly", "daily"] = "daily",
    analytics: ArticleAnalytics = Depends(get_analytics),
):
    trend = await analytics.sentiment_trend(hours=hours, days=days, granularity=granularity)
    log.debug("trend hours=%s days=%s granularity=%s -> %d points", hours, days, granularity, len(trend))
    return {"trend": trend}


@router.get("/sources", response_model=SourcesOut)
async def top_sources(
    days: int = Query(7, ge=1, le=365),
    limit: int = Query(5, ge=1, le=20),
    analytics: ArticleAnalytics = Depends(get_analytics),
):
    return {"sources": await analytics.top_sources(days, limit)}


@router.get("/assets", response_model=AssetsOut)
async def asset_stats(
    days: int = Query(7, ge=1, le=365),
    limit: int = Query(10, ge=1, le=50),
    analytics: ArticleAnalytics = Depends(get_analytics),
):
    return {"assets": await analytics.asset_stats(days, limit)}


@router.get("/categories", response_model=CategoriesOut)
async def category_stats(
    days: int = Query(7, ge=1, le=365),
    limit: int = Query(10, ge=1, le=50),
    analytics: ArticleAnalytics = Depends(get_analytics),
):
    return {"categories": await analytics.category_stats(days, limit)}


@router.get("/chains", response_model=ChainsOut)
async def chain_stats(
    days: int = Query(7, ge=1, le=365),
    limit: int = Query(10, ge=1, le=50),
    analytics: ArticleAnalytics = Depends(get_analytics),
):
    return {"chains": await analytics.chain_stats(days, limit)}


@router.get("/keywords", response_model=KeywordsOut)
async def trending_keywords(
    days: int = Query(7, ge=1, le=365),
    limit: int = Query(10, ge=1, le=50),
    analytics: ArticleAnalytics = Depends(get_analytics),
):
    return {"keywords": await analytics.trending_keywords(days, limit)}
