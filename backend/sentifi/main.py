# backend/sentifi/main.py
from __future__ import annotations

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sentifi.core.config import settings
from sentifi.logger import get_logger
from sentifi.middleware.request_logger import RequestLoggerMiddleware
from sentifi.tasks.scheduler import start_scheduler, shutdown_scheduler
from sentifi.db import connect_to_mongo, close_mongo_connection
from sentifi.routers import articles, health, sentiment

log = get_logger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Connect storage, start the ingestion schedule, tear both down on exit"""
    # ========== STARTUP ==========
    log.info("Starting SentiFi API...")

    try:
        await connect_to_mongo()
    except Exception as e:
        log.error("Failed to connect to MongoDB: %s", e)
        raise

    try:
        scheduler = start_scheduler()
        if scheduler:
            log.info("Scheduler started with jobs: %s", [job.id for job in scheduler.get_jobs()])
    except Exception as e:
        log.exception("Failed to start scheduler: %s", e)

    log.info("Application startup complete!")

    yield

    # ========== SHUTDOWN ==========
    log.info("Shutting down SentiFi API...")

    try:
        shutdown_scheduler()
    except Exception as e:
        log.exception("Failed to stop scheduler: %s", e)

    try:
        await close_mongo_connection()
    except Exception as e:
        log.error("Error closing MongoDB connection: %s", e)

    log.info("Application shutdown complete!")


app = FastAPI(
    title="SentiFi API",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS or ["*"],
    allow_credentials=False,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggerMiddleware)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    log.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# ========== ROUTERS ==========
app.include_router(health.router, prefix=settings.API_PREFIX)
app.include_router(articles.router, prefix=settings.API_PREFIX)
app.include_router(sentiment.router, prefix=settings.API_PREFIX)


@app.get("/")
async def root():
    """Service banner"""
    return {
        "message": "SentiFi AI - crypto news sentiment API",
        "version": VERSION,
        "status": "running",
        "api_endpoints": {
            "health": f"{settings.API_PREFIX}/health",
            "articles": f"{settings.API_PREFIX}/articles, /articles/latest, /articles/{{id}}",
            "sentiment": f"{settings.API_PREFIX}/sentiment/stats, /trend, /sources, /assets, /categories, /chains, /keywords",
        },
    }
