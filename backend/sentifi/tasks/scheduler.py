# backend/sentifi/tasks/scheduler.py
from __future__ import annotations
from datetime import timedelta
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from sentifi.core.config import settings
from sentifi.db import get_repository
from sentifi.db.repositories import ArticleRepository
from sentifi.logger import get_logger
from sentifi.services.ingestion import CycleSummary, run_ingestion_cycle
from sentifi.tasks.recurring import RecurringTask

log = get_logger(__name__)
_scheduler: AsyncIOScheduler | None = None


async def job_ingest_news() -> CycleSummary:
    """Fetch, dedupe, classify and store the latest feed items"""
    summary = await run_ingestion_cycle(get_repository(ArticleRepository))
    log.info("[SCHEDULE] ingestion summary: %s", summary.as_dict())
    return summary


# One cycle must finish before the next starts; max_instances=1 below makes
# APScheduler skip a tick instead of overlapping when a cycle runs long.
ingestion_task = RecurringTask(
    name="news_ingestion",
    func=job_ingest_news,
    interval=timedelta(minutes=settings.INGEST_INTERVAL_MINUTES),
    run_immediately=settings.INGEST_ON_STARTUP,
)


def start_scheduler(task: RecurringTask = ingestion_task) -> Optional[AsyncIOScheduler]:
    """Start the ingestion schedule on the running event loop"""
    global _scheduler
    if _scheduler:
        return _scheduler
    if not settings.SCHEDULER_ENABLED:
        log.info("[SCHEDULE] disabled by SCHEDULER_ENABLED")
        return None

    _scheduler = AsyncIOScheduler()
    _scheduler.add_job(
        task.run_once,
        "interval",
        seconds=int(task.interval.total_seconds()),
        next_run_time=task.first_run_time(),
        id=task.name,
        max_instances=1,
        coalesce=True,
    )
    _scheduler.start()
    log.info("[SCHEDULE] started: %s every %s (run on startup=%s)",
             task.name, task.interval, task.run_immediately)
    return _scheduler


def shutdown_scheduler():
    """Shutdown scheduler"""
    global _scheduler
    if _scheduler:
        _scheduler.shutdown(wait=False)
        log.info("[SCHEDULE] stopped")
        _scheduler = None


async def trigger_ingestion() -> Optional[CycleSummary]:
    """Run one ingestion cycle now, outside the schedule"""
    return await ingestion_task.run_once()


def get_scheduler_status():
    """Get current scheduler status and job info"""
    if not _scheduler:
        return {"running": False, "jobs": [], "task": ingestion_task.status()}

    jobs = []
    for job in _scheduler.get_jobs():
        jobs.append({
            "id": job.id,
            "next_run": job.next_run_time,
            "trigger": str(job.trigger),
        })

    return {
        "running": _scheduler.running,
        "jobs": jobs,
        "task": ingestion_task.status(),
    }
