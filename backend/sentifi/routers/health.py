# backend/sentifi/routers/health.py
from fastapi import APIRouter

from sentifi.core.config import settings
from sentifi.utils.validators import utcnow

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """Liveness probe; dependency problems degrade the status but never fail the request"""
    from sentifi.db import get_db
    from sentifi.tasks.scheduler import get_scheduler_status

    health_status = {
        "status": "ok",
        "timestamp": utcnow().isoformat() + "Z",
        "environment": settings.ENV,
        "database": "unknown",
        "scheduler": "unknown",
    }

    try:
        await get_db().command("ping")
        health_status["database"] = "healthy"
    except Exception:
        health_status["database"] = "unhealthy"
        health_status["status"] = "degraded"

    try:
        health_status["scheduler"] = "running" if get_scheduler_status().get("running") else "stopped"
    except Exception:
        health_status["scheduler"] = "error"

    return health_status
