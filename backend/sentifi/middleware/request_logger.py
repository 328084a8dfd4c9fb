# backend/sentifi/middleware/request_logger.py
import time
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from sentifi.logger import get_logger

log = get_logger(__name__)

# aggregation endpoints scan whole windows; flag the slow ones
SLOW_REQUEST_MS = 1000


class RequestLoggerMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response = None
        try:
            response = await call_next(request)
            return response
        finally:
            ms = int((time.perf_counter() - start) * 1000)
            status = getattr(response, "status_code", 500)
            target = request.url.path + (f"?{request.url.query}" if request.url.query else "")
            if response is not None:
                response.headers["X-Response-Time-Ms"] = str(ms)

            if status >= 500:
                log.error("%s %s -> %s %dms", request.method, target, status, ms)
            elif ms >= SLOW_REQUEST_MS:
                log.warning("SLOW %s %s -> %s %dms", request.method, target, status, ms)
            else:
                log.info("%s %s -> %s %dms", request.method, target, status, ms)
