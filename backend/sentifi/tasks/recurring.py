# backend/sentifi/tasks/recurring.py
from __future__ import annotations
import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Awaitable, Callable, Optional

from sentifi.logger import get_logger
from sentifi.utils.validators import utcnow

log = get_logger(__name__)


@dataclass
class RecurringTask:
    """A coroutine job that runs once right away, then every ``interval``.

    ``run_once`` is what the scheduler calls; tests call it directly. A failing
    run is logged and recorded, and the next run happens as scheduled.
    """
    name: str
    func: Callable[[], Awaitable[Any]]
    interval: timedelta
    run_immediately: bool = True

    runs: int = field(default=0, init=False)
    last_started: Optional[datetime] = field(default=None, init=False)
    last_duration_ms: Optional[int] = field(default=None, init=False)
    last_result: Any = field(default=None, init=False)
    last_error: Optional[str] = field(default=None, init=False)

    async def run_once(self) -> Any:
        self.runs += 1
        self.last_started = utcnow()
        t0 = time.perf_counter()
        try:
            self.last_result = await self.func()
            self.last_error = None
        except Exception as e:
            log.exception("[SCHEDULE] task %s failed: %s", self.name, e)
            self.last_result = None
            self.last_error = str(e)
        finally:
            self.last_duration_ms = int((time.perf_counter() - t0) * 1000)
        return self.last_result

    def first_run_time(self, now: Optional[datetime] = None) -> datetime:
        now = now or datetime.now()
        return now if self.run_immediately else now + self.interval

    def status(self) -> dict:
        return {
            "name": self.name,
            "interval_seconds": int(self.interval.total_seconds()),
            "runs": self.runs,
            "last_started": self.last_started,
            "last_duration_ms": self.last_duration_ms,
            "last_error": self.last_error,
        }
