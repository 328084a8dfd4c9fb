from datetime import date, datetime, time, timezone
from typing import Optional, Tuple

from bson import ObjectId
from pydantic import TypeAdapter, ValidationError

_DATETIME = TypeAdapter(datetime)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Mongo hands back naive UTC datetimes; keep everything in that form."""
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def validate_article_id(raw: str) -> str:
    s = str(raw or "").strip()
    if not ObjectId.is_valid(s):
        raise ValueError("Invalid article id.")
    return s


def validate_date_range(
    start: Optional[datetime], end: Optional[datetime]
) -> Tuple[Optional[datetime], Optional[datetime]]:
    start, end = to_naive_utc(start), to_naive_utc(end)
    if start and end and start > end:
        raise ValueError("startDate must not be after endDate.")
    return start, end


def parse_date_bound(raw: Optional[str], *, end: bool = False) -> Optional[datetime]:
    """Parse an ISO date or datetime query value into naive UTC.

    A bare date (``2024-01-02``) covers the whole day: midnight as a start
    bound, the last instant of the day as an end bound.
    """
    s = str(raw or "").strip()
    if not s:
        return None
    if len(s) == 10:
        try:
            day = date.fromisoformat(s)
        except ValueError:
            day = None
        if day is not None:
            return datetime.combine(day, time.max if end else time.min)
    try:
        return to_naive_utc(_DATETIME.validate_python(s))
    except ValidationError as e:
        raise ValueError(f"Invalid date: {s!r}") from e
