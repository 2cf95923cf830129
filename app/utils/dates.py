# app/utils/dates.py
from datetime import date, datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive datetimes; treat them as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def whole_days_between(start: date, end: date) -> int:
    """Whole days from start to end, never negative."""
    if isinstance(start, datetime) and isinstance(end, datetime):
        return max((as_utc(end) - as_utc(start)).days, 0)
    if isinstance(start, datetime):
        start = start.date()
    if isinstance(end, datetime):
        end = end.date()
    return max((end - start).days, 0)
