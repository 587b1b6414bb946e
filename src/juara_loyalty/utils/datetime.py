"""Date-time helpers."""

from datetime import datetime, timedelta, timezone


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""

    return datetime.now(timezone.utc)


def expires_in(minutes: int, now: datetime | None = None) -> datetime:
    """Return the UTC instant ``minutes`` after ``now``."""

    current = now.astimezone(timezone.utc) if now else utcnow()
    return current + timedelta(minutes=minutes)
