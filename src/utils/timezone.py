"""UTC helpers shared by entities and services.

Session timestamps are stored as timezone-aware UTC values. Some backends
(SQLite in the test suite) hand them back naive, so every comparison goes
through `as_utc`.
"""

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
