"""Database-aware helpers for SQL column defaults."""

from datetime import datetime, timezone

from sqlalchemy.sql import text


def timestamp_default():
    """Return a server-side timestamp default portable across dialects."""
    return text("CURRENT_TIMESTAMP")


def utcnow() -> datetime:
    """Client-side timestamp with sub-second precision (SQLite CURRENT_TIMESTAMP has none)."""
    return datetime.now(timezone.utc)


__all__ = ["timestamp_default", "utcnow"]
