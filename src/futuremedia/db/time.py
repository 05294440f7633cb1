# src/futuremedia/db/time.py
"""Clock helpers shared by models and services.

Timestamps are written timezone-aware; SQLite hands them back naive, which
still orders and compares correctly in SQL.
"""

from datetime import UTC, datetime, timedelta


def utcnow() -> datetime:
    return datetime.now(UTC)


def window_start(span: timedelta) -> datetime:
    """Start of the trailing window of length `span` ending now."""
    return utcnow() - span
