"""Timestamp helpers for ORM defaults."""

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime.

    Used as the ``default`` for every ``created_at`` column.
    """
    return datetime.now(UTC)
