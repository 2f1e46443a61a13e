# src/crew_deck/db/time.py
"""Time utilities for database models."""

from datetime import UTC, datetime, timedelta


def utcnow() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(UTC)


def hours_from(start: datetime, hours: float) -> datetime:
    """Return ``start`` shifted forward by a (possibly fractional) number of hours."""
    return start + timedelta(hours=hours)
