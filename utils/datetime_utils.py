"""Utilities for timestamps and calendar-day arithmetic."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional, Union

UTC = timezone.utc


def utc_now() -> datetime:
    return datetime.now(UTC)


def now_iso() -> str:
    """Current UTC time as an ISO 8601 string with microseconds."""

    return utc_now().isoformat(timespec="microseconds")


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def to_day(value: Union[date, datetime, None]) -> Optional[date]:
    """Truncate ``value`` to its calendar day (local wall-clock for datetimes)."""

    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    return value


def local_today() -> date:
    return datetime.now().date()


__all__ = [
    "UTC",
    "ensure_utc",
    "local_today",
    "now_iso",
    "to_day",
    "utc_now",
]
