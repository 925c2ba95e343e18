"""Due-date parsing and bucketing.

Assignment due dates arrive in two shapes: an ISO calendar-date string (custom tasks,
demo fixtures) or a ``{"year", "month", "day"}`` record (the classroom service).
:func:`parse_due_date` is the only place either shape is turned into a ``date``;
everything that compares due dates goes through it.
"""
from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any, Mapping, Optional, Union

from utils.datetime_utils import to_day

TODAY = "today"
THIS_WEEK = "thisWeek"
LATER = "later"
NONE = "none"

BUCKETS = (TODAY, THIS_WEEK, LATER, NONE)

# ISO weekday numbering: Monday=1 ... Sunday=7.
LAST_DAY_OF_WEEK = 7

DueDateValue = Union[str, Mapping[str, Any], date, None]


def _parse_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _parse_date_string(text: str) -> Optional[date]:
    text = text.strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def parse_due_date(value: DueDateValue) -> Optional[date]:
    """Turn either due-date shape into a calendar date, or ``None`` for "no date"."""

    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return _parse_date_string(value)
    if isinstance(value, Mapping):
        year = _parse_int(value.get("year"))
        month = _parse_int(value.get("month"))
        day = _parse_int(value.get("day"))
        if not (year and month and day):
            return None
        try:
            return date(year, month, day)
        except ValueError:
            return None
    return None


def days_until_end_of_week(today: date) -> int:
    return LAST_DAY_OF_WEEK - today.isoweekday()


def classify(due_date: DueDateValue, now: Union[date, datetime]) -> str:
    """Bucket ``due_date`` relative to ``now``.

    Status-agnostic: callers drop submitted work themselves before counting
    anything as "due soon". Overdue dates fall into :data:`LATER`.
    """

    due = parse_due_date(due_date)
    if due is None:
        return NONE
    today = to_day(now)
    days_diff = (due - today).days
    if days_diff == 0:
        return TODAY
    if 0 < days_diff <= days_until_end_of_week(today):
        return THIS_WEEK
    return LATER


def within_days(due: Optional[date], start: date, days: int) -> bool:
    """True when ``due`` falls in ``[start, start + days]``."""

    if due is None:
        return False
    return start <= due <= start + timedelta(days=days)


__all__ = [
    "TODAY",
    "THIS_WEEK",
    "LATER",
    "NONE",
    "BUCKETS",
    "DueDateValue",
    "classify",
    "days_until_end_of_week",
    "parse_due_date",
    "within_days",
]
