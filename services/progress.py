"""Summary counts and derived lists over the merged task view.

Every function here works on already-merged :class:`TaskItem` sequences and takes
``now`` explicitly. Exclusion of submitted work happens here, at each call site,
because :func:`utils.due_dates.classify` ignores status.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Union

from core.settings import DASHBOARD
from core.statuses import SUBMITTED, is_open
from models.task_item import TaskItem
from utils.datetime_utils import to_day
from utils.due_dates import THIS_WEEK, TODAY, classify, within_days


@dataclass(frozen=True)
class Summary:
    total: int
    completed: int
    pending: int
    progress_percent: int
    due_today: int
    due_this_week: int

    def as_dict(self) -> Dict[str, int]:
        return {
            "total": self.total,
            "completed": self.completed,
            "pending": self.pending,
            "progressPercent": self.progress_percent,
            "dueToday": self.due_today,
            "dueThisWeek": self.due_this_week,
        }


def _percent(part: int, whole: int) -> int:
    if whole <= 0:
        return 0
    # halves round up
    return int(part * 100 / whole + 0.5)


def summarize(tasks: Iterable[TaskItem], now: Union[date, datetime]) -> Summary:
    tasks = list(tasks)
    total = len(tasks)
    completed = sum(1 for t in tasks if t.status == SUBMITTED)
    pending = sum(1 for t in tasks if is_open(t.status))
    due_today = 0
    due_this_week = 0
    for task in tasks:
        if task.status == SUBMITTED:
            continue
        bucket = classify(task.due, now)
        if bucket == TODAY:
            due_today += 1
            due_this_week += 1
        elif bucket == THIS_WEEK:
            due_this_week += 1
    return Summary(
        total=total,
        completed=completed,
        pending=pending,
        progress_percent=_percent(completed, total),
        due_today=due_today,
        due_this_week=due_this_week,
    )


def _due_key(task: TaskItem):
    # undated tasks sort after dated ones
    return (task.due is None, task.due or date.min)


def get_pending_assignments(tasks: Iterable[TaskItem]) -> List[TaskItem]:
    return sorted((t for t in tasks if is_open(t.status)), key=_due_key)


def get_upcoming_deadlines(
    tasks: Iterable[TaskItem],
    now: Union[date, datetime],
    *,
    days: Optional[int] = None,
) -> List[TaskItem]:
    today = to_day(now)
    window = DASHBOARD.upcoming_window_days if days is None else days
    upcoming = [
        t for t in tasks
        if t.status != SUBMITTED and within_days(t.due, today, window)
    ]
    return sorted(upcoming, key=lambda t: t.due)


def get_recently_submitted_work(
    tasks: Iterable[TaskItem],
    now: Union[date, datetime],
    *,
    days: Optional[int] = None,
    limit: Optional[int] = None,
) -> List[TaskItem]:
    """Submitted work whose due date is within the trailing window, newest first.

    There is no submission timestamp, so the due date stands in for it. Undated
    submitted tasks are included and sort last.
    """

    today = to_day(now)
    window = DASHBOARD.recent_window_days if days is None else days
    cap = DASHBOARD.recent_limit if limit is None else limit
    cutoff = today - timedelta(days=window)
    recent = [
        t for t in tasks
        if t.status == SUBMITTED and (t.due is None or t.due >= cutoff)
    ]
    recent.sort(key=lambda t: (t.due is None, -(t.due.toordinal()) if t.due else 0))
    return recent[:cap]


__all__ = [
    "Summary",
    "get_pending_assignments",
    "get_recently_submitted_work",
    "get_upcoming_deadlines",
    "summarize",
]
