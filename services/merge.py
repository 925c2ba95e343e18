"""Combine classroom (or demo) assignments with custom tasks into one view."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from core.settings import DASHBOARD
from core.statuses import REMOTE, REMOTE_ID_PREFIX, normalize_status
from core.errors import ValidationError
from models.task import CustomTask
from models.task_item import TaskItem
from services.sources import RemoteSnapshot


@dataclass
class MergeResult:
    tasks: List[TaskItem] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


def remote_task_id(assignment_id: str) -> str:
    assignment_id = str(assignment_id)
    if assignment_id.startswith(REMOTE_ID_PREFIX):
        return assignment_id
    return f"{REMOTE_ID_PREFIX}{assignment_id}"


def _remote_status(value: Optional[str]) -> str:
    try:
        return normalize_status(value)
    except ValidationError:
        return normalize_status(None)


def remote_items(snapshot: Optional[RemoteSnapshot]) -> List[TaskItem]:
    """Normalize a snapshot into ``TaskItem`` records, preserving fetch order."""

    items: List[TaskItem] = []
    if snapshot is None:
        return items
    for group in snapshot.courses:
        for assignment in group.assignments:
            items.append(
                TaskItem(
                    id=remote_task_id(assignment.get("id")),
                    course_id=group.course_id,
                    course_name=(
                        assignment.get("courseName")
                        or group.course_name
                        or DASHBOARD.unknown_course_name
                    ),
                    title=assignment.get("title") or "",
                    due_date=assignment.get("dueDate"),
                    due_text=assignment.get("dueText"),
                    status=_remote_status(assignment.get("status")),
                    origin=REMOTE,
                )
            )
    return items


def merge_tasks(
    owner_email: str,
    snapshot: Optional[RemoteSnapshot],
    custom_tasks: Iterable[CustomTask],
) -> MergeResult:
    """Remote tasks first (grouped by course, fetch order), then custom tasks as stored.

    Custom tasks belonging to another owner are skipped. Due dates keep their
    original shape.
    """

    result = MergeResult(tasks=remote_items(snapshot))
    if snapshot is not None:
        result.errors.extend(snapshot.errors)
    for task in custom_tasks:
        if task.owner_email != owner_email:
            continue
        result.tasks.append(TaskItem.from_custom(task))
    return result


__all__ = ["MergeResult", "merge_tasks", "remote_items", "remote_task_id"]
