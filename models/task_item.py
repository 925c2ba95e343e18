"""Transient, merged-view task record."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any, Dict, Optional

from core.statuses import CUSTOM, REMOTE, SUBMITTED
from utils.due_dates import parse_due_date


@dataclass
class TaskItem:
    """One row of the merged dashboard view.

    ``due_date`` keeps the shape it arrived in (string or ``{year, month, day}``);
    ``due`` is that value parsed once, at construction, for all comparisons.
    """

    id: str
    course_id: Optional[str]
    course_name: str
    title: str
    status: str
    origin: str
    due_date: Any = None
    due_text: Optional[str] = None
    owner_email: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    due: Optional[date] = field(init=False, default=None, compare=False)

    def __post_init__(self) -> None:
        self.due = parse_due_date(self.due_date)

    @property
    def is_custom(self) -> bool:
        return self.origin == CUSTOM

    @property
    def is_submitted(self) -> bool:
        return self.status == SUBMITTED

    def with_status(self, status: str, *, due_text: Optional[str] = None) -> "TaskItem":
        return replace(self, status=status, due_text=due_text if due_text is not None else self.due_text)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "ownerEmail": self.owner_email,
            "courseId": self.course_id,
            "courseName": self.course_name,
            "title": self.title,
            "dueDate": self.due_date,
            "dueText": self.due_text,
            "status": self.status,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "origin": self.origin,
            "isCustom": self.is_custom,
        }

    @classmethod
    def from_custom(cls, task) -> "TaskItem":
        return cls(
            id=task.id,
            owner_email=task.owner_email,
            course_id=task.course_id,
            course_name=task.course_name,
            title=task.title,
            due_date=task.due_date,
            due_text=task.due_text,
            status=task.status,
            created_at=task.created_at,
            updated_at=task.updated_at,
            origin=CUSTOM,
        )


__all__ = ["TaskItem", "CUSTOM", "REMOTE"]
