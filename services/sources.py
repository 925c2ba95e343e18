"""Shapes exchanged with remote assignment sources."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol


@dataclass
class CourseAssignments:
    """Assignments of one course, in fetch order.

    ``error`` is set when the course's assignments could not be loaded; the
    ``assignments`` list is then whatever arrived (usually empty).
    """

    course_id: str
    course_name: Optional[str]
    assignments: List[Dict[str, Any]] = field(default_factory=list)
    error: Optional[str] = None


@dataclass
class RemoteSnapshot:
    courses: List[CourseAssignments] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def errors(self) -> List[str]:
        found = [self.error] if self.error else []
        found.extend(f"{c.course_id}: {c.error}" for c in self.courses if c.error)
        return found


class AssignmentSource(Protocol):
    def fetch(self, ctx) -> RemoteSnapshot:
        ...

    def list_courses(self, ctx) -> List[Dict[str, Any]]:
        ...


__all__ = ["AssignmentSource", "CourseAssignments", "RemoteSnapshot"]
