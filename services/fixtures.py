"""Demo courses and assignments used when no classroom account is connected."""
from __future__ import annotations

from copy import deepcopy
from typing import Dict, List

from core.statuses import IN_PROGRESS, PENDING, SUBMITTED
from services.sources import CourseAssignments, RemoteSnapshot


FIXTURE_COURSES: List[Dict[str, str]] = [
    {"id": "course_math", "name": "Mathematics", "color": "#2563eb"},
    {"id": "course_history", "name": "History", "color": "#9333ea"},
    {"id": "course_english", "name": "English", "color": "#15803d"},
]

FIXTURE_ASSIGNMENTS: List[Dict[str, str]] = [
    {
        "id": "a1",
        "courseId": "course_math",
        "courseName": "Mathematics",
        "title": "Fractions worksheet",
        "dueText": "Tomorrow",
        "dueDate": "2026-01-12",
        "status": PENDING,
    },
    {
        "id": "a2",
        "courseId": "course_math",
        "courseName": "Mathematics",
        "title": "Practice exercises – decimals",
        "dueText": "In 3 days",
        "dueDate": "2026-01-15",
        "status": IN_PROGRESS,
    },
    {
        "id": "a3",
        "courseId": "course_history",
        "courseName": "History",
        "title": "Short essay: Roman Empire",
        "dueText": "Friday",
        "dueDate": "2026-01-14",
        "status": PENDING,
    },
    {
        "id": "a4",
        "courseId": "course_english",
        "courseName": "English",
        "title": "Reading comprehension submission",
        "dueText": "Submitted",
        "dueDate": "2026-01-09",
        "status": SUBMITTED,
    },
]


class FixtureSource:
    """Serves the demo data set in the same shape as the classroom source."""

    def __init__(self, courses=None, assignments=None) -> None:
        self.courses = deepcopy(courses if courses is not None else FIXTURE_COURSES)
        self.assignments = deepcopy(assignments if assignments is not None else FIXTURE_ASSIGNMENTS)

    def list_courses(self, ctx=None) -> List[Dict[str, str]]:
        return deepcopy(self.courses)

    def fetch(self, ctx=None) -> RemoteSnapshot:
        groups = []
        for course in self.courses:
            items = [
                {
                    "id": a["id"],
                    "title": a["title"],
                    "dueDate": a.get("dueDate"),
                    "dueText": a.get("dueText"),
                    "status": a.get("status"),
                    "courseName": a.get("courseName"),
                }
                for a in self.assignments
                if a["courseId"] == course["id"]
            ]
            groups.append(CourseAssignments(course_id=course["id"], course_name=course["name"], assignments=items))
        return RemoteSnapshot(courses=groups)


__all__ = ["FIXTURE_COURSES", "FIXTURE_ASSIGNMENTS", "FixtureSource"]
