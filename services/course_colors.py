# dashboard/services/course_colors.py
from __future__ import annotations

import re
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from sqlalchemy import delete
from sqlalchemy.dialects.sqlite import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from core.errors import NotFoundOrForbidden, StoreFailure, ValidationError
from core.log import get_logger
from core.settings import DASHBOARD
from models.course_color import CourseColor
from services.fixtures import FIXTURE_COURSES
from storage.db import get_session
from utils.datetime_utils import now_iso


log = get_logger("colors")

COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")
_HEX_RE = re.compile(r"^#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})$", re.IGNORECASE)

BLACK = "#000000"
WHITE = "#ffffff"


def hex_to_rgb(value: Optional[str]) -> Optional[tuple[int, int, int]]:
    match = _HEX_RE.match((value or "").strip())
    if not match:
        return None
    return tuple(int(part, 16) for part in match.groups())  # type: ignore[return-value]


def _linearize(channel: int) -> float:
    c = channel / 255
    return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4


def relative_luminance(value: Optional[str]) -> float:
    """WCAG relative luminance of a ``#RRGGBB`` color; malformed input counts as 0."""

    rgb = hex_to_rgb(value)
    if rgb is None:
        return 0.0
    r, g, b = (_linearize(channel) for channel in rgb)
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def contrasting_text(bg_hex: Optional[str]) -> str:
    """Pick black or white text for a background color."""

    if relative_luminance(bg_hex) >= DASHBOARD.contrast_threshold:
        return BLACK
    return WHITE


class CourseColorStore:
    """Per-user color preference for each course name."""

    def __init__(self, session_factory: Callable[[], Session] = get_session) -> None:
        self._session_factory = session_factory

    def get_color(self, owner_email: str, course_name: str) -> Optional[str]:
        try:
            with self._session_factory() as session:
                stmt = select(CourseColor.color).where(
                    CourseColor.owner_email == owner_email,
                    CourseColor.course_name == course_name,
                )
                return session.exec(stmt).first()
        except SQLAlchemyError as exc:
            log.error("Failed to load course color: %s", exc)
            raise StoreFailure("Failed to load course color") from exc

    def get_colors(self, owner_email: str) -> Dict[str, str]:
        try:
            with self._session_factory() as session:
                stmt = select(CourseColor).where(CourseColor.owner_email == owner_email)
                return {row.course_name: row.color for row in session.exec(stmt)}
        except SQLAlchemyError as exc:
            log.error("Failed to list course colors: %s", exc)
            raise StoreFailure("Failed to list course colors") from exc

    def set_color(self, owner_email: str, course_name: str, color: str) -> str:
        owner_email = (owner_email or "").strip()
        course_name = (course_name or "").strip()
        color = (color or "").strip()
        if not owner_email or not course_name:
            raise ValidationError("owner_email and course_name are required")
        if not COLOR_RE.match(color):
            raise ValidationError("Color must be in #RRGGBB format")
        now = now_iso()
        stmt = insert(CourseColor).values(
            owner_email=owner_email,
            course_name=course_name,
            color=color,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["owner_email", "course_name"],
            set_={"color": stmt.excluded.color, "updated_at": stmt.excluded.updated_at},
        )
        try:
            with self._session_factory() as session:
                session.connection().execute(stmt)
                session.commit()
        except SQLAlchemyError as exc:
            log.error("Failed to save course color: %s", exc)
            raise StoreFailure("Failed to save course color") from exc
        return color

    def delete_color(self, owner_email: str, course_name: str) -> None:
        stmt = delete(CourseColor).where(
            CourseColor.owner_email == owner_email,
            CourseColor.course_name == course_name,
        )
        try:
            with self._session_factory() as session:
                result = session.connection().execute(stmt)
                session.commit()
        except SQLAlchemyError as exc:
            log.error("Failed to delete course color: %s", exc)
            raise StoreFailure("Failed to delete course color") from exc
        if not result.rowcount:
            raise NotFoundOrForbidden(f"No color stored for {course_name}")


def _find_color(courses: Iterable[Mapping[str, Any]], course_id: str) -> Optional[str]:
    for course in courses or ():
        if course.get("id") == course_id and course.get("color"):
            return course["color"]
    return None


def _find_name(courses: Iterable[Mapping[str, Any]], course_id: str) -> Optional[str]:
    for course in courses or ():
        if course.get("id") == course_id:
            return course.get("name")
    return None


class CourseColorResolver:
    """Decide the display color of a course.

    Lookup order: the owner's stored preference for the course name, the demo course
    table, the live course list, then the default color.
    """

    def __init__(
        self,
        courses: Optional[List[Mapping[str, Any]]] = None,
        *,
        fixture_courses: Optional[List[Mapping[str, Any]]] = None,
        store: Optional[CourseColorStore] = None,
        default: str = DASHBOARD.default_course_color,
    ) -> None:
        self.courses = list(courses or [])
        self.fixture_courses = list(FIXTURE_COURSES if fixture_courses is None else fixture_courses)
        self.store = store
        self.default = default

    def resolve(
        self,
        course_id: Optional[str],
        *,
        owner_email: Optional[str] = None,
        course_name: Optional[str] = None,
    ) -> str:
        if self.store is not None and owner_email:
            name = course_name or _find_name(self.fixture_courses, course_id) or _find_name(self.courses, course_id)
            if name:
                stored = self.store.get_color(owner_email, name)
                if stored:
                    return stored
        return (
            _find_color(self.fixture_courses, course_id)
            or _find_color(self.courses, course_id)
            or self.default
        )

    def text_color(self, course_id: Optional[str], **kwargs) -> str:
        return contrasting_text(self.resolve(course_id, **kwargs))


__all__ = [
    "CourseColorResolver",
    "CourseColorStore",
    "contrasting_text",
    "hex_to_rgb",
    "relative_luminance",
]
