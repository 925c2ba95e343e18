# dashboard/models/course_color.py
from __future__ import annotations

from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from utils.datetime_utils import now_iso


class CourseColor(SQLModel, table=True):
    __tablename__ = "course_colors"
    __table_args__ = (UniqueConstraint("owner_email", "course_name", name="ux_course_colors_owner_course"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    owner_email: str = Field(index=True)
    course_name: str = Field(index=True)
    color: str
    created_at: str = Field(default_factory=now_iso)
    updated_at: str = Field(default_factory=now_iso)


__all__ = ["CourseColor"]
