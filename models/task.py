# dashboard/models/task.py
from __future__ import annotations

import uuid
from typing import Any, Optional

from sqlalchemy import Column
from sqlmodel import Field, SQLModel

from core.statuses import CUSTOM_ID_PREFIX, DEFAULT_STATUS
from storage.types import DueDateType
from utils.datetime_utils import now_iso


def new_task_id() -> str:
    return f"{CUSTOM_ID_PREFIX}{uuid.uuid4().hex}"


class CustomTask(SQLModel, table=True):
    __tablename__ = "custom_tasks"

    id: str = Field(default_factory=new_task_id, primary_key=True)
    owner_email: str = Field(index=True)
    title: str
    course_id: Optional[str] = None
    course_name: str
    due_date: Optional[Any] = Field(default=None, sa_column=Column(DueDateType, nullable=True))
    due_text: Optional[str] = None
    status: str = Field(default=DEFAULT_STATUS, index=True)
    created_at: str = Field(default_factory=now_iso)
    updated_at: str = Field(default_factory=now_iso)


__all__ = ["CustomTask", "new_task_id"]
