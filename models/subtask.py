# dashboard/models/subtask.py
from __future__ import annotations

import uuid

from sqlmodel import Field, SQLModel

from utils.datetime_utils import now_iso


def new_subtask_id() -> str:
    return f"subtask_{uuid.uuid4().hex}"


class Subtask(SQLModel, table=True):
    """Checklist item attached to a task id of either origin.

    ``task_id`` deliberately has no foreign key: classroom assignment ids never exist
    in ``custom_tasks``.
    """

    __tablename__ = "subtasks"

    id: str = Field(default_factory=new_subtask_id, primary_key=True)
    task_id: str = Field(index=True)
    text: str
    completed: bool = Field(default=False)
    created_at: str = Field(default_factory=now_iso)
    updated_at: str = Field(default_factory=now_iso)


__all__ = ["Subtask", "new_subtask_id"]
