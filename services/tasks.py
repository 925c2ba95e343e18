# dashboard/services/tasks.py
from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Optional

from sqlalchemy import delete, literal_column, update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from core.errors import NotFoundOrForbidden, StoreFailure, ValidationError
from core.log import get_logger
from core.settings import DASHBOARD
from core.statuses import CUSTOM_ID_PREFIX, SUBMITTED, normalize_status
from models.task import CustomTask, new_task_id
from storage.db import get_session
from utils.datetime_utils import now_iso


log = get_logger("tasks")

# camelCase keys accepted from the transport layer -> column names
FIELD_ALIASES = {
    "title": "title",
    "courseId": "course_id",
    "course_id": "course_id",
    "courseName": "course_name",
    "course_name": "course_name",
    "dueDate": "due_date",
    "due_date": "due_date",
    "dueText": "due_text",
    "due_text": "due_text",
    "status": "status",
}


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    cleaned = str(value).strip()
    return cleaned or None


def normalize_fields(fields: Mapping[str, Any]) -> Dict[str, Any]:
    """Map incoming keys to column names, dropping anything unknown."""

    result: Dict[str, Any] = {}
    for key, value in fields.items():
        column = FIELD_ALIASES.get(key)
        if column is not None:
            result[column] = value
    return result


def _prepare(values: Dict[str, Any]) -> Dict[str, Any]:
    title = _clean(values.get("title"))
    if not title:
        raise ValidationError("Task title is required")
    course_id = _clean(values.get("course_id")) or DASHBOARD.default_course_id
    course_name = _clean(values.get("course_name"))
    if not course_name and course_id == DASHBOARD.default_course_id:
        course_name = DASHBOARD.default_course_name
    if not course_name:
        raise ValidationError("Course name is required")
    due_date = values.get("due_date")
    if isinstance(due_date, str):
        due_date = due_date.strip() or None
    elif due_date is not None and not isinstance(due_date, dict):
        raise ValidationError("Due date must be a date string or a {year, month, day} record")
    return {
        "title": title,
        "course_id": course_id,
        "course_name": course_name,
        "due_date": due_date,
        "due_text": _clean(values.get("due_text")),
        "status": normalize_status(values.get("status")),
    }


class TaskStore:
    """Persistence for custom (locally authored) tasks.

    Writes are scoped by task id *and* owner in a single statement; a write that
    matches nothing raises :class:`NotFoundOrForbidden` without saying which.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session] = get_session,
        *,
        subtasks=None,
    ) -> None:
        self._session_factory = session_factory
        self._subtasks = subtasks

    def _task_id(self, value: Any) -> str:
        task_id = _clean(value)
        if task_id is None:
            return new_task_id()
        if not task_id.startswith(CUSTOM_ID_PREFIX):
            raise ValidationError(f"Custom task ids must start with {CUSTOM_ID_PREFIX!r}")
        return task_id

    def _fail(self, action: str, exc: SQLAlchemyError) -> StoreFailure:
        log.error("Failed to %s: %s", action, exc)
        return StoreFailure(f"Failed to {action}")

    def create_task(self, owner_email: str, fields: Mapping[str, Any]) -> CustomTask:
        if not _clean(owner_email):
            raise ValidationError("owner_email is required")
        values = _prepare(normalize_fields(fields))
        now = now_iso()
        task = CustomTask(
            id=self._task_id(fields.get("id")),
            owner_email=owner_email.strip(),
            created_at=fields.get("createdAt") or fields.get("created_at") or now,
            updated_at=now,
            **values,
        )
        try:
            with self._session_factory() as s:
                s.add(task)
                s.commit()
                s.refresh(task)
                s.expunge(task)
        except SQLAlchemyError as exc:
            raise self._fail("create task", exc) from exc
        log.info("Created task %s for %s", task.id, task.owner_email)
        return task

    def get_tasks(self, owner_email: str) -> List[CustomTask]:
        try:
            with self._session_factory() as s:
                stmt = (
                    select(CustomTask)
                    .where(CustomTask.owner_email == owner_email)
                    .order_by(CustomTask.created_at.desc(), literal_column("custom_tasks.rowid").desc())
                )
                return list(s.exec(stmt))
        except SQLAlchemyError as exc:
            raise self._fail("list tasks", exc) from exc

    def get_task(self, task_id: str) -> Optional[CustomTask]:
        try:
            with self._session_factory() as s:
                return s.get(CustomTask, task_id)
        except SQLAlchemyError as exc:
            raise self._fail("load task", exc) from exc

    def update_task(self, task_id: str, owner_email: str, fields: Mapping[str, Any]) -> CustomTask:
        """Replace the editable fields of a task (PUT semantics)."""

        values = _prepare(normalize_fields(fields))
        values["updated_at"] = now_iso()
        stmt = (
            update(CustomTask)
            .where(CustomTask.id == task_id, CustomTask.owner_email == owner_email)
            .values(**values)
        )
        self._write(stmt, "update task", task_id)
        log.info("Updated task %s", task_id)
        return self.get_task(task_id)

    def submit_task(self, task_id: str, owner_email: str) -> CustomTask:
        stmt = (
            update(CustomTask)
            .where(CustomTask.id == task_id, CustomTask.owner_email == owner_email)
            .values(status=SUBMITTED, due_text=DASHBOARD.submitted_due_text, updated_at=now_iso())
        )
        self._write(stmt, "submit task", task_id)
        log.info("Submitted task %s", task_id)
        return self.get_task(task_id)

    def delete_task(self, task_id: str, owner_email: str) -> None:
        stmt = delete(CustomTask).where(CustomTask.id == task_id, CustomTask.owner_email == owner_email)
        self._write(stmt, "delete task", task_id)
        if self._subtasks is not None:
            removed = self._subtasks.delete_for_task(task_id)
            log.info("Deleted task %s and %d subtasks", task_id, removed)
        else:
            log.info("Deleted task %s", task_id)

    def _write(self, stmt, action: str, task_id: str) -> int:
        try:
            with self._session_factory() as s:
                result = s.connection().execute(stmt)
                s.commit()
                affected = result.rowcount
        except SQLAlchemyError as exc:
            raise self._fail(action, exc) from exc
        if not affected:
            raise NotFoundOrForbidden(f"Task {task_id} not found")
        return affected


__all__ = ["TaskStore", "normalize_fields"]
