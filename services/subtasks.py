# dashboard/services/subtasks.py
from __future__ import annotations

import re
from typing import Callable, Iterable, List, Optional

from sqlalchemy import delete, literal_column, not_, update
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from core.errors import NotFoundOrForbidden, StoreFailure, ValidationError
from core.log import get_logger
from models.subtask import Subtask
from storage.db import get_session
from utils.datetime_utils import now_iso


log = get_logger("subtasks")

TEXT_MAX = 500
_RE_BULLET = re.compile(r"^\s*(?:[-*•]|\d+[.)]|\[\s?[xX ]?\])\s*")


def _clean_text(text: Optional[str]) -> str:
    cleaned = (text or "").strip()
    if not cleaned:
        raise ValidationError("Subtask text is required")
    if len(cleaned) > TEXT_MAX:
        raise ValidationError(f"Subtask text must be at most {TEXT_MAX} characters")
    return cleaned


def _require_task_id(task_id: Optional[str]) -> str:
    cleaned = (task_id or "").strip()
    if not cleaned:
        raise ValidationError("task_id is required")
    return cleaned


def split_checklist(raw: Optional[str]) -> List[str]:
    """Split newline-separated checklist text into item strings.

    Leading bullets, numbering and checkbox markers are stripped; blank lines dropped.
    """

    items = []
    for line in (raw or "").splitlines():
        item = _RE_BULLET.sub("", line, count=1).strip()
        if item:
            items.append(item[:TEXT_MAX])
    return items


class SubtaskStore:
    """Checklist items keyed by ``(subtask id, task id)``.

    ``task_id`` is taken as given: it may name a custom task or a classroom
    assignment, and is never checked against ``custom_tasks``.
    """

    def __init__(self, session_factory: Callable[[], Session] = get_session) -> None:
        self._session_factory = session_factory

    def _fail(self, action: str, exc: SQLAlchemyError) -> StoreFailure:
        log.error("Failed to %s: %s", action, exc)
        return StoreFailure(f"Failed to {action}")

    def create_subtask(self, task_id: str, text: str, completed: bool = False) -> Subtask:
        return self.create_many(task_id, [text], completed=completed)[0]

    def create_many(self, task_id: str, texts: Iterable[str], *, completed: bool = False) -> List[Subtask]:
        task_id = _require_task_id(task_id)
        rows = []
        for text in texts:
            now = now_iso()
            rows.append(
                Subtask(task_id=task_id, text=_clean_text(text), completed=bool(completed), created_at=now, updated_at=now)
            )
        if not rows:
            return []
        try:
            with self._session_factory() as s:
                for row in rows:
                    s.add(row)
                s.commit()
                for row in rows:
                    s.refresh(row)
                    s.expunge(row)
        except SQLAlchemyError as exc:
            raise self._fail("create subtask", exc) from exc
        log.debug("Created %d subtasks for %s", len(rows), task_id)
        return rows

    def add_checklist(self, task_id: str, raw_text: Optional[str]) -> List[Subtask]:
        """Insert one subtask per line of generated checklist text."""

        return self.create_many(task_id, split_checklist(raw_text))

    def get_subtasks(self, task_id: str) -> List[Subtask]:
        try:
            with self._session_factory() as s:
                stmt = (
                    select(Subtask)
                    .where(Subtask.task_id == task_id)
                    .order_by(Subtask.created_at.asc(), literal_column("subtasks.rowid").asc())
                )
                return list(s.exec(stmt))
        except SQLAlchemyError as exc:
            raise self._fail("list subtasks", exc) from exc

    def get_subtask(self, subtask_id: str) -> Optional[Subtask]:
        try:
            with self._session_factory() as s:
                return s.get(Subtask, subtask_id)
        except SQLAlchemyError as exc:
            raise self._fail("load subtask", exc) from exc

    def update_subtask(
        self,
        subtask_id: str,
        task_id: str,
        *,
        text: Optional[str] = None,
        completed: Optional[bool] = None,
    ) -> Subtask:
        values = {"updated_at": now_iso()}
        if text is not None:
            values["text"] = _clean_text(text)
        if completed is not None:
            values["completed"] = bool(completed)
        stmt = (
            update(Subtask)
            .where(Subtask.id == subtask_id, Subtask.task_id == task_id)
            .values(**values)
        )
        self._write(stmt, "update subtask", subtask_id)
        return self.get_subtask(subtask_id)

    def toggle_subtask(self, subtask_id: str, task_id: str) -> Subtask:
        stmt = (
            update(Subtask)
            .where(Subtask.id == subtask_id, Subtask.task_id == task_id)
            .values(completed=not_(Subtask.completed), updated_at=now_iso())
        )
        self._write(stmt, "toggle subtask", subtask_id)
        return self.get_subtask(subtask_id)

    def delete_subtask(self, subtask_id: str, task_id: str) -> None:
        stmt = delete(Subtask).where(Subtask.id == subtask_id, Subtask.task_id == task_id)
        self._write(stmt, "delete subtask", subtask_id)

    def delete_for_task(self, task_id: str) -> int:
        stmt = delete(Subtask).where(Subtask.task_id == task_id)
        try:
            with self._session_factory() as s:
                result = s.connection().execute(stmt)
                s.commit()
                return result.rowcount
        except SQLAlchemyError as exc:
            raise self._fail("delete subtasks", exc) from exc

    def _write(self, stmt, action: str, subtask_id: str) -> int:
        try:
            with self._session_factory() as s:
                result = s.connection().execute(stmt)
                s.commit()
                affected = result.rowcount
        except SQLAlchemyError as exc:
            raise self._fail(action, exc) from exc
        if not affected:
            raise NotFoundOrForbidden(f"Subtask {subtask_id} not found")
        return affected


__all__ = ["SubtaskStore", "split_checklist"]
