"""Per-session merged task view."""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional, Union

from core.auth import AuthContext
from core.errors import NotFoundOrForbidden
from core.log import get_logger
from core.settings import DASHBOARD
from core.statuses import SUBMITTED
from models.task_item import TaskItem
from services import progress
from services.classroom import ClassroomSource
from services.course_colors import CourseColorResolver, CourseColorStore
from services.fixtures import FixtureSource
from services.merge import MergeResult, merge_tasks
from services.sources import AssignmentSource
from services.subtasks import SubtaskStore
from services.tasks import TaskStore
from utils.due_dates import classify


log = get_logger("board")

Now = Union[date, datetime]


class TaskBoard:
    """The merged view of one user's classroom assignments and custom tasks.

    The view lives only as long as the board. Submitting a custom task writes
    through to :class:`TaskStore`; submitting a classroom assignment only changes
    this in-memory view, the classroom service is never written to.
    """

    def __init__(
        self,
        ctx: AuthContext,
        *,
        source: Optional[AssignmentSource] = None,
        tasks: Optional[TaskStore] = None,
        subtasks: Optional[SubtaskStore] = None,
        colors: Optional[CourseColorStore] = None,
    ) -> None:
        self.ctx = ctx
        self.source = source or (FixtureSource() if ctx.demo else ClassroomSource())
        self.subtasks = subtasks or SubtaskStore()
        self.task_store = tasks or TaskStore(subtasks=self.subtasks)
        self.colors = colors or CourseColorStore()
        self._result = MergeResult()
        self._courses: List[Dict[str, Any]] = []

    # ---------- loading ----------
    def refresh(self) -> MergeResult:
        snapshot = self.source.fetch(self.ctx)
        custom = self.task_store.get_tasks(self.ctx.owner_email)
        self._result = merge_tasks(self.ctx.owner_email, snapshot, custom)
        self._courses = [{"id": g.course_id, "name": g.course_name} for g in snapshot.courses]
        for error in self._result.errors:
            log.warning("Partial data for %s: %s", self.ctx.owner_email, error)
        return self._result

    @property
    def tasks(self) -> List[TaskItem]:
        return list(self._result.tasks)

    @property
    def errors(self) -> List[str]:
        return list(self._result.errors)

    @property
    def courses(self) -> List[Dict[str, Any]]:
        return list(self._courses)

    def get(self, task_id: str) -> Optional[TaskItem]:
        for item in self._result.tasks:
            if item.id == task_id:
                return item
        return None

    def _replace(self, item: TaskItem) -> None:
        self._result.tasks = [item if t.id == item.id else t for t in self._result.tasks]

    # ---------- writes ----------
    def add_custom_task(self, fields: Mapping[str, Any]) -> TaskItem:
        task = self.task_store.create_task(self.ctx.owner_email, fields)
        item = TaskItem.from_custom(task)
        self._result.tasks.append(item)
        return item

    def update_custom_task(self, task_id: str, fields: Mapping[str, Any]) -> TaskItem:
        task = self.task_store.update_task(task_id, self.ctx.owner_email, fields)
        item = TaskItem.from_custom(task)
        self._replace(item)
        return item

    def delete_custom_task(self, task_id: str) -> None:
        self.task_store.delete_task(task_id, self.ctx.owner_email)
        self._result.tasks = [t for t in self._result.tasks if t.id != task_id]

    def submit(self, task_id: str) -> TaskItem:
        item = self.get(task_id)
        if item is None:
            raise NotFoundOrForbidden(f"Task {task_id} not found")
        if item.is_custom:
            updated = TaskItem.from_custom(self.task_store.submit_task(task_id, self.ctx.owner_email))
        else:
            updated = item.with_status(SUBMITTED, due_text=DASHBOARD.submitted_due_text)
            log.info("Marked classroom task %s submitted in this session only", task_id)
        self._replace(updated)
        return updated

    # ---------- views ----------
    def by_status(self, status: str) -> List[TaskItem]:
        return [t for t in self._result.tasks if t.status == status]

    def due_in(self, bucket: str, now: Now) -> List[TaskItem]:
        """Unsubmitted tasks whose due date falls in ``bucket``."""

        return [
            t for t in self._result.tasks
            if t.status != SUBMITTED and classify(t.due, now) == bucket
        ]

    def summary(self, now: Now) -> progress.Summary:
        return progress.summarize(self._result.tasks, now)

    def pending(self) -> List[TaskItem]:
        return progress.get_pending_assignments(self._result.tasks)

    def upcoming(self, now: Now) -> List[TaskItem]:
        return progress.get_upcoming_deadlines(self._result.tasks, now)

    def recently_submitted(self, now: Now) -> List[TaskItem]:
        return progress.get_recently_submitted_work(self._result.tasks, now)

    def color_resolver(self) -> CourseColorResolver:
        return CourseColorResolver(self._courses, store=self.colors)


__all__ = ["TaskBoard"]
