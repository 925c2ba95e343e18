"""Plain-record facade used by the transport layer.

Every method takes an :class:`AuthContext` (or ids) plus plain dicts and returns plain
dicts with camelCase keys; no ORM objects cross this boundary.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional, Union

from core.auth import AuthContext
from core.errors import NotFoundOrForbidden
from models.subtask import Subtask
from models.task import CustomTask
from models.task_item import TaskItem
from services.board import TaskBoard
from services.checklist import ChecklistGenerator, generate_subtasks
from services.course_colors import CourseColorStore, contrasting_text
from services.subtasks import SubtaskStore
from services.tasks import TaskStore
from utils.due_dates import classify


def task_record(task: Union[CustomTask, TaskItem]) -> Dict[str, Any]:
    if isinstance(task, CustomTask):
        task = TaskItem.from_custom(task)
    return task.to_dict()


def subtask_record(subtask: Subtask) -> Dict[str, Any]:
    return {
        "id": subtask.id,
        "taskId": subtask.task_id,
        "text": subtask.text,
        "completed": bool(subtask.completed),
        "createdAt": subtask.created_at,
        "updatedAt": subtask.updated_at,
    }


class DashboardService:
    def __init__(
        self,
        *,
        tasks: Optional[TaskStore] = None,
        subtasks: Optional[SubtaskStore] = None,
        colors: Optional[CourseColorStore] = None,
        source=None,
    ) -> None:
        self.subtasks = subtasks or SubtaskStore()
        self.tasks = tasks or TaskStore(subtasks=self.subtasks)
        self.colors = colors or CourseColorStore()
        self.source = source

    # ----- custom tasks -----
    def create_task(self, ctx: AuthContext, fields: Mapping[str, Any]) -> Dict[str, Any]:
        return task_record(self.tasks.create_task(ctx.owner_email, fields))

    def list_tasks(self, ctx: AuthContext) -> List[Dict[str, Any]]:
        return [task_record(t) for t in self.tasks.get_tasks(ctx.owner_email)]

    def get_task(self, ctx: AuthContext, task_id: str) -> Dict[str, Any]:
        task = self.tasks.get_task(task_id)
        if task is None or task.owner_email != ctx.owner_email:
            raise NotFoundOrForbidden(f"Task {task_id} not found")
        return task_record(task)

    def update_task(self, ctx: AuthContext, task_id: str, fields: Mapping[str, Any]) -> Dict[str, Any]:
        return task_record(self.tasks.update_task(task_id, ctx.owner_email, fields))

    def delete_task(self, ctx: AuthContext, task_id: str) -> None:
        self.tasks.delete_task(task_id, ctx.owner_email)

    # ----- subtasks -----
    def create_subtask(self, task_id: str, fields: Mapping[str, Any]) -> Dict[str, Any]:
        subtask = self.subtasks.create_subtask(task_id, fields.get("text"), bool(fields.get("completed", False)))
        return subtask_record(subtask)

    def list_subtasks(self, task_id: str) -> List[Dict[str, Any]]:
        return [subtask_record(s) for s in self.subtasks.get_subtasks(task_id)]

    def get_subtask(self, task_id: str, subtask_id: str) -> Dict[str, Any]:
        subtask = self.subtasks.get_subtask(subtask_id)
        if subtask is None or subtask.task_id != task_id:
            raise NotFoundOrForbidden(f"Subtask {subtask_id} not found")
        return subtask_record(subtask)

    def update_subtask(self, task_id: str, subtask_id: str, fields: Mapping[str, Any]) -> Dict[str, Any]:
        completed = fields.get("completed")
        subtask = self.subtasks.update_subtask(
            subtask_id,
            task_id,
            text=fields.get("text"),
            completed=None if completed is None else bool(completed),
        )
        return subtask_record(subtask)

    def toggle_subtask(self, task_id: str, subtask_id: str) -> Dict[str, Any]:
        return subtask_record(self.subtasks.toggle_subtask(subtask_id, task_id))

    def delete_subtask(self, task_id: str, subtask_id: str) -> None:
        self.subtasks.delete_subtask(subtask_id, task_id)

    def generate_checklist(
        self,
        task_id: str,
        title: str,
        generator: ChecklistGenerator,
        description: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        created = generate_subtasks(self.subtasks, task_id, title, generator, description=description)
        return [subtask_record(s) for s in created]

    # ----- course colors -----
    def get_course_colors(self, ctx: AuthContext) -> Dict[str, str]:
        return self.colors.get_colors(ctx.owner_email)

    def get_course_color(self, ctx: AuthContext, course_name: str) -> Dict[str, Optional[str]]:
        color = self.colors.get_color(ctx.owner_email, course_name)
        return {"courseName": course_name, "color": color}

    def set_course_color(self, ctx: AuthContext, course_name: str, color: str) -> Dict[str, str]:
        saved = self.colors.set_color(ctx.owner_email, course_name, color)
        return {"courseName": course_name, "color": saved, "textColor": contrasting_text(saved)}

    def delete_course_color(self, ctx: AuthContext, course_name: str) -> None:
        self.colors.delete_color(ctx.owner_email, course_name)

    # ----- merged view -----
    def board(self, ctx: AuthContext) -> TaskBoard:
        board = TaskBoard(ctx, source=self.source, tasks=self.tasks, subtasks=self.subtasks, colors=self.colors)
        board.refresh()
        return board

    def dashboard(self, ctx: AuthContext, now: Union[date, datetime]) -> Dict[str, Any]:
        board = self.board(ctx)
        resolver = board.color_resolver()

        def record(item: TaskItem) -> Dict[str, Any]:
            data = item.to_dict()
            color = resolver.resolve(item.course_id, owner_email=ctx.owner_email, course_name=item.course_name)
            data["dueCategory"] = classify(item.due, now)
            data["courseColor"] = color
            data["courseTextColor"] = contrasting_text(color)
            return data

        return {
            "tasks": [record(t) for t in board.tasks],
            "summary": board.summary(now).as_dict(),
            "pending": [record(t) for t in board.pending()],
            "upcoming": [record(t) for t in board.upcoming(now)],
            "recentlySubmitted": [record(t) for t in board.recently_submitted(now)],
            "errors": board.errors,
        }


__all__ = ["DashboardService", "subtask_record", "task_record"]
