"""Bulk subtask creation from a checklist generator (e.g. an LLM call)."""
from __future__ import annotations

from typing import List, Optional, Protocol

from core.errors import UpstreamError, ValidationError
from core.log import get_logger
from models.subtask import Subtask
from services.subtasks import SubtaskStore


log = get_logger("checklist")


class ChecklistGenerator(Protocol):
    def generate(self, title: str, description: Optional[str] = None) -> str:
        """Return short imperative checklist steps, one per line."""
        ...


def generate_subtasks(
    store: SubtaskStore,
    task_id: str,
    title: str,
    generator: ChecklistGenerator,
    *,
    description: Optional[str] = None,
) -> List[Subtask]:
    if not (title or "").strip():
        raise ValidationError("Task title is required to generate a checklist")
    try:
        raw = generator.generate(title.strip(), description)
    except Exception as exc:
        log.warning("Checklist generator failed for %s: %s", task_id, exc)
        raise UpstreamError("Checklist generation is unavailable") from exc
    created = store.add_checklist(task_id, raw)
    log.info("Added %d generated subtasks to %s", len(created), task_id)
    return created


__all__ = ["ChecklistGenerator", "generate_subtasks"]
