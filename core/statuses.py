"""Task status and origin vocabulary."""
from __future__ import annotations

from typing import Dict

from core.errors import ValidationError

PENDING = "PENDING"
IN_PROGRESS = "IN_PROGRESS"
SUBMITTED = "SUBMITTED"

# Board columns, in display order.
STATUS_META: Dict[str, Dict[str, str]] = {
    PENDING: {"label": "To do"},
    IN_PROGRESS: {"label": "In progress"},
    SUBMITTED: {"label": "Submitted"},
}

OPEN_STATUSES = frozenset({PENDING, IN_PROGRESS})

DEFAULT_STATUS = PENDING

CUSTOM = "CUSTOM"
REMOTE = "REMOTE"

CUSTOM_ID_PREFIX = "custom_"
REMOTE_ID_PREFIX = "classroom_"


def normalize_status(value: str | None) -> str:
    """Return an upper-cased known status; ``None``/blank defaults to PENDING."""
    if value is None or not str(value).strip():
        return DEFAULT_STATUS
    candidate = str(value).strip().upper()
    if candidate not in STATUS_META:
        raise ValidationError(f"Unsupported status: {value}")
    return candidate


def is_open(status: str | None) -> bool:
    return status in OPEN_STATUSES


def status_label(value: str) -> str:
    meta = STATUS_META.get(value, STATUS_META[DEFAULT_STATUS])
    return meta["label"]


def origin_for_id(task_id: str) -> str:
    return CUSTOM if str(task_id).startswith(CUSTOM_ID_PREFIX) else REMOTE


__all__ = [
    "PENDING",
    "IN_PROGRESS",
    "SUBMITTED",
    "STATUS_META",
    "OPEN_STATUSES",
    "DEFAULT_STATUS",
    "CUSTOM",
    "REMOTE",
    "CUSTOM_ID_PREFIX",
    "REMOTE_ID_PREFIX",
    "normalize_status",
    "is_open",
    "status_label",
    "origin_for_id",
]
