"""Custom column types."""
from __future__ import annotations

import json
from typing import Any, Optional

from sqlalchemy.types import Text, TypeDecorator


PARTS = "parts"
TEXT = "text"


class DueDateType(TypeDecorator):
    """Store a due date in whichever shape it was given.

    ``{"year", "month", "day"}`` records are written as ``{"kind": "parts", "value": {...}}``.
    Strings are written verbatim unless they start with ``{``; those are wrapped as
    ``{"kind": "text", "value": ...}`` so they never read back as a record. Plain text
    written by older versions reads back as a string.
    """

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: Any, dialect) -> Optional[str]:
        if value is None:
            return None
        if isinstance(value, str):
            if value.lstrip().startswith("{"):
                return json.dumps({"kind": TEXT, "value": value})
            return value
        if isinstance(value, dict):
            record = {key: value[key] for key in ("year", "month", "day") if key in value}
            return json.dumps({"kind": PARTS, "value": record}, sort_keys=True)
        raise TypeError(f"Unsupported due date value: {value!r}")

    def process_result_value(self, value: Optional[str], dialect) -> Any:
        if value is None or not value.lstrip().startswith("{"):
            return value
        try:
            stored = json.loads(value)
        except json.JSONDecodeError:
            return value
        if not isinstance(stored, dict):
            return value
        kind = stored.get("kind")
        if kind == PARTS and isinstance(stored.get("value"), dict):
            return stored["value"]
        if kind == TEXT and isinstance(stored.get("value"), str):
            return stored["value"]
        return value


__all__ = ["DueDateType"]
