"""Error types surfaced by the dashboard core."""
from __future__ import annotations


class DashboardError(Exception):
    """Base class for every error raised by the dashboard core."""


class ValidationError(DashboardError, ValueError):
    """A required field is missing or a value has the wrong shape."""


class NotFoundOrForbidden(DashboardError, LookupError):
    """An owner- or task-scoped write matched no rows.

    A missing record and a record owned by someone else are reported the same way.
    """


class StoreFailure(DashboardError, RuntimeError):
    """The underlying database rejected or failed an operation."""


class UpstreamError(DashboardError):
    """A remote collaborator (classroom service, checklist generator) failed."""


__all__ = [
    "DashboardError",
    "ValidationError",
    "NotFoundOrForbidden",
    "StoreFailure",
    "UpstreamError",
]
