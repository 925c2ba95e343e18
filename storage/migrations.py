"""Versioned schema migrations for the dashboard database.

The applied version lives in ``PRAGMA user_version``. Each step is idempotent on its
own, so re-running a step against an already migrated schema changes nothing.
"""

from __future__ import annotations

from typing import Callable, List, Tuple

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from core.errors import StoreFailure
from core.log import get_logger


log = get_logger("migrations")

SUBTASKS_TABLE = "subtasks"
SUBTASKS_REPLACEMENT = "subtasks_migration"

SUBTASKS_DDL = """
CREATE TABLE {name} (
    id TEXT PRIMARY KEY,
    task_id TEXT NOT NULL,
    text TEXT NOT NULL,
    completed BOOLEAN NOT NULL DEFAULT 0,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
)
"""

SUBTASK_COLUMNS = "id, task_id, text, completed, created_at, updated_at"


def _table_exists(conn, table: str) -> bool:
    result = conn.execute(
        text("SELECT 1 FROM sqlite_master WHERE type='table' AND name=:name"),
        {"name": table},
    )
    return result.first() is not None


def _column_exists(conn, table: str, column: str) -> bool:
    result = conn.execute(text(f"PRAGMA table_info('{table}')"))
    return any(row[1] == column for row in result)


def foreign_keys(conn, table: str) -> list:
    return list(conn.execute(text(f"PRAGMA foreign_key_list('{table}')")))


def get_version(engine) -> int:
    with engine.connect() as conn:
        return int(conn.exec_driver_sql("PRAGMA user_version").scalar() or 0)


def _set_version(engine, version: int) -> None:
    with engine.begin() as conn:
        conn.exec_driver_sql(f"PRAGMA user_version = {int(version)}")


# ---------------------------------------------------------------------------
# Steps


def rename_owner_columns(engine) -> bool:
    """Rename the ``user_email`` columns of older databases to ``owner_email``."""

    changed = False
    with engine.begin() as conn:
        for table in ("custom_tasks", "course_colors"):
            if not _table_exists(conn, table):
                continue
            if _column_exists(conn, table, "user_email") and not _column_exists(conn, table, "owner_email"):
                conn.execute(text(f"ALTER TABLE {table} RENAME COLUMN user_email TO owner_email"))
                log.info("Renamed %s.user_email to owner_email", table)
                changed = True
    return changed


def _copy_subtasks(conn) -> int:
    result = conn.execute(
        text(
            f"INSERT INTO {SUBTASKS_REPLACEMENT} ({SUBTASK_COLUMNS}) "
            f"SELECT {SUBTASK_COLUMNS} FROM {SUBTASKS_TABLE}"
        )
    )
    return result.rowcount


def remove_subtask_foreign_key(engine) -> bool:
    """Rebuild ``subtasks`` without its foreign key to ``custom_tasks``.

    Subtasks may belong to classroom assignments, whose ids never exist locally, so
    earlier schemas that referenced ``custom_tasks(id)`` reject them. Foreign-key
    enforcement is off while the table is swapped and is switched back on whether or
    not the rebuild succeeds. Returns ``True`` when the table was rebuilt.
    """

    with engine.connect() as conn:
        if not _table_exists(conn, SUBTASKS_TABLE) or not foreign_keys(conn, SUBTASKS_TABLE):
            conn.rollback()
            return False

        log.info("Migrating %s table to remove foreign key constraint", SUBTASKS_TABLE)
        # PRAGMA foreign_keys is ignored inside a transaction; commit around it.
        conn.exec_driver_sql("PRAGMA foreign_keys=OFF")
        conn.commit()
        try:
            before = conn.execute(text(f"SELECT COUNT(*) FROM {SUBTASKS_TABLE}")).scalar()
            conn.execute(text(f"DROP TABLE IF EXISTS {SUBTASKS_REPLACEMENT}"))
            conn.execute(text(SUBTASKS_DDL.format(name=SUBTASKS_REPLACEMENT)))
            copied = _copy_subtasks(conn)
            if copied != before:
                raise StoreFailure(f"Copied {copied} of {before} subtasks; aborting migration")
            conn.execute(text(f"DROP TABLE {SUBTASKS_TABLE}"))
            conn.execute(text(f"ALTER TABLE {SUBTASKS_REPLACEMENT} RENAME TO {SUBTASKS_TABLE}"))
            conn.execute(
                text(f"CREATE INDEX IF NOT EXISTS ix_subtasks_task_id ON {SUBTASKS_TABLE} (task_id)")
            )
            conn.commit()
        except SQLAlchemyError as exc:
            conn.rollback()
            log.exception("Subtasks migration failed")
            raise StoreFailure("Subtasks migration failed") from exc
        except Exception:
            conn.rollback()
            log.exception("Subtasks migration failed")
            raise
        finally:
            conn.exec_driver_sql("PRAGMA foreign_keys=ON")
            conn.commit()

    log.info("Subtasks table migration completed (%d rows)", copied)
    return True


INDEXES = (
    ("ix_custom_tasks_owner_email", "custom_tasks", "owner_email"),
    ("ix_custom_tasks_status", "custom_tasks", "status"),
    ("ix_subtasks_task_id", "subtasks", "task_id"),
    ("ix_course_colors_owner_email", "course_colors", "owner_email"),
    ("ix_course_colors_course_name", "course_colors", "course_name"),
)


def _index_exists(conn, name: str) -> bool:
    result = conn.execute(
        text("SELECT 1 FROM sqlite_master WHERE type='index' AND name=:name"),
        {"name": name},
    )
    return result.first() is not None


def ensure_indexes(engine) -> bool:
    """Create any missing lookup index; returns whether one was created."""

    created = False
    with engine.begin() as conn:
        for table in ("custom_tasks", "subtasks", "course_colors"):
            if not _table_exists(conn, table):
                return False
        for name, table, column in INDEXES:
            if _index_exists(conn, name):
                continue
            conn.execute(text(f"CREATE INDEX {name} ON {table} ({column})"))
            created = True
    return created


Step = Tuple[int, str, Callable[[object], bool]]

STEPS: List[Step] = [
    (1, "rename_owner_columns", rename_owner_columns),
    (2, "remove_subtask_foreign_key", remove_subtask_foreign_key),
    (3, "ensure_indexes", ensure_indexes),
]

LATEST_VERSION = STEPS[-1][0]


def pending(engine) -> bool:
    return get_version(engine) < LATEST_VERSION


def run_all(engine) -> int:
    """Apply every step newer than the stored version; return the resulting version."""

    current = get_version(engine)
    for version, name, step in STEPS:
        if version <= current:
            continue
        changed = step(engine)
        _set_version(engine, version)
        current = version
        log.info("Applied migration %d (%s)%s", version, name, "" if changed else ": nothing to change")
    return current


__all__ = [
    "LATEST_VERSION",
    "STEPS",
    "ensure_indexes",
    "foreign_keys",
    "get_version",
    "pending",
    "remove_subtask_foreign_key",
    "rename_owner_columns",
    "run_all",
]
