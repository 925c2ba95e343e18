# dashboard/storage/db.py
from __future__ import annotations

from sqlalchemy import event
from sqlmodel import SQLModel, create_engine, Session

from core.settings import BACKUP, DB_PATH, ensure_data_dirs
from core.log import get_logger
from storage.backup import ensure_daily_backup

# Ensure SQLModel metadata is populated
import models.task  # noqa: F401
import models.subtask  # noqa: F401
import models.course_color  # noqa: F401
from storage import migrations


log = get_logger("db")


def enable_foreign_keys(engine) -> None:
    """Turn on SQLite foreign-key enforcement for every new connection."""

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def make_engine(url: str, *, echo: bool = False):
    engine = create_engine(url, echo=echo)
    enable_foreign_keys(engine)
    return engine


_engine = make_engine(f"sqlite:///{DB_PATH.as_posix()}")


def prepare_schema(engine, *, before_migrate=None) -> int:
    """Create missing tables, then apply pending migrations.

    Returns the schema version after migrating.
    """

    if before_migrate is not None and migrations.pending(engine):
        before_migrate()
    SQLModel.metadata.create_all(engine)
    return migrations.run_all(engine)


def _backup_before_migrate() -> None:
    created = ensure_daily_backup(DB_PATH, BACKUP.directory, keep_days=BACKUP.keep_days)
    if created:
        log.info("Backed up %s to %s before migrating", DB_PATH, created)


def init_db() -> int:
    ensure_data_dirs()
    hook = _backup_before_migrate if BACKUP.enabled and DB_PATH.exists() else None
    version = prepare_schema(_engine, before_migrate=hook)
    log.info("Database ready at %s (schema version %d)", DB_PATH, version)
    return version


def get_engine():
    return _engine


def get_session() -> Session:
    return Session(_engine)


__all__ = ["enable_foreign_keys", "get_engine", "get_session", "init_db", "make_engine", "prepare_schema"]
