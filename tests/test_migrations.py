import pytest
from sqlalchemy import text
from sqlmodel import Session

from services.course_colors import CourseColorStore
from services.subtasks import SubtaskStore
from services.tasks import TaskStore
from storage import migrations
from storage.db import make_engine, prepare_schema


LEGACY_SCHEMA = [
    """
    CREATE TABLE custom_tasks (
        id TEXT PRIMARY KEY,
        user_email TEXT NOT NULL,
        title TEXT NOT NULL,
        course_id TEXT,
        course_name TEXT NOT NULL,
        due_date TEXT,
        due_text TEXT,
        status TEXT NOT NULL DEFAULT 'PENDING',
        created_at TEXT NOT NULL DEFAULT (datetime('now')),
        updated_at TEXT NOT NULL DEFAULT (datetime('now'))
    )
    """,
    """
    CREATE TABLE subtasks (
        id TEXT PRIMARY KEY,
        task_id TEXT NOT NULL REFERENCES custom_tasks(id) ON DELETE CASCADE,
        text TEXT NOT NULL,
        completed INTEGER NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL DEFAULT (datetime('now')),
        updated_at TEXT NOT NULL DEFAULT (datetime('now'))
    )
    """,
    """
    CREATE TABLE course_colors (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        user_email TEXT NOT NULL,
        course_name TEXT NOT NULL,
        color TEXT NOT NULL,
        created_at TEXT NOT NULL DEFAULT (datetime('now')),
        updated_at TEXT NOT NULL DEFAULT (datetime('now')),
        UNIQUE(user_email, course_name)
    )
    """,
]

LEGACY_ROWS = [
    "INSERT INTO custom_tasks (id, user_email, title, course_id, course_name, due_date, status) "
    "VALUES ('custom_1', 'a@b.com', 'Essay', 'custom', 'History', '2026-01-14', 'PENDING')",
    "INSERT INTO subtasks (id, task_id, text, completed) VALUES ('s1', 'custom_1', 'Outline', 1)",
    "INSERT INTO subtasks (id, task_id, text, completed) VALUES ('s2', 'custom_1', 'Draft', 0)",
    "INSERT INTO course_colors (user_email, course_name, color) VALUES ('a@b.com', 'History', '#9333ea')",
]


@pytest.fixture()
def legacy_engine(tmp_path):
    engine = make_engine(f"sqlite:///{(tmp_path / 'legacy.db').as_posix()}")
    with engine.begin() as conn:
        for statement in LEGACY_SCHEMA + LEGACY_ROWS:
            conn.execute(text(statement))
    yield engine
    engine.dispose()


def _subtask_rows(engine):
    with engine.connect() as conn:
        return sorted(
            tuple(row)
            for row in conn.execute(text("SELECT id, task_id, text, completed FROM subtasks"))
        )


def _subtask_fks(engine):
    with engine.connect() as conn:
        return migrations.foreign_keys(conn, "subtasks")


def _foreign_keys_enabled(engine):
    with engine.connect() as conn:
        return conn.exec_driver_sql("PRAGMA foreign_keys").scalar()


def test_fresh_schema_has_no_subtask_foreign_key(engine):
    assert _subtask_fks(engine) == []
    assert migrations.get_version(engine) == migrations.LATEST_VERSION
    assert migrations.remove_subtask_foreign_key(engine) is False


def test_ensure_indexes_reports_whether_it_created_any(engine):
    assert migrations.ensure_indexes(engine) is False

    with engine.begin() as conn:
        conn.execute(text("DROP INDEX ix_custom_tasks_status"))

    assert migrations.ensure_indexes(engine) is True
    assert migrations.ensure_indexes(engine) is False


def test_legacy_subtasks_lose_foreign_key_without_losing_rows(legacy_engine):
    before = _subtask_rows(legacy_engine)
    assert _subtask_fks(legacy_engine)

    assert migrations.remove_subtask_foreign_key(legacy_engine) is True

    assert _subtask_fks(legacy_engine) == []
    assert _subtask_rows(legacy_engine) == before
    assert _foreign_keys_enabled(legacy_engine) == 1


def test_second_run_is_a_no_op(legacy_engine):
    migrations.remove_subtask_foreign_key(legacy_engine)
    with legacy_engine.connect() as conn:
        schema_after_first = conn.execute(
            text("SELECT sql FROM sqlite_master WHERE name='subtasks'")
        ).scalar()
    rows_after_first = _subtask_rows(legacy_engine)

    assert migrations.remove_subtask_foreign_key(legacy_engine) is False

    with legacy_engine.connect() as conn:
        schema_after_second = conn.execute(
            text("SELECT sql FROM sqlite_master WHERE name='subtasks'")
        ).scalar()
    assert schema_after_second == schema_after_first
    assert _subtask_rows(legacy_engine) == rows_after_first


def test_failed_migration_restores_foreign_keys_and_keeps_data(legacy_engine, monkeypatch):
    before = _subtask_rows(legacy_engine)

    def broken_copy(conn):
        raise RuntimeError("disk full")

    monkeypatch.setattr(migrations, "_copy_subtasks", broken_copy)
    with pytest.raises(RuntimeError):
        migrations.remove_subtask_foreign_key(legacy_engine)

    assert _foreign_keys_enabled(legacy_engine) == 1
    assert _subtask_fks(legacy_engine)
    assert _subtask_rows(legacy_engine) == before

    monkeypatch.undo()
    assert migrations.remove_subtask_foreign_key(legacy_engine) is True
    assert _subtask_rows(legacy_engine) == before


def test_prepare_schema_upgrades_legacy_database(legacy_engine):
    backups = []

    version = prepare_schema(legacy_engine, before_migrate=lambda: backups.append("taken"))

    assert version == migrations.LATEST_VERSION
    assert backups == ["taken"]
    assert _subtask_fks(legacy_engine) == []

    def factory():
        return Session(legacy_engine)

    tasks = TaskStore(factory)
    assert [t.title for t in tasks.get_tasks("a@b.com")] == ["Essay"]
    assert CourseColorStore(factory).get_color("a@b.com", "History") == "#9333ea"

    subtasks = SubtaskStore(factory)
    remote = subtasks.create_subtask("classroom_777", "Works for classroom tasks now")
    assert subtasks.get_subtask(remote.id).task_id == "classroom_777"
    assert [s.completed for s in subtasks.get_subtasks("custom_1")] == [True, False]


def test_prepare_schema_twice_changes_nothing(legacy_engine):
    prepare_schema(legacy_engine)
    rows = _subtask_rows(legacy_engine)
    calls = []

    assert prepare_schema(legacy_engine, before_migrate=lambda: calls.append(1)) == migrations.LATEST_VERSION

    assert calls == []
    assert _subtask_rows(legacy_engine) == rows
