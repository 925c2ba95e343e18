import os
import tempfile

# Keep logs and the default database out of the user's data directory.
os.environ.setdefault("STUDY_DASHBOARD_DATA_DIR", tempfile.mkdtemp(prefix="study-dashboard-tests-"))

import pytest  # noqa: E402
from sqlmodel import Session  # noqa: E402

from storage.db import make_engine, prepare_schema  # noqa: E402


@pytest.fixture()
def engine():
    engine = make_engine("sqlite://")
    prepare_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    def factory():
        return Session(engine)

    return factory


@pytest.fixture()
def subtask_store(session_factory):
    from services.subtasks import SubtaskStore

    return SubtaskStore(session_factory)


@pytest.fixture()
def task_store(session_factory, subtask_store):
    from services.tasks import TaskStore

    return TaskStore(session_factory, subtasks=subtask_store)


@pytest.fixture()
def color_store(session_factory):
    from services.course_colors import CourseColorStore

    return CourseColorStore(session_factory)
