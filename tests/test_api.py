from datetime import date

import pytest

from core.auth import AuthContext
from core.errors import NotFoundOrForbidden
from services.api import DashboardService
from services.fixtures import FixtureSource


OWNER = "student@example.com"


@pytest.fixture()
def service(task_store, subtask_store, color_store):
    return DashboardService(tasks=task_store, subtasks=subtask_store, colors=color_store, source=FixtureSource())


def test_task_records_use_camel_case_keys(service):
    ctx = AuthContext(owner_email=OWNER)
    record = service.create_task(ctx, {"title": "Poster", "dueDate": "2026-01-20"})

    assert record["id"].startswith("custom_")
    assert record["ownerEmail"] == OWNER
    assert record["courseId"] == "custom"
    assert record["courseName"] == "Custom"
    assert record["dueDate"] == "2026-01-20"
    assert record["isCustom"] is True
    assert service.get_task(ctx, record["id"]) == record


def test_other_owner_cannot_read_task(service):
    record = service.create_task(AuthContext(owner_email=OWNER), {"title": "Mine"})
    with pytest.raises(NotFoundOrForbidden):
        service.get_task(AuthContext(owner_email="someone@example.com"), record["id"])


def test_subtask_records_are_scoped_to_task(service):
    created = service.create_subtask("custom_1", {"text": "Outline"})
    assert created["taskId"] == "custom_1"
    assert created["completed"] is False

    toggled = service.toggle_subtask("custom_1", created["id"])
    assert toggled["completed"] is True
    with pytest.raises(NotFoundOrForbidden):
        service.get_subtask("custom_2", created["id"])


def test_demo_dashboard_payload(service):
    ctx = AuthContext(owner_email=OWNER, demo=True)
    service.set_course_color(ctx, "History", "#ffff00")

    payload = service.dashboard(ctx, date(2026, 1, 12))

    by_id = {t["id"]: t for t in payload["tasks"]}
    assert payload["summary"] == {
        "total": 4,
        "completed": 1,
        "pending": 3,
        "progressPercent": 25,
        "dueToday": 1,
        "dueThisWeek": 3,
    }
    assert by_id["classroom_a1"]["dueCategory"] == "today"
    assert by_id["classroom_a4"]["dueCategory"] == "later"
    assert by_id["classroom_a1"]["courseColor"] == "#2563eb"
    assert by_id["classroom_a1"]["courseTextColor"] == "#ffffff"
    assert by_id["classroom_a3"]["courseColor"] == "#ffff00"
    assert by_id["classroom_a3"]["courseTextColor"] == "#000000"
    assert [t["id"] for t in payload["pending"]] == ["classroom_a1", "classroom_a3", "classroom_a2"]
    assert [t["id"] for t in payload["recentlySubmitted"]] == ["classroom_a4"]
    assert payload["errors"] == []
