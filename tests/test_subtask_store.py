import pytest

from core.errors import NotFoundOrForbidden, UpstreamError, ValidationError
from services.checklist import generate_subtasks
from services.subtasks import split_checklist


def test_subtasks_accept_any_task_id(subtask_store):
    remote = subtask_store.create_subtask("classroom_12345", "Read the prompt")
    custom = subtask_store.create_subtask("custom_abc", "Draft intro", completed=True)

    assert remote.task_id == "classroom_12345"
    assert remote.completed is False
    assert custom.completed is True
    assert [s.id for s in subtask_store.get_subtasks("classroom_12345")] == [remote.id]


def test_subtasks_listed_oldest_first(subtask_store):
    created = [subtask_store.create_subtask("custom_t", f"step {i}") for i in range(4)]
    assert [s.id for s in subtask_store.get_subtasks("custom_t")] == [s.id for s in created]


def test_create_requires_text(subtask_store):
    with pytest.raises(ValidationError):
        subtask_store.create_subtask("custom_t", "   ")
    with pytest.raises(ValidationError):
        subtask_store.create_subtask("", "text")


def test_toggle_twice_restores_original_value(subtask_store):
    subtask = subtask_store.create_subtask("custom_t", "Proofread")

    once = subtask_store.toggle_subtask(subtask.id, "custom_t")
    twice = subtask_store.toggle_subtask(subtask.id, "custom_t")

    assert once.completed is True
    assert twice.completed is False


def test_toggle_is_scoped_by_task(subtask_store):
    subtask = subtask_store.create_subtask("custom_t", "Proofread")
    with pytest.raises(NotFoundOrForbidden):
        subtask_store.toggle_subtask(subtask.id, "custom_other")
    assert subtask_store.get_subtask(subtask.id).completed is False


def test_update_changes_only_given_fields(subtask_store):
    subtask = subtask_store.create_subtask("custom_t", "Outline")

    renamed = subtask_store.update_subtask(subtask.id, "custom_t", text="Outline essay")
    assert renamed.text == "Outline essay"
    assert renamed.completed is False

    done = subtask_store.update_subtask(subtask.id, "custom_t", completed=True)
    assert done.text == "Outline essay"
    assert done.completed is True


def test_delete_is_scoped_by_task(subtask_store):
    subtask = subtask_store.create_subtask("custom_t", "Cite sources")
    with pytest.raises(NotFoundOrForbidden):
        subtask_store.delete_subtask(subtask.id, "custom_other")

    subtask_store.delete_subtask(subtask.id, "custom_t")
    assert subtask_store.get_subtask(subtask.id) is None
    with pytest.raises(NotFoundOrForbidden):
        subtask_store.delete_subtask(subtask.id, "custom_t")


def test_split_checklist_strips_markers_and_blank_lines():
    raw = "1. Read the rubric\n\n- Draft outline\n* Write intro\n2) Proofread\n[ ] Submit\n   \n"
    assert split_checklist(raw) == [
        "Read the rubric",
        "Draft outline",
        "Write intro",
        "Proofread",
        "Submit",
    ]
    assert split_checklist(None) == []


class StaticGenerator:
    def __init__(self, text):
        self.text = text
        self.calls = []

    def generate(self, title, description=None):
        self.calls.append((title, description))
        return self.text


class BrokenGenerator:
    def generate(self, title, description=None):
        raise ConnectionError("quota exceeded")


def test_generated_checklist_becomes_subtasks(subtask_store):
    generator = StaticGenerator("Find three sources\nWrite thesis\n")

    created = generate_subtasks(subtask_store, "classroom_9", " Essay ", generator, description="500 words")

    assert [s.text for s in created] == ["Find three sources", "Write thesis"]
    assert generator.calls == [("Essay", "500 words")]
    assert len(subtask_store.get_subtasks("classroom_9")) == 2


def test_generator_failure_is_surfaced(subtask_store):
    with pytest.raises(UpstreamError):
        generate_subtasks(subtask_store, "classroom_9", "Essay", BrokenGenerator())
    assert subtask_store.get_subtasks("classroom_9") == []
