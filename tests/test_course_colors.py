import pytest

from core.errors import NotFoundOrForbidden, ValidationError
from services.course_colors import (
    CourseColorResolver,
    contrasting_text,
    relative_luminance,
)


def test_contrasting_text_examples():
    assert contrasting_text("#ffffff") == "#000000"
    assert contrasting_text("#1f2937") == "#ffffff"
    assert contrasting_text("#FFFF00") == "#000000"


@pytest.mark.parametrize("value", [None, "", "blue", "#12345", "#gggggg"])
def test_malformed_hex_gets_white_text(value):
    assert relative_luminance(value) == 0.0
    assert contrasting_text(value) == "#ffffff"


def test_hex_without_hash_is_accepted():
    assert contrasting_text("ffffff") == "#000000"


def test_upsert_overwrites_instead_of_duplicating(color_store):
    color_store.set_color("a@b.com", "History", "#9333ea")
    color_store.set_color("a@b.com", "History", "#15803d")
    color_store.set_color("a@b.com", "Maths", "#2563eb")
    color_store.set_color("c@d.com", "History", "#000000")

    assert color_store.get_colors("a@b.com") == {"History": "#15803d", "Maths": "#2563eb"}
    assert color_store.get_color("c@d.com", "History") == "#000000"


def test_set_color_validates_format(color_store):
    with pytest.raises(ValidationError):
        color_store.set_color("a@b.com", "History", "purple")
    with pytest.raises(ValidationError):
        color_store.set_color("a@b.com", "", "#9333ea")


def test_delete_color(color_store):
    color_store.set_color("a@b.com", "History", "#9333ea")
    color_store.delete_color("a@b.com", "History")
    assert color_store.get_color("a@b.com", "History") is None
    with pytest.raises(NotFoundOrForbidden):
        color_store.delete_color("a@b.com", "History")


def test_resolver_default_then_stored_preference(color_store):
    resolver = CourseColorResolver([{"id": "c-hist", "name": "History"}], store=color_store)

    assert resolver.resolve("c-hist", owner_email="a@b.com", course_name="History") == "#1f2937"

    color_store.set_color("a@b.com", "History", "#9333ea")

    assert resolver.resolve("c-hist", owner_email="a@b.com", course_name="History") == "#9333ea"
    assert resolver.resolve("c-hist", owner_email="a@b.com") == "#9333ea"
    assert resolver.resolve("c-hist", owner_email="x@y.com", course_name="History") == "#1f2937"


def test_resolver_fixture_table_before_live_courses():
    resolver = CourseColorResolver([
        {"id": "course_math", "name": "Maths", "color": "#ff0000"},
        {"id": "live", "name": "Art", "color": "#00ff00"},
    ])
    assert resolver.resolve("course_math") == "#2563eb"
    assert resolver.resolve("live") == "#00ff00"
    assert resolver.resolve("unknown") == "#1f2937"
    assert resolver.text_color("unknown") == "#ffffff"
