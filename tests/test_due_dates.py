from datetime import date, datetime, timedelta

import pytest

from utils.due_dates import LATER, NONE, THIS_WEEK, TODAY, classify, parse_due_date


MONDAY = datetime(2026, 1, 12, 9, 30)
SUNDAY = date(2026, 1, 18)


def test_parse_due_date_string_and_record_agree():
    assert parse_due_date("2026-01-16") == date(2026, 1, 16)
    assert parse_due_date({"year": 2026, "month": 1, "day": 16}) == date(2026, 1, 16)
    assert parse_due_date("2026-01-16T23:59:00Z") == date(2026, 1, 16)


@pytest.mark.parametrize(
    "value",
    [None, "", "soon", "2026-13-40", {"year": 2026, "month": 2}, {"year": 2026, "month": 2, "day": 30}, 42],
)
def test_parse_due_date_without_a_date(value):
    assert parse_due_date(value) is None


def test_classify_examples_from_a_monday():
    assert classify("2026-01-12", MONDAY) == TODAY
    assert classify("2026-01-16", MONDAY) == THIS_WEEK
    assert classify("2026-01-18", MONDAY) == THIS_WEEK
    assert classify("2026-01-20", MONDAY) == LATER
    assert classify(None, MONDAY) == NONE


def test_classify_structured_dates_like_strings():
    assert classify({"year": 2026, "month": 1, "day": 16}, MONDAY) == THIS_WEEK
    assert classify({"year": 2026, "month": 1, "day": 12}, MONDAY) == TODAY


def test_time_of_day_does_not_matter():
    late_evening = datetime(2026, 1, 12, 23, 59)
    assert classify("2026-01-13", late_evening) == THIS_WEEK
    assert classify("2026-01-12", datetime(2026, 1, 12, 0, 0)) == TODAY


def test_nothing_is_this_week_on_sunday():
    for offset in range(-3, 15):
        due = SUNDAY + timedelta(days=offset)
        assert classify(due.isoformat(), SUNDAY) != THIS_WEEK
    assert classify("2026-01-19", SUNDAY) == LATER


def test_overdue_is_later():
    assert classify("2026-01-05", MONDAY) == LATER
