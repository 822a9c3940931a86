# tests/test_presentation.py

from __future__ import annotations

from datetime import date
from itertools import permutations

import pytest

from taskcards.presentation import (
    ASAP_LABEL,
    days_until,
    display_date,
    format_date,
    format_header_date,
    is_urgent,
    order,
    parse_local_date,
    today_iso,
)

from .conftest import TODAY
from .fakes import make_task


def _mixed_tasks():
    return [
        make_task("done-asap", is_asap=True, completed=True),
        make_task("late", date="2024-06-20"),
        make_task("done-early", date="2024-05-01", completed=True),
        make_task("asap", is_asap=True, date="2024-06-01"),
        make_task("early", date="2024-06-02"),
    ]


def test_order_puts_every_incomplete_task_before_completed_ones():
    for perm in permutations(_mixed_tasks()):
        ordered = order(perm)
        flags = [t.completed for t in ordered]
        assert flags == sorted(flags)


def test_order_asap_first_then_ascending_date():
    for perm in permutations(_mixed_tasks()):
        ids = [t.id for t in order(perm)]
        assert ids == ["asap", "early", "late", "done-asap", "done-early"]


def test_order_compares_calendar_dates_not_strings():
    tasks = [make_task("b", date="2024-10-02"), make_task("a", date="2024-9-30")]
    assert [t.id for t in order(tasks)] == ["a", "b"]


def test_order_is_stable_for_ties():
    tasks = [make_task(str(i), date="2024-06-05") for i in range(5)]
    assert [t.id for t in order(tasks)] == ["0", "1", "2", "3", "4"]


def test_order_puts_undated_tasks_after_dated_ones_in_group():
    tasks = [make_task("none", date=None), make_task("bad", date="soon"), make_task("dated")]
    assert [t.id for t in order(tasks)] == ["dated", "none", "bad"]


def test_asap_task_completion_moves_it_behind_dated_task():
    a = make_task("A", is_asap=True, date=today_iso(TODAY))
    b = make_task("B", date="2024-06-02")
    assert [t.id for t in order([b, a])] == ["A", "B"]

    a_done = a.model_copy(update={"completed": True})
    assert [t.id for t in order([a_done, b])] == ["B", "A"]


@pytest.mark.parametrize(
    "due, urgent",
    [
        ("2024-05-20", True),  # overdue
        ("2024-06-01", True),  # today
        ("2024-06-02", True),
        ("2024-06-04", True),  # three days ahead
        ("2024-06-05", False),
        ("2024-07-01", False),
    ],
)
def test_is_urgent_window(due, urgent):
    assert is_urgent(make_task(date=due), TODAY) is urgent


def test_completed_task_is_never_urgent():
    for due in ("2024-05-01", "2024-06-01", "2024-06-03"):
        assert not is_urgent(make_task(date=due, completed=True), TODAY)
    assert not is_urgent(make_task(is_asap=True, completed=True), TODAY)


def test_asap_task_is_always_urgent():
    for due in ("2999-01-01", None, "garbage"):
        assert is_urgent(make_task(date=due, is_asap=True), TODAY)


def test_undated_task_is_not_urgent():
    assert not is_urgent(make_task(date=None), TODAY)


def test_parse_local_date():
    assert parse_local_date("2024-06-01") == date(2024, 6, 1)
    assert parse_local_date("2024-6-1") == date(2024, 6, 1)
    assert parse_local_date("") is None
    assert parse_local_date("2024-02-30") is None
    assert parse_local_date("2024-06-01T00:00:00Z") is None


def test_days_until_crosses_month_and_leap_day():
    assert days_until("2024-03-01", date(2024, 2, 28)) == 2
    assert days_until("2024-05-31", TODAY) == -1
    assert days_until(None, TODAY) is None


def test_display_date():
    assert display_date(make_task(date="2024-06-01")) == "6/1"
    assert display_date(make_task(date="2024-12-25")) == "12/25"
    assert display_date(make_task(is_asap=True)) == ASAP_LABEL
    assert format_date(None) == ""


def test_header_date_uses_japanese_weekday():
    assert format_header_date(TODAY) == "2024.06.01(土)"
    assert format_header_date(date(2024, 6, 3)) == "2024.06.03(月)"


def test_today_iso():
    assert today_iso(TODAY) == "2024-06-01"
