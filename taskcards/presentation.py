"""Display order, urgency and date labels for tasks.

Task dates are bare calendar dates. They are always split into
year/month/day and compared as local ``datetime.date`` values; nothing here
goes through a timestamp parse, so no timezone can shift a due date by a day.
"""
from datetime import date
from typing import Iterable, List, Optional

from .schemas.task import Task

ASAP_LABEL = "なるはや"
URGENT_WITHIN_DAYS = 3
WEEKDAYS_JA = ("月", "火", "水", "木", "金", "土", "日")


def parse_local_date(value: Optional[str]) -> Optional[date]:
    """Parse ``YYYY-MM-DD`` into a local calendar date, or None if malformed."""
    if not value:
        return None
    parts = value.strip().split("-")
    if len(parts) != 3:
        return None
    try:
        year, month, day = (int(p) for p in parts)
        return date(year, month, day)
    except ValueError:
        return None


def days_until(value: Optional[str], today: date) -> Optional[int]:
    due = parse_local_date(value)
    if due is None:
        return None
    return (due - today).days


def is_urgent(task: Task, today: date) -> bool:
    """Overdue, due today, or due within the next three days; ASAP always."""
    if task.completed:
        return False
    if task.is_asap:
        return True
    remaining = days_until(task.date, today)
    return remaining is not None and remaining <= URGENT_WITHIN_DAYS


def _sort_key(task: Task):
    due = parse_local_date(task.date)
    return (
        task.completed,
        not task.is_asap,
        due is None,
        due or date.min,
    )


def order(tasks: Iterable[Task]) -> List[Task]:
    """Incomplete before completed, ASAP before dated, then by date.

    ``sorted`` is stable, so ties keep the store's order.
    """
    return sorted(tasks, key=_sort_key)


def format_date(value: Optional[str]) -> str:
    due = parse_local_date(value)
    if due is None:
        return ""
    return f"{due.month}/{due.day}"


def display_date(task: Task) -> str:
    if task.is_asap:
        return ASAP_LABEL
    return format_date(task.date)


def today_iso(today: Optional[date] = None) -> str:
    return (today or date.today()).isoformat()


def format_header_date(today: date) -> str:
    """Header label, e.g. ``2024.06.01(土)``."""
    return f"{today:%Y.%m.%d}({WEEKDAYS_JA[today.weekday()]})"
