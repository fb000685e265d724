"""Canonical week arithmetic shared by every forecast stage.

Weeks are ISO weeks: Monday through Sunday. Demand and supply must always be
computed over the window returned by ``week_window`` so both sides see the
same days.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta

DAYS_PER_WEEK = 7
_SATURDAY = 5


def _as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def week_start(value: date | datetime) -> date:
    """Return the Monday of the ISO week containing ``value``."""
    d = _as_date(value)
    return d - timedelta(days=d.weekday())


def week_end(value: date | datetime) -> date:
    """Return the Sunday closing the ISO week containing ``value``."""
    return week_start(value) + timedelta(days=DAYS_PER_WEEK - 1)


def week_window(value: date | datetime) -> tuple[date, date]:
    """Return the inclusive (Monday, Sunday) window for ``value``'s week."""
    start = week_start(value)
    return start, start + timedelta(days=DAYS_PER_WEEK - 1)


def add_weeks(start: date, weeks: int) -> date:
    return start + timedelta(weeks=weeks)


def iter_weeks(start: date | datetime, count: int) -> list[date]:
    """Return ``count`` consecutive week starts beginning at ``start``'s week."""
    first = week_start(start)
    return [add_weeks(first, i) for i in range(count)]


def working_days(start: date, end: date) -> int:
    """Count Monday-Friday days in the inclusive range [start, end].

    An empty or inverted range yields 0.
    """
    if end < start:
        return 0
    total_days = (end - start).days + 1
    full_weeks, remainder = divmod(total_days, DAYS_PER_WEEK)
    count = full_weeks * 5
    weekday = start.weekday()
    for offset in range(remainder):
        if (weekday + offset) % DAYS_PER_WEEK < _SATURDAY:
            count += 1
    return count


def weeks_between(earlier: date | datetime, later: date | datetime) -> int:
    """Whole weeks from ``earlier`` to ``later``, truncated toward zero."""
    days = (_as_date(later) - _as_date(earlier)).days
    return int(days / DAYS_PER_WEEK)
