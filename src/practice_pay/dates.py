"""Calendar-day helpers.

All dates are naive ``datetime.date`` values interpreted as UTC calendar
days, which is what a ``YYYY-MM-DDT00:00:00Z`` timestamp denotes.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta, timezone
from typing import Any


def parse_day(value: Any) -> date | None:
    """Parse a calendar day, returning None for anything malformed."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    if len(text) > 10 and text[10] in "T ":
        return _parse_timestamp_day(text)
    if len(text) != 10:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        return None


def _parse_timestamp_day(text: str) -> date | None:
    """UTC calendar day of an ISO timestamp; naive timestamps are taken as UTC."""
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        moment = datetime.fromisoformat(text)
    except ValueError:
        return None
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.date()


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def first_of_month(year: int, month: int) -> date:
    return date(year, month, 1)


def last_of_month(year: int, month: int) -> date:
    return date(year, month, days_in_month(year, month))


def next_month(year: int, month: int) -> tuple[int, int]:
    """Return (year, month) of the month after the given one."""
    if month == 12:
        return year + 1, 1
    return year, month + 1


def add_months(day: date, months: int) -> date:
    """Shift by whole months, clamping the day to the target month's end."""
    index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    return date(year, month, min(day.day, days_in_month(year, month)))


def iter_months(start: date, end: date):
    """Yield (year, month) for every month touching ``[start, end]``."""
    year, month = start.year, start.month
    while (year, month) <= (end.year, end.month):
        yield year, month
        year, month = next_month(year, month)


def sunday_week_start(day: date) -> date:
    """Sunday on or before ``day``."""
    return day - timedelta(days=(day.weekday() + 1) % 7)
