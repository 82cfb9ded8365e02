"""Payment due-date estimation for completed pay periods."""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta

from practice_pay.dates import days_in_month, last_of_month, next_month
from practice_pay.models.practice import PayCycle

DEFAULT_FOLLOWING_MONTH_DAY = 15
WEEKLY_GRACE_DAYS = 7
FALLBACK_GRACE_DAYS = 15

_DAY_PATTERN = re.compile(r"(\d+)(?:st|nd|rd|th)?")


def _day_of_following_month(period_end: date, day: int) -> date:
    year, month = next_month(period_end.year, period_end.month)
    return date(year, month, max(1, min(day, days_in_month(year, month))))


def estimate_due_date(
    period_end: date | None, pay_cycle: str | None, payment_detail: str | None = None
) -> date | None:
    """Estimate when payment for a period ending on ``period_end`` is due.

    Free-text payment details take precedence over cycle defaults:

    1. "following month"                     -> day N of next month (N parsed, default 15)
    2. "end of month" / "last business day"  -> last day of period_end's month
    3. "every second friday" / "bi-weekly"   -> period_end itself
    4. otherwise by cycle: bi-weekly -> period_end, monthly -> 15th of next
       month, weekly -> period_end + 7 days, anything else -> + 15 days

    Returns None only when ``period_end`` is not a date.
    """
    if isinstance(period_end, datetime):
        period_end = period_end.date()
    if not isinstance(period_end, date):
        return None

    details = (payment_detail or "").lower()

    if "following month" in details:
        match = _DAY_PATTERN.search(details)
        day = int(match.group(1)) if match else DEFAULT_FOLLOWING_MONTH_DAY
        return _day_of_following_month(period_end, day)

    if "end of month" in details or "last business day" in details:
        return last_of_month(period_end.year, period_end.month)

    if "every second friday" in details or "bi-weekly" in details:
        return period_end

    if pay_cycle == PayCycle.BI_WEEKLY:
        return period_end
    if pay_cycle == PayCycle.MONTHLY:
        return _day_of_following_month(period_end, DEFAULT_FOLLOWING_MONTH_DAY)
    if pay_cycle == PayCycle.WEEKLY:
        return period_end + timedelta(days=WEEKLY_GRACE_DAYS)
    return period_end + timedelta(days=FALLBACK_GRACE_DAYS)


def is_overdue(due_date: date | None, today: date) -> bool:
    """A due date is overdue once it is strictly before today."""
    return due_date is not None and due_date < today
