"""Pay period generation.

Partition rules per billing cycle (all periods are inclusive calendar days):

- monthly:   one period per calendar month, [1st, last day]
- bi-weekly: [1st, 15th] and [16th, last day]; the second half varies
             between 13 and 16 days with month length
- weekly:    7-day windows anchored to the 1st; the final window of a month
             is truncated at month end, so weeks never cross months
- anything else falls back to monthly
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Iterable

from practice_pay.calculators.due_dates import estimate_due_date
from practice_pay.calculators.types import PayPeriod, ScheduledPeriod
from practice_pay.dates import (
    add_months,
    first_of_month,
    iter_months,
    last_of_month,
    sunday_week_start,
)
from practice_pay.models.entries import Entry
from practice_pay.models.practice import PayCycle, Practice

logger = logging.getLogger(__name__)

KNOWN_CYCLES = {cycle.value for cycle in PayCycle}


def _cycle_of(practice: Practice | str | None) -> str:
    if practice is None:
        return PayCycle.MONTHLY.value
    if isinstance(practice, str):
        return practice
    return practice.pay_cycle


def month_periods(year: int, month: int, pay_cycle: str) -> list[PayPeriod]:
    """Partition one calendar month according to ``pay_cycle``."""
    first = first_of_month(year, month)
    last = last_of_month(year, month)

    if pay_cycle == PayCycle.BI_WEEKLY:
        return [
            PayPeriod(first, date(year, month, 15)),
            PayPeriod(date(year, month, 16), last),
        ]

    if pay_cycle == PayCycle.WEEKLY:
        periods = []
        week_start = first
        while week_start <= last:
            week_end = min(week_start + timedelta(days=6), last)
            periods.append(PayPeriod(week_start, week_end))
            week_start = week_end + timedelta(days=1)
        return periods

    if pay_cycle not in KNOWN_CYCLES:
        logger.debug("Unrecognised pay cycle %r, using monthly periods", pay_cycle)
    return [PayPeriod(first, last)]


def calendar_week_periods(year: int, month: int) -> list[PayPeriod]:
    """Sunday-to-Saturday weeks of one month, clipped at both month edges.

    Used when a weekly practice's pay is summed for a calendar month.
    """
    last = last_of_month(year, month)
    periods = []
    week_start = first_of_month(year, month)
    while week_start <= last:
        week_end = min(sunday_week_start(week_start) + timedelta(days=6), last)
        periods.append(PayPeriod(week_start, week_end))
        week_start = week_end + timedelta(days=1)
    return periods


def _dedupe_sorted(periods: Iterable[PayPeriod]) -> list[PayPeriod]:
    unique: dict[tuple[str, str], PayPeriod] = {}
    for period in periods:
        unique.setdefault(period.key, period)
    return sorted(unique.values())


def generate_periods(
    practice: Practice | str | None, from_date: date, to_date: date
) -> list[PayPeriod]:
    """Ordered, non-overlapping periods covering every day of ``[from_date, to_date]``.

    Periods straddling the window edges are clipped to the window.
    """
    if from_date > to_date:
        return []

    pay_cycle = _cycle_of(practice)
    clipped = []
    for year, month in iter_months(from_date, to_date):
        for period in month_periods(year, month, pay_cycle):
            start = max(period.start, from_date)
            end = min(period.end, to_date)
            if start <= end:
                clipped.append(PayPeriod(start, end))
    return _dedupe_sorted(clipped)


def generate_historical_periods(
    practice: Practice, entries: Iterable[Entry], today: date
) -> list[PayPeriod]:
    """All completed periods from the earliest entry's month up to ``today``.

    A period is completed when its end is strictly before ``today``; the
    in-progress period is handled by :func:`current_pay_period`.
    """
    anchors = [entry.anchor_date for entry in entries]
    if not anchors:
        return []

    earliest = min([today, *anchors])
    pay_cycle = _cycle_of(practice)
    completed = [
        period
        for year, month in iter_months(earliest, today)
        for period in month_periods(year, month, pay_cycle)
        if period.end < today
    ]
    return _dedupe_sorted(completed)


def current_pay_period(practice: Practice | str | None, today: date) -> PayPeriod:
    """The in-progress period containing ``today``.

    Weekly practices use the Sunday-to-Saturday week around ``today``,
    clipped to the current month.
    """
    pay_cycle = _cycle_of(practice)
    first = first_of_month(today.year, today.month)
    last = last_of_month(today.year, today.month)

    if pay_cycle == PayCycle.BI_WEEKLY:
        if today.day <= 15:
            return PayPeriod(first, date(today.year, today.month, 15))
        return PayPeriod(date(today.year, today.month, 16), last)

    if pay_cycle == PayCycle.WEEKLY:
        week_start = sunday_week_start(today)
        week_end = week_start + timedelta(days=6)
        return PayPeriod(max(week_start, first), min(week_end, last))

    return PayPeriod(first, last)


def generate_future_periods(
    practice: Practice, start: date, months_ahead: int = 6
) -> list[ScheduledPeriod]:
    """Periods for ``months_ahead`` calendar months from ``start``'s month,
    with estimated due dates.

    Periods that ended before ``start`` are dropped.
    """
    if months_ahead <= 0:
        return []

    month_start = first_of_month(start.year, start.month)
    horizon = add_months(month_start, months_ahead) - timedelta(days=1)
    scheduled = []
    for year, month in iter_months(start, horizon):
        for period in month_periods(year, month, practice.pay_cycle):
            if period.end < start:
                continue
            scheduled.append(
                ScheduledPeriod(
                    period=period,
                    due_date=estimate_due_date(
                        period.end, practice.pay_cycle, practice.payment_detail
                    ),
                )
            )
    return scheduled
