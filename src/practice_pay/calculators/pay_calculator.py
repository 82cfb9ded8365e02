"""Pay calculation for a single pay period and for a calendar month.

Calculation pipeline (stable order per period):
1) Count distinct attendance days (attendance records + daily summaries)
2) Base guarantee = daily floor * attendance days
3) Gross production / collection over financial entries
4) Net base = production or collection, minus entry adjustments
5) Apply pre-split practice deductions to the net base
6) Production pay = split base * percentage
7) Gross pay = max(base guarantee, production pay)
8) Apply post-split practice deductions, never below the base guarantee
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Iterable

from practice_pay.calculators.periods import calendar_week_periods, month_periods
from practice_pay.calculators.types import (
    MonthPayResult,
    PayPeriod,
    PayResult,
    PeriodPayDetail,
)
from practice_pay.models.entries import (
    Entry,
    PeriodSummary,
    adjustments_total,
    counts_attendance,
    day_value,
    is_financial,
)
from practice_pay.models.practice import CalculationBase, PayCycle, Practice, SplitType
from practice_pay.money import HUNDRED, ZERO, total


def count_attendance_days(entries: Iterable[Entry]) -> int:
    """Distinct dates marked as worked; a date seen twice counts once."""
    return len({entry.date for entry in entries if counts_attendance(entry)})


def count_days_worked(entries: Iterable[Entry]) -> Decimal:
    """Half-day aware day count.

    A half-day attendance record is worth 0.5; each date takes the maximum
    value among its records, so a half-day record and a daily summary on
    the same date count as one full day.
    """
    by_date: dict[date, Decimal] = defaultdict(lambda: ZERO)
    for entry in entries:
        if counts_attendance(entry):
            by_date[entry.date] = max(by_date[entry.date], day_value(entry))
    return total(by_date.values())


def compute_period_pay(practice: Practice | None, entries: Iterable[Entry]) -> PayResult:
    """Pay owed for the entries of one pay period.

    The guarantee floor always wins ties: production pay only matters when
    it exceeds the floor. A missing practice yields an all-zero result.
    """
    if practice is None:
        return PayResult()

    entries = list(entries)
    financial = [e for e in entries if is_financial(e)]

    attendance_days = count_attendance_days(entries)
    base_pay_owed = practice.daily_floor * attendance_days

    gross_production = total(e.production for e in financial)
    gross_collection = total(e.collection for e in financial)
    total_adjustments = total(adjustments_total(e) for e in financial)

    if practice.calculation_base == CalculationBase.COLLECTION:
        base_value = gross_collection
    else:
        base_value = gross_production
    net_base = base_value - total_adjustments

    pre_split = total(
        d.amount_for(net_base) for d in practice.deductions_for(SplitType.PRE_SPLIT)
    )
    production_pay = (net_base - pre_split) * (practice.percentage / HUNDRED)

    gross_pay = max(base_pay_owed, production_pay)

    post_split = total(
        d.amount_for(gross_pay) for d in practice.deductions_for(SplitType.POST_SPLIT)
    )
    calculated_pay = max(base_pay_owed, gross_pay - post_split)

    return PayResult(
        calculated_pay=calculated_pay,
        base_pay_owed=base_pay_owed,
        production_pay_component=production_pay,
        production_total=gross_production,
        collection_total=gross_collection,
        attendance_days=attendance_days,
        total_adjustments=total_adjustments,
        net_base=net_base,
        pre_split_deductions=pre_split,
        post_split_deductions=post_split,
        gross_pay=gross_pay,
    )


def calculate_month_pay(
    practice: Practice | None, entries_in_month: Iterable[Entry], year: int, month: int
) -> MonthPayResult:
    """Pay for one calendar month, respecting the practice's pay cycle.

    When every financial entry of the month is a period summary, each
    summary is treated as its own pay period. Otherwise point-in-time
    entries are grouped into the month's pay periods and period summaries
    are ignored. Weekly practices use Sunday-to-Saturday weeks here, clipped
    to the month, rather than the 1st-anchored weeks of reconciliation.
    """
    if practice is None:
        return MonthPayResult()

    entries = list(entries_in_month)
    financial = [e for e in entries if is_financial(e)]
    production_total = total(e.production for e in financial)

    details: list[PeriodPayDetail] = []

    if financial and all(isinstance(e, PeriodSummary) for e in financial):
        for summary in financial:
            result = compute_period_pay(practice, [summary])
            details.append(
                PeriodPayDetail(
                    period=PayPeriod(summary.period_start_date, summary.period_end_date),
                    base=result.base_pay_owed,
                    production=result.production_pay_component,
                    final=result.calculated_pay,
                )
            )
        pay_structure = f"(Sum of {len(details)} Period Summaries)"
    else:
        if practice.pay_cycle == PayCycle.WEEKLY:
            periods = calendar_week_periods(year, month)
        else:
            periods = month_periods(year, month, practice.pay_cycle)
        for period in periods:
            in_period = [
                e
                for e in entries
                if not isinstance(e, PeriodSummary) and period.contains(e.date)
            ]
            result = compute_period_pay(practice, in_period)
            details.append(
                PeriodPayDetail(
                    period=period,
                    base=result.base_pay_owed,
                    production=result.production_pay_component,
                    final=result.calculated_pay,
                    has_entries=bool(in_period),
                )
            )
        relevant = sum(1 for d in details if d.has_entries)
        plural = "" if relevant == 1 else "s"
        pay_structure = f"(Sum of {relevant} {practice.pay_cycle} period{plural})"

    details.sort(key=lambda d: d.period.start)
    return MonthPayResult(
        calculated_pay=total(d.final for d in details),
        base_pay_owed=total(d.base for d in details),
        production_pay_component=total(d.production for d in details),
        production_total=production_total,
        pay_structure=pay_structure,
        pay_periods=details,
    )
