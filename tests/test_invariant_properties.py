"""Property-based tests for calculation invariants.

These use hypothesis to generate practices, entries and date ranges and
check that the invariants hold for every combination.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date, timedelta
from decimal import Decimal

from hypothesis import given, settings, strategies as st

from practice_pay.calculators.pay_calculator import compute_period_pay
from practice_pay.calculators.periods import generate_periods
from practice_pay.models import (
    Adjustment,
    AttendanceRecord,
    CalculationBase,
    Cheque,
    DailySummary,
    Practice,
)
from practice_pay.services.reconciliation import reconcile, sum_confirmed_payments

amounts = st.decimals(min_value=0, max_value=100000, places=2, allow_nan=False, allow_infinity=False)
percentages = st.decimals(min_value=0, max_value=100, places=2, allow_nan=False, allow_infinity=False)
days = st.dates(min_value=date(2022, 1, 1), max_value=date(2026, 12, 31))
cycles = st.sampled_from(["monthly", "bi-weekly", "weekly", "percentage", ""])


@st.composite
def practices(draw) -> Practice:
    return Practice(
        id="p1",
        percentage=draw(percentages),
        base_pay=draw(st.none() | amounts),
        daily_guarantee=draw(st.none() | amounts),
        calculation_base=draw(st.sampled_from(list(CalculationBase))),
        pay_cycle=draw(cycles),
    )


@st.composite
def daily_summaries(draw) -> DailySummary:
    return DailySummary(
        practice_id="p1",
        date=draw(st.dates(min_value=date(2024, 3, 1), max_value=date(2024, 3, 31))),
        production=draw(amounts),
        collection=draw(amounts),
        adjustments=tuple(Adjustment(a) for a in draw(st.lists(amounts, max_size=2))),
    )


@st.composite
def attendance(draw) -> AttendanceRecord:
    return AttendanceRecord(
        practice_id="p1",
        date=draw(st.dates(min_value=date(2024, 3, 1), max_value=date(2024, 3, 31))),
    )


entry_lists = st.lists(daily_summaries() | attendance(), max_size=12)


class TestPeriodCoverage:
    """Periods tile any range: no gaps, no overlaps."""

    @given(cycle=cycles, start=days, length=st.integers(min_value=0, max_value=400))
    @settings(max_examples=200)
    def test_every_day_exactly_once(self, cycle, start, length):
        end = start + timedelta(days=length)
        periods = generate_periods(cycle, start, end)

        covered = [day for period in periods for day in period.iter_days()]
        assert covered == [start + timedelta(days=i) for i in range(length + 1)]
        for earlier, later in zip(periods, periods[1:]):
            assert earlier.end + timedelta(days=1) == later.start


class TestGuaranteeFloor:
    """Calculated pay never drops below the base guarantee."""

    @given(practice=practices(), entries=entry_lists)
    @settings(max_examples=200)
    def test_calculated_pay_at_least_base(self, practice, entries):
        result = compute_period_pay(practice, entries)
        assert result.calculated_pay >= result.base_pay_owed
        assert result.calculated_pay >= result.production_pay_component


class TestMonotonicity:
    """More production never means less production pay."""

    @given(
        practice=practices(),
        entries=st.lists(daily_summaries(), min_size=1, max_size=8),
        index=st.integers(min_value=0, max_value=7),
        extra=amounts,
    )
    @settings(max_examples=200)
    def test_raising_production_never_lowers_pay(self, practice, entries, index, extra):
        practice = replace(practice, calculation_base=CalculationBase.PRODUCTION)
        index %= len(entries)
        before = compute_period_pay(practice, entries)

        bumped = list(entries)
        target = bumped[index]
        bumped[index] = DailySummary(
            practice_id=target.practice_id,
            date=target.date,
            production=target.production + extra,
            collection=target.collection,
            adjustments=target.adjustments,
        )
        after = compute_period_pay(practice, bumped)

        assert after.production_pay_component >= before.production_pay_component
        assert after.calculated_pay >= before.calculated_pay


class TestIdempotence:
    """Reconciling twice gives the same record."""

    @given(practice=practices(), entries=entry_lists, today=days)
    @settings(max_examples=100)
    def test_reconcile_is_deterministic(self, practice, entries, today):
        first = reconcile(practice, entries, [], [], [], today)
        second = reconcile(practice, list(entries), [], [], [], today)
        assert first == second


class TestConfirmationFilter:
    """Only cleared cheques count toward confirmed payments."""

    @given(amount=amounts, status=st.sampled_from(["Pending", "Bounced", "Deposited", "cleared", ""]))
    def test_unconfirmed_cheques_contribute_nothing(self, amount, status):
        assert sum_confirmed_payments([Cheque("p1", amount, status)], [], []) == 0

    @given(amount=amounts)
    def test_cleared_cheques_contribute_in_full(self, amount):
        assert sum_confirmed_payments([Cheque("p1", amount, "Cleared")], [], []) == amount
