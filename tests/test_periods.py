"""Unit tests for pay period generation."""

from datetime import date, timedelta

import pytest

from practice_pay.calculators.periods import (
    calendar_week_periods,
    current_pay_period,
    generate_future_periods,
    generate_historical_periods,
    generate_periods,
    month_periods,
)
from practice_pay.calculators.types import PayPeriod
from practice_pay.models import AttendanceRecord, PeriodSummary


class TestMonthPeriods:
    """Test partitioning of a single month."""

    def test_monthly_is_whole_month(self):
        assert month_periods(2024, 2, "monthly") == [PayPeriod(date(2024, 2, 1), date(2024, 2, 29))]

    def test_bi_weekly_splits_on_fifteenth(self):
        periods = month_periods(2024, 2, "bi-weekly")
        assert periods == [
            PayPeriod(date(2024, 2, 1), date(2024, 2, 15)),
            PayPeriod(date(2024, 2, 16), date(2024, 2, 29)),
        ]

    def test_weekly_truncates_last_week_at_month_end(self):
        periods = month_periods(2024, 3, "weekly")
        assert [p.start.day for p in periods] == [1, 8, 15, 22, 29]
        assert periods[-1] == PayPeriod(date(2024, 3, 29), date(2024, 3, 31))

    def test_unknown_cycle_falls_back_to_monthly(self):
        """A percentage 'cycle' is not a cycle; monthly rules apply."""
        assert month_periods(2024, 3, "percentage") == month_periods(2024, 3, "monthly")


class TestCalendarWeekPeriods:
    """Test Sunday-to-Saturday weeks within a month."""

    def test_weeks_clipped_at_month_edges(self):
        periods = calendar_week_periods(2024, 3)
        assert periods[0] == PayPeriod(date(2024, 3, 1), date(2024, 3, 2))
        assert [p.start.day for p in periods[1:]] == [3, 10, 17, 24, 31]
        assert periods[-1] == PayPeriod(date(2024, 3, 31), date(2024, 3, 31))

    def test_month_starting_on_sunday(self):
        periods = calendar_week_periods(2024, 9)
        assert periods[0] == PayPeriod(date(2024, 9, 1), date(2024, 9, 7))
        assert periods[-1] == PayPeriod(date(2024, 9, 29), date(2024, 9, 30))


class TestGeneratePeriods:
    """Test periods over an arbitrary window."""

    def test_periods_are_clipped_to_window(self):
        periods = generate_periods("monthly", date(2024, 3, 10), date(2024, 4, 5))
        assert periods == [
            PayPeriod(date(2024, 3, 10), date(2024, 3, 31)),
            PayPeriod(date(2024, 4, 1), date(2024, 4, 5)),
        ]

    def test_reversed_window_is_empty(self):
        assert generate_periods("weekly", date(2024, 3, 10), date(2024, 3, 1)) == []

    @pytest.mark.parametrize("cycle", ["monthly", "bi-weekly", "weekly", "quarterly"])
    def test_every_day_covered_once(self, cycle):
        start, end = date(2023, 12, 20), date(2024, 3, 9)
        covered = [day for p in generate_periods(cycle, start, end) for day in p.iter_days()]
        assert covered == [start + timedelta(days=i) for i in range((end - start).days + 1)]

    def test_accepts_practice(self, make_practice):
        practice = make_practice(pay_cycle="bi-weekly")
        assert len(generate_periods(practice, date(2024, 1, 1), date(2024, 1, 31))) == 2


class TestHistoricalPeriods:
    """Test completed period generation."""

    def test_monthly_excludes_in_progress_month(self, make_practice):
        entries = [AttendanceRecord(practice_id="p1", date=date(2024, 1, 10))]
        periods = generate_historical_periods(make_practice(), entries, date(2024, 3, 10))
        assert periods == [
            PayPeriod(date(2024, 1, 1), date(2024, 1, 31)),
            PayPeriod(date(2024, 2, 1), date(2024, 2, 29)),
        ]

    def test_bi_weekly_only_strictly_ended_periods(self, make_practice):
        entries = [AttendanceRecord(practice_id="p1", date=date(2024, 1, 10))]
        periods = generate_historical_periods(
            make_practice(pay_cycle="bi-weekly"), entries, date(2024, 3, 15)
        )
        # Mar 1-15 ends on "today" and is not yet complete
        assert periods[-1] == PayPeriod(date(2024, 2, 16), date(2024, 2, 29))
        assert len(periods) == 4

    def test_period_summary_anchors_on_start_date(self, make_practice):
        entries = [
            PeriodSummary(
                practice_id="p1",
                period_start_date=date(2023, 12, 16),
                period_end_date=date(2024, 1, 15),
            )
        ]
        periods = generate_historical_periods(make_practice(), entries, date(2024, 2, 1))
        assert periods[0].start == date(2023, 12, 1)

    def test_no_entries_no_periods(self, make_practice):
        assert generate_historical_periods(make_practice(), [], date(2024, 3, 10)) == []


class TestCurrentPayPeriod:
    """Test the in-progress period."""

    def test_bi_weekly_first_half_includes_fifteenth(self):
        assert current_pay_period("bi-weekly", date(2024, 3, 15)) == PayPeriod(
            date(2024, 3, 1), date(2024, 3, 15)
        )

    def test_bi_weekly_second_half(self):
        assert current_pay_period("bi-weekly", date(2024, 3, 16)) == PayPeriod(
            date(2024, 3, 16), date(2024, 3, 31)
        )

    def test_weekly_sunday_week_clipped_to_month_start(self):
        # 2024-03-01 is a Friday; its week began Sunday 2024-02-25
        assert current_pay_period("weekly", date(2024, 3, 1)) == PayPeriod(
            date(2024, 3, 1), date(2024, 3, 2)
        )

    def test_weekly_sunday_week_clipped_to_month_end(self):
        assert current_pay_period("weekly", date(2024, 3, 31)) == PayPeriod(
            date(2024, 3, 31), date(2024, 3, 31)
        )

    def test_other_cycles_use_whole_month(self):
        assert current_pay_period(None, date(2024, 2, 10)) == PayPeriod(
            date(2024, 2, 1), date(2024, 2, 29)
        )


class TestFuturePeriods:
    """Test forecasting periods."""

    def test_months_ahead_counts_calendar_months(self, make_practice):
        scheduled = generate_future_periods(make_practice(), date(2024, 3, 10), months_ahead=2)
        assert [s.period.start for s in scheduled] == [date(2024, 3, 1), date(2024, 4, 1)]

    def test_drops_periods_ended_before_start(self, make_practice):
        scheduled = generate_future_periods(
            make_practice(pay_cycle="bi-weekly"), date(2024, 3, 20), months_ahead=1
        )
        assert [s.period for s in scheduled] == [PayPeriod(date(2024, 3, 16), date(2024, 3, 31))]

    def test_due_dates_attached(self, make_practice):
        scheduled = generate_future_periods(make_practice(), date(2024, 3, 1), months_ahead=1)
        assert scheduled[0].due_date == date(2024, 4, 15)

    def test_non_positive_horizon(self, make_practice):
        assert generate_future_periods(make_practice(), date(2024, 3, 1), months_ahead=0) == []
