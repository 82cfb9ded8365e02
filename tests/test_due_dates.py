"""Unit tests for due date estimation."""

from datetime import date

import pytest

from practice_pay.calculators.due_dates import estimate_due_date, is_overdue


class TestPaymentDetailRules:
    """Free-text payment details take precedence over the cycle."""

    def test_following_month_with_day(self):
        assert estimate_due_date(date(2024, 3, 31), "monthly", "Paid on the 10th of the following month") == date(2024, 4, 10)

    def test_following_month_defaults_to_fifteenth(self):
        assert estimate_due_date(date(2024, 3, 31), "weekly", "Following month") == date(2024, 4, 15)

    def test_following_month_day_clamped(self):
        assert estimate_due_date(date(2024, 1, 31), "monthly", "31st of following month") == date(2024, 2, 29)

    def test_following_month_across_year_end(self):
        assert estimate_due_date(date(2024, 12, 31), "monthly", "following month 5th") == date(2025, 1, 5)

    @pytest.mark.parametrize("detail", ["End of month", "last business day"])
    def test_end_of_month(self, detail):
        assert estimate_due_date(date(2024, 3, 15), "bi-weekly", detail) == date(2024, 3, 31)

    @pytest.mark.parametrize("detail", ["Every second Friday", "paid bi-weekly by cheque"])
    def test_period_end(self, detail):
        assert estimate_due_date(date(2024, 3, 15), "monthly", detail) == date(2024, 3, 15)

    def test_following_month_wins_over_end_of_month(self):
        detail = "end of month work, paid 20th of following month"
        assert estimate_due_date(date(2024, 3, 31), "monthly", detail) == date(2024, 4, 20)


class TestCycleDefaults:
    """Cycle defaults apply when no detail rule matches."""

    def test_bi_weekly_due_on_period_end(self):
        assert estimate_due_date(date(2024, 3, 15), "bi-weekly") == date(2024, 3, 15)

    def test_monthly_due_fifteenth_next_month(self):
        assert estimate_due_date(date(2024, 12, 31), "monthly") == date(2025, 1, 15)

    def test_weekly_seven_days_later(self):
        assert estimate_due_date(date(2024, 3, 7), "weekly") == date(2024, 3, 14)

    def test_unknown_cycle_fifteen_days_later(self):
        assert estimate_due_date(date(2024, 3, 31), "percentage", "") == date(2024, 4, 15)

    def test_missing_period_end(self):
        assert estimate_due_date(None, "monthly") is None


class TestIsOverdue:
    def test_before_today_is_overdue(self):
        assert is_overdue(date(2024, 4, 9), date(2024, 4, 10))

    def test_due_today_is_not_overdue(self):
        assert not is_overdue(date(2024, 4, 10), date(2024, 4, 10))

    def test_no_due_date(self):
        assert not is_overdue(None, date(2024, 4, 10))
