"""Unit tests for practice comparison metrics."""

from datetime import date
from decimal import Decimal

import pytest

from practice_pay.models import (
    AttendanceRecord,
    AttendanceType,
    DailySummary,
    Payment,
    PracticeStatus,
)
from practice_pay.services.metrics import (
    ComparisonOptions,
    calculate_contributions,
    calculate_practice_metrics,
    compare_metrics,
)


@pytest.fixture
def practices(make_practice):
    return [
        make_practice(id="a", name="Alpha"),
        make_practice(id="b", name="Beta", base_pay=Decimal("500"), percentage=Decimal("0")),
        make_practice(id="c", name="Gamma"),
    ]


@pytest.fixture
def entries():
    return [
        DailySummary("a", date(2024, 3, 4), Decimal("5000"), Decimal("4000")),
        DailySummary("a", date(2024, 3, 5), Decimal("5000"), Decimal("5000")),
        DailySummary("a", date(2024, 4, 2), Decimal("2000")),
        AttendanceRecord("b", date(2024, 3, 4)),
        AttendanceRecord("b", date(2024, 3, 5), AttendanceType.HALF_DAY),
        AttendanceRecord("b", date(2024, 3, 6)),
    ]


@pytest.fixture
def payments():
    return [
        Payment("a", Decimal("1000"), date(2024, 3, 15)),
        Payment("b", Decimal("1500"), date(2024, 4, 1)),
    ]


class TestPracticeMetrics:
    """Test metrics for a single practice."""

    def test_production_practice(self, practices, entries, payments):
        metrics = calculate_practice_metrics(
            practices[0], entries[:3], [p for p in payments if p.practice_id == "a"]
        )
        assert metrics.days_worked == Decimal("3")
        assert metrics.total_production == Decimal("12000")
        assert metrics.total_collection == Decimal("9000")
        assert metrics.monthly_pays == [Decimal("4000"), Decimal("800")]
        assert metrics.total_calculated_pay == Decimal("4800")
        assert metrics.avg_pay_per_day == Decimal("1600")
        assert metrics.collection_rate == Decimal("75")
        assert metrics.effective_rate == Decimal("40")
        assert metrics.outstanding_balance == Decimal("3800")

    def test_guaranteed_practice_with_half_day(self, practices, entries):
        metrics = calculate_practice_metrics(practices[1], entries[3:], [])
        assert metrics.days_worked == Decimal("2.5")
        assert metrics.total_calculated_pay == Decimal("1500")
        assert metrics.avg_pay_per_day == Decimal("600")

    def test_zero_production_rates_are_zero(self, practices, entries):
        metrics = calculate_practice_metrics(practices[1], entries[3:], [])
        assert metrics.effective_rate == Decimal("0")
        assert metrics.collection_rate == Decimal("0")


class TestCompareMetrics:
    """Test comparison across practices."""

    def test_inactive_days_dropped(self, practices, entries, payments):
        result = compare_metrics(practices, entries, payments)
        assert [m.practice_id for m in result.metrics] == ["a", "b"]

    def test_totals(self, practices, entries, payments):
        totals = compare_metrics(practices, entries, payments).totals
        assert totals.total_calculated_pay == Decimal("6300")
        assert totals.days_worked == Decimal("5.5")
        assert totals.total_payments_received == Decimal("2500")

    def test_rankings(self, practices, entries, payments):
        rankings = compare_metrics(practices, entries, payments).rankings
        assert set(rankings) == {
            "byTotalPay",
            "byAvgPayPerDay",
            "byProduction",
            "byEffectiveRate",
            "byDaysWorked",
        }
        assert [m.practice_id for m in rankings["byTotalPay"]] == ["a", "b"]
        assert [m.practice_id for m in rankings["byDaysWorked"]] == ["a", "b"]

    def test_insights(self, practices, entries, payments):
        insights = compare_metrics(practices, entries, payments).insights
        by_type = {i.type: i for i in insights}
        assert by_type["top_earner"].practice == "Alpha"
        assert by_type["most_active"].value == Decimal("3")
        assert by_type["most_efficient"].is_percentage
        assert by_type["outstanding_balance"].count == 1
        assert by_type["outstanding_balance"].total_owed == Decimal("3800")

    def test_outstanding_threshold_configurable(self, practices, entries, payments):
        result = compare_metrics(
            practices, entries, payments, outstanding_threshold=Decimal("5000")
        )
        assert "outstanding_balance" not in {i.type for i in result.insights}

    def test_empty_selection_selects_nothing(self, practices, entries, payments):
        result = compare_metrics(practices, entries, payments, ComparisonOptions(practice_ids=[]))
        assert result.metrics == []
        assert result.insights == []

    def test_selection_by_id(self, practices, entries, payments):
        result = compare_metrics(
            practices, entries, payments, ComparisonOptions(practice_ids=["b"])
        )
        assert [m.practice_id for m in result.metrics] == ["b"]

    def test_window_filters_entries_and_payments(self, practices, entries, payments):
        result = compare_metrics(
            practices, entries, payments, ComparisonOptions(start_date=date(2024, 4, 1))
        )
        assert [m.practice_id for m in result.metrics] == ["a"]
        alpha = result.metrics[0]
        assert alpha.total_calculated_pay == Decimal("800")
        assert alpha.total_payments_received == Decimal("0")

    def test_archived_excluded_unless_requested(self, make_practice, entries):
        archived = [make_practice(id="a", status=PracticeStatus.ARCHIVED)]
        assert compare_metrics(archived, entries, []).metrics == []
        result = compare_metrics(archived, entries, [], ComparisonOptions(active_only=False))
        assert len(result.metrics) == 1


class TestContributions:
    def test_shares_of_pay_and_production(self, practices, entries, payments):
        metrics = calculate_contributions(compare_metrics(practices, entries, payments).metrics)
        alpha, beta = metrics
        assert alpha.production_contribution == Decimal("100")
        assert beta.production_contribution == Decimal("0")
        assert alpha.pay_contribution + beta.pay_contribution == pytest.approx(Decimal("100"))

    def test_empty(self):
        assert calculate_contributions([]) == []
