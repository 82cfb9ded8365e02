"""Cash-flow forecasting from historical performance.

Projections apply the same guarantee-versus-percentage rule as actual pay,
using average daily production over a lookback window.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Mapping

from practice_pay.calculators.periods import generate_future_periods
from practice_pay.calculators.types import PayPeriod
from practice_pay.models.entries import Entry, is_financial
from practice_pay.models.practice import CalculationBase, Practice
from practice_pay.money import HUNDRED, ZERO, round_to_cents, safe_divide, total

logger = logging.getLogger(__name__)

DEFAULT_LOOKBACK_DAYS = 90
DEFAULT_DAYS_PER_WEEK = Decimal("2.5")


@dataclass(frozen=True)
class PerformanceAverages:
    avg_production: Decimal = ZERO
    avg_collection: Decimal = ZERO
    days_worked: int = 0
    avg_days_per_week: Decimal = ZERO
    total_production: Decimal = ZERO
    total_collection: Decimal = ZERO


@dataclass(frozen=True)
class ScheduledDay:
    """One day of a caller-supplied work schedule."""

    date: date
    is_scheduled: bool = True


@dataclass(frozen=True)
class ProjectionBreakdown:
    production: Decimal
    collection: Decimal
    base_pay: Decimal
    production_pay: Decimal


@dataclass(frozen=True)
class IncomeProjection:
    period: PayPeriod
    estimated_pay: Decimal
    scheduled_days: int
    due_date: date | None
    confidence: str
    breakdown: ProjectionBreakdown
    impacted: bool = False
    days_lost: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "period": self.period.to_dict(),
            "estimatedPay": str(self.estimated_pay),
            "scheduledDays": self.scheduled_days,
            "dueDate": self.due_date.isoformat() if self.due_date else None,
            "confidence": self.confidence,
            "breakdown": {
                "production": str(self.breakdown.production),
                "collection": str(self.breakdown.collection),
                "basePay": str(self.breakdown.base_pay),
                "productionPay": str(self.breakdown.production_pay),
            },
            "impacted": self.impacted,
            "daysLost": self.days_lost,
        }


@dataclass(frozen=True)
class TimeOffScenario:
    """Days off between ``start_date`` and ``end_date`` inclusive."""

    start_date: date
    end_date: date


@dataclass(frozen=True)
class ScenarioSummary:
    baseline_total: Decimal
    scenario_total: Decimal
    difference: Decimal
    percentage_impact: Decimal


@dataclass(frozen=True)
class ScenarioResult:
    baseline: list[IncomeProjection]
    scenario: list[IncomeProjection]
    summary: ScenarioSummary

    def to_dict(self) -> dict[str, Any]:
        return {
            "baseline": [p.to_dict() for p in self.baseline],
            "scenario": [p.to_dict() for p in self.scenario],
            "summary": {
                "baselineTotal": str(self.summary.baseline_total),
                "scenarioTotal": str(self.summary.scenario_total),
                "difference": str(self.summary.difference),
                "percentageImpact": str(self.summary.percentage_impact),
            },
        }


@dataclass
class PracticeMonthProjection:
    practice_name: str
    total: Decimal = ZERO
    periods: list[IncomeProjection] = field(default_factory=list)


@dataclass
class MonthlyProjection:
    year: int
    month: int
    total_projected: Decimal = ZERO
    by_practice: dict[str, PracticeMonthProjection] = field(default_factory=dict)


def _round_whole(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def calculate_average_performance(
    entries: Iterable[Entry], today: date, lookback_days: int = DEFAULT_LOOKBACK_DAYS
) -> PerformanceAverages:
    """Average daily production/collection over the last ``lookback_days``."""
    cutoff = today - timedelta(days=lookback_days)
    recent = [e for e in entries if e.anchor_date >= cutoff]
    financial = [e for e in recent if is_financial(e)]

    days_worked = len({e.anchor_date for e in recent})
    production = total(e.production for e in financial)
    collection = total(e.collection for e in financial)

    weeks = max(Decimal(1), Decimal(lookback_days) / 7)
    per_week = safe_divide(Decimal(days_worked), weeks)

    return PerformanceAverages(
        avg_production=safe_divide(production, Decimal(days_worked)),
        avg_collection=safe_divide(collection, Decimal(days_worked)),
        days_worked=days_worked,
        avg_days_per_week=per_week.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP),
        total_production=production,
        total_collection=collection,
    )


def estimate_work_days(period: PayPeriod, avg_days_per_week: Decimal) -> int:
    """Expected work days in a period from the historical weekly pattern."""
    per_week = avg_days_per_week if avg_days_per_week > 0 else DEFAULT_DAYS_PER_WEEK
    return _round_whole(Decimal(period.days) / 7 * per_week)


def project_future_income(
    practice: Practice,
    history: Iterable[Entry],
    today: date,
    schedule: Iterable[ScheduledDay] = (),
    months_ahead: int = 3,
    lookback_days: int = DEFAULT_LOOKBACK_DAYS,
) -> list[IncomeProjection]:
    """Projected pay for each upcoming period.

    Scheduled days inside a period take precedence over the historical
    weekly pattern and raise confidence to "high". Without any history
    there is nothing to project from and the result is empty.
    """
    averages = calculate_average_performance(history, today, lookback_days)
    if averages.days_worked == 0 or (
        averages.avg_production == 0 and averages.avg_collection == 0
    ):
        logger.debug("No recent history for practice %s, nothing to project", practice.id)
        return []

    scheduled_dates = [s.date for s in schedule if s.is_scheduled]
    projections = []
    for scheduled in generate_future_periods(practice, today, months_ahead):
        period = scheduled.period
        in_schedule = sum(1 for d in scheduled_dates if period.contains(d))
        days = in_schedule if in_schedule > 0 else estimate_work_days(
            period, averages.avg_days_per_week
        )

        production = averages.avg_production * days
        collection = averages.avg_collection * days
        base_value = (
            collection if practice.calculation_base == CalculationBase.COLLECTION else production
        )
        production_pay = base_value * (practice.percentage / HUNDRED)
        base_pay = practice.daily_floor * days

        projections.append(
            IncomeProjection(
                period=period,
                estimated_pay=round_to_cents(max(base_pay, production_pay)),
                scheduled_days=days,
                due_date=scheduled.due_date,
                confidence="high" if in_schedule > 0 else "medium",
                breakdown=ProjectionBreakdown(
                    production=round_to_cents(production),
                    collection=round_to_cents(collection),
                    base_pay=round_to_cents(base_pay),
                    production_pay=round_to_cents(production_pay),
                ),
            )
        )
    return projections


def simulate_scenario(
    practice: Practice,
    history: Iterable[Entry],
    scenario: TimeOffScenario,
    today: date,
    months_ahead: int = 3,
    lookback_days: int = DEFAULT_LOOKBACK_DAYS,
) -> ScenarioResult:
    """What-if: how much projected income a stretch of time off costs."""
    baseline = project_future_income(
        practice, history, today, months_ahead=months_ahead, lookback_days=lookback_days
    )

    adjusted = []
    for projection in baseline:
        period = projection.period
        if not period.overlaps(scenario.start_date, scenario.end_date):
            adjusted.append(projection)
            continue

        overlap = PayPeriod(
            max(scenario.start_date, period.start), min(scenario.end_date, period.end)
        )
        days_left = max(0, projection.scheduled_days - overlap.days)
        per_day = safe_divide(projection.estimated_pay, Decimal(projection.scheduled_days))
        adjusted.append(
            replace(
                projection,
                scheduled_days=days_left,
                estimated_pay=round_to_cents(per_day * days_left),
                impacted=True,
                days_lost=overlap.days,
            )
        )

    baseline_total = total(p.estimated_pay for p in baseline)
    scenario_total = total(p.estimated_pay for p in adjusted)
    difference = baseline_total - scenario_total

    return ScenarioResult(
        baseline=baseline,
        scenario=adjusted,
        summary=ScenarioSummary(
            baseline_total=round_to_cents(baseline_total),
            scenario_total=round_to_cents(scenario_total),
            difference=round_to_cents(difference),
            percentage_impact=round_to_cents(safe_divide(difference, baseline_total) * HUNDRED),
        ),
    )


def aggregate_monthly_projections(
    practices: Iterable[Practice],
    entries_by_practice: Mapping[Any, list[Entry]],
    today: date,
    months_ahead: int = 6,
) -> list[MonthlyProjection]:
    """Projected income per calendar month across active practices.

    Periods are bucketed by the month their end date falls in.
    """
    months: dict[tuple[int, int], MonthlyProjection] = {}
    for practice in practices:
        if not practice.is_active:
            continue
        entries = entries_by_practice.get(practice.id, [])
        for projection in project_future_income(
            practice, entries, today, months_ahead=months_ahead
        ):
            end = projection.period.end
            bucket = months.setdefault((end.year, end.month), MonthlyProjection(end.year, end.month))
            bucket.total_projected += projection.estimated_pay

            key = str(practice.id)
            per_practice = bucket.by_practice.setdefault(
                key, PracticeMonthProjection(practice_name=practice.name)
            )
            per_practice.total += projection.estimated_pay
            per_practice.periods.append(projection)

    return [months[key] for key in sorted(months)]
