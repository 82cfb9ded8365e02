"""Practice performance comparison.

Per-practice metrics over an optional date window, ranked and summarised
into insights. Pay is summed month by month because the guarantee versus
percentage split is decided per pay period, never over arbitrary spans.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date
from decimal import Decimal
from typing import Any, Iterable

from practice_pay.calculators.pay_calculator import calculate_month_pay, count_days_worked
from practice_pay.models.entries import Entry, is_financial
from practice_pay.models.practice import PaymentType, Practice
from practice_pay.models.transactions import Payment
from practice_pay.money import ZERO, percent_of, safe_divide, total

logger = logging.getLogger(__name__)

DEFAULT_OUTSTANDING_THRESHOLD = Decimal("100")


@dataclass(frozen=True)
class PracticeMetrics:
    practice_id: Any
    practice_name: str
    payment_type: PaymentType
    percentage: Decimal
    base_pay: Decimal
    days_worked: Decimal
    total_production: Decimal
    total_collection: Decimal
    total_calculated_pay: Decimal
    total_payments_received: Decimal
    outstanding_balance: Decimal
    avg_production_per_day: Decimal
    avg_collection_per_day: Decimal
    avg_pay_per_day: Decimal
    collection_rate: Decimal
    effective_rate: Decimal
    monthly_pays: list[Decimal] = field(default_factory=list)
    pay_contribution: Decimal | None = None
    production_contribution: Decimal | None = None

    def to_dict(self) -> dict[str, Any]:
        data = {
            "practiceId": self.practice_id,
            "practiceName": self.practice_name,
            "paymentType": self.payment_type.value,
            "percentage": str(self.percentage),
            "basePay": str(self.base_pay),
            "daysWorked": str(self.days_worked),
            "totalProduction": str(self.total_production),
            "totalCollection": str(self.total_collection),
            "totalCalculatedPay": str(self.total_calculated_pay),
            "totalPaymentsReceived": str(self.total_payments_received),
            "outstandingBalance": str(self.outstanding_balance),
            "avgProductionPerDay": str(self.avg_production_per_day),
            "avgCollectionPerDay": str(self.avg_collection_per_day),
            "avgPayPerDay": str(self.avg_pay_per_day),
            "collectionRate": str(self.collection_rate),
            "effectiveRate": str(self.effective_rate),
            "monthlyPays": [str(p) for p in self.monthly_pays],
        }
        if self.pay_contribution is not None:
            data["payContribution"] = str(self.pay_contribution)
            data["productionContribution"] = str(self.production_contribution)
        return data


@dataclass(frozen=True)
class ComparisonOptions:
    """Window and selection for a comparison.

    ``practice_ids=None`` selects every practice; an empty list selects none.
    """

    start_date: date | None = None
    end_date: date | None = None
    practice_ids: list[Any] | None = None
    active_only: bool = True


@dataclass(frozen=True)
class ComparisonTotals:
    days_worked: Decimal = ZERO
    total_production: Decimal = ZERO
    total_collection: Decimal = ZERO
    total_calculated_pay: Decimal = ZERO
    total_payments_received: Decimal = ZERO
    outstanding_balance: Decimal = ZERO

    def to_dict(self) -> dict[str, str]:
        return {
            "daysWorked": str(self.days_worked),
            "totalProduction": str(self.total_production),
            "totalCollection": str(self.total_collection),
            "totalCalculatedPay": str(self.total_calculated_pay),
            "totalPaymentsReceived": str(self.total_payments_received),
            "outstandingBalance": str(self.outstanding_balance),
        }


@dataclass(frozen=True)
class Insight:
    type: str
    title: str
    practice: str | None = None
    value: Decimal | None = None
    metric: str | None = None
    is_percentage: bool = False
    count: int | None = None
    total_owed: Decimal | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.type, "title": self.title}
        if self.practice is not None:
            data["practice"] = self.practice
            data["value"] = str(self.value)
            data["metric"] = self.metric
            if self.is_percentage:
                data["isPercentage"] = True
        if self.count is not None:
            data["count"] = self.count
            data["totalOwed"] = str(self.total_owed)
        return data


@dataclass(frozen=True)
class ComparisonResult:
    metrics: list[PracticeMetrics] = field(default_factory=list)
    totals: ComparisonTotals = field(default_factory=ComparisonTotals)
    rankings: dict[str, list[PracticeMetrics]] = field(default_factory=dict)
    insights: list[Insight] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "metrics": [m.to_dict() for m in self.metrics],
            "totals": self.totals.to_dict(),
            "rankings": {
                name: [m.practice_id for m in ranked] for name, ranked in self.rankings.items()
            },
            "insights": [i.to_dict() for i in self.insights],
        }


# Ranking name -> attribute, each sorted descending
RANKINGS = {
    "byTotalPay": "total_calculated_pay",
    "byAvgPayPerDay": "avg_pay_per_day",
    "byProduction": "total_production",
    "byEffectiveRate": "effective_rate",
    "byDaysWorked": "days_worked",
}


def _months_of(entries: Iterable[Entry]) -> list[tuple[int, int]]:
    """Distinct (year, month) of entry anchor dates, in first-seen order."""
    months: dict[tuple[int, int], None] = {}
    for entry in entries:
        months.setdefault((entry.anchor_date.year, entry.anchor_date.month), None)
    return list(months)


def calculate_practice_metrics(
    practice: Practice, entries: Iterable[Entry], payments: Iterable[Payment]
) -> PracticeMetrics:
    """Metrics for one practice over already-filtered entries and payments."""
    entries = list(entries)
    financial = [e for e in entries if is_financial(e)]

    days_worked = count_days_worked(entries)
    production = total(e.production for e in financial)
    collection = total(e.collection for e in financial)

    monthly_pays = []
    for year, month in _months_of(entries):
        in_month = [
            e
            for e in entries
            if (e.anchor_date.year, e.anchor_date.month) == (year, month)
        ]
        monthly_pays.append(calculate_month_pay(practice, in_month, year, month).calculated_pay)
    calculated_pay = total(monthly_pays)

    received = total(p.amount for p in payments)

    return PracticeMetrics(
        practice_id=practice.id,
        practice_name=practice.name,
        payment_type=practice.payment_type,
        percentage=practice.percentage,
        base_pay=practice.base_pay or ZERO,
        days_worked=days_worked,
        total_production=production,
        total_collection=collection,
        total_calculated_pay=calculated_pay,
        total_payments_received=received,
        outstanding_balance=calculated_pay - received,
        avg_production_per_day=safe_divide(production, days_worked),
        avg_collection_per_day=safe_divide(collection, days_worked),
        avg_pay_per_day=safe_divide(calculated_pay, days_worked),
        collection_rate=percent_of(collection, production),
        effective_rate=percent_of(calculated_pay, production),
        monthly_pays=monthly_pays,
    )


def _in_window(day: date | None, options: ComparisonOptions) -> bool:
    if options.start_date is None and options.end_date is None:
        return True
    if day is None:
        return False
    if options.start_date is not None and day < options.start_date:
        return False
    if options.end_date is not None and day > options.end_date:
        return False
    return True


def _select_practices(
    practices: Iterable[Practice], options: ComparisonOptions
) -> list[Practice]:
    selected = list(practices)
    if options.practice_ids is not None:
        wanted = {str(pid) for pid in options.practice_ids}
        selected = [p for p in selected if str(p.id) in wanted]
    if options.active_only:
        selected = [p for p in selected if p.is_active]
    return selected


def generate_insights(
    metrics: list[PracticeMetrics],
    outstanding_threshold: Decimal = DEFAULT_OUTSTANDING_THRESHOLD,
) -> list[Insight]:
    """Single winner per headline metric, plus an outstanding-balance note."""
    if not metrics:
        return []

    def winner(attr: str) -> PracticeMetrics:
        # First practice wins ties
        return max(metrics, key=lambda m: getattr(m, attr))

    top_earner = winner("total_calculated_pay")
    best_daily = winner("avg_pay_per_day")
    most_efficient = winner("effective_rate")
    most_active = winner("days_worked")

    insights = [
        Insight(
            type="top_earner",
            title="Highest Total Income",
            practice=top_earner.practice_name,
            value=top_earner.total_calculated_pay,
            metric="Total Calculated Pay",
        ),
        Insight(
            type="best_daily_rate",
            title="Highest Daily Rate",
            practice=best_daily.practice_name,
            value=best_daily.avg_pay_per_day,
            metric="Average Pay Per Day",
        ),
        Insight(
            type="most_efficient",
            title="Best Effective Rate",
            practice=most_efficient.practice_name,
            value=most_efficient.effective_rate,
            metric="Effective Rate",
            is_percentage=True,
        ),
        Insight(
            type="most_active",
            title="Most Days Worked",
            practice=most_active.practice_name,
            value=most_active.days_worked,
            metric="Days Worked",
        ),
    ]

    owed = [m for m in metrics if m.outstanding_balance > outstanding_threshold]
    if owed:
        insights.append(
            Insight(
                type="outstanding_balance",
                title="Outstanding Balances",
                count=len(owed),
                total_owed=total(m.outstanding_balance for m in owed),
            )
        )
    return insights


def compare_metrics(
    practices: Iterable[Practice],
    entries: Iterable[Entry],
    payments: Iterable[Payment],
    options: ComparisonOptions | None = None,
    *,
    outstanding_threshold: Decimal = DEFAULT_OUTSTANDING_THRESHOLD,
) -> ComparisonResult:
    """Compare practices over a window; practices with no days worked are dropped."""
    options = options or ComparisonOptions()
    entries = list(entries)
    payments = list(payments)

    metrics = []
    for practice in _select_practices(practices, options):
        practice_entries = [
            e
            for e in entries
            if str(e.practice_id) == str(practice.id) and _in_window(e.anchor_date, options)
        ]
        practice_payments = [
            p
            for p in payments
            if str(p.practice_id) == str(practice.id) and _in_window(p.payment_date, options)
        ]
        result = calculate_practice_metrics(practice, practice_entries, practice_payments)
        if result.days_worked > 0:
            metrics.append(result)
        else:
            logger.debug("Practice %s has no days worked in window, skipped", practice.id)

    totals = ComparisonTotals(
        days_worked=total(m.days_worked for m in metrics),
        total_production=total(m.total_production for m in metrics),
        total_collection=total(m.total_collection for m in metrics),
        total_calculated_pay=total(m.total_calculated_pay for m in metrics),
        total_payments_received=total(m.total_payments_received for m in metrics),
        outstanding_balance=total(m.outstanding_balance for m in metrics),
    )
    rankings = {
        name: sorted(metrics, key=lambda m, a=attr: getattr(m, a), reverse=True)
        for name, attr in RANKINGS.items()
    }

    return ComparisonResult(
        metrics=metrics,
        totals=totals,
        rankings=rankings,
        insights=generate_insights(metrics, outstanding_threshold),
    )


def calculate_contributions(metrics: Iterable[PracticeMetrics]) -> list[PracticeMetrics]:
    """Each practice's share of total pay and total production, in percent."""
    metrics = list(metrics)
    pay = total(m.total_calculated_pay for m in metrics)
    production = total(m.total_production for m in metrics)
    return [
        replace(
            m,
            pay_contribution=percent_of(m.total_calculated_pay, pay),
            production_contribution=percent_of(m.total_production, production),
        )
        for m in metrics
    ]
