"""Type definitions for the calculation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from typing import Any

from practice_pay.money import ZERO


@dataclass(frozen=True, order=True)
class PayPeriod:
    """Inclusive day-granularity interval ``[start, end]``."""

    start: date
    end: date

    @property
    def key(self) -> tuple[str, str]:
        """Dedup key; identical boundaries from different passes collapse."""
        return (self.start.isoformat(), self.end.isoformat())

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def overlaps(self, start: date, end: date) -> bool:
        return start <= self.end and end >= self.start

    def iter_days(self):
        day = self.start
        while day <= self.end:
            yield day
            day += timedelta(days=1)

    def to_dict(self) -> dict[str, str]:
        return {"start": self.start.isoformat(), "end": self.end.isoformat()}


@dataclass(frozen=True)
class ScheduledPeriod:
    """A future pay period with its estimated payment date."""

    period: PayPeriod
    due_date: date | None


@dataclass(frozen=True)
class PayResult:
    """Pay owed for one pay period."""

    calculated_pay: Decimal = ZERO
    base_pay_owed: Decimal = ZERO
    production_pay_component: Decimal = ZERO
    production_total: Decimal = ZERO
    collection_total: Decimal = ZERO

    # Breakdown
    attendance_days: int = 0
    total_adjustments: Decimal = ZERO
    net_base: Decimal = ZERO
    pre_split_deductions: Decimal = ZERO
    post_split_deductions: Decimal = ZERO
    gross_pay: Decimal = ZERO

    @property
    def guarantee_applied(self) -> bool:
        """True when the daily floor, not the percentage, set the pay."""
        return self.base_pay_owed >= self.production_pay_component

    def to_dict(self) -> dict[str, Any]:
        return {
            "calculatedPay": str(self.calculated_pay),
            "basePayOwed": str(self.base_pay_owed),
            "productionPayComponent": str(self.production_pay_component),
            "productionTotal": str(self.production_total),
            "collectionTotal": str(self.collection_total),
            "attendanceDays": self.attendance_days,
            "totalAdjustments": str(self.total_adjustments),
            "netBase": str(self.net_base),
            "preSplitDeductions": str(self.pre_split_deductions),
            "postSplitDeductions": str(self.post_split_deductions),
            "grossPay": str(self.gross_pay),
        }


@dataclass(frozen=True)
class PeriodPayDetail:
    """One period's contribution to a month's pay."""

    period: PayPeriod
    base: Decimal
    production: Decimal
    final: Decimal
    has_entries: bool = True


@dataclass(frozen=True)
class MonthPayResult:
    """Pay for a calendar month, summed over its pay periods."""

    calculated_pay: Decimal = ZERO
    base_pay_owed: Decimal = ZERO
    production_pay_component: Decimal = ZERO
    production_total: Decimal = ZERO
    pay_structure: str = ""
    pay_periods: list[PeriodPayDetail] = field(default_factory=list)


@dataclass(frozen=True)
class TaxBracket:
    """Tax bracket for progressive taxation."""

    min_amount: Decimal
    max_amount: Decimal | None  # None = no upper limit
    rate: Decimal  # As decimal, e.g., 0.22 for 22%
