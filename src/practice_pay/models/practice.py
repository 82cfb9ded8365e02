"""Practice compensation contract."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any

from practice_pay.money import ZERO


class PracticeStatus(str, Enum):
    ACTIVE = "active"
    ARCHIVED = "archived"


class TaxStatus(str, Enum):
    CONTRACTOR = "contractor"
    EMPLOYEE = "employee"


class PaymentType(str, Enum):
    PERCENTAGE = "percentage"
    DAILY_RATE = "dailyRate"


class CalculationBase(str, Enum):
    PRODUCTION = "production"
    COLLECTION = "collection"


class PayCycle(str, Enum):
    """Billing cycles with dedicated period rules.

    ``Practice.pay_cycle`` keeps the raw string so that unrecognised cycles
    can still fall back to the monthly rule (periods) and the generic
    15-day rule (due dates).
    """

    MONTHLY = "monthly"
    BI_WEEKLY = "bi-weekly"
    WEEKLY = "weekly"


class DeductionType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class SplitType(str, Enum):
    """Where a deduction is injected relative to the guarantee/percentage split."""

    PRE_SPLIT = "pre-split"
    POST_SPLIT = "post-split"


@dataclass(frozen=True)
class Deduction:
    """A practice-level deduction rule (lab fees, supplies, ...)."""

    name: str
    type: DeductionType
    value: Decimal
    split_type: SplitType = SplitType.PRE_SPLIT

    def amount_for(self, basis: Decimal) -> Decimal:
        """Deduction amount against ``basis`` for one pay period."""
        if self.type == DeductionType.PERCENTAGE:
            return basis * self.value / Decimal("100")
        return self.value


@dataclass(frozen=True)
class Practice:
    """Compensation contract with a practice.

    Immutable for the duration of a reconciliation pass.
    """

    id: Any
    name: str = ""
    status: PracticeStatus = PracticeStatus.ACTIVE
    tax_status: TaxStatus = TaxStatus.CONTRACTOR
    payment_type: PaymentType = PaymentType.PERCENTAGE
    calculation_base: CalculationBase = CalculationBase.PRODUCTION
    percentage: Decimal = ZERO
    base_pay: Decimal | None = None
    daily_guarantee: Decimal | None = None
    deductions: tuple[Deduction, ...] = ()
    pay_cycle: str = PayCycle.MONTHLY.value
    payment_detail: str = ""

    @property
    def daily_floor(self) -> Decimal:
        """Per-day guaranteed amount: base pay, else daily guarantee, else 0."""
        if self.base_pay is not None:
            return self.base_pay
        if self.daily_guarantee is not None:
            return self.daily_guarantee
        return ZERO

    @property
    def is_active(self) -> bool:
        return self.status == PracticeStatus.ACTIVE

    @property
    def is_employee(self) -> bool:
        return self.tax_status == TaxStatus.EMPLOYEE

    def deductions_for(self, split_type: SplitType) -> list[Deduction]:
        return [d for d in self.deductions if d.split_type == split_type]
