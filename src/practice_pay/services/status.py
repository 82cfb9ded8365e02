"""Balance status classification.

Statuses are recomputed from scratch on every reconciliation; there are no
persisted transitions, only terminal classifications.
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum

from practice_pay.models.practice import TaxStatus


class BalanceStatus(str, Enum):
    """Balance status values."""

    OVERDUE = "Overdue"
    W2_DISCREPANCY = "W2 Discrepancy"
    DUE_SOON = "Due Soon"
    OWED = "Owed"
    PAID_UP = "Paid Up"


# Lower sorts first
STATUS_PRIORITY: dict[BalanceStatus, int] = {
    BalanceStatus.OVERDUE: 0,
    BalanceStatus.W2_DISCREPANCY: 1,
    BalanceStatus.DUE_SOON: 2,
    BalanceStatus.OWED: 3,
    BalanceStatus.PAID_UP: 4,
}


class BalanceClassifier:
    """Maps a reconciled balance onto one of the five statuses.

    Precedence:
    - balance within the paid-up tolerance -> Paid Up
    - employee whose gap is within the withholding threshold -> W2 Discrepancy
    - past due date -> Overdue
    - due date known -> Due Soon
    - otherwise -> Owed
    """

    # Statuses for which the due date is shown to the user
    DUE_DATE_VISIBLE = {BalanceStatus.OVERDUE, BalanceStatus.DUE_SOON}

    def __init__(
        self,
        w2_discrepancy_threshold: Decimal = Decimal("0.30"),
        paid_up_tolerance: Decimal = Decimal("0.01"),
    ):
        self.w2_discrepancy_threshold = w2_discrepancy_threshold
        self.paid_up_tolerance = paid_up_tolerance

    def classify(
        self,
        balance: Decimal,
        is_overdue: bool,
        due_date_resolved: bool,
        tax_status: TaxStatus | str,
        historical_pay_ratio: Decimal | None,
    ) -> BalanceStatus:
        """Classify a balance.

        ``historical_pay_ratio`` is ``balance / total_historical_pay``, or
        None when there is no historical pay to compare against.
        """
        if balance <= self.paid_up_tolerance:
            return BalanceStatus.PAID_UP

        if (
            tax_status == TaxStatus.EMPLOYEE
            and historical_pay_ratio is not None
            and historical_pay_ratio <= self.w2_discrepancy_threshold
        ):
            return BalanceStatus.W2_DISCREPANCY

        if is_overdue:
            return BalanceStatus.OVERDUE
        if due_date_resolved:
            return BalanceStatus.DUE_SOON
        return BalanceStatus.OWED

    @classmethod
    def shows_due_date(cls, status: BalanceStatus) -> bool:
        return status in cls.DUE_DATE_VISIBLE


_default_classifier = BalanceClassifier()


def classify_status(
    balance: Decimal,
    is_overdue: bool,
    due_date_resolved: bool,
    tax_status: TaxStatus | str,
    historical_pay_ratio: Decimal | None,
) -> BalanceStatus:
    """Classify with the default thresholds."""
    return _default_classifier.classify(
        balance, is_overdue, due_date_resolved, tax_status, historical_pay_ratio
    )
