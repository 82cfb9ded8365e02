"""Balance reconciliation.

Compares what a practice owes for completed pay periods against the
confirmed payments received from it, and classifies the result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Iterable

from practice_pay.calculators.due_dates import estimate_due_date, is_overdue as past_due
from practice_pay.calculators.pay_calculator import compute_period_pay
from practice_pay.calculators.periods import current_pay_period, generate_historical_periods
from practice_pay.calculators.types import PayPeriod
from practice_pay.config import Settings
from practice_pay.models.entries import Entry, falls_within
from practice_pay.models.practice import Practice, TaxStatus
from practice_pay.models.transactions import Cheque, DirectDeposit, ETransfer
from practice_pay.money import ZERO, round_to_cents, safe_divide, total
from practice_pay.services.status import STATUS_PRIORITY, BalanceClassifier, BalanceStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BalanceRecord:
    """Reconciled balance for one practice."""

    practice_id: Any
    practice_name: str
    balance: Decimal
    status: BalanceStatus
    is_overdue: bool
    display_due_date: date | None
    estimated_current_period_pay: Decimal
    tax_status: TaxStatus
    current_period: PayPeriod
    total_historical_pay: Decimal = ZERO
    total_confirmed_payments: Decimal = ZERO
    last_completed_period_end: date | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "practiceId": self.practice_id,
            "practiceName": self.practice_name,
            "balance": str(self.balance),
            "status": self.status.value,
            "isOverdue": self.is_overdue,
            "displayDueDate": (
                self.display_due_date.isoformat() if self.display_due_date else None
            ),
            "estimatedCurrentPeriodPay": str(self.estimated_current_period_pay),
            "taxStatus": self.tax_status.value,
            "currentPeriod": self.current_period.to_dict(),
            "totalHistoricalPay": str(self.total_historical_pay),
            "totalConfirmedPayments": str(self.total_confirmed_payments),
            "lastCompletedPeriodEnd": (
                self.last_completed_period_end.isoformat()
                if self.last_completed_period_end
                else None
            ),
        }


@dataclass
class HistoricalPay:
    """Pay accumulated over completed periods."""

    total_pay: Decimal = ZERO
    last_completed_period_end: date | None = None
    periods: list[PayPeriod] = field(default_factory=list)


def sum_confirmed_payments(
    cheques: Iterable[Cheque],
    direct_deposits: Iterable[DirectDeposit],
    e_transfers: Iterable[ETransfer],
) -> Decimal:
    """Total of confirmed instruments only.

    Cleared cheques, every direct deposit and accepted e-transfers; any
    other status contributes nothing.
    """
    instruments = [*cheques, *direct_deposits, *e_transfers]
    return total(i.amount for i in instruments if i.is_confirmed)


def _belongs_to(record: Any, practice: Practice) -> bool:
    return str(record.practice_id) == str(practice.id)


class BalanceReconciler:
    """Reconciles practices against their confirmed payments.

    Thresholds come from ``Settings``; ``today`` is always passed in.
    """

    def __init__(self, settings: Settings | None = None):
        if settings is None:
            self.classifier = BalanceClassifier()
        else:
            self.classifier = BalanceClassifier(
                w2_discrepancy_threshold=settings.w2_discrepancy_threshold,
                paid_up_tolerance=settings.paid_up_tolerance,
            )

    def historical_pay(
        self, practice: Practice, entries: list[Entry], today: date
    ) -> HistoricalPay:
        result = HistoricalPay()
        for period in generate_historical_periods(practice, entries, today):
            in_period = [e for e in entries if falls_within(e, period.start, period.end)]
            if not in_period:
                continue
            result.total_pay += compute_period_pay(practice, in_period).calculated_pay
            result.periods.append(period)
            if (
                result.last_completed_period_end is None
                or period.end > result.last_completed_period_end
            ):
                result.last_completed_period_end = period.end
        return result

    def current_period_estimate(
        self, practice: Practice, entries: list[Entry], today: date
    ) -> tuple[PayPeriod, Decimal]:
        """In-progress period and the pay earned in it so far."""
        period = current_pay_period(practice, today)
        # Summaries count toward the period they start in, never by overlap
        so_far = [
            e for e in entries if period.contains(e.anchor_date) and e.anchor_date <= today
        ]
        return period, compute_period_pay(practice, so_far).calculated_pay

    def reconcile(
        self,
        practice: Practice,
        entries: Iterable[Entry],
        cheques: Iterable[Cheque],
        direct_deposits: Iterable[DirectDeposit],
        e_transfers: Iterable[ETransfer],
        today: date,
    ) -> BalanceRecord:
        entries = list(entries)
        history = self.historical_pay(practice, entries, today)
        confirmed = sum_confirmed_payments(cheques, direct_deposits, e_transfers)

        # Signed; overpayment only collapses to zero in the reported balance
        balance = round_to_cents(history.total_pay - confirmed)

        current_period, estimate = self.current_period_estimate(practice, entries, today)

        due_date = estimate_due_date(
            history.last_completed_period_end, practice.pay_cycle, practice.payment_detail
        )
        overdue = past_due(due_date, today)

        ratio = (
            safe_divide(balance, history.total_pay) if history.total_pay > 0 else None
        )
        status = self.classifier.classify(
            balance=balance,
            is_overdue=overdue,
            due_date_resolved=due_date is not None,
            tax_status=practice.tax_status,
            historical_pay_ratio=ratio,
        )
        if status == BalanceStatus.PAID_UP:
            overdue = False
            due_date = None

        logger.debug(
            "Reconciled practice %s: historical=%s confirmed=%s balance=%s status=%s",
            practice.id,
            history.total_pay,
            confirmed,
            balance,
            status.value,
        )

        return BalanceRecord(
            practice_id=practice.id,
            practice_name=practice.name,
            balance=max(ZERO, balance),
            status=status,
            is_overdue=overdue,
            display_due_date=due_date if self.classifier.shows_due_date(status) else None,
            estimated_current_period_pay=estimate,
            tax_status=practice.tax_status,
            current_period=current_period,
            total_historical_pay=history.total_pay,
            total_confirmed_payments=confirmed,
            last_completed_period_end=history.last_completed_period_end,
        )

    def is_reportable(self, record: BalanceRecord) -> bool:
        """Whether a record is worth showing on the balance board."""
        tolerance = self.classifier.paid_up_tolerance
        return (
            record.balance > tolerance
            or record.estimated_current_period_pay > tolerance
            or record.status == BalanceStatus.W2_DISCREPANCY
        )

    @staticmethod
    def sort_key(record: BalanceRecord) -> tuple:
        return (
            STATUS_PRIORITY[record.status],
            not record.is_overdue,
            -record.balance,
            -record.estimated_current_period_pay,
        )

    def calculate_practice_balances(
        self,
        practices: Iterable[Practice],
        entries: Iterable[Entry],
        cheques: Iterable[Cheque],
        direct_deposits: Iterable[DirectDeposit],
        e_transfers: Iterable[ETransfer],
        today: date,
    ) -> list[BalanceRecord]:
        """Reconcile every active practice, keep reportable ones, sort by urgency."""
        entries = list(entries)
        cheques = list(cheques)
        direct_deposits = list(direct_deposits)
        e_transfers = list(e_transfers)

        records = []
        for practice in practices:
            if not practice.is_active:
                continue
            record = self.reconcile(
                practice,
                [e for e in entries if _belongs_to(e, practice)],
                [c for c in cheques if _belongs_to(c, practice)],
                [d for d in direct_deposits if _belongs_to(d, practice)],
                [t for t in e_transfers if _belongs_to(t, practice)],
                today,
            )
            if self.is_reportable(record):
                records.append(record)

        records.sort(key=self.sort_key)
        return records


def reconcile(
    practice: Practice,
    entries: Iterable[Entry],
    cheques: Iterable[Cheque],
    direct_deposits: Iterable[DirectDeposit],
    e_transfers: Iterable[ETransfer],
    today: date,
    *,
    settings: Settings | None = None,
) -> BalanceRecord:
    """Reconcile one practice; ``entries`` and instruments belong to it."""
    return BalanceReconciler(settings).reconcile(
        practice, entries, cheques, direct_deposits, e_transfers, today
    )


def calculate_practice_balances(
    practices: Iterable[Practice],
    entries: Iterable[Entry],
    cheques: Iterable[Cheque],
    direct_deposits: Iterable[DirectDeposit],
    e_transfers: Iterable[ETransfer],
    today: date,
    *,
    settings: Settings | None = None,
) -> list[BalanceRecord]:
    return BalanceReconciler(settings).calculate_practice_balances(
        practices, entries, cheques, direct_deposits, e_transfers, today
    )
