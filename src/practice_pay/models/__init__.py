"""Domain models for practices, entries and payment instruments."""

from practice_pay.models.entries import (
    Adjustment,
    AttendanceRecord,
    AttendanceType,
    DailySummary,
    Entry,
    EntryType,
    FinancialEntry,
    IndividualProcedure,
    PeriodSummary,
)
from practice_pay.models.loader import (
    PracticeNotFoundError,
    Snapshot,
    SnapshotError,
    load_snapshot,
    parse_entries,
    parse_entry,
    parse_practice,
)
from practice_pay.models.practice import (
    CalculationBase,
    Deduction,
    DeductionType,
    PayCycle,
    PaymentType,
    Practice,
    PracticeStatus,
    SplitType,
    TaxStatus,
)
from practice_pay.models.transactions import Cheque, DirectDeposit, ETransfer, Payment

__all__ = [
    # Practice
    "Practice",
    "PracticeStatus",
    "TaxStatus",
    "PaymentType",
    "CalculationBase",
    "PayCycle",
    "Deduction",
    "DeductionType",
    "SplitType",
    # Entries
    "Entry",
    "FinancialEntry",
    "EntryType",
    "DailySummary",
    "IndividualProcedure",
    "PeriodSummary",
    "AttendanceRecord",
    "AttendanceType",
    "Adjustment",
    # Transactions
    "Cheque",
    "DirectDeposit",
    "ETransfer",
    "Payment",
    # Loading
    "Snapshot",
    "SnapshotError",
    "PracticeNotFoundError",
    "load_snapshot",
    "parse_practice",
    "parse_entry",
    "parse_entries",
]
