"""Entry variants.

``entryType`` is modelled as a tagged union: one frozen dataclass per
variant, each carrying only the fields that variant uses.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, ClassVar, Union

from practice_pay.money import ZERO, total


class EntryType(str, Enum):
    DAILY_SUMMARY = "dailySummary"
    INDIVIDUAL_PROCEDURE = "individualProcedure"
    PERIOD_SUMMARY = "periodSummary"
    ATTENDANCE_RECORD = "attendanceRecord"


class AttendanceType(str, Enum):
    FULL_DAY = "full-day"
    HALF_DAY = "half-day"


@dataclass(frozen=True)
class Adjustment:
    """Amount subtracted from the calculation base before the split."""

    amount: Decimal
    name: str = ""
    type: str = "other"


@dataclass(frozen=True)
class DailySummary:
    """Production/collection totals for one day of work."""

    entry_type: ClassVar[EntryType] = EntryType.DAILY_SUMMARY

    practice_id: Any
    date: date
    production: Decimal = ZERO
    collection: Decimal = ZERO
    adjustments: tuple[Adjustment, ...] = ()
    id: Any = None
    notes: str | None = None

    @property
    def anchor_date(self) -> date:
        return self.date


@dataclass(frozen=True)
class IndividualProcedure:
    """A single billed procedure."""

    entry_type: ClassVar[EntryType] = EntryType.INDIVIDUAL_PROCEDURE

    practice_id: Any
    date: date
    production: Decimal = ZERO
    collection: Decimal = ZERO
    adjustments: tuple[Adjustment, ...] = ()
    procedure_code: str | None = None
    patient_id: str | None = None
    id: Any = None
    notes: str | None = None

    @property
    def anchor_date(self) -> date:
        return self.date


@dataclass(frozen=True)
class PeriodSummary:
    """Externally aggregated totals spanning a date range (e.g. a pay stub)."""

    entry_type: ClassVar[EntryType] = EntryType.PERIOD_SUMMARY

    practice_id: Any
    period_start_date: date
    period_end_date: date
    production: Decimal = ZERO
    collection: Decimal = ZERO
    adjustments: tuple[Adjustment, ...] = ()
    id: Any = None
    notes: str | None = None

    @property
    def anchor_date(self) -> date:
        return self.period_start_date


@dataclass(frozen=True)
class AttendanceRecord:
    """Presence on a day; counts toward days worked, never toward production."""

    entry_type: ClassVar[EntryType] = EntryType.ATTENDANCE_RECORD

    practice_id: Any
    date: date
    attendance_type: AttendanceType = AttendanceType.FULL_DAY
    check_in_time: str | None = None
    check_out_time: str | None = None
    id: Any = None
    notes: str | None = None

    @property
    def anchor_date(self) -> date:
        return self.date


FinancialEntry = Union[DailySummary, IndividualProcedure, PeriodSummary]
Entry = Union[DailySummary, IndividualProcedure, PeriodSummary, AttendanceRecord]


def is_financial(entry: Entry) -> bool:
    """Everything except attendance records carries production/collection."""
    return not isinstance(entry, AttendanceRecord)


def counts_attendance(entry: Entry) -> bool:
    """Attendance records and daily summaries both mark a day as worked."""
    return isinstance(entry, (AttendanceRecord, DailySummary))


def day_value(entry: Entry) -> Decimal:
    """Contribution of one entry to its date's day count."""
    if (
        isinstance(entry, AttendanceRecord)
        and entry.attendance_type == AttendanceType.HALF_DAY
    ):
        return Decimal("0.5")
    return Decimal("1")


def adjustments_total(entry: FinancialEntry) -> Decimal:
    return total(adj.amount for adj in entry.adjustments)


def falls_within(entry: Entry, start: date, end: date) -> bool:
    """Whether an entry belongs to the interval ``[start, end]``.

    Period summaries match by interval overlap; every other variant by its
    single date.
    """
    if isinstance(entry, PeriodSummary):
        return entry.period_start_date <= end and entry.period_end_date >= start
    return start <= entry.date <= end
