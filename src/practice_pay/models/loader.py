"""Build typed models from JSON-shaped records.

Records come from the surrounding application (camelCase keys, string
dates, loosely typed numbers). Malformed records are skipped with a
warning instead of aborting the whole load.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterable, Mapping

from practice_pay.dates import parse_day
from practice_pay.models.entries import (
    Adjustment,
    AttendanceRecord,
    AttendanceType,
    DailySummary,
    Entry,
    EntryType,
    IndividualProcedure,
    PeriodSummary,
)
from practice_pay.models.practice import (
    CalculationBase,
    Deduction,
    DeductionType,
    PaymentType,
    Practice,
    PracticeStatus,
    SplitType,
    TaxStatus,
)
from practice_pay.models.transactions import Cheque, DirectDeposit, ETransfer, Payment
from practice_pay.money import to_decimal

logger = logging.getLogger(__name__)


class SnapshotError(ValueError):
    """Raised when a snapshot is not shaped like a snapshot at all."""


class PracticeNotFoundError(LookupError):
    """Raised when a practice id is not present in a snapshot."""

    def __init__(self, practice_id: Any):
        self.practice_id = practice_id
        super().__init__(f"Practice {practice_id!r} not found")


@dataclass(frozen=True)
class Snapshot:
    """Complete in-memory input for one engine call."""

    practices: list[Practice] = field(default_factory=list)
    entries: list[Entry] = field(default_factory=list)
    cheques: list[Cheque] = field(default_factory=list)
    direct_deposits: list[DirectDeposit] = field(default_factory=list)
    e_transfers: list[ETransfer] = field(default_factory=list)
    payments: list[Payment] = field(default_factory=list)

    def find_practice(self, practice_id: Any) -> Practice:
        for practice in self.practices:
            if str(practice.id) == str(practice_id):
                return practice
        raise PracticeNotFoundError(practice_id)


def _pick(raw: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """First present key among camelCase/snake_case spellings."""
    for key in keys:
        if key in raw and raw[key] is not None:
            return raw[key]
    return default


def _lower(value: Any, default: str) -> str:
    if not isinstance(value, str) or not value.strip():
        return default
    return value.strip().lower()


def _enum(enum_cls, value: Any, default, aliases: Mapping[str, str] | None = None):
    text = _lower(value, default.value.lower())
    if aliases and text in aliases:
        text = aliases[text]
    for member in enum_cls:
        if member.value.lower() == text:
            return member
    return default


def _optional_decimal(value: Any) -> Decimal | None:
    if value is None or value == "":
        return None
    return to_decimal(value)


def parse_deduction(raw: Mapping[str, Any]) -> Deduction:
    return Deduction(
        name=str(_pick(raw, "name", default="")),
        type=_enum(DeductionType, raw.get("type"), DeductionType.PERCENTAGE, {"flat": "fixed"}),
        value=to_decimal(raw.get("value")),
        split_type=_enum(
            SplitType,
            _pick(raw, "splitType", "split_type", "timing"),
            SplitType.PRE_SPLIT,
        ),
    )


def parse_practice(raw: Mapping[str, Any]) -> Practice:
    """Build a Practice. Unknown enum values fall back to defaults."""
    deductions = tuple(
        parse_deduction(d) for d in (raw.get("deductions") or []) if isinstance(d, Mapping)
    )
    pay_cycle = _lower(_pick(raw, "payCycle", "pay_cycle"), "monthly")
    return Practice(
        id=raw.get("id"),
        name=str(raw.get("name") or ""),
        status=_enum(PracticeStatus, raw.get("status"), PracticeStatus.ACTIVE),
        tax_status=_enum(TaxStatus, _pick(raw, "taxStatus", "tax_status"), TaxStatus.CONTRACTOR),
        payment_type=_enum(
            PaymentType,
            _pick(raw, "paymentType", "payment_type"),
            PaymentType.PERCENTAGE,
            {"employment": "dailyrate", "daily_rate": "dailyrate"},
        ),
        calculation_base=_enum(
            CalculationBase,
            _pick(raw, "calculationBase", "calculation_base"),
            CalculationBase.PRODUCTION,
        ),
        percentage=to_decimal(raw.get("percentage")),
        base_pay=_optional_decimal(_pick(raw, "basePay", "base_pay")),
        daily_guarantee=_optional_decimal(_pick(raw, "dailyGuarantee", "daily_guarantee")),
        deductions=deductions,
        pay_cycle=pay_cycle,
        payment_detail=str(_pick(raw, "paymentDetail", "payment_detail", default="")),
    )


def _adjustments(raw: Mapping[str, Any]) -> tuple[Adjustment, ...]:
    return tuple(
        Adjustment(
            amount=to_decimal(adj.get("amount")),
            name=str(adj.get("name") or ""),
            type=str(adj.get("type") or "other"),
        )
        for adj in (raw.get("adjustments") or [])
        if isinstance(adj, Mapping)
    )


def parse_entry(raw: Mapping[str, Any]) -> Entry | None:
    """Build the entry variant named by ``entryType``.

    Returns None when the record has no usable date or an unknown type.
    """
    entry_type = _pick(raw, "entryType", "entry_type")
    practice_id = _pick(raw, "practiceId", "practice_id")
    common = {"practice_id": practice_id, "id": raw.get("id"), "notes": raw.get("notes")}

    if entry_type == EntryType.PERIOD_SUMMARY:
        start = parse_day(_pick(raw, "periodStartDate", "period_start_date"))
        end = parse_day(_pick(raw, "periodEndDate", "period_end_date"))
        if start is None or end is None or end < start:
            logger.warning("Skipping period summary %r with invalid range", raw.get("id"))
            return None
        return PeriodSummary(
            period_start_date=start,
            period_end_date=end,
            production=to_decimal(raw.get("production")),
            collection=to_decimal(raw.get("collection")),
            adjustments=_adjustments(raw),
            **common,
        )

    day = parse_day(raw.get("date"))
    if day is None:
        logger.warning("Skipping entry %r with invalid date %r", raw.get("id"), raw.get("date"))
        return None

    if entry_type == EntryType.DAILY_SUMMARY:
        return DailySummary(
            date=day,
            production=to_decimal(raw.get("production")),
            collection=to_decimal(raw.get("collection")),
            adjustments=_adjustments(raw),
            **common,
        )
    if entry_type == EntryType.INDIVIDUAL_PROCEDURE:
        return IndividualProcedure(
            date=day,
            production=to_decimal(raw.get("production")),
            collection=to_decimal(raw.get("collection")),
            adjustments=_adjustments(raw),
            procedure_code=_pick(raw, "procedureCode", "procedure_code"),
            patient_id=_pick(raw, "patientId", "patient_id"),
            **common,
        )
    if entry_type == EntryType.ATTENDANCE_RECORD:
        return AttendanceRecord(
            date=day,
            attendance_type=_enum(
                AttendanceType,
                _pick(raw, "attendanceType", "attendance_type"),
                AttendanceType.FULL_DAY,
            ),
            check_in_time=_pick(raw, "checkInTime", "check_in_time"),
            check_out_time=_pick(raw, "checkOutTime", "check_out_time"),
            **common,
        )

    logger.warning("Skipping entry %r with unknown entryType %r", raw.get("id"), entry_type)
    return None


def parse_entries(records: Iterable[Mapping[str, Any]]) -> list[Entry]:
    entries = []
    for raw in records or []:
        if not isinstance(raw, Mapping):
            continue
        entry = parse_entry(raw)
        if entry is not None:
            entries.append(entry)
    return entries


def parse_cheques(records: Iterable[Mapping[str, Any]]) -> list[Cheque]:
    return [
        Cheque(
            practice_id=_pick(raw, "practiceId", "practice_id"),
            amount=to_decimal(raw.get("amount")),
            status=str(raw.get("status") or "Pending"),
            date_received=parse_day(_pick(raw, "dateReceived", "date_received")),
            id=raw.get("id"),
        )
        for raw in records or []
        if isinstance(raw, Mapping)
    ]


def parse_direct_deposits(records: Iterable[Mapping[str, Any]]) -> list[DirectDeposit]:
    return [
        DirectDeposit(
            practice_id=_pick(raw, "practiceId", "practice_id"),
            amount=to_decimal(raw.get("amount")),
            payment_date=parse_day(_pick(raw, "paymentDate", "payment_date")),
            id=raw.get("id"),
        )
        for raw in records or []
        if isinstance(raw, Mapping)
    ]


def parse_e_transfers(records: Iterable[Mapping[str, Any]]) -> list[ETransfer]:
    return [
        ETransfer(
            practice_id=_pick(raw, "practiceId", "practice_id"),
            amount=to_decimal(raw.get("amount")),
            status=str(raw.get("status") or "Pending"),
            payment_date=parse_day(_pick(raw, "paymentDate", "payment_date")),
            id=raw.get("id"),
        )
        for raw in records or []
        if isinstance(raw, Mapping)
    ]


def parse_payments(records: Iterable[Mapping[str, Any]]) -> list[Payment]:
    return [
        Payment(
            practice_id=_pick(raw, "practiceId", "practice_id"),
            amount=to_decimal(raw.get("amount")),
            payment_date=parse_day(_pick(raw, "paymentDate", "payment_date")),
            payment_method=_pick(raw, "paymentMethod", "payment_method"),
            id=raw.get("id"),
        )
        for raw in records or []
        if isinstance(raw, Mapping)
    ]


def load_snapshot(data: Mapping[str, Any]) -> Snapshot:
    """Build a Snapshot from a JSON document.

    Raises:
        SnapshotError: if ``data`` is not a mapping or a collection is not a list
    """
    if not isinstance(data, Mapping):
        raise SnapshotError("Snapshot must be a JSON object")

    def collection(*keys: str) -> list[Any]:
        value = _pick(data, *keys, default=[])
        if not isinstance(value, list):
            raise SnapshotError(f"'{keys[0]}' must be a list")
        return value

    return Snapshot(
        practices=[
            parse_practice(raw) for raw in collection("practices") if isinstance(raw, Mapping)
        ],
        entries=parse_entries(collection("entries")),
        cheques=parse_cheques(collection("cheques")),
        direct_deposits=parse_direct_deposits(collection("directDeposits", "direct_deposits")),
        e_transfers=parse_e_transfers(collection("eTransfers", "e_transfers")),
        payments=parse_payments(collection("payments")),
    )
