"""Pydantic schemas for API request/response models.

Request bodies carry raw snapshot records (camelCase JSON as stored by
the client). They are parsed into domain models by the loader so that the
HTTP layer and the CLI share one set of leniency rules.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from practice_pay.models import Snapshot, load_snapshot


class CamelModel(BaseModel):
    """Accepts camelCase or snake_case field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Request schemas
# ============================================================================


class SnapshotRequest(CamelModel):
    """Complete input snapshot plus an optional reference day."""

    practices: list[dict[str, Any]] = Field(default_factory=list)
    entries: list[dict[str, Any]] = Field(default_factory=list)
    cheques: list[dict[str, Any]] = Field(default_factory=list)
    direct_deposits: list[dict[str, Any]] = Field(default_factory=list)
    e_transfers: list[dict[str, Any]] = Field(default_factory=list)
    payments: list[dict[str, Any]] = Field(default_factory=list)
    today: date | None = None

    def to_snapshot(self) -> Snapshot:
        return load_snapshot(
            {
                "practices": self.practices,
                "entries": self.entries,
                "cheques": self.cheques,
                "directDeposits": self.direct_deposits,
                "eTransfers": self.e_transfers,
                "payments": self.payments,
            }
        )


class PeriodPayRequest(CamelModel):
    """One practice and the entries of one pay period."""

    practice: dict[str, Any] | None = None
    entries: list[dict[str, Any]] = Field(default_factory=list)


class CompareRequest(SnapshotRequest):
    start_date: date | None = None
    end_date: date | None = None
    practice_ids: list[Any] | None = None
    active_only: bool = True


class ScheduleDay(CamelModel):
    day: date = Field(alias="date")
    is_scheduled: bool = True


class TimeOffRequest(CamelModel):
    start_date: date
    end_date: date


class ForecastRequest(SnapshotRequest):
    months_ahead: int = Field(default=3, ge=1, le=24)
    schedule: list[ScheduleDay] = Field(default_factory=list)
    scenario: TimeOffRequest | None = None


class TaxEstimateRequest(CamelModel):
    gross_income: Decimal = Field(ge=0)
    business_expenses: Decimal = Field(default=Decimal("0"), ge=0)
    other_deductions: Decimal = Field(default=Decimal("0"), ge=0)
    filing_status: Literal["single", "married"] = "single"
    is_self_employed: bool = True
    paid_ytd: Decimal = Field(default=Decimal("0"), ge=0)
    tax_year: int | None = None


# ============================================================================
# Response schemas
# ============================================================================


class PeriodPayResponse(BaseModel):
    result: dict[str, Any]
    guarantee_applied: bool


class BalanceListResponse(BaseModel):
    today: date
    items: list[dict[str, Any]]
    total: int


class BalanceResponse(BaseModel):
    today: date
    balance: dict[str, Any]


class ComparisonResponse(BaseModel):
    metrics: list[dict[str, Any]]
    totals: dict[str, Any]
    rankings: dict[str, list[Any]]
    insights: list[dict[str, Any]]


class ForecastResponse(BaseModel):
    today: date
    projections: list[dict[str, Any]]
    scenario: dict[str, Any] | None = None


class QuarterlyPaymentResponse(BaseModel):
    quarter: str
    due_date: date
    payment: Decimal


class TaxEstimateResponse(BaseModel):
    gross_income: Decimal
    agi: Decimal
    taxable_income: Decimal
    federal_income_tax: Decimal
    self_employment_tax: Decimal
    total_tax: Decimal
    effective_tax_rate: Decimal
    marginal_rate: Decimal
    should_pay_quarterly: bool
    quarterly_payment: Decimal
    quarters: list[QuarterlyPaymentResponse]


class ErrorResponse(BaseModel):
    """Schema for error response."""

    detail: str
    code: str | None = None
    context: dict[str, Any] | None = None
