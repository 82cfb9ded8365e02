"""Pytest fixtures for practice pay tests."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from practice_pay.clock import FixedClock
from practice_pay.models import (
    AttendanceRecord,
    CalculationBase,
    DailySummary,
    Practice,
    TaxStatus,
)


@pytest.fixture
def make_practice():
    """Factory for practices; keyword arguments override the defaults."""

    def _make(**overrides) -> Practice:
        fields = {
            "id": "p1",
            "name": "Maple Dental",
            "percentage": Decimal("40"),
            "calculation_base": CalculationBase.PRODUCTION,
            "pay_cycle": "monthly",
        }
        fields.update(overrides)
        return Practice(**fields)

    return _make


@pytest.fixture
def guaranteed_practice(make_practice) -> Practice:
    """700/day guarantee, no percentage."""
    return make_practice(base_pay=Decimal("700"), percentage=Decimal("0"))


@pytest.fixture
def employee_practice(make_practice) -> Practice:
    return make_practice(id="w2", name="Hospital Clinic", tax_status=TaxStatus.EMPLOYEE)


@pytest.fixture
def march_attendance() -> list[AttendanceRecord]:
    """Five distinct attendance days in March 2024."""
    return [AttendanceRecord(practice_id="p1", date=date(2024, 3, d)) for d in (4, 5, 6, 11, 12)]


@pytest.fixture
def daily_summary():
    """Factory for daily summaries."""

    def _make(day: date, production="0", collection="0", practice_id="p1", **kw) -> DailySummary:
        return DailySummary(
            practice_id=practice_id,
            date=day,
            production=Decimal(production),
            collection=Decimal(collection),
            **kw,
        )

    return _make


@pytest.fixture
def fixed_clock() -> FixedClock:
    return FixedClock(date(2024, 4, 10))
