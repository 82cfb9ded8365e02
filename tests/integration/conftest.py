"""Integration test fixtures for the HTTP API."""

from collections.abc import AsyncGenerator
from datetime import date

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from practice_pay.api.app import create_app
from practice_pay.api.dependencies import get_clock
from practice_pay.clock import FixedClock

FROZEN_TODAY = date(2024, 4, 10)


@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client with the clock pinned to FROZEN_TODAY."""
    app = create_app()
    app.dependency_overrides[get_clock] = lambda: FixedClock(FROZEN_TODAY)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def snapshot() -> dict:
    """Two practices: one owing for March, one employee short by withholding."""
    return {
        "practices": [
            {
                "id": "p1",
                "name": "Maple Dental",
                "status": "active",
                "taxStatus": "contractor",
                "paymentType": "percentage",
                "calculationBase": "production",
                "percentage": 40,
                "payCycle": "monthly",
            },
            {
                "id": "w2",
                "name": "Hospital Clinic",
                "taxStatus": "employee",
                "percentage": 40,
                "payCycle": "monthly",
            },
        ],
        "entries": [
            {"practiceId": "p1", "entryType": "dailySummary", "date": "2024-03-05", "production": 10000},
            {"practiceId": "p1", "entryType": "dailySummary", "date": "2024-04-02", "production": 1000},
            {"practiceId": "w2", "entryType": "dailySummary", "date": "2024-03-06", "production": 25000},
        ],
        "cheques": [{"practiceId": "p1", "amount": 4000, "status": "Pending"}],
        "directDeposits": [{"practiceId": "w2", "amount": 8000}],
        "eTransfers": [],
        "payments": [{"practiceId": "p1", "amount": 1000, "paymentDate": "2024-03-20"}],
    }
