"""Payment instruments received from practices."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any

from practice_pay.money import ZERO


@dataclass(frozen=True)
class Cheque:
    """Paper cheque. Confirmed only once cleared."""

    CONFIRMED_STATUSES = frozenset({"Cleared"})

    practice_id: Any
    amount: Decimal = ZERO
    status: str = "Pending"
    date_received: date | None = None
    id: Any = None

    @property
    def is_confirmed(self) -> bool:
        return self.status in self.CONFIRMED_STATUSES


@dataclass(frozen=True)
class DirectDeposit:
    """Bank deposit. Confirmed as soon as it is recorded."""

    practice_id: Any
    amount: Decimal = ZERO
    payment_date: date | None = None
    id: Any = None

    @property
    def is_confirmed(self) -> bool:
        return True


@dataclass(frozen=True)
class ETransfer:
    """Interac-style e-transfer. Confirmed only once accepted."""

    CONFIRMED_STATUSES = frozenset({"Accepted"})

    practice_id: Any
    amount: Decimal = ZERO
    status: str = "Pending"
    payment_date: date | None = None
    id: Any = None

    @property
    def is_confirmed(self) -> bool:
        return self.status in self.CONFIRMED_STATUSES


@dataclass(frozen=True)
class Payment:
    """Generic payment record used by the comparison reports."""

    practice_id: Any
    amount: Decimal = ZERO
    payment_date: date | None = None
    payment_method: str | None = None
    id: Any = None
