"""Injectable "today" for reconciliation and forecasting.

The calculators and services never read the system clock. Callers pass
``today`` explicitly; only the outermost boundaries (API dependencies and
the CLI) resolve it from a ``Clock``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date, datetime, timezone


class Clock(ABC):
    """Source of the current UTC calendar day."""

    @abstractmethod
    def today(self) -> date:
        """Return the current day (UTC)."""
        ...


class SystemClock(Clock):
    """Clock backed by the real system time."""

    def today(self) -> date:
        return datetime.now(timezone.utc).date()


class FixedClock(Clock):
    """Clock pinned to a given day. Used by tests and replays."""

    def __init__(self, fixed_day: date):
        self._fixed_day = fixed_day

    def today(self) -> date:
        return self._fixed_day
