"""FastAPI dependencies for dependency injection."""

from datetime import date
from typing import Annotated

from fastapi import Depends

from practice_pay.clock import Clock, SystemClock
from practice_pay.config import Settings, get_settings

_system_clock = SystemClock()


def get_app_settings() -> Settings:
    """Get settings dependency."""
    return get_settings()


def get_clock() -> Clock:
    """Get the clock dependency; tests override it with a FixedClock."""
    return _system_clock


def resolve_today(requested: date | None, clock: Clock) -> date:
    """An explicit ``today`` in the request wins over the clock."""
    return requested if requested is not None else clock.today()


# Type aliases for cleaner dependency injection
AppSettings = Annotated[Settings, Depends(get_app_settings)]
AppClock = Annotated[Clock, Depends(get_clock)]
