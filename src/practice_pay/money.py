"""Decimal money helpers.

Internal computation keeps full Decimal precision; amounts are rounded to
cents only when a final balance is reported.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable

ZERO = Decimal("0")
CENTS = Decimal("0.01")
HUNDRED = Decimal("100")


def to_decimal(value: Any, default: Decimal = ZERO) -> Decimal:
    """Coerce a loosely typed amount to Decimal.

    Floats go through ``str`` so 0.1 stays 0.1. Anything that is not a
    finite number (None, "", "abc", NaN) becomes ``default``.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return default
    if not amount.is_finite():
        return default
    return amount


def round_to_cents(amount: Decimal) -> Decimal:
    """Round amount to 2 decimal places (cents)."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def safe_divide(numerator: Decimal, denominator: Decimal) -> Decimal:
    """Divide, returning zero instead of raising on a zero denominator."""
    if denominator == 0:
        return ZERO
    return numerator / denominator


def percent_of(part: Decimal, whole: Decimal) -> Decimal:
    """``part / whole * 100``, zero when ``whole`` is zero."""
    return safe_divide(part, whole) * HUNDRED


def total(amounts: Iterable[Decimal]) -> Decimal:
    """Sum Decimal amounts starting from an exact zero."""
    return sum(amounts, ZERO)
