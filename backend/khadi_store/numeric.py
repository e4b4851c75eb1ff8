"""
Decimal helpers for rupee amounts, GST percentages and stock quantities.

Column precision mirrors the storage schema:
- currency: Numeric(18, 2)
- percentages: Numeric(5, 2)
- quantities: Numeric(10, 3)
"""
from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional

CURRENCY = (18, 2)
PERCENTAGE = (5, 2)
QUANTITY = (10, 3)

_CENT = Decimal("0.01")
_MILLI = Decimal("0.001")
ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_decimal(value: Any) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # go through str() so 0.1 stays 0.1
        return Decimal(str(value))
    return Decimal(value)


def money(value: Any) -> Decimal:
    return to_decimal(value).quantize(_CENT, rounding=ROUND_HALF_UP)


def percent(value: Any) -> Decimal:
    return to_decimal(value).quantize(_CENT, rounding=ROUND_HALF_UP)


def quantity(value: Any) -> Decimal:
    return to_decimal(value).quantize(_MILLI, rounding=ROUND_HALF_UP)


def decimal_str(value: Optional[Decimal]) -> Optional[str]:
    """Serialize a Numeric column value for JSON payloads."""
    if value is None:
        return None
    return str(value)
