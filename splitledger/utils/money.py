"""
utils/money.py - Numeric helpers shared by the split and balance services.

All monetary results are ints in the smallest currency unit. Decimal is used
for percentages and for any balance that arrives with a fractional residue.
Floats are never used in arithmetic: a float handed in by a caller is turned
into Decimal through its shortest repr, so 33.3 becomes Decimal("33.3"), not
Decimal(33.3) with its binary tail.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

ZERO = Decimal("0")
ONE_HUNDRED = Decimal("100")


def to_decimal(value) -> Decimal:
    """Converts an int, float, str or Decimal to Decimal without binary drift."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(repr(value))
    return Decimal(value)


def to_number(value):
    """Returns ints and Decimals unchanged; anything else goes through to_decimal."""
    if isinstance(value, (int, Decimal)) and not isinstance(value, bool):
        return value
    return to_decimal(value)


def is_whole(value) -> bool:
    """True if value is an integral quantity (7, Decimal("7.00"), 7.0)."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    dec = to_decimal(value)
    return dec.is_finite() and dec == dec.to_integral_value()


def percentage_share(total_amount: int, percentage: Decimal) -> int:
    """floor(total_amount * percentage / 100), computed in exact integer math."""
    numerator, denominator = percentage.as_integer_ratio()
    return (total_amount * numerator) // (denominator * 100)


def round_half_up(value) -> int:
    """Rounds to the nearest whole unit, halves away from zero for positives."""
    if isinstance(value, int):
        return value
    return int(to_decimal(value).to_integral_value(rounding=ROUND_HALF_UP))
