"""Conversion between currency units and API milliunits.

The remote API stores every amount as milliunits (1/1000 of the currency
unit): 50250 is 50.25.
"""
from decimal import Decimal, ROUND_HALF_UP


MILLIUNITS_PER_UNIT = Decimal("1000")


def to_unit(milliunits: int) -> Decimal:
    """Convert milliunits to a currency amount (50250 -> 50.25)."""
    return Decimal(milliunits) / MILLIUNITS_PER_UNIT


def to_milliunits(amount: Decimal | int | float | str) -> int:
    """Convert a currency amount to milliunits, rounding half-up."""
    value = Decimal(str(amount)) * MILLIUNITS_PER_UNIT
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
