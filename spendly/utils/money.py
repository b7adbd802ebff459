"""
Money helpers.

Amounts travel as Decimal at the API boundary and are stored and summed as
integer cents, so aggregates never accumulate floating point drift.
Rounding is half-up: 20.005 becomes 20.01.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Union

CENT = Decimal("0.01")


def round_amount(value: Union[Decimal, int, float, str]) -> Decimal:
    if not isinstance(value, Decimal):
        # str() keeps the literal the client sent (20.005 stays 20.005)
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def to_cents(value: Union[Decimal, int, float, str]) -> int:
    return int(round_amount(value) * 100)


def from_cents(cents: int) -> float:
    """Display form used in JSON responses."""
    return float(Decimal(cents) / 100)


def average_cents(total_cents: int, count: int) -> int:
    if count == 0:
        return 0
    return int((Decimal(total_cents) / Decimal(count)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
