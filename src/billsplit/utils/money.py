from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Union

CENT = Decimal("0.01")
TOLERANCE = CENT
ZERO = Decimal("0")

Amount = Union[Decimal, int, float, str]


def to_decimal(value: Amount) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("bool is not an amount")
    if isinstance(value, float):
        # str() keeps 0.1 as 0.1 instead of its binary expansion
        value = str(value)
    try:
        return Decimal(value)
    except InvalidOperation as exc:
        raise ValueError(f"Invalid amount: {value!r}") from exc


def round2(value: Amount) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def to_float(value: Decimal) -> float:
    return float(round2(value))
