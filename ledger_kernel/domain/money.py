"""
Currency arithmetic helpers.

Every total the ledger produces or compares is rounded to two decimal
places, half away from zero, the way currency amounts are rounded on an
invoice.  Floats are converted through ``str`` so 0.1 stays 0.1.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Iterable

CENT = Decimal("0.01")
ZERO = Decimal("0")

Amount = Decimal | int | float | str


def to_decimal(value: Amount | None, name: str = "amount") -> Decimal:
    """
    Coerce a monetary input to Decimal.

    None becomes zero (an omitted debit or credit).

    Raises:
        ValueError: if the value is not a finite number.
    """
    if value is None:
        return ZERO
    if isinstance(value, bool):
        raise ValueError(f"{name} must be a number, not bool")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation as exc:
            raise ValueError(f"{name} is not a number: {value!r}") from exc
    if not result.is_finite():
        raise ValueError(f"{name} must be finite: {value!r}")
    return result


def round2(value: Amount) -> Decimal:
    """Round to currency precision (two places, half up)."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def sum2(values: Iterable[Amount]) -> Decimal:
    """Sum, then round the total to currency precision."""
    return round2(sum((to_decimal(v) for v in values), ZERO))
