# travelbill/domain/money.py
"""Fixed-point money helpers. All amounts are Decimal with 2-dp half-up rounding."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

ZERO = Decimal("0")
CENT = Decimal("0.01")
RUPEE = Decimal("1")

# Largest amount the Numeric(14, 2) billing columns can hold
MAX_AMOUNT = Decimal("999999999999.99")


def to_decimal(value: Any) -> Decimal:
    """
    Convert int / float / str / Decimal to Decimal without binary noise.

    Floats go through ``str`` so ``0.1`` becomes ``Decimal("0.1")``.
    Raises ``ValueError`` for anything that is not a number.
    """
    if isinstance(value, bool):
        raise ValueError("booleans are not amounts")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float)):
        return Decimal(str(value))
    if isinstance(value, str):
        try:
            return Decimal(value.strip().replace(",", ""))
        except InvalidOperation:
            raise ValueError(f"not a number: {value!r}") from None
    raise ValueError(f"not a number: {value!r}")


def round2(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def round0(value: Decimal) -> Decimal:
    return value.quantize(RUPEE, rounding=ROUND_HALF_UP)


def fmt_money(value: Decimal) -> str:
    """'11800.5' -> '11,800.50'"""
    return f"{round2(value):,.2f}"
