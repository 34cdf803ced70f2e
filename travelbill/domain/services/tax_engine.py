# travelbill/domain/services/tax_engine.py
"""
GST computation for a single invoice.

Intra-state GST is printed as two equal statutory lines, SGST and CGST.
Each line is rounded on its own (2 dp, half-up), so the tax total is
``2 * round2(subtotal * 9%)`` and can differ by a paisa from
``round2(subtotal * 18%)``.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable

from travelbill.domain.models.billing import TaxComponent
from travelbill.domain.money import ZERO, round2, to_decimal

DEFAULT_COMPONENT_RATE = Decimal("9")
COMPONENT_NAMES = ("SGST", "CGST")
_HUNDRED = Decimal("100")


def _rate_label(rate: Decimal) -> str:
    # 9 -> "9", 2.5 -> "2.5"
    return format(rate.normalize(), "f")


def compute_tax(
    subtotal: Decimal,
    gst_enabled: bool,
    *,
    component_rate: Decimal | int | str = DEFAULT_COMPONENT_RATE,
) -> tuple[TaxComponent, ...]:
    """
    Args:
        subtotal: Sum of line totals (2 dp).
        gst_enabled: When False no tax lines are produced.
        component_rate: Percent charged by each of SGST and CGST.

    Returns:
        ``()`` when GST is disabled, else ``(SGST, CGST)`` components.
    """
    if subtotal < ZERO:
        raise ValueError(f"subtotal must not be negative, got {subtotal}")
    if not gst_enabled:
        return ()

    rate = to_decimal(component_rate)
    amount = round2(subtotal * rate / _HUNDRED)
    label = _rate_label(rate)
    return tuple(
        TaxComponent(name=f"{name} {label}%", rate=rate, amount=amount)
        for name in COMPONENT_NAMES
    )


def tax_total(breakdown: Iterable[TaxComponent]) -> Decimal:
    return sum((c.amount for c in breakdown), ZERO)
