# travelbill/domain/services/invoice_aggregator.py
"""
Invoice computation.

``compute`` is the only place subtotal, GST and grand total are derived.
The preview, PDF and spreadsheet renderers all print the ComputedInvoice it
returns, and the persisted billing row stores a snapshot of the same values.

Steps:
1. Validate items (fail with the validator's error, nothing partial)
2. Line totals (done by the validator: round2(quantity * rate))
3. Subtotal = sum of line totals
4. Tax breakdown from the tax engine
5. Grand total = subtotal + sum(tax), at most MAX_AMOUNT
6. Grand total in words, rounded to whole rupees
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Iterable

from travelbill.domain.errors import BillingValidationError, FieldError
from travelbill.domain.models.billing import BillingRecord, ComputedInvoice
from travelbill.domain.money import MAX_AMOUNT, ZERO, round0
from travelbill.domain.services.amount_words import amount_in_words
from travelbill.domain.services.billing_validator import validate_items
from travelbill.domain.services.tax_engine import DEFAULT_COMPONENT_RATE, compute_tax, tax_total

logger = logging.getLogger("invoice_aggregator")


def compute_items(
    raw_items: Iterable[Any],
    gst_enabled: bool,
    *,
    component_rate: Decimal | int | str = DEFAULT_COMPONENT_RATE,
) -> ComputedInvoice:
    """Compute an invoice from a bare item list (e.g. an unsaved form)."""
    items = tuple(validate_items(raw_items))

    subtotal = sum((item.line_total for item in items), ZERO)
    breakdown = compute_tax(subtotal, gst_enabled, component_rate=component_rate)
    grand_total = subtotal + tax_total(breakdown)
    if grand_total > MAX_AMOUNT:
        raise BillingValidationError([FieldError(None, "items", "invoice total is too large")])

    return ComputedInvoice(
        items=items,
        subtotal=subtotal,
        tax_breakdown=breakdown,
        tax_total=tax_total(breakdown),
        grand_total=grand_total,
        grand_total_in_words=amount_in_words(int(round0(grand_total))),
        gst_enabled=gst_enabled,
    )


def compute(
    record: BillingRecord,
    *,
    component_rate: Decimal | int | str = DEFAULT_COMPONENT_RATE,
) -> ComputedInvoice:
    """
    Compute the invoice for a billing record.

    Pure and deterministic: the same record always yields an equal
    ComputedInvoice, with items in input order.

    Raises:
        BillingValidationError / EmptyInvoiceError from the validator.
        BillingValidationError: the grand total does not fit MAX_AMOUNT.
    """
    computed = compute_items(record.items, record.gst_enabled, component_rate=component_rate)
    logger.debug(
        "Computed invoice: items=%d subtotal=%s tax=%s total=%s",
        len(computed.items),
        computed.subtotal,
        computed.tax_total,
        computed.grand_total,
    )
    return computed
