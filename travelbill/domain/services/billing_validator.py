# travelbill/domain/services/billing_validator.py
"""
Billing item validation.

Turns the loose items a form posts into validated ``BillingItem`` values
before any arithmetic runs. Rules per item:

- rows whose description is blank after trimming are dropped
  (the form always carries an empty template row)
- quantity and rate must be finite numbers > 0, and neither they nor
  their product may exceed MAX_AMOUNT
- hsn_sac / unit may be empty; when present they must be plain text
- description may hold line breaks / tabs but no other control characters

Error indexes always refer to the caller's list, including dropped rows.
"""

from __future__ import annotations

import logging
import unicodedata
from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any

from pydantic import ValidationError

from travelbill.domain.errors import BillingValidationError, EmptyInvoiceError, FieldError
from travelbill.domain.models.billing import BillingItem, BillingItemInput
from travelbill.domain.money import MAX_AMOUNT, ZERO, round2, to_decimal

logger = logging.getLogger("billing_validator")

_DESCRIPTION_WHITESPACE = {"\n", "\r", "\t"}


def _has_control_chars(text: str, allowed: set[str] | None = None) -> bool:
    allowed = allowed or set()
    return any(
        unicodedata.category(ch) == "Cc" and ch not in allowed
        for ch in text
    )


def _positive_amount(value: Any, index: int, field: str, errors: list[FieldError]) -> Decimal | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        errors.append(FieldError(index, field, "is required"))
        return None
    try:
        amount = to_decimal(value)
    except ValueError:
        errors.append(FieldError(index, field, "must be a number"))
        return None
    if not amount.is_finite():
        errors.append(FieldError(index, field, "must be a finite number"))
        return None
    if amount <= ZERO:
        errors.append(FieldError(index, field, "must be greater than 0"))
        return None
    if amount > MAX_AMOUNT:
        errors.append(FieldError(index, field, "is too large"))
        return None
    return amount


def _coerce(raw: Any, index: int, errors: list[FieldError]) -> BillingItemInput | None:
    if isinstance(raw, BillingItemInput):
        return raw
    if isinstance(raw, Mapping):
        try:
            return BillingItemInput.model_validate(dict(raw))
        except ValidationError as exc:
            for err in exc.errors():
                field = str(err["loc"][0]) if err.get("loc") else "item"
                errors.append(FieldError(index, field, err.get("msg", "is invalid")))
            return None
    errors.append(FieldError(index, "item", f"unsupported item type {type(raw).__name__}"))
    return None


def validate_item(raw: Any, index: int = 0) -> BillingItem:
    """Validate a single non-blank candidate item."""
    errors: list[FieldError] = []
    item = _validate_one(raw, index, errors)
    if errors or item is None:
        raise BillingValidationError(errors or [FieldError(index, "description", "must not be blank")])
    return item


def _validate_one(raw: Any, index: int, errors: list[FieldError]) -> BillingItem | None:
    candidate = _coerce(raw, index, errors)
    if candidate is None:
        return None

    description = candidate.description
    if not description.strip():
        return None
    if _has_control_chars(description, _DESCRIPTION_WHITESPACE):
        errors.append(FieldError(index, "description", "contains control characters"))

    for field in ("hsn_sac", "unit"):
        if _has_control_chars(getattr(candidate, field)):
            errors.append(FieldError(index, field, "must be plain text"))

    start = len(errors)
    quantity = _positive_amount(candidate.quantity, index, "quantity", errors)
    rate = _positive_amount(candidate.rate, index, "rate", errors)
    if len(errors) > start or quantity is None or rate is None:
        return None
    if quantity * rate > MAX_AMOUNT:
        errors.append(FieldError(index, "rate", "is too large"))
        return None

    return BillingItem(
        description=description,
        hsn_sac=candidate.hsn_sac.strip(),
        unit=candidate.unit.strip(),
        quantity=quantity,
        rate=rate,
        line_total=round2(quantity * rate),
    )


def validate_items(raw_items: Iterable[Any]) -> list[BillingItem]:
    """
    Validate a list of candidate items.

    Returns:
        Non-empty list of BillingItem in input order.

    Raises:
        EmptyInvoiceError: nothing left after dropping blank rows.
        BillingValidationError: one or more fields were rejected.
    """
    errors: list[FieldError] = []
    items: list[BillingItem] = []

    for index, raw in enumerate(raw_items):
        item = _validate_one(raw, index, errors)
        if item is not None:
            items.append(item)

    if errors:
        logger.info("Rejected billing items: %s", [e.to_dict() for e in errors])
        raise BillingValidationError(errors)
    if not items:
        raise EmptyInvoiceError()
    return items
