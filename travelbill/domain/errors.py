# travelbill/domain/errors.py
"""
Error taxonomy for the billing engine.

Every error here is recoverable and is raised to the caller; the API layer
maps them onto the response envelope in ``travelbill.main``.
"""

from __future__ import annotations

from dataclasses import dataclass


class BillingError(Exception):
    """Base class for all billing engine errors."""


@dataclass(frozen=True)
class FieldError:
    """A single problem with one field of one candidate item."""
    index: int | None   # position in the caller's item list (None = list-level)
    field: str
    message: str

    def to_dict(self) -> dict:
        return {"index": self.index, "field": self.field, "message": self.message}


class BillingValidationError(BillingError):
    """One or more candidate billing items were rejected."""

    def __init__(self, errors: list[FieldError]) -> None:
        if not errors:
            raise ValueError("BillingValidationError needs at least one FieldError")
        self.errors = list(errors)
        first = self.errors[0]
        if first.index is None:
            msg = first.message
        else:
            msg = f"item {first.index}: {first.field} {first.message}"
        if len(self.errors) > 1:
            msg += f" (+{len(self.errors) - 1} more)"
        super().__init__(msg)

    @property
    def index(self) -> int | None:
        return self.errors[0].index

    @property
    def field(self) -> str:
        return self.errors[0].field


class EmptyInvoiceError(BillingValidationError):
    """No billing item remained after dropping blank rows."""

    def __init__(self) -> None:
        super().__init__(
            [FieldError(index=None, field="items", message="at least one billing item is required")]
        )


class DutyNotFoundError(BillingError):
    def __init__(self, duty_id: str) -> None:
        self.duty_id = duty_id
        super().__init__(f"Duty {duty_id} not found")


class DutyNotEligibleError(BillingError):
    """Duty is not Completed, or has already been billed."""

    def __init__(self, duty_id: str, reason: str) -> None:
        self.duty_id = duty_id
        self.reason = reason
        super().__init__(f"Duty {duty_id} cannot be billed: {reason}")


class BillingNotFoundError(BillingError):
    def __init__(self, billing_id: str) -> None:
        self.billing_id = billing_id
        super().__init__(f"Billing {billing_id} not found")


class RenderError(BillingError):
    """A document renderer failed; only the requested artifact is affected."""

    def __init__(self, kind: str, message: str) -> None:
        self.kind = kind
        super().__init__(f"{kind} render failed: {message}")
