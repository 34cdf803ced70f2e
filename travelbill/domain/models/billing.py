from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class BillingItemInput(BaseModel):
    """A candidate line item exactly as a form or API client sent it."""

    model_config = ConfigDict(populate_by_name=True)

    description: str = ""
    hsn_sac: str = Field(default="", validation_alias=AliasChoices("hsn_sac", "hsnSac"))
    unit: str = ""
    quantity: Any = None
    rate: Any = None


class BankDetails(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    bank_name: str = Field(default="", validation_alias=AliasChoices("bank_name", "bankName"))
    branch: str = Field(default="", validation_alias=AliasChoices("branch", "branchName", "branch_name"))
    account_number: str = Field(default="", validation_alias=AliasChoices("account_number", "accountNumber"))
    ifsc_code: str = Field(default="", validation_alias=AliasChoices("ifsc_code", "ifscCode"))


class BillingRecord(BaseModel):
    """Everything needed to compute and print one invoice."""

    model_config = ConfigDict(populate_by_name=True)

    company_name: str = Field(default="", validation_alias=AliasChoices("company_name", "companyName"))
    recipient_name: str = Field(default="", validation_alias=AliasChoices("recipient_name", "recipientName"))
    recipient_address: str = Field(default="", validation_alias=AliasChoices("recipient_address", "recipientAddress"))
    project_location: str = Field(default="", validation_alias=AliasChoices("project_location", "projectLocation"))
    working_time: str = Field(default="", validation_alias=AliasChoices("working_time", "workingTime"))
    period: str = ""
    place_of_supply: str = Field(default="", validation_alias=AliasChoices("place_of_supply", "placeOfSupply"))
    billing_date: Optional[date] = Field(default=None, validation_alias=AliasChoices("billing_date", "billingDate"))

    items: list[BillingItemInput] = Field(
        default_factory=list,
        validation_alias=AliasChoices("items", "billing_items", "billingItems"),
    )
    # GST is on unless the user switches it off
    gst_enabled: bool = Field(default=True, validation_alias=AliasChoices("gst_enabled", "gstEnabled"))

    bank_details: BankDetails = Field(
        default_factory=BankDetails,
        validation_alias=AliasChoices("bank_details", "bankDetails"),
    )
    vehicle_ids: list[str] = Field(default_factory=list, validation_alias=AliasChoices("vehicle_ids", "vehicleIds"))
    source_duty_id: Optional[str] = None


# ---------------------------------------------------------------------------
# Computed values (immutable)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BillingItem:
    """A validated line item. Only the validator constructs these."""
    description: str
    hsn_sac: str
    unit: str
    quantity: Decimal
    rate: Decimal
    line_total: Decimal

    def to_dict(self) -> dict:
        return {
            "description": self.description,
            "hsn_sac": self.hsn_sac,
            "unit": self.unit,
            "quantity": str(self.quantity),
            "rate": str(self.rate),
            "line_total": str(self.line_total),
        }


@dataclass(frozen=True)
class TaxComponent:
    name: str          # "SGST 9%"
    rate: Decimal      # percent
    amount: Decimal


@dataclass(frozen=True)
class ComputedInvoice:
    """
    The single source of truth for every rendering of an invoice.

    Derived from a BillingRecord by ``invoice_aggregator.compute``; never
    stored on its own and never recomputed by a renderer.
    """
    items: tuple[BillingItem, ...]
    subtotal: Decimal
    tax_breakdown: tuple[TaxComponent, ...]
    tax_total: Decimal
    grand_total: Decimal
    grand_total_in_words: str
    gst_enabled: bool

    def to_dict(self) -> dict:
        return {
            "items": [item.to_dict() for item in self.items],
            "subtotal": str(self.subtotal),
            "tax_breakdown": [
                {"name": c.name, "rate": str(c.rate), "amount": str(c.amount)}
                for c in self.tax_breakdown
            ],
            "tax_total": str(self.tax_total),
            "grand_total": str(self.grand_total),
            "grand_total_in_words": self.grand_total_in_words,
            "gst_enabled": self.gst_enabled,
        }
