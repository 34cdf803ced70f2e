# travelbill/api/v1/schemas/billings.py
"""Request and response schemas for billing and duty-billing endpoints."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from travelbill.domain.models.billing import BankDetails, BillingItemInput, BillingRecord


class ComputeRequest(BaseModel):
    """Compute totals for an unsaved form."""

    model_config = ConfigDict(populate_by_name=True)

    items: list[BillingItemInput] = Field(validation_alias=AliasChoices("items", "billing_items", "billingItems"))
    gst_enabled: bool = Field(default=True, validation_alias=AliasChoices("gst_enabled", "gstEnabled"))


class BillingCreate(BillingRecord):
    """Create or replace a billing. Totals are always computed server-side."""


class BillingSummary(BaseModel):
    """One row of the billing list."""

    id: str
    company_name: str
    recipient_name: str
    billing_date: date | None
    gst_enabled: bool
    subtotal: Decimal
    tax_total: Decimal
    total_invoice_value: Decimal
    source_duty_id: str | None
    created_at: datetime | None


class DutyBillingRequest(BaseModel):
    """Invoice header fields for billing a duty; blanks are taken from the duty."""

    model_config = ConfigDict(populate_by_name=True)

    company_name: str | None = Field(default=None, validation_alias=AliasChoices("company_name", "companyName"))
    recipient_name: str | None = Field(default=None, validation_alias=AliasChoices("recipient_name", "recipientName"))
    recipient_address: str = Field(default="", validation_alias=AliasChoices("recipient_address", "recipientAddress"))
    project_location: str | None = Field(
        default=None, validation_alias=AliasChoices("project_location", "projectLocation")
    )
    working_time: str = Field(default="", validation_alias=AliasChoices("working_time", "workingTime"))
    period: str = ""
    place_of_supply: str = Field(default="", validation_alias=AliasChoices("place_of_supply", "placeOfSupply"))
    billing_date: date | None = Field(default=None, validation_alias=AliasChoices("billing_date", "billingDate"))
    gst_enabled: bool = Field(default=True, validation_alias=AliasChoices("gst_enabled", "gstEnabled"))
    bank_details: BankDetails = Field(
        default_factory=BankDetails, validation_alias=AliasChoices("bank_details", "bankDetails")
    )
