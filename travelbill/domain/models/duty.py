from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from travelbill.domain.models.billing import BankDetails


class DutyStatus(str, Enum):
    SCHEDULED = "Scheduled"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class Duty(BaseModel):
    """A vehicle/driver assignment, owned by the duty CRUD layer."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    status: str = DutyStatus.SCHEDULED.value
    is_billed: bool = Field(default=False, validation_alias=AliasChoices("is_billed", "isBilled"))
    billing_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("billing_id", "billingId"))

    vehicle_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("vehicle_id", "vehicleId"))
    vehicle_type: Optional[str] = Field(default=None, validation_alias=AliasChoices("vehicle_type", "vehicleType"))
    company_name: Optional[str] = Field(default=None, validation_alias=AliasChoices("company_name", "companyName"))
    client_name: Optional[str] = Field(default=None, validation_alias=AliasChoices("client_name", "clientName"))
    pickup_location: str = Field(default="", validation_alias=AliasChoices("pickup_location", "pickupLocation"))
    drop_location: str = Field(default="", validation_alias=AliasChoices("drop_location", "dropLocation"))

    distance_traveled: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("distance_traveled", "distanceTraveled")
    )
    rate_per_km: Optional[float] = Field(default=None, validation_alias=AliasChoices("rate_per_km", "ratePerKm"))
    base_rate: Optional[float] = Field(default=None, validation_alias=AliasChoices("base_rate", "baseRate"))
    extra_charges: Optional[float] = Field(
        default=None, validation_alias=AliasChoices("extra_charges", "extraCharges")
    )


class Vehicle(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    vehicle_number: str = Field(validation_alias=AliasChoices("vehicle_number", "vehicleNumber"))
    vehicle_type: str = Field(default="Vehicle", validation_alias=AliasChoices("vehicle_type", "vehicleType"))


class CompanySettings(BaseModel):
    """Supplier identity printed on every invoice (read-only here)."""

    model_config = ConfigDict(populate_by_name=True)

    company_name: str = Field(default="", validation_alias=AliasChoices("company_name", "companyName"))
    proprietor_name: str = Field(default="", validation_alias=AliasChoices("proprietor_name", "proprietorName"))
    company_address: str = Field(default="", validation_alias=AliasChoices("company_address", "companyAddress"))
    contact_number: str = Field(default="", validation_alias=AliasChoices("contact_number", "contactNumber"))
    gst_number: str = Field(default="", validation_alias=AliasChoices("gst_number", "gstNumber"))
    pan_number: str = Field(default="", validation_alias=AliasChoices("pan_number", "panNumber"))
    bank_details: BankDetails = Field(
        default_factory=BankDetails, validation_alias=AliasChoices("bank_details", "bankDetails")
    )
