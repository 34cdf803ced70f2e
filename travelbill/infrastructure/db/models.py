import uuid

from sqlalchemy import JSON, Boolean, Column, Date, DateTime, ForeignKey, Numeric, String, Text, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from travelbill.infrastructure.db.base import Base


class Vehicle(Base):
    __tablename__ = "vehicles"
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    vehicle_number = Column(String(20), nullable=False, index=True)
    vehicle_type = Column(String(50), nullable=False, server_default="Vehicle")
    created_at = Column(DateTime(timezone=True), server_default=text("CURRENT_TIMESTAMP"))


class Duty(Base):
    __tablename__ = "duties"
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    vehicle_id = Column(UUID(as_uuid=True), ForeignKey("vehicles.id"), nullable=True)
    status = Column(String(20), nullable=False, server_default="Scheduled")
    # Flips false -> true exactly once, together with billing_id
    is_billed = Column(Boolean, nullable=False, server_default=text("false"), default=False)
    billing_id = Column(UUID(as_uuid=True), nullable=True)

    company_name = Column(String(200))
    client_name = Column(String(200))
    pickup_location = Column(String(255), nullable=False, server_default="")
    drop_location = Column(String(255), nullable=False, server_default="")
    distance_traveled = Column(Numeric(12, 2))
    rate_per_km = Column(Numeric(12, 2))
    base_rate = Column(Numeric(12, 2))
    extra_charges = Column(Numeric(12, 2))

    created_at = Column(DateTime(timezone=True), server_default=text("CURRENT_TIMESTAMP"))
    updated_at = Column(DateTime(timezone=True), server_default=text("CURRENT_TIMESTAMP"))

    vehicle = relationship("Vehicle", lazy="joined")


class Billing(Base):
    __tablename__ = "billings"
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    company_name = Column(String(200), nullable=False, server_default="")
    recipient_name = Column(String(200), nullable=False, server_default="")
    recipient_address = Column(Text, nullable=False, server_default="")
    project_location = Column(Text, nullable=False, server_default="")
    working_time = Column(String(100), nullable=False, server_default="")
    period = Column(String(100), nullable=False, server_default="")
    place_of_supply = Column(String(100), nullable=False, server_default="")
    billing_date = Column(Date)

    items = Column(JSON, nullable=False)
    vehicle_ids = Column(JSON, nullable=False)
    gst_enabled = Column(Boolean, nullable=False, server_default=text("true"), default=True)

    bank_name = Column(String(100), nullable=False, server_default="")
    bank_branch = Column(String(100), nullable=False, server_default="")
    bank_account_number = Column(String(50), nullable=False, server_default="")
    bank_ifsc_code = Column(String(20), nullable=False, server_default="")

    # Snapshot of the computed invoice, for listing and dashboard totals only
    subtotal = Column(Numeric(14, 2), nullable=False)
    tax_total = Column(Numeric(14, 2), nullable=False)
    total_invoice_value = Column(Numeric(14, 2), nullable=False)

    # At most one billing per duty
    source_duty_id = Column(UUID(as_uuid=True), ForeignKey("duties.id"), unique=True, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=text("CURRENT_TIMESTAMP"))
    updated_at = Column(DateTime(timezone=True), server_default=text("CURRENT_TIMESTAMP"))


class CompanySettings(Base):
    __tablename__ = "company_settings"
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    company_name = Column(String(200), nullable=False)
    proprietor_name = Column(String(200), nullable=False, server_default="")
    company_address = Column(Text, nullable=False, server_default="")
    contact_number = Column(String(20), nullable=False, server_default="")
    gst_number = Column(String(20), nullable=False, server_default="")
    pan_number = Column(String(10), nullable=False, server_default="")
    bank_name = Column(String(100), nullable=False, server_default="")
    bank_branch = Column(String(100), nullable=False, server_default="")
    bank_account_number = Column(String(50), nullable=False, server_default="")
    bank_ifsc_code = Column(String(20), nullable=False, server_default="")
    updated_at = Column(DateTime(timezone=True), server_default=text("CURRENT_TIMESTAMP"))
