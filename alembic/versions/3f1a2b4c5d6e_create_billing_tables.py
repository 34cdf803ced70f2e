"""create vehicles, duties, billings and company_settings

Revision ID: 3f1a2b4c5d6e
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = "3f1a2b4c5d6e"
down_revision = None
branch_labels = None
depends_on = None


def _timestamp(name: str) -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        server_default=sa.text("CURRENT_TIMESTAMP"),
        nullable=True,
    )


def upgrade() -> None:
    op.create_table(
        "vehicles",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("vehicle_number", sa.String(length=20), nullable=False),
        sa.Column("vehicle_type", sa.String(length=50), nullable=False, server_default="Vehicle"),
        _timestamp("created_at"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_vehicles_vehicle_number"), "vehicles", ["vehicle_number"], unique=False)

    op.create_table(
        "duties",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("vehicle_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("status", sa.String(length=20), nullable=False, server_default="Scheduled"),
        sa.Column("is_billed", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("billing_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("company_name", sa.String(length=200), nullable=True),
        sa.Column("client_name", sa.String(length=200), nullable=True),
        sa.Column("pickup_location", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("drop_location", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("distance_traveled", sa.Numeric(12, 2), nullable=True),
        sa.Column("rate_per_km", sa.Numeric(12, 2), nullable=True),
        sa.Column("base_rate", sa.Numeric(12, 2), nullable=True),
        sa.Column("extra_charges", sa.Numeric(12, 2), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.ForeignKeyConstraint(["vehicle_id"], ["vehicles.id"]),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "billings",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("company_name", sa.String(length=200), nullable=False, server_default=""),
        sa.Column("recipient_name", sa.String(length=200), nullable=False, server_default=""),
        sa.Column("recipient_address", sa.Text(), nullable=False, server_default=""),
        sa.Column("project_location", sa.Text(), nullable=False, server_default=""),
        sa.Column("working_time", sa.String(length=100), nullable=False, server_default=""),
        sa.Column("period", sa.String(length=100), nullable=False, server_default=""),
        sa.Column("place_of_supply", sa.String(length=100), nullable=False, server_default=""),
        sa.Column("billing_date", sa.Date(), nullable=True),
        sa.Column("items", sa.JSON(), nullable=False),
        sa.Column("vehicle_ids", sa.JSON(), nullable=False),
        sa.Column("gst_enabled", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("bank_name", sa.String(length=100), nullable=False, server_default=""),
        sa.Column("bank_branch", sa.String(length=100), nullable=False, server_default=""),
        sa.Column("bank_account_number", sa.String(length=50), nullable=False, server_default=""),
        sa.Column("bank_ifsc_code", sa.String(length=20), nullable=False, server_default=""),
        sa.Column("subtotal", sa.Numeric(14, 2), nullable=False),
        sa.Column("tax_total", sa.Numeric(14, 2), nullable=False),
        sa.Column("total_invoice_value", sa.Numeric(14, 2), nullable=False),
        sa.Column("source_duty_id", postgresql.UUID(as_uuid=True), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.ForeignKeyConstraint(["source_duty_id"], ["duties.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("source_duty_id"),
    )

    op.create_table(
        "company_settings",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("company_name", sa.String(length=200), nullable=False),
        sa.Column("proprietor_name", sa.String(length=200), nullable=False, server_default=""),
        sa.Column("company_address", sa.Text(), nullable=False, server_default=""),
        sa.Column("contact_number", sa.String(length=20), nullable=False, server_default=""),
        sa.Column("gst_number", sa.String(length=20), nullable=False, server_default=""),
        sa.Column("pan_number", sa.String(length=10), nullable=False, server_default=""),
        sa.Column("bank_name", sa.String(length=100), nullable=False, server_default=""),
        sa.Column("bank_branch", sa.String(length=100), nullable=False, server_default=""),
        sa.Column("bank_account_number", sa.String(length=50), nullable=False, server_default=""),
        sa.Column("bank_ifsc_code", sa.String(length=20), nullable=False, server_default=""),
        _timestamp("updated_at"),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    op.drop_table("company_settings")
    op.drop_table("billings")
    op.drop_table("duties")
    op.drop_index(op.f("ix_vehicles_vehicle_number"), table_name="vehicles")
    op.drop_table("vehicles")
