# travelbill/domain/services/duty_billing.py
"""
Duty -> billing conversion.

A completed, unbilled duty becomes exactly one billing item:

    quantity 1, rate = distance_traveled * rate_per_km, unit "Km",
    description "Hiring Charges for <vehicle type>", SAC 996601

Creating the billing and flipping ``duty.is_billed`` is one unit of work:
both happen in one transaction, the flag flip is a compare-and-set, and
``billings.source_duty_id`` is unique, so at most one billing ever exists
per duty. If a billing row exists but the flag was never set (a write lost
between two systems), the flag is repaired instead of billing again.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy.exc import IntegrityError

from travelbill.core.config import settings
from travelbill.domain.errors import DutyNotEligibleError, DutyNotFoundError
from travelbill.domain.models.billing import (
    BankDetails,
    BillingItem,
    BillingItemInput,
    BillingRecord,
    ComputedInvoice,
)
from travelbill.domain.models.duty import Duty, DutyStatus
from travelbill.domain.money import ZERO, round2, to_decimal
from travelbill.domain.services.invoice_aggregator import compute

logger = logging.getLogger("duty_billing")

DUTY_UNIT = "Km"


# ---------------------------------------------------------------------------
# Value objects
# ---------------------------------------------------------------------------

@dataclass
class DutyBillingContext:
    """Invoice header fields the user supplies when billing a duty.

    ``None`` means "take it from the duty" (company, recipient, location).
    """
    company_name: Optional[str] = None
    recipient_name: Optional[str] = None
    recipient_address: str = ""
    project_location: Optional[str] = None
    working_time: str = ""
    period: str = ""
    place_of_supply: str = ""
    billing_date: Optional[date] = None
    gst_enabled: bool = True
    bank_details: BankDetails = field(default_factory=BankDetails)


@dataclass
class DutyBillingResult:
    duty_id: str
    billing_id: str
    computed: ComputedInvoice
    reconciled: bool = False   # True when an existing billing was re-linked

    def to_dict(self) -> dict:
        return {
            "duty_id": self.duty_id,
            "billing_id": self.billing_id,
            "reconciled": self.reconciled,
            "invoice": self.computed.to_dict(),
        }


# ---------------------------------------------------------------------------
# Pure conversion
# ---------------------------------------------------------------------------

def ensure_billable(duty: Duty) -> None:
    if duty.status != DutyStatus.COMPLETED.value:
        raise DutyNotEligibleError(duty.id, f"status is {duty.status!r}, expected 'Completed'")
    if duty.is_billed:
        raise DutyNotEligibleError(duty.id, "duty is already billed")


def _amount(value: Any) -> Decimal:
    if value is None:
        return ZERO
    try:
        return to_decimal(value)
    except ValueError:
        return ZERO


def convert_duty(
    duty: Duty,
    *,
    vehicle_type: Optional[str] = None,
    hsn_sac: Optional[str] = None,
) -> BillingItem:
    """
    Map a duty onto its single billing item.

    Missing distance or per-km rate count as 0; the resulting zero-rate item
    is then rejected by the aggregator, so no zero invoice is ever created.

    Raises:
        DutyNotEligibleError: duty not Completed, or already billed.
    """
    ensure_billable(duty)

    rate = round2(_amount(duty.distance_traveled) * _amount(duty.rate_per_km))
    kind = vehicle_type or duty.vehicle_type or "Vehicle"
    quantity = Decimal("1")
    return BillingItem(
        description=f"Hiring Charges for {kind}",
        hsn_sac=hsn_sac or settings.DEFAULT_HSN_SAC,
        unit=DUTY_UNIT,
        quantity=quantity,
        rate=rate,
        line_total=round2(quantity * rate),
    )


def build_duty_billing_record(duty: Duty, item: BillingItem, context: DutyBillingContext) -> BillingRecord:
    """The billing record handed straight to invoice creation."""
    if context.project_location is not None:
        location = context.project_location
    elif duty.pickup_location or duty.drop_location:
        location = f"{duty.pickup_location} to {duty.drop_location}"
    else:
        location = ""

    return BillingRecord(
        company_name=context.company_name if context.company_name is not None else (duty.company_name or ""),
        recipient_name=context.recipient_name if context.recipient_name is not None else (duty.client_name or ""),
        recipient_address=context.recipient_address,
        project_location=location,
        working_time=context.working_time,
        period=context.period,
        place_of_supply=context.place_of_supply,
        billing_date=context.billing_date,
        items=[
            BillingItemInput(
                description=item.description,
                hsn_sac=item.hsn_sac,
                unit=item.unit,
                quantity=item.quantity,
                rate=item.rate,
            )
        ],
        gst_enabled=context.gst_enabled,
        bank_details=context.bank_details,
        vehicle_ids=[duty.vehicle_id] if duty.vehicle_id else [],
        source_duty_id=duty.id,
    )


# ---------------------------------------------------------------------------
# Transactional flow
# ---------------------------------------------------------------------------

def _repos(db: Any, duty_repo: Any, billing_repo: Any) -> tuple[Any, Any]:
    if duty_repo is None:
        from travelbill.infrastructure.db.repositories.duty_repository import DutyRepository
        duty_repo = DutyRepository(db)
    if billing_repo is None:
        from travelbill.infrastructure.db.repositories.billing_repository import BillingRepository
        billing_repo = BillingRepository(db)
    return duty_repo, billing_repo


async def generate_billing_from_duty(
    duty_id: str,
    context: DutyBillingContext,
    db: Any,
    *,
    duty_repo: Any = None,
    billing_repo: Any = None,
) -> DutyBillingResult:
    """
    Create the billing for a completed duty and mark the duty billed.

    Raises:
        DutyNotFoundError: unknown duty.
        DutyNotEligibleError: not Completed, already billed, or lost a race.
        BillingValidationError: the duty has no billable amount.
    """
    duty_repo, billing_repo = _repos(db, duty_repo, billing_repo)

    duty = await duty_repo.get(duty_id)
    if duty is None:
        raise DutyNotFoundError(duty_id)

    existing = await billing_repo.get_by_source_duty(duty.id)
    if existing is not None:
        ensure_billable(duty)
        return await _relink(duty, existing, db, duty_repo, billing_repo)

    item = convert_duty(duty)
    record = build_duty_billing_record(duty, item, context)
    computed = compute(record, component_rate=settings.GST_COMPONENT_RATE)

    try:
        billing = await billing_repo.create(record, computed)
        claimed = await duty_repo.mark_billed(duty.id, str(billing.id))
        if not claimed:
            raise DutyNotEligibleError(duty.id, "duty was billed by a concurrent request")
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        logger.warning("Duplicate billing for duty %s rejected by the database", duty.id)
        raise DutyNotEligibleError(duty.id, "duty was billed by a concurrent request") from exc
    except Exception:
        await db.rollback()
        logger.warning("Billing for duty %s rolled back; duty left unbilled", duty.id, exc_info=True)
        raise

    logger.info(
        "Duty %s billed: billing=%s total=%s",
        duty.id, billing.id, computed.grand_total,
    )
    return DutyBillingResult(duty_id=duty.id, billing_id=str(billing.id), computed=computed)


async def _relink(duty: Duty, billing: Any, db: Any, duty_repo: Any, billing_repo: Any) -> DutyBillingResult:
    try:
        repaired = await duty_repo.repair_billed_flag(duty.id, str(billing.id))
        if not repaired:
            raise DutyNotEligibleError(duty.id, "duty changed while re-linking its billing")
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    logger.warning("Duty %s had billing %s but was not flagged; flag repaired", duty.id, billing.id)
    computed = compute(billing_repo.to_record(billing), component_rate=settings.GST_COMPONENT_RATE)
    return DutyBillingResult(duty_id=duty.id, billing_id=str(billing.id), computed=computed, reconciled=True)


async def reconcile_duty_billing(
    duty_id: str,
    db: Any,
    *,
    duty_repo: Any = None,
    billing_repo: Any = None,
) -> bool:
    """
    Repair a duty whose billing exists but whose ``is_billed`` flag is false.

    The billing is found through ``billings.source_duty_id`` or, failing
    that, through the duty's own ``billing_id``.

    Returns:
        True when the flag was repaired, False when nothing needed fixing.

    Raises:
        DutyNotFoundError: unknown duty.
        DutyNotEligibleError: a billing exists but the duty is not Completed.
    """
    duty_repo, billing_repo = _repos(db, duty_repo, billing_repo)

    duty = await duty_repo.get(duty_id)
    if duty is None:
        raise DutyNotFoundError(duty_id)
    if duty.is_billed:
        return False

    billing = await billing_repo.get_by_source_duty(duty.id)
    if billing is None and duty.billing_id:
        billing = await billing_repo.get(duty.billing_id)
    if billing is None:
        return False
    ensure_billable(duty)

    try:
        repaired = await duty_repo.repair_billed_flag(duty.id, str(billing.id))
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    if repaired:
        logger.warning("Reconciled duty %s with billing %s", duty.id, billing.id)
    return repaired
