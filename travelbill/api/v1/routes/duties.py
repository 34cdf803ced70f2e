# travelbill/api/v1/routes/duties.py
"""Generate a billing from a completed duty, and repair half-billed duties."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from travelbill.core.db import get_db
from travelbill.domain.services.duty_billing import (
    DutyBillingContext,
    generate_billing_from_duty,
    reconcile_duty_billing,
)

from travelbill.api.v1.deps import get_billing_repository, get_duty_repository
from travelbill.api.v1.envelope import ok
from travelbill.api.v1.schemas.billings import DutyBillingRequest

logger = logging.getLogger("api.v1.duties")

router = APIRouter(prefix="/duties", tags=["Duties"])


@router.post("/{duty_id}/billing", response_model=dict, status_code=status.HTTP_201_CREATED)
async def bill_duty(
    duty_id: str,
    body: DutyBillingRequest | None = None,
    duty_repo=Depends(get_duty_repository),
    billing_repo=Depends(get_billing_repository),
    db: AsyncSession = Depends(get_db),
):
    """
    Create the billing for a completed duty and mark the duty billed.

    A retry after a half-finished attempt returns the existing billing
    with ``reconciled: true`` instead of creating a second one.
    """
    body = body or DutyBillingRequest()
    context = DutyBillingContext(**dict(body))
    result = await generate_billing_from_duty(
        duty_id, context, db, duty_repo=duty_repo, billing_repo=billing_repo
    )
    message = "Existing billing re-linked" if result.reconciled else "Billing created from duty"
    return ok(data=result.to_dict(), message=message)


@router.post("/{duty_id}/reconcile", response_model=dict)
async def reconcile_duty(
    duty_id: str,
    duty_repo=Depends(get_duty_repository),
    billing_repo=Depends(get_billing_repository),
    db: AsyncSession = Depends(get_db),
):
    repaired = await reconcile_duty_billing(duty_id, db, duty_repo=duty_repo, billing_repo=billing_repo)
    return ok(data={"duty_id": duty_id, "repaired": repaired})
