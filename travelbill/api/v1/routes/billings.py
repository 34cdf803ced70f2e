# travelbill/api/v1/routes/billings.py
"""
Billing CRUD, live totals, dashboard summary and invoice exports.

Totals are never accepted from the client: every write recomputes the
invoice from its items, and every export recomputes it from the stored
record before handing it to a renderer.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from travelbill.core.config import settings
from travelbill.core.db import get_db
from travelbill.domain.errors import BillingNotFoundError
from travelbill.domain.models.billing import BillingRecord, ComputedInvoice
from travelbill.domain.models.document import DocumentContext
from travelbill.domain.models.duty import CompanySettings
from travelbill.domain.services.invoice_aggregator import compute, compute_items
from travelbill.domain.services.invoice_render import render_artifact_async

from travelbill.api.v1.deps import (
    get_billing_repository,
    get_company_settings,
    get_vehicle_repository,
)
from travelbill.api.v1.envelope import ok, paginated
from travelbill.api.v1.schemas.billings import BillingCreate, BillingSummary, ComputeRequest

logger = logging.getLogger("api.v1.billings")

router = APIRouter(prefix="/billings", tags=["Billings"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _summary(billing) -> dict:
    return BillingSummary(
        id=str(billing.id),
        company_name=billing.company_name,
        recipient_name=billing.recipient_name,
        billing_date=billing.billing_date,
        gst_enabled=billing.gst_enabled,
        subtotal=billing.subtotal,
        tax_total=billing.tax_total,
        total_invoice_value=billing.total_invoice_value,
        source_duty_id=str(billing.source_duty_id) if billing.source_duty_id else None,
        created_at=billing.created_at,
    ).model_dump(mode="json")


def _detail(billing_id, record: BillingRecord, computed: ComputedInvoice) -> dict:
    return {
        "id": str(billing_id),
        "record": record.model_dump(mode="json"),
        "invoice": computed.to_dict(),
    }


def _compute(record: BillingRecord) -> ComputedInvoice:
    return compute(record, component_rate=settings.GST_COMPONENT_RATE)


async def _load(billing_id: str, repo) -> tuple[object, BillingRecord]:
    billing = await repo.get(billing_id)
    if billing is None:
        raise BillingNotFoundError(billing_id)
    return billing, repo.to_record(billing)


# ---------------------------------------------------------------------------
# Live totals for an unsaved form
# ---------------------------------------------------------------------------

@router.post("/compute", response_model=dict)
async def compute_totals(body: ComputeRequest):
    """Validate items and return the computed invoice without saving anything."""
    computed = compute_items(body.items, body.gst_enabled, component_rate=settings.GST_COMPONENT_RATE)
    return ok(data=computed.to_dict())


# ---------------------------------------------------------------------------
# List / summary
# ---------------------------------------------------------------------------

@router.get("", response_model=dict)
async def list_billings(
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    repo=Depends(get_billing_repository),
):
    """Billings, newest first."""
    rows, total = await repo.list_page(limit, offset)
    return paginated(items=[_summary(b) for b in rows], total=total, limit=limit, offset=offset)


@router.get("/summary", response_model=dict)
async def billing_summary(repo=Depends(get_billing_repository)):
    """Dashboard figures: bill count, revenue, revenue this month, vehicles billed."""
    figures = await repo.summary()
    return ok(
        data={
            "total_bills": figures["total_bills"],
            "total_revenue": str(figures["total_revenue"]),
            "revenue_this_month": str(figures["revenue_this_month"]),
            "total_vehicles": figures["total_vehicles"],
        }
    )


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------

@router.post("", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_billing(
    body: BillingCreate,
    repo=Depends(get_billing_repository),
    db: AsyncSession = Depends(get_db),
):
    # Duty billings are only created through /duties/{id}/billing
    record = BillingRecord.model_validate(body.model_dump()).model_copy(update={"source_duty_id": None})
    computed = _compute(record)

    billing = await repo.create(record, computed)
    await db.commit()
    logger.info("Billing %s created: total=%s", billing.id, computed.grand_total)

    return ok(data=_detail(billing.id, repo.to_record(billing), computed), message="Billing created")


@router.get("/{billing_id}", response_model=dict)
async def get_billing(billing_id: str, repo=Depends(get_billing_repository)):
    billing, record = await _load(billing_id, repo)
    return ok(data=_detail(billing.id, record, _compute(record)))


@router.put("/{billing_id}", response_model=dict)
async def update_billing(
    billing_id: str,
    body: BillingCreate,
    repo=Depends(get_billing_repository),
    db: AsyncSession = Depends(get_db),
):
    """Replace a billing. The link to its source duty cannot be changed."""
    billing, existing = await _load(billing_id, repo)
    record = BillingRecord.model_validate(body.model_dump()).model_copy(
        update={"source_duty_id": existing.source_duty_id}
    )
    computed = _compute(record)

    await repo.update(billing, record, computed)
    await db.commit()
    logger.info("Billing %s updated: total=%s", billing.id, computed.grand_total)

    return ok(data=_detail(billing.id, repo.to_record(billing), computed), message="Billing updated")


@router.delete("/{billing_id}", response_model=dict)
async def delete_billing(
    billing_id: str,
    repo=Depends(get_billing_repository),
    db: AsyncSession = Depends(get_db),
):
    billing, _ = await _load(billing_id, repo)
    await repo.delete(billing)
    await db.commit()
    logger.info("Billing %s deleted", billing_id)
    return ok(message="Billing deleted")


# ---------------------------------------------------------------------------
# Exports
# ---------------------------------------------------------------------------

async def _export(kind: str, billing_id: str, repo, vehicle_repo, company: CompanySettings) -> Response:
    billing, record = await _load(billing_id, repo)
    computed = _compute(record)
    vehicles = await vehicle_repo.get_many(record.vehicle_ids)
    ctx = DocumentContext.from_record(record, company, invoice_number=str(billing.id), vehicles=vehicles)

    artifact = await render_artifact_async(kind, computed, ctx, timeout=settings.RENDER_TIMEOUT_SECONDS)
    disposition = "inline" if kind == "html" else "attachment"
    return Response(
        content=artifact.content,
        media_type=artifact.media_type,
        headers={"Content-Disposition": f'{disposition}; filename="{artifact.filename}"'},
    )


@router.get("/{billing_id}/preview")
async def preview_billing(
    billing_id: str,
    repo=Depends(get_billing_repository),
    vehicle_repo=Depends(get_vehicle_repository),
    company: CompanySettings = Depends(get_company_settings),
):
    """The printable on-screen invoice as HTML."""
    return await _export("html", billing_id, repo, vehicle_repo, company)


@router.get("/{billing_id}/pdf")
async def download_pdf(
    billing_id: str,
    repo=Depends(get_billing_repository),
    vehicle_repo=Depends(get_vehicle_repository),
    company: CompanySettings = Depends(get_company_settings),
):
    return await _export("pdf", billing_id, repo, vehicle_repo, company)


@router.get("/{billing_id}/xlsx")
async def download_xlsx(
    billing_id: str,
    repo=Depends(get_billing_repository),
    vehicle_repo=Depends(get_vehicle_repository),
    company: CompanySettings = Depends(get_company_settings),
):
    return await _export("xlsx", billing_id, repo, vehicle_repo, company)
