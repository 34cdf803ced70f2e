import uuid
from datetime import date, datetime, timezone
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from travelbill.domain.models.billing import BankDetails, BillingItemInput, BillingRecord, ComputedInvoice
from travelbill.infrastructure.db.models import Billing


def parse_uuid(value) -> uuid.UUID | None:
    """Path ids arrive as strings; anything that is not a UUID simply matches nothing."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


class BillingRepository:
    """
    Billing rows. Methods flush but never commit: the caller owns the
    transaction (the duty flow needs the insert and the duty flag update
    to commit or roll back together).
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    # ---------- mapping ----------

    @staticmethod
    def _apply(billing: Billing, record: BillingRecord, computed: ComputedInvoice) -> None:
        billing.company_name = record.company_name
        billing.recipient_name = record.recipient_name
        billing.recipient_address = record.recipient_address
        billing.project_location = record.project_location
        billing.working_time = record.working_time
        billing.period = record.period
        billing.place_of_supply = record.place_of_supply
        billing.billing_date = record.billing_date
        # Store the validated items so blank template rows are not persisted
        billing.items = [
            {
                "description": item.description,
                "hsn_sac": item.hsn_sac,
                "unit": item.unit,
                "quantity": str(item.quantity),
                "rate": str(item.rate),
            }
            for item in computed.items
        ]
        billing.vehicle_ids = list(record.vehicle_ids)
        billing.gst_enabled = record.gst_enabled
        billing.bank_name = record.bank_details.bank_name
        billing.bank_branch = record.bank_details.branch
        billing.bank_account_number = record.bank_details.account_number
        billing.bank_ifsc_code = record.bank_details.ifsc_code
        billing.subtotal = computed.subtotal
        billing.tax_total = computed.tax_total
        billing.total_invoice_value = computed.grand_total

    @staticmethod
    def to_record(billing: Billing) -> BillingRecord:
        return BillingRecord(
            company_name=billing.company_name,
            recipient_name=billing.recipient_name,
            recipient_address=billing.recipient_address,
            project_location=billing.project_location,
            working_time=billing.working_time,
            period=billing.period,
            place_of_supply=billing.place_of_supply,
            billing_date=billing.billing_date,
            items=[BillingItemInput.model_validate(raw) for raw in billing.items or []],
            gst_enabled=billing.gst_enabled,
            bank_details=BankDetails(
                bank_name=billing.bank_name,
                branch=billing.bank_branch,
                account_number=billing.bank_account_number,
                ifsc_code=billing.bank_ifsc_code,
            ),
            vehicle_ids=[str(v) for v in billing.vehicle_ids or []],
            source_duty_id=str(billing.source_duty_id) if billing.source_duty_id else None,
        )

    # ---------- main methods ----------

    async def create(self, record: BillingRecord, computed: ComputedInvoice) -> Billing:
        billing = Billing(source_duty_id=parse_uuid(record.source_duty_id) if record.source_duty_id else None)
        self._apply(billing, record, computed)
        self.db.add(billing)
        await self.db.flush()
        return billing

    async def update(self, billing: Billing, record: BillingRecord, computed: ComputedInvoice) -> Billing:
        self._apply(billing, record, computed)
        billing.updated_at = datetime.now(timezone.utc)
        await self.db.flush()
        return billing

    async def delete(self, billing: Billing) -> None:
        await self.db.delete(billing)
        await self.db.flush()

    async def get(self, billing_id) -> Billing | None:
        pk = parse_uuid(billing_id)
        if pk is None:
            return None
        result = await self.db.execute(select(Billing).where(Billing.id == pk))
        return result.scalar_one_or_none()

    async def get_by_source_duty(self, duty_id) -> Billing | None:
        pk = parse_uuid(duty_id)
        if pk is None:
            return None
        result = await self.db.execute(select(Billing).where(Billing.source_duty_id == pk))
        return result.scalar_one_or_none()

    async def list_page(self, limit: int, offset: int) -> tuple[list[Billing], int]:
        total = (await self.db.execute(select(func.count()).select_from(Billing))).scalar() or 0
        q = select(Billing).order_by(Billing.created_at.desc()).offset(offset).limit(limit)
        result = await self.db.execute(q)
        return list(result.scalars().all()), total

    async def summary(self, today: date | None = None) -> dict:
        """Dashboard figures: bill count, revenue (all time / this month), vehicles billed."""
        today = today or date.today()
        month_start = datetime(today.year, today.month, 1, tzinfo=timezone.utc)

        count, revenue = (
            await self.db.execute(
                select(func.count(Billing.id), func.coalesce(func.sum(Billing.total_invoice_value), 0))
            )
        ).one()
        month_revenue = (
            await self.db.execute(
                select(func.coalesce(func.sum(Billing.total_invoice_value), 0)).where(
                    Billing.created_at >= month_start
                )
            )
        ).scalar()

        vehicle_lists = (await self.db.execute(select(Billing.vehicle_ids))).scalars().all()
        vehicles = {str(v) for ids in vehicle_lists for v in (ids or [])}

        return {
            "total_bills": int(count or 0),
            "total_revenue": Decimal(str(revenue or 0)),
            "revenue_this_month": Decimal(str(month_revenue or 0)),
            "total_vehicles": len(vehicles),
        }
