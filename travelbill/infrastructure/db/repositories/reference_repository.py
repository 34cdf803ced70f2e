"""Read-only lookups of records owned by other parts of the dashboard."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from travelbill.domain.models.billing import BankDetails
from travelbill.domain.models.duty import CompanySettings, Vehicle
from travelbill.infrastructure.db.models import CompanySettings as CompanySettingsRow
from travelbill.infrastructure.db.models import Vehicle as VehicleRow
from travelbill.infrastructure.db.repositories.billing_repository import parse_uuid


class VehicleRepository:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_many(self, vehicle_ids: list[str]) -> list[Vehicle]:
        """Vehicles in the order given; unknown ids are skipped."""
        pks = [pk for pk in (parse_uuid(v) for v in vehicle_ids) if pk is not None]
        if not pks:
            return []
        result = await self.db.execute(select(VehicleRow).where(VehicleRow.id.in_(pks)))
        by_id = {row.id: row for row in result.scalars().all()}
        return [
            Vehicle(id=str(pk), vehicle_number=by_id[pk].vehicle_number, vehicle_type=by_id[pk].vehicle_type)
            for pk in pks
            if pk in by_id
        ]


class SettingsRepository:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_company_settings(self) -> CompanySettings | None:
        result = await self.db.execute(select(CompanySettingsRow).limit(1))
        row = result.scalar_one_or_none()
        if row is None:
            return None
        return CompanySettings(
            company_name=row.company_name,
            proprietor_name=row.proprietor_name,
            company_address=row.company_address,
            contact_number=row.contact_number,
            gst_number=row.gst_number,
            pan_number=row.pan_number,
            bank_details=BankDetails(
                bank_name=row.bank_name,
                branch=row.bank_branch,
                account_number=row.bank_account_number,
                ifsc_code=row.bank_ifsc_code,
            ),
        )
