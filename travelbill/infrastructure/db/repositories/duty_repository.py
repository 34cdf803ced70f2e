"""Duty reads and the one-way ``is_billed`` transition."""

from __future__ import annotations

from sqlalchemy import and_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from travelbill.domain.models.duty import Duty, DutyStatus
from travelbill.infrastructure.db.models import Duty as DutyRow
from travelbill.infrastructure.db.repositories.billing_repository import parse_uuid


def _num(value) -> float | None:
    return float(value) if value is not None else None


class DutyRepository:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    @staticmethod
    def to_domain(row: DutyRow) -> Duty:
        return Duty(
            id=str(row.id),
            status=row.status,
            is_billed=bool(row.is_billed),
            billing_id=str(row.billing_id) if row.billing_id else None,
            vehicle_id=str(row.vehicle_id) if row.vehicle_id else None,
            vehicle_type=row.vehicle.vehicle_type if row.vehicle is not None else None,
            company_name=row.company_name,
            client_name=row.client_name,
            pickup_location=row.pickup_location or "",
            drop_location=row.drop_location or "",
            distance_traveled=_num(row.distance_traveled),
            rate_per_km=_num(row.rate_per_km),
            base_rate=_num(row.base_rate),
            extra_charges=_num(row.extra_charges),
        )

    async def get(self, duty_id) -> Duty | None:
        pk = parse_uuid(duty_id)
        if pk is None:
            return None
        result = await self.db.execute(select(DutyRow).where(DutyRow.id == pk))
        row = result.scalar_one_or_none()
        return self.to_domain(row) if row is not None else None

    async def mark_billed(self, duty_id, billing_id) -> bool:
        """
        Compare-and-set: flag the duty billed only if it is Completed and
        still unbilled. Returns False when another request got there first.
        """
        stmt = (
            update(DutyRow)
            .where(
                and_(
                    DutyRow.id == parse_uuid(duty_id),
                    DutyRow.is_billed.is_(False),
                    DutyRow.status == DutyStatus.COMPLETED.value,
                )
            )
            .values(is_billed=True, billing_id=parse_uuid(billing_id))
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        return result.rowcount == 1

    async def repair_billed_flag(self, duty_id, billing_id) -> bool:
        """Set the flag for a Completed duty whose billing row already exists."""
        stmt = (
            update(DutyRow)
            .where(
                and_(
                    DutyRow.id == parse_uuid(duty_id),
                    DutyRow.is_billed.is_(False),
                    DutyRow.status == DutyStatus.COMPLETED.value,
                )
            )
            .values(is_billed=True, billing_id=parse_uuid(billing_id))
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        return result.rowcount == 1
