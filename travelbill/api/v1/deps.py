# travelbill/api/v1/deps.py
"""
FastAPI dependencies for the v1 API layer.

Repositories are injected through these functions so tests can swap in
in-memory fakes with ``app.dependency_overrides``.
"""

from __future__ import annotations

import logging

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from travelbill.core.config import settings
from travelbill.core.db import get_db
from travelbill.domain.models.duty import CompanySettings
from travelbill.infrastructure.db.repositories.billing_repository import BillingRepository
from travelbill.infrastructure.db.repositories.duty_repository import DutyRepository
from travelbill.infrastructure.db.repositories.reference_repository import (
    SettingsRepository,
    VehicleRepository,
)

logger = logging.getLogger("api.v1.deps")


def get_billing_repository(db: AsyncSession = Depends(get_db)) -> BillingRepository:
    return BillingRepository(db)


def get_duty_repository(db: AsyncSession = Depends(get_db)) -> DutyRepository:
    return DutyRepository(db)


def get_vehicle_repository(db: AsyncSession = Depends(get_db)) -> VehicleRepository:
    return VehicleRepository(db)


def get_settings_repository(db: AsyncSession = Depends(get_db)) -> SettingsRepository:
    return SettingsRepository(db)


async def get_company_settings(
    repo: SettingsRepository = Depends(get_settings_repository),
) -> CompanySettings:
    """
    The supplier identity printed on invoices.

    Falls back to the DEFAULT_* values from config until the settings
    screen has saved a row.
    """
    company = await repo.get_company_settings()
    if company is not None:
        return company
    logger.debug("No company_settings row; using configured defaults")
    return CompanySettings(
        company_name=settings.DEFAULT_COMPANY_NAME,
        company_address=settings.DEFAULT_COMPANY_ADDRESS,
        gst_number=settings.DEFAULT_GST_NUMBER,
        pan_number=settings.DEFAULT_PAN_NUMBER,
    )
