"""Shared test fixtures for the billing engine test suite."""

import asyncio
import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from travelbill.domain.models.billing import BankDetails, BillingRecord
from travelbill.domain.models.duty import CompanySettings, Duty, DutyStatus, Vehicle
from travelbill.infrastructure.db.models import Billing
from travelbill.infrastructure.db.repositories.billing_repository import BillingRepository, parse_uuid


@pytest.fixture(scope="session")
def event_loop():
    """Use a single event loop for the entire test session."""
    loop = asyncio.new_event_loop()
    yield loop
    loop.close()


# ---------------------------------------------------------------------------
# In-memory stand-ins for the session and repositories
# ---------------------------------------------------------------------------

class FakeSession:
    """Records commits/rollbacks; rollback undoes whatever the fakes staged."""

    def __init__(self):
        self.commits = 0
        self.rollbacks = 0
        self._undo = []

    def stage(self, undo):
        self._undo.append(undo)

    async def commit(self):
        self.commits += 1
        self._undo.clear()

    async def rollback(self):
        self.rollbacks += 1
        for undo in reversed(self._undo):
            undo()
        self._undo.clear()


class FakeBillingRepository:
    to_record = staticmethod(BillingRepository.to_record)

    def __init__(self, session: FakeSession):
        self.session = session
        self.rows: dict = {}
        self._clock = datetime(2026, 10, 1, tzinfo=timezone.utc)

    async def create(self, record, computed):
        billing = Billing(
            id=uuid.uuid4(),
            source_duty_id=parse_uuid(record.source_duty_id) if record.source_duty_id else None,
        )
        BillingRepository._apply(billing, record, computed)
        self._clock += timedelta(minutes=1)
        billing.created_at = self._clock
        self.rows[billing.id] = billing
        self.session.stage(lambda: self.rows.pop(billing.id, None))
        return billing

    async def update(self, billing, record, computed):
        BillingRepository._apply(billing, record, computed)
        return billing

    async def delete(self, billing):
        self.rows.pop(billing.id, None)

    async def get(self, billing_id):
        return self.rows.get(parse_uuid(billing_id))

    async def get_by_source_duty(self, duty_id):
        pk = parse_uuid(duty_id)
        return next((b for b in self.rows.values() if b.source_duty_id == pk), None)

    async def list_page(self, limit, offset):
        ordered = sorted(self.rows.values(), key=lambda b: b.created_at, reverse=True)
        return ordered[offset:offset + limit], len(ordered)

    async def summary(self, today=None):
        vehicles = {v for b in self.rows.values() for v in b.vehicle_ids}
        return {
            "total_bills": len(self.rows),
            "total_revenue": sum((b.total_invoice_value for b in self.rows.values()), Decimal("0")),
            "revenue_this_month": sum((b.total_invoice_value for b in self.rows.values()), Decimal("0")),
            "total_vehicles": len(vehicles),
        }


class FakeDutyRepository:
    def __init__(self, session: FakeSession, duties=()):
        self.session = session
        self.duties = {d.id: d for d in duties}
        self.lose_race = False

    async def get(self, duty_id):
        duty = self.duties.get(str(duty_id))
        return duty.model_copy() if duty is not None else None

    def _flag(self, duty_id, billing_id):
        before = self.duties[duty_id]
        self.duties[duty_id] = before.model_copy(update={"is_billed": True, "billing_id": billing_id})
        self.session.stage(lambda: self.duties.__setitem__(duty_id, before))

    async def mark_billed(self, duty_id, billing_id):
        duty = self.duties.get(duty_id)
        if self.lose_race or duty is None or duty.is_billed or duty.status != DutyStatus.COMPLETED.value:
            return False
        self._flag(duty_id, billing_id)
        return True

    async def repair_billed_flag(self, duty_id, billing_id):
        duty = self.duties.get(duty_id)
        if duty is None or duty.is_billed or duty.status != DutyStatus.COMPLETED.value:
            return False
        self._flag(duty_id, billing_id)
        return True


class FakeVehicleRepository:
    def __init__(self, vehicles=()):
        self.vehicles = {v.id: v for v in vehicles}

    async def get_many(self, vehicle_ids):
        return [self.vehicles[v] for v in vehicle_ids if v in self.vehicles]


# ---------------------------------------------------------------------------
# Sample data
# ---------------------------------------------------------------------------

@pytest.fixture
def company() -> CompanySettings:
    return CompanySettings(
        company_name="Shree Ganesh Travels",
        proprietor_name="Ramesh Patil",
        company_address="12 Station Road\nPune 411001",
        contact_number="9822012345",
        gst_number="27abcpp1234f1z5",
        pan_number="abcpp1234f",
        bank_details=BankDetails(
            bank_name="State Bank of India",
            branch="Shivajinagar",
            account_number="30123456789",
            ifsc_code="sbin0000575",
        ),
    )


@pytest.fixture
def vehicle() -> Vehicle:
    return Vehicle(id=str(uuid.uuid4()), vehicle_number="MH12AB1234", vehicle_type="Innova")


@pytest.fixture
def sample_record(vehicle) -> BillingRecord:
    """Two 5000 rupee lines with GST on: 10000 + 900 + 900 = 11800."""
    return BillingRecord.model_validate(
        {
            "companyName": "Shree Ganesh Travels",
            "recipientName": "Acme Infra Pvt Ltd",
            "recipientAddress": "Plot 7, MIDC\nChakan",
            "projectLocation": "",
            "workingTime": "8 AM - 8 PM",
            "period": "September 2026",
            "placeOfSupply": "Maharashtra",
            "billingDate": "2026-09-30",
            "billingItems": [
                {"description": "Hiring Charges for Innova", "hsnSac": "996601", "unit": "Month",
                 "quantity": "1", "rate": "5000"},
                {"description": "Hiring Charges for Dzire", "hsnSac": "996601", "unit": "Month",
                 "quantity": 1, "rate": 5000},
                {"description": "   ", "quantity": None, "rate": None},
            ],
            "gstEnabled": True,
            "vehicleIds": [vehicle.id],
        }
    )


@pytest.fixture
def completed_duty(vehicle) -> Duty:
    return Duty(
        id=str(uuid.uuid4()),
        status=DutyStatus.COMPLETED.value,
        vehicle_id=vehicle.id,
        vehicle_type="Innova",
        company_name="Shree Ganesh Travels",
        client_name="Acme Infra Pvt Ltd",
        pickup_location="Pune",
        drop_location="Mumbai",
        distance_traveled=150,
        rate_per_km=14.5,
    )


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def billing_repo(fake_session) -> FakeBillingRepository:
    return FakeBillingRepository(fake_session)


@pytest.fixture
def duty_repo(fake_session, completed_duty) -> FakeDutyRepository:
    return FakeDutyRepository(fake_session, [completed_duty])


@pytest.fixture
def vehicle_repo(vehicle) -> FakeVehicleRepository:
    return FakeVehicleRepository([vehicle])
