# tests/test_billing_api.py
"""HTTP tests for the v1 billing and duty endpoints, backed by in-memory repositories."""

import io
import uuid

import pytest
from fastapi.testclient import TestClient
from openpyxl import load_workbook

from travelbill.api.v1.deps import (
    get_billing_repository,
    get_company_settings,
    get_duty_repository,
    get_vehicle_repository,
)
from travelbill.core.db import get_db
from travelbill.main import app


@pytest.fixture
def client(fake_session, billing_repo, duty_repo, vehicle_repo, company):
    app.dependency_overrides[get_db] = lambda: fake_session
    app.dependency_overrides[get_billing_repository] = lambda: billing_repo
    app.dependency_overrides[get_duty_repository] = lambda: duty_repo
    app.dependency_overrides[get_vehicle_repository] = lambda: vehicle_repo
    app.dependency_overrides[get_company_settings] = lambda: company
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def payload(sample_record):
    return sample_record.model_dump(mode="json")


def _create(client, payload) -> str:
    resp = client.post("/api/v1/billings", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]["id"]


def test_health(client):
    resp = client.get("/api/v1/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


# ---------------------------------------------------------------------------
# Compute / validation
# ---------------------------------------------------------------------------

def test_compute_live_totals(client):
    resp = client.post(
        "/api/v1/billings/compute",
        json={"billingItems": [{"description": "Innova", "quantity": 2, "rate": "10500"}], "gstEnabled": True},
    )
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["subtotal"] == "21000.00"
    assert data["grand_total"] == "24780.00"
    assert data["grand_total_in_words"] == "TWENTY FOUR THOUSAND SEVEN HUNDRED EIGHTY ONLY"


def test_compute_rejects_bad_item(client):
    resp = client.post(
        "/api/v1/billings/compute",
        json={"items": [{"description": ""}, {"description": "Innova", "quantity": 0, "rate": 100}]},
    )
    assert resp.status_code == 422
    body = resp.json()
    assert body["status"] == "error"
    assert body["errors"] == [{"index": 1, "field": "quantity", "message": "must be greater than 0"}]


def test_compute_rejects_amount_too_large(client):
    resp = client.post("/api/v1/billings/compute", json={"items": [{"description": "x", "quantity": "1e30", "rate": 1}]})
    assert resp.status_code == 422
    assert resp.json()["errors"] == [{"index": 0, "field": "quantity", "message": "is too large"}]


def test_malformed_body_uses_error_envelope(client):
    resp = client.post("/api/v1/billings/compute", json={"items": [{"description": None, "quantity": 1, "rate": 1}]})
    assert resp.status_code == 422
    body = resp.json()
    assert body["status"] == "error"
    assert body["data"] is None
    assert body["errors"][0]["field"] == "items.0.description"


def test_compute_rejects_empty_invoice(client):
    resp = client.post("/api/v1/billings/compute", json={"items": [{"description": "  "}]})
    assert resp.status_code == 422
    assert resp.json()["errors"][0]["field"] == "items"


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------

def test_create_and_get(client, payload, billing_repo, fake_session):
    resp = client.post("/api/v1/billings", json=payload)
    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["invoice"]["grand_total"] == "11800.00"
    # The blank template row is not stored
    assert len(data["record"]["items"]) == 2
    assert fake_session.commits == 1

    stored = next(iter(billing_repo.rows.values()))
    assert str(stored.total_invoice_value) == "11800.00"

    resp = client.get(f"/api/v1/billings/{data['id']}")
    assert resp.status_code == 200
    assert resp.json()["data"]["invoice"] == data["invoice"]


def test_client_totals_are_ignored(client, payload):
    payload["grand_total"] = "1.00"
    payload["subtotal"] = "1.00"
    resp = client.post("/api/v1/billings", json=payload)
    assert resp.json()["data"]["invoice"]["grand_total"] == "11800.00"


def test_create_invalid_billing_stores_nothing(client, payload, billing_repo):
    payload["items"] = [{"description": "Innova", "quantity": 1, "rate": "abc"}]
    resp = client.post("/api/v1/billings", json=payload)
    assert resp.status_code == 422
    assert billing_repo.rows == {}


def test_update_recomputes(client, payload):
    billing_id = _create(client, payload)
    payload["gst_enabled"] = False
    resp = client.put(f"/api/v1/billings/{billing_id}", json=payload)
    assert resp.status_code == 200
    invoice = resp.json()["data"]["invoice"]
    assert invoice["tax_breakdown"] == []
    assert invoice["grand_total"] == "10000.00"


def test_delete(client, payload, billing_repo):
    billing_id = _create(client, payload)
    assert client.delete(f"/api/v1/billings/{billing_id}").status_code == 200
    assert billing_repo.rows == {}
    assert client.get(f"/api/v1/billings/{billing_id}").status_code == 404


def test_unknown_billing(client):
    resp = client.get(f"/api/v1/billings/{uuid.uuid4()}")
    assert resp.status_code == 404
    assert resp.json()["status"] == "error"
    assert client.get("/api/v1/billings/not-a-uuid").status_code == 404


def test_list_and_summary(client, payload, vehicle):
    _create(client, payload)
    _create(client, payload)

    resp = client.get("/api/v1/billings", params={"limit": 1})
    page = resp.json()["data"]
    assert page["total"] == 2
    assert page["has_more"] is True
    assert page["items"][0]["total_invoice_value"] == "11800.00"

    summary = client.get("/api/v1/billings/summary").json()["data"]
    assert summary["total_bills"] == 2
    assert summary["total_revenue"] == "23600.00"
    assert summary["total_vehicles"] == 1


# ---------------------------------------------------------------------------
# Exports
# ---------------------------------------------------------------------------

def test_exports_agree(client, payload):
    billing_id = _create(client, payload)

    preview = client.get(f"/api/v1/billings/{billing_id}/preview")
    assert preview.status_code == 200
    assert preview.headers["content-type"].startswith("text/html")
    assert 'data-field="grand_total">11,800.00<' in preview.text
    assert "MH12AB1234 (Innova)" in preview.text

    pdf = client.get(f"/api/v1/billings/{billing_id}/pdf")
    assert pdf.status_code == 200
    assert pdf.content.startswith(b"%PDF")
    assert f'filename="invoice-{billing_id}.pdf"' in pdf.headers["content-disposition"]

    xlsx = client.get(f"/api/v1/billings/{billing_id}/xlsx")
    assert xlsx.status_code == 200
    ws = load_workbook(io.BytesIO(xlsx.content))["Invoice"]
    assert any(
        row[5] == "Total Invoice Value in Rs." and row[6] == pytest.approx(11800.00)
        for row in ws.iter_rows(values_only=True)
    )


# ---------------------------------------------------------------------------
# Duties
# ---------------------------------------------------------------------------

def test_bill_duty_once(client, completed_duty, duty_repo, billing_repo):
    resp = client.post(f"/api/v1/duties/{completed_duty.id}/billing", json={"placeOfSupply": "Maharashtra"})
    assert resp.status_code == 201, resp.text
    data = resp.json()["data"]
    assert data["reconciled"] is False
    assert data["invoice"]["grand_total"] == "2566.50"
    assert duty_repo.duties[completed_duty.id].is_billed is True

    again = client.post(f"/api/v1/duties/{completed_duty.id}/billing", json={})
    assert again.status_code == 409
    assert len(billing_repo.rows) == 1


def test_bill_unknown_duty(client):
    resp = client.post(f"/api/v1/duties/{uuid.uuid4()}/billing")
    assert resp.status_code == 404


def test_reconcile_endpoint(client, completed_duty, duty_repo):
    resp = client.post(f"/api/v1/duties/{completed_duty.id}/reconcile")
    assert resp.status_code == 200
    assert resp.json()["data"] == {"duty_id": completed_duty.id, "repaired": False}


def test_manual_billing_cannot_claim_a_duty(client, payload, completed_duty, duty_repo, billing_repo):
    payload["source_duty_id"] = completed_duty.id
    billing_id = _create(client, payload)
    assert billing_repo.rows[uuid.UUID(billing_id)].source_duty_id is None

    resp = client.post(f"/api/v1/duties/{completed_duty.id}/billing", json={})
    assert resp.status_code == 201, resp.text
    assert resp.json()["data"]["reconciled"] is False
    assert len(billing_repo.rows) == 2


def test_scheduled_duty_is_never_flagged(client, payload, completed_duty, duty_repo):
    duty_repo.duties[completed_duty.id] = completed_duty.model_copy(update={"status": "Scheduled"})
    payload["source_duty_id"] = completed_duty.id
    _create(client, payload)

    resp = client.post(f"/api/v1/duties/{completed_duty.id}/billing", json={})
    assert resp.status_code == 409
    assert duty_repo.duties[completed_duty.id].is_billed is False
