from __future__ import annotations

import csv
import io
from decimal import Decimal
from types import SimpleNamespace

import pytest
from flask import Flask

from src.payroll_system.payroll_system.common.errors import register_error_handlers
from src.payroll_system.payroll_system.compensation.model import StaffCompensation
from src.payroll_system.payroll_system.core.enums import PayType
from src.payroll_system.payroll_system.ledger.controller import register as register_ledger
from src.payroll_system.payroll_system.payroll.controller import register as register_payroll


@pytest.fixture
def client(salary_service, ledger_service, report_service, compensation_repo, march_attendance):
    container = SimpleNamespace(
        compensation_repo=compensation_repo,
        salary_service=salary_service,
        ledger_service=ledger_service,
        report_service=report_service,
    )
    app = Flask(__name__)
    app.testing = True
    register_error_handlers(app)
    register_payroll(app, container)
    register_ledger(app, container)
    return app.test_client()


def _generate(client, staff_id=7):
    resp = client.post("/api/salaries/generate", json={"staff_id": staff_id, "month": 3, "year": 2024})
    assert resp.status_code == 201
    return resp.get_json()["data"]


def test_generate_returns_salary_and_breakdown(client):
    data = _generate(client)
    assert data["salary"]["status"] == "PENDING"
    assert data["salary"]["pay_type"] == "MONTHLY"
    assert Decimal(data["salary"]["net_amount"]).quantize(Decimal("0.01")) == Decimal("24211.73")
    assert [e["type"] for e in data["breakdown"]] == ["BASE_SALARY", "PF_DEDUCTION", "ESI_DEDUCTION"]


def test_missing_field_is_400(client):
    resp = client.post("/api/salaries/generate", json={"staff_id": 7, "month": 3})
    assert resp.status_code == 400
    body = resp.get_json()
    assert body["success"] is False
    assert body["error"]["code"] == "VALIDATION_ERROR"


def test_unknown_salary_is_404(client):
    resp = client.get("/api/salaries/404")
    assert resp.status_code == 404
    assert resp.get_json()["error"]["code"] == "NOT_FOUND"


def test_lifecycle_and_state_conflict(client):
    salary_id = _generate(client)["salary"]["salary_id"]

    resp = client.post(f"/api/salaries/{salary_id}/mark-paid", json={"actor_id": 1})
    assert resp.status_code == 409
    assert resp.get_json()["error"]["code"] == "STATE_ERROR"

    assert client.post(f"/api/salaries/{salary_id}/approve", json={"actor_id": 1}).status_code == 200
    resp = client.post(
        f"/api/salaries/{salary_id}/mark-paid", json={"actor_id": 1, "paid_at": "2024-04-05T12:00:00"}
    )
    assert resp.status_code == 200
    assert resp.get_json()["data"]["status"] == "PAID"
    assert resp.get_json()["data"]["paid_at"] == "2024-04-05T12:00:00"


def test_reject_needs_reason(client):
    salary_id = _generate(client)["salary"]["salary_id"]
    assert client.post(f"/api/salaries/{salary_id}/reject", json={"actor_id": 1}).status_code == 400
    resp = client.post(f"/api/salaries/{salary_id}/reject", json={"actor_id": 1, "reason": "wrong month"})
    assert resp.get_json()["data"]["note"] == "wrong month"


def test_broken_setup_is_500(client, compensation_repo):
    compensation_repo.staff[9] = StaffCompensation(staff_id=9, company_id=1, pay_type=PayType.HOURLY)
    resp = client.post("/api/salaries/preview", json={"staff_id": 9, "month": 3, "year": 2024})
    assert resp.status_code == 500
    assert resp.get_json()["error"]["code"] == "CONFIGURATION_ERROR"


def test_ledger_endpoints(client):
    salary_id = _generate(client, staff_id=8)["salary"]["salary_id"]
    client.post(f"/api/salaries/{salary_id}/approve", json={"actor_id": 1})

    resp = client.post(
        f"/api/salaries/{salary_id}/ledger/payments", json={"amount": "22000", "reason": "bank", "actor_id": 1}
    )
    assert resp.status_code == 201
    entry_id = resp.get_json()["data"]["entry_id"]
    client.post(f"/api/salaries/{salary_id}/ledger/recoveries", json={"amount": 500, "reason": "advance", "actor_id": 1})

    balance = client.get(f"/api/salaries/{salary_id}/balance").get_json()["data"]
    assert Decimal(balance["balance_amount"]) == Decimal("500")

    assert client.post(f"/api/ledger/{entry_id}/reverse", json={"reason": "bounced", "actor_id": 1}).status_code == 201
    assert client.post(f"/api/ledger/{entry_id}/reverse", json={"reason": "again", "actor_id": 1}).status_code == 409

    entries = client.get(f"/api/salaries/{salary_id}/ledger").get_json()["data"]
    assert [e["type"] for e in entries] == ["PAYMENT", "RECOVERY", "PAYMENT"]
    assert entries[2]["reversal_of"] == entry_id


def test_batch_generates_all_active_staff(client):
    resp = client.post("/api/salaries/batch", json={"month": 3, "year": 2024})
    assert resp.get_json()["data"] == {"processed": 2, "errors": [], "success": True}


def test_monthly_csv_export(client):
    client.post("/api/salaries/batch", json={"month": 3, "year": 2024, "staff_ids": [7, 8]})

    resp = client.get("/api/reports/salaries.csv?month=3&year=2024")

    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    rows = list(csv.DictReader(io.StringIO(resp.data.decode("utf-8-sig"))))
    assert [r["staff_id"] for r in rows] == ["7", "8"]
    assert rows[0]["net_amount"] == "24211.73"


def test_slip_and_overview(client):
    salary_id = _generate(client)["salary"]["salary_id"]

    slip = client.get(f"/api/salaries/{salary_id}/slip").get_json()["data"]
    assert slip["totals"]["net_amount"] == "24211.73"
    assert len(slip["calendar"]) == 31

    overview = client.get("/api/staff/7/salaries").get_json()["data"]
    assert overview["staff_id"] == 7
    assert len(overview["salaries"]) == 1


def test_fractional_month_is_400(client):
    resp = client.post("/api/salaries/generate", json={"staff_id": 7, "month": 3.7, "year": 2024})
    assert resp.status_code == 400
    assert resp.get_json()["error"]["code"] == "VALIDATION_ERROR"


def test_whole_number_float_month_is_accepted(client):
    resp = client.post("/api/salaries/preview", json={"staff_id": 7, "month": 3.0, "year": 2024})
    assert resp.status_code == 200


def test_audit_endpoint_lists_history(client):
    data = _generate(client)
    salary_id = data["salary"]["salary_id"]
    assert data["calendar"]["2024-03-01"] == "PRESENT"
    assert data["calendar"]["2024-03-31"] == "ABSENT"

    client.post(f"/api/salaries/{salary_id}/approve", json={"actor_id": 4})

    trail = client.get(f"/api/salaries/{salary_id}/audit").get_json()["data"]
    assert [e["action"] for e in trail] == ["CREATED", "APPROVED"]
    assert trail[1]["actor_id"] == 4
    assert client.get("/api/salaries/404/audit").status_code == 404
