from __future__ import annotations

from datetime import date

import pytest

from src.hr_backoffice.hr_backoffice.main import create_app
from src.hr_backoffice.hr_backoffice.reporting.model import Site
from tests.fakes import att, make_container, make_structure


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    container = make_container(
        structures=[make_structure("EMP001", basic=22000, hra=2000), make_structure("EMP002", basic=11000)],
        attendance=[att("EMP002", date(2025, 3, d), "present") for d in range(3, 8)],
        sites=[Site(site_id="alpha-tower", site_name="Alpha Tower", client_name="Acme")],
    )
    app = create_app(container=container)
    return app.test_client()


def _process(client, **overrides):
    payload = {"employeeId": "EMP001", "month": "2025-03", "presentDays": 20, "absentDays": 2, "halfDays": 0}
    payload.update(overrides)
    return client.post("/api/payroll/process", json=payload)


def test_process_returns_camel_case_envelope(client):
    res = _process(client)

    assert res.status_code == 201
    body = res.get_json()
    assert body["success"] is True
    assert body["message"] == "Payroll processed successfully"
    assert body["data"]["employeeId"] == "EMP001"
    assert body["data"]["netSalary"] == 20000.0
    assert body["data"]["paymentStatus"] == "pending"
    assert body["data"]["lineItems"]["hra"] == 2000.0


def test_duplicate_process_is_a_bad_request(client):
    _process(client)

    res = _process(client)

    assert res.status_code == 400
    assert res.get_json()["success"] is False
    listed = client.get("/api/payroll?month=2025-03").get_json()
    assert listed["pagination"]["total"] == 1


def test_missing_structure_and_bad_month(client):
    assert _process(client, employeeId="NOBODY").status_code == 404
    assert _process(client, month="03-2025").status_code == 400


def test_non_finite_counts_are_a_bad_request(client):
    res = _process(client, leaves="inf")

    assert res.status_code == 400
    body = res.get_json()
    assert body["success"] is False
    assert "leaves" in body["message"]
    assert _process(client, presentDays="NaN").status_code == 400


def test_non_object_json_body_is_a_bad_request(client):
    for payload in ([], "x", 42):
        res = client.post("/api/payroll/process", json=payload)
        assert res.status_code == 400
        assert res.get_json()["success"] is False

    assert client.post("/api/salary-slips/generate", json=[1]).status_code == 400


def test_payment_status_flow(client):
    payroll_id = _process(client).get_json()["data"]["payrollId"]

    missing_date = client.put(f"/api/payroll/{payroll_id}/payment-status", json={"status": "paid"})
    assert missing_date.status_code == 400

    res = client.patch(
        f"/api/payroll/{payroll_id}/payment-status",
        json={"status": "part-paid", "paidAmount": 5000, "paymentDate": "2025-04-01"},
    )
    assert res.status_code == 200
    assert res.get_json()["data"]["paidAmount"] == 5000.0

    summary = client.get("/api/payroll/summary?month=2025-03").get_json()["data"]
    assert summary["partPaidCount"] == 1
    assert summary["pendingAmount"] == 15000.0


def test_bulk_process_summary(client):
    res = client.post("/api/payroll/bulk-process", json={"month": "2025-03", "employeeIds": ["EMP001", "EMP002", "X"]})

    body = res.get_json()
    assert res.status_code == 200
    assert body["data"]["summary"] == {"processed": 2, "failed": 1, "total": 3}
    assert body["data"]["errors"][0]["employeeId"] == "X"
    emp2 = next(r for r in body["data"]["results"] if r["employeeId"] == "EMP002")
    assert emp2["presentDays"] == 5


def test_csv_export(client):
    _process(client)

    res = client.get("/api/payroll/export?month=2025-03")

    assert res.status_code == 200
    assert res.mimetype == "text/csv"
    assert "payroll-2025-03.csv" in res.headers["Content-Disposition"]
    lines = res.data.decode("utf-8-sig").splitlines()
    assert len(lines) == 2
    assert lines[0].startswith("Employee ID,Month,Total Working Days")
    assert lines[1].startswith("EMP001,2025-03,22,20,2,0,0,22000.00")


def test_slip_generate_print_and_delete_guard(client):
    payroll_id = _process(client).get_json()["data"]["payrollId"]

    slip = client.post("/api/salary-slips/generate", json={"payrollId": payroll_id}).get_json()["data"]
    assert slip["slipNumber"].startswith("SS/")

    page = client.get(f"/api/salary-slips/{slip['slipId']}/print")
    assert page.status_code == 200
    assert slip["slipNumber"] in page.get_data(as_text=True)

    emailed = client.patch(f"/api/salary-slips/{slip['slipId']}/email").get_json()["data"]
    assert emailed["emailSent"] is True

    assert client.delete(f"/api/payroll/{payroll_id}").status_code == 400


def test_structures_endpoints(client):
    res = client.post("/api/salary-structures", json={"employeeId": "EMP001", "basicSalary": 30000})
    assert res.status_code == 400

    breakdown = client.get("/api/salary-structures/employee/EMP001/breakdown").get_json()["data"]
    assert breakdown["grossSalary"] == 24000.0
    assert breakdown["basicPercentage"] == "91.67"


def test_deductions_endpoints(client):
    assert client.get("/api/deductions/health").get_json() == {"status": "OK"}

    created = client.post(
        "/api/deductions/deductions",
        json={"employeeId": "EMP001", "type": "advance", "amount": 900, "repaymentMonths": 3, "appliedMonth": "2025-03"},
    )
    assert created.status_code == 201
    assert created.get_json()["data"]["installmentAmount"] == 300.0

    active = client.get("/api/deductions/employees/active").get_json()["data"]
    assert {"employeeId": "EMP001"} in active


def test_site_report(client):
    res = client.get("/api/reports/attendance/sites?startDate=2025-03-03&endDate=2025-03-07")

    data = res.get_json()["data"]
    assert data["totalDays"] == 5
    assert data["totalPresent"] == 5
    assert data["overallAttendanceRate"] == 100
    assert [s["siteName"] for s in data["sites"]] == ["Alpha Tower"]


def test_unknown_route_ids_are_not_found(client):
    assert client.get("/api/payroll/999").status_code == 404
    assert client.get("/api/salary-slips/999").status_code == 404
