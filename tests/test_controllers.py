from dataclasses import replace
from datetime import datetime

import pytest

from hrm_system.core.enums import RecordStatus


@pytest.fixture
def fixed_now(monkeypatch):
    monkeypatch.setattr("hrm_system.attendance.service.now_local", lambda: datetime(2026, 6, 2, 9, 10, 0))


def test_missing_tenant_headers(client):
    resp = client.get("/api/shifts")

    assert resp.status_code == 400
    assert resp.get_json() == {"success": False, "message": "Missing tenant headers"}


def test_clock_in_and_out(client, headers, fixed_now, monkeypatch):
    resp = client.post("/api/attendance/clock-in", json={"employee_id": 1}, headers=headers)
    assert resp.status_code == 201
    assert resp.get_json()["data"] == {"attendance_id": 1, "is_late": True}

    again = client.post("/api/attendance/clock-in", json={"employee_id": 1}, headers=headers)
    assert again.status_code == 409
    assert again.get_json()["success"] is False

    monkeypatch.setattr("hrm_system.attendance.service.now_local", lambda: datetime(2026, 6, 2, 18, 10, 0))
    out = client.post("/api/attendance/clock-out", json={"employee_id": 1}, headers=headers)
    assert out.status_code == 200
    assert out.get_json()["data"]["status"] == "present"
    assert out.get_json()["data"]["worked_hours"] == 8.0


def test_clock_in_without_shift_is_unprocessable(client, repos, headers, fixed_now):
    for shift_id, shift in list(repos.shifts.by_id.items()):
        repos.shifts.by_id[shift_id] = replace(shift, status=RecordStatus.INACTIVE)

    resp = client.post("/api/attendance/clock-in", json={"employee_id": 1}, headers=headers)

    assert resp.status_code == 422
    assert "contact HR" in resp.get_json()["message"]


def test_clock_in_unknown_employee(client, headers, fixed_now):
    resp = client.post("/api/attendance/clock-in", json={"employee_id": 42}, headers=headers)

    assert resp.status_code == 404


def test_manual_entry_and_listing(client, headers):
    resp = client.post(
        "/api/attendance",
        json={"employee_id": 1, "date": "2026-06-03", "clock_in": "09:00", "clock_out": "12:30"},
        headers=headers,
    )
    assert resp.status_code == 201
    assert resp.get_json()["data"]["status"] == "half_day"

    listing = client.get("/api/attendance?employee_id=1&date_from=2026-06-01", headers=headers)
    rows = listing.get_json()["data"]
    assert [r["date"] for r in rows] == ["2026-06-03"]
    assert rows[0]["clock_out"] == "12:30"


def test_manual_entry_validation(client, headers):
    assert client.post("/api/attendance", json={"date": "2026-06-03"}, headers=headers).status_code == 400
    bad_time = client.post(
        "/api/attendance", json={"employee_id": 1, "date": "2026-06-03", "clock_in": "9am"}, headers=headers
    )
    assert bad_time.status_code == 400
    assert client.get("/api/attendance?status=late", headers=headers).status_code == 400


def test_update_unknown_record(client, headers):
    resp = client.put("/api/attendance/99", json={"clock_in": "09:00"}, headers=headers)

    assert resp.status_code == 404


def test_rollover_endpoint(client, headers):
    resp = client.post("/api/attendance/rollover", json={"date": "2026-06-02"}, headers=headers)

    assert resp.get_json()["data"] == {"date": "2026-06-02", "absent": 2, "holiday": 0, "skipped": 0}


def test_leave_flow(client, headers):
    applied = client.post(
        "/api/leaves",
        json={
            "employee_id": 2,
            "leave_type_id": 2,
            "start_date": "2026-06-08",
            "end_date": "2026-06-09",
            "reason": "Moving house",
        },
        headers=headers,
    )
    assert applied.status_code == 201
    leave_id = applied.get_json()["data"]["id"]

    approved = client.post(f"/api/leaves/{leave_id}/approve", json={"comments": "ok"}, headers=headers)
    assert approved.get_json()["data"]["status"] == "approved"

    rows = client.get("/api/attendance?employee_id=2", headers=headers).get_json()["data"]
    assert {r["status"] for r in rows} == {"on_leave"}
    assert rows[0]["leave_type"]["is_paid"] is False

    assert client.post(f"/api/leaves/{leave_id}/reject", headers=headers).status_code == 400


@pytest.mark.parametrize(
    "method, url, kwargs",
    [
        ("post", "/api/attendance/clock-in", {"json": {"employee_id": "abc"}}),
        ("post", "/api/attendance/clock-out", {"json": {"employee_id": "1.5"}}),
        ("get", "/api/attendance/today?employee_id=x", {}),
    ],
)
def test_non_numeric_employee_id_is_bad_request(client, headers, fixed_now, method, url, kwargs):
    resp = getattr(client, method)(url, headers=headers, **kwargs)

    assert resp.status_code == 400
    assert resp.get_json() == {"success": False, "message": "employee_id must be an integer"}


def test_leave_balance_endpoints(client, headers):
    saved = client.put(
        "/api/leave-balances",
        json={"employee_id": 1, "leave_type_id": 1, "year": 2026, "allocated_days": 1},
        headers=headers,
    )
    assert saved.status_code == 200
    assert saved.get_json()["data"]["remaining_days"] == 1

    applied = client.post(
        "/api/leaves",
        json={
            "employee_id": 1,
            "leave_type_id": 1,
            "start_date": "2026-06-08",
            "end_date": "2026-06-09",
            "reason": "Two days",
        },
        headers=headers,
    )
    assert applied.status_code == 400
    assert applied.get_json()["message"].startswith("Insufficient leave balance")

    listing = client.get("/api/leave-balances?employee_id=1&year=2026", headers=headers).get_json()["data"]
    assert [(b["leave_type_id"], b["used_days"]) for b in listing] == [(1, 0.0)]

    bad = client.put("/api/leave-balances", json={"employee_id": 1, "year": "soon"}, headers=headers)
    assert bad.status_code == 400


def test_payroll_run_endpoints(client, headers):
    payload = {
        "title": "June 2026",
        "payroll_frequency": "monthly",
        "pay_period_start": "2026-06-01",
        "pay_period_end": "2026-06-30",
        "pay_date": "2026-07-01",
    }
    created = client.post("/api/payroll-runs", json=payload, headers=headers)
    assert created.status_code == 201
    run_id = created.get_json()["data"]["id"]

    assert client.post("/api/payroll-runs", json=payload, headers=headers).status_code == 409

    processed = client.post(f"/api/payroll-runs/{run_id}/process", headers=headers)
    assert processed.get_json()["data"]["status"] == "completed"
    assert processed.get_json()["data"]["total_net_pay"] == "6600.00"

    assert client.post(f"/api/payroll-runs/{run_id}/process", headers=headers).status_code == 409

    entry = client.get(f"/api/payroll-runs/{run_id}/entries/1", headers=headers).get_json()["data"]
    assert entry["net_pay"] == "3000.00"
    assert entry["attendance"]["working_days"] == 22
    assert client.get(f"/api/payroll-runs/{run_id}/entries/3", headers=headers).status_code == 404


def test_payroll_run_bad_frequency(client, headers):
    resp = client.post(
        "/api/payroll-runs",
        json={
            "title": "x",
            "payroll_frequency": "daily",
            "pay_period_start": "2026-06-01",
            "pay_period_end": "2026-06-30",
            "pay_date": "2026-07-01",
        },
        headers=headers,
    )

    assert resp.status_code == 400


def test_salary_component_and_breakdown(client, headers):
    created = client.post(
        "/api/salary-components",
        json={"name": "Housing", "type": "earning", "calculation_type": "percentage", "percentage": "10"},
        headers=headers,
    )
    assert created.status_code == 201
    component_id = created.get_json()["data"]["id"]

    duplicate = client.post(
        "/api/salary-components",
        json={"name": "Housing", "type": "earning", "calculation_type": "fixed", "amount": "50"},
        headers=headers,
    )
    assert duplicate.status_code == 409

    client.post(
        "/api/employee-salaries",
        json={"employee_id": 1, "basic_salary": "3000", "components": [component_id]},
        headers=headers,
    )
    breakdown = client.get("/api/employees/1/salary-breakdown", headers=headers).get_json()["data"]
    assert breakdown["total_earnings"] == "3300.00"
    assert breakdown["net_salary"] == "3300.00"


def test_shift_names_are_unique(client, headers):
    resp = client.post(
        "/api/shifts",
        json={"name": "General", "start_time": "08:00", "end_time": "17:00"},
        headers=headers,
    )

    assert resp.status_code == 409


def test_holidays_require_range(client, headers):
    assert client.get("/api/holidays", headers=headers).status_code == 400

    client.post(
        "/api/holidays",
        json={"name": "Founders Day", "start_date": "2026-06-10", "end_date": "2026-06-10"},
        headers=headers,
    )
    rows = client.get("/api/holidays?start=2026-06-01&end=2026-06-30", headers=headers).get_json()["data"]
    assert [h["name"] for h in rows] == ["Founders Day"]
