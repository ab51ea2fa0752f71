from __future__ import annotations

import pytest

from src.timekeeping.timekeeping.container import build_services
from src.timekeeping.timekeeping.main import create_app


@pytest.fixture
def app(store, clock):
    return create_app(container=build_services(store, clock=clock))


def _login(client, user_id, role="member"):
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["role"] = role


@pytest.fixture
def member(app):
    client = app.test_client()
    _login(client, "u1")
    return client


@pytest.fixture
def admin(app):
    client = app.test_client()
    _login(client, "boss", "admin")
    return client


def test_requires_sign_in(app):
    res = app.test_client().get("/api/timer/active")

    assert res.status_code == 401
    assert res.get_json()["success"] is False


def test_member_cannot_use_admin_routes(member):
    res = member.get("/api/admin/leave/pending")

    assert res.status_code == 403


def test_timer_flow(member, clock):
    res = member.post("/api/timer/start", json={"project_id": "proj-a", "label": "Design"})
    assert res.status_code == 201
    started = res.get_json()["data"]
    assert started["is_open"] is True
    assert started["kind"] == "work"

    clock.advance(minutes=30)
    active = member.get("/api/timer/active").get_json()["data"]
    assert active["entry"]["entry_id"] == started["entry_id"]
    assert active["elapsed_seconds"] == 1800

    stopped = member.post("/api/timer/stop").get_json()["data"]
    assert stopped["end_time"] == "2025-09-01T09:30:00"

    res = member.post("/api/timer/stop")
    assert res.status_code == 404


def test_validation_errors_name_the_field(member):
    res = member.post("/api/timer/start", json={})

    assert res.status_code == 400
    body = res.get_json()
    assert body["error"] == "ValidationError"
    assert body["field"] == "project_id"


def test_submit_short_week_reports_shortfall(member, admin):
    res = admin.post(
        "/api/admin/entries",
        json={
            "owner_id": "u1",
            "project_id": "proj-a",
            "start_time": "2025-09-01T09:00:00",
            "end_time": "2025-09-01T17:30:00",
        },
    )
    assert res.status_code == 201

    res = member.post("/api/timesheets/submit", json={"week_start": "2025-09-03"})

    assert res.status_code == 422
    body = res.get_json()
    assert body["error"] == "InsufficientHoursError"
    assert body["total"] == 8.5
    assert body["shortfall"] == 31.5


def test_leave_booking_and_review(member, admin):
    res = member.post(
        "/api/leave",
        json={"leave_type": "sick", "start_date": "2025-09-08", "end_date": "2025-09-09", "reason": "flu"},
    )
    assert res.status_code == 201
    request_id = res.get_json()["data"]["request_id"]

    pending = admin.get("/api/admin/leave/pending").get_json()["data"]
    assert [r["request_id"] for r in pending] == [request_id]

    res = admin.post(f"/api/admin/leave/{request_id}/review", json={"decision": "approve", "admin_note": "get well"})
    assert res.get_json()["data"]["status"] == "approved"

    balances = member.get("/api/leave/balances").get_json()["data"]
    assert balances["sick"] == 5
    assert balances["unpaid"] == "unlimited"


def test_payroll_not_computable_without_salary(admin):
    res = admin.get("/api/admin/payroll/u1?month=2025-09")

    assert res.status_code == 422
    assert res.get_json()["computable"] is False


def test_payroll_report(admin):
    res = admin.put("/api/admin/salaries/u1", json={"base_salary": 3000, "currency": "$"})
    assert res.status_code == 200

    rows = admin.get("/api/admin/payroll?start=2025-09-01&end=2025-09-30").get_json()["data"]

    assert rows[0]["owner_id"] == "u1"
    assert rows[0]["result"]["missed_days"] == 22
    assert rows[0]["result"]["net_salary"] == 800


def test_settings_round_trip(member, admin):
    res = admin.put(
        "/api/admin/settings/calendar",
        json={"start_day": "sunday", "days_per_week": 6, "min_weekly_hours": 36},
    )
    assert res.status_code == 200

    settings = member.get("/api/settings").get_json()["data"]
    assert settings["calendar"]["start_day"] == 6
    assert settings["calendar"]["days_per_week"] == 6
    assert settings["calendar"]["min_daily_hours"] == 8
    assert settings["leave_policy"]["casual"] == 10


def test_unknown_route_is_json(member):
    res = member.get("/api/nope")

    assert res.status_code == 404
    assert res.get_json()["success"] is False


def test_admin_entry_with_utc_offset_is_stored_naive(member, admin):
    res = admin.post(
        "/api/admin/entries",
        json={
            "owner_id": "u1",
            "project_id": "proj-a",
            "start_time": "2025-09-01T12:00:00+00:00",
            "end_time": "2025-09-01T14:00:00+00:00",
        },
    )
    assert res.status_code == 201
    assert "+" not in res.get_json()["data"]["start_time"]

    res = member.get("/api/entries?week=2025-09-01")

    assert res.status_code == 200
    entries = res.get_json()["data"]
    assert len(entries) == 1
    assert entries[0]["end_time"] > entries[0]["start_time"]

    overview = member.get("/api/timesheets/week?week=2025-09-01").get_json()["data"]
    assert overview["worked_hours"] == 2


def test_non_finite_salary_is_rejected(admin):
    res = admin.put(
        "/api/admin/salaries/u1",
        data='{"base_salary": NaN, "currency": "$"}',
        content_type="application/json",
    )

    assert res.status_code == 400
    assert res.get_json()["field"] == "base_salary"
