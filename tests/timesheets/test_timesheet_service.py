from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from src.timekeeping.timekeeping.core.constants import BREAK_PROJECT_ID
from src.timekeeping.timekeeping.core.enums import Decision, LifecycleStatus, Role
from src.timekeeping.timekeeping.core.exceptions import (
    AuthorizationError,
    ConflictError,
    InsufficientHoursError,
    NotFoundError,
)

MONDAY = date(2025, 9, 1)


def _work(services, owner_id, day, hours, project_id="proj-a"):
    start = datetime.combine(day, datetime.min.time()).replace(hour=9)
    return services.entry_service.record_manual_entry(
        current_role=Role.ADMIN,
        owner_id=owner_id,
        project_id=project_id,
        label="",
        start_time=start,
        end_time=start + timedelta(hours=hours),
    )


def _approved_leave(services, owner_id, start, end=None, leave_type="casual", half=False):
    req = services.leave_service.book(
        owner_id=owner_id,
        leave_type=leave_type,
        start_date=start,
        end_date=end,
        is_half_day=half,
    )
    return services.leave_service.review(
        current_role=Role.ADMIN,
        reviewer_id="boss",
        request_id=req.request_id,
        decision="approve",
    )


def _review(services, timesheet_id, decision):
    return services.timesheet_service.review(
        current_role=Role.ADMIN,
        reviewer_id="boss",
        timesheet_id=timesheet_id,
        decision=decision,
    )


def test_leave_credit_hours(services):
    _approved_leave(services, "u1", date(2025, 9, 1), date(2025, 9, 3))
    _approved_leave(services, "u1", date(2025, 9, 4), leave_type="unpaid")
    _approved_leave(services, "u1", date(2025, 9, 5), leave_type="sick", half=True)

    assert services.timesheet_service.leave_credit_hours("u1", MONDAY) == 28
    assert services.timesheet_service.leave_credit_hours("u2", MONDAY) == 0


def test_any_day_addresses_its_week(services):
    _work(services, "u1", date(2025, 9, 3), 4)

    assert services.timesheet_service.normalize_week(date(2025, 9, 6)) == MONDAY
    assert services.timesheet_service.worked_hours("u1", date(2025, 9, 4)) == 4


def test_submit_below_minimum_reports_shortfall(services):
    for offset in range(5):
        _work(services, "u1", MONDAY + timedelta(days=offset), 7)

    with pytest.raises(InsufficientHoursError) as e:
        services.timesheet_service.submit("u1", MONDAY)

    assert e.value.total == 35
    assert e.value.required == 40
    assert e.value.shortfall == 5
    assert services.timesheet_service.get("u1", MONDAY) is None


def test_submit_with_leave_credit_stamps_counted_entries(services):
    for offset in range(4):
        _work(services, "u1", MONDAY + timedelta(days=offset), 8)
    lunch = _work(services, "u1", MONDAY, 1, project_id=BREAK_PROJECT_ID)
    _approved_leave(services, "u1", date(2025, 9, 5))

    sheet = services.timesheet_service.submit("u1", MONDAY)

    assert sheet.status == LifecycleStatus.SUBMITTED
    assert sheet.total_hours == 40
    assert sheet.worked_hours == 32
    assert sheet.leave_credit_hours == 8
    assert sheet.timesheet_id == "u1-2025-09-01"

    entries = services.entry_service.entries_for_week("u1", MONDAY)
    counted = [e for e in entries if not e.is_break]
    assert len(counted) == 4
    assert all(e.status == LifecycleStatus.SUBMITTED for e in counted)
    assert next(e for e in entries if e.entry_id == lunch.entry_id).status == LifecycleStatus.APPROVED


def test_approved_week_cannot_be_resubmitted(services):
    _approved_leave(services, "u1", MONDAY, date(2025, 9, 5))
    sheet = services.timesheet_service.submit("u1", MONDAY)
    _review(services, sheet.timesheet_id, Decision.APPROVE)

    with pytest.raises(ConflictError):
        services.timesheet_service.submit("u1", MONDAY)
    with pytest.raises(ConflictError):
        _review(services, sheet.timesheet_id, Decision.REJECT)

    assert not services.timesheet_service.week_overview("u1", MONDAY).can_submit


def test_rejected_week_can_be_resubmitted(services, clock):
    _approved_leave(services, "u1", MONDAY, date(2025, 9, 5))
    sheet = services.timesheet_service.submit("u1", MONDAY)
    rejected = _review(services, sheet.timesheet_id, "reject")
    assert rejected.status == LifecycleStatus.REJECTED
    assert rejected.reviewed_by == "boss"

    clock.advance(days=1)
    again = services.timesheet_service.submit("u1", MONDAY)

    assert again.timesheet_id == sheet.timesheet_id
    assert again.status == LifecycleStatus.SUBMITTED
    assert again.submitted_at == datetime(2025, 9, 2, 9, 0)
    assert services.timesheet_service.list_for_owner("u1") == [again]
    assert services.timesheet_service.list_pending() == [again]


def test_review_rules(services):
    with pytest.raises(AuthorizationError):
        services.timesheet_service.review(
            current_role=Role.MEMBER,
            reviewer_id="u1",
            timesheet_id="u1-2025-09-01",
            decision="approve",
        )
    with pytest.raises(NotFoundError):
        _review(services, "u1-2025-09-01", "approve")

    _approved_leave(services, "u1", MONDAY, date(2025, 9, 5))
    sheet = services.timesheet_service.submit("u1", MONDAY)
    first = _review(services, sheet.timesheet_id, "approve")
    second = _review(services, sheet.timesheet_id, "approve")
    assert first == second


def test_week_overview_totals(services):
    _work(services, "u1", MONDAY, 6)
    _approved_leave(services, "u1", date(2025, 9, 2), half=True)

    overview = services.timesheet_service.week_overview("u1", date(2025, 9, 3))

    assert overview.week_start == MONDAY
    assert overview.worked_hours == 6
    assert overview.leave_credit_hours == 4
    assert overview.total_hours == 10
    assert not overview.can_submit
    assert overview.timesheet is None
