from __future__ import annotations

from datetime import date, datetime

import pytest

from src.timekeeping.timekeeping.core.constants import UNLIMITED
from src.timekeeping.timekeeping.core.enums import Decision, LeaveStatus, LeaveType, Role
from src.timekeeping.timekeeping.core.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from src.timekeeping.timekeeping.leave.model import LeaveBalancePolicy, TimeOffRequest
from src.timekeeping.timekeeping.leave.service import resolve_leave_day


def _approve(services, request_id, decision=Decision.APPROVE):
    return services.leave_service.review(
        current_role=Role.ADMIN,
        reviewer_id="boss",
        request_id=request_id,
        decision=decision,
    )


def test_book_creates_pending_request(services):
    req = services.leave_service.book(
        owner_id="u1",
        leave_type="casual",
        start_date=date(2025, 9, 8),
        end_date=date(2025, 9, 10),
        reason="  trip ",
    )

    assert req.status == LeaveStatus.PENDING
    assert req.day_count == 3
    assert req.reason == "trip"
    assert services.leave_service.list_pending() == [req]


def test_half_day_forces_single_date(services):
    req = services.leave_service.book(
        owner_id="u1",
        leave_type=LeaveType.SICK,
        start_date=date(2025, 9, 8),
        end_date=date(2025, 9, 12),
        is_half_day=True,
    )

    assert req.end_date == date(2025, 9, 8)
    assert req.day_count == 0.5


def test_book_rejects_bad_input(services):
    with pytest.raises(ValidationError) as e:
        services.leave_service.book(owner_id="u1", leave_type="vacation", start_date=date(2025, 9, 8))
    assert e.value.field == "leave_type"

    with pytest.raises(ValidationError) as e:
        services.leave_service.book(
            owner_id="u1",
            leave_type="casual",
            start_date=date(2025, 9, 8),
            end_date=date(2025, 9, 7),
        )
    assert e.value.field == "end_date"


def test_book_with_request_id_is_idempotent(services):
    leave = services.leave_service
    a = leave.book(owner_id="u1", leave_type="casual", start_date=date(2025, 9, 8), request_id="r-1")
    b = leave.book(owner_id="u1", leave_type="casual", start_date=date(2025, 9, 8), request_id="r-1")

    assert a == b
    assert len(leave.list_for_owner("u1")) == 1


def test_only_requester_edits_pending_request(services):
    leave = services.leave_service
    req = leave.book(owner_id="u1", leave_type="casual", start_date=date(2025, 9, 8))

    with pytest.raises(AuthorizationError):
        leave.update_pending(owner_id="u2", request_id=req.request_id, leave_type="sick", start_date=date(2025, 9, 9))

    edited = leave.update_pending(owner_id="u1", request_id=req.request_id, leave_type="sick", start_date=date(2025, 9, 9))
    assert edited.leave_type == LeaveType.SICK
    assert edited.start_date == edited.end_date == date(2025, 9, 9)

    _approve(services, req.request_id)
    with pytest.raises(ConflictError):
        leave.update_pending(owner_id="u1", request_id=req.request_id, leave_type="sick", start_date=date(2025, 9, 10))


def test_review_requires_admin_and_existing_request(services):
    with pytest.raises(AuthorizationError):
        services.leave_service.review(current_role=Role.MEMBER, reviewer_id="u1", request_id="x", decision="approve")
    with pytest.raises(NotFoundError):
        _approve(services, "missing")


def test_review_is_idempotent(services, clock):
    leave = services.leave_service
    req = leave.book(owner_id="u1", leave_type="casual", start_date=date(2025, 9, 8))

    first = _approve(services, req.request_id)
    clock.advance(hours=1)
    second = _approve(services, req.request_id)

    assert first == second
    assert second.decided_at == datetime(2025, 9, 1, 9, 0)


def test_balance_counts_only_approved_days(services):
    leave = services.leave_service
    full = leave.book(owner_id="u1", leave_type="casual", start_date=date(2025, 9, 8), end_date=date(2025, 9, 9))
    half = leave.book(owner_id="u1", leave_type="casual", start_date=date(2025, 9, 10), is_half_day=True)
    leave.book(owner_id="u1", leave_type="casual", start_date=date(2025, 9, 15))

    assert leave.balance("u1", "casual") == 10

    _approve(services, full.request_id)
    _approve(services, half.request_id)

    assert leave.balance("u1", "casual") == 7.5
    assert leave.balance("u2", "casual") == 10


def test_balance_never_goes_negative(services):
    leave = services.leave_service
    req = leave.book(owner_id="u1", leave_type="emergency", start_date=date(2025, 9, 1), end_date=date(2025, 9, 12))
    _approve(services, req.request_id)

    assert leave.balance("u1", "emergency") == 0.0


def test_unpaid_balance_is_unlimited(services):
    leave = services.leave_service
    req = leave.book(owner_id="u1", leave_type="unpaid", start_date=date(2025, 9, 1), end_date=date(2025, 9, 30))
    _approve(services, req.request_id)

    assert leave.balance("u1", LeaveType.UNPAID) == UNLIMITED
    assert leave.balances("u1")[LeaveType.UNPAID] == UNLIMITED


def test_balance_uses_given_policy_and_year(services):
    leave = services.leave_service
    req = leave.book(owner_id="u1", leave_type="sick", start_date=date(2025, 9, 8))
    _approve(services, req.request_id)
    policy = LeaveBalancePolicy(allowances={LeaveType.SICK: 2})

    assert leave.balance("u1", "sick", policy) == 1
    assert leave.balance("u1", "sick", policy, year=2024) == 2


def test_is_on_approved_leave_ignores_pending_and_rejected(services):
    leave = services.leave_service
    pending = leave.book(owner_id="u1", leave_type="casual", start_date=date(2025, 9, 8))
    rejected = leave.book(owner_id="u1", leave_type="sick", start_date=date(2025, 9, 9))
    approved = leave.book(owner_id="u1", leave_type="sick", start_date=date(2025, 9, 10), is_half_day=True)
    _approve(services, rejected.request_id, Decision.REJECT)
    _approve(services, approved.request_id)

    assert not leave.is_on_approved_leave("u1", pending.start_date).on_leave
    assert not leave.is_on_approved_leave("u1", rejected.start_date).on_leave

    day = leave.is_on_approved_leave("u1", approved.start_date)
    assert day.on_leave and day.is_half_day
    assert day.leave_type == LeaveType.SICK


def test_overlapping_leaves_earliest_start_wins():
    def request(rid, leave_type, start, end, half=False):
        return TimeOffRequest(
            request_id=rid,
            owner_id="u1",
            leave_type=leave_type,
            start_date=start,
            end_date=end,
            is_half_day=half,
            reason="",
            status=LeaveStatus.APPROVED,
            created_at=datetime(2025, 8, 1),
        )

    requests = [
        request("b", LeaveType.UNPAID, date(2025, 9, 10), date(2025, 9, 10), half=True),
        request("a", LeaveType.CASUAL, date(2025, 9, 8), date(2025, 9, 12)),
    ]

    day = resolve_leave_day(requests, date(2025, 9, 10))
    assert day.leave_type == LeaveType.CASUAL
    assert not day.is_half_day
    assert day.is_paid
