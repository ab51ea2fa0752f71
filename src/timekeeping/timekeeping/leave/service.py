from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import date
from typing import Dict, Iterable, Optional, Sequence, Union

from ..common.datetime_utils import Clock, SystemClock, iter_dates
from ..common.validators import require_admin, require_enum, require_non_empty
from ..core.constants import UNLIMITED
from ..core.enums import Decision, LeaveStatus, LeaveType, Role
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..work_calendar.service import WorkCalendarService
from .model import NOT_ON_LEAVE, LeaveBalancePolicy, LeaveDay, TimeOffRequest
from .repository import LeaveRepository

logger = logging.getLogger(__name__)

Balance = Union[float, str]

_DECISION_STATUS = {
    Decision.APPROVE: LeaveStatus.APPROVED,
    Decision.REJECT: LeaveStatus.REJECTED,
}


def new_request_id() -> str:
    return f"leave-{uuid.uuid4().hex}"


def resolve_leave_day(requests: Iterable[TimeOffRequest], day: date) -> LeaveDay:
    """Leave standing on ``day``; the earliest-starting approved request wins."""
    covering = [
        r for r in requests
        if r.status == LeaveStatus.APPROVED and r.covers(day)
    ]
    if not covering:
        return NOT_ON_LEAVE
    first = min(covering, key=lambda r: (r.start_date, r.created_at, r.request_id))
    return LeaveDay(on_leave=True, is_half_day=first.is_half_day, leave_type=first.leave_type)


def _normalize_range(start_date: date, end_date: Optional[date], is_half_day: bool) -> tuple[date, date]:
    if is_half_day:
        # A half day is always a single date; a differing end date is overridden.
        return start_date, start_date
    end_date = end_date or start_date
    if end_date < start_date:
        raise ValidationError("end_date must be on or after start_date", field="end_date")
    return start_date, end_date


class LeaveService:
    def __init__(self, requests: LeaveRepository, calendar: WorkCalendarService, *, clock: Clock | None = None):
        self._requests = requests
        self._calendar = calendar
        self._clock = clock or SystemClock()

    def book(
        self,
        *,
        owner_id: str,
        leave_type,
        start_date: date,
        end_date: Optional[date] = None,
        is_half_day: bool = False,
        reason: str = "",
        request_id: Optional[str] = None,
    ) -> TimeOffRequest:
        owner_id = require_non_empty(owner_id, "owner_id")
        leave_type = require_enum(LeaveType, leave_type, "leave_type")
        start_date, end_date = _normalize_range(start_date, end_date, bool(is_half_day))

        if request_id:
            existing = self._requests.get(request_id)
            if existing:
                if existing.owner_id != owner_id:
                    raise ConflictError("Request id already belongs to another owner")
                return existing

        req = TimeOffRequest(
            request_id=request_id or new_request_id(),
            owner_id=owner_id,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            is_half_day=bool(is_half_day),
            reason=(reason or "").strip(),
            status=LeaveStatus.PENDING,
            created_at=self._clock.now(),
        )
        self._requests.save(req)
        logger.info(
            "Leave %s booked by %s: %s %s..%s%s",
            req.request_id,
            owner_id,
            leave_type.value,
            start_date,
            end_date,
            " (half day)" if req.is_half_day else "",
        )
        return req

    def update_pending(
        self,
        *,
        owner_id: str,
        request_id: str,
        leave_type,
        start_date: date,
        end_date: Optional[date] = None,
        is_half_day: bool = False,
        reason: str = "",
    ) -> TimeOffRequest:
        req = self._get_required(request_id)
        if req.owner_id != owner_id:
            raise AuthorizationError("Only the requester may edit this request")
        if req.status != LeaveStatus.PENDING:
            raise ConflictError("Only pending requests can be edited")

        leave_type = require_enum(LeaveType, leave_type, "leave_type")
        start_date, end_date = _normalize_range(start_date, end_date, bool(is_half_day))
        updated = replace(
            req,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            is_half_day=bool(is_half_day),
            reason=(reason or "").strip(),
        )
        self._requests.save(updated)
        logger.info("Pending leave %s edited by %s", request_id, owner_id)
        return updated

    def review(
        self,
        *,
        current_role: Role,
        reviewer_id: str,
        request_id: str,
        decision,
        admin_note: str = "",
    ) -> TimeOffRequest:
        require_admin(current_role)
        decision = require_enum(Decision, decision, "decision")
        req = self._get_required(request_id)

        target = _DECISION_STATUS[decision]
        if req.status == target:
            return req
        if req.status != LeaveStatus.PENDING:
            logger.warning("Leave %s decision changed from %s to %s", request_id, req.status.value, target.value)

        decided = replace(
            req,
            status=target,
            decided_by=str(reviewer_id),
            decided_at=self._clock.now(),
            admin_note=(admin_note or "").strip() or None,
        )
        self._requests.save(decided)
        logger.info("Leave %s %s by %s", request_id, target.value, reviewer_id)
        return decided

    # Balances

    def balance(
        self,
        owner_id: str,
        leave_type,
        policy: Optional[LeaveBalancePolicy] = None,
        *,
        year: Optional[int] = None,
    ) -> Balance:
        """Remaining days of ``leave_type``; never negative, unpaid is unlimited."""
        leave_type = require_enum(LeaveType, leave_type, "leave_type")
        policy = policy or self._calendar.get_leave_policy()
        allowance = policy.allowance_for(leave_type)
        if allowance is None:
            return UNLIMITED

        used = sum(
            r.day_count
            for r in self._requests.find(owner_id=owner_id, status=LeaveStatus.APPROVED)
            if r.leave_type == leave_type and (year is None or r.start_date.year == year)
        )
        return max(0.0, allowance - used)

    def balances(self, owner_id: str, *, year: Optional[int] = None) -> Dict[LeaveType, Balance]:
        policy = self._calendar.get_leave_policy()
        return {t: self.balance(owner_id, t, policy, year=year) for t in LeaveType}

    # Lookups used by timesheets and payroll

    def approved_between(self, owner_id: str, start: date, end: date) -> Sequence[TimeOffRequest]:
        return [
            r for r in self._requests.find(owner_id=owner_id, status=LeaveStatus.APPROVED)
            if r.start_date <= end and r.end_date >= start
        ]

    def is_on_approved_leave(self, owner_id: str, day: date) -> LeaveDay:
        return resolve_leave_day(self.approved_between(owner_id, day, day), day)

    def leave_days(self, owner_id: str, start: date, end: date) -> Dict[date, LeaveDay]:
        """``is_on_approved_leave`` for every date in [start, end] with one read."""
        approved = self.approved_between(owner_id, start, end)
        return {d: resolve_leave_day(approved, d) for d in iter_dates(start, end)}

    def list_for_owner(self, owner_id: str) -> Sequence[TimeOffRequest]:
        return self._requests.find(owner_id=owner_id)

    def list_pending(self) -> Sequence[TimeOffRequest]:
        return self._requests.find(status=LeaveStatus.PENDING)

    def _get_required(self, request_id: str) -> TimeOffRequest:
        req = self._requests.get(request_id)
        if not req:
            raise NotFoundError(f"Leave request {request_id} does not exist")
        return req
