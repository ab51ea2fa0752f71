from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, Optional

from ..core.constants import DEFAULT_LEAVE_ALLOWANCES
from ..core.enums import LeaveStatus, LeaveType


@dataclass(frozen=True)
class TimeOffRequest:
    request_id: str
    owner_id: str
    leave_type: LeaveType
    start_date: date
    end_date: date
    is_half_day: bool
    reason: str
    status: LeaveStatus
    created_at: datetime
    decided_by: Optional[str] = None
    decided_at: Optional[datetime] = None
    admin_note: Optional[str] = None

    @property
    def day_count(self) -> float:
        if self.is_half_day:
            return 0.5
        return float((self.end_date - self.start_date).days + 1)

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class LeaveDay:
    """Answer to "is this owner on approved leave on this date"."""

    on_leave: bool
    is_half_day: bool = False
    leave_type: Optional[LeaveType] = None

    @property
    def is_paid(self) -> bool:
        return self.on_leave and self.leave_type != LeaveType.UNPAID


NOT_ON_LEAVE = LeaveDay(on_leave=False)


@dataclass(frozen=True)
class LeaveBalancePolicy:
    """Annual allowance in days per leave type. Unpaid leave is never capped."""

    allowances: Dict[LeaveType, float] = field(default_factory=lambda: dict(DEFAULT_LEAVE_ALLOWANCES))

    def allowance_for(self, leave_type: LeaveType) -> Optional[float]:
        """None means unlimited."""
        if leave_type == LeaveType.UNPAID:
            return None
        return float(self.allowances.get(leave_type, 0.0))
