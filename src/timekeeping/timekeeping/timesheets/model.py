from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import LifecycleStatus
from ..entries.model import TimeEntry


def timesheet_id_for(owner_id: str, week_start: date) -> str:
    """Deterministic key so resubmitting a week overwrites the same record."""
    return f"{owner_id}-{week_start.strftime('%Y-%m-%d')}"


@dataclass(frozen=True)
class WeeklyTimesheet:
    timesheet_id: str
    owner_id: str
    week_start: date
    status: LifecycleStatus
    total_hours: float
    worked_hours: float = 0.0
    leave_credit_hours: float = 0.0
    submitted_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    reviewed_by: Optional[str] = None


@dataclass(frozen=True)
class WeekOverview:
    """Read model for the timesheet screen of one owner and week."""

    owner_id: str
    week_start: date
    entries: Sequence[TimeEntry]
    worked_hours: float
    leave_credit_hours: float
    min_weekly_hours: float
    timesheet: Optional[WeeklyTimesheet]

    @property
    def total_hours(self) -> float:
        return self.worked_hours + self.leave_credit_hours

    @property
    def can_submit(self) -> bool:
        if self.timesheet and self.timesheet.status == LifecycleStatus.APPROVED:
            return False
        return self.total_hours >= self.min_weekly_hours
