from __future__ import annotations

from datetime import date
from typing import ContextManager, Optional, Protocol, Sequence

from ..core.enums import LifecycleStatus
from ..entries.model import TimeEntry
from .model import WeeklyTimesheet


class TimesheetRepository(Protocol):
    def get(self, timesheet_id: str) -> Optional[WeeklyTimesheet]:
        raise NotImplementedError

    def save(self, timesheet: WeeklyTimesheet) -> None:
        raise NotImplementedError

    def save_submission(self, timesheet: WeeklyTimesheet, entries: Sequence[TimeEntry]) -> None:
        """Write the timesheet together with its re-stamped entries, all or nothing."""

        raise NotImplementedError

    def find(
        self,
        *,
        status: Optional[LifecycleStatus] = None,
        owner_id: Optional[str] = None,
    ) -> Sequence[WeeklyTimesheet]:
        raise NotImplementedError

    def week_lock(self, owner_id: str, week_start: date) -> ContextManager[None]:
        raise NotImplementedError
