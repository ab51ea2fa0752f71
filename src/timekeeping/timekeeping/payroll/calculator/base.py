from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import AbstractSet, Mapping

from ...leave.model import LeaveDay
from ...work_calendar.model import WorkCalendarConfig
from ..model import PayrollResult, SalaryConfig


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def calculate(
        self,
        *,
        salary: SalaryConfig,
        calendar: WorkCalendarConfig,
        start: date,
        end: date,
        leave_days: Mapping[date, LeaveDay],
        worked_dates: AbstractSet[date],
    ) -> PayrollResult:
        """Pure function of its arguments.

        ``leave_days`` maps dates to the approved leave standing on them (dates
        without leave may be absent); ``worked_dates`` holds every date on
        which the owner has a time entry starting.
        """

        raise NotImplementedError
