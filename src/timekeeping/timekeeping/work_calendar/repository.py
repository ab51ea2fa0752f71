from __future__ import annotations

from typing import Optional, Protocol

from ..leave.model import LeaveBalancePolicy
from .model import WorkCalendarConfig


class SettingsRepository(Protocol):
    def get_calendar(self) -> Optional[WorkCalendarConfig]:
        raise NotImplementedError

    def save_calendar(self, config: WorkCalendarConfig) -> None:
        raise NotImplementedError

    def get_leave_policy(self) -> Optional[LeaveBalancePolicy]:
        raise NotImplementedError

    def save_leave_policy(self, policy: LeaveBalancePolicy) -> None:
        raise NotImplementedError
