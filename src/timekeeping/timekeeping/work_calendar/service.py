from __future__ import annotations

import logging
from typing import Mapping

from ..common.validators import require_admin, require_enum, require_non_negative
from ..core.enums import LeaveType, Role, Weekday
from ..core.exceptions import ValidationError
from ..leave.model import LeaveBalancePolicy
from .model import WorkCalendarConfig
from .repository import SettingsRepository

logger = logging.getLogger(__name__)


def parse_weekday(value) -> Weekday:
    """Accept a Weekday, its number (Monday=0) or its English name."""
    if isinstance(value, str) and not value.strip().isdigit():
        try:
            return Weekday[value.strip().upper()]
        except KeyError:
            raise ValidationError("start_day must be a weekday name or 0-6", field="start_day")
    try:
        return require_enum(Weekday, int(value), "start_day")
    except (TypeError, ValueError):
        raise ValidationError("start_day must be a weekday name or 0-6", field="start_day")


class WorkCalendarService:
    """Admin settings: the work calendar and the leave allowance policy."""

    def __init__(self, settings: SettingsRepository):
        self._settings = settings

    def get_config(self) -> WorkCalendarConfig:
        return self._settings.get_calendar() or WorkCalendarConfig()

    def update_config(
        self,
        *,
        current_role: Role,
        start_day,
        days_per_week,
        min_weekly_hours,
        min_daily_hours,
    ) -> WorkCalendarConfig:
        require_admin(current_role)

        try:
            days = int(days_per_week)
        except (TypeError, ValueError):
            raise ValidationError("days_per_week must be a whole number", field="days_per_week")
        if not 1 <= days <= 7:
            raise ValidationError("days_per_week must be between 1 and 7", field="days_per_week")

        config = WorkCalendarConfig(
            start_day=parse_weekday(start_day),
            days_per_week=days,
            min_weekly_hours=require_non_negative(min_weekly_hours, "min_weekly_hours"),
            min_daily_hours=require_non_negative(min_daily_hours, "min_daily_hours"),
        )
        self._settings.save_calendar(config)
        logger.info(
            "Work calendar updated: start=%s days=%s min_weekly=%s min_daily=%s",
            config.start_day.name,
            config.days_per_week,
            config.min_weekly_hours,
            config.min_daily_hours,
        )
        return config

    def get_leave_policy(self) -> LeaveBalancePolicy:
        return self._settings.get_leave_policy() or LeaveBalancePolicy()

    def update_leave_policy(self, *, current_role: Role, allowances: Mapping) -> LeaveBalancePolicy:
        require_admin(current_role)

        current = dict(self.get_leave_policy().allowances)
        for key, days in (allowances or {}).items():
            leave_type = require_enum(LeaveType, key, "leave_type")
            if leave_type == LeaveType.UNPAID:
                continue
            current[leave_type] = require_non_negative(days, f"allowances.{leave_type.value}")

        policy = LeaveBalancePolicy(allowances=current)
        self._settings.save_leave_policy(policy)
        logger.info("Leave policy updated: %s", {t.value: d for t, d in policy.allowances.items()})
        return policy
