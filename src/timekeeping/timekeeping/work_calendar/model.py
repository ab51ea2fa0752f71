from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta

from ..core.constants import (
    DEFAULT_DAYS_PER_WEEK,
    DEFAULT_MIN_DAILY_HOURS,
    DEFAULT_MIN_WEEKLY_HOURS,
    DEFAULT_WEEK_START,
)
from ..core.enums import Weekday


@dataclass(frozen=True)
class WorkCalendarConfig:
    """Admin-owned work week: where it starts and how many days are worked."""

    start_day: Weekday = DEFAULT_WEEK_START
    days_per_week: int = DEFAULT_DAYS_PER_WEEK
    min_weekly_hours: float = DEFAULT_MIN_WEEKLY_HOURS
    min_daily_hours: float = DEFAULT_MIN_DAILY_HOURS

    def offset_in_week(self, day: date) -> int:
        return (day.weekday() - int(self.start_day) + 7) % 7

    def is_work_day(self, day: date) -> bool:
        # Working days are contiguous from start_day.
        return self.offset_in_week(day) < self.days_per_week

    def week_start_for(self, day: date) -> date:
        return day - timedelta(days=self.offset_in_week(day))
