from __future__ import annotations

from typing import Optional

from ..core.enums import LeaveType, Weekday
from ..database.record_store import Collections, RecordStore
from ..leave.model import LeaveBalancePolicy
from .model import WorkCalendarConfig
from .repository import SettingsRepository

CALENDAR_KEY = "work_calendar"
LEAVE_POLICY_KEY = "leave_policy"


class StoreSettingsRepository(SettingsRepository):
    def __init__(self, store: RecordStore):
        self._store = store

    def get_calendar(self) -> Optional[WorkCalendarConfig]:
        r = self._store.get(Collections.APP_SETTINGS, CALENDAR_KEY)
        if not r:
            return None
        return WorkCalendarConfig(
            start_day=Weekday(int(r["start_day"])),
            days_per_week=int(r["days_per_week"]),
            min_weekly_hours=float(r["min_weekly_hours"]),
            min_daily_hours=float(r["min_daily_hours"]),
        )

    def save_calendar(self, config: WorkCalendarConfig) -> None:
        self._store.put(
            Collections.APP_SETTINGS,
            CALENDAR_KEY,
            {
                "start_day": int(config.start_day),
                "days_per_week": int(config.days_per_week),
                "min_weekly_hours": float(config.min_weekly_hours),
                "min_daily_hours": float(config.min_daily_hours),
            },
        )

    def get_leave_policy(self) -> Optional[LeaveBalancePolicy]:
        r = self._store.get(Collections.APP_SETTINGS, LEAVE_POLICY_KEY)
        if not r:
            return None
        allowances = {}
        for key, days in (r.get("allowances") or {}).items():
            try:
                allowances[LeaveType(key)] = float(days)
            except ValueError:
                # Types retired from the enum keep their row but are ignored.
                continue
        return LeaveBalancePolicy(allowances=allowances)

    def save_leave_policy(self, policy: LeaveBalancePolicy) -> None:
        self._store.put(
            Collections.APP_SETTINGS,
            LEAVE_POLICY_KEY,
            {"allowances": {t.value: float(d) for t, d in policy.allowances.items()}},
        )
