from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import LifecycleStatus
from ..database.record_store import Collections, Record, RecordStore
from ..entries.model import TimeEntry
from ..entries.store_repository import entry_write
from .model import WeeklyTimesheet
from .repository import TimesheetRepository


def _dt(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def timesheet_to_record(ts: WeeklyTimesheet) -> Record:
    return {
        "timesheet_id": ts.timesheet_id,
        "owner_id": ts.owner_id,
        "week_start": ts.week_start.isoformat(),
        "status": ts.status.value,
        "total_hours": ts.total_hours,
        "worked_hours": ts.worked_hours,
        "leave_credit_hours": ts.leave_credit_hours,
        "submitted_at": ts.submitted_at.isoformat() if ts.submitted_at else None,
        "approved_at": ts.approved_at.isoformat() if ts.approved_at else None,
        "reviewed_by": ts.reviewed_by,
    }


def timesheet_from_record(r: Record) -> WeeklyTimesheet:
    return WeeklyTimesheet(
        timesheet_id=str(r["timesheet_id"]),
        owner_id=str(r["owner_id"]),
        week_start=date.fromisoformat(r["week_start"]),
        status=LifecycleStatus(r["status"]),
        total_hours=float(r.get("total_hours") or 0.0),
        worked_hours=float(r.get("worked_hours") or 0.0),
        leave_credit_hours=float(r.get("leave_credit_hours") or 0.0),
        submitted_at=_dt(r.get("submitted_at")),
        approved_at=_dt(r.get("approved_at")),
        reviewed_by=r.get("reviewed_by"),
    )


class StoreTimesheetRepository(TimesheetRepository):
    def __init__(self, store: RecordStore):
        self._store = store

    def get(self, timesheet_id: str) -> Optional[WeeklyTimesheet]:
        r = self._store.get(Collections.WEEKLY_TIMESHEETS, timesheet_id)
        return timesheet_from_record(r) if r else None

    def save(self, timesheet: WeeklyTimesheet) -> None:
        self._store.put(Collections.WEEKLY_TIMESHEETS, timesheet.timesheet_id, timesheet_to_record(timesheet))

    def save_submission(self, timesheet: WeeklyTimesheet, entries: Sequence[TimeEntry]) -> None:
        writes = [entry_write(e) for e in entries]
        writes.append((Collections.WEEKLY_TIMESHEETS, timesheet.timesheet_id, timesheet_to_record(timesheet)))
        self._store.put_many(writes)

    def find(
        self,
        *,
        status: Optional[LifecycleStatus] = None,
        owner_id: Optional[str] = None,
    ) -> Sequence[WeeklyTimesheet]:
        predicate = None
        if status is not None:
            predicate = lambda r: r.get("status") == status.value  # noqa: E731
        rows = self._store.query(Collections.WEEKLY_TIMESHEETS, predicate, owner_id=owner_id)
        items = [timesheet_from_record(r) for r in rows]
        items.sort(key=lambda t: (t.week_start, t.owner_id), reverse=True)
        return items

    def week_lock(self, owner_id: str, week_start: date):
        return self._store.lock(f"timesheet:{owner_id}:{week_start.isoformat()}")
