from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import Clock, SystemClock, day_bounds, week_bounds
from ..common.validators import require_admin, require_non_empty
from ..core.constants import BREAK_LABEL, BREAK_PROJECT_ID, DEFAULT_TASK_LABEL
from ..core.enums import EntryKind, LifecycleStatus, Role
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..timesheets.model import timesheet_id_for
from ..timesheets.repository import TimesheetRepository
from ..work_calendar.service import WorkCalendarService
from .model import DaySummary, TimeEntry, break_hours, worked_hours
from .repository import TimeEntryRepository

logger = logging.getLogger(__name__)


def new_entry_id() -> str:
    return f"entry-{uuid.uuid4().hex}"


class TimeEntryService:
    """Clock events: the running timer per owner plus admin corrections."""

    def __init__(
        self,
        entries: TimeEntryRepository,
        timesheets: TimesheetRepository,
        calendar: WorkCalendarService,
        *,
        clock: Clock | None = None,
    ):
        self._entries = entries
        self._timesheets = timesheets
        self._calendar = calendar
        self._clock = clock or SystemClock()

    # Timer

    def start_timer(
        self,
        owner_id: str,
        project_id: str,
        label: str = "",
        *,
        entry_id: Optional[str] = None,
    ) -> TimeEntry:
        """Start a timer, stopping whatever the owner had running.

        Passing the same ``entry_id`` again returns the entry created by the
        first call instead of starting a second timer.
        """

        owner_id = require_non_empty(owner_id, "owner_id")
        project_id = require_non_empty(project_id, "project_id")
        is_break = project_id == BREAK_PROJECT_ID

        with self._entries.timer_lock(owner_id):
            if entry_id:
                existing = self._entries.get(entry_id)
                if existing:
                    if existing.owner_id != owner_id:
                        raise ConflictError("Entry id already belongs to another owner")
                    return existing

            now = self._clock.now()
            closed = [replace(e, end_time=max(now, e.start_time)) for e in self._entries.list_open(owner_id)]
            start = max([now] + [e.end_time for e in closed])

            entry = TimeEntry(
                entry_id=entry_id or new_entry_id(),
                owner_id=owner_id,
                project_id=project_id,
                label=BREAK_LABEL if is_break else ((label or "").strip() or DEFAULT_TASK_LABEL),
                start_time=start,
                end_time=None,
                kind=EntryKind.BREAK if is_break else EntryKind.WORK,
                status=LifecycleStatus.DRAFT,
            )
            self._entries.save_many(closed + [entry])

        for e in closed:
            logger.info("Auto-closed entry %s for owner %s at %s", e.entry_id, owner_id, e.end_time)
        logger.info("Timer %s started for owner %s (%s)", entry.entry_id, owner_id, entry.kind.value)
        return entry

    def stop_timer(self, owner_id: str) -> TimeEntry:
        owner_id = require_non_empty(owner_id, "owner_id")

        with self._entries.timer_lock(owner_id):
            running = self._entries.list_open(owner_id)
            if not running:
                raise NotFoundError("No timer is running")

            now = self._clock.now()
            closed = [replace(e, end_time=max(now, e.start_time)) for e in running]
            self._entries.save_many(closed)

        stopped = closed[-1]
        logger.info("Timer %s stopped for owner %s", stopped.entry_id, owner_id)
        return stopped

    def active_entry(self, owner_id: str) -> Optional[TimeEntry]:
        running = self._entries.list_open(owner_id)
        return running[-1] if running else None

    # Administrative corrections

    def record_manual_entry(
        self,
        *,
        current_role: Role,
        owner_id: str,
        project_id: str,
        label: str,
        start_time: datetime,
        end_time: datetime,
        entry_id: Optional[str] = None,
    ) -> TimeEntry:
        require_admin(current_role)
        owner_id = require_non_empty(owner_id, "owner_id")
        project_id = require_non_empty(project_id, "project_id")
        self._require_ordered(start_time, end_time)

        is_break = project_id == BREAK_PROJECT_ID
        entry = TimeEntry(
            entry_id=entry_id or new_entry_id(),
            owner_id=owner_id,
            project_id=project_id,
            label=(label or "").strip() or (BREAK_LABEL if is_break else DEFAULT_TASK_LABEL),
            start_time=start_time,
            end_time=end_time,
            kind=EntryKind.BREAK if is_break else EntryKind.WORK,
            status=LifecycleStatus.APPROVED,
        )

        existing = self._entries.get(entry.entry_id)
        if existing and existing.owner_id != owner_id:
            raise ConflictError("Entry id already belongs to another owner")

        self._entries.save(entry)
        logger.info("Manual entry %s recorded for owner %s", entry.entry_id, owner_id)
        self._reopen_week(owner_id, start_time.date())
        return entry

    def amend_entry(
        self,
        *,
        current_role: Role,
        entry_id: str,
        start_time: Optional[datetime] = None,
        end_time: Optional[datetime] = None,
        label: Optional[str] = None,
        project_id: Optional[str] = None,
    ) -> TimeEntry:
        require_admin(current_role)
        owner_id = self._get_required(entry_id).owner_id

        # Serialised with start/stop on the owner's timer lock.
        with self._entries.timer_lock(owner_id):
            current = self._get_required(entry_id)
            new_start = start_time or current.start_time
            new_end = end_time if end_time is not None else current.end_time
            if new_end is not None:
                self._require_ordered(new_start, new_end)

            changes = {"start_time": new_start, "end_time": new_end}
            if label is not None:
                changes["label"] = label.strip() or current.label
            if project_id:
                is_break = project_id == BREAK_PROJECT_ID
                changes["project_id"] = project_id
                changes["kind"] = EntryKind.BREAK if is_break else EntryKind.WORK

            amended = replace(current, **changes)
            self._entries.save(amended)

        logger.info("Entry %s amended for owner %s", entry_id, current.owner_id)

        self._reopen_week(current.owner_id, current.start_time.date())
        if amended.start_time.date() != current.start_time.date():
            self._reopen_week(current.owner_id, amended.start_time.date())
        return amended

    def delete_entry(self, *, current_role: Role, entry_id: str) -> None:
        require_admin(current_role)
        owner_id = self._get_required(entry_id).owner_id

        with self._entries.timer_lock(owner_id):
            current = self._get_required(entry_id)
            self._entries.delete(entry_id)

        logger.info("Entry %s deleted for owner %s", entry_id, current.owner_id)
        self._reopen_week(current.owner_id, current.start_time.date())

    # Projections

    def entries_for_week(self, owner_id: str, week_start: date) -> Sequence[TimeEntry]:
        start, end = week_bounds(week_start)
        return self._entries.list_for_owner(owner_id, start=start, end=end)

    def entries_for_day(self, owner_id: str, day: date) -> Sequence[TimeEntry]:
        start, end = day_bounds(day)
        return self._entries.list_for_owner(owner_id, start=start, end=end)

    def entries_in_range(self, owner_id: str, start: date, end: date) -> Sequence[TimeEntry]:
        """Entries starting on any date from start to end inclusive."""
        lower, _ = day_bounds(start)
        _, upper = day_bounds(end)
        return self._entries.list_for_owner(owner_id, start=lower, end=upper)

    def day_summary(self, owner_id: str, day: date) -> DaySummary:
        entries = self.entries_for_day(owner_id, day)
        now = self._clock.now()
        return DaySummary(
            day=day,
            entries=entries,
            worked_hours=worked_hours(entries, now),
            break_hours=break_hours(entries, now),
            min_daily_hours=self._calendar.get_config().min_daily_hours,
        )

    def _get_required(self, entry_id: str) -> TimeEntry:
        entry = self._entries.get(entry_id)
        if not entry:
            raise NotFoundError(f"Time entry {entry_id} does not exist")
        return entry

    @staticmethod
    def _require_ordered(start_time: datetime, end_time: datetime) -> None:
        if end_time <= start_time:
            raise ValidationError("end_time must be after start_time", field="end_time")

    def _reopen_week(self, owner_id: str, day: date) -> None:
        """An admin correction sends a non-draft timesheet for that week back to draft."""
        week_start = self._calendar.get_config().week_start_for(day)
        timesheet = self._timesheets.get(timesheet_id_for(owner_id, week_start))
        if not timesheet or timesheet.status == LifecycleStatus.DRAFT:
            return

        self._timesheets.save(replace(timesheet, status=LifecycleStatus.DRAFT, approved_at=None, reviewed_by=None))
        logger.info(
            "Timesheet %s reverted from %s to draft after an entry correction",
            timesheet.timesheet_id,
            timesheet.status.value,
        )
