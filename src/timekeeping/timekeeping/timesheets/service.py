from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, timedelta
from typing import Optional, Sequence

from ..common.datetime_utils import Clock, SystemClock, week_bounds
from ..common.validators import require_admin, require_enum, require_non_empty
from ..core.constants import LEAVE_CREDIT_HOURS_FULL_DAY, LEAVE_CREDIT_HOURS_HALF_DAY
from ..core.enums import Decision, LifecycleStatus, Role
from ..core.exceptions import ConflictError, InsufficientHoursError, NotFoundError
from ..entries.model import TimeEntry, worked_hours
from ..entries.repository import TimeEntryRepository
from ..leave.service import LeaveService
from ..work_calendar.service import WorkCalendarService
from .model import WeeklyTimesheet, WeekOverview, timesheet_id_for
from .repository import TimesheetRepository

logger = logging.getLogger(__name__)

_DECISION_STATUS = {
    Decision.APPROVE: LifecycleStatus.APPROVED,
    Decision.REJECT: LifecycleStatus.REJECTED,
}


class TimesheetService:
    """Weekly totals and the draft -> submitted -> approved/rejected workflow.

    Every ``week_start`` argument is normalised to the configured first day of
    the work week, so any date inside a week addresses that week.
    """

    def __init__(
        self,
        timesheets: TimesheetRepository,
        entries: TimeEntryRepository,
        leave: LeaveService,
        calendar: WorkCalendarService,
        *,
        clock: Clock | None = None,
    ):
        self._timesheets = timesheets
        self._entries = entries
        self._leave = leave
        self._calendar = calendar
        self._clock = clock or SystemClock()

    def normalize_week(self, day: date) -> date:
        return self._calendar.get_config().week_start_for(day)

    def _week_entries(self, owner_id: str, week_start: date) -> Sequence[TimeEntry]:
        start, end = week_bounds(week_start)
        return self._entries.list_for_owner(owner_id, start=start, end=end)

    def _credit_hours(self, owner_id: str, week_start: date) -> float:
        # Every date of the range counts, working day or not.
        days = self._leave.leave_days(owner_id, week_start, week_start + timedelta(days=6))
        total = 0.0
        for leave_day in days.values():
            if not leave_day.is_paid:
                continue
            total += LEAVE_CREDIT_HOURS_HALF_DAY if leave_day.is_half_day else LEAVE_CREDIT_HOURS_FULL_DAY
        return total

    def worked_hours(self, owner_id: str, week_start: date) -> float:
        week_start = self.normalize_week(week_start)
        return worked_hours(self._week_entries(owner_id, week_start), self._clock.now())

    def leave_credit_hours(self, owner_id: str, week_start: date) -> float:
        return self._credit_hours(owner_id, self.normalize_week(week_start))

    def get(self, owner_id: str, week_start: date) -> Optional[WeeklyTimesheet]:
        return self._timesheets.get(timesheet_id_for(owner_id, self.normalize_week(week_start)))

    def week_overview(self, owner_id: str, week_start: date) -> WeekOverview:
        week_start = self.normalize_week(week_start)
        entries = self._week_entries(owner_id, week_start)
        return WeekOverview(
            owner_id=owner_id,
            week_start=week_start,
            entries=entries,
            worked_hours=worked_hours(entries, self._clock.now()),
            leave_credit_hours=self._credit_hours(owner_id, week_start),
            min_weekly_hours=self._calendar.get_config().min_weekly_hours,
            timesheet=self._timesheets.get(timesheet_id_for(owner_id, week_start)),
        )

    def submit(self, owner_id: str, week_start: date) -> WeeklyTimesheet:
        owner_id = require_non_empty(owner_id, "owner_id")
        week_start = self.normalize_week(week_start)
        timesheet_id = timesheet_id_for(owner_id, week_start)

        # Week lock first, then the owner's timer lock: timers never take the week lock.
        with self._timesheets.week_lock(owner_id, week_start), self._entries.timer_lock(owner_id):
            current = self._timesheets.get(timesheet_id)
            if current and current.status == LifecycleStatus.APPROVED:
                raise ConflictError("Week is already approved and cannot be resubmitted")

            now = self._clock.now()
            snapshot = self._week_entries(owner_id, week_start)
            counted = [e for e in snapshot if not e.is_break]
            worked = worked_hours(counted, now)
            credit = self._credit_hours(owner_id, week_start)
            total = worked + credit
            required = self._calendar.get_config().min_weekly_hours

            if total < required:
                logger.warning(
                    "Timesheet %s rejected: %.2f of %.2f required hours",
                    timesheet_id,
                    total,
                    required,
                )
                raise InsufficientHoursError(total=total, required=required)

            timesheet = WeeklyTimesheet(
                timesheet_id=timesheet_id,
                owner_id=owner_id,
                week_start=week_start,
                status=LifecycleStatus.SUBMITTED,
                total_hours=round(total, 2),
                worked_hours=round(worked, 2),
                leave_credit_hours=credit,
                submitted_at=now,
            )
            stamped = [replace(e, status=LifecycleStatus.SUBMITTED) for e in counted]
            self._timesheets.save_submission(timesheet, stamped)

        # Admin inserts do not take the owner locks; report anything that slipped past the snapshot.
        seen = {e.entry_id for e in snapshot}
        late = [e.entry_id for e in self._week_entries(owner_id, week_start) if e.entry_id not in seen]
        if late:
            logger.warning(
                "Timesheet %s: %d entries written during submission are not in the submitted total: %s",
                timesheet_id,
                len(late),
                ", ".join(late),
            )

        logger.info("Timesheet %s submitted with %.2f hours (%d entries)", timesheet_id, total, len(stamped))
        return timesheet

    def review(
        self,
        *,
        current_role: Role,
        reviewer_id: str,
        timesheet_id: str,
        decision,
    ) -> WeeklyTimesheet:
        require_admin(current_role)
        decision = require_enum(Decision, decision, "decision")

        timesheet = self._timesheets.get(timesheet_id)
        if not timesheet:
            raise NotFoundError(f"Timesheet {timesheet_id} was never submitted")

        target = _DECISION_STATUS[decision]
        if timesheet.status == target:
            return timesheet
        if timesheet.status != LifecycleStatus.SUBMITTED:
            raise ConflictError(f"Timesheet is {timesheet.status.value}; only submitted timesheets can be reviewed")

        reviewed = replace(timesheet, status=target, approved_at=self._clock.now(), reviewed_by=str(reviewer_id))
        self._timesheets.save(reviewed)
        logger.info("Timesheet %s %s by %s", timesheet_id, target.value, reviewer_id)
        return reviewed

    def list_pending(self) -> Sequence[WeeklyTimesheet]:
        return self._timesheets.find(status=LifecycleStatus.SUBMITTED)

    def list_for_owner(self, owner_id: str) -> Sequence[WeeklyTimesheet]:
        return self._timesheets.find(owner_id=owner_id)
