from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .common.datetime_utils import Clock, SystemClock
from .core.constants import DEFAULT_LOCK_TIMEOUT_SECONDS
from .database.connection import DBConfig, DatabaseConnection
from .database.mysql_record_store import MySQLRecordStore
from .database.record_store import RecordStore
from .entries.service import TimeEntryService
from .entries.store_repository import StoreTimeEntryRepository
from .identity.model import IdentityProvider
from .identity.session_provider import FlaskSessionIdentityProvider
from .leave.service import LeaveService
from .leave.store_repository import StoreLeaveRepository
from .payroll.service import PayrollService
from .payroll.store_repository import StoreSalaryRepository
from .timesheets.service import TimesheetService
from .timesheets.store_repository import StoreTimesheetRepository
from .work_calendar.service import WorkCalendarService
from .work_calendar.store_repository import StoreSettingsRepository


@dataclass(frozen=True)
class Container:
    store: RecordStore
    clock: Clock
    identity: IdentityProvider

    calendar_service: WorkCalendarService
    entry_service: TimeEntryService
    leave_service: LeaveService
    timesheet_service: TimesheetService
    payroll_service: PayrollService


def build_services(
    store: RecordStore,
    *,
    clock: Optional[Clock] = None,
    identity: Optional[IdentityProvider] = None,
) -> Container:
    clock = clock or SystemClock()

    settings_repo = StoreSettingsRepository(store)
    entries_repo = StoreTimeEntryRepository(store)
    timesheets_repo = StoreTimesheetRepository(store)
    leave_repo = StoreLeaveRepository(store)
    salaries_repo = StoreSalaryRepository(store)

    calendar_service = WorkCalendarService(settings_repo)
    entry_service = TimeEntryService(entries_repo, timesheets_repo, calendar_service, clock=clock)
    leave_service = LeaveService(leave_repo, calendar_service, clock=clock)
    timesheet_service = TimesheetService(timesheets_repo, entries_repo, leave_service, calendar_service, clock=clock)
    payroll_service = PayrollService(salaries_repo, entry_service, leave_service, calendar_service)

    return Container(
        store=store,
        clock=clock,
        identity=identity or FlaskSessionIdentityProvider(),
        calendar_service=calendar_service,
        entry_service=entry_service,
        leave_service=leave_service,
        timesheet_service=timesheet_service,
        payroll_service=payroll_service,
    )


def build_container(*, db_config: dict, lock_timeout: int = DEFAULT_LOCK_TIMEOUT_SECONDS) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
    return build_services(MySQLRecordStore(conn, lock_timeout=lock_timeout))
