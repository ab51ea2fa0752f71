from __future__ import annotations

import calendar as month_calendar
import logging
from datetime import date
from typing import Optional, Sequence

from ..common.validators import require_admin, require_non_empty, require_non_negative
from ..core.constants import DEFAULT_CURRENCY, SUPPORTED_CURRENCIES
from ..core.enums import Role
from ..core.exceptions import PolicyGapError, ValidationError
from ..entries.service import TimeEntryService
from ..leave.service import LeaveService
from ..work_calendar.service import WorkCalendarService
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import PayrollReportRow, PayrollResult, SalaryConfig
from .repository import SalaryRepository

logger = logging.getLogger(__name__)


def month_bounds(year: int, month: int) -> tuple[date, date]:
    if not 1 <= int(month) <= 12:
        raise ValidationError("month must be between 1 and 12", field="month")
    last = month_calendar.monthrange(int(year), int(month))[1]
    return date(int(year), int(month), 1), date(int(year), int(month), last)


class PayrollService:
    def __init__(
        self,
        salaries: SalaryRepository,
        entries: TimeEntryService,
        leave: LeaveService,
        calendar: WorkCalendarService,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._salaries = salaries
        self._entries = entries
        self._leave = leave
        self._calendar = calendar
        self._calculator = calculator or StandardPayrollCalculator()

    # Salary configuration

    def get_salary_config(self, owner_id: str) -> Optional[SalaryConfig]:
        return self._salaries.get(owner_id)

    def set_salary_config(
        self,
        *,
        current_role: Role,
        owner_id: str,
        base_salary,
        currency: Optional[str] = None,
    ) -> SalaryConfig:
        require_admin(current_role)
        owner_id = require_non_empty(owner_id, "owner_id")

        existing = self._salaries.get(owner_id)
        currency = (currency or (existing.currency if existing else DEFAULT_CURRENCY)).strip()
        if currency not in SUPPORTED_CURRENCIES:
            raise ValidationError(
                f"currency must be one of: {', '.join(SUPPORTED_CURRENCIES)}",
                field="currency",
            )

        config = SalaryConfig(
            owner_id=owner_id,
            base_salary=require_non_negative(base_salary, "base_salary"),
            currency=currency,
        )
        self._salaries.save(config)
        logger.info("Salary config saved for %s: %s%.2f", owner_id, currency, config.base_salary)
        return config

    # Calculation

    def calculate(self, owner_id: str, start: date, end: date) -> PayrollResult:
        """Net pay for [start, end]; raises PolicyGapError when not computable."""
        if start > end:
            raise PolicyGapError("Payroll period must end on or after its start")

        salary = self._salaries.get(owner_id)
        if not salary:
            raise PolicyGapError(f"No salary configured for {owner_id}")

        worked_dates = {e.start_time.date() for e in self._entries.entries_in_range(owner_id, start, end)}
        result = self._calculator.calculate(
            salary=salary,
            calendar=self._calendar.get_config(),
            start=start,
            end=end,
            leave_days=self._leave.leave_days(owner_id, start, end),
            worked_dates=worked_dates,
        )
        logger.debug(
            "Payroll %s %s..%s: lop=%s missed=%s deduction=%.2f",
            owner_id,
            start,
            end,
            result.lop_days,
            result.missed_days,
            result.deduction,
        )
        return result

    def calculate_for_month(self, owner_id: str, year: int, month: int) -> PayrollResult:
        start, end = month_bounds(year, month)
        return self.calculate(owner_id, start, end)

    def build_payroll_report(self, start: date, end: date) -> Sequence[PayrollReportRow]:
        rows: list[PayrollReportRow] = []
        for config in self._salaries.list_all():
            try:
                rows.append(PayrollReportRow(owner_id=config.owner_id, result=self.calculate(config.owner_id, start, end)))
            except PolicyGapError as e:
                logger.warning("Payroll not computable for %s: %s", config.owner_id, e)
                rows.append(PayrollReportRow(owner_id=config.owner_id, result=None, reason=str(e)))
        return rows
