from __future__ import annotations

from datetime import date
from typing import AbstractSet, Mapping

from ...common.datetime_utils import iter_dates
from ...core.enums import LeaveType
from ...core.exceptions import PolicyGapError
from ...leave.model import NOT_ON_LEAVE, LeaveDay
from ...work_calendar.model import WorkCalendarConfig
from ..model import PayrollResult, SalaryConfig
from .base import PayrollCalculator


class StandardPayrollCalculator(PayrollCalculator):
    """Prorated salary minus loss-of-pay and unexcused absence.

    The daily rate spreads the base salary over every calendar day of the
    period; only configured working days can be deducted.
    """

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
        days_in_period = (end - start).days + 1
        if days_in_period <= 0:
            raise PolicyGapError("Payroll period must end on or after its start")

        daily_rate = float(salary.base_salary) / days_in_period
        lop_days = 0.0
        missed_days = 0

        for d in iter_dates(start, end):
            if not calendar.is_work_day(d):
                continue
            leave = leave_days.get(d, NOT_ON_LEAVE)
            if leave.on_leave and leave.leave_type == LeaveType.UNPAID:
                lop_days += 0.5 if leave.is_half_day else 1.0
            elif not leave.on_leave and d not in worked_dates:
                missed_days += 1

        deduction = round((lop_days + missed_days) * daily_rate, 2)
        return PayrollResult(
            owner_id=salary.owner_id,
            period_start=start,
            period_end=end,
            currency=salary.currency,
            base_salary=float(salary.base_salary),
            days_in_period=days_in_period,
            daily_rate=daily_rate,
            lop_days=lop_days,
            missed_days=missed_days,
            deduction=deduction,
            net_salary=round(float(salary.base_salary) - deduction, 2),
        )
