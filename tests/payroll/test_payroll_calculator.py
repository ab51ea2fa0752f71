from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from src.timekeeping.timekeeping.common.datetime_utils import iter_dates
from src.timekeeping.timekeeping.core.enums import LeaveType, Role, Weekday
from src.timekeeping.timekeeping.core.exceptions import AuthorizationError, PolicyGapError, ValidationError
from src.timekeeping.timekeeping.leave.model import LeaveDay
from src.timekeeping.timekeeping.payroll.calculator.standard_calculator import StandardPayrollCalculator
from src.timekeeping.timekeeping.payroll.model import SalaryConfig
from src.timekeeping.timekeeping.payroll.service import month_bounds
from src.timekeeping.timekeeping.work_calendar.model import WorkCalendarConfig

SEPT_START, SEPT_END = date(2025, 9, 1), date(2025, 9, 30)


def _clock_in(services, owner_id, day):
    start = datetime.combine(day, datetime.min.time()).replace(hour=9)
    services.entry_service.record_manual_entry(
        current_role=Role.ADMIN,
        owner_id=owner_id,
        project_id="proj-a",
        label="",
        start_time=start,
        end_time=start + timedelta(hours=8),
    )


def _approved_leave(services, owner_id, day, leave_type, half=False):
    req = services.leave_service.book(owner_id=owner_id, leave_type=leave_type, start_date=day, is_half_day=half)
    services.leave_service.review(current_role=Role.ADMIN, reviewer_id="boss", request_id=req.request_id, decision="approve")


def _salary(services, owner_id, base=3000, currency="$"):
    return services.payroll_service.set_salary_config(
        current_role=Role.ADMIN,
        owner_id=owner_id,
        base_salary=base,
        currency=currency,
    )


def test_month_with_unpaid_leave_and_missed_days(services):
    _salary(services, "u1")
    unpaid, missed, paid = date(2025, 9, 10), {date(2025, 9, 11), date(2025, 9, 12)}, date(2025, 9, 15)
    for d in iter_dates(SEPT_START, SEPT_END):
        if d.weekday() < 5 and d != unpaid and d != paid and d not in missed:
            _clock_in(services, "u1", d)
    _approved_leave(services, "u1", unpaid, "unpaid")
    _approved_leave(services, "u1", paid, "casual")

    result = services.payroll_service.calculate_for_month("u1", 2025, 9)

    assert result.days_in_period == 30
    assert result.daily_rate == 100
    assert result.lop_days == 1
    assert result.missed_days == 2
    assert result.deduction == 300
    assert result.net_salary == 2700
    assert result.currency == "$"


def test_calculation_is_repeatable(services):
    _salary(services, "u1")
    _clock_in(services, "u1", date(2025, 9, 3))

    first = services.payroll_service.calculate("u1", SEPT_START, SEPT_END)
    second = services.payroll_service.calculate("u1", SEPT_START, SEPT_END)

    assert first == second
    assert first.missed_days == 21


def test_half_day_unpaid_counts_half():
    calendar = WorkCalendarConfig()
    salary = SalaryConfig(owner_id="u1", base_salary=700, currency="€")
    start, end = date(2025, 9, 1), date(2025, 9, 7)
    worked = {d for d in iter_dates(start, end) if d.weekday() < 5}

    result = StandardPayrollCalculator().calculate(
        salary=salary,
        calendar=calendar,
        start=start,
        end=end,
        leave_days={date(2025, 9, 2): LeaveDay(on_leave=True, is_half_day=True, leave_type=LeaveType.UNPAID)},
        worked_dates=worked,
    )

    assert result.lop_days == 0.5
    assert result.missed_days == 0
    assert result.deduction == 50
    assert result.net_salary == 650


def test_only_configured_work_days_are_deducted():
    calendar = WorkCalendarConfig(start_day=Weekday.SUNDAY, days_per_week=4)
    salary = SalaryConfig(owner_id="u1", base_salary=700, currency="$")

    # 2025-09-07 is a Sunday; Sun..Wed are the work days of that week
    result = StandardPayrollCalculator().calculate(
        salary=salary,
        calendar=calendar,
        start=date(2025, 9, 7),
        end=date(2025, 9, 13),
        leave_days={},
        worked_dates={date(2025, 9, 7)},
    )

    assert result.missed_days == 3
    assert result.net_salary == 400


def test_not_computable_without_salary_or_valid_period(services):
    with pytest.raises(PolicyGapError):
        services.payroll_service.calculate("u1", SEPT_START, SEPT_END)

    _salary(services, "u1")
    with pytest.raises(PolicyGapError):
        services.payroll_service.calculate("u1", SEPT_END, SEPT_START)


def test_payroll_report_lists_every_configured_owner(services):
    _salary(services, "u1")
    _salary(services, "u2", base=6000, currency="₹")

    rows = services.payroll_service.build_payroll_report(SEPT_START, SEPT_END)

    assert sorted(r.owner_id for r in rows) == ["u1", "u2"]
    assert all(r.result is not None for r in rows)
    by_owner = {r.owner_id: r.result for r in rows}
    assert by_owner["u1"].net_salary == 800
    assert by_owner["u2"].currency == "₹"


def test_salary_config_validation(services):
    with pytest.raises(AuthorizationError):
        services.payroll_service.set_salary_config(current_role=Role.MEMBER, owner_id="u1", base_salary=1)
    with pytest.raises(ValidationError):
        _salary(services, "u1", currency="XYZ")
    with pytest.raises(ValidationError):
        _salary(services, "u1", base=-5)

    with pytest.raises(ValidationError):
        _salary(services, "u1", base=float("nan"))
    with pytest.raises(ValidationError):
        _salary(services, "u1", base=float("inf"))

    saved = _salary(services, "u1", base="2500.50", currency="£")
    assert services.payroll_service.get_salary_config("u1") == saved
    assert saved.base_salary == 2500.5


def test_month_bounds():
    assert month_bounds(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))
    with pytest.raises(ValidationError):
        month_bounds(2025, 13)
