from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class SalaryConfig:
    owner_id: str
    base_salary: float
    currency: str


@dataclass(frozen=True)
class PayrollResult:
    owner_id: str
    period_start: date
    period_end: date
    currency: str
    base_salary: float
    days_in_period: int
    daily_rate: float
    lop_days: float
    missed_days: int
    deduction: float
    net_salary: float


@dataclass(frozen=True)
class PayrollReportRow:
    """One line of the payroll table; ``result`` is None when not computable."""

    owner_id: str
    result: Optional[PayrollResult]
    reason: Optional[str] = None
