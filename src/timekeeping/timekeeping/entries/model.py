from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import hours_between
from ..core.enums import EntryKind, LifecycleStatus


@dataclass(frozen=True)
class TimeEntry:
    """One clock session. ``end_time`` is None while the timer is running."""

    entry_id: str
    owner_id: str
    project_id: str
    label: str
    start_time: datetime
    end_time: Optional[datetime]
    kind: EntryKind
    status: LifecycleStatus

    @property
    def is_open(self) -> bool:
        return self.end_time is None

    @property
    def is_break(self) -> bool:
        return self.kind == EntryKind.BREAK

    def duration_seconds(self, now: datetime) -> float:
        """Elapsed time; open entries are measured against ``now``."""
        end = self.end_time if self.end_time is not None else now
        return max((end - self.start_time).total_seconds(), 0.0)

    def hours(self, now: datetime) -> float:
        end = self.end_time if self.end_time is not None else now
        return hours_between(self.start_time, end)


def worked_hours(entries: Iterable[TimeEntry], now: datetime) -> float:
    """Sum of non-break durations, in fractional hours."""
    return sum(e.hours(now) for e in entries if not e.is_break)


def break_hours(entries: Iterable[TimeEntry], now: datetime) -> float:
    return sum(e.hours(now) for e in entries if e.is_break)


@dataclass(frozen=True)
class DaySummary:
    day: date
    entries: Sequence[TimeEntry]
    worked_hours: float
    break_hours: float
    min_daily_hours: float

    @property
    def meets_minimum(self) -> bool:
        return self.worked_hours >= self.min_daily_hours
