from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterator, Optional, Protocol

from ..core.exceptions import ValidationError


class Clock(Protocol):
    def now(self) -> datetime:
        raise NotImplementedError


class SystemClock:
    """Current local time.

    Note: Injected everywhere so tests can swap in a fixed clock.
    """

    def now(self) -> datetime:
        return datetime.now()


def parse_iso_date(value: str, field_name: str = "date") -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"{field_name} must be YYYY-MM-DD", field=field_name)


def parse_iso_datetime(value: str, field_name: str = "datetime") -> datetime:
    """Parse an ISO timestamp into naive local time.

    Stored entries and the clock are naive; an offset is applied and dropped.
    """
    try:
        parsed = datetime.fromisoformat((value or "").strip())
    except ValueError:
        raise ValidationError(f"{field_name} must be an ISO timestamp", field=field_name)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def to_iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def day_bounds(day: date) -> tuple[datetime, datetime]:
    start = datetime.combine(day, datetime.min.time())
    return start, start + timedelta(days=1)


def week_bounds(week_start: date) -> tuple[datetime, datetime]:
    """Half-open interval [week_start, week_start + 7d)."""
    start = datetime.combine(week_start, datetime.min.time())
    return start, start + timedelta(days=7)


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Every calendar date from start to end, both inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def hours_between(start: datetime, end: datetime) -> float:
    return max((end - start).total_seconds(), 0.0) / 3600.0


def format_duration(seconds: float) -> str:
    """HH:MM:SS, hours unbounded."""
    total = int(max(seconds, 0))
    return f"{total // 3600:02d}:{(total % 3600) // 60:02d}:{total % 60:02d}"
