from __future__ import annotations

from enum import Enum, IntEnum


class Role(str, Enum):
    """Caller role supplied by the identity provider."""

    ADMIN = "admin"
    MEMBER = "member"


class Weekday(IntEnum):
    """Day of week, numbered like ``date.weekday()``."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6


class EntryKind(str, Enum):
    WORK = "work"
    BREAK = "break"


class LifecycleStatus(str, Enum):
    """Submission state shared by time entries and weekly timesheets."""

    DRAFT = "draft"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"


class LeaveStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class LeaveType(str, Enum):
    EMERGENCY = "emergency"
    CASUAL = "casual"
    FESTIVAL = "festival"
    SICK = "sick"
    UNPAID = "unpaid"


class Decision(str, Enum):
    """Reviewer verdict for leave requests and timesheets."""

    APPROVE = "approve"
    REJECT = "reject"
