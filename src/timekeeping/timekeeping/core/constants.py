"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from .enums import LeaveType, Weekday

BREAK_PROJECT_ID = "break"
BREAK_LABEL = "Break"
DEFAULT_TASK_LABEL = "Untitled Task"

DEFAULT_WEEK_START = Weekday.MONDAY
DEFAULT_DAYS_PER_WEEK = 5
DEFAULT_MIN_WEEKLY_HOURS = 40.0
DEFAULT_MIN_DAILY_HOURS = 8.0

# Hours credited towards the weekly minimum per approved paid leave day.
LEAVE_CREDIT_HOURS_FULL_DAY = 8.0
LEAVE_CREDIT_HOURS_HALF_DAY = 4.0

# Annual allowance in days; unpaid leave is never capped.
DEFAULT_LEAVE_ALLOWANCES = {
    LeaveType.EMERGENCY: 5.0,
    LeaveType.CASUAL: 10.0,
    LeaveType.FESTIVAL: 8.0,
    LeaveType.SICK: 7.0,
}
UNLIMITED = "unlimited"

SUPPORTED_CURRENCIES = ("$", "€", "£", "₹", "A$", "C$", "¥")
DEFAULT_CURRENCY = "$"

DEFAULT_LOCK_TIMEOUT_SECONDS = 10
