from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    def __init__(self, message: str, *, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when an operation references a record that does not exist."""


class ConflictError(DomainError):
    """Raised when a record is not in a state that allows the operation."""


class LockTimeoutError(ConflictError):
    """Raised when a store lock could not be acquired in time."""


class InsufficientHoursError(DomainError):
    """Raised by timesheet submission when the weekly minimum is not met."""

    def __init__(self, *, total: float, required: float):
        self.total = round(float(total), 2)
        self.required = float(required)
        self.shortfall = round(self.required - float(total), 2)
        super().__init__(
            f"Logged {self.total:.1f} hours, minimum required is {self.required:g} hours "
            f"({self.shortfall:.1f} short)"
        )


class PolicyGapError(DomainError):
    """Raised when payroll cannot be computed for an owner or period."""
