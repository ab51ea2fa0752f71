from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus
from .model import TimeOffRequest


class LeaveRepository(Protocol):
    def get(self, request_id: str) -> Optional[TimeOffRequest]:
        raise NotImplementedError

    def save(self, request: TimeOffRequest) -> None:
        raise NotImplementedError

    def find(
        self,
        *,
        owner_id: Optional[str] = None,
        status: Optional[LeaveStatus] = None,
    ) -> Sequence[TimeOffRequest]:
        """Requests ordered by start date, then creation time."""

        raise NotImplementedError
