from __future__ import annotations

from datetime import datetime
from typing import ContextManager, Optional, Protocol, Sequence

from .model import TimeEntry


class TimeEntryRepository(Protocol):
    def get(self, entry_id: str) -> Optional[TimeEntry]:
        raise NotImplementedError

    def list_for_owner(
        self,
        owner_id: str,
        *,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[TimeEntry]:
        """Entries whose start_time falls in [start, end), oldest first."""

        raise NotImplementedError

    def list_open(self, owner_id: str) -> Sequence[TimeEntry]:
        raise NotImplementedError

    def save(self, entry: TimeEntry) -> None:
        raise NotImplementedError

    def save_many(self, entries: Sequence[TimeEntry]) -> None:
        """Write all entries or none."""

        raise NotImplementedError

    def delete(self, entry_id: str) -> bool:
        raise NotImplementedError

    def timer_lock(self, owner_id: str) -> ContextManager[None]:
        """Serialises start/stop for one owner across devices."""

        raise NotImplementedError
