from __future__ import annotations

from typing import Any, Callable, ContextManager, Dict, Optional, Protocol, Sequence, Tuple

Record = Dict[str, Any]
Predicate = Callable[[Record], bool]


class Collections:
    TIME_ENTRIES = "time_entries"
    WEEKLY_TIMESHEETS = "weekly_timesheets"
    LEAVE_REQUESTS = "leave_requests"
    SALARY_CONFIGS = "salary_configs"
    APP_SETTINGS = "app_settings"


class RecordStore(Protocol):
    """Key/value record store the engine runs against.

    Each single-record call is atomic. ``put_many`` writes a batch all or
    nothing and ``lock`` serialises writers on a name across processes.
    """

    def get(self, collection: str, key: str) -> Optional[Record]:
        raise NotImplementedError

    def put(self, collection: str, key: str, record: Record) -> None:
        raise NotImplementedError

    def put_many(self, items: Sequence[Tuple[str, str, Record]]) -> None:
        raise NotImplementedError

    def delete(self, collection: str, key: str) -> bool:
        raise NotImplementedError

    def query(
        self,
        collection: str,
        predicate: Optional[Predicate] = None,
        *,
        owner_id: Optional[str] = None,
    ) -> Sequence[Record]:
        """Records of a collection, optionally narrowed to one owner first."""

        raise NotImplementedError

    def lock(self, name: str, *, timeout: Optional[int] = None) -> ContextManager[None]:
        raise NotImplementedError
