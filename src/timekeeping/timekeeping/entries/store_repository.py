from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence, Tuple

from ..core.enums import EntryKind, LifecycleStatus
from ..database.record_store import Collections, Record, RecordStore
from .model import TimeEntry
from .repository import TimeEntryRepository


def entry_to_record(entry: TimeEntry) -> Record:
    return {
        "entry_id": entry.entry_id,
        "owner_id": entry.owner_id,
        "project_id": entry.project_id,
        "label": entry.label,
        "start_time": entry.start_time.isoformat(),
        "end_time": entry.end_time.isoformat() if entry.end_time else None,
        "kind": entry.kind.value,
        "status": entry.status.value,
    }


def entry_from_record(r: Record) -> TimeEntry:
    return TimeEntry(
        entry_id=str(r["entry_id"]),
        owner_id=str(r["owner_id"]),
        project_id=str(r["project_id"]),
        label=r.get("label") or "",
        start_time=datetime.fromisoformat(r["start_time"]),
        end_time=datetime.fromisoformat(r["end_time"]) if r.get("end_time") else None,
        kind=EntryKind(r.get("kind", EntryKind.WORK.value)),
        status=LifecycleStatus(r.get("status", LifecycleStatus.DRAFT.value)),
    )


def entry_write(entry: TimeEntry) -> Tuple[str, str, Record]:
    return Collections.TIME_ENTRIES, entry.entry_id, entry_to_record(entry)


class StoreTimeEntryRepository(TimeEntryRepository):
    def __init__(self, store: RecordStore):
        self._store = store

    def get(self, entry_id: str) -> Optional[TimeEntry]:
        r = self._store.get(Collections.TIME_ENTRIES, entry_id)
        return entry_from_record(r) if r else None

    def list_for_owner(
        self,
        owner_id: str,
        *,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[TimeEntry]:
        rows = self._store.query(Collections.TIME_ENTRIES, owner_id=owner_id)
        entries = [entry_from_record(r) for r in rows]
        if start is not None:
            entries = [e for e in entries if e.start_time >= start]
        if end is not None:
            entries = [e for e in entries if e.start_time < end]
        entries.sort(key=lambda e: (e.start_time, e.entry_id))
        return entries

    def list_open(self, owner_id: str) -> Sequence[TimeEntry]:
        rows = self._store.query(
            Collections.TIME_ENTRIES,
            lambda r: r.get("end_time") is None,
            owner_id=owner_id,
        )
        return sorted((entry_from_record(r) for r in rows), key=lambda e: e.start_time)

    def save(self, entry: TimeEntry) -> None:
        self._store.put(*entry_write(entry))

    def save_many(self, entries: Sequence[TimeEntry]) -> None:
        self._store.put_many([entry_write(e) for e in entries])

    def delete(self, entry_id: str) -> bool:
        return self._store.delete(Collections.TIME_ENTRIES, entry_id)

    def timer_lock(self, owner_id: str):
        return self._store.lock(f"timer:{owner_id}")
