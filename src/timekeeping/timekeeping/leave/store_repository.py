from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import LeaveStatus, LeaveType
from ..database.record_store import Collections, Record, RecordStore
from .model import TimeOffRequest
from .repository import LeaveRepository


def request_to_record(req: TimeOffRequest) -> Record:
    return {
        "request_id": req.request_id,
        "owner_id": req.owner_id,
        "leave_type": req.leave_type.value,
        "start_date": req.start_date.isoformat(),
        "end_date": req.end_date.isoformat(),
        "is_half_day": bool(req.is_half_day),
        "reason": req.reason,
        "status": req.status.value,
        "created_at": req.created_at.isoformat(),
        "decided_by": req.decided_by,
        "decided_at": req.decided_at.isoformat() if req.decided_at else None,
        "admin_note": req.admin_note,
    }


def request_from_record(r: Record) -> TimeOffRequest:
    return TimeOffRequest(
        request_id=str(r["request_id"]),
        owner_id=str(r["owner_id"]),
        leave_type=LeaveType(r["leave_type"]),
        start_date=date.fromisoformat(r["start_date"]),
        end_date=date.fromisoformat(r["end_date"]),
        is_half_day=bool(r.get("is_half_day", False)),
        reason=r.get("reason") or "",
        status=LeaveStatus(r["status"]),
        created_at=datetime.fromisoformat(r["created_at"]),
        decided_by=r.get("decided_by"),
        decided_at=datetime.fromisoformat(r["decided_at"]) if r.get("decided_at") else None,
        admin_note=r.get("admin_note"),
    )


class StoreLeaveRepository(LeaveRepository):
    def __init__(self, store: RecordStore):
        self._store = store

    def get(self, request_id: str) -> Optional[TimeOffRequest]:
        r = self._store.get(Collections.LEAVE_REQUESTS, request_id)
        return request_from_record(r) if r else None

    def save(self, request: TimeOffRequest) -> None:
        self._store.put(Collections.LEAVE_REQUESTS, request.request_id, request_to_record(request))

    def find(
        self,
        *,
        owner_id: Optional[str] = None,
        status: Optional[LeaveStatus] = None,
    ) -> Sequence[TimeOffRequest]:
        predicate = None
        if status is not None:
            predicate = lambda r: r.get("status") == status.value  # noqa: E731
        rows = self._store.query(Collections.LEAVE_REQUESTS, predicate, owner_id=owner_id)
        items = [request_from_record(r) for r in rows]
        items.sort(key=lambda q: (q.start_date, q.created_at, q.request_id))
        return items
