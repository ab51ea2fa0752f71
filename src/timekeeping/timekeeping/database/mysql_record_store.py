from __future__ import annotations

import hashlib
import json
from typing import Optional, Sequence, Tuple

from ..core.constants import DEFAULT_LOCK_TIMEOUT_SECONDS
from .connection import DatabaseConnection
from .mysql_base import db_cursor, fetchall, fetchone, named_lock
from .record_store import Predicate, Record, RecordStore

_UPSERT_SQL = """
    INSERT INTO records(collection, record_key, owner_id, data)
    VALUES(%s,%s,%s,%s)
    ON DUPLICATE KEY UPDATE owner_id=VALUES(owner_id), data=VALUES(data)
"""

# MySQL rejects GET_LOCK names longer than this.
_MAX_LOCK_NAME = 64


class MySQLRecordStore(RecordStore):
    def __init__(self, conn_factory: DatabaseConnection, *, lock_timeout: int = DEFAULT_LOCK_TIMEOUT_SECONDS):
        self._conn_factory = conn_factory
        self._lock_timeout = int(lock_timeout)

    @staticmethod
    def _params(collection: str, key: str, record: Record) -> tuple:
        owner_id = record.get("owner_id")
        return (
            collection,
            str(key),
            str(owner_id) if owner_id is not None else None,
            json.dumps(record, ensure_ascii=False),
        )

    def get(self, collection: str, key: str) -> Optional[Record]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT data FROM records WHERE collection=%s AND record_key=%s",
                (collection, str(key)),
            )
            r = fetchone(cur)
            if not r:
                return None
            return json.loads(r["data"])

    def put(self, collection: str, key: str, record: Record) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_UPSERT_SQL, self._params(collection, key, record))

    def put_many(self, items: Sequence[Tuple[str, str, Record]]) -> None:
        if not items:
            return
        # One connection, one commit: db_cursor rolls the whole batch back on failure.
        with db_cursor(self._conn_factory) as (_, cur):
            for collection, key, record in items:
                cur.execute(_UPSERT_SQL, self._params(collection, key, record))

    def delete(self, collection: str, key: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM records WHERE collection=%s AND record_key=%s",
                (collection, str(key)),
            )
            return cur.rowcount > 0

    def query(
        self,
        collection: str,
        predicate: Optional[Predicate] = None,
        *,
        owner_id: Optional[str] = None,
    ) -> Sequence[Record]:
        clauses = ["collection=%s"]
        params: list[object] = [collection]
        if owner_id is not None:
            clauses.append("owner_id=%s")
            params.append(str(owner_id))

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT data FROM records WHERE {where} ORDER BY record_key ASC",
                tuple(params),
            )
            rows = fetchall(cur)

        records = [json.loads(r["data"]) for r in rows]
        if predicate is None:
            return records
        return [r for r in records if predicate(r)]

    def lock(self, name: str, *, timeout: Optional[int] = None):
        lock_name = f"timekeeping:{name}"
        if len(lock_name) > _MAX_LOCK_NAME:
            lock_name = "timekeeping:" + hashlib.sha1(name.encode("utf-8")).hexdigest()
        return named_lock(
            self._conn_factory,
            lock_name,
            timeout=self._lock_timeout if timeout is None else int(timeout),
        )
