from __future__ import annotations

import copy
import os
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional

import pytest

os.environ.setdefault("APP_ENV", "testing")

from src.timekeeping.timekeeping.container import build_services
from src.timekeeping.timekeeping.core.exceptions import LockTimeoutError
from src.timekeeping.timekeeping.identity.model import Identity


class InMemoryRecordStore:
    """Dict-backed record store with real per-name locks."""

    def __init__(self, *, lock_timeout: float = 5.0):
        self._data: dict[tuple[str, str], dict] = {}
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}
        self.lock_timeout = lock_timeout

    def get(self, collection, key):
        with self._guard:
            r = self._data.get((collection, key))
            return copy.deepcopy(r) if r is not None else None

    def put(self, collection, key, record):
        with self._guard:
            self._data[(collection, key)] = copy.deepcopy(record)

    def put_many(self, items):
        with self._guard:
            for collection, key, record in items:
                self._data[(collection, key)] = copy.deepcopy(record)

    def delete(self, collection, key):
        with self._guard:
            return self._data.pop((collection, key), None) is not None

    def query(self, collection, predicate=None, *, owner_id=None):
        with self._guard:
            rows = [copy.deepcopy(r) for (c, _), r in self._data.items() if c == collection]
        if owner_id is not None:
            rows = [r for r in rows if str(r.get("owner_id")) == str(owner_id)]
        if predicate is not None:
            rows = [r for r in rows if predicate(r)]
        return rows

    @contextmanager
    def lock(self, name, *, timeout: Optional[float] = None):
        with self._guard:
            lock = self._locks.setdefault(name, threading.Lock())
        if not lock.acquire(timeout=self.lock_timeout if timeout is None else timeout):
            raise LockTimeoutError(f"Timed out waiting for lock {name}")
        try:
            yield
        finally:
            lock.release()


@dataclass
class FixedClock:
    current: datetime

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current


@dataclass
class StaticIdentityProvider:
    identity: Optional[Identity] = field(default=None)

    def current(self) -> Optional[Identity]:
        return self.identity


@pytest.fixture
def clock():
    # Monday
    return FixedClock(datetime(2025, 9, 1, 9, 0, 0))


@pytest.fixture
def store():
    return InMemoryRecordStore()


@pytest.fixture
def services(store, clock):
    return build_services(store, clock=clock, identity=StaticIdentityProvider())
