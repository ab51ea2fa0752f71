from __future__ import annotations

from typing import Optional, Sequence

from ..core.constants import DEFAULT_CURRENCY
from ..database.record_store import Collections, RecordStore
from .model import SalaryConfig
from .repository import SalaryRepository


class StoreSalaryRepository(SalaryRepository):
    def __init__(self, store: RecordStore):
        self._store = store

    @staticmethod
    def _from_record(r) -> SalaryConfig:
        return SalaryConfig(
            owner_id=str(r["owner_id"]),
            base_salary=float(r.get("base_salary") or 0.0),
            currency=r.get("currency") or DEFAULT_CURRENCY,
        )

    def get(self, owner_id: str) -> Optional[SalaryConfig]:
        r = self._store.get(Collections.SALARY_CONFIGS, owner_id)
        return self._from_record(r) if r else None

    def save(self, config: SalaryConfig) -> None:
        self._store.put(
            Collections.SALARY_CONFIGS,
            config.owner_id,
            {
                "owner_id": config.owner_id,
                "base_salary": float(config.base_salary),
                "currency": config.currency,
            },
        )

    def list_all(self) -> Sequence[SalaryConfig]:
        rows = self._store.query(Collections.SALARY_CONFIGS)
        return sorted((self._from_record(r) for r in rows), key=lambda c: c.owner_id)
