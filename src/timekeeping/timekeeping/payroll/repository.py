from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import SalaryConfig


class SalaryRepository(Protocol):
    def get(self, owner_id: str) -> Optional[SalaryConfig]:
        raise NotImplementedError

    def save(self, config: SalaryConfig) -> None:
        raise NotImplementedError

    def list_all(self) -> Sequence[SalaryConfig]:
        raise NotImplementedError
