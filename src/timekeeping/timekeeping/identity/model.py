from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from ..core.enums import Role


@dataclass(frozen=True)
class Identity:
    """Authenticated caller as supplied by the external auth system."""

    owner_id: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class IdentityProvider(Protocol):
    def current(self) -> Optional[Identity]:
        raise NotImplementedError
