from __future__ import annotations

from typing import Optional

from flask import session

from ..core.enums import Role
from .model import Identity, IdentityProvider


class FlaskSessionIdentityProvider(IdentityProvider):
    """Reads the identity the login flow stored in the Flask session.

    Expects ``user_id`` and ``role`` keys; unknown roles fall back to member.
    """

    def current(self) -> Optional[Identity]:
        user_id = session.get("user_id")
        if user_id is None or str(user_id).strip() == "":
            return None
        try:
            role = Role(session.get("role", Role.MEMBER.value))
        except ValueError:
            role = Role.MEMBER
        return Identity(owner_id=str(user_id), role=role)
