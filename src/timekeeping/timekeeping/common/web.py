from __future__ import annotations

import dataclasses
import logging
from datetime import date, datetime
from enum import Enum
from functools import wraps
from typing import Any, Optional

from flask import Flask, g, jsonify, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import (
    AuthorizationError,
    ConflictError,
    DomainError,
    InsufficientHoursError,
    NotFoundError,
    PolicyGapError,
    ValidationError,
)
from ..identity.model import Identity, IdentityProvider
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)


def to_json(value: Any) -> Any:
    """Dataclasses, enums and dates into JSON-ready structures."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        data = {f.name: to_json(getattr(value, f.name)) for f in dataclasses.fields(value)}
        for name in ("is_open", "day_count", "total_hours", "can_submit", "meets_minimum"):
            attr = getattr(type(value), name, None)
            if isinstance(attr, property):
                data[name] = to_json(getattr(value, name))
        return data
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {to_json(k): to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [to_json(v) for v in value]
    return value


def ok(data: Any = None, status: int = 200):
    return jsonify({"success": True, "data": to_json(data)}), status


def json_body() -> dict:
    return request.get_json(silent=True) or {}


def date_arg(name: str, default: Optional[date] = None) -> date:
    raw = request.args.get(name)
    if not raw:
        if default is None:
            raise ValidationError(f"{name} is required", field=name)
        return default
    return parse_iso_date(raw, name)


def current_identity() -> Identity:
    return g.identity


def owner_for_request(identity: Identity) -> str:
    """Admins may look at another owner via ?owner_id=; members see themselves."""
    requested = request.args.get("owner_id")
    if requested and identity.is_admin:
        return requested
    return identity.owner_id


def make_guards(identity_provider: IdentityProvider):
    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            identity = identity_provider.current()
            if identity is None:
                return jsonify({"success": False, "message": "Please sign in to continue"}), 401
            g.identity = identity
            return view(*args, **kwargs)

        return wrapper

    def admin_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            identity = identity_provider.current()
            if identity is None:
                return jsonify({"success": False, "message": "Please sign in to continue"}), 401
            if not identity.is_admin:
                return jsonify({"success": False, "message": "Admins only"}), 403
            g.identity = identity
            return view(*args, **kwargs)

        return wrapper

    return login_required, admin_required


_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
    (InsufficientHoursError, 422),
    (PolicyGapError, 422),
)


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def domain_error(e: DomainError):
        status = next((code for cls, code in _STATUS_BY_ERROR if isinstance(e, cls)), 400)
        body = {"success": False, "error": type(e).__name__, "message": str(e)}
        if isinstance(e, ValidationError) and e.field:
            body["field"] = e.field
        if isinstance(e, InsufficientHoursError):
            body.update(shortfall=e.shortfall, total=e.total, required=e.required)
        if isinstance(e, PolicyGapError):
            body["computable"] = False
        logger.info("%s %s -> %s: %s", request.method, request.path, status, e)
        return jsonify(body), status

    @app.errorhandler(HTTPException)
    def http_error(e: HTTPException):
        return jsonify({"success": False, "error": e.name, "message": e.description}), e.code
