from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Optional

from flask import jsonify, session

from ..core.enums import Role
from ..core.exceptions import (
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    StorageError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def ok(data: Any = None, *, message: Optional[str] = None, status: int = 200, count: Optional[int] = None):
    body: dict[str, Any] = {"success": True, "data": data}
    if message:
        body["message"] = message
    if count is not None:
        body["count"] = count
    return jsonify(body), status


def fail(message: str, status: int, **extra: Any):
    body: dict[str, Any] = {"success": False, "message": message}
    body.update({k: v for k, v in extra.items() if v is not None})
    return jsonify(body), status


def error_response(e: DomainError):
    """Translate a domain exception into the JSON error envelope."""

    if isinstance(e, ValidationError):
        return fail(e.message, 400, errors=e.errors)
    if isinstance(e, AuthorizationError):
        return fail(e.message, 403)
    if isinstance(e, NotFoundError):
        return fail(e.message, 404)
    if isinstance(e, ConflictError):
        return fail(e.message, 409, data=e.existing)
    if isinstance(e, StorageError):
        logger.error("Storage failure: %s", e)
        return fail("Database error", 500)
    return fail(e.message, 400)


def current_user_id() -> int:
    return int(session["user_id"])


def current_role() -> Role:
    return Role(session.get("role"))


def roles_required(*roles: Role):
    """Reject requests without a session (401) or with another role (403).

    The session is filled in by the authentication service that shares
    SECRET_KEY with this app.
    """

    allowed = {r.value for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return fail("Not authorized to access this route", 401)
            if session.get("role") not in allowed:
                return fail(f"User role {session.get('role')} is not authorized to access this route", 403)
            return view(*args, **kwargs)

        return wrapper

    return decorator
