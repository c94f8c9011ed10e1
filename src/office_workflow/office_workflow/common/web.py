"""Helpers shared by the Flask controllers.

The caller identity (session["user_id"], session["role"]) is put there by the
authentication layer; controllers only read it.
"""

from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import jsonify, request, session

from ..core.enums import Permission, Role
from ..core.exceptions import ValidationError
from ..core.permissions import has_permission


def _session_role() -> Optional[Role]:
    try:
        return Role(session.get("role"))
    except ValueError:
        return None


def _session_user_id() -> Optional[int]:
    try:
        return int(session.get("user_id"))
    except (TypeError, ValueError):
        return None


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session or "role" not in session:
            return jsonify({"code": "AUTH_CONTEXT_ERROR", "message": "Authentication required"}), 401
        if _session_user_id() is None or _session_role() is None:
            return jsonify({"code": "AUTH_CONTEXT_ERROR", "message": "Invalid authentication context"}), 401
        return view(*args, **kwargs)

    return wrapper


def permission_required(permission: Permission):
    def decorator(view):
        @wraps(view)
        @login_required
        def wrapper(*args, **kwargs):
            if not has_permission(current_role(), permission):
                return (
                    jsonify(
                        {
                            "code": "AUTH_PERMISSION_DENIED",
                            "message": "You do not have permission to access this resource",
                        }
                    ),
                    403,
                )
            return view(*args, **kwargs)

        return wrapper

    return decorator


def current_user_id() -> int:
    return int(session["user_id"])


def current_role() -> Role:
    return Role(session.get("role"))


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def required_field(data: dict, name: str):
    value = data.get(name)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{name} is required")
    return value


def as_int(value, name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be an integer")
