from __future__ import annotations

from functools import wraps

from flask import jsonify, session

from ..core.exceptions import (
    AuthorizationError,
    ConflictError,
    DomainError,
    DuplicateAttendanceError,
    NotFoundError,
    ValidationError,
)

_STATUS_BY_ERROR = (
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
    (DuplicateAttendanceError, 409),
    (ValidationError, 400),
)


def error_response(e: DomainError):
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(e, error_type):
            break
    else:
        status = 400
    body = {"success": False, "message": str(e)}
    if isinstance(e, ConflictError):
        body["conflict"] = e.conflict.kind.value
    return jsonify(body), status


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "email" not in session:
            return jsonify({"success": False, "message": "Please sign in"}), 401
        return view(*args, **kwargs)

    return wrapper
