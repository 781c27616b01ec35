"""Shared helpers for the JSON controllers."""

from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Optional

from flask import jsonify, request

from ..core.exceptions import DuplicateRecordError, NotFoundError, ValidationError
from .serializers import to_json

logger = logging.getLogger(__name__)


def ok(data: Any = None, *, message: Optional[str] = None, status: int = 200, **extra):
    body: dict[str, Any] = {"success": True, "data": to_json(data)}
    if message:
        body["message"] = message
    for key, value in extra.items():
        body[key] = to_json(value)
    return jsonify(body), status


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def json_body() -> dict:
    body = request.get_json(silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def json_endpoint(view):
    """Map domain errors to HTTP status codes for a JSON route."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except NotFoundError as e:
            return fail(str(e), 404)
        except (ValidationError, DuplicateRecordError) as e:
            return fail(str(e), 400)
        except Exception:
            logger.exception("Unhandled error in %s %s", request.method, request.path)
            return fail("Internal server error", 500)

    return wrapper


def pagination(*, page: int, limit: int, total: int) -> dict:
    pages = (total + limit - 1) // limit if limit else 0
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": pages,
        "has_next": page < pages,
        "has_prev": page > 1,
    }
