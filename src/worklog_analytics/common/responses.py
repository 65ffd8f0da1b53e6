from __future__ import annotations

import logging
from functools import wraps

from flask import jsonify, request

from ..core.exceptions import DomainError, InternalError
from .serialization import to_json

logger = logging.getLogger(__name__)


def ok(data, **extra):
    body = {"success": True, "data": to_json(data)}
    body.update({k: to_json(v) for k, v in extra.items()})
    return jsonify(body), 200


def error(code: str, message: str, status: int, *, details=None):
    payload = {"code": code, "message": message}
    if details:
        payload["details"] = details
    return jsonify({"success": False, "error": payload}), status


def json_endpoint(failure_message: str):
    """Translate domain exceptions into the JSON error envelope.

    Unexpected exceptions are logged with their traceback and answered with a
    generic 500 that does not leak internals.
    """

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except InternalError:
                logger.exception("[%s %s] store failure", request.method, request.path)
                return error(InternalError.code, failure_message, 500)
            except DomainError as e:
                logger.warning("[%s %s] %s: %s", request.method, request.path, e.code, e)
                return error(e.code, str(e), e.status, details=getattr(e, "details", None))
            except Exception:
                logger.exception("[%s %s] unexpected error", request.method, request.path)
                return error(InternalError.code, failure_message, 500)

        return wrapper

    return decorator
