from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..core.exceptions import (
    DomainError,
    DuplicateRecordError,
    EventStateError,
    FaceVerificationError,
    NotFoundError,
    PersistenceError,
    ServiceUnavailableError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (NotFoundError, 404),
    (FaceVerificationError, 403),
    (EventStateError, 409),
    (DuplicateRecordError, 409),
    (PersistenceError, 503),
    (ServiceUnavailableError, 503),
)


def status_for(exc: DomainError) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status
    return 400


def json_payload() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def require_field(data: dict, name: str):
    if name not in data or data[name] is None or data[name] == "":
        raise ValidationError(f"{name} is required")
    return data[name]


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        status = status_for(exc)
        if status >= 500:
            logger.error("Request %s %s failed: %s", request.method, request.path, exc)
        return jsonify({"error": str(exc), "type": type(exc).__name__}), status
