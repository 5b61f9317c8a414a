from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..core.exceptions import DomainError, ValidationError

logger = logging.getLogger(__name__)


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def error_response(code: str, message: str, status: int):
    return jsonify({"error": code, "message": message}), status


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        if e.http_status >= 500:
            logger.error("%s on %s %s: %s", e.code, request.method, request.path, e)
        else:
            logger.warning("%s on %s %s: %s", e.code, request.method, request.path, e)
        return error_response(e.code, str(e), e.http_status)

    @app.errorhandler(404)
    def handle_not_found(_e):
        return error_response("not_found", "Resource not found", 404)

    @app.errorhandler(405)
    def handle_method_not_allowed(_e):
        return error_response("method_not_allowed", "Method not allowed", 405)
