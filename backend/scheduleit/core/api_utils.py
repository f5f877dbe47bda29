"""
Common API utilities for consistent response formatting across all controllers.
"""

import logging
from typing import Any, Optional

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from scheduleit.core.exceptions import (
    NotFoundError,
    OperationCancelledError,
    ValidationError,
)
from scheduleit.domain.exceptions import DomainRuleViolation

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred."


def api_response(
    success: bool, message: str, data: Optional[Any] = None, status_code: int = 200
) -> tuple:
    """
    Standardized API response format for all endpoints.

    Args:
        success: Whether the operation was successful
        message: Human-readable message about the operation
        data: Optional data payload
        status_code: HTTP status code

    Returns:
        Tuple of (json_response, status_code)
    """
    response = {"success": success, "message": message}

    if data is not None:
        response["data"] = data

    return jsonify(response), status_code


def error_response(message: str, kind: str, status_code: int) -> tuple:
    """Error envelope: ``{"success": false, "message": ..., "error": kind}``."""
    return (
        jsonify({"success": False, "message": message, "error": kind}),
        status_code,
    )


def register_error_handlers(app: Flask) -> None:
    """Translate application and domain errors into JSON responses."""

    @app.errorhandler(NotFoundError)
    def handle_not_found(e: NotFoundError):
        return error_response(e.message, "not_found", 404)

    @app.errorhandler(ValidationError)
    def handle_validation(e: ValidationError):
        return error_response(e.message, "validation", 400)

    @app.errorhandler(DomainRuleViolation)
    def handle_domain_rule(e: DomainRuleViolation):
        return error_response(e.message, "domain_rule_violation", 400)

    @app.errorhandler(OperationCancelledError)
    def handle_cancelled(e: OperationCancelledError):
        return error_response(e.message, "operation_cancelled", 503)

    @app.errorhandler(HTTPException)
    def handle_http(e: HTTPException):
        return error_response(e.description or e.name, "http_error", e.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.error(
            "Unhandled error",
            extra={"context": {"error_type": type(e).__name__}},
            exc_info=e,
        )
        return error_response(UNEXPECTED_ERROR_MESSAGE, "internal_error", 500)
