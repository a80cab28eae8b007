"""Centralized JSON (RFC 7807) error handling for the API."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any

from flask import Flask, Response, jsonify, request
from markupsafe import escape
from marshmallow import ValidationError as MarshmallowValidationError
from werkzeug.exceptions import HTTPException

from fitflow.core.logger import ensure_request_id
from fitflow.services._shared.errors import (
    NotFoundError,
    PermissionDeniedError,
    SchemaMismatchError,
    ServiceError,
    StoreError,
    ValidationError,
)

log = logging.getLogger(__name__)

HX_REQUEST_HEADER = "HX-Request"

# Error fragment swapped into the page by htmx-driven forms.
ERROR_FRAGMENT = (
    '<p class="rounded-lg border border-red-200 bg-red-50 p-3 text-sm text-red-700 '
    'dark:border-orange/40 dark:bg-orange/10 dark:text-orange">{message}</p>'
)

# Service error -> (status, stable code); first match wins.
SERVICE_ERROR_STATUS: tuple[tuple[type[ServiceError], HTTPStatus, str], ...] = (
    (ValidationError, HTTPStatus.BAD_REQUEST, "validation_error"),
    (NotFoundError, HTTPStatus.NOT_FOUND, "not_found"),
    (PermissionDeniedError, HTTPStatus.FORBIDDEN, "permission_denied"),
    (SchemaMismatchError, HTTPStatus.SERVICE_UNAVAILABLE, "schema_mismatch"),
    (StoreError, HTTPStatus.INTERNAL_SERVER_ERROR, "store_error"),
)


def _http_status_to_code(status_code: int) -> str:
    """Map common HTTP status codes to canonical, stable error codes."""
    mapping = {
        400: "bad_request",
        403: "forbidden",
        404: "not_found",
        405: "method_not_allowed",
        413: "payload_too_large",
        415: "unsupported_media_type",
        422: "unprocessable_entity",
        500: "internal_server_error",
        503: "service_unavailable",
    }
    return mapping.get(status_code, "error")


def _as_problem(
    *,
    status: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Build an RFC 7807 Problem Details dict.

    :param status: HTTP status code.
    :param code: Stable machine-consumable error code.
    :param message: Human-readable error summary (safe for clients).
    :param details: Optional safe, structured details.
    :returns: Problem+JSON dictionary.
    :rtype: dict
    """
    problem = {
        "type": "about:blank",
        "title": HTTPStatus(status).phrase,
        "status": status,
        "detail": message,
        "instance": request.path if request else None,
        "code": code,
    }
    if details:
        problem["details"] = details
    problem["request_id"] = ensure_request_id()
    return problem


def _problem_response(problem: dict[str, Any]) -> Response:
    """Return a Flask response with ``application/problem+json`` media type."""
    resp = jsonify(problem)
    resp.mimetype = "application/problem+json"
    return resp


def wants_fragment() -> bool:
    """Return ``True`` when the request comes from an htmx swap."""
    return bool(request.headers.get(HX_REQUEST_HEADER))


def error_fragment(message: str) -> str:
    """Render ``message`` (HTML-escaped) inside the inline error paragraph."""
    return ERROR_FRAGMENT.format(message=escape(message))


def _respond(status: int, code: str, message: str, details: dict[str, Any] | None = None):
    if wants_fragment():
        return Response(error_fragment(message), status=status, mimetype="text/html")
    return _problem_response(_as_problem(status=status, code=code, message=message, details=details)), status


def service_error_status(err: ServiceError) -> tuple[HTTPStatus, str]:
    """Resolve the HTTP status and code for a service error."""
    for error_type, status, code in SERVICE_ERROR_STATUS:
        if isinstance(err, error_type):
            return status, code
    return HTTPStatus.INTERNAL_SERVER_ERROR, "internal_server_error"


def init_app(app: Flask) -> None:
    """
    Attach JSON error handlers to the Flask app.

    Notes
    -----
    - Guarantees RFC 7807 responses for all handled errors, or the inline
      HTML fragment when the request carries ``HX-Request``.
    - Only the service error message reaches the client; store details stay
      in the server logs.
    """

    @app.errorhandler(ServiceError)
    def handle_service_error(err: ServiceError):
        status, code = service_error_status(err)
        message = str(err)
        level = log.error if status >= 500 else log.warning
        level(
            "ServiceError: code=%s status=%s msg=%s request_id=%s",
            code,
            int(status),
            message,
            ensure_request_id(),
        )
        return _respond(int(status), code, message)

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = int(err.code or HTTPStatus.INTERNAL_SERVER_ERROR)
        error_code = _http_status_to_code(status)
        message = (err.description or error_code.replace("_", " ").capitalize()).strip()
        if status == HTTPStatus.NOT_FOUND and request:
            message = f"Route '{request.path}' not found"
        level = log.error if status >= 500 else log.warning
        level(
            "HTTPException: code=%s status=%s detail=%s request_id=%s",
            error_code,
            status,
            message,
            ensure_request_id(),
        )
        return _respond(status, error_code, message)

    @app.errorhandler(MarshmallowValidationError)
    def handle_validation_error(err: MarshmallowValidationError):
        log.warning("ValidationError: request_id=%s", ensure_request_id())
        return _respond(
            int(HTTPStatus.UNPROCESSABLE_ENTITY),
            "validation_error",
            "Validation failed",
            details={"errors": err.messages},
        )

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        # Never leak internal details
        log.error(
            "Unhandled exception: request_id=%s",
            ensure_request_id(),
            exc_info=True,
        )
        return _respond(
            int(HTTPStatus.INTERNAL_SERVER_ERROR),
            "internal_server_error",
            "Unexpected error",
        )


__all__ = ["error_fragment", "init_app", "service_error_status", "wants_fragment"]
