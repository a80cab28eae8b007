"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, jsonify, request

from fitflow.core.extensions import get_store
from fitflow.schemas.common import LimitQuerySchema
from fitflow.services import ExerciseService, PlanService, SessionService, WorkoutService

F = TypeVar("F", bound=Callable[..., Any])


def parse_limit(config_key: str, max_limit: int = 200) -> int:
    """Parse ``?limit=`` using Marshmallow, defaulting to ``config[config_key]``."""

    default_limit = int(current_app.config.get(config_key, 20))
    schema = LimitQuerySchema(default_limit=default_limit, max_limit=max(max_limit, default_limit))
    return schema.load(request.args)["limit"]


def request_payload() -> dict[str, Any]:
    """Return the request body as a dict, from JSON or form encoding.

    Repeated form keys (``assignment_week[]=1&assignment_week[]=2``) become
    lists; single values stay scalars.
    """

    if request.is_json:
        body = request.get_json(silent=True)
        return dict(body) if isinstance(body, dict) else {}
    payload: dict[str, Any] = {}
    for key in request.form.keys():
        values = request.form.getlist(key)
        payload[key] = values if key.endswith("[]") or len(values) > 1 else values[0]
    return payload


def _read_workers() -> int:
    return int(current_app.config.get("READ_POOL_WORKERS", 4))


def _selection_limit() -> int:
    return int(current_app.config.get("SELECTION_LIST_LIMIT", 200))


def exercise_service() -> ExerciseService:
    return ExerciseService(get_store(), read_workers=_read_workers())


def workout_service() -> WorkoutService:
    return WorkoutService(get_store(), read_workers=_read_workers(), selection_limit=_selection_limit())


def plan_service() -> PlanService:
    return PlanService(get_store(), read_workers=_read_workers(), selection_limit=_selection_limit())


def session_service() -> SessionService:
    return SessionService(get_store(), read_workers=_read_workers())


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
