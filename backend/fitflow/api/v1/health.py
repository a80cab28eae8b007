"""Health check endpoint."""

from __future__ import annotations

from flask import Blueprint, current_app

from fitflow.api.deps import json_response, timing
from fitflow.core.extensions import get_store
from fitflow.store import DataStoreError

bp = Blueprint("health", __name__)


@bp.get("/health")
@timing
def healthcheck():
    """Return application and data store health information."""

    db_status = "ok"
    try:
        get_store().ping()
    except DataStoreError:
        current_app.logger.exception("healthcheck.db_error")
        db_status = "fail"
    version = current_app.config.get("APP_VERSION", "dev")
    payload = {"status": "ok", "db": db_status, "version": version}
    return json_response(payload, status=200 if db_status == "ok" else 503)
