"""Training session endpoints."""

from __future__ import annotations

from flask import Blueprint

from fitflow.api.deps import json_response, parse_limit, request_payload, session_service, timing
from fitflow.schemas import SessionSchema, build_meta

bp = Blueprint("sessions", __name__)

session_schema = SessionSchema()
session_list_schema = SessionSchema(many=True)


@bp.get("")
@timing
def list_sessions():
    """Return the most recently started sessions."""

    limit = parse_limit("SESSION_LIST_LIMIT")
    items = session_service().list_recent(limit=limit)
    return json_response({"data": session_list_schema.dump(items), "meta": build_meta(count=len(items), limit=limit)})


@bp.post("")
@timing
def start_session():
    """Start a session with snapshotted workouts and planned sets."""

    session = session_service().create(request_payload())
    return json_response({"data": session_schema.dump(session)}, status=201)


@bp.get("/<session_id>")
@timing
def get_session(session_id: str):
    session = session_service().get(session_id)
    return json_response({"data": session_schema.dump(session)})


@bp.route("/<session_id>/complete", methods=["PATCH", "POST"])
@timing
def complete_session(session_id: str):
    """Mark a session completed and record per-set outcomes."""

    session = session_service().complete(session_id, request_payload())
    return json_response({"data": session_schema.dump(session)})


@bp.route("/<session_id>/abort", methods=["PATCH", "POST"])
@timing
def abort_session(session_id: str):
    session = session_service().abort(session_id, request_payload().get("notes"))
    return json_response({"data": session_schema.dump(session)})
