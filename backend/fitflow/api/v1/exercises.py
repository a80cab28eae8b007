"""Exercise endpoints."""

from __future__ import annotations

from flask import Blueprint

from fitflow.api.deps import exercise_service, json_response, parse_limit, request_payload, timing
from fitflow.schemas import ExerciseOptionSchema, ExerciseSchema, build_meta

bp = Blueprint("exercises", __name__)

exercise_schema = ExerciseSchema()
exercise_list_schema = ExerciseSchema(many=True)
option_list_schema = ExerciseOptionSchema(many=True)


@bp.get("")
@timing
def list_exercises():
    """Return exercises alphabetically."""

    limit = parse_limit("EXERCISE_LIST_LIMIT", max_limit=500)
    items = exercise_service().list(limit=limit)
    return json_response({"data": exercise_list_schema.dump(items), "meta": build_meta(count=len(items), limit=limit)})


@bp.get("/options")
@timing
def list_exercise_options():
    """Return the slim exercise list used by workout pickers."""

    limit = parse_limit("SELECTION_LIST_LIMIT", max_limit=500)
    items = exercise_service().options(limit=limit)
    return json_response({"data": option_list_schema.dump(items)})


@bp.post("")
@timing
def create_exercise():
    """Create a catalog exercise."""

    exercise = exercise_service().create(request_payload())
    return json_response({"data": exercise_schema.dump(exercise)}, status=201)


@bp.get("/<exercise_id>")
@timing
def get_exercise(exercise_id: str):
    exercise = exercise_service().get(exercise_id)
    return json_response({"data": exercise_schema.dump(exercise)})


@bp.route("/<exercise_id>", methods=["PUT", "PATCH"])
@timing
def update_exercise(exercise_id: str):
    """Replace an exercise's fields."""

    exercise = exercise_service().update(exercise_id, request_payload())
    return json_response({"data": exercise_schema.dump(exercise)})


@bp.delete("/<exercise_id>")
@timing
def delete_exercise(exercise_id: str):
    exercise_service().delete(exercise_id)
    return "", 204
