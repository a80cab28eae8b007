"""Workout endpoints."""

from __future__ import annotations

from flask import Blueprint

from fitflow.api.deps import json_response, parse_limit, request_payload, timing, workout_service
from fitflow.schemas import WorkoutEditContextSchema, WorkoutSchema, build_meta

bp = Blueprint("workouts", __name__)

workout_schema = WorkoutSchema()
workout_list_schema = WorkoutSchema(many=True)
edit_context_schema = WorkoutEditContextSchema()


@bp.get("")
@timing
def list_workouts():
    """Return the most recently performed workouts."""

    limit = parse_limit("WORKOUT_LIST_LIMIT")
    items = workout_service().list(limit=limit)
    return json_response({"data": workout_list_schema.dump(items), "meta": build_meta(count=len(items), limit=limit)})


@bp.post("")
@timing
def create_workout():
    """Create a workout; ``exercise_ids`` (or ``exercises``) sets its exercise order."""

    workout = workout_service().create(request_payload())
    return json_response({"data": workout_schema.dump(workout)}, status=201)


@bp.get("/<workout_id>")
@timing
def get_workout(workout_id: str):
    workout = workout_service().get(workout_id)
    return json_response({"data": workout_schema.dump(workout)})


@bp.get("/<workout_id>/edit")
@timing
def edit_workout(workout_id: str):
    """Return the workout together with the exercise picker options."""

    context = workout_service().edit_context(workout_id)
    return json_response({"data": edit_context_schema.dump(context)})


@bp.route("/<workout_id>", methods=["PUT", "PATCH"])
@timing
def update_workout(workout_id: str):
    workout = workout_service().update(workout_id, request_payload())
    return json_response({"data": workout_schema.dump(workout)})


@bp.delete("/<workout_id>")
@timing
def delete_workout(workout_id: str):
    workout_service().delete(workout_id)
    return "", 204
