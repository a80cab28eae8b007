"""Session resource schemas."""

from __future__ import annotations

from marshmallow import Schema, fields

from .common import Timestamp


class SessionSetSchema(Schema):
    id = fields.Raw(required=True)
    session_workout_id = fields.Raw()
    exercise_id = fields.Raw(allow_none=True)
    exercise_name = fields.String()
    day_index = fields.Integer(allow_none=True)
    target_sets = fields.Integer(allow_none=True)
    set_number = fields.Integer()
    target_reps = fields.Integer(allow_none=True)
    completed = fields.Boolean()
    actual_reps = fields.Integer(allow_none=True)
    completed_at = Timestamp()
    notes = fields.String(allow_none=True)


class SessionWorkoutSchema(Schema):
    id = fields.Raw(required=True)
    workout_id = fields.Raw(allow_none=True)
    workout_name = fields.String()
    position = fields.Integer(allow_none=True)
    sets = fields.List(fields.Nested(SessionSetSchema))


class SessionSchema(Schema):
    """Representation of a logged session with snapshotted names."""

    id = fields.Raw(required=True)
    plan_id = fields.Raw(allow_none=True)
    plan_name = fields.String(allow_none=True)
    day_index = fields.Integer()
    week_index = fields.Integer()
    mode = fields.String()
    status = fields.String()
    started_at = Timestamp()
    ended_at = Timestamp()
    duration_seconds = fields.Integer(allow_none=True)
    notes = fields.String(allow_none=True)
    created_at = Timestamp()
    workouts = fields.List(fields.Nested(SessionWorkoutSchema))
