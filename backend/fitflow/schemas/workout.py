"""Workout resource schemas."""

from __future__ import annotations

from marshmallow import Schema, fields

from .common import Timestamp
from .exercise import ExerciseOptionSchema


class WorkoutExerciseSchema(Schema):
    """Exercise slot of a workout."""

    exercise_id = fields.Raw(required=True)
    position = fields.Integer(allow_none=True)
    target_sets = fields.Integer(allow_none=True)
    target_reps = fields.Integer(allow_none=True)
    notes = fields.String(allow_none=True)
    name = fields.String(allow_none=True)
    category = fields.String(allow_none=True)
    target_muscle = fields.String(allow_none=True)
    primary_muscle = fields.String(allow_none=True)


class WorkoutSchema(Schema):
    """Representation of a workout and its ordered exercises."""

    id = fields.Raw(required=True)
    name = fields.String(required=True)
    description = fields.String(allow_none=True)
    notes = fields.String(allow_none=True)
    video_url = fields.String(allow_none=True)
    rest_interval = fields.String(allow_none=True)
    performed_at = Timestamp()
    created_at = Timestamp()
    updated_at = Timestamp()
    exercise_ids = fields.List(fields.Raw(), dump_only=True)
    exercises = fields.List(fields.Nested(WorkoutExerciseSchema))


class WorkoutEditContextSchema(Schema):
    workout = fields.Nested(WorkoutSchema)
    exercise_options = fields.List(fields.Nested(ExerciseOptionSchema))
