"""Exercise resource schemas."""

from __future__ import annotations

from marshmallow import Schema, fields

from .common import Timestamp


class ExerciseSchema(Schema):
    """Representation of a catalog exercise."""

    id = fields.Raw(required=True)
    name = fields.String(required=True)
    category = fields.String(allow_none=True)
    target_muscle = fields.String(allow_none=True)
    primary_muscle = fields.String(allow_none=True)
    secondary_muscles = fields.String(allow_none=True)
    equipment = fields.String(allow_none=True)
    tempo = fields.String(allow_none=True)
    target_sets = fields.Integer(allow_none=True)
    target_repetitions = fields.Integer(allow_none=True)
    notes = fields.String(allow_none=True)
    cues = fields.String(allow_none=True)
    video_url = fields.String(allow_none=True)
    created_at = Timestamp()
    updated_at = Timestamp()


class ExerciseOptionSchema(Schema):
    """Slim exercise projection for pickers."""

    id = fields.Raw(required=True)
    name = fields.String(required=True)
    category = fields.String(allow_none=True)
    target_muscle = fields.String(allow_none=True)
    primary_muscle = fields.String(allow_none=True)
