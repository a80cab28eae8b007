"""Plan resource schemas.

The schedule grid is rendered with camelCase keys (``hasWorkouts``,
``dayHeaders``) because the calendar widgets read it as-is.
"""

from __future__ import annotations

from marshmallow import Schema, fields

from .common import Timestamp
from .workout import WorkoutSchema


class WorkoutRefSchema(Schema):
    id = fields.Raw(required=True)
    name = fields.String()
    description = fields.String(allow_none=True)


class PlanAssignmentSchema(Schema):
    """Stored assignment of a workout to a week/day cell."""

    workout_id = fields.Raw(required=True)
    week_index = fields.Integer(allow_none=True)
    day_of_week = fields.Integer(allow_none=True)
    position = fields.Integer(allow_none=True)
    workout_name = fields.String(allow_none=True)
    workout = fields.Nested(WorkoutRefSchema, allow_none=True)


class ScheduleWorkoutSchema(Schema):
    id = fields.Raw(required=True)
    name = fields.String()
    position = fields.Integer(allow_none=True)


class ScheduleDaySchema(Schema):
    day_index = fields.Integer(data_key="dayIndex")
    day_key = fields.String(data_key="dayKey")
    day_name = fields.String(data_key="dayName")
    workouts = fields.List(fields.Nested(ScheduleWorkoutSchema))


class ScheduleWeekSchema(Schema):
    number = fields.Integer()
    days = fields.List(fields.Nested(ScheduleDaySchema))
    has_workouts = fields.Boolean(data_key="hasWorkouts")


class DayHeaderSchema(Schema):
    key = fields.String()
    label = fields.String()


class PlanScheduleSchema(Schema):
    """Complete week x day grid of a plan."""

    weeks = fields.List(fields.Nested(ScheduleWeekSchema))
    has_workouts = fields.Boolean(data_key="hasWorkouts")
    day_headers = fields.List(fields.Nested(DayHeaderSchema), data_key="dayHeaders")


class PlanSchema(Schema):
    """Representation of a plan, its assignments and schedule."""

    id = fields.Raw(required=True)
    name = fields.String(required=True)
    description = fields.String(allow_none=True)
    label = fields.String(allow_none=True)
    period = fields.String()
    status = fields.String()
    created_at = Timestamp()
    updated_at = Timestamp()
    assignments = fields.List(fields.Nested(PlanAssignmentSchema))
    schedule = fields.Nested(PlanScheduleSchema)


class WorkoutOptionSchema(Schema):
    id = fields.Raw(required=True)
    name = fields.String()
    rest_interval = fields.String(allow_none=True)
    description = fields.String(allow_none=True)


class PlanEditContextSchema(Schema):
    plan = fields.Nested(PlanSchema)
    workout_options = fields.List(fields.Nested(WorkoutOptionSchema))


class PlanTodaySchema(Schema):
    """What the session tracker shows for one date."""

    plan = fields.Nested(PlanSchema, allow_none=True)
    week_index = fields.Integer()
    day_of_week = fields.Integer()
    day = fields.Nested(ScheduleDaySchema, allow_none=True)
    workouts = fields.List(fields.Nested(WorkoutSchema))
