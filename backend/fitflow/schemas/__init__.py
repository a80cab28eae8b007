"""Convenience exports for response and query schemas."""

from __future__ import annotations

from .common import LimitQuerySchema, Timestamp, TodayQuerySchema, build_meta
from .exercise import ExerciseOptionSchema, ExerciseSchema
from .plan import PlanEditContextSchema, PlanSchema, PlanScheduleSchema, PlanTodaySchema
from .session import SessionSchema
from .workout import WorkoutEditContextSchema, WorkoutSchema

__all__ = [
    "LimitQuerySchema",
    "Timestamp",
    "TodayQuerySchema",
    "build_meta",
    "ExerciseSchema",
    "ExerciseOptionSchema",
    "PlanSchema",
    "PlanScheduleSchema",
    "PlanEditContextSchema",
    "PlanTodaySchema",
    "SessionSchema",
    "WorkoutSchema",
    "WorkoutEditContextSchema",
]
