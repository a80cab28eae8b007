"""Declared schema for the fitflow tables.

Importing this package registers every table on the shared metadata so that
``db.create_all()`` (or ``metadata.create_all(engine)``) builds the full schema.
"""

from .exercise import Exercise
from .plan import Plan, PlanWorkout
from .session import SessionSet, SessionWorkout, TrainingSession
from .workout import Workout, WorkoutExercise

__all__ = [
    "Exercise",
    "Plan",
    "PlanWorkout",
    "SessionSet",
    "SessionWorkout",
    "TrainingSession",
    "Workout",
    "WorkoutExercise",
]
