"""Application services: the data-in/data-out core of fitflow.

Every service takes a :class:`~fitflow.store.TableStore` at construction time
and exposes verb-shaped operations returning frozen dataclasses or raising
:mod:`fitflow.services._shared.errors` exceptions.
"""

from fitflow.services.exercises.service import ExerciseService
from fitflow.services.plans.service import PlanService
from fitflow.services.sessions.service import SessionService
from fitflow.services.workouts.service import WorkoutService

__all__ = ["ExerciseService", "PlanService", "SessionService", "WorkoutService"]
