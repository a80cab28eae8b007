"""Factory Boy definitions for workouts and their exercise links."""

from __future__ import annotations

import factory
from tests.factories import StoreFactory


class WorkoutFactory(StoreFactory):
    """Build persisted ``workouts`` rows."""

    _table = "workouts"

    name = factory.Sequence(lambda n: f"Workout {n}")
    description = factory.Faker("sentence")
    rest_interval = "90 s"


class WorkoutExerciseFactory(StoreFactory):
    """Build persisted ``workout_exercises`` rows; pass ``workout_id`` and ``exercise_id``."""

    _table = "workout_exercises"

    position = factory.Sequence(lambda n: n + 1)
    target_sets = None
    target_reps = None
