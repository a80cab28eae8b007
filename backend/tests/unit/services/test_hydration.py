# tests/unit/services/test_hydration.py
from __future__ import annotations

import logging

from fitflow.services._shared.hydration import distinct_keys, fetch_grouped, fetch_index
from fitflow.store import ErrorKind
from tests.factories.exercise import ExerciseFactory
from tests.factories.workout import WorkoutExerciseFactory, WorkoutFactory
from tests.helpers.faults import FaultyStore


def test_distinct_keys_compares_as_strings():
    assert distinct_keys([1, "1", None, 2, 2]) == [1, 2]


def test_fetch_grouped_keys_rows_by_string_id(store):
    first, second = WorkoutFactory(), WorkoutFactory()
    squat, bench = ExerciseFactory(), ExerciseFactory()
    WorkoutExerciseFactory(workout_id=first["id"], exercise_id=squat["id"], position=1)
    WorkoutExerciseFactory(workout_id=first["id"], exercise_id=bench["id"], position=2)
    WorkoutExerciseFactory(workout_id=second["id"], exercise_id=squat["id"], position=1)

    grouped = fetch_grouped(
        store, "workout_exercises", "workout_id", [first["id"], str(second["id"])], order_by=("position",)
    )

    assert set(grouped) == {str(first["id"]), str(second["id"])}
    assert [row["exercise_id"] for row in grouped[str(first["id"])]] == [squat["id"], bench["id"]]


def test_fetch_grouped_skips_the_store_without_keys(store):
    faulty = FaultyStore(store)

    assert fetch_grouped(faulty, "workout_exercises", "workout_id", [None]) == {}
    assert faulty.calls == []


def test_failed_lookup_degrades_to_empty_mapping(store, caplog):
    WorkoutFactory()
    faulty = FaultyStore(store)
    faulty.fail("select", "workouts", ErrorKind.OTHER)

    with caplog.at_level(logging.ERROR, logger="fitflow.services._shared.hydration"):
        assert fetch_index(faulty, "workouts", [1]) == {}

    assert "hydration.fetch_failed" in caplog.text


def test_fetch_index_returns_one_row_per_id(store):
    exercise = ExerciseFactory(name="Dip")

    index = fetch_index(store, "exercises", [exercise["id"]], columns=("id", "name"))

    assert index == {str(exercise["id"]): {"id": exercise["id"], "name": "Dip"}}
