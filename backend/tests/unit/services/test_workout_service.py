# tests/unit/services/test_workout_service.py
from __future__ import annotations

from datetime import datetime

import pytest
from sqlalchemy import text

from fitflow.services import WorkoutService
from fitflow.services._shared.errors import (
    NotFoundError,
    PermissionDeniedError,
    StoreError,
    ValidationError,
)
from fitflow.services.exercises.payload import URL_MESSAGE
from fitflow.store import ErrorKind
from tests.factories.exercise import ExerciseFactory
from tests.factories.workout import WorkoutFactory
from tests.helpers.faults import FaultyStore


# ------------------------------ Fixtures ---------------------------------- #
@pytest.fixture()
def service(store) -> WorkoutService:
    return WorkoutService(store)


@pytest.fixture()
def exercises(store):
    return [ExerciseFactory(name=name) for name in ("Squat", "Bench", "Row")]


# ------------------------------- Create ----------------------------------- #
def test_exercises_keep_submission_order(service, exercises):
    squat, bench, row = exercises

    workout = service.create({"name": "Full body"}, [row["id"], squat["id"], bench["id"]])

    assert workout.exercise_ids == [row["id"], squat["id"], bench["id"]]
    assert [item.position for item in workout.exercises] == [1, 2, 3]
    assert [item.name for item in workout.exercises] == ["Row", "Squat", "Bench"]


@pytest.mark.parametrize("shape", ["json", "csv", "form"])
def test_exercise_ids_accept_several_encodings(service, exercises, shape):
    ids = [str(item["id"]) for item in exercises]
    raw = {
        "json": {"exercise_ids": "[" + ", ".join(f'"{value}"' for value in ids) + "]"},
        "csv": {"exercise_ids": ",".join(ids)},
        "form": {"exercise_ids[]": ids},
    }[shape]

    workout = service.create({"name": "Encoded", **raw})

    assert [str(value) for value in workout.exercise_ids] == ids


def test_structured_entries_carry_overrides_and_skip_duplicates(service, exercises):
    squat, bench, _ = exercises

    workout = service.create(
        {
            "name": "Strength",
            "exercises": [
                {"exercise_id": bench["id"], "target_sets": "5", "target_reps": 5, "notes": " heavy "},
                {"id": squat["id"]},
                {"exercise_id": bench["id"], "target_sets": 1},
            ],
        }
    )

    first, second = workout.exercises
    assert (first.exercise_id, first.target_sets, first.target_reps, first.notes) == (bench["id"], 5, 5, "heavy")
    assert (second.exercise_id, second.target_sets, second.position) == (squat["id"], None, 2)


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ({"name": ""}, "Workout name is required"),
        ({"name": "W", "video_url": "not a url"}, URL_MESSAGE),
        ({"name": "W", "performed_at": "someday"}, "Session date is invalid"),
        ({"name": "W", "exercises": [{"exercise_id": 1, "target_sets": "x"}]}, "Target sets must be a positive whole number"),
    ],
)
def test_create_rejects_invalid_payloads(service, store, payload, message):
    with pytest.raises(ValidationError) as info:
        service.create(payload)

    assert str(info.value) == message
    assert store.select("workouts") == []


def test_failed_link_insert_removes_the_workout(store, exercises):
    faulty = FaultyStore(store)
    faulty.fail("insert", "workout_exercises", ErrorKind.OTHER)

    with pytest.raises(StoreError) as info:
        WorkoutService(faulty).create({"name": "Doomed"}, [item["id"] for item in exercises])

    assert str(info.value) == "Unable to connect exercises to workout"
    assert store.select("workouts") == []
    assert store.select("workout_exercises") == []


def test_unexpected_link_error_still_removes_the_workout(store, exercises):
    faulty = FaultyStore(store)
    faulty.fail("insert", "workout_exercises", error=RuntimeError("connection reset"))

    with pytest.raises(RuntimeError):
        WorkoutService(faulty).create({"name": "Doomed"}, [item["id"] for item in exercises])

    assert store.select("workouts") == []


def test_blocked_link_insert_reports_permission_hint(store, exercises):
    faulty = FaultyStore(store)
    faulty.fail("insert", "workout_exercises", ErrorKind.PERMISSION_DENIED)

    with pytest.raises(PermissionDeniedError) as info:
        WorkoutService(faulty).create({"name": "Blocked"}, [exercises[0]["id"]])

    assert "workout exercises" in str(info.value)
    assert store.select("workouts") == []


def test_create_without_ordering_column(store, engine, service, exercises):
    with engine.begin() as conn:
        conn.execute(text("ALTER TABLE workout_exercises DROP COLUMN order_index"))
    store.refresh()

    workout = service.create({"name": "Legacy"}, [item["id"] for item in exercises])

    assert [item.position for item in workout.exercises] == [1, 2, 3]


# ------------------------------- Update ----------------------------------- #
def test_update_replaces_exercise_list(service, exercises):
    squat, bench, row = exercises
    workout = service.create({"name": "Upper"}, [squat["id"], bench["id"]])

    updated = service.update(workout.id, {"name": "Upper B", "rest_interval": "2 min"}, [bench["id"], row["id"]])

    assert updated.name == "Upper B"
    assert updated.rest_interval == "2 min"
    assert updated.exercise_ids == [bench["id"], row["id"]]
    assert [item.position for item in updated.exercises] == [1, 2]


def test_update_unknown_workout_is_not_found(service):
    with pytest.raises(NotFoundError) as info:
        service.update(999, {"name": "Ghost"})

    assert str(info.value) == "Workout not found"


def test_delete_cascades_links(service, store, exercises):
    workout = service.create({"name": "Temp"}, [exercises[0]["id"]])

    service.delete(workout.id)

    assert store.select("workout_exercises") == []
    with pytest.raises(NotFoundError):
        service.get(workout.id)


# -------------------------------- Reads ----------------------------------- #
def test_list_orders_by_performed_at_desc(service):
    WorkoutFactory(name="Old", performed_at=datetime(2024, 1, 1))
    WorkoutFactory(name="New", performed_at=datetime(2024, 3, 1))
    WorkoutFactory(name="Mid", performed_at=datetime(2024, 2, 1))

    assert [item.name for item in service.list()] == ["New", "Mid", "Old"]
    assert len(service.list(limit=1)) == 1


def test_get_degrades_when_links_cannot_be_read(store, exercises):
    workout = WorkoutService(store).create({"name": "Partial"}, [exercises[0]["id"]])
    faulty = FaultyStore(store)
    faulty.fail("select", "workout_exercises")

    loaded = WorkoutService(faulty).get(workout.id)

    assert loaded.name == "Partial"
    assert loaded.exercises == ()


def test_edit_context_loads_workout_and_options(service, exercises):
    workout = service.create({"name": "Edit me"}, [exercises[1]["id"]])

    context = service.edit_context(workout.id)

    assert context.workout.id == workout.id
    assert [option.name for option in context.exercise_options] == ["Bench", "Row", "Squat"]


def test_edit_context_survives_option_failure(store, exercises):
    workout = WorkoutService(store).create({"name": "Edit me"})
    faulty = FaultyStore(store)
    faulty.fail("select", "exercises", match=lambda call: call["where_in"] is None)

    context = WorkoutService(faulty).edit_context(workout.id)

    assert context.workout.name == "Edit me"
    assert context.exercise_options == ()


def test_edit_context_unknown_workout(service):
    with pytest.raises(NotFoundError):
        service.edit_context(12345)
