# tests/unit/services/test_session_payload.py
from __future__ import annotations

from datetime import datetime, timezone

import pytest

from fitflow.services.sessions.dto import SessionExerciseIn, SessionSetIn
from fitflow.services.sessions.payload import (
    build_completion_payload,
    build_session_payload,
    build_session_set_rows,
    clamp_day_index,
)


@pytest.mark.parametrize(("raw", "expected"), [("3", 3), (9, 7), ("x", 1), (None, 1), ("0", 1)])
def test_clamp_day_index(raw, expected):
    assert clamp_day_index(raw) == expected


def test_session_row_defaults():
    row, workouts = build_session_payload({"plan_id": "4", "plan_name": " Base ", "mode": "sprint"})

    assert row == {"plan_id": 4, "plan_name": "Base", "day_index": 1, "week_index": 1, "mode": "focus"}
    assert workouts == []


def test_names_are_snapshotted_with_fallbacks():
    _, workouts = build_session_payload(
        {
            "mode": "Circuit",
            "workouts": [
                {"id": "12", "exercises": [{"exercise_id": 5}, {}]},
                {"name": " Core ", "position": "9"},
                {},
            ],
        }
    )

    first, second, third = workouts
    assert (first.workout_id, first.workout_name, first.position) == (12, "12", 1)
    assert [e.exercise_name for e in first.exercises] == ["5", "Exercise 2"]
    assert (second.workout_name, second.position) == ("Core", 9)
    assert (third.workout_id, third.workout_name, third.position) == (None, "Workout 3", 3)


def test_explicit_sets_are_numbered_and_inherit_target_reps():
    _, workouts = build_session_payload(
        {
            "workouts": [
                {
                    "id": 1,
                    "exercises": [
                        {
                            "id": 2,
                            "name": "Squat",
                            "target_reps": "8",
                            "sets": [{"index": 1}, {"set_number": 3, "target_reps": 5}, {}],
                        }
                    ],
                }
            ]
        }
    )

    exercise = workouts[0].exercises[0]
    assert exercise.target_sets == 3
    assert exercise.sets == (
        SessionSetIn(set_number=1, target_reps=8),
        SessionSetIn(set_number=3, target_reps=5),
        SessionSetIn(set_number=3, target_reps=8),
    )


def test_set_rows_are_synthesized_from_target_sets():
    rows = build_session_set_rows(
        10, SessionExerciseIn(exercise_id=2, exercise_name="Row", target_sets=3, target_reps=10), 4
    )

    assert [(r["set_number"], r["target_reps"], r["day_index"]) for r in rows] == [(1, 10, 4), (2, 10, 4), (3, 10, 4)]
    assert {r["session_workout_id"] for r in rows} == {10}


def test_at_least_one_set_is_synthesized():
    rows = build_session_set_rows(1, SessionExerciseIn(exercise_id=None, exercise_name="Plank"), 1)

    assert [r["set_number"] for r in rows] == [1]


def test_completion_skips_entries_without_id_and_is_lenient():
    completion = build_completion_payload(
        {
            "ended_at": "2024-05-01T10:00:00Z",
            "duration_seconds": "-5",
            "notes": "  good ",
            "sets": [
                {"id": "7", "completed": "on", "actual_reps": "10"},
                {"completed": True},
                {"id": 8, "completed": "", "actual_reps": "lots", "notes": "skipped"},
                "junk",
            ],
        }
    )

    assert completion.ended_at == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)
    assert completion.duration_seconds is None
    assert completion.notes == "good"
    assert [(s.id, s.completed, s.actual_reps, s.notes) for s in completion.sets] == [
        (7, True, 10, None),
        (8, False, None, "skipped"),
    ]


def test_invalid_end_time_means_now():
    assert build_completion_payload({"ended_at": "later"}).ended_at is None
