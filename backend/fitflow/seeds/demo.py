"""Idempotent demo data for local development, written through the services."""

from __future__ import annotations

import logging
from typing import Any

from fitflow.services import ExerciseService, PlanService, WorkoutService
from fitflow.services.plans import RawAssignments
from fitflow.store import TableStore

LOGGER = logging.getLogger(__name__)

EXERCISE_FIXTURES: list[dict[str, Any]] = [
    {
        "name": "Back Squat",
        "category": "Strength",
        "primary_muscle": "Quadriceps",
        "secondary_muscles": "Glutes, Hamstrings",
        "equipment": "Barbell",
        "tempo": "3-1-1",
        "target_sets": 4,
        "target_repetitions": 6,
        "cues": "Brace, knees out, drive through mid-foot.",
    },
    {
        "name": "Bench Press",
        "category": "Strength",
        "primary_muscle": "Chest",
        "secondary_muscles": "Triceps, Front delts",
        "equipment": "Barbell",
        "target_sets": 4,
        "target_repetitions": 8,
    },
    {
        "name": "Romanian Deadlift",
        "category": "Strength",
        "primary_muscle": "Hamstrings",
        "equipment": "Barbell",
        "target_sets": 3,
        "target_repetitions": 10,
    },
    {
        "name": "Pull-Up",
        "category": "Bodyweight",
        "primary_muscle": "Lats",
        "secondary_muscles": "Biceps",
        "equipment": "Bar",
        "target_sets": 3,
        "target_repetitions": 8,
    },
    {
        "name": "Plank",
        "category": "Core",
        "primary_muscle": "Core",
        "equipment": "None",
        "target_sets": 3,
        "target_repetitions": 1,
        "notes": "Hold for 45 seconds.",
    },
]

WORKOUT_FIXTURES: list[dict[str, Any]] = [
    {
        "name": "Lower Body A",
        "description": "Squat focused lower body day.",
        "rest_interval": "2 min",
        "exercises": ["Back Squat", "Romanian Deadlift", "Plank"],
    },
    {
        "name": "Upper Body A",
        "description": "Horizontal press and vertical pull.",
        "rest_interval": "90 s",
        "exercises": ["Bench Press", "Pull-Up", "Plank"],
    },
]

PLAN_FIXTURE: dict[str, Any] = {
    "name": "Two Week Base",
    "description": "Alternating upper/lower split.",
    "label": "Beginner",
    "period": "bi-weekly",
    "status": "active",
    # (week, day, workout name)
    "assignments": [
        (1, 1, "Lower Body A"),
        (1, 3, "Upper Body A"),
        (1, 5, "Lower Body A"),
        (2, 1, "Upper Body A"),
        (2, 3, "Lower Body A"),
        (2, 5, "Upper Body A"),
    ],
}


def _existing_ids(store: TableStore, table: str) -> dict[str, Any]:
    return {row["name"]: row["id"] for row in store.select(table, columns=("id", "name"))}


def _count(summary: dict[str, dict[str, int]], table: str, key: str) -> None:
    counters = summary.setdefault(table, {"created": 0, "existing": 0})
    counters[key] += 1


def run_all(store: TableStore, *, verbose: bool = False) -> dict[str, dict[str, int]]:
    """
    Create the demo exercises, workouts and plan unless they already exist.

    Rows are matched by name, so running the seed twice changes nothing.

    :returns: ``{table: {"created": n, "existing": m}}``.
    """
    summary: dict[str, dict[str, int]] = {}

    exercises = ExerciseService(store)
    exercise_ids = _existing_ids(store, "exercises")
    for fixture in EXERCISE_FIXTURES:
        if fixture["name"] in exercise_ids:
            _count(summary, "exercises", "existing")
            continue
        exercise_ids[fixture["name"]] = exercises.create(fixture).id
        _count(summary, "exercises", "created")

    workouts = WorkoutService(store)
    workout_ids = _existing_ids(store, "workouts")
    for fixture in WORKOUT_FIXTURES:
        if fixture["name"] in workout_ids:
            _count(summary, "workouts", "existing")
            continue
        linked = [exercise_ids[name] for name in fixture["exercises"]]
        payload = {key: value for key, value in fixture.items() if key != "exercises"}
        workout_ids[fixture["name"]] = workouts.create(payload, linked).id
        _count(summary, "workouts", "created")

    if PLAN_FIXTURE["name"] in _existing_ids(store, "plans"):
        _count(summary, "plans", "existing")
    else:
        slots = PLAN_FIXTURE["assignments"]
        raw = RawAssignments(
            weeks=tuple(week for week, _, _ in slots),
            days=tuple(day for _, day, _ in slots),
            workouts=tuple(workout_ids[name] for _, _, name in slots),
        )
        payload = {key: value for key, value in PLAN_FIXTURE.items() if key != "assignments"}
        PlanService(store).create(payload, raw)
        _count(summary, "plans", "created")

    if verbose:
        LOGGER.debug("seed.summary", extra={"count": sum(c["created"] for c in summary.values())})
    return summary
