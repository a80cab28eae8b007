from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from fitflow.services._shared.hydration import distinct_keys, fetch_grouped, fetch_index
from fitflow.services.exercises._converters import OPTION_COLUMNS
from fitflow.store import Row, TableStore

from .dto import WorkoutExerciseOut, WorkoutOut

LINK_TABLE = "workout_exercises"
LINK_COLUMNS = ("workout_id", "exercise_id", "position", "target_sets", "target_reps", "notes")


def _link_sort_key(row: Mapping[str, Any]) -> tuple[bool, int]:
    position = row.get("position")
    return (position is None, position or 0)


def _link_to_out(link: Mapping[str, Any], exercise: Mapping[str, Any] | None) -> WorkoutExerciseOut:
    exercise = exercise or {}
    return WorkoutExerciseOut(
        exercise_id=link["exercise_id"],
        position=link.get("position"),
        target_sets=link.get("target_sets"),
        target_reps=link.get("target_reps"),
        notes=link.get("notes"),
        name=exercise.get("name"),
        category=exercise.get("category"),
        target_muscle=exercise.get("target_muscle"),
        primary_muscle=exercise.get("primary_muscle"),
    )


def workout_to_out(row: Mapping[str, Any], exercises: Sequence[WorkoutExerciseOut] = ()) -> WorkoutOut:
    return WorkoutOut(
        id=row["id"],
        name=row.get("name") or "",
        description=row.get("description"),
        notes=row.get("notes"),
        video_url=row.get("video_url"),
        rest_interval=row.get("rest_interval"),
        performed_at=row.get("performed_at"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
        exercises=tuple(exercises),
    )


def hydrate_workouts(store: TableStore, rows: Sequence[Row]) -> list[WorkoutOut]:
    """
    Attach ordered exercises to workout rows with two batched reads.

    Links are fetched for all workouts at once, then the referenced exercises
    in a single ``IN`` query. Either read failing leaves the affected
    workouts with empty (or name-less) exercise lists.
    """
    links = fetch_grouped(
        store,
        LINK_TABLE,
        "workout_id",
        (row["id"] for row in rows),
        columns=LINK_COLUMNS,
    )
    exercise_ids = distinct_keys(
        link["exercise_id"] for group in links.values() for link in group
    )
    exercises = fetch_index(store, "exercises", exercise_ids, columns=OPTION_COLUMNS)

    hydrated: list[WorkoutOut] = []
    for row in rows:
        ordered = sorted(links.get(str(row["id"]), ()), key=_link_sort_key)
        items = [_link_to_out(link, exercises.get(str(link["exercise_id"]))) for link in ordered]
        hydrated.append(workout_to_out(row, items))
    return hydrated


def load_workouts(store: TableStore, ids: Sequence[Any]) -> list[WorkoutOut]:
    """
    Fetch and hydrate workouts by id, in the order of ``ids``.

    :raises DataStoreError: When the workouts themselves cannot be read.
    """
    wanted = distinct_keys(ids)
    if not wanted:
        return []
    rows = store.select("workouts", where_in={"id": wanted})
    by_id = {str(row["id"]): row for row in rows}
    ordered = [by_id[str(key)] for key in wanted if str(key) in by_id]
    return hydrate_workouts(store, ordered)


__all__ = ["hydrate_workouts", "load_workouts", "workout_to_out"]
