from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from fitflow.services._shared.hydration import fetch_grouped
from fitflow.store import Row, TableStore

from .dto import SessionOut, SessionSetOut, SessionWorkoutOut

WORKOUT_TABLE = "session_workouts"
SET_TABLE = "session_sets"


def set_to_out(row: Mapping[str, Any]) -> SessionSetOut:
    return SessionSetOut(
        id=row["id"],
        session_workout_id=row["session_workout_id"],
        exercise_id=row.get("exercise_id"),
        exercise_name=row.get("exercise_name") or "",
        day_index=row.get("day_index"),
        target_sets=row.get("target_sets"),
        set_number=row.get("set_number") or 1,
        target_reps=row.get("target_reps"),
        completed=bool(row.get("completed")),
        actual_reps=row.get("actual_reps"),
        completed_at=row.get("completed_at"),
        notes=row.get("notes"),
    )


def _workout_sort_key(row: Mapping[str, Any]) -> tuple[bool, int]:
    position = row.get("position")
    return (position is None, position or 0)


def session_to_out(
    row: Mapping[str, Any],
    workouts: Sequence[Mapping[str, Any]] = (),
    sets_by_workout: Mapping[str, Sequence[Mapping[str, Any]]] | None = None,
) -> SessionOut:
    """Assemble a session DTO from its row and already-fetched children."""
    sets_by_workout = sets_by_workout or {}
    items = tuple(
        SessionWorkoutOut(
            id=workout["id"],
            workout_id=workout.get("workout_id"),
            workout_name=workout.get("workout_name") or "",
            position=workout.get("position"),
            sets=tuple(set_to_out(item) for item in sets_by_workout.get(str(workout["id"]), ())),
        )
        for workout in sorted(workouts, key=_workout_sort_key)
    )
    return SessionOut(
        id=row["id"],
        plan_id=row.get("plan_id"),
        plan_name=row.get("plan_name"),
        day_index=row.get("day_index") or 1,
        week_index=row.get("week_index") or 1,
        mode=row.get("mode") or "focus",
        status=row.get("status") or "in-progress",
        started_at=row.get("started_at"),
        ended_at=row.get("ended_at"),
        duration_seconds=row.get("duration_seconds"),
        notes=row.get("notes"),
        created_at=row.get("created_at"),
        workouts=items,
    )


def hydrate_sessions(store: TableStore, rows: Sequence[Row]) -> list[SessionOut]:
    """
    Nest workouts and sets onto session rows with two batched reads.

    A failed read leaves the affected sessions without workouts (or the
    workouts without sets).
    """
    workouts = fetch_grouped(
        store, WORKOUT_TABLE, "session_id", (row["id"] for row in rows), order_by=("id",)
    )
    sets = fetch_grouped(
        store,
        SET_TABLE,
        "session_workout_id",
        (workout["id"] for group in workouts.values() for workout in group),
        order_by=("id",),
    )
    return [session_to_out(row, workouts.get(str(row["id"]), ()), sets) for row in rows]


__all__ = ["hydrate_sessions", "session_to_out", "set_to_out"]
