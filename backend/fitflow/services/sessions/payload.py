"""
Normalization of session start and completion payloads.

Session payloads come from the tracker UI, which always submits them in one
piece; malformed numbers fall back to defaults instead of being rejected.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Final

from fitflow.services._shared.normalizers import (
    INVALID,
    coerce_id,
    coerce_positive_integer,
    normalize_date,
    normalize_enum,
    normalize_flag,
    normalize_non_negative_integer,
    normalize_nullable_string,
    to_datetime,
)

from .dto import (
    SessionCompletionIn,
    SessionExerciseIn,
    SessionSetIn,
    SessionWorkoutIn,
    SetCompletionIn,
)

SESSION_MODES: Final[tuple[str, ...]] = ("focus", "circuit")
SESSION_STATUSES: Final[tuple[str, ...]] = ("in-progress", "completed", "aborted")
DEFAULT_MODE: Final = "focus"
MAX_DAY_INDEX: Final = 7


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _sequence(value: Any) -> Sequence[Any]:
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return value
    return ()


def _snapshot_name(raw: Any, ref: Any, fallback: str) -> str:
    name = normalize_nullable_string(raw)
    if name:
        return name
    return str(ref) if ref is not None else fallback


def clamp_day_index(value: Any) -> int:
    """Day of the week, clamped into 1..7; unparseable input means Monday."""
    return min(coerce_positive_integer(value, 1), MAX_DAY_INDEX)


def _non_negative_or_none(value: Any) -> int | None:
    parsed = normalize_non_negative_integer(value)
    return None if parsed is INVALID else parsed


def _normalize_set(raw: Any, position: int, target_reps: int | None) -> SessionSetIn:
    entry = _mapping(raw)
    return SessionSetIn(
        set_number=coerce_positive_integer(entry.get("index", entry.get("set_number")), position),
        target_reps=coerce_positive_integer(entry.get("target_reps"), target_reps),
    )


def _normalize_exercise(raw: Any, index: int) -> SessionExerciseIn:
    entry = _mapping(raw)
    exercise_id = coerce_id(entry.get("id", entry.get("exercise_id")))
    raw_sets = _sequence(entry.get("sets"))
    target_reps = coerce_positive_integer(entry.get("target_reps"), None)

    sets = tuple(
        _normalize_set(item, position, target_reps)
        for position, item in enumerate(raw_sets, start=1)
    )
    return SessionExerciseIn(
        exercise_id=exercise_id,
        exercise_name=_snapshot_name(entry.get("name"), exercise_id, f"Exercise {index}"),
        target_sets=coerce_positive_integer(entry.get("target_sets"), len(sets) or None),
        target_reps=target_reps,
        sets=sets,
    )


def _normalize_workout(raw: Any, index: int) -> SessionWorkoutIn:
    entry = _mapping(raw)
    workout_id = coerce_id(entry.get("id", entry.get("workout_id")))
    return SessionWorkoutIn(
        workout_id=workout_id,
        workout_name=_snapshot_name(entry.get("name"), workout_id, f"Workout {index}"),
        position=coerce_positive_integer(entry.get("position"), index),
        exercises=tuple(
            _normalize_exercise(item, position)
            for position, item in enumerate(_sequence(entry.get("exercises")), start=1)
        ),
    )


def build_session_payload(payload: Mapping[str, Any]) -> tuple[dict[str, Any], list[SessionWorkoutIn]]:
    """
    Normalize a session start payload.

    :returns: ``(sessions row without status/started_at, workouts)``.
    """
    row = {
        "plan_id": coerce_id(payload.get("plan_id")),
        "plan_name": normalize_nullable_string(payload.get("plan_name")),
        "day_index": clamp_day_index(payload.get("day_index")),
        "week_index": coerce_positive_integer(payload.get("week_index"), 1),
        "mode": normalize_enum(payload.get("mode"), SESSION_MODES, DEFAULT_MODE),
    }
    workouts = [
        _normalize_workout(item, position)
        for position, item in enumerate(_sequence(payload.get("workouts")), start=1)
    ]
    return row, workouts


def build_session_set_rows(
    session_workout_id: Any,
    exercise: SessionExerciseIn,
    day_index: int,
) -> list[dict[str, Any]]:
    """
    Shape the ``session_sets`` rows of one exercise.

    Without explicit sets, ``target_sets`` sets (at least one) are
    synthesized, numbered from 1 and carrying the exercise's target reps.
    """
    sets = exercise.sets or tuple(
        SessionSetIn(set_number=number, target_reps=exercise.target_reps)
        for number in range(1, (exercise.target_sets or 1) + 1)
    )
    return [
        {
            "session_workout_id": session_workout_id,
            "exercise_id": exercise.exercise_id,
            "exercise_name": exercise.exercise_name,
            "day_index": day_index,
            "target_sets": exercise.target_sets,
            "set_number": item.set_number,
            "target_reps": item.target_reps if item.target_reps is not None else exercise.target_reps,
        }
        for item in sets
    ]


def build_completion_payload(payload: Mapping[str, Any]) -> SessionCompletionIn:
    """
    Normalize a completion payload.

    Set entries without an id are dropped here so the remaining ones can be
    applied independently.
    """
    ended_at = normalize_date(payload.get("ended_at"))
    sets: list[SetCompletionIn] = []
    for item in _sequence(payload.get("sets")):
        entry = _mapping(item)
        set_id = coerce_id(entry.get("id"))
        if set_id is None:
            continue
        sets.append(
            SetCompletionIn(
                id=set_id,
                completed=normalize_flag(entry.get("completed")),
                actual_reps=_non_negative_or_none(entry.get("actual_reps")),
                notes=normalize_nullable_string(entry.get("notes")),
            )
        )
    return SessionCompletionIn(
        ended_at=None if ended_at is INVALID else to_datetime(ended_at),
        duration_seconds=_non_negative_or_none(payload.get("duration_seconds")),
        notes=normalize_nullable_string(payload.get("notes")),
        sets=tuple(sets),
    )


__all__ = [
    "SESSION_MODES",
    "SESSION_STATUSES",
    "build_completion_payload",
    "build_session_payload",
    "build_session_set_rows",
    "clamp_day_index",
]
