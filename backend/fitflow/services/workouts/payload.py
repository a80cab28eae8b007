"""Validation of workout payloads and their exercise lists."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from fitflow.services._shared.errors import ValidationError
from fitflow.services._shared.normalizers import (
    INVALID,
    coerce_id,
    normalize_date,
    normalize_id_list,
    normalize_nullable_string,
    normalize_positive_integer,
    normalize_required_string,
    normalize_url,
    to_datetime,
)
from fitflow.services.exercises.payload import URL_MESSAGE

from .dto import WorkoutExerciseIn


def build_workout_payload(payload: Mapping[str, Any]) -> dict[str, Any]:
    """
    Turn a raw payload into a ``workouts`` row.

    :raises ValidationError: On the first field that violates its contract.
    """
    name = normalize_required_string(payload.get("name"))
    if name is INVALID:
        raise ValidationError("Workout name is required")

    video_url = normalize_url(payload.get("video_url"))
    if video_url is INVALID:
        raise ValidationError(URL_MESSAGE)

    performed_at = normalize_date(payload.get("performed_at"))
    if performed_at is INVALID:
        raise ValidationError("Session date is invalid")

    return {
        "name": name,
        "description": normalize_nullable_string(payload.get("description")),
        "notes": normalize_nullable_string(payload.get("notes")),
        "video_url": video_url,
        "rest_interval": normalize_nullable_string(payload.get("rest_interval")),
        "performed_at": to_datetime(performed_at),
    }


def _optional_positive(value: Any, label: str) -> int | None:
    parsed = normalize_positive_integer(value)
    if parsed is INVALID:
        raise ValidationError(f"{label} must be a positive whole number")
    return parsed


def normalize_workout_exercises(raw: Any) -> list[WorkoutExerciseIn]:
    """
    Normalize the exercise list of a workout.

    Entries may be plain ids (list, JSON array string or comma separated
    string) or mappings carrying ``exercise_id``/``id`` plus optional
    ``target_sets``, ``target_reps`` and ``notes``. Duplicated exercises keep
    their first occurrence.
    """
    if raw is None:
        return []
    if not isinstance(raw, Sequence) or isinstance(raw, str) or not any(
        isinstance(entry, Mapping) for entry in raw
    ):
        return [WorkoutExerciseIn(exercise_id=coerce_id(value)) for value in normalize_id_list(raw)]

    items: list[WorkoutExerciseIn] = []
    seen: set[str] = set()
    for entry in raw:
        if not isinstance(entry, Mapping):
            entry = {"exercise_id": entry}
        exercise_id = coerce_id(entry.get("exercise_id", entry.get("id")))
        if exercise_id is None or str(exercise_id) in seen:
            continue
        seen.add(str(exercise_id))
        items.append(
            WorkoutExerciseIn(
                exercise_id=exercise_id,
                target_sets=_optional_positive(entry.get("target_sets"), "Target sets"),
                target_reps=_optional_positive(entry.get("target_reps"), "Target reps"),
                notes=normalize_nullable_string(entry.get("notes")),
            )
        )
    return items


def build_workout_exercise_rows(
    workout_id: Any, exercises: Sequence[WorkoutExerciseIn]
) -> list[dict[str, Any]]:
    """Shape ``workout_exercises`` rows; positions run 1..N in submission order."""
    return [
        {
            "workout_id": workout_id,
            "exercise_id": item.exercise_id,
            "order_index": index,
            "position": index + 1,
            "target_sets": item.target_sets,
            "target_reps": item.target_reps,
            "notes": item.notes,
        }
        for index, item in enumerate(exercises)
    ]
