"""Validation of exercise create/update payloads."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from fitflow.services._shared.errors import ValidationError
from fitflow.services._shared.normalizers import (
    INVALID,
    normalize_nullable_string,
    normalize_positive_integer,
    normalize_required_string,
    normalize_url,
)

URL_MESSAGE = "Video link must be a valid URL starting with http or https."

TEXT_FIELDS = ("category", "secondary_muscles", "equipment", "tempo", "notes", "cues")


def _required_positive(raw: Any, label: str) -> int:
    value = normalize_positive_integer(raw)
    if value is None:
        raise ValidationError(f"{label} is required")
    if value is INVALID:
        raise ValidationError(f"{label} must be a positive whole number")
    return value


def build_exercise_payload(payload: Mapping[str, Any]) -> dict[str, Any]:
    """
    Turn a raw payload into an ``exercises`` row.

    ``target_muscle`` falls back to ``primary_muscle``; one of them is
    required. ``target_reps`` is accepted as an alias of
    ``target_repetitions``.

    :raises ValidationError: On the first field that violates its contract.
    """
    name = normalize_required_string(payload.get("name"))
    if name is INVALID:
        raise ValidationError("Exercise name is required")

    primary_muscle = normalize_nullable_string(payload.get("primary_muscle"))
    target_muscle = normalize_nullable_string(payload.get("target_muscle")) or primary_muscle
    if target_muscle is None:
        raise ValidationError("Target muscle is required")

    target_sets = _required_positive(payload.get("target_sets"), "Target sets")
    raw_repetitions = payload.get("target_repetitions")
    if raw_repetitions is None or raw_repetitions == "":
        raw_repetitions = payload.get("target_reps")
    target_repetitions = _required_positive(raw_repetitions, "Target repetitions")

    video_url = normalize_url(payload.get("video_url"))
    if video_url is INVALID:
        raise ValidationError(URL_MESSAGE)

    row: dict[str, Any] = {
        "name": name,
        "target_muscle": target_muscle,
        "primary_muscle": primary_muscle,
        "target_sets": target_sets,
        "target_repetitions": target_repetitions,
        "video_url": video_url,
    }
    for field in TEXT_FIELDS:
        row[field] = normalize_nullable_string(payload.get(field))
    return row
