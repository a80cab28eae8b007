from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .dto import ExerciseOptionOut, ExerciseOut

OPTION_COLUMNS = ("id", "name", "category", "target_muscle", "primary_muscle")


def exercise_to_out(row: Mapping[str, Any]) -> ExerciseOut:
    return ExerciseOut(
        id=row["id"],
        name=row.get("name") or "",
        category=row.get("category"),
        target_muscle=row.get("target_muscle") or row.get("primary_muscle"),
        primary_muscle=row.get("primary_muscle"),
        secondary_muscles=row.get("secondary_muscles"),
        equipment=row.get("equipment"),
        tempo=row.get("tempo"),
        target_sets=row.get("target_sets"),
        target_repetitions=row.get("target_repetitions"),
        notes=row.get("notes"),
        cues=row.get("cues"),
        video_url=row.get("video_url"),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


def exercise_to_option(row: Mapping[str, Any]) -> ExerciseOptionOut:
    return ExerciseOptionOut(
        id=row["id"],
        name=row.get("name") or "",
        category=row.get("category"),
        target_muscle=row.get("target_muscle"),
        primary_muscle=row.get("primary_muscle"),
    )
