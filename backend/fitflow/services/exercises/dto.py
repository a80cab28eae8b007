from __future__ import annotations

from dataclasses import dataclass

# ------------------------------ Output DTOs ------------------------------ #


@dataclass(frozen=True, slots=True)
class ExerciseOut:
    """Public projection of a catalog exercise."""

    id: int | str
    name: str
    category: str | None
    target_muscle: str | None
    primary_muscle: str | None
    secondary_muscles: str | None
    equipment: str | None
    tempo: str | None
    target_sets: int | None
    target_repetitions: int | None
    notes: str | None
    cues: str | None
    video_url: str | None
    created_at: object
    updated_at: object


@dataclass(frozen=True, slots=True)
class ExerciseOptionOut:
    """Slim projection used by workout editors' exercise pickers."""

    id: int | str
    name: str
    category: str | None
    target_muscle: str | None
    primary_muscle: str | None
