from __future__ import annotations

from dataclasses import dataclass

from fitflow.services.exercises.dto import ExerciseOptionOut

# ------------------------------ Input DTOs ------------------------------- #


@dataclass(frozen=True, slots=True)
class WorkoutExerciseIn:
    """
    One exercise to link to a workout, in submission order.

    :param exercise_id: Referenced exercise.
    :param target_sets: Optional per-workout override.
    :param target_reps: Optional per-workout override.
    :param notes: Optional coaching notes for this slot.
    """

    exercise_id: int | str
    target_sets: int | None = None
    target_reps: int | None = None
    notes: str | None = None


# ------------------------------ Output DTOs ------------------------------ #


@dataclass(frozen=True, slots=True)
class WorkoutExerciseOut:
    """Exercise slot within a workout, joined with the exercise's display fields."""

    exercise_id: int | str
    position: int | None
    target_sets: int | None
    target_reps: int | None
    notes: str | None
    name: str | None
    category: str | None
    target_muscle: str | None
    primary_muscle: str | None


@dataclass(frozen=True, slots=True)
class WorkoutOut:
    """Workout with its exercises ordered by position."""

    id: int | str
    name: str
    description: str | None
    notes: str | None
    video_url: str | None
    rest_interval: str | None
    performed_at: object
    created_at: object
    updated_at: object
    exercises: tuple[WorkoutExerciseOut, ...] = ()

    @property
    def exercise_ids(self) -> list[int | str]:
        return [item.exercise_id for item in self.exercises]


@dataclass(frozen=True, slots=True)
class WorkoutEditContextOut:
    """Everything a workout edit form needs, fetched concurrently."""

    workout: WorkoutOut
    exercise_options: tuple[ExerciseOptionOut, ...]
