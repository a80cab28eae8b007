from __future__ import annotations

from dataclasses import dataclass

# ------------------------------ Input DTOs ------------------------------- #


@dataclass(frozen=True, slots=True)
class SessionSetIn:
    set_number: int
    target_reps: int | None = None


@dataclass(frozen=True, slots=True)
class SessionExerciseIn:
    """
    Exercise of a session workout, with its names already snapshotted.

    :param sets: Explicit sets; empty means ``target_sets`` sets are
        synthesized when the session is written.
    """

    exercise_id: int | str | None
    exercise_name: str
    target_sets: int | None = None
    target_reps: int | None = None
    sets: tuple[SessionSetIn, ...] = ()


@dataclass(frozen=True, slots=True)
class SessionWorkoutIn:
    workout_id: int | str | None
    workout_name: str
    position: int
    exercises: tuple[SessionExerciseIn, ...] = ()


@dataclass(frozen=True, slots=True)
class SetCompletionIn:
    """Outcome of a single set reported when a session is completed."""

    id: int | str
    completed: bool
    actual_reps: int | None = None
    notes: str | None = None


@dataclass(frozen=True, slots=True)
class SessionCompletionIn:
    """
    Normalized completion payload.

    :param ended_at: End of the session; ``None`` means "now".
    :param duration_seconds: Only written when provided.
    :param sets: Set outcomes with a usable id, in submission order.
    """

    ended_at: object = None
    duration_seconds: int | None = None
    notes: str | None = None
    sets: tuple[SetCompletionIn, ...] = ()


# ------------------------------ Output DTOs ------------------------------ #


@dataclass(frozen=True, slots=True)
class SessionSetOut:
    id: int | str
    session_workout_id: int | str
    exercise_id: int | str | None
    exercise_name: str
    day_index: int | None
    target_sets: int | None
    set_number: int
    target_reps: int | None
    completed: bool
    actual_reps: int | None
    completed_at: object
    notes: str | None


@dataclass(frozen=True, slots=True)
class SessionWorkoutOut:
    """Snapshotted workout of a session with its sets in insertion order."""

    id: int | str
    workout_id: int | str | None
    workout_name: str
    position: int | None
    sets: tuple[SessionSetOut, ...] = ()


@dataclass(frozen=True, slots=True)
class SessionOut:
    """
    A logged session with its workouts ordered by position.

    Names are the snapshots taken at start time; they do not follow later
    renames of the plan, workouts or exercises.
    """

    id: int | str
    plan_id: int | str | None
    plan_name: str | None
    day_index: int
    week_index: int
    mode: str
    status: str
    started_at: object
    ended_at: object
    duration_seconds: int | None
    notes: str | None
    created_at: object
    workouts: tuple[SessionWorkoutOut, ...] = ()

    @property
    def sets(self) -> list[SessionSetOut]:
        return [item for workout in self.workouts for item in workout.sets]
