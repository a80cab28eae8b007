from __future__ import annotations

from dataclasses import dataclass

from fitflow.services.workouts.dto import WorkoutOut

from .schedule import PlanSchedule, ScheduleDay

# ------------------------------ Output DTOs ------------------------------ #


@dataclass(frozen=True, slots=True)
class WorkoutRefOut:
    """Display fields of the workout an assignment points to."""

    id: int | str
    name: str
    description: str | None


@dataclass(frozen=True, slots=True)
class PlanAssignmentOut:
    """A stored ``plan_workouts`` row with its workout reference resolved."""

    workout_id: int | str
    week_index: int
    day_of_week: int
    position: int | None
    workout: WorkoutRefOut | None

    @property
    def workout_name(self) -> str | None:
        return self.workout.name if self.workout is not None else None


@dataclass(frozen=True, slots=True)
class PlanOut:
    """
    Plan with assignments sorted by (week, day, position) and its grid.

    ``period`` and ``status`` are re-normalized on read so rows written by
    older clients still render.
    """

    id: int | str
    name: str
    description: str | None
    label: str | None
    period: str
    status: str
    created_at: object
    updated_at: object
    assignments: tuple[PlanAssignmentOut, ...]
    schedule: PlanSchedule


@dataclass(frozen=True, slots=True)
class WorkoutOptionOut:
    """Slim workout projection for the plan editor's pickers."""

    id: int | str
    name: str
    rest_interval: str | None
    description: str | None


@dataclass(frozen=True, slots=True)
class PlanEditContextOut:
    plan: PlanOut
    workout_options: tuple[WorkoutOptionOut, ...]


@dataclass(frozen=True, slots=True)
class PlanTodayOut:
    """
    What the session tracker shows for a given date.

    :param plan: Active plan, or ``None`` when no plan is active.
    :param week_index: Week of the cycle ``today`` falls in.
    :param day_of_week: 1 = Monday .. 7 = Sunday.
    :param day: Schedule cell for that week/day.
    :param workouts: The cell's workouts with exercises, in cell order.
    """

    plan: PlanOut | None
    week_index: int
    day_of_week: int
    day: ScheduleDay | None
    workouts: tuple[WorkoutOut, ...]
