"""
Week-by-day schedule grid derived from a plan's assignments.

Pure functions only: no store access, no clock reads (``today`` is always a
parameter). The same grid feeds the plan editor and the daily session view.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Final, Protocol

from fitflow.services.plans.assignments import (
    DAYS_PER_WEEK,
    PLAN_PERIODS,
    clamp_week,
    max_weeks_for_period,
    parse_leading_int,
)

DAY_NAMES: Final[tuple[tuple[str, str], ...]] = (
    ("mon", "Monday"),
    ("tue", "Tuesday"),
    ("wed", "Wednesday"),
    ("thu", "Thursday"),
    ("fri", "Friday"),
    ("sat", "Saturday"),
    ("sun", "Sunday"),
)


class ScheduledAssignment(Protocol):
    """Anything carrying a plan assignment and its workout's display name."""

    @property
    def workout_id(self) -> Any: ...

    @property
    def week_index(self) -> Any: ...

    @property
    def day_of_week(self) -> Any: ...

    @property
    def position(self) -> Any: ...

    @property
    def workout_name(self) -> str | None: ...


@dataclass(frozen=True, slots=True)
class ScheduleWorkout:
    id: Any
    name: str
    position: int | None


@dataclass(frozen=True, slots=True)
class ScheduleDay:
    day_index: int
    day_key: str
    day_name: str
    workouts: tuple[ScheduleWorkout, ...]


@dataclass(frozen=True, slots=True)
class ScheduleWeek:
    number: int
    days: tuple[ScheduleDay, ...]
    has_workouts: bool


@dataclass(frozen=True, slots=True)
class DayHeader:
    key: str
    label: str


@dataclass(frozen=True, slots=True)
class PlanSchedule:
    """
    Complete grid: ``max_weeks_for_period(period)`` weeks of 7 days each.

    :param weeks: Weeks in order, every day present even when empty.
    :param has_workouts: ``True`` iff any day holds a workout.
    :param day_headers: Monday-first weekday labels.
    """

    weeks: tuple[ScheduleWeek, ...]
    has_workouts: bool
    day_headers: tuple[DayHeader, ...]

    @property
    def cell_count(self) -> int:
        return sum(len(week.days) for week in self.weeks)


DAY_HEADERS: Final = tuple(DayHeader(key=key, label=label) for key, label in DAY_NAMES)


def day_name(index: int) -> str:
    """Monday..Sunday for 1..7, ``"Day N"`` otherwise."""
    if 1 <= index <= len(DAY_NAMES):
        return DAY_NAMES[index - 1][1]
    return f"Day {index}"


def day_key(index: int) -> str:
    if 1 <= index <= len(DAY_NAMES):
        return DAY_NAMES[index - 1][0]
    return f"day-{index}"


def _display_name(assignment: ScheduledAssignment) -> str:
    if assignment.workout_name:
        return assignment.workout_name
    if assignment.workout_id is not None:
        return f"Workout {assignment.workout_id}"
    return "Workout"


def build_plan_schedule(
    assignments: Sequence[ScheduledAssignment],
    period: str | None,
) -> PlanSchedule:
    """
    Bucket ``assignments`` into a week × day grid.

    Weeks are clamped into the period, assignments without a parseable day
    are ignored and each day's workouts are sorted by ``position`` (missing
    positions last, ties in input order).
    """
    period_key = period if period in PLAN_PERIODS else "weekly"
    weeks_count = max_weeks_for_period(period_key)

    buckets: dict[tuple[int, int], list[ScheduleWorkout]] = defaultdict(list)
    for assignment in assignments:
        raw_day = parse_leading_int(assignment.day_of_week)
        if raw_day is None:
            continue
        week = clamp_week(assignment.week_index, period_key)
        day = min(max(raw_day, 1), DAYS_PER_WEEK)
        buckets[(week, day)].append(
            ScheduleWorkout(
                id=assignment.workout_id,
                name=_display_name(assignment),
                position=parse_leading_int(assignment.position),
            )
        )

    weeks: list[ScheduleWeek] = []
    for number in range(1, weeks_count + 1):
        days: list[ScheduleDay] = []
        for index in range(1, DAYS_PER_WEEK + 1):
            workouts = sorted(
                buckets.get((number, index), ()),
                key=lambda item: (item.position is None, item.position or 0),
            )
            days.append(
                ScheduleDay(
                    day_index=index,
                    day_key=day_key(index),
                    day_name=day_name(index),
                    workouts=tuple(workouts),
                )
            )
        weeks.append(
            ScheduleWeek(
                number=number,
                days=tuple(days),
                has_workouts=any(day.workouts for day in days),
            )
        )

    return PlanSchedule(
        weeks=tuple(weeks),
        has_workouts=any(week.has_workouts for week in weeks),
        day_headers=DAY_HEADERS,
    )


# --------------------------------------------------------------------------- #
# Today
# --------------------------------------------------------------------------- #


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def resolve_cycle_position(
    period: str | None,
    anchor: date | datetime | None,
    today: date | datetime,
) -> tuple[int, int]:
    """
    Locate ``today`` inside a repeating cycle.

    The cycle's week 1 starts on the Monday of ``anchor`` (usually the plan's
    creation date) and repeats every ``max_weeks_for_period(period)`` weeks.

    :returns: ``(week_index, day_of_week)``, both 1-based.
    """
    current = _as_date(today)
    day_of_week = current.isoweekday()
    if anchor is None:
        return 1, day_of_week

    start = _as_date(anchor)
    start_monday = start - timedelta(days=start.weekday())
    current_monday = current - timedelta(days=current.weekday())
    elapsed_weeks = (current_monday - start_monday).days // 7
    return elapsed_weeks % max_weeks_for_period(period) + 1, day_of_week


def schedule_for_day(schedule: PlanSchedule, week_index: int, day_of_week: int) -> ScheduleDay | None:
    """Return the grid cell for ``(week_index, day_of_week)`` if it exists."""
    for week in schedule.weeks:
        if week.number != week_index:
            continue
        for day in week.days:
            if day.day_index == day_of_week:
                return day
    return None


__all__ = [
    "DAY_HEADERS",
    "DAY_NAMES",
    "DayHeader",
    "PlanSchedule",
    "ScheduleDay",
    "ScheduleWeek",
    "ScheduleWorkout",
    "ScheduledAssignment",
    "build_plan_schedule",
    "day_key",
    "day_name",
    "resolve_cycle_position",
    "schedule_for_day",
]
