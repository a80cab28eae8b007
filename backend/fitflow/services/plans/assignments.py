"""
Plan assignment normalization.

Plans are edited through a flattened multi-row form: three parallel arrays
(``assignment_week[]``, ``assignment_day[]``, ``assignment_workout[]``) where
index *i* of each describes one "workout on week W, day D" entry. This module
turns that input into sorted assignments and, at write time, into
``plan_workouts`` rows.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Final

from fitflow.services._shared.normalizers import coerce_id, ensure_list, normalize_enum

PLAN_PERIODS: Final = ("weekly", "bi-weekly", "monthly")
PLAN_STATUSES: Final = ("active", "inactive")
MAX_WEEKS: Final[Mapping[str, int]] = {"weekly": 1, "bi-weekly": 2, "monthly": 4}

DAYS_PER_WEEK: Final = 7

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def max_weeks_for_period(period: str | None) -> int:
    """Return the cycle length in weeks; unknown periods count as weekly."""
    return MAX_WEEKS.get(period or "", 1)


def normalize_period(value: Any) -> str:
    return normalize_enum(value, PLAN_PERIODS, "weekly")


def normalize_status(value: Any) -> str:
    return normalize_enum(value, PLAN_STATUSES, "inactive")


def parse_leading_int(value: Any) -> int | None:
    """Read the leading integer of ``value`` (``"3rd"`` → 3); ``None`` if absent."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    match = _LEADING_INT_RE.match(str(value))
    return int(match.group(1)) if match else None


def clamp_week(value: Any, period: str | None) -> int:
    """Parse a week number, defaulting to 1 and clamping into the period."""
    week = parse_leading_int(value)
    if week is None:
        week = 1
    return min(max(week, 1), max_weeks_for_period(period))


@dataclass(frozen=True, slots=True)
class AssignmentIn:
    """
    A normalized "workout on week/day" entry (no position yet).

    :param workout_id: Referenced workout id.
    :param week_index: 1-based week within the cycle.
    :param day_of_week: 1 = Monday .. 7 = Sunday.
    """

    workout_id: int | str
    week_index: int
    day_of_week: int


@dataclass(frozen=True, slots=True)
class RawAssignments:
    """Parallel week/day/workout arrays as received from a form or JSON body."""

    weeks: tuple[Any, ...] = ()
    days: tuple[Any, ...] = ()
    workouts: tuple[Any, ...] = ()

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "RawAssignments":
        """
        Collect the arrays from a request payload.

        Accepts both the form names (``assignment_week``) and the bracketed
        variants browsers send for repeated fields (``assignment_week[]``).
        A JSON ``assignments`` list of objects is accepted too.
        """
        structured = payload.get("assignments")
        if isinstance(structured, list):
            entries = [entry for entry in structured if isinstance(entry, Mapping)]
            return cls(
                weeks=tuple(entry.get("week_index", entry.get("week")) for entry in entries),
                days=tuple(entry.get("day_of_week", entry.get("day")) for entry in entries),
                workouts=tuple(entry.get("workout_id", entry.get("workout")) for entry in entries),
            )

        def pick(name: str) -> tuple[Any, ...]:
            value = payload.get(name)
            if value is None:
                value = payload.get(f"{name}[]")
            return tuple(ensure_list(value))

        return cls(
            weeks=pick("assignment_week"),
            days=pick("assignment_day"),
            workouts=pick("assignment_workout"),
        )


def _at(values: Sequence[Any], index: int) -> Any:
    return values[index] if index < len(values) else None


def normalize_assignments_input(
    weeks: Sequence[Any],
    days: Sequence[Any],
    workouts: Sequence[Any],
    period: str | None,
) -> list[AssignmentIn]:
    """
    Zip the parallel arrays into sorted assignments.

    1. Entries with a blank workout id are dropped.
    2. Weeks default to 1 when unparseable and are clamped to the period.
    3. Entries whose day is outside 1..7 are dropped entirely.
    4. The result is stably sorted by ``(week_index, day_of_week)``.
    """
    weeks = ensure_list(weeks)
    days = ensure_list(days)
    assignments: list[AssignmentIn] = []
    for index, raw_workout in enumerate(ensure_list(workouts)):
        workout_id = coerce_id(raw_workout)
        if workout_id is None:
            continue
        week = clamp_week(_at(weeks, index), period)
        day = parse_leading_int(_at(days, index))
        if day is None or not 1 <= day <= DAYS_PER_WEEK:
            continue
        assignments.append(AssignmentIn(workout_id=workout_id, week_index=week, day_of_week=day))

    assignments.sort(key=lambda item: (item.week_index, item.day_of_week))
    return assignments


def build_assignment_rows(
    plan_id: Any,
    assignments: Sequence[AssignmentIn],
    period: str | None,
) -> list[dict[str, Any]]:
    """
    Shape ``plan_workouts`` rows for ``plan_id``.

    Duplicate ``(week, day, workout)`` entries keep their first occurrence;
    ``order_index`` runs 0..N-1 and ``position`` 1..N over the kept rows.
    """
    rows: list[dict[str, Any]] = []
    seen: set[tuple[int, int, str]] = set()
    for assignment in assignments:
        week = clamp_week(assignment.week_index, period)
        day = assignment.day_of_week
        if not 1 <= day <= DAYS_PER_WEEK:
            continue
        key = (week, day, str(assignment.workout_id))
        if key in seen:
            continue
        seen.add(key)
        rows.append(
            {
                "plan_id": plan_id,
                "workout_id": assignment.workout_id,
                "week_index": week,
                "day_of_week": day,
                "order_index": len(rows),
                "position": len(rows) + 1,
            }
        )
    return rows


__all__ = [
    "AssignmentIn",
    "DAYS_PER_WEEK",
    "MAX_WEEKS",
    "PLAN_PERIODS",
    "PLAN_STATUSES",
    "RawAssignments",
    "build_assignment_rows",
    "clamp_week",
    "max_weeks_for_period",
    "normalize_assignments_input",
    "normalize_period",
    "normalize_status",
    "parse_leading_int",
]
