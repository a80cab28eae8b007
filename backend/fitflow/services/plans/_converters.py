from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from fitflow.services._shared.hydration import distinct_keys, fetch_grouped, fetch_index
from fitflow.store import Row, TableStore

from .assignments import normalize_period, normalize_status
from .dto import PlanAssignmentOut, PlanOut, WorkoutOptionOut, WorkoutRefOut
from .schedule import build_plan_schedule

ASSIGNMENT_COLUMNS = ("plan_id", "workout_id", "week_index", "day_of_week", "position")
WORKOUT_REF_COLUMNS = ("id", "name", "description")
WORKOUT_OPTION_COLUMNS = ("id", "name", "rest_interval", "description")

_LAST = float("inf")


def _rank(value: Any) -> float:
    return value if isinstance(value, int) else _LAST


def _assignment_sort_key(item: PlanAssignmentOut) -> tuple[float, float, float]:
    return (_rank(item.week_index), _rank(item.day_of_week), _rank(item.position))


def _assignment_to_out(row: Mapping[str, Any], workout: Mapping[str, Any] | None) -> PlanAssignmentOut:
    ref = None
    if workout is not None:
        ref = WorkoutRefOut(
            id=workout["id"],
            name=workout.get("name") or "",
            description=workout.get("description"),
        )
    return PlanAssignmentOut(
        workout_id=row["workout_id"],
        week_index=row.get("week_index"),
        day_of_week=row.get("day_of_week"),
        position=row.get("position"),
        workout=ref,
    )


def plan_to_out(row: Mapping[str, Any], assignments: Sequence[PlanAssignmentOut] = ()) -> PlanOut:
    period = normalize_period(row.get("period"))
    ordered = tuple(sorted(assignments, key=_assignment_sort_key))
    return PlanOut(
        id=row["id"],
        name=row.get("name") or "",
        description=row.get("description"),
        label=row.get("label"),
        period=period,
        status=normalize_status(row.get("status")),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
        assignments=ordered,
        schedule=build_plan_schedule(ordered, period),
    )


def hydrate_plans(store: TableStore, rows: Sequence[Row]) -> list[PlanOut]:
    """
    Nest assignments (and their workout names) onto plan rows.

    One batched read for all ``plan_workouts`` rows, one for the referenced
    workouts. Failed reads degrade to plans without assignments or to
    assignments without workout names.
    """
    links = fetch_grouped(
        store,
        "plan_workouts",
        "plan_id",
        (row["id"] for row in rows),
        columns=ASSIGNMENT_COLUMNS,
    )
    workout_ids = distinct_keys(link["workout_id"] for group in links.values() for link in group)
    workouts = fetch_index(store, "workouts", workout_ids, columns=WORKOUT_REF_COLUMNS)

    return [
        plan_to_out(
            row,
            [
                _assignment_to_out(link, workouts.get(str(link["workout_id"])))
                for link in links.get(str(row["id"]), ())
            ],
        )
        for row in rows
    ]


def workout_to_option(row: Mapping[str, Any]) -> WorkoutOptionOut:
    return WorkoutOptionOut(
        id=row["id"],
        name=row.get("name") or "",
        rest_interval=row.get("rest_interval"),
        description=row.get("description"),
    )
