# tests/unit/services/test_join_rows.py
from __future__ import annotations

import logging

import pytest
from sqlalchemy import text

from fitflow.services._shared.join_rows import (
    PLAN_WORKOUTS,
    STRATEGY_BARE_POSITION,
    STRATEGY_ORDERED,
    STRATEGY_RENUMBERED,
    STRATEGY_WITHOUT_ORDER,
    insert_join_rows,
)
from fitflow.services.plans.assignments import AssignmentIn, build_assignment_rows
from fitflow.store import DataStoreError, ErrorKind
from tests.factories.plan import PlanFactory
from tests.factories.workout import WorkoutFactory
from tests.helpers.faults import FaultyStore


# ------------------------------ Fixtures ---------------------------------- #
@pytest.fixture()
def faulty(store) -> FaultyStore:
    return FaultyStore(store)


@pytest.fixture()
def plan_rows(store):
    """Three assignment rows for a fresh plan (Monday x2, Wednesday)."""
    plan = PlanFactory(period="weekly")
    workouts = [WorkoutFactory() for _ in range(3)]
    assignments = [
        AssignmentIn(workout_id=workouts[0]["id"], week_index=1, day_of_week=1),
        AssignmentIn(workout_id=workouts[1]["id"], week_index=1, day_of_week=1),
        AssignmentIn(workout_id=workouts[2]["id"], week_index=1, day_of_week=3),
    ]
    return plan["id"], build_assignment_rows(plan["id"], assignments, "weekly")


def stored(store, plan_id):
    return store.select(
        "plan_workouts",
        columns=("workout_id", "position", "order_index"),
        where={"plan_id": plan_id},
        order_by=("position",),
    )


# -------------------------------- Tests ----------------------------------- #
def test_nothing_to_insert_returns_none(faulty):
    assert insert_join_rows(faulty, PLAN_WORKOUTS, 1, []) is None
    assert faulty.calls == []


def test_first_attempt_keeps_ordering_column(store, faulty, plan_rows):
    plan_id, rows = plan_rows

    assert insert_join_rows(faulty, PLAN_WORKOUTS, plan_id, rows) == STRATEGY_ORDERED
    assert [(r["position"], r["order_index"]) for r in stored(store, plan_id)] == [(1, 0), (2, 1), (3, 2)]
    assert len(faulty.calls_for("insert", "plan_workouts")) == 1


def test_missing_column_retries_without_ordering_column(store, faulty, plan_rows, caplog):
    plan_id, rows = plan_rows
    faulty.fail("insert", "plan_workouts", ErrorKind.MISSING_COLUMN)

    with caplog.at_level(logging.WARNING, logger="fitflow.services._shared.join_rows"):
        strategy = insert_join_rows(faulty, PLAN_WORKOUTS, plan_id, rows)

    assert strategy == STRATEGY_WITHOUT_ORDER
    retry = faulty.calls_for("insert", "plan_workouts")[1]["rows"]
    assert all("order_index" not in row for row in retry)
    assert [(r["position"], r["order_index"]) for r in stored(store, plan_id)] == [(1, None), (2, None), (3, None)]
    assert any(getattr(rec, "strategy", None) == STRATEGY_WITHOUT_ORDER for rec in caplog.records)


def test_unique_violation_retries_with_bare_columns(store, faulty, plan_rows):
    plan_id, rows = plan_rows
    faulty.fail("insert", "plan_workouts", ErrorKind.UNIQUE_VIOLATION)

    assert insert_join_rows(faulty, PLAN_WORKOUTS, plan_id, rows) == STRATEGY_BARE_POSITION

    retry = faulty.calls_for("insert", "plan_workouts")[1]["rows"]
    assert set(retry[0]) == {"plan_id", "workout_id", "week_index", "day_of_week", "position"}
    assert [r["position"] for r in stored(store, plan_id)] == [1, 2, 3]


def test_check_violation_clears_parent_rows_then_renumbers(store, faulty, plan_rows):
    plan_id, rows = plan_rows
    # leftover row from an earlier write
    store.insert("plan_workouts", {**rows[2], "position": 9, "order_index": 8})
    faulty.fail("insert", "plan_workouts", ErrorKind.CHECK_VIOLATION)

    assert insert_join_rows(faulty, PLAN_WORKOUTS, plan_id, rows) == STRATEGY_RENUMBERED

    assert faulty.calls_for("delete", "plan_workouts") == [{"where": {"plan_id": plan_id}, "where_in": None}]
    assert [r["position"] for r in stored(store, plan_id)] == [1, 2, 3]


def test_other_failures_are_not_retried(store, faulty, plan_rows):
    plan_id, rows = plan_rows
    faulty.fail("insert", "plan_workouts", ErrorKind.PERMISSION_DENIED)

    with pytest.raises(DataStoreError) as info:
        insert_join_rows(faulty, PLAN_WORKOUTS, plan_id, rows)

    assert info.value.kind is ErrorKind.PERMISSION_DENIED
    assert len(faulty.calls_for("insert", "plan_workouts")) == 1
    assert stored(store, plan_id) == []


def test_failed_retry_raises_its_own_error(faulty, plan_rows):
    plan_id, rows = plan_rows
    faulty.fail("insert", "plan_workouts", ErrorKind.MISSING_COLUMN)
    faulty.fail("insert", "plan_workouts", ErrorKind.OTHER)

    with pytest.raises(DataStoreError) as info:
        insert_join_rows(faulty, PLAN_WORKOUTS, plan_id, rows)

    assert info.value.kind is ErrorKind.OTHER
    assert len(faulty.calls_for("insert", "plan_workouts")) == 2


def test_database_without_ordering_column(store, engine, plan_rows):
    plan_id, rows = plan_rows
    with engine.begin() as conn:
        conn.execute(text("ALTER TABLE plan_workouts DROP COLUMN order_index"))
    store.refresh("plan_workouts")

    assert insert_join_rows(store, PLAN_WORKOUTS, plan_id, rows) == STRATEGY_WITHOUT_ORDER
    positions = store.select("plan_workouts", columns=("position",), order_by=("position",))
    assert [row["position"] for row in positions] == [1, 2, 3]
