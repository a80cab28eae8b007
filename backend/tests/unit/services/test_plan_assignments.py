# tests/unit/services/test_plan_assignments.py
from __future__ import annotations

import pytest

from fitflow.services.plans.assignments import (
    AssignmentIn,
    RawAssignments,
    build_assignment_rows,
    clamp_week,
    max_weeks_for_period,
    normalize_assignments_input,
    normalize_period,
    normalize_status,
    parse_leading_int,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("3", 3), ("3rd", 3), ("  12 weeks", 12), (2.0, 2), (float("inf"), None), (True, None), ("x", None), (None, None)],
)
def test_parse_leading_int(raw, expected):
    assert parse_leading_int(raw) == expected


def test_period_and_status_fall_back():
    assert normalize_period("BI-WEEKLY") == "bi-weekly"
    assert normalize_period("yearly") == "weekly"
    assert normalize_status("Active") == "active"
    assert normalize_status("archived") == "inactive"
    assert [max_weeks_for_period(p) for p in ("weekly", "bi-weekly", "monthly", None)] == [1, 2, 4, 1]


@pytest.mark.parametrize(
    ("raw", "period", "expected"),
    [("5", "monthly", 4), ("2", "weekly", 1), ("0", "monthly", 1), ("abc", "bi-weekly", 1), (None, "monthly", 1)],
)
def test_clamp_week(raw, period, expected):
    assert clamp_week(raw, period) == expected


# ---------------------------- Input zipping ------------------------------- #
def test_weeks_are_clamped_into_the_period():
    result = normalize_assignments_input(["5"], ["2"], ["7"], "monthly")

    assert result == [AssignmentIn(workout_id=7, week_index=4, day_of_week=2)]


def test_out_of_range_days_are_dropped():
    result = normalize_assignments_input(
        ["1", "1", "1", "1"], ["8", "0", "Mon", "3"], ["a", "b", "c", "d"], "weekly"
    )

    assert [item.workout_id for item in result] == ["d"]


def test_scalar_week_and_day_only_fill_the_first_entry():
    result = normalize_assignments_input("2", "3", ["a", "b"], "bi-weekly")

    assert result == [AssignmentIn(workout_id="a", week_index=2, day_of_week=3)]


def test_blank_workouts_are_dropped_and_short_arrays_default():
    result = normalize_assignments_input(["2"], ["1", "4"], ["", "w2", None], "bi-weekly")

    # index 1 has no week: defaults to week 1
    assert result == [AssignmentIn(workout_id="w2", week_index=1, day_of_week=4)]


def test_result_is_stably_sorted_by_week_then_day():
    result = normalize_assignments_input(
        ["2", "1", "1", "1"], ["1", "3", "1", "1"], ["a", "b", "c", "d"], "bi-weekly"
    )

    assert [item.workout_id for item in result] == ["c", "d", "b", "a"]


# ------------------------------ Row shaping ------------------------------- #
def test_rows_get_contiguous_positions_and_drop_duplicates():
    assignments = [
        AssignmentIn(workout_id=1, week_index=1, day_of_week=1),
        AssignmentIn(workout_id=2, week_index=1, day_of_week=1),
        AssignmentIn(workout_id=1, week_index=1, day_of_week=1),
        AssignmentIn(workout_id=3, week_index=2, day_of_week=5),
    ]

    rows = build_assignment_rows(10, assignments, "bi-weekly")

    assert [(row["workout_id"], row["position"], row["order_index"]) for row in rows] == [
        (1, 1, 0),
        (2, 2, 1),
        (3, 3, 2),
    ]
    assert {row["plan_id"] for row in rows} == {10}


def test_rows_reclamp_weeks_for_a_shorter_period():
    rows = build_assignment_rows(1, [AssignmentIn(workout_id=1, week_index=4, day_of_week=2)], "weekly")

    assert rows[0]["week_index"] == 1


# ----------------------------- Payload reading ---------------------------- #
def test_raw_assignments_accept_bracketed_form_names():
    raw = RawAssignments.from_payload(
        {
            "assignment_week[]": ["1", "2"],
            "assignment_day[]": ["1", "3"],
            "assignment_workout[]": ["4", "5"],
        }
    )

    assert raw == RawAssignments(weeks=("1", "2"), days=("1", "3"), workouts=("4", "5"))


def test_raw_assignments_wrap_scalars():
    raw = RawAssignments.from_payload(
        {"assignment_week": "1", "assignment_day": "2", "assignment_workout": "9"}
    )

    assert raw == RawAssignments(weeks=("1",), days=("2",), workouts=("9",))


def test_raw_assignments_accept_structured_list():
    raw = RawAssignments.from_payload(
        {
            "assignments": [
                {"week_index": 2, "day_of_week": 3, "workout_id": 8},
                {"week": "1", "day": "5", "workout": "9"},
                "ignored",
            ]
        }
    )

    assert raw.weeks == (2, "1")
    assert raw.days == (3, "5")
    assert raw.workouts == (8, "9")
