# tests/api/test_api_plans.py
from __future__ import annotations

from datetime import datetime

from tests.factories.plan import PlanFactory
from tests.factories.workout import WorkoutFactory

BASE = "/api/v1/plans"


def test_create_plan_from_parallel_form_arrays(client):
    push, pull = WorkoutFactory(name="Push"), WorkoutFactory(name="Pull")

    resp = client.post(
        BASE,
        data={
            "name": "Split",
            "period": "bi-weekly",
            "status": "active",
            "assignment_week[]": ["3", "1"],
            "assignment_day[]": ["2", "1"],
            "assignment_workout[]": [str(pull["id"]), str(push["id"])],
        },
    )

    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert [(a["week_index"], a["day_of_week"], a["workout_name"]) for a in data["assignments"]] == [
        (1, 1, "Push"),
        (2, 2, "Pull"),
    ]
    schedule = data["schedule"]
    assert schedule["hasWorkouts"] is True
    assert [header["key"] for header in schedule["dayHeaders"]][:2] == ["mon", "tue"]
    assert len(schedule["weeks"]) == 2
    assert all(len(week["days"]) == 7 for week in schedule["weeks"])
    tuesday = schedule["weeks"][1]["days"][1]
    assert (tuesday["dayIndex"], tuesday["dayKey"], tuesday["dayName"]) == (2, "tue", "Tuesday")
    assert tuesday["workouts"][0]["name"] == "Pull"


def test_create_plan_from_json_assignments(client):
    legs = WorkoutFactory(name="Legs")

    resp = client.post(
        BASE,
        json={"name": "Weekly", "assignments": [{"week_index": 1, "day_of_week": 5, "workout_id": legs["id"]}]},
    )

    assert resp.status_code == 201
    assert resp.get_json()["data"]["assignments"][0]["position"] == 1


def test_active_plan_and_today(client):
    assert client.get(f"{BASE}/active").get_json() == {"data": None}

    legs = WorkoutFactory(name="Legs")
    plan = PlanFactory(name="Cycle", status="active", period="bi-weekly", created_at=datetime(2024, 1, 1))
    client.put(
        f"{BASE}/{plan['id']}",
        json={
            "name": "Cycle",
            "status": "active",
            "period": "bi-weekly",
            "assignments": [{"week_index": 2, "day_of_week": 3, "workout_id": legs["id"]}],
        },
    )

    active = client.get(f"{BASE}/active").get_json()["data"]
    assert active["name"] == "Cycle"

    today = client.get(f"{BASE}/today?date=2024-01-10").get_json()["data"]
    assert (today["week_index"], today["day_of_week"]) == (2, 3)
    assert today["day"]["dayName"] == "Wednesday"
    assert [w["name"] for w in today["workouts"]] == ["Legs"]

    rest = client.get(f"{BASE}/today?date=2024-01-11").get_json()["data"]
    assert rest["workouts"] == []


def test_today_rejects_malformed_date(client):
    resp = client.get(f"{BASE}/today?date=tomorrow")

    assert resp.status_code == 422
    assert "date" in resp.get_json()["details"]["errors"]


def test_workout_options_edit_and_delete(client):
    WorkoutFactory(name="Zeta")
    WorkoutFactory(name="Alpha")
    plan = client.post(BASE, json={"name": "Draft"}).get_json()["data"]

    options = client.get(f"{BASE}/workout-options").get_json()["data"]
    assert [option["name"] for option in options] == ["Alpha", "Zeta"]

    context = client.get(f"{BASE}/{plan['id']}/edit").get_json()["data"]
    assert context["plan"]["id"] == plan["id"]
    assert len(context["workout_options"]) == 2

    assert client.get(BASE).get_json()["meta"]["count"] == 1
    assert client.delete(f"{BASE}/{plan['id']}").status_code == 204
    assert client.get(f"{BASE}/{plan['id']}").status_code == 404


def test_blank_plan_name(client):
    resp = client.post(BASE, data={"name": ""})

    assert resp.status_code == 400
    assert resp.get_json()["detail"] == "Plan name is required"
