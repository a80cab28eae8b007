# tests/api/test_api_workouts.py
from __future__ import annotations

from tests.factories.exercise import ExerciseFactory

BASE = "/api/v1/workouts"


def test_create_workout_from_repeated_form_fields(client):
    squat, lunge = ExerciseFactory(name="Squat"), ExerciseFactory(name="Lunge")

    resp = client.post(
        BASE,
        data={"name": "Legs", "rest_interval": "90 s", "exercise_ids[]": [str(lunge["id"]), str(squat["id"])]},
    )

    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert data["exercise_ids"] == [lunge["id"], squat["id"]]
    assert [item["position"] for item in data["exercises"]] == [1, 2]
    assert [item["name"] for item in data["exercises"]] == ["Lunge", "Squat"]


def test_edit_update_and_delete(client):
    squat = ExerciseFactory(name="Squat")
    created = client.post(BASE, json={"name": "Legs"}).get_json()["data"]

    context = client.get(f"{BASE}/{created['id']}/edit").get_json()["data"]
    assert context["workout"]["exercises"] == []
    assert [option["name"] for option in context["exercise_options"]] == ["Squat"]

    updated = client.patch(
        f"{BASE}/{created['id']}",
        json={"name": "Legs v2", "exercises": [{"exercise_id": squat["id"], "target_sets": 5}]},
    ).get_json()["data"]
    assert updated["name"] == "Legs v2"
    assert updated["exercises"][0]["target_sets"] == 5

    listing = client.get(BASE).get_json()
    assert listing["meta"]["count"] == 1

    assert client.delete(f"{BASE}/{created['id']}").status_code == 204
    assert client.get(f"{BASE}/{created['id']}").status_code == 404


def test_invalid_performed_at(client):
    resp = client.post(BASE, json={"name": "Legs", "performed_at": "soon"})

    assert resp.status_code == 400
    assert resp.get_json()["detail"] == "Session date is invalid"
