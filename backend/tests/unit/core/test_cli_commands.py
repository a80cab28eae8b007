# tests/unit/core/test_cli_commands.py
from __future__ import annotations

from fitflow.seeds import demo


def test_init_db_recreates_schema(app, app_store):
    app_store.insert("workouts", {"name": "Temporary"})
    runner = app.test_cli_runner()

    result = runner.invoke(args=["init-db", "--drop"])

    assert result.exit_code == 0, result.output
    assert "Database schema is ready." in result.output
    assert app_store.select("workouts") == []


def test_seed_run_is_idempotent(app, app_store):
    runner = app.test_cli_runner()

    first = runner.invoke(args=["seed", "run"])
    second = runner.invoke(args=["seed", "run"])

    assert first.exit_code == 0, first.output
    assert "exercises  created= 5  existing= 0" in first.output
    assert "plans      created= 1  existing= 0" in first.output
    assert second.exit_code == 0, second.output
    assert "plans      created= 0  existing= 1" in second.output
    assert len(app_store.select("exercises")) == len(demo.EXERCISE_FIXTURES)


def test_seeded_plan_schedule(app_store):
    demo.run_all(app_store)

    plan = app_store.select_one("plans", where={"name": demo.PLAN_FIXTURE["name"]})
    links = app_store.select("plan_workouts", where={"plan_id": plan["id"]}, order_by=("position",))

    assert plan["status"] == "active"
    assert [(row["week_index"], row["day_of_week"]) for row in links] == [
        (week, day) for week, day, _ in demo.PLAN_FIXTURE["assignments"]
    ]


def test_seed_fresh_requires_confirmation(app):
    result = app.test_cli_runner().invoke(args=["seed", "fresh"], input="n\n")

    assert result.exit_code != 0
    assert "Aborted" in result.output
