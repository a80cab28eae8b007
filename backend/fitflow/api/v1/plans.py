"""Plan endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from fitflow.api.deps import json_response, parse_limit, plan_service, request_payload, timing
from fitflow.schemas import (
    PlanEditContextSchema,
    PlanSchema,
    PlanTodaySchema,
    TodayQuerySchema,
    build_meta,
)
from fitflow.schemas.plan import WorkoutOptionSchema

bp = Blueprint("plans", __name__)

plan_schema = PlanSchema()
plan_list_schema = PlanSchema(many=True)
edit_context_schema = PlanEditContextSchema()
today_schema = PlanTodaySchema()
today_query_schema = TodayQuerySchema()
workout_option_list_schema = WorkoutOptionSchema(many=True)


@bp.get("")
@timing
def list_plans():
    """Return plans, most recently updated first."""

    limit = parse_limit("PLAN_LIST_LIMIT")
    items = plan_service().list(limit=limit)
    return json_response({"data": plan_list_schema.dump(items), "meta": build_meta(count=len(items), limit=limit)})


@bp.post("")
@timing
def create_plan():
    """Create a plan from ``assignment_week[]``/``assignment_day[]``/``assignment_workout[]``."""

    plan = plan_service().create(request_payload())
    return json_response({"data": plan_schema.dump(plan)}, status=201)


@bp.get("/active")
@timing
def get_active_plan():
    """Return the active plan, or ``null`` when none is active."""

    plan = plan_service().get_active()
    return json_response({"data": plan_schema.dump(plan) if plan is not None else None})


@bp.get("/today")
@timing
def get_today():
    """Return the active plan's schedule cell for today (or ``?date=``)."""

    query = today_query_schema.load(request.args)
    today = plan_service().get_today(query["date"])
    return json_response({"data": today_schema.dump(today)})


@bp.get("/workout-options")
@timing
def list_workout_options():
    limit = parse_limit("SELECTION_LIST_LIMIT", max_limit=500)
    options = plan_service().workout_options(limit=limit)
    return json_response({"data": workout_option_list_schema.dump(options)})


@bp.get("/<plan_id>")
@timing
def get_plan(plan_id: str):
    plan = plan_service().get(plan_id)
    return json_response({"data": plan_schema.dump(plan)})


@bp.get("/<plan_id>/edit")
@timing
def edit_plan(plan_id: str):
    """Return the plan together with the workout picker options."""

    context = plan_service().edit_context(plan_id)
    return json_response({"data": edit_context_schema.dump(context)})


@bp.route("/<plan_id>", methods=["PUT", "PATCH"])
@timing
def update_plan(plan_id: str):
    plan = plan_service().update(plan_id, request_payload())
    return json_response({"data": plan_schema.dump(plan)})


@bp.delete("/<plan_id>")
@timing
def delete_plan(plan_id: str):
    plan_service().delete(plan_id)
    return "", 204
