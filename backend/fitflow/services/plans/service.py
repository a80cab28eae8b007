# comments in English; strict reST docstrings
from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date
from typing import Any

from fitflow.services._shared.base import BaseService, utcnow
from fitflow.services._shared.errors import NotFoundError
from fitflow.services._shared.join_rows import PLAN_WORKOUTS, insert_join_rows
from fitflow.services._shared.normalizers import parse_record_id
from fitflow.services.workouts._converters import load_workouts
from fitflow.store import DataStoreError, Row, TableStore

from ._converters import WORKOUT_OPTION_COLUMNS, hydrate_plans, workout_to_option
from .assignments import AssignmentIn, RawAssignments, build_assignment_rows
from .dto import PlanEditContextOut, PlanOut, PlanTodayOut, WorkoutOptionOut
from .payload import build_plan_payload
from .schedule import resolve_cycle_position, schedule_for_day

logger = logging.getLogger(__name__)

TABLE = "plans"
NEWEST_FIRST = ("-updated_at", "-created_at")


class PlanService(BaseService):
    """
    Application service for plans and their weekday assignments.

    Responsibilities
    ----------------
    - Validate plans and normalize assignment input.
    - Write the plan row, then its ``plan_workouts`` rows through the
      join-row fallback ladder; undo the plan when linking fails on create.
    - Hydrate assignments and derive the schedule grid on every read.
    - Resolve the active plan and the workouts due "today".

    Notes
    -----
    - "Active" is not unique in storage; the most recently updated row with
      ``status='active'`` wins.
    """

    def __init__(
        self,
        store: TableStore,
        *,
        read_workers: int = 4,
        selection_limit: int = 200,
    ) -> None:
        super().__init__(store, read_workers=read_workers)
        self.selection_limit = selection_limit

    # ------------------------------------------------------------------ #
    # Create / update / delete
    # ------------------------------------------------------------------ #

    def create(
        self,
        payload: Mapping[str, Any],
        raw_assignments: RawAssignments | None = None,
    ) -> PlanOut:
        """
        Create a plan and its assignments.

        :param payload: Raw request payload.
        :param raw_assignments: Parallel week/day/workout arrays; read from
            ``payload`` when omitted.
        :returns: Hydrated plan.
        :raises ValidationError: When the name is blank.
        :raises PermissionDeniedError: When an access policy blocks the
            assignment writes (the plan is removed first).
        :raises StoreError: When a write fails (the plan is removed first).
        """
        row, assignments = build_plan_payload(payload, raw_assignments)

        try:
            created = self.store.insert(TABLE, row)[0]
        except DataStoreError as exc:
            raise self.translate_exceptions("create plan", exc, target="plan writes") from exc

        try:
            self._link_workouts(created["id"], assignments, row["period"])
        except DataStoreError as exc:
            self._rollback(created["id"])
            raise self.translate_exceptions(
                "connect workouts to plan",
                exc,
                target="plan workouts",
                plan_id=created["id"],
            ) from exc
        except Exception:
            self._rollback(created["id"])
            raise

        logger.info(
            "plan.created",
            extra={"plan_id": created["id"], "count": len(assignments)},
        )
        return hydrate_plans(self.store, [created])[0]

    def update(
        self,
        plan_id: Any,
        payload: Mapping[str, Any],
        raw_assignments: RawAssignments | None = None,
    ) -> PlanOut:
        """
        Update a plan and fully replace its assignments.

        :raises NotFoundError: When the id does not resolve.
        :raises PermissionDeniedError: When an access policy blocks the writes.
        :raises StoreError: When a write fails; the plan keeps its new fields.
        """
        key = parse_record_id(plan_id, "plan")
        row, assignments = build_plan_payload(payload, raw_assignments)
        row["updated_at"] = utcnow()

        try:
            current = self._update_row(key, row)
        except DataStoreError as exc:
            raise self.translate_exceptions("update plan", exc, target="plan writes", plan_id=key) from exc

        try:
            self.store.delete(PLAN_WORKOUTS.name, where={"plan_id": current["id"]})
            self._link_workouts(current["id"], assignments, current.get("period") or row["period"])
        except DataStoreError as exc:
            raise self.translate_exceptions(
                "update plan workouts", exc, target="plan workouts", plan_id=key
            ) from exc

        return hydrate_plans(self.store, [current])[0]

    def delete(self, plan_id: Any) -> None:
        """
        Delete a plan; its assignments cascade, sessions keep their snapshot.

        :raises NotFoundError: When nothing was deleted.
        """
        key = parse_record_id(plan_id, "plan")
        try:
            removed = self.store.delete(TABLE, where={"id": key})
        except DataStoreError as exc:
            raise self.translate_exceptions("delete plan", exc, target="plan writes", plan_id=key) from exc
        if not removed:
            raise NotFoundError("Plan", key)

    # ------------------------------------------------------------------ #
    # Read
    # ------------------------------------------------------------------ #

    def get(self, plan_id: Any) -> PlanOut:
        key = parse_record_id(plan_id, "plan")
        try:
            row = self.store.select_one(TABLE, where={"id": key})
        except DataStoreError as exc:
            raise self.translate_exceptions("load plan", exc, plan_id=key) from exc
        if row is None:
            raise NotFoundError("Plan", key)
        return hydrate_plans(self.store, [row])[0]

    def list(self, limit: int = 50) -> list[PlanOut]:
        """Most recently updated plans first."""
        try:
            rows = self.store.select(TABLE, order_by=NEWEST_FIRST, limit=limit)
        except DataStoreError as exc:
            raise self.translate_exceptions("load plans", exc) from exc
        return hydrate_plans(self.store, rows)

    def get_active(self) -> PlanOut | None:
        """Return the most recently updated active plan, if any."""
        try:
            rows = self.store.select(
                TABLE, where={"status": "active"}, order_by=NEWEST_FIRST, limit=1
            )
        except DataStoreError as exc:
            raise self.translate_exceptions("load active plan", exc) from exc
        if not rows:
            return None
        return hydrate_plans(self.store, rows)[0]

    def get_today(self, today: date | None = None) -> PlanTodayOut:
        """
        Resolve the active plan's schedule cell for ``today``.

        The cycle is anchored on the plan's creation date. Workouts of the
        cell are returned with their exercises; a failed workout read leaves
        the list empty.

        :param today: Date to resolve; defaults to the current UTC date.
        """
        current = today or utcnow().date()
        plan = self.get_active()
        if plan is None:
            return PlanTodayOut(
                plan=None,
                week_index=1,
                day_of_week=current.isoweekday(),
                day=None,
                workouts=(),
            )

        anchor = plan.created_at if isinstance(plan.created_at, date) else None
        week_index, day_of_week = resolve_cycle_position(plan.period, anchor, current)
        day = schedule_for_day(plan.schedule, week_index, day_of_week)
        workout_ids = [item.id for item in day.workouts] if day is not None else []
        try:
            workouts = load_workouts(self.store, workout_ids)
        except DataStoreError as exc:
            logger.error(
                "plan.today_workouts_failed: %s",
                exc,
                extra={"plan_id": plan.id, "table": exc.table, "kind": exc.kind.value},
            )
            workouts = []
        return PlanTodayOut(
            plan=plan,
            week_index=week_index,
            day_of_week=day_of_week,
            day=day,
            workouts=tuple(workouts),
        )

    def workout_options(self, limit: int | None = None) -> list[WorkoutOptionOut]:
        """Workouts for the assignment pickers; ``[]`` when the read fails."""
        try:
            rows = self.store.select(
                "workouts",
                columns=WORKOUT_OPTION_COLUMNS,
                order_by=("name",),
                limit=limit or self.selection_limit,
            )
        except DataStoreError as exc:
            logger.error(
                "plan.workout_options_failed: %s",
                exc,
                extra={"table": "workouts", "kind": exc.kind.value},
            )
            return []
        return [workout_to_option(row) for row in rows]

    def edit_context(self, plan_id: Any) -> PlanEditContextOut:
        """
        Load a plan and the workout picker concurrently.

        :raises NotFoundError: When the plan does not exist.
        """
        plan, options = self.run_concurrently(
            lambda: self.get(plan_id),
            self.workout_options,
        )
        return PlanEditContextOut(plan=plan, workout_options=tuple(options))

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _update_row(self, key: Any, values: Mapping[str, Any]) -> Row:
        updated = self.store.update(TABLE, values, where={"id": key})
        if updated:
            return updated[0]
        # Some stores do not return affected rows; confirm existence instead.
        current = self.store.select_one(TABLE, where={"id": key})
        if current is None:
            raise NotFoundError("Plan", key)
        return current

    def _link_workouts(self, plan_id: Any, assignments: list[AssignmentIn], period: str) -> None:
        rows = build_assignment_rows(plan_id, assignments, period)
        strategy = insert_join_rows(self.store, PLAN_WORKOUTS, plan_id, rows)
        if strategy is not None:
            logger.debug(
                "plan.workouts_linked",
                extra={"plan_id": plan_id, "rows": len(rows), "strategy": strategy},
            )

    def _rollback(self, plan_id: Any) -> None:
        for table, where in (
            (PLAN_WORKOUTS.name, {"plan_id": plan_id}),
            (TABLE, {"id": plan_id}),
        ):
            try:
                self.store.delete(table, where=where)
            except DataStoreError as exc:
                logger.warning(
                    "plan.rollback_failed: %s",
                    exc,
                    extra={"plan_id": plan_id, "table": table, "kind": exc.kind.value},
                )
