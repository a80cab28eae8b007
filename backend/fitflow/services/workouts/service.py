# comments in English; strict reST docstrings
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from fitflow.services._shared.base import BaseService, utcnow
from fitflow.services._shared.errors import NotFoundError
from fitflow.services._shared.join_rows import WORKOUT_EXERCISES, insert_join_rows
from fitflow.services._shared.normalizers import parse_record_id
from fitflow.services.exercises.service import ExerciseService
from fitflow.store import DataStoreError, Row

from ._converters import hydrate_workouts
from .dto import WorkoutEditContextOut, WorkoutExerciseIn, WorkoutOut
from .payload import build_workout_exercise_rows, build_workout_payload, normalize_workout_exercises

logger = logging.getLogger(__name__)

TABLE = "workouts"


class WorkoutService(BaseService):
    """
    Application service for workouts and their ordered exercise links.

    Responsibilities
    ----------------
    - Validate workouts, then write the parent row followed by its
      ``workout_exercises`` rows through the join-row fallback ladder.
    - Fully replace the exercise list on update (delete all, insert all).
    - Hydrate exercises in batches on every read.

    Notes
    -----
    - A failed link insert on create removes the links and the workout again
      (best effort); on update the workout keeps its new fields.
    """

    def __init__(self, store, *, read_workers: int = 4, selection_limit: int = 200) -> None:
        super().__init__(store, read_workers=read_workers)
        self.selection_limit = selection_limit

    # ------------------------------------------------------------------ #
    # Create / update / delete
    # ------------------------------------------------------------------ #

    def create(self, payload: Mapping[str, Any], exercise_ids: Any = None) -> WorkoutOut:
        """
        Create a workout and link its exercises in submission order.

        :param payload: Raw request payload.
        :param exercise_ids: Exercise list; defaults to ``payload["exercise_ids"]``.
        :returns: Hydrated workout.
        :raises ValidationError: When a field contract is violated.
        :raises PermissionDeniedError: When an access policy blocks the writes.
        :raises StoreError: When a write fails; partial rows are removed first.
        """
        row = build_workout_payload(payload)
        exercises = self._exercises_from(payload, exercise_ids)

        try:
            created = self.store.insert(TABLE, row)[0]
        except DataStoreError as exc:
            raise self.translate_exceptions("create workout", exc, target="workout writes") from exc

        try:
            self._link_exercises(created["id"], exercises)
        except DataStoreError as exc:
            self._rollback(created["id"])
            raise self.translate_exceptions(
                "connect exercises to workout",
                exc,
                target="workout exercises",
                workout_id=created["id"],
            ) from exc
        except Exception:
            self._rollback(created["id"])
            raise

        logger.info(
            "workout.created",
            extra={"workout_id": created["id"], "count": len(exercises)},
        )
        return hydrate_workouts(self.store, [created])[0]

    def update(self, workout_id: Any, payload: Mapping[str, Any], exercise_ids: Any = None) -> WorkoutOut:
        """
        Update a workout and replace its exercise list.

        :raises NotFoundError: When the id does not resolve.
        """
        key = parse_record_id(workout_id, "workout")
        row = build_workout_payload(payload)
        exercises = self._exercises_from(payload, exercise_ids)
        row["updated_at"] = utcnow()

        try:
            current = self._update_row(key, row)
        except DataStoreError as exc:
            raise self.translate_exceptions(
                "update workout", exc, target="workout writes", workout_id=key
            ) from exc

        try:
            self.store.delete(WORKOUT_EXERCISES.name, where={"workout_id": current["id"]})
            self._link_exercises(current["id"], exercises)
        except DataStoreError as exc:
            raise self.translate_exceptions(
                "update workout exercises",
                exc,
                target="workout exercises",
                workout_id=key,
            ) from exc

        return hydrate_workouts(self.store, [current])[0]

    def delete(self, workout_id: Any) -> None:
        """
        Delete a workout; its exercise links and plan slots cascade.

        :raises NotFoundError: When nothing was deleted.
        """
        key = parse_record_id(workout_id, "workout")
        try:
            removed = self.store.delete(TABLE, where={"id": key})
        except DataStoreError as exc:
            raise self.translate_exceptions(
                "delete workout", exc, target="workout writes", workout_id=key
            ) from exc
        if not removed:
            raise NotFoundError("Workout", key)

    # ------------------------------------------------------------------ #
    # Read
    # ------------------------------------------------------------------ #

    def get(self, workout_id: Any) -> WorkoutOut:
        key = parse_record_id(workout_id, "workout")
        try:
            row = self.store.select_one(TABLE, where={"id": key})
        except DataStoreError as exc:
            raise self.translate_exceptions("load workout", exc, workout_id=key) from exc
        if row is None:
            raise NotFoundError("Workout", key)
        return hydrate_workouts(self.store, [row])[0]

    def list(self, limit: int = 20) -> list[WorkoutOut]:
        """Most recently performed workouts first."""
        try:
            rows = self.store.select(
                TABLE, order_by=("-performed_at", "-created_at"), limit=limit
            )
        except DataStoreError as exc:
            raise self.translate_exceptions("load workouts", exc) from exc
        return hydrate_workouts(self.store, rows)

    def edit_context(self, workout_id: Any) -> WorkoutEditContextOut:
        """
        Load a workout and the exercise picker concurrently.

        :raises NotFoundError: When the workout does not exist. A failed
            picker read only empties the options.
        """
        exercises = ExerciseService(self.store)
        workout, options = self.run_concurrently(
            lambda: self.get(workout_id),
            lambda: exercises.options(limit=self.selection_limit),
        )
        return WorkoutEditContextOut(workout=workout, exercise_options=tuple(options))

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _exercises_from(payload: Mapping[str, Any], exercise_ids: Any) -> list[WorkoutExerciseIn]:
        raw = exercise_ids if exercise_ids is not None else payload.get("exercise_ids")
        if raw is None:
            raw = payload.get("exercise_ids[]", payload.get("exercises"))
        return normalize_workout_exercises(raw)

    def _update_row(self, key: Any, values: Mapping[str, Any]) -> Row:
        updated = self.store.update(TABLE, values, where={"id": key})
        if updated:
            return updated[0]
        # Some stores do not return affected rows; confirm existence instead.
        current = self.store.select_one(TABLE, where={"id": key})
        if current is None:
            raise NotFoundError("Workout", key)
        return current

    def _link_exercises(self, workout_id: Any, exercises: list[WorkoutExerciseIn]) -> None:
        rows = build_workout_exercise_rows(workout_id, exercises)
        strategy = insert_join_rows(self.store, WORKOUT_EXERCISES, workout_id, rows)
        if strategy is not None:
            logger.debug(
                "workout.exercises_linked",
                extra={"workout_id": workout_id, "rows": len(rows), "strategy": strategy},
            )

    def _rollback(self, workout_id: Any) -> None:
        for table, where in (
            (WORKOUT_EXERCISES.name, {"workout_id": workout_id}),
            (TABLE, {"id": workout_id}),
        ):
            try:
                self.store.delete(table, where=where)
            except DataStoreError as exc:
                logger.warning(
                    "workout.rollback_failed: %s",
                    exc,
                    extra={"workout_id": workout_id, "table": table, "kind": exc.kind.value},
                )
