# comments in English; strict reST docstrings
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from fitflow.services._shared.base import BaseService, utcnow
from fitflow.services._shared.errors import NotFoundError
from fitflow.services._shared.normalizers import normalize_nullable_string, parse_record_id
from fitflow.store import DataStoreError, Row

from ._converters import SET_TABLE, WORKOUT_TABLE, hydrate_sessions, session_to_out
from .dto import SessionOut, SessionWorkoutIn, SetCompletionIn
from .payload import build_completion_payload, build_session_payload, build_session_set_rows

logger = logging.getLogger(__name__)

TABLE = "sessions"
START_TARGET = "session creation"
UPDATE_TARGET = "session updates"


class SessionService(BaseService):
    """
    Application service for logged training sessions.

    Responsibilities
    ----------------
    - Start a session: session row, then one ``session_workouts`` row per
      workout, then one ``session_sets`` row per planned set.
    - Complete or abort a session and record per-set outcomes.
    - Read sessions with their workouts and sets nested.

    Notes
    -----
    - Workout and exercise names are snapshotted at start time.
    - Completion is best effort: set updates applied before a failing one
      stay committed.
    """

    # ------------------------------------------------------------------ #
    # Start
    # ------------------------------------------------------------------ #

    def create(self, payload: Mapping[str, Any]) -> SessionOut:
        """
        Start a session from the tracker payload.

        :returns: The stored session with its workouts and sets.
        :raises PermissionDeniedError: When an access policy blocks a write;
            rows written so far are removed first.
        :raises StoreError: When a write fails; rows written so far are
            removed first.
        """
        row, workouts = build_session_payload(payload)
        row.update(status="in-progress", started_at=utcnow())

        try:
            session = self.store.insert(TABLE, row)[0]
        except DataStoreError as exc:
            raise self.translate_exceptions("start session", exc, target=START_TARGET) from exc

        try:
            workout_rows, set_rows = self._insert_children(session["id"], row["day_index"], workouts)
        except DataStoreError as exc:
            self._rollback(session["id"])
            raise self.translate_exceptions(
                "start session", exc, target=START_TARGET, session_id=session["id"]
            ) from exc
        except Exception:
            self._rollback(session["id"])
            raise

        logger.info(
            "session.started",
            extra={"session_id": session["id"], "count": len(set_rows)},
        )
        grouped: dict[str, list[Row]] = {}
        for item in set_rows:
            grouped.setdefault(str(item["session_workout_id"]), []).append(item)
        return session_to_out(session, workout_rows, grouped)

    def _insert_children(
        self,
        session_id: Any,
        day_index: int,
        workouts: list[SessionWorkoutIn],
    ) -> tuple[list[Row], list[Row]]:
        if not workouts:
            return [], []

        workout_rows = self.store.insert(
            WORKOUT_TABLE,
            [
                {
                    "session_id": session_id,
                    "workout_id": workout.workout_id,
                    "workout_name": workout.workout_name,
                    "position": workout.position,
                }
                for workout in workouts
            ],
        )

        # Inserted rows come back in input order.
        set_payload: list[dict[str, Any]] = []
        for stored, workout in zip(workout_rows, workouts):
            for exercise in workout.exercises:
                set_payload.extend(build_session_set_rows(stored["id"], exercise, day_index))

        set_rows = self.store.insert(SET_TABLE, set_payload) if set_payload else []
        return workout_rows, set_rows

    def _rollback(self, session_id: Any) -> None:
        # Sets go with their session_workouts rows through the cascade.
        for table, where in (
            (WORKOUT_TABLE, {"session_id": session_id}),
            (TABLE, {"id": session_id}),
        ):
            try:
                self.store.delete(table, where=where)
            except DataStoreError as exc:
                logger.warning(
                    "session.rollback_failed: %s",
                    exc,
                    extra={"session_id": session_id, "table": table, "kind": exc.kind.value},
                )

    # ------------------------------------------------------------------ #
    # Finish
    # ------------------------------------------------------------------ #

    def complete(self, session_id: Any, payload: Mapping[str, Any]) -> SessionOut:
        """
        Mark a session completed, then record each reported set.

        Sets are updated one at a time in submission order. Entries without
        an id, or naming a set of another session, are skipped; the first
        failing update stops the loop and earlier updates remain applied.

        :raises NotFoundError: When the session does not exist.
        :raises PermissionDeniedError: When an access policy blocks a write.
        :raises StoreError: When the session or a set cannot be updated.
        """
        key = parse_record_id(session_id, "session")
        completion = build_completion_payload(payload)

        updates: dict[str, Any] = {
            "status": "completed",
            "notes": completion.notes,
            "ended_at": completion.ended_at or utcnow(),
            "updated_at": utcnow(),
        }
        if completion.duration_seconds is not None:
            updates["duration_seconds"] = completion.duration_seconds

        try:
            self._update_row(key, updates)
        except DataStoreError as exc:
            raise self.translate_exceptions(
                "complete session", exc, target=UPDATE_TARGET, session_id=key
            ) from exc

        owned = self._owned_set_ids(key) if completion.sets else frozenset()
        for item in completion.sets:
            if str(item.id) not in owned:
                logger.warning(
                    "session.foreign_set_skipped",
                    extra={"session_id": key, "set_id": item.id},
                )
                continue
            self._record_set(key, item)

        logger.info(
            "session.completed",
            extra={"session_id": key, "count": len(completion.sets)},
        )
        return self.get(key)

    def _owned_set_ids(self, session_id: Any) -> frozenset[str]:
        try:
            workouts = self.store.select(WORKOUT_TABLE, columns=("id",), where={"session_id": session_id})
            sets = self.store.select(
                SET_TABLE,
                columns=("id",),
                where_in={"session_workout_id": [row["id"] for row in workouts]},
            )
        except DataStoreError as exc:
            raise self.translate_exceptions(
                "complete session", exc, target=UPDATE_TARGET, session_id=session_id
            ) from exc
        return frozenset(str(row["id"]) for row in sets)

    def _record_set(self, session_id: Any, item: SetCompletionIn) -> None:
        values = {
            "completed": item.completed,
            "actual_reps": item.actual_reps,
            "notes": item.notes,
            "completed_at": utcnow() if item.completed else None,
        }
        try:
            self.store.update(SET_TABLE, values, where={"id": item.id}, returning=False)
        except DataStoreError as exc:
            raise self.translate_exceptions(
                "complete session",
                exc,
                target=UPDATE_TARGET,
                session_id=session_id,
                set_id=item.id,
            ) from exc

    def abort(self, session_id: Any, notes: Any = None) -> SessionOut:
        """
        Mark a session aborted and stamp its end time.

        :param notes: Replaces the session notes when non-blank.
        :raises NotFoundError: When the session does not exist.
        """
        key = parse_record_id(session_id, "session")
        updates: dict[str, Any] = {
            "status": "aborted",
            "ended_at": utcnow(),
            "updated_at": utcnow(),
        }
        text = normalize_nullable_string(notes)
        if text is not None:
            updates["notes"] = text

        try:
            self._update_row(key, updates)
        except DataStoreError as exc:
            raise self.translate_exceptions(
                "abort session", exc, target=UPDATE_TARGET, session_id=key
            ) from exc
        return self.get(key)

    # ------------------------------------------------------------------ #
    # Read
    # ------------------------------------------------------------------ #

    def get(self, session_id: Any) -> SessionOut:
        key = parse_record_id(session_id, "session")
        try:
            row = self.store.select_one(TABLE, where={"id": key})
        except DataStoreError as exc:
            raise self.translate_exceptions("load session", exc, session_id=key) from exc
        if row is None:
            raise NotFoundError("Session", key)
        return hydrate_sessions(self.store, [row])[0]

    def list_recent(self, limit: int = 20) -> list[SessionOut]:
        """Most recently started sessions first."""
        try:
            rows = self.store.select(TABLE, order_by=("-started_at", "-id"), limit=limit)
        except DataStoreError as exc:
            raise self.translate_exceptions("load sessions", exc) from exc
        return hydrate_sessions(self.store, rows)

    def _update_row(self, key: Any, values: Mapping[str, Any]) -> Row:
        updated = self.store.update(TABLE, values, where={"id": key})
        if updated:
            return updated[0]
        current = self.store.select_one(TABLE, where={"id": key})
        if current is None:
            raise NotFoundError("Session", key)
        return current
