# comments in English; strict reST docstrings
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from fitflow.services._shared.base import BaseService, utcnow
from fitflow.services._shared.errors import NotFoundError
from fitflow.services._shared.normalizers import parse_record_id
from fitflow.store import DataStoreError

from ._converters import OPTION_COLUMNS, exercise_to_option, exercise_to_out
from .dto import ExerciseOptionOut, ExerciseOut
from .payload import build_exercise_payload

logger = logging.getLogger(__name__)

TABLE = "exercises"


class ExerciseService(BaseService):
    """
    Application service for the **exercise catalog**.

    Responsibilities
    ----------------
    - Validate and persist exercises (single-row writes, no children).
    - List the catalog by name and provide picker options for workouts.

    Notes
    -----
    - Exercises are referenced by workouts and sessions, never owned; deleting
      one cascades to workout links only (session sets keep their snapshot).
    """

    # ------------------------------------------------------------------ #
    # Create / update / delete
    # ------------------------------------------------------------------ #

    def create(self, payload: Mapping[str, Any]) -> ExerciseOut:
        """
        Create an exercise.

        :param payload: Raw request payload.
        :returns: Persisted exercise.
        :rtype: :class:`ExerciseOut`
        :raises ValidationError: When a field contract is violated.
        :raises StoreError: When the insert fails.
        """
        row = build_exercise_payload(payload)
        try:
            created = self.store.insert(TABLE, row)
        except DataStoreError as exc:
            raise self.translate_exceptions("create exercise", exc, target="exercise writes") from exc
        logger.info("exercise.created", extra={"exercise_id": created[0]["id"]})
        return exercise_to_out(created[0])

    def update(self, exercise_id: Any, payload: Mapping[str, Any]) -> ExerciseOut:
        """
        Replace an exercise's fields.

        :raises NotFoundError: When the id does not resolve.
        """
        key = parse_record_id(exercise_id, "exercise")
        row = build_exercise_payload(payload)
        row["updated_at"] = utcnow()
        try:
            updated = self.store.update(TABLE, row, where={"id": key})
            if not updated:
                current = self.store.select_one(TABLE, where={"id": key})
                if current is None:
                    raise NotFoundError("Exercise", key)
                updated = [current]
        except DataStoreError as exc:
            raise self.translate_exceptions(
                "update exercise", exc, target="exercise writes", exercise_id=key
            ) from exc
        return exercise_to_out(updated[0])

    def delete(self, exercise_id: Any) -> None:
        """
        Delete an exercise.

        :raises NotFoundError: When nothing was deleted.
        """
        key = parse_record_id(exercise_id, "exercise")
        try:
            removed = self.store.delete(TABLE, where={"id": key})
        except DataStoreError as exc:
            raise self.translate_exceptions(
                "delete exercise", exc, target="exercise writes", exercise_id=key
            ) from exc
        if not removed:
            raise NotFoundError("Exercise", key)

    # ------------------------------------------------------------------ #
    # Read
    # ------------------------------------------------------------------ #

    def get(self, exercise_id: Any) -> ExerciseOut:
        key = parse_record_id(exercise_id, "exercise")
        try:
            row = self.store.select_one(TABLE, where={"id": key})
        except DataStoreError as exc:
            raise self.translate_exceptions("load exercise", exc, exercise_id=key) from exc
        if row is None:
            raise NotFoundError("Exercise", key)
        return exercise_to_out(row)

    def list(self, limit: int = 100) -> list[ExerciseOut]:
        """List exercises alphabetically."""
        try:
            rows = self.store.select(TABLE, order_by=("name",), limit=limit)
        except DataStoreError as exc:
            raise self.translate_exceptions("load exercises", exc) from exc
        return [exercise_to_out(row) for row in rows]

    def options(self, limit: int = 200) -> list[ExerciseOptionOut]:
        """Slim exercise list for pickers; returns ``[]`` when the read fails."""
        try:
            rows = self.store.select(TABLE, columns=OPTION_COLUMNS, order_by=("name",), limit=limit)
        except DataStoreError as exc:
            logger.error(
                "exercise.options_failed: %s",
                exc,
                extra={"table": TABLE, "kind": exc.kind.value},
            )
            return []
        return [exercise_to_option(row) for row in rows]
