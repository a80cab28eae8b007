"""
Join-row insertion with a fixed fallback per failure class.

Join tables (``plan_workouts``, ``workout_exercises``) are written in one
bulk insert. Databases that were migrated at different times disagree on the
ordering column and on which constraints exist, so a failed insert is retried
exactly once with the strategy matching the failure:

=================  ==========================================================
Failure            Retry
=================  ==========================================================
MISSING_COLUMN     same rows without the ordering column
UNIQUE_VIOLATION   only the bare columns plus a renumbered ``position``
CHECK_VIOLATION    delete the parent's rows, reinsert renumbered from 1
anything else      no retry, the error propagates
=================  ==========================================================

A retry that fails raises its own :class:`DataStoreError`.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from fitflow.store import DataStoreError, ErrorKind, Row, TableStore

logger = logging.getLogger(__name__)

STRATEGY_ORDERED = "ordered"
STRATEGY_WITHOUT_ORDER = "without_order"
STRATEGY_BARE_POSITION = "bare_position"
STRATEGY_RENUMBERED = "renumbered"


@dataclass(frozen=True, slots=True)
class JoinTable:
    """
    Shape of a parent-owned join table.

    :param name: Table name.
    :param parent_column: Column holding the owning parent's id.
    :param bare_columns: Columns kept when retrying after a uniqueness
        violation (the position column is appended automatically).
    :param order_column: Optional 0-based ordering column.
    :param position_column: 1-based position column.
    """

    name: str
    parent_column: str
    bare_columns: tuple[str, ...]
    order_column: str = "order_index"
    position_column: str = "position"


PLAN_WORKOUTS = JoinTable(
    name="plan_workouts",
    parent_column="plan_id",
    bare_columns=("plan_id", "workout_id", "week_index", "day_of_week"),
)

WORKOUT_EXERCISES = JoinTable(
    name="workout_exercises",
    parent_column="workout_id",
    bare_columns=("workout_id", "exercise_id", "target_sets", "target_reps", "notes"),
)


def _without(row: Mapping[str, Any], *columns: str) -> Row:
    return {key: value for key, value in row.items() if key not in columns}


def _renumbered(spec: JoinTable, rows: Sequence[Mapping[str, Any]], *, bare: bool) -> list[Row]:
    renumbered: list[Row] = []
    for index, row in enumerate(rows):
        if bare:
            base = {column: row[column] for column in spec.bare_columns if column in row}
        else:
            base = _without(row, spec.order_column, spec.position_column)
        base[spec.position_column] = index + 1
        renumbered.append(base)
    return renumbered


def insert_join_rows(
    store: TableStore,
    spec: JoinTable,
    parent_id: Any,
    rows: Sequence[Mapping[str, Any]],
) -> str | None:
    """
    Insert ``rows`` for ``parent_id`` applying the fallback ladder.

    :param store: Table store to write through.
    :param spec: Join table description.
    :param parent_id: Id of the owning parent (used by the check-violation
        cleanup).
    :param rows: Fully built rows, including the ordering and position
        columns.
    :returns: Name of the strategy that succeeded, or ``None`` when there was
        nothing to insert.
    :raises DataStoreError: When the first attempt fails with an
        unrecoverable kind or the retry fails.
    """
    if not rows:
        return None

    try:
        store.insert(spec.name, rows, returning=False)
        return STRATEGY_ORDERED
    except DataStoreError as exc:
        first = exc

    context = {"table": spec.name, "kind": first.kind.value, "rows": len(rows)}

    if first.kind is ErrorKind.MISSING_COLUMN:
        strategy = STRATEGY_WITHOUT_ORDER
        retry = [_without(row, spec.order_column) for row in rows]
    elif first.kind is ErrorKind.UNIQUE_VIOLATION:
        strategy = STRATEGY_BARE_POSITION
        retry = _renumbered(spec, rows, bare=True)
    elif first.kind is ErrorKind.CHECK_VIOLATION:
        strategy = STRATEGY_RENUMBERED
        store.delete(spec.name, where={spec.parent_column: parent_id})
        retry = _renumbered(spec, rows, bare=False)
    else:
        raise first

    logger.warning(
        "join_rows.fallback",
        extra={**context, "strategy": strategy},
    )
    store.insert(spec.name, retry, returning=False)
    return strategy


__all__ = [
    "JoinTable",
    "PLAN_WORKOUTS",
    "STRATEGY_BARE_POSITION",
    "STRATEGY_ORDERED",
    "STRATEGY_RENUMBERED",
    "STRATEGY_WITHOUT_ORDER",
    "WORKOUT_EXERCISES",
    "insert_join_rows",
]
