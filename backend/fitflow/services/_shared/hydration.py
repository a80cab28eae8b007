"""
Batched child lookups for read paths.

Both helpers issue a single ``IN (...)`` select for all parents at once and
key the result by ``str(id)`` so integer and text ids compare equal. A failed
lookup is logged and yields an empty mapping: callers render parents with
empty children rather than failing the whole response.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence
from typing import Any

from fitflow.store import DataStoreError, Row, TableStore

logger = logging.getLogger(__name__)


def distinct_keys(values: Iterable[Any]) -> list[Any]:
    """Drop ``None`` and duplicates (compared as strings), keeping order."""
    seen: dict[str, Any] = {}
    for value in values:
        if value is None:
            continue
        seen.setdefault(str(value), value)
    return list(seen.values())


def fetch_grouped(
    store: TableStore,
    table: str,
    key_column: str,
    keys: Iterable[Any],
    *,
    columns: Sequence[str] | None = None,
    order_by: Iterable[str] = (),
) -> dict[str, list[Row]]:
    """
    Fetch rows whose ``key_column`` is in ``keys`` grouped by that key.

    :returns: ``{str(key): [rows...]}``; keys without rows are absent.
    """
    wanted = distinct_keys(keys)
    if not wanted:
        return {}
    try:
        rows = store.select(
            table,
            columns=columns,
            where_in={key_column: wanted},
            order_by=order_by,
        )
    except DataStoreError as exc:
        logger.error(
            "hydration.fetch_failed: %s",
            exc,
            extra={"table": table, "kind": exc.kind.value, "rows": len(wanted)},
        )
        return {}

    grouped: dict[str, list[Row]] = defaultdict(list)
    for row in rows:
        grouped[str(row.get(key_column))].append(row)
    return dict(grouped)


def fetch_index(
    store: TableStore,
    table: str,
    ids: Iterable[Any],
    *,
    columns: Sequence[str] | None = None,
    key_column: str = "id",
) -> dict[str, Row]:
    """Fetch rows by id and index them by ``str(id)``."""
    grouped = fetch_grouped(store, table, key_column, ids, columns=columns)
    return {key: rows[0] for key, rows in grouped.items()}


__all__ = ["distinct_keys", "fetch_grouped", "fetch_index"]
