"""Table-oriented data store contract.

The services talk to the data store exclusively through :class:`TableStore`:
rows are plain dictionaries, tables are addressed by name and every call is an
independent, self-committing unit. This mirrors a remote row API (insert /
select / update / delete with filters) rather than an ORM session, so no call
ever spans more than one statement's worth of atomicity.

Design decisions
----------------
* Filters are equality (``where``) or membership (``where_in``) only.
* Sorting uses public tokens (``"-updated_at"``) like the rest of the API.
* Updates and deletes refuse to run without a filter.
* Every failure surfaces as :class:`fitflow.store.errors.DataStoreError`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

Row = dict[str, Any]


def parse_sort_tokens(raw: Iterable[str]) -> list[tuple[str, bool]]:
    """Parse public sort tokens into ``(field, is_desc)`` tuples.

    :param raw: Public tokens like ``["-created_at", "name"]``.
    :type raw: Iterable[str]
    :returns: List of ``(field_name, is_desc)`` tokens.
    :rtype: list[tuple[str, bool]]
    """
    parsed: list[tuple[str, bool]] = []
    for token in raw:
        is_desc = token.startswith("-")
        field = token[1:] if is_desc else token
        field = field.strip()
        if field:
            parsed.append((field, is_desc))
    return parsed


class TableStore(ABC):
    """Row CRUD against named tables."""

    @abstractmethod
    def insert(
        self,
        table: str,
        rows: Mapping[str, Any] | Sequence[Mapping[str, Any]],
        *,
        returning: bool = True,
    ) -> list[Row]:
        """Insert one or many rows.

        :param table: Target table name.
        :param rows: A single row mapping or a sequence of rows sharing keys.
        :param returning: When ``True`` the stored rows (with generated
            columns) are returned in input order; otherwise ``[]``.
        """

    @abstractmethod
    def select(
        self,
        table: str,
        *,
        columns: Sequence[str] | None = None,
        where: Mapping[str, Any] | None = None,
        where_in: Mapping[str, Iterable[Any]] | None = None,
        order_by: Iterable[str] = (),
        limit: int | None = None,
    ) -> list[Row]:
        """Select rows matching every filter."""

    @abstractmethod
    def update(
        self,
        table: str,
        values: Mapping[str, Any],
        *,
        where: Mapping[str, Any],
        returning: bool = True,
    ) -> list[Row]:
        """Update rows matching ``where``; returns the affected rows."""

    @abstractmethod
    def delete(
        self,
        table: str,
        *,
        where: Mapping[str, Any] | None = None,
        where_in: Mapping[str, Iterable[Any]] | None = None,
    ) -> int:
        """Delete rows matching the filters; returns the deleted row count."""

    @abstractmethod
    def ping(self) -> None:
        """Raise when the store is unreachable."""

    def refresh(self, name: str | None = None) -> None:
        """Forget any cached schema information (no-op by default)."""

    def select_one(
        self,
        table: str,
        *,
        columns: Sequence[str] | None = None,
        where: Mapping[str, Any],
    ) -> Row | None:
        """Return the first row matching ``where`` or ``None``."""
        rows = self.select(table, columns=columns, where=where, limit=1)
        return rows[0] if rows else None


__all__ = ["Row", "TableStore", "parse_sort_tokens"]
