"""
SQLAlchemy Core implementation of :class:`~fitflow.store.base.TableStore`.

Tables are reflected from the live database on first use instead of being
taken from the declared models, so the store follows whatever schema the
database really has. A column the caller sends but the table lacks surfaces
as ``ErrorKind.MISSING_COLUMN`` which callers may recover from.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any

from sqlalchemy import (
    Column,
    Engine,
    MetaData,
    Table,
    create_engine,
    delete,
    event,
    insert,
    select,
    text,
    update,
)
from sqlalchemy.exc import SQLAlchemyError

from .base import Row, TableStore, parse_sort_tokens
from .errors import DataStoreError, ErrorKind, translate_db_error

logger = logging.getLogger(__name__)


def enable_sqlite_foreign_keys(engine: Engine) -> None:
    """Turn on ``PRAGMA foreign_keys`` for every new SQLite connection.

    SQLite ignores ``ON DELETE CASCADE`` unless the pragma is set per
    connection. Other dialects are left untouched.
    """
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):  # pragma: no cover - driver glue
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_store_engine(url: str, *, echo: bool = False) -> Engine:
    """Create an engine suitable for :class:`SQLAlchemyTableStore`."""
    engine = create_engine(url, echo=echo, future=True)
    enable_sqlite_foreign_keys(engine)
    return engine


class SQLAlchemyTableStore(TableStore):
    """
    Engine-backed table store.

    Each call opens its own connection and, for writes, its own transaction
    (``engine.begin()``): it commits when the statement succeeds and rolls
    back otherwise. Nothing is shared between calls except the reflected
    schema cache.

    Parameters
    ----------
    engine:
        SQLAlchemy engine bound to the target database.
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self._metadata = MetaData()
        self._reflect_lock = threading.Lock()

    # ----------------------------- Schema cache ------------------------------

    def table(self, name: str) -> Table:
        """Return the reflected :class:`~sqlalchemy.Table` for ``name``.

        :raises DataStoreError: ``MISSING_RELATION`` when the table is absent.
        """
        with self._reflect_lock:
            cached = self._metadata.tables.get(name)
            if cached is not None:
                return cached
            try:
                return Table(name, self._metadata, autoload_with=self.engine)
            except SQLAlchemyError as exc:
                raise translate_db_error(exc, table=name) from exc

    def refresh(self, name: str | None = None) -> None:
        """Forget reflected tables so the next call re-reads the schema."""
        with self._reflect_lock:
            if name is None:
                self._metadata.clear()
                return
            cached = self._metadata.tables.get(name)
            if cached is not None:
                self._metadata.remove(cached)

    @staticmethod
    def _column(table: Table, name: str) -> Column[Any]:
        try:
            return table.c[name]
        except KeyError:
            raise DataStoreError(
                ErrorKind.MISSING_COLUMN,
                f"column {name!r} does not exist",
                table=table.name,
            ) from None

    def _ensure_columns(self, table: Table, names: Iterable[str]) -> None:
        for name in names:
            self._column(table, name)

    @contextmanager
    def _translating(self, table: str) -> Iterator[None]:
        try:
            yield
        except DataStoreError:
            raise
        except SQLAlchemyError as exc:
            error = translate_db_error(exc, table=table)
            logger.debug(
                "store.call_failed",
                extra={"table": table, "kind": error.kind.value},
            )
            raise error from exc
        except (OverflowError, TypeError, ValueError) as exc:
            # Driver-side bind failures bypass SQLAlchemy's wrapping.
            logger.debug(
                "store.bind_failed",
                extra={"table": table, "kind": ErrorKind.OTHER.value},
            )
            raise DataStoreError(ErrorKind.OTHER, str(exc), table=table) from exc

    def _filtered(self, stmt, table: Table, where, where_in):
        for name, value in (where or {}).items():
            stmt = stmt.where(self._column(table, name) == value)
        for name, values in (where_in or {}).items():
            stmt = stmt.where(self._column(table, name).in_(list(values)))
        return stmt

    @staticmethod
    def _membership(where_in: Mapping[str, Iterable[Any]] | None) -> dict[str, list[Any]]:
        return {name: list(values) for name, values in (where_in or {}).items()}

    # ------------------------------- CRUD ------------------------------------

    def insert(
        self,
        table: str,
        rows: Mapping[str, Any] | Sequence[Mapping[str, Any]],
        *,
        returning: bool = True,
    ) -> list[Row]:
        payload = [dict(rows)] if isinstance(rows, Mapping) else [dict(row) for row in rows]
        if not payload:
            return []
        target = self.table(table)
        self._ensure_columns(target, {key for row in payload for key in row})

        stmt = insert(target)
        with self._translating(table):
            with self.engine.begin() as conn:
                if not returning:
                    conn.execute(stmt, payload)
                    return []
                result = conn.execute(
                    stmt.returning(*target.c, sort_by_parameter_order=True), payload
                )
                return [dict(row) for row in result.mappings()]

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
        target = self.table(table)
        membership = self._membership(where_in)
        if any(not values for values in membership.values()):
            return []

        if columns:
            stmt = select(*(self._column(target, name) for name in columns))
        else:
            stmt = select(target)
        stmt = self._filtered(stmt, target, where, membership)
        for name, is_desc in parse_sort_tokens(order_by):
            column = self._column(target, name)
            stmt = stmt.order_by(column.desc() if is_desc else column.asc())
        if limit is not None:
            stmt = stmt.limit(max(1, int(limit)))

        with self._translating(table):
            with self.engine.connect() as conn:
                return [dict(row) for row in conn.execute(stmt).mappings()]

    def update(
        self,
        table: str,
        values: Mapping[str, Any],
        *,
        where: Mapping[str, Any],
        returning: bool = True,
    ) -> list[Row]:
        if not where:
            raise ValueError("update() requires at least one filter")
        target = self.table(table)
        self._ensure_columns(target, values)

        stmt = self._filtered(update(target).values(dict(values)), target, where, None)
        with self._translating(table):
            with self.engine.begin() as conn:
                if not returning:
                    conn.execute(stmt)
                    return []
                result = conn.execute(stmt.returning(*target.c))
                return [dict(row) for row in result.mappings()]

    def delete(
        self,
        table: str,
        *,
        where: Mapping[str, Any] | None = None,
        where_in: Mapping[str, Iterable[Any]] | None = None,
    ) -> int:
        if not where and not where_in:
            raise ValueError("delete() requires at least one filter")
        target = self.table(table)
        membership = self._membership(where_in)
        if any(not values for values in membership.values()):
            return 0

        stmt = self._filtered(delete(target), target, where, membership)
        with self._translating(table):
            with self.engine.begin() as conn:
                return int(conn.execute(stmt).rowcount or 0)

    def ping(self) -> None:
        with self._translating("-"):
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))


__all__ = ["SQLAlchemyTableStore", "create_store_engine", "enable_sqlite_foreign_keys"]
