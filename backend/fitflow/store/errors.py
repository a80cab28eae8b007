"""
Tagged errors produced at the data-store boundary.

Provider-specific failures (SQLSTATE codes, driver messages, SQLAlchemy
exceptions) are translated exactly once, here, into a :class:`DataStoreError`
carrying a stable :class:`ErrorKind`. Everything above the store switches on
the kind and never inspects raw driver errors.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from enum import Enum
from typing import Final

from sqlalchemy.exc import CompileError, NoSuchTableError


class ErrorKind(str, Enum):
    """Semantic classification of a store failure."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    MISSING_COLUMN = "missing_column"
    MISSING_RELATION = "missing_relation"
    UNIQUE_VIOLATION = "unique_violation"
    CHECK_VIOLATION = "check_violation"
    OTHER = "other"

    @property
    def is_schema_mismatch(self) -> bool:
        return self in (ErrorKind.MISSING_COLUMN, ErrorKind.MISSING_RELATION)


# PostgreSQL SQLSTATE codes plus the PostgREST codes a hosted store may report.
SQLSTATE_KINDS: Final[Mapping[str, ErrorKind]] = {
    "23505": ErrorKind.UNIQUE_VIOLATION,
    "23514": ErrorKind.CHECK_VIOLATION,
    "23502": ErrorKind.VALIDATION,
    "23503": ErrorKind.VALIDATION,
    "22P02": ErrorKind.VALIDATION,
    "42703": ErrorKind.MISSING_COLUMN,
    "PGRST204": ErrorKind.MISSING_COLUMN,
    "42P01": ErrorKind.MISSING_RELATION,
    "PGRST205": ErrorKind.MISSING_RELATION,
    "42501": ErrorKind.PERMISSION_DENIED,
    "PGRST116": ErrorKind.NOT_FOUND,
}

# Message fragments for drivers without SQLSTATE support (SQLite mostly).
MESSAGE_KINDS: Final[tuple[tuple[re.Pattern[str], ErrorKind], ...]] = (
    (re.compile(r"unique constraint failed|duplicate key value"), ErrorKind.UNIQUE_VIOLATION),
    (re.compile(r"check constraint failed|violates check constraint"), ErrorKind.CHECK_VIOLATION),
    (
        re.compile(r"has no column named|no such column|unconsumed column names|column .* does not exist"),
        ErrorKind.MISSING_COLUMN,
    ),
    (re.compile(r"no such table|relation .* does not exist"), ErrorKind.MISSING_RELATION),
    (
        re.compile(r"row-level security|permission denied|readonly database"),
        ErrorKind.PERMISSION_DENIED,
    ),
    (
        re.compile(r"foreign key constraint failed|not null constraint failed|violates foreign key"),
        ErrorKind.VALIDATION,
    ),
)


class DataStoreError(Exception):
    """
    Failure reported by the data store, classified by :class:`ErrorKind`.

    :param kind: Semantic classification used for control flow.
    :param message: Raw provider message, for server-side logs only.
    :param table: Table the failing call targeted, when known.
    :param code: Provider code (e.g. SQLSTATE), when one was available.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        table: str | None = None,
        code: str | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.table = table
        self.code = code

    def __str__(self) -> str:
        where = f" on {self.table}" if self.table else ""
        return f"{self.kind.value}{where}: {self.message}"


def _sqlstate(exc: BaseException) -> str | None:
    """Extract a SQLSTATE-like code from a DBAPI error wrapped by SQLAlchemy."""
    orig = getattr(exc, "orig", None)
    for candidate in (orig, exc):
        if candidate is None:
            continue
        for attr in ("sqlstate", "pgcode"):
            value = getattr(candidate, attr, None)
            if isinstance(value, str) and value:
                return value
    return None


def classify_db_error(exc: BaseException) -> tuple[ErrorKind, str | None]:
    """
    Classify a provider error into an :class:`ErrorKind`.

    The SQLSTATE code wins when present; otherwise the message is matched
    against known driver wordings.

    :returns: ``(kind, code)`` where ``code`` is the SQLSTATE, if any.
    """
    if isinstance(exc, NoSuchTableError):
        return ErrorKind.MISSING_RELATION, None

    code = _sqlstate(exc)
    if code is not None and code in SQLSTATE_KINDS:
        return SQLSTATE_KINDS[code], code

    message = str(getattr(exc, "orig", None) or exc).lower()
    if isinstance(exc, CompileError) and "unconsumed column names" in message:
        return ErrorKind.MISSING_COLUMN, code
    for pattern, kind in MESSAGE_KINDS:
        if pattern.search(message):
            return kind, code
    return ErrorKind.OTHER, code


def translate_db_error(exc: BaseException, *, table: str | None = None) -> DataStoreError:
    """Wrap ``exc`` into a :class:`DataStoreError` ready to be raised."""
    kind, code = classify_db_error(exc)
    message = str(getattr(exc, "orig", None) or exc)
    return DataStoreError(kind, message, table=table, code=code)


__all__ = [
    "DataStoreError",
    "ErrorKind",
    "classify_db_error",
    "translate_db_error",
]
