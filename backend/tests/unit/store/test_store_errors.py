# tests/unit/store/test_store_errors.py
from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError, NoSuchTableError, OperationalError

from fitflow.store import DataStoreError, ErrorKind, classify_db_error, translate_db_error


class DriverError(Exception):
    """Stand-in for a DBAPI error exposing a SQLSTATE."""

    def __init__(self, message: str, sqlstate: str | None = None) -> None:
        super().__init__(message)
        self.sqlstate = sqlstate


def wrap(message: str, sqlstate: str | None = None) -> IntegrityError:
    return IntegrityError("INSERT ...", {}, DriverError(message, sqlstate))


@pytest.mark.parametrize(
    ("sqlstate", "kind"),
    [
        ("23505", ErrorKind.UNIQUE_VIOLATION),
        ("23514", ErrorKind.CHECK_VIOLATION),
        ("42703", ErrorKind.MISSING_COLUMN),
        ("PGRST204", ErrorKind.MISSING_COLUMN),
        ("42P01", ErrorKind.MISSING_RELATION),
        ("42501", ErrorKind.PERMISSION_DENIED),
        ("23503", ErrorKind.VALIDATION),
    ],
)
def test_sqlstate_wins(sqlstate, kind):
    assert classify_db_error(wrap("whatever", sqlstate)) == (kind, sqlstate)


@pytest.mark.parametrize(
    ("message", "kind"),
    [
        ("UNIQUE constraint failed: plans.name", ErrorKind.UNIQUE_VIOLATION),
        ("CHECK constraint failed: position_positive", ErrorKind.CHECK_VIOLATION),
        ("table plan_workouts has no column named order_index", ErrorKind.MISSING_COLUMN),
        (
            'column "order_index" of relation "plan_workouts" does not exist',
            ErrorKind.MISSING_COLUMN,
        ),
        ("no such table: plans", ErrorKind.MISSING_RELATION),
        ('relation "plans" does not exist', ErrorKind.MISSING_RELATION),
        (
            'new row violates row-level security policy for table "plan_workouts"',
            ErrorKind.PERMISSION_DENIED,
        ),
        ("FOREIGN KEY constraint failed", ErrorKind.VALIDATION),
        ("disk I/O error", ErrorKind.OTHER),
    ],
)
def test_message_fallback(message, kind):
    assert classify_db_error(wrap(message))[0] is kind


def test_no_such_table_error_is_missing_relation():
    assert classify_db_error(NoSuchTableError("plans"))[0] is ErrorKind.MISSING_RELATION


def test_translate_keeps_table_and_driver_message():
    error = translate_db_error(
        OperationalError("SELECT 1", {}, DriverError("attempt to write a readonly database")),
        table="plans",
    )

    assert isinstance(error, DataStoreError)
    assert error.kind is ErrorKind.PERMISSION_DENIED
    assert error.table == "plans"
    assert str(error) == "permission_denied on plans: attempt to write a readonly database"


def test_schema_mismatch_kinds():
    assert ErrorKind.MISSING_COLUMN.is_schema_mismatch
    assert ErrorKind.MISSING_RELATION.is_schema_mismatch
    assert not ErrorKind.UNIQUE_VIOLATION.is_schema_mismatch
