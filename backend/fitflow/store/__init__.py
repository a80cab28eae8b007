"""Data store access by table name.

This package re-exports the :class:`TableStore` contract, its SQLAlchemy
implementation and the tagged error types produced at the store boundary.
"""

from .base import Row, TableStore, parse_sort_tokens
from .errors import DataStoreError, ErrorKind, classify_db_error, translate_db_error
from .sqlalchemy_store import SQLAlchemyTableStore, create_store_engine, enable_sqlite_foreign_keys

__all__ = [
    "DataStoreError",
    "ErrorKind",
    "Row",
    "SQLAlchemyTableStore",
    "TableStore",
    "classify_db_error",
    "create_store_engine",
    "enable_sqlite_foreign_keys",
    "parse_sort_tokens",
    "translate_db_error",
]
