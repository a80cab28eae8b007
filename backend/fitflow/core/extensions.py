"""Global Flask extension instances and initialization helpers."""

from __future__ import annotations

from flask import Flask, current_app
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import MetaData

from fitflow.store import SQLAlchemyTableStore, TableStore, enable_sqlite_foreign_keys

STORE_EXTENSION_KEY = "table_store"

# Global naming convention for all constraints
convention = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)

# Model declarations and schema creation only; runtime reads and writes go
# through the table store built in ``init_app``.
db: SQLAlchemy = SQLAlchemy(metadata=metadata)


def init_app(app: Flask) -> None:
    """Initialize SQLAlchemy and build the application's table store.

    Parameters
    ----------
    app: flask.Flask
        Application used to bind extension instances. This call imports the
        :mod:`fitflow.models` package so the declared schema is registered on
        :data:`metadata` before ``create_all`` runs.
    """
    db.init_app(app)

    from fitflow import models as _models  # noqa: F401

    with app.app_context():
        engine = db.engine
    enable_sqlite_foreign_keys(engine)
    app.extensions[STORE_EXTENSION_KEY] = SQLAlchemyTableStore(engine)


def get_store(app: Flask | None = None) -> TableStore:
    """Return the table store created for ``app`` (defaults to current app)."""
    target = app or current_app
    store = target.extensions.get(STORE_EXTENSION_KEY)
    if store is None:
        raise RuntimeError("Table store is not initialized. Call init_app() first.")
    return store
