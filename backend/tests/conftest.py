"""Pytest fixtures wiring a throwaway SQLite file database per test.

Every test gets its own database file under ``tmp_path``: service tests talk
to a bare :class:`~fitflow.store.SQLAlchemyTableStore`, API tests to a full
application built by :func:`fitflow.create_app`. A file (rather than
``:memory:``) is used because concurrent reads run on worker threads that must
all see the same database.
"""

from __future__ import annotations

from collections.abc import Generator

import pytest
from flask import Flask
from sqlalchemy import Engine

from fitflow import create_app
from fitflow.core.config import TestingConfig
from fitflow.core.extensions import db as _db
from fitflow.core.extensions import get_store, metadata
from fitflow.store import SQLAlchemyTableStore, TableStore, create_store_engine


@pytest.fixture()
def engine(tmp_path) -> Generator[Engine, None, None]:
    """Engine bound to a fresh SQLite file with the full declared schema."""
    from fitflow import models as _models  # noqa: F401

    engine = create_store_engine(f"sqlite:///{tmp_path / 'fitflow.db'}")
    metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture()
def store(engine) -> SQLAlchemyTableStore:
    """Table store over the per-test database."""
    return SQLAlchemyTableStore(engine)


@pytest.fixture()
def app(tmp_path, monkeypatch) -> Generator[Flask, None, None]:
    """Create a Flask application backed by its own SQLite file.

    Yields
    ------
    flask.Flask
        Application with :class:`TestingConfig` applied and the schema created.
    """
    # Ensure env-based config does not leak into tests
    monkeypatch.delenv("DATABASE_URL", raising=False)

    class Config(TestingConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'app.db'}"
        LOG_LEVEL = "WARNING"

    application = create_app(Config, instance_relative_config=False)
    with application.app_context():
        _db.create_all()
    try:
        yield application
    finally:
        with application.app_context():
            _db.session.remove()
            _db.engine.dispose()


@pytest.fixture()
def client(app):
    """Return a test client bound to the application."""
    return app.test_client()


@pytest.fixture()
def app_store(app) -> TableStore:
    """The table store the application's services use."""
    return get_store(app)


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


# -- Hook up Factory Boy to the store under test ------------------------------
@pytest.fixture(autouse=True)
def _factories_store(request):
    """Point the factories at whichever store the test uses."""
    from tests.factories import StoreSession

    if "app" in request.fixturenames:
        StoreSession.set(request.getfixturevalue("app_store"))
    elif "store" in request.fixturenames:
        StoreSession.set(request.getfixturevalue("store"))
    yield
    StoreSession.set(None)
