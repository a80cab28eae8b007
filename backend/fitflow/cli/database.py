"""Schema creation command."""

from __future__ import annotations

import logging

import click
from flask import current_app
from flask.cli import with_appcontext

from fitflow.core.extensions import db, get_store

LOGGER = logging.getLogger(__name__)


def ensure_non_production() -> None:
    """Abort destructive commands when running in production."""
    config = current_app.config
    if not config.get("DEBUG") and not config.get("TESTING"):
        raise click.UsageError("Destructive commands are restricted to non-production environments.")


def recreate_schema(*, drop: bool) -> None:
    """Create every declared table, dropping them first when ``drop`` is set."""
    if drop:
        LOGGER.info("Dropping database schema...")
        db.drop_all()
    LOGGER.info("Creating database schema...")
    db.create_all()
    # The store caches reflected tables; make it re-read the new schema.
    get_store().refresh()


@click.command("init-db")
@click.option("--drop", is_flag=True, help="Drop existing tables first (non-production only).")
@with_appcontext
def init_db_command(drop: bool) -> None:
    """Create the fitflow tables that do not exist yet."""
    if drop:
        ensure_non_production()
    recreate_schema(drop=drop)
    click.echo("Database schema is ready.")
