"""Factory Boy helpers writing rows through the table store under test."""

from __future__ import annotations

import factory


class StoreSession:
    """Store the table store provided by the pytest fixture layer."""

    _store = None

    @classmethod
    def set(cls, store):
        """Register the table store used to persist factory rows."""
        cls._store = store

    @classmethod
    def get(cls):
        """Return the registered table store.

        Raises
        ------
        RuntimeError
            If factories are used without the ``store`` or ``app`` fixture.
        """
        if cls._store is None:
            raise RuntimeError("Factories store not set. Did you request the 'store' fixture?")
        return cls._store


class StoreFactory(factory.Factory):
    """Base factory producing row dicts; ``create`` inserts them into ``_table``."""

    class Meta:
        abstract = True
        model = dict

    _table: str = ""

    @classmethod
    def _create(cls, model_class, *args, **kwargs):
        return StoreSession.get().insert(cls._table, dict(*args, **kwargs))[0]
