from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any

from fitflow.services._shared.errors import (
    PermissionDeniedError,
    SchemaMismatchError,
    ServiceError,
    StoreError,
)
from fitflow.store import DataStoreError, ErrorKind, TableStore

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Hold the injected :class:`~fitflow.store.TableStore`.
    * Centralize store-error translation and logging.
    * Run independent reads concurrently.

    Notes
    -----
    - Services never import Flask; they take and return plain values.
    - Each store call commits on its own, so multi-step writes carry their
      own compensation logic.
    """

    def __init__(self, store: TableStore, *, read_workers: int = 4) -> None:
        """
        Initialize the base service.

        :param store: Table store every call goes through.
        :type store: TableStore
        :param read_workers: Upper bound of threads used by
            :meth:`run_concurrently`.
        :type read_workers: int
        """
        self.store = store
        self.read_workers = max(1, int(read_workers))

    # -------------------------- Error handling ------------------------------

    def translate_exceptions(
        self,
        action: str,
        exc: Exception,
        *,
        target: str | None = None,
        **context: Any,
    ) -> Exception:
        """
        Map a store failure to the service error taxonomy and log it.

        :param action: Verb phrase completing "Unable to ..." (e.g. "create plan").
        :type action: str
        :param exc: Exception raised by the store.
        :type exc: Exception
        :param target: Noun phrase used in the permission-denied message;
            defaults to ``action``.
        :type target: str | None
        :param context: Extra identifiers attached to the log record.
        :returns: Translated exception ready to be re-raised.
        :rtype: Exception
        """
        if isinstance(exc, ServiceError) or not isinstance(exc, DataStoreError):
            return exc

        extra = {"table": exc.table, "kind": exc.kind.value, **context}
        if exc.kind is ErrorKind.PERMISSION_DENIED:
            logger.warning("store.permission_denied: %s", action, extra=extra)
            return PermissionDeniedError(target or action)
        if exc.kind.is_schema_mismatch:
            logger.error("store.schema_mismatch: %s (%s)", action, exc, extra=extra)
            return SchemaMismatchError(exc.table or "a required relation")

        logger.error("store.failure: %s (%s)", action, exc, extra=extra)
        return StoreError(action)

    # ------------------------------ Reads -----------------------------------

    def run_concurrently(self, *calls: Callable[[], Any]) -> list[Any]:
        """
        Run independent zero-argument callables on a thread pool.

        :returns: Results in the order the callables were given.
        :raises Exception: The first exception raised by any callable.
        """
        if len(calls) <= 1:
            return [call() for call in calls]
        with ThreadPoolExecutor(max_workers=min(self.read_workers, len(calls))) as pool:
            futures = [pool.submit(call) for call in calls]
            return [future.result() for future in futures]
