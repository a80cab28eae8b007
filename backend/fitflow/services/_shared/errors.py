"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and never import Flask or HTTP
types. They are the stable contract between the services and whatever
presentation adapter calls them.

The translation to HTTP responses (RFC 7807) is handled by
``fitflow/core/errors.py``.
"""

from __future__ import annotations

from dataclasses import dataclass

# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - ``str(err)`` is always safe to show to an end user.
    """

    pass


# --------------------------------------------------------------------------- #
# Specific domain-level errors
# --------------------------------------------------------------------------- #


@dataclass(slots=True, eq=False)
class ValidationError(ServiceError):
    """
    Raised when client-supplied data violates a field contract.

    :param message: Human-readable reason, surfaced verbatim.
    :type message: str
    """

    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(slots=True, eq=False)
class NotFoundError(ServiceError):
    """
    Raised when an id does not resolve to a row.

    :param entity: Entity name (e.g., "Plan").
    :type entity: str
    :param key: Identifier that was looked up.
    :type key: str | int
    """

    entity: str
    key: str | int

    def __str__(self) -> str:
        return f"{self.entity} not found"


@dataclass(slots=True, eq=False)
class PermissionDeniedError(ServiceError):
    """
    Raised when the store rejects a write because of an access policy.

    :param action: What was attempted (e.g., "plan workouts").
    :type action: str
    :param hint: Remediation the operator must apply.
    :type hint: str
    """

    action: str
    hint: str = "Grant insert/update/delete on the affected tables to the application role and try again."

    def __str__(self) -> str:
        return f"The data store blocked {self.action} due to row-level security. {self.hint}"


@dataclass(slots=True, eq=False)
class SchemaMismatchError(ServiceError):
    """
    Raised when an expected table or column is absent and no fallback exists.

    :param relation: Table (or ``table.column``) that is missing.
    :type relation: str
    """

    relation: str

    def __str__(self) -> str:
        return f"The database schema is missing {self.relation}. Run `flask --app fitflow init-db`."


@dataclass(slots=True, eq=False)
class StoreError(ServiceError):
    """
    Opaque store failure; details are logged, never surfaced.

    :param action: Verb phrase completing "Unable to ...".
    :type action: str
    """

    action: str

    def __str__(self) -> str:
        return f"Unable to {self.action}"


__all__ = [
    "NotFoundError",
    "PermissionDeniedError",
    "SchemaMismatchError",
    "ServiceError",
    "StoreError",
    "ValidationError",
]
