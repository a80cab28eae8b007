"""
Pure normalizers turning raw request values into well-typed fields.

None of these functions raise for malformed input. Each returns the
normalized value, ``None`` when the input is absent or blank, or the
:data:`INVALID` sentinel when the input is present but unusable. Payload
builders decide which of those outcomes is an error and phrase the message.

``parse_record_id`` is the exception: it raises :class:`ValidationError`
directly because every caller treats a blank id the same way.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterable
from datetime import date, datetime, time, timezone
from enum import Enum
from typing import Any, Final, TypeVar
from urllib.parse import urlsplit, urlunsplit

from fitflow.services._shared.errors import ValidationError

T = TypeVar("T")


class _Invalid(Enum):
    INVALID = "invalid"

    def __repr__(self) -> str:
        return "INVALID"


INVALID: Final = _Invalid.INVALID
"""Marker for a present but unusable value."""

_INTEGER_RE = re.compile(r"^[+-]?\d+$")
MAX_INTEGER: Final = 2**31 - 1
"""Largest value an ``INTEGER`` column holds on every supported database."""
_WHITESPACE_RE = re.compile(r"\s")
_URL_SCHEMES = frozenset({"http", "https"})


# --------------------------------------------------------------------------- #
# Strings
# --------------------------------------------------------------------------- #


def normalize_required_string(value: Any) -> str | _Invalid:
    """Trim ``value``; blank or non-string input is :data:`INVALID`."""
    if not isinstance(value, str):
        return INVALID
    trimmed = value.strip()
    return trimmed if trimmed else INVALID


def normalize_nullable_string(value: Any) -> str | None:
    """Trim ``value``; blank or non-string input becomes ``None``."""
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    return trimmed or None


# --------------------------------------------------------------------------- #
# Integers
# --------------------------------------------------------------------------- #


def _parse_integer(value: Any) -> int | None | _Invalid:
    parsed = _parse_unbounded_integer(value)
    if parsed is None or parsed is INVALID:
        return parsed
    return parsed if abs(parsed) <= MAX_INTEGER else INVALID


def _parse_unbounded_integer(value: Any) -> int | None | _Invalid:
    if value is None or isinstance(value, bool):
        return None if value is None else INVALID
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else INVALID
    if isinstance(value, str):
        trimmed = value.strip()
        if not trimmed:
            return None
        return int(trimmed) if _INTEGER_RE.match(trimmed) else INVALID
    return INVALID


def normalize_positive_integer(value: Any) -> int | None | _Invalid:
    """
    Parse a strictly positive whole number.

    >>> normalize_positive_integer("5")
    5
    >>> normalize_positive_integer("") is None
    True
    >>> normalize_positive_integer("0")
    INVALID
    """
    parsed = _parse_integer(value)
    if parsed is None or parsed is INVALID:
        return parsed
    return parsed if parsed > 0 else INVALID


def normalize_non_negative_integer(value: Any) -> int | None | _Invalid:
    """Parse a whole number that may be zero (durations, rep counts)."""
    parsed = _parse_integer(value)
    if parsed is None or parsed is INVALID:
        return parsed
    return parsed if parsed >= 0 else INVALID


def coerce_positive_integer(value: Any, default: T) -> int | T:
    """Return the positive integer in ``value`` or ``default`` for anything else."""
    parsed = normalize_positive_integer(value)
    return default if parsed is None or parsed is INVALID else parsed


# --------------------------------------------------------------------------- #
# URLs and dates
# --------------------------------------------------------------------------- #


def normalize_url(value: Any) -> str | None | _Invalid:
    """
    Validate an absolute ``http``/``https`` URL and re-serialize it.

    The scheme and host are lower-cased and an empty path becomes ``/``, so
    ``"https://x.com"`` normalizes to ``"https://x.com/"``.
    """
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    if not trimmed:
        return None
    if _WHITESPACE_RE.search(trimmed):
        return INVALID
    try:
        parts = urlsplit(trimmed)
        _ = parts.port  # malformed ports raise here
    except ValueError:
        return INVALID
    scheme = parts.scheme.lower()
    if scheme not in _URL_SCHEMES or not parts.hostname:
        return INVALID

    userinfo, at, hostport = parts.netloc.rpartition("@")
    netloc = f"{userinfo}{at}{hostport.lower()}"
    return urlunsplit((scheme, netloc, parts.path or "/", parts.query, parts.fragment))


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """Render ``moment`` as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC."""
    return _as_utc(moment).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def normalize_date(value: Any) -> str | None | _Invalid:
    """
    Parse an ISO-8601 date or datetime into a UTC timestamp string.

    Date-only input is read as midnight UTC; naive datetimes are taken as UTC.
    """
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, date):
        return format_timestamp(datetime.combine(value, time.min))
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    if not trimmed:
        return None
    try:
        parsed = datetime.fromisoformat(trimmed)
    except ValueError:
        return INVALID
    return format_timestamp(parsed)


def to_datetime(value: str | None) -> datetime | None:
    """Turn a string produced by :func:`normalize_date` back into a datetime."""
    if value is None:
        return None
    return _as_utc(datetime.fromisoformat(value))


# --------------------------------------------------------------------------- #
# Enums
# --------------------------------------------------------------------------- #


def normalize_enum(value: Any, allowed: Iterable[str], default: str) -> str:
    """Return ``value`` (trimmed, lower-cased) when allowed, else ``default``."""
    if not isinstance(value, str):
        return default
    candidate = value.strip().lower()
    return candidate if candidate in set(allowed) else default


# --------------------------------------------------------------------------- #
# Flags
# --------------------------------------------------------------------------- #

_TRUTHY = frozenset({"1", "true", "yes", "y", "on"})


def normalize_flag(value: Any) -> bool:
    """Read a checkbox-style flag; only explicit truthy values count."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    return False


# --------------------------------------------------------------------------- #
# Lists and ids
# --------------------------------------------------------------------------- #


def ensure_list(value: Any) -> list[Any]:
    """Wrap a scalar form value into a list; ``None`` becomes ``[]``."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def normalize_id_list(value: Any) -> list[str]:
    """
    Normalize a list of record ids into unique, trimmed strings.

    Accepts a list, a JSON array string or a comma separated string. Order
    of first appearance is kept.
    """
    if isinstance(value, str):
        trimmed = value.strip()
        candidates: list[Any]
        if trimmed.startswith("["):
            try:
                decoded = json.loads(trimmed)
            except ValueError:
                decoded = None
            candidates = decoded if isinstance(decoded, list) else trimmed.strip("[]").split(",")
        else:
            candidates = trimmed.split(",")
    else:
        candidates = ensure_list(value)

    seen: dict[str, None] = {}
    for entry in candidates:
        if entry is None or isinstance(entry, (dict, list)):
            continue
        text = str(entry).strip()
        if text:
            seen.setdefault(text, None)
    return list(seen)


def coerce_id(value: Any) -> int | str | None:
    """Return ``int`` for canonical numeric ids, the trimmed string otherwise."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if abs(value) <= MAX_INTEGER else str(value)
    text = str(value).strip()
    if not text:
        return None
    if _INTEGER_RE.match(text) and str(int(text)) == text and abs(int(text)) <= MAX_INTEGER:
        return int(text)
    return text


def parse_record_id(value: Any, entity: str) -> int | str:
    """
    Parse a path/body identifier.

    :param value: Raw identifier.
    :param entity: Lower-case entity name used in the error message.
    :raises ValidationError: When the identifier is blank.
    """
    parsed = coerce_id(value)
    if parsed is None:
        raise ValidationError(f"Invalid {entity} id")
    return parsed


__all__ = [
    "INVALID",
    "MAX_INTEGER",
    "coerce_id",
    "coerce_positive_integer",
    "ensure_list",
    "format_timestamp",
    "normalize_date",
    "normalize_enum",
    "normalize_flag",
    "normalize_id_list",
    "normalize_non_negative_integer",
    "normalize_nullable_string",
    "normalize_positive_integer",
    "normalize_required_string",
    "normalize_url",
    "parse_record_id",
    "to_datetime",
]
