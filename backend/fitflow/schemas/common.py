"""Common Marshmallow schemas shared across resources."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from marshmallow import EXCLUDE, Schema, fields, post_load, validate

from fitflow.services._shared.normalizers import format_timestamp


class Timestamp(fields.Field):
    """Dump datetimes as ``YYYY-MM-DDTHH:MM:SS.mmmZ``; strings pass through."""

    def _serialize(self, value: Any, attr: str | None, obj: Any, **kwargs: Any) -> Any:
        if value is None:
            return None
        if isinstance(value, datetime):
            return format_timestamp(value)
        if isinstance(value, date):
            return value.isoformat()
        return str(value)


class LimitQuerySchema(Schema):
    """Validate the ``limit`` query parameter with configurable defaults."""

    class Meta:
        unknown = EXCLUDE

    def __init__(self, *, default_limit: int = 20, max_limit: int = 200, **kwargs: Any) -> None:
        self._default_limit = default_limit
        self._max_limit = max_limit
        super().__init__(**kwargs)

    limit = fields.Integer(validate=validate.Range(min=1))

    @post_load
    def apply_defaults(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        limit = data.get("limit", self._default_limit)
        data["limit"] = min(max(limit, 1), self._max_limit)
        return data


class TodayQuerySchema(Schema):
    """Optional ``date`` override for the daily schedule lookup."""

    class Meta:
        unknown = EXCLUDE

    date = fields.Date(load_default=None)


def build_meta(*, count: int, limit: int | None = None) -> dict[str, int]:
    """Return a ``meta`` mapping for list responses."""

    meta = {"count": int(count)}
    if limit is not None:
        meta["limit"] = int(limit)
    return meta
