"""Validation of plan payloads."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from fitflow.services._shared.errors import ValidationError
from fitflow.services._shared.normalizers import (
    INVALID,
    normalize_nullable_string,
    normalize_required_string,
)

from .assignments import (
    AssignmentIn,
    RawAssignments,
    normalize_assignments_input,
    normalize_period,
    normalize_status,
)


def build_plan_payload(
    payload: Mapping[str, Any],
    raw_assignments: RawAssignments | None = None,
) -> tuple[dict[str, Any], list[AssignmentIn]]:
    """
    Validate a plan payload and normalize its assignments.

    Period and status are coerced silently (``weekly`` / ``inactive``); only
    the name is strictly required.

    :param payload: Raw request payload.
    :param raw_assignments: Parallel arrays; read from ``payload`` when omitted.
    :returns: ``(plans row, sorted assignments)``.
    :raises ValidationError: When the name is blank.
    """
    name = normalize_required_string(payload.get("name"))
    if name is INVALID:
        raise ValidationError("Plan name is required")

    period = normalize_period(payload.get("period"))
    row = {
        "name": name,
        "description": normalize_nullable_string(payload.get("description")),
        "label": normalize_nullable_string(payload.get("label")),
        "period": period,
        "status": normalize_status(payload.get("status")),
    }

    raw = raw_assignments if raw_assignments is not None else RawAssignments.from_payload(payload)
    assignments = normalize_assignments_input(raw.weeks, raw.days, raw.workouts, period)
    return row, assignments
