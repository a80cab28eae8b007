"""Plans: assignment normalization, schedule derivation and persistence."""

from .assignments import (
    MAX_WEEKS,
    PLAN_PERIODS,
    PLAN_STATUSES,
    AssignmentIn,
    RawAssignments,
    build_assignment_rows,
    max_weeks_for_period,
    normalize_assignments_input,
)
from .schedule import PlanSchedule, build_plan_schedule, resolve_cycle_position, schedule_for_day
from .service import PlanService

__all__ = [
    "AssignmentIn",
    "MAX_WEEKS",
    "PLAN_PERIODS",
    "PLAN_STATUSES",
    "PlanSchedule",
    "PlanService",
    "RawAssignments",
    "build_assignment_rows",
    "build_plan_schedule",
    "max_weeks_for_period",
    "normalize_assignments_input",
    "resolve_cycle_position",
    "schedule_for_day",
]
