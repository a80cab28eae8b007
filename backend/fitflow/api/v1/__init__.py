"""API v1 blueprint package bundling versioned routes."""

from __future__ import annotations

from flask import Blueprint

API_VERSION = "v1"

# Import blueprints *only here* to keep imports localized and avoid cycles.
from .exercises import bp as exercises_bp  # noqa: E402
from .health import bp as health_bp  # noqa: E402
from .plans import bp as plans_bp  # noqa: E402
from .sessions import bp as sessions_bp  # noqa: E402
from .workouts import bp as workouts_bp  # noqa: E402

# Each tuple: (blueprint, url_prefix_relative_to_version)
REGISTRY: list[tuple[Blueprint, str]] = [
    (health_bp, ""),  # -> /api/v1
    (exercises_bp, "/exercises"),
    (workouts_bp, "/workouts"),
    (plans_bp, "/plans"),
    (sessions_bp, "/sessions"),
]
