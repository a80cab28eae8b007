"""Logged training sessions with per-set tracking."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from fitflow.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin


class TrainingSession(PKMixin, TimestampMixin, ReprMixin, db.Model):
    """
    One performance of a plan day.

    Notes
    -----
    - ``plan_name`` is a snapshot taken when the session starts so history
      stays readable after the plan is renamed or deleted.
    """

    __tablename__ = "sessions"

    plan_id: Mapped[int | None] = mapped_column(ForeignKey("plans.id", ondelete="SET NULL"))
    plan_name: Mapped[str | None] = mapped_column(String(120))
    day_index: Mapped[int] = mapped_column(Integer, nullable=False, server_default="1")
    week_index: Mapped[int] = mapped_column(Integer, nullable=False, server_default="1")
    mode: Mapped[str] = mapped_column(String(16), nullable=False, server_default="focus")
    status: Mapped[str] = mapped_column(String(16), nullable=False, server_default="in-progress")
    started_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    ended_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    duration_seconds: Mapped[int | None] = mapped_column(Integer)
    notes: Mapped[str | None] = mapped_column(Text)

    __table_args__ = (
        CheckConstraint("mode IN ('focus', 'circuit')", name="mode_allowed"),
        CheckConstraint(
            "status IN ('in-progress', 'completed', 'aborted')", name="status_allowed"
        ),
        Index("ix_sessions_started_at", "started_at"),
    )


class SessionWorkout(PKMixin, ReprMixin, db.Model):
    """Workout performed within a session (name snapshotted)."""

    __tablename__ = "session_workouts"

    session_id: Mapped[int] = mapped_column(
        ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False, index=True
    )
    workout_id: Mapped[int | None] = mapped_column(ForeignKey("workouts.id", ondelete="SET NULL"))
    workout_name: Mapped[str] = mapped_column(String(120), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)


class SessionSet(PKMixin, ReprMixin, db.Model):
    """Single planned set and its outcome."""

    __tablename__ = "session_sets"

    session_workout_id: Mapped[int] = mapped_column(
        ForeignKey("session_workouts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    exercise_id: Mapped[int | None] = mapped_column(
        ForeignKey("exercises.id", ondelete="SET NULL")
    )
    exercise_name: Mapped[str] = mapped_column(String(120), nullable=False)
    day_index: Mapped[int | None] = mapped_column(Integer)
    target_sets: Mapped[int | None] = mapped_column(Integer)
    set_number: Mapped[int] = mapped_column(Integer, nullable=False)
    target_reps: Mapped[int | None] = mapped_column(Integer)
    completed: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="0")
    actual_reps: Mapped[int | None] = mapped_column(Integer)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    notes: Mapped[str | None] = mapped_column(Text)
