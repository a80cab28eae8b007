"""Workout templates and their ordered exercise links."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from fitflow.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin


class Workout(PKMixin, TimestampMixin, ReprMixin, db.Model):
    """Named, ordered collection of exercises."""

    __tablename__ = "workouts"

    name: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    notes: Mapped[str | None] = mapped_column(Text)
    video_url: Mapped[str | None] = mapped_column(String(500))
    rest_interval: Mapped[str | None] = mapped_column(String(40))
    performed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))


class WorkoutExercise(PKMixin, ReprMixin, db.Model):
    """
    Association row placing an exercise inside a workout.

    Notes
    -----
    - ``position`` is 1-based and contiguous per workout.
    - ``order_index`` is the 0-based insertion rank; older databases may lack
      the column, writers cope with that.
    - Rows are replaced wholesale whenever the workout's exercise list changes.
    """

    __tablename__ = "workout_exercises"

    workout_id: Mapped[int] = mapped_column(
        ForeignKey("workouts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    exercise_id: Mapped[int] = mapped_column(
        ForeignKey("exercises.id", ondelete="CASCADE"), nullable=False
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    order_index: Mapped[int | None] = mapped_column(Integer)
    target_sets: Mapped[int | None] = mapped_column(Integer)
    target_reps: Mapped[int | None] = mapped_column(Integer)
    notes: Mapped[str | None] = mapped_column(Text)

    __table_args__ = (
        UniqueConstraint("workout_id", "exercise_id", name="uq_workout_exercises_workout_exercise"),
        CheckConstraint("position >= 1", name="position_positive"),
    )
