"""Exercise catalog table."""

from __future__ import annotations

from sqlalchemy import CheckConstraint, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from fitflow.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin


class Exercise(PKMixin, TimestampMixin, ReprMixin, db.Model):
    """
    A single movement with its default prescription.

    Notes
    -----
    - ``target_muscle`` falls back to ``primary_muscle`` on write; at least one
      of them is always set.
    - Exercises are referenced (never owned) by workouts and session sets.
    """

    __tablename__ = "exercises"

    name: Mapped[str] = mapped_column(String(120), nullable=False)
    category: Mapped[str | None] = mapped_column(String(80))
    target_muscle: Mapped[str] = mapped_column(String(80), nullable=False)
    primary_muscle: Mapped[str | None] = mapped_column(String(80))
    secondary_muscles: Mapped[str | None] = mapped_column(Text)
    equipment: Mapped[str | None] = mapped_column(String(120))
    tempo: Mapped[str | None] = mapped_column(String(40))
    target_sets: Mapped[int] = mapped_column(Integer, nullable=False)
    target_repetitions: Mapped[int] = mapped_column(Integer, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text)
    cues: Mapped[str | None] = mapped_column(Text)
    video_url: Mapped[str | None] = mapped_column(String(500))

    __table_args__ = (
        CheckConstraint("target_sets >= 1", name="target_sets_positive"),
        CheckConstraint("target_repetitions >= 1", name="target_repetitions_positive"),
        Index("ix_exercises_name", "name"),
    )
