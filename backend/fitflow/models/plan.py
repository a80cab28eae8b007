"""Multi-week plans and their weekday assignments."""

from __future__ import annotations

from sqlalchemy import (
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from fitflow.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin


class Plan(PKMixin, TimestampMixin, ReprMixin, db.Model):
    """
    Repeating training cycle of 1, 2 or 4 weeks.

    Notes
    -----
    - ``status='active'`` is not unique; readers pick the most recently
      updated active row.
    """

    __tablename__ = "plans"

    name: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    label: Mapped[str | None] = mapped_column(String(80))
    period: Mapped[str] = mapped_column(String(16), nullable=False, server_default="weekly")
    status: Mapped[str] = mapped_column(String(16), nullable=False, server_default="inactive")

    __table_args__ = (
        CheckConstraint("period IN ('weekly', 'bi-weekly', 'monthly')", name="period_allowed"),
        CheckConstraint("status IN ('active', 'inactive')", name="status_allowed"),
        Index("ix_plans_status_updated_at", "status", "updated_at"),
    )


class PlanWorkout(PKMixin, ReprMixin, db.Model):
    """
    A workout scheduled on ``day_of_week`` (1=Monday) of ``week_index``.

    ``position`` orders workouts sharing the same slot; it is assigned 1..N in
    insertion order each time the plan's assignments are written.
    """

    __tablename__ = "plan_workouts"

    plan_id: Mapped[int] = mapped_column(
        ForeignKey("plans.id", ondelete="CASCADE"), nullable=False, index=True
    )
    workout_id: Mapped[int] = mapped_column(
        ForeignKey("workouts.id", ondelete="CASCADE"), nullable=False
    )
    week_index: Mapped[int] = mapped_column(Integer, nullable=False, server_default="1")
    day_of_week: Mapped[int] = mapped_column(Integer, nullable=False)
    order_index: Mapped[int | None] = mapped_column(Integer)
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "plan_id", "week_index", "day_of_week", "workout_id", name="uq_plan_workouts_slot"
        ),
        CheckConstraint("week_index BETWEEN 1 AND 4", name="week_index_range"),
        CheckConstraint("day_of_week BETWEEN 1 AND 7", name="day_of_week_range"),
        CheckConstraint("position >= 1", name="position_positive"),
    )
