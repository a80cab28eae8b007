"""Factory Boy definitions for logged sessions."""

from __future__ import annotations

from datetime import datetime, timezone

import factory
from tests.factories import StoreFactory


class SessionFactory(StoreFactory):
    """Build persisted ``sessions`` rows in progress."""

    _table = "sessions"

    plan_name = factory.Sequence(lambda n: f"Plan {n}")
    day_index = 1
    week_index = 1
    mode = "focus"
    status = "in-progress"
    started_at = factory.LazyFunction(lambda: datetime.now(timezone.utc))
