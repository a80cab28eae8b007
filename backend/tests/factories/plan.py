"""Factory Boy definitions for plans."""

from __future__ import annotations

import factory
from tests.factories import StoreFactory


class PlanFactory(StoreFactory):
    """Build persisted ``plans`` rows (weekly and inactive by default)."""

    _table = "plans"

    name = factory.Sequence(lambda n: f"Plan {n}")
    description = factory.Faker("sentence")
    period = "weekly"
    status = "inactive"
