"""Subscription Tier — derives the plan tier from a billing-provider subscription row.

Invariants:
    - ELEVATED iff status == "active" AND current_period_end > now
    - No subscription row means STANDARD
"""

from datetime import datetime, timezone

from studyfront.core.domain_types import PlanTier


ACTIVE_STATUS = "active"


def plan_tier(
    status: str | None,
    current_period_end: datetime | None,
    now: datetime | None = None,
) -> PlanTier:
    if status != ACTIVE_STATUS or current_period_end is None:
        return PlanTier.STANDARD
    now = now or datetime.now(timezone.utc)
    if current_period_end.tzinfo is None:
        # SQLite hands back naive datetimes; stored values are UTC
        current_period_end = current_period_end.replace(tzinfo=timezone.utc)
    if current_period_end > now:
        return PlanTier.ELEVATED
    return PlanTier.STANDARD
