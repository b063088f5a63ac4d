"""Subscription lookup — plan tier for an identity from the synced subscriptions row."""

from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from studyfront.core.domain_types import PlanTier, UserId
from studyfront.core.subscription_tier import plan_tier
from studyfront.models.subscription import Subscription


async def get_plan_tier(
    db: AsyncSession, user_id: UserId | None, now: datetime | None = None,
) -> PlanTier:
    if user_id is None:
        return PlanTier.STANDARD
    subscription = await db.get(Subscription, user_id)
    if subscription is None:
        return PlanTier.STANDARD
    return plan_tier(subscription.status, subscription.current_period_end, now)
