"""Subscription Tier — elevated iff active and the period has not ended."""

from datetime import datetime, timedelta, timezone

from studyfront.core.domain_types import PlanTier
from studyfront.core.subscription_tier import plan_tier

NOW = datetime(2026, 5, 1, 12, 0, tzinfo=timezone.utc)


def test_active_with_future_period_end_is_elevated():
    assert plan_tier("active", NOW + timedelta(days=3), NOW) is PlanTier.ELEVATED


def test_active_but_expired_is_standard():
    assert plan_tier("active", NOW - timedelta(seconds=1), NOW) is PlanTier.STANDARD


def test_period_end_equal_to_now_is_standard():
    assert plan_tier("active", NOW, NOW) is PlanTier.STANDARD


def test_non_active_status_is_standard():
    for status in ("canceled", "past_due", "trialing", None):
        assert plan_tier(status, NOW + timedelta(days=3), NOW) is PlanTier.STANDARD


def test_naive_period_end_treated_as_utc():
    naive = (NOW + timedelta(hours=1)).replace(tzinfo=None)
    assert plan_tier("active", naive, NOW) is PlanTier.ELEVATED
