"""Quota Enforcement — pure daily-budget arithmetic.

Tests cover:
    - Limits per kind and tier (5 / 100 / 1)
    - remaining == max(0, limit - n) after n uses; (n+1)-th rejected iff n >= limit
    - A counter stored for another day reads as 0
    - UTC day computation and day_start
    - Pass-through for identities without a server counter
"""

from datetime import datetime, timedelta, timezone

import pytest

from studyfront.core.domain_types import PlanTier, QuotaKind, UtcDay
from studyfront.core.enforce_quota import (
    ANON_POST_DAILY_LIMIT,
    FREE_DAILY_QUIZ_LIMIT,
    PRO_DAILY_QUIZ_LIMIT,
    daily_limit,
    day_start,
    effective_count,
    evaluate_quota,
    pass_through,
    utc_day,
)


def test_quiz_limit_depends_on_tier():
    assert daily_limit(QuotaKind.AI_QUIZ, PlanTier.STANDARD) == FREE_DAILY_QUIZ_LIMIT == 5
    assert daily_limit(QuotaKind.AI_QUIZ, PlanTier.ELEVATED) == PRO_DAILY_QUIZ_LIMIT == 100


@pytest.mark.parametrize("tier", list(PlanTier))
def test_anon_post_limit_ignores_tier(tier):
    assert daily_limit(QuotaKind.ANON_POST, tier) == ANON_POST_DAILY_LIMIT == 1


@pytest.mark.parametrize("limit", [1, 5, 100])
def test_remaining_after_n_uses(limit):
    for n in range(limit + 3):
        status = evaluate_quota(n, limit)
        assert status.remaining == max(0, limit - n)
        assert status.allowed is (n < limit)
        assert status.limit == limit


def test_fifth_of_five_allowed_sixth_rejected():
    assert evaluate_quota(4, 5).allowed is True
    assert evaluate_quota(4, 5).remaining == 1
    sixth = evaluate_quota(5, 5)
    assert sixth.allowed is False
    assert sixth.remaining == 0


def test_stale_day_counts_as_zero():
    today = UtcDay("2026-03-02")
    assert effective_count("2026-03-01", 9, today) == 0
    assert effective_count(None, 3, today) == 0
    assert effective_count("2026-03-02", 3, today) == 3


def test_remaining_is_full_limit_right_after_rollover():
    today = UtcDay("2026-03-02")
    count = effective_count("2026-03-01", 5, today)
    assert evaluate_quota(count, 5).remaining == 5


def test_utc_day_uses_utc_not_local_offset():
    late_evening_west = datetime(2026, 3, 1, 22, 30, tzinfo=timezone(timedelta(hours=-5)))
    assert utc_day(late_evening_west) == "2026-03-02"


def test_day_start_is_utc_midnight():
    start = day_start(UtcDay("2026-03-02"))
    assert start == datetime(2026, 3, 2, tzinfo=timezone.utc)


def test_pass_through_reports_full_limit():
    status = pass_through(5)
    assert status.allowed is True
    assert status.remaining == 5
    assert status.limit == 5
