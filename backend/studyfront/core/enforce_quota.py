"""Quota Enforcement — pure daily-budget arithmetic shared by server and local ledgers.

Invariants:
    - remaining = max(0, limit - count); allowed = remaining > 0
    - A counter recorded for a different day counts as 0
    - The day is the UTC calendar date, regardless of the identity's timezone
    - PRO_DAILY_QUIZ_LIMIT is a soft ceiling (100/day), not unlimited

Design Decisions:
    - Limits live here as the single source of truth; ledgers only fetch counts
"""

from dataclasses import dataclass
from datetime import datetime, timezone

from studyfront.core.domain_types import PlanTier, QuotaKind, UtcDay


FREE_DAILY_QUIZ_LIMIT: int = 5
PRO_DAILY_QUIZ_LIMIT: int = 100
ANON_POST_DAILY_LIMIT: int = 1


@dataclass(frozen=True)
class QuotaStatus:
    """Result of a quota check."""
    allowed: bool
    remaining: int
    limit: int


def utc_day(now: datetime | None = None) -> UtcDay:
    """Date-only string (YYYY-MM-DD) of `now` in UTC."""
    moment = now or datetime.now(timezone.utc)
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return UtcDay(moment.date().isoformat())


def day_start(day: UtcDay) -> datetime:
    """Midnight UTC at the start of `day`."""
    return datetime.fromisoformat(day).replace(tzinfo=timezone.utc)


def daily_limit(kind: QuotaKind, tier: PlanTier) -> int:
    """Budget for `kind` on `tier`. Anonymous posts ignore the tier."""
    if kind is QuotaKind.ANON_POST:
        return ANON_POST_DAILY_LIMIT
    if tier is PlanTier.ELEVATED:
        return PRO_DAILY_QUIZ_LIMIT
    return FREE_DAILY_QUIZ_LIMIT


def effective_count(stored_day: str | None, stored_count: int, today: UtcDay) -> int:
    """Stored count if it belongs to today, else 0 (implicit rollover)."""
    if stored_day != today:
        return 0
    return max(0, stored_count)


def evaluate_quota(count: int, limit: int) -> QuotaStatus:
    """Pure quota decision from the current count."""
    remaining = max(0, limit - count)
    return QuotaStatus(allowed=remaining > 0, remaining=remaining, limit=limit)


def pass_through(limit: int) -> QuotaStatus:
    """Server-side answer for identities without a server counter."""
    return QuotaStatus(allowed=True, remaining=limit, limit=limit)
