"""Usage Quota Ledger — daily budgets for AI quiz generation and anonymous posts.

Invariants:
    - check() never mutates; consume() adds exactly one use
    - Limits come from core/enforce_quota.daily_limit (5 standard, 100 elevated,
      1 anonymous post regardless of tier)
    - No identity on the server means pass-through: allowed, remaining == limit
    - The local ledger enforces the same arithmetic over the LocalDraftStore

Design Decisions:
    - Server counts are a RELAXED counter (see UsageCounterRepository): two
      concurrent requests from one identity may both pass the check
    - Anonymous-visitor enforcement is client-side and can be bypassed by
      clearing local storage; the server does not try to close that gap
"""

import logging

from studyfront.core.domain_types import (
    PlanTier, QuotaKind, UserId, UtcDay, WriteStatus,
)
from studyfront.core.enforce_quota import (
    QuotaStatus, daily_limit, evaluate_quota, pass_through, utc_day,
)
from studyfront.core.repository_protocols import UsageCounterRepository
from studyfront.services.draft_store import LocalDraftStore

logger = logging.getLogger(__name__)


class QuotaLedger:
    """Server-side ledger over a per-(identity, kind, day) counter."""

    def __init__(self, counters: UsageCounterRepository):
        self._counters = counters

    async def check(
        self,
        user_id: UserId | None,
        kind: QuotaKind,
        tier: PlanTier = PlanTier.STANDARD,
        day: UtcDay | None = None,
    ) -> QuotaStatus:
        limit = daily_limit(kind, tier)
        if user_id is None:
            return pass_through(limit)
        count = await self._counters.get_count(user_id, kind, day or utc_day())
        return evaluate_quota(count, limit)

    async def consume(
        self, user_id: UserId, kind: QuotaKind, day: UtcDay | None = None,
    ) -> None:
        await self._counters.increment(user_id, kind, day or utc_day())
        logger.debug(
            f"Consumed one {kind.value} use",
            extra={"user_id": user_id, "category": kind.value},
        )


class LocalQuotaLedger:
    """Client-side ledger for visitors without an identity."""

    def __init__(self, store: LocalDraftStore):
        self._store = store

    def check(self, kind: QuotaKind, day: UtcDay | None = None) -> QuotaStatus:
        today = day or utc_day()
        limit = daily_limit(kind, PlanTier.STANDARD)
        return evaluate_quota(self._count(kind, today), limit)

    def consume(self, kind: QuotaKind, day: UtcDay | None = None) -> WriteStatus:
        """Record one use. Anonymous posts are counted from the drafts themselves."""
        if kind is QuotaKind.ANON_POST:
            return WriteStatus.OK
        _, status = self._store.increment_ai_usage(day or utc_day())
        return status

    def _count(self, kind: QuotaKind, day: UtcDay) -> int:
        if kind is QuotaKind.AI_QUIZ:
            return self._store.ai_usage(day).count
        return sum(
            1 for post in self._store.draft_posts()
            if post.is_anon and utc_day(post.created_at) == day
        )
