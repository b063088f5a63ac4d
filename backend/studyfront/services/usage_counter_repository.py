"""SQL Usage Counters — UsageCounterRepository over ai_usage_daily and posts.

Invariants:
    - AI quiz uses live in ai_usage_daily, one row per (user_id, day)
    - increment() is read-then-write: no row → insert count 1, else count + 1.
      Not atomic against a concurrent increment for the same row
    - Anonymous posts are counted from posts (is_anon, author, created_at
      within the UTC day); inserting the post is the increment
    - Writes are flushed, not committed: the calling handler owns the commit
"""

from datetime import timedelta

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from studyfront.core.domain_types import QuotaKind, UserId, UtcDay
from studyfront.core.enforce_quota import day_start
from studyfront.models.ai_quiz import AIUsageDaily
from studyfront.models.post import Post


class SqlUsageCounterRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_count(self, user_id: UserId, kind: QuotaKind, day: UtcDay) -> int:
        if kind is QuotaKind.ANON_POST:
            return await self._anon_posts_on(user_id, day)
        row = await self._usage_row(user_id, day)
        return row.count if row else 0

    async def increment(self, user_id: UserId, kind: QuotaKind, day: UtcDay) -> None:
        if kind is QuotaKind.ANON_POST:
            return
        row = await self._usage_row(user_id, day)
        if row:
            row.count = row.count + 1
        else:
            self.db.add(AIUsageDaily(user_id=user_id, day=day, count=1))
        await self.db.flush()

    async def _usage_row(self, user_id: UserId, day: UtcDay) -> AIUsageDaily | None:
        result = await self.db.execute(
            select(AIUsageDaily).where(
                AIUsageDaily.user_id == user_id, AIUsageDaily.day == day,
            ),
        )
        return result.scalar_one_or_none()

    async def _anon_posts_on(self, user_id: UserId, day: UtcDay) -> int:
        start = day_start(day)
        result = await self.db.execute(
            select(func.count(Post.id)).where(
                Post.author_id == user_id,
                Post.is_anon.is_(True),
                Post.created_at >= start,
                Post.created_at < start + timedelta(days=1),
            ),
        )
        return result.scalar_one()
