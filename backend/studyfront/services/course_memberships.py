"""Course Memberships — existence checks and insert-or-ignore joins.

Invariants:
    - A (course_id, user_id) pair is inserted at most once
    - join_courses() is all-or-nothing: an unknown course id rejects the batch
      before anything is added
    - Nothing here commits; callers own the transaction
"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from studyfront.core.domain_types import UserId
from studyfront.core.errors import ContentValidationError, ResourceNotFoundError
from studyfront.models.course import Course, CourseMembership


async def get_course_or_404(db: AsyncSession, course_id: UUID) -> Course:
    course = await db.get(Course, course_id)
    if course is None:
        raise ResourceNotFoundError("Course", str(course_id))
    return course


async def join_course(db: AsyncSession, user_id: UserId, course_id: UUID) -> None:
    """Add a membership unless it already exists."""
    await _add_missing(db, user_id, [course_id])


async def join_courses(
    db: AsyncSession, user_id: UserId, course_ids: list[str],
) -> int:
    """Join every course in `course_ids`; returns how many ids were requested."""
    parsed = _parse_course_ids(course_ids)
    if not parsed:
        return 0
    found = await db.execute(select(Course.id).where(Course.id.in_(parsed)))
    known = set(found.scalars().all())
    missing = [str(cid) for cid in parsed if cid not in known]
    if missing:
        raise ResourceNotFoundError("Course", ", ".join(missing))
    await _add_missing(db, user_id, parsed)
    return len(parsed)


def _parse_course_ids(course_ids: list[str]) -> list[UUID]:
    parsed: list[UUID] = []
    for raw in course_ids:
        try:
            cid = UUID(str(raw))
        except ValueError:
            raise ContentValidationError(
                f"Invalid course id '{raw}'", "selectedCourseIds",
            )
        if cid not in parsed:
            parsed.append(cid)
    return parsed


async def _add_missing(
    db: AsyncSession, user_id: UserId, course_ids: list[UUID],
) -> None:
    existing = await db.execute(
        select(CourseMembership.course_id).where(
            CourseMembership.user_id == user_id,
            CourseMembership.course_id.in_(course_ids),
        ),
    )
    joined = set(existing.scalars().all())
    for cid in course_ids:
        if cid not in joined:
            db.add(CourseMembership(course_id=cid, user_id=user_id))
    await db.flush()
