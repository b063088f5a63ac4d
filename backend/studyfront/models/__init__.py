"""ORM Models — SQLAlchemy declarative models for all authoritative tables.

Invariants:
    - All models inherit from Base (db/base.py)
    - Identities (author_id, seller_id, user_id) are opaque strings, not foreign keys

Design Decisions:
    - All models imported here so SQLAlchemy resolves string-based relationship()
      references before any query runs
"""

from studyfront.models.course import Course, CourseMembership  # noqa: F401
from studyfront.models.post import Post, Answer, PostAccept  # noqa: F401
from studyfront.models.listing import Listing, ListingImage  # noqa: F401
from studyfront.models.ai_quiz import AIQuiz, AIUsageDaily  # noqa: F401
from studyfront.models.report import Report  # noqa: F401
from studyfront.models.subscription import Subscription  # noqa: F401
