"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId is an opaque identity string from the identity provider; never parsed
    - UtcDay is an ISO date string (YYYY-MM-DD) in UTC
    - All valid states encoded as str Enums — no raw string matching
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", str)
UtcDay = NewType("UtcDay", str)


# ─── Enums ───────────────────────────────────────────────────────

class PlanTier(str, Enum):
    """Subscription tier controlling quota ceilings."""
    STANDARD = "free"
    ELEVATED = "pro"


class QuotaKind(str, Enum):
    """Rate-limited actions, each with its own daily counter."""
    AI_QUIZ = "ai_quiz"
    ANON_POST = "anon_post"


class WriteStatus(str, Enum):
    """Outcome of a best-effort local store write."""
    OK = "ok"
    UNAVAILABLE = "unavailable"
    FAILED = "failed"


class ListingCategory(str, Enum):
    TEXTBOOKS = "textbooks"
    ELECTRONICS = "electronics"
    FURNITURE = "furniture"
    CLOTHING = "clothing"
    TICKETS = "tickets"
    SERVICES = "services"
    OTHER = "other"


class ListingCondition(str, Enum):
    NEW = "new"
    LIKE_NEW = "like_new"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class ListingStatus(str, Enum):
    ACTIVE = "active"
    SOLD = "sold"
    REMOVED = "removed"


class ReportTargetType(str, Enum):
    POST = "post"
    ANSWER = "answer"
    LISTING = "listing"
    USER = "user"


PICKUP_AREAS: tuple[str, ...] = (
    "Main Campus - Student Center",
    "Main Campus - Library",
    "Main Campus - Dorms",
    "North Campus",
    "South Campus",
    "Off Campus - Coffee Shop",
    "Flexible / Meetup",
)
