"""Content Schemas — request/response contracts for posts, answers, listings and reports.

Invariants:
    - PostCreate: title 5-200, body 10-10000, at most 5 tags
    - AnswerCreate: body 10-10000
    - ListingCreate: title 5-100, description 10-5000, price 0-1_000_000 cents,
      category/condition from enums, pickup_area from PICKUP_AREAS, at most 5 images
    - ReportCreate: reason 10-1000
    - Text fields are stripped before length checks
"""

from datetime import datetime
from uuid import UUID

from pydantic import ConfigDict, Field, field_validator

from studyfront.core.domain_types import (
    PICKUP_AREAS, ListingCategory, ListingCondition, ReportTargetType,
)
from studyfront.schemas.quiz import CamelModel


class ContentModel(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=True)


class PostCreate(ContentModel):
    course_id: UUID
    title: str = Field(min_length=5, max_length=200)
    body: str = Field(min_length=10, max_length=10_000)
    tags: list[str] = Field(default_factory=list, max_length=5)
    is_anon: bool = False


class AnswerCreate(ContentModel):
    post_id: UUID
    body: str = Field(min_length=10, max_length=10_000)


class AcceptAnswerRequest(CamelModel):
    post_id: UUID
    answer_id: UUID


class ListingCreate(ContentModel):
    title: str = Field(min_length=5, max_length=100)
    description: str = Field(min_length=10, max_length=5000)
    category: ListingCategory
    price_cents: int = Field(ge=0, le=1_000_000)
    condition: ListingCondition
    pickup_area: str
    image_paths: list[str] = Field(default_factory=list, max_length=5)

    @field_validator("pickup_area")
    @classmethod
    def known_pickup_area(cls, v: str) -> str:
        if v not in PICKUP_AREAS:
            raise ValueError("Invalid pickup area")
        return v


class ReportCreate(ContentModel):
    target_type: ReportTargetType
    target_id: UUID
    reason: str = Field(min_length=10, max_length=1000)


# ─── Responses ───────────────────────────────────────────────────

class PostOut(CamelModel):
    id: UUID
    course_id: UUID
    author_id: str
    title: str
    body: str
    tags: list[str]
    is_anon: bool
    created_at: datetime


class AnswerOut(CamelModel):
    id: UUID
    post_id: UUID
    author_id: str
    body: str
    created_at: datetime


class ListingOut(CamelModel):
    id: UUID
    seller_id: str
    title: str
    description: str
    category: str
    price_cents: int
    condition: str
    pickup_area: str
    status: str
    image_paths: list[str] = Field(default_factory=list)
    created_at: datetime


class ReportOut(CamelModel):
    id: UUID
    reporter_id: str
    target_type: str
    target_id: UUID
    reason: str
    created_at: datetime
