"""Listing Routes — marketplace listings."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from studyfront.api.deps import get_moderation_gate, require_user
from studyfront.core.domain_types import UserId
from studyfront.infrastructure.database import get_db
from studyfront.schemas.content import ListingCreate, ListingOut
from studyfront.services.handle_marketplace import MarketplaceHandlers, listing_out
from studyfront.services.moderation_gate import ModerationGate

router = APIRouter(prefix="/api/v1/listings", tags=["listings"])


@router.post("", response_model=ListingOut, status_code=status.HTTP_201_CREATED)
async def create_listing(
    body: ListingCreate,
    user_id: UserId = Depends(require_user("create listings")),
    db: AsyncSession = Depends(get_db),
    gate: ModerationGate = Depends(get_moderation_gate),
):
    listing = await MarketplaceHandlers(db, gate).create_listing(user_id, body)
    return listing_out(listing)
