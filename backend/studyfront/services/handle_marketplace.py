"""Marketplace Handlers — create_listing.

Invariants:
    - Title and description pass the moderation gate before any write
    - A listing starts "active"; each image path becomes one listing_images row
"""

from sqlalchemy.ext.asyncio import AsyncSession

from studyfront.core.domain_types import ListingStatus, UserId
from studyfront.models.listing import Listing, ListingImage
from studyfront.schemas.content import ListingCreate, ListingOut
from studyfront.services.moderation_gate import ModerationGate


class MarketplaceHandlers:
    def __init__(self, db: AsyncSession, gate: ModerationGate):
        self.db = db
        self.gate = gate

    async def create_listing(self, user_id: UserId, body: ListingCreate) -> Listing:
        await self.gate.enforce(body.title, body.description)
        listing = Listing(
            seller_id=user_id,
            title=body.title,
            description=body.description,
            category=body.category.value,
            price_cents=body.price_cents,
            condition=body.condition.value,
            pickup_area=body.pickup_area,
            status=ListingStatus.ACTIVE.value,
            images=[ListingImage(storage_path=path) for path in body.image_paths],
        )
        self.db.add(listing)
        await self.db.commit()
        return listing


def listing_out(listing: Listing) -> ListingOut:
    return ListingOut(
        id=listing.id,
        seller_id=listing.seller_id,
        title=listing.title,
        description=listing.description,
        category=listing.category,
        price_cents=listing.price_cents,
        condition=listing.condition,
        pickup_area=listing.pickup_area,
        status=listing.status,
        image_paths=[image.storage_path for image in listing.images],
        created_at=listing.created_at,
    )
