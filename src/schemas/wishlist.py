"""Wishlist schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from src.models.enums import ContentType
from src.schemas.content import ContentDetails


class WishlistEntryCreate(BaseModel):
    """Add content to the wishlist."""

    content_id: int = Field(..., gt=0)
    content_type: ContentType
    content_details: ContentDetails


class WishlistEntryResponse(BaseModel):
    """Wishlist entry response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    content_id: int
    content_type: ContentType
    content_details: ContentDetails
    added_at: datetime
