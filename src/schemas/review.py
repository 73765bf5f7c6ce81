"""Review schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from src.models.enums import ContentType
from src.schemas.content import ContentDetails


class ReviewCreate(BaseModel):
    """Submit a review."""

    content_id: int = Field(..., gt=0)
    content_type: ContentType
    rating: int = Field(..., ge=1, le=5)
    comment: str = Field(..., min_length=1, max_length=5000)
    content_details: ContentDetails


class ReviewResponse(BaseModel):
    """Review response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    username: str | None
    content_id: int
    content_type: ContentType
    rating: int
    comment: str
    content_details: ContentDetails
    created_at: datetime
