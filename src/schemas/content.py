"""Denormalized catalog metadata shared by reviews and wishlist entries."""

from pydantic import BaseModel, Field


class ContentDetails(BaseModel):
    """Snapshot of the catalog entry a record refers to."""

    title: str = Field(..., min_length=1, max_length=500)
    overview: str = Field(..., min_length=1)
    poster_path: str = Field(..., min_length=1, max_length=500)
