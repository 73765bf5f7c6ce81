"""Wishlist API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy import desc
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.api.dependencies import get_auth_context
from src.database import get_db
from src.models.enums import ContentType
from src.models.wishlist import WishlistEntry
from src.schemas.wishlist import WishlistEntryCreate, WishlistEntryResponse
from src.services.auth import AuthContext

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/wishlist", tags=["wishlist"])


def find_wishlist_entry(
    db: Session, user_id: int, content_id: int, content_type: ContentType
) -> WishlistEntry | None:
    """Get the user's entry for a piece of content, if any."""
    return (
        db.query(WishlistEntry)
        .filter(
            WishlistEntry.user_id == user_id,
            WishlistEntry.content_id == content_id,
            WishlistEntry.content_type == content_type,
        )
        .first()
    )


@router.get("", response_model=list[WishlistEntryResponse])
def list_wishlist(
    auth: Annotated[AuthContext, Depends(get_auth_context)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get the current user's wishlist, most recently added first."""
    return (
        db.query(WishlistEntry)
        .filter(WishlistEntry.user_id == auth.user_id)
        .order_by(desc(WishlistEntry.added_at), desc(WishlistEntry.id))
        .all()
    )


@router.post("", response_model=WishlistEntryResponse, status_code=status.HTTP_201_CREATED)
def add_to_wishlist(
    entry_data: WishlistEntryCreate,
    auth: Annotated[AuthContext, Depends(get_auth_context)],
    db: Annotated[Session, Depends(get_db)],
):
    """Add content to the current user's wishlist."""
    user_id = auth.user_id
    if find_wishlist_entry(db, user_id, entry_data.content_id, entry_data.content_type):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Already in wishlist",
        )

    entry = WishlistEntry(
        user_id=user_id,
        content_id=entry_data.content_id,
        content_type=entry_data.content_type,
        content_details=entry_data.content_details.model_dump(),
    )
    db.add(entry)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        # Only a concurrent insert of the same entry is a conflict
        if not find_wishlist_entry(db, user_id, entry_data.content_id, entry_data.content_type):
            raise
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Already in wishlist",
        ) from None
    db.refresh(entry)

    logger.info(f"User {user_id} added '{entry.title}' to wishlist")
    return entry


@router.delete("/{content_id}/{content_type}", status_code=status.HTTP_204_NO_CONTENT)
def remove_from_wishlist(
    content_id: Annotated[int, Path(gt=0)],
    content_type: ContentType,
    auth: Annotated[AuthContext, Depends(get_auth_context)],
    db: Annotated[Session, Depends(get_db)],
):
    """Remove content from the current user's wishlist."""
    entry = find_wishlist_entry(db, auth.user_id, content_id, content_type)
    if not entry:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Wishlist item not found",
        )

    db.delete(entry)
    db.commit()
