"""Review API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy import desc
from sqlalchemy.orm import Session, joinedload

from src.api.dependencies import get_auth_context
from src.database import get_db
from src.models.enums import ContentType
from src.models.review import Review
from src.schemas.review import ReviewCreate, ReviewResponse
from src.services.auth import AuthContext

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/reviews", tags=["reviews"])


@router.get("/{content_type}/{content_id}", response_model=list[ReviewResponse])
def list_reviews(
    content_type: ContentType,
    content_id: Annotated[int, Path(gt=0)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get all reviews for a movie, show or anime, newest first.

    Public: anyone browsing a details page can read reviews.
    """
    return (
        db.query(Review)
        .options(joinedload(Review.user))
        .filter(Review.content_id == content_id, Review.content_type == content_type)
        .order_by(desc(Review.created_at), desc(Review.id))
        .all()
    )


@router.post("", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
def create_review(
    review_data: ReviewCreate,
    auth: Annotated[AuthContext, Depends(get_auth_context)],
    db: Annotated[Session, Depends(get_db)],
):
    """Submit a review. A user may review the same content more than once."""
    review = Review(
        user_id=auth.user_id,
        content_id=review_data.content_id,
        content_type=review_data.content_type,
        rating=review_data.rating,
        comment=review_data.comment,
        content_details=review_data.content_details.model_dump(),
    )
    db.add(review)
    db.commit()
    db.refresh(review)

    logger.info(
        f"User {auth.user_id} reviewed {review.content_type.value} {review.content_id} "
        f"({review.rating}/5)"
    )
    return review
