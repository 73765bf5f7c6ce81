"""Wishlist entry model."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, UniqueConstraint, func
from sqlalchemy.orm import backref, relationship

from src.database import Base
from src.models.enums import content_type_enum
from src.models.mixins import ContentDetailsMixin


class WishlistEntry(Base, ContentDetailsMixin):
    """Content a user wants to watch later."""

    __tablename__ = "wishlist_entries"
    __table_args__ = (
        UniqueConstraint("user_id", "content_id", "content_type", name="uq_wishlist_user_content"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    content_id = Column(Integer, nullable=False)
    content_type = Column(content_type_enum, nullable=False)
    added_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False, index=True
    )

    # Relationships
    user = relationship(
        "User",
        backref=backref("wishlist_entries", cascade="all, delete-orphan", passive_deletes=True),
    )
