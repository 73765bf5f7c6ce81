"""Review model."""

from sqlalchemy import CheckConstraint, Column, ForeignKey, Index, Integer, Text
from sqlalchemy.orm import backref, relationship

from src.database import Base
from src.models.enums import content_type_enum
from src.models.mixins import ContentDetailsMixin, CreatedAtMixin


class Review(Base, CreatedAtMixin, ContentDetailsMixin):
    """A user's rating and comment for a movie, show or anime.

    Not unique: the same user may review the same content more than once.
    """

    __tablename__ = "reviews"
    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_reviews_rating_range"),
        Index("ix_reviews_user_content", "user_id", "content_id", "content_type"),
        Index("ix_reviews_content", "content_id", "content_type"),
        Index("ix_reviews_created_at", "created_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    content_id = Column(Integer, nullable=False)
    content_type = Column(content_type_enum, nullable=False)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=False)

    # Relationships
    user = relationship(
        "User", backref=backref("reviews", cascade="all, delete-orphan", passive_deletes=True)
    )

    @property
    def username(self) -> str | None:
        """Author's username for display alongside the review."""
        return self.user.username if self.user else None
