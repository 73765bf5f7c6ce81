"""Mixins for SQLAlchemy models."""

from sqlalchemy import JSON, Column, DateTime, func


class CreatedAtMixin:
    """Mixin to add a created_at timestamp column."""

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class ContentDetailsMixin:
    """Denormalized catalog metadata copied onto a row.

    Holds ``{"title": ..., "overview": ..., "poster_path": ...}`` so list views
    never need a second round-trip to the catalog API.
    """

    content_details = Column(JSON, nullable=False)

    @property
    def title(self) -> str | None:
        """Title of the referenced content, if recorded."""
        return (self.content_details or {}).get("title")
