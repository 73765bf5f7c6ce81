"""Enums for model fields."""

from enum import Enum

from sqlalchemy import Enum as SAEnum


class ContentType(str, Enum):
    """Kinds of catalog content a review or wishlist entry can point at.

    Movies and TV shows come from TMDB, anime from Jikan (MyAnimeList), so
    the same numeric id can exist under more than one type.
    """

    MOVIE = "movie"
    TV = "tv"
    ANIME = "anime"


# Shared so PostgreSQL creates a single "content_type" enum for both tables
content_type_enum = SAEnum(
    ContentType,
    name="content_type",
    values_callable=lambda members: [member.value for member in members],
)
