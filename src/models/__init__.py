"""SQLAlchemy models."""

from src.models.review import Review
from src.models.user import User
from src.models.wishlist import WishlistEntry

__all__ = [
    "User",
    "Review",
    "WishlistEntry",
]
