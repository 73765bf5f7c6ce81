"""Pydantic schemas for API requests and responses."""

from src.schemas.auth import AuthResponse, UserLogin, UserRegister, UserResponse
from src.schemas.content import ContentDetails
from src.schemas.review import ReviewCreate, ReviewResponse
from src.schemas.wishlist import WishlistEntryCreate, WishlistEntryResponse

__all__ = [
    "UserRegister",
    "UserLogin",
    "UserResponse",
    "AuthResponse",
    "ContentDetails",
    "ReviewCreate",
    "ReviewResponse",
    "WishlistEntryCreate",
    "WishlistEntryResponse",
]
