"""Authentication API endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from src.api.dependencies import get_current_user, get_token_codec
from src.database import get_db
from src.models.user import User
from src.schemas.auth import AuthResponse, UserLogin, UserRegister, UserResponse
from src.services.auth import TokenCodec, authenticate_user, create_user, find_conflicting_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserRegister,
    codec: Annotated[TokenCodec, Depends(get_token_codec)],
    db: Annotated[Session, Depends(get_db)],
):
    """Register a new user."""
    if find_conflicting_user(db, user_data.email, user_data.username):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User already exists",
        )

    try:
        user = create_user(db, user_data.username, user_data.email, user_data.password)
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email/username
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User already exists",
        ) from None

    logger.info(f"Registered user {user.id} ({user.username})")

    return AuthResponse(
        access_token=codec.issue(user.id),
        user=UserResponse.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
def login(
    credentials: UserLogin,
    codec: Annotated[TokenCodec, Depends(get_token_codec)],
    db: Annotated[Session, Depends(get_db)],
):
    """Login with email and password."""
    user = authenticate_user(db, credentials.email, credentials.password)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return AuthResponse(
        access_token=codec.issue(user.id),
        user=UserResponse.model_validate(user),
    )


@router.get("/me", response_model=UserResponse)
def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Get current user information."""
    return current_user


@router.post("/logout")
def logout(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Logout (client should discard token; tokens cannot be revoked server-side)."""
    return {"message": "Logged out successfully"}
