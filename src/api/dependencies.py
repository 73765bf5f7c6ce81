"""FastAPI dependencies for authentication and database."""

from typing import Annotated

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from src.database import get_db
from src.models.user import User
from src.services.auth import AuthContext, SessionBoundary, SqlUserStore, TokenCodec, UserStore


def get_token_codec(request: Request) -> TokenCodec:
    """Get the token codec built at application startup."""
    return request.app.state.token_codec


def get_session_boundary(request: Request) -> SessionBoundary:
    """Get the session boundary built at application startup."""
    return request.app.state.session_boundary


def get_user_store(db: Annotated[Session, Depends(get_db)]) -> UserStore:
    """Get the user store the session boundary resolves tokens against."""
    return SqlUserStore(db)


def get_auth_context(
    boundary: Annotated[SessionBoundary, Depends(get_session_boundary)],
    users: Annotated[UserStore, Depends(get_user_store)],
    authorization: Annotated[str | None, Header()] = None,
) -> AuthContext:
    """Resolve the Authorization header to the calling user.

    Failures raise ``AuthenticationError`` subclasses, rendered as 401 by the
    handlers registered in ``src.main``.
    """
    return boundary.authenticate(authorization, users)


def get_current_user(
    auth: Annotated[AuthContext, Depends(get_auth_context)],
) -> User:
    """Get the current authenticated user."""
    return auth.user
