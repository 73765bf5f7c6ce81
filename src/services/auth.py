"""Authentication service: password hashing, JWT issuing and the session boundary.

Protected endpoints never decode tokens themselves. They depend on
``SessionBoundary.authenticate``, which turns an ``Authorization`` header into
an ``AuthContext`` or raises one of the errors below. Tokens are stateless:
there is no server-side revocation, a token stays valid until it expires (or
forever when no expiration is configured).
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.config import Settings
from src.models.user import User

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

BEARER_PREFIX = "bearer"


class AuthenticationError(Exception):
    """Request could not be attributed to an authenticated user (HTTP 401)."""

    detail = "Could not validate credentials"

    def __init__(self, detail: str | None = None):
        super().__init__(detail or self.detail)
        if detail:
            self.detail = detail


class MissingCredential(AuthenticationError):
    detail = "No token found in Authorization header"


class InvalidCredential(AuthenticationError):
    detail = "Invalid token"


class UnknownSubject(AuthenticationError):
    detail = "User not found"


class StoreUnavailable(Exception):
    """The user store failed while resolving a credential (HTTP 500)."""


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


class TokenCodec:
    """Issues and verifies signed access tokens.

    Built once from ``Settings`` at application startup.
    """

    def __init__(
        self, secret: str, algorithm: str = "HS256", expiration_minutes: int | None = None
    ):
        self.secret = secret
        self.algorithm = algorithm
        self.expiration_minutes = expiration_minutes

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenCodec":
        return cls(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            expiration_minutes=settings.jwt_expiration_minutes,
        )

    def issue(self, user_id: int) -> str:
        """Create a token whose subject is the user id."""
        to_encode: dict = {"sub": str(user_id), "iat": datetime.now(UTC)}
        if self.expiration_minutes is not None:
            to_encode["exp"] = datetime.now(UTC) + timedelta(minutes=self.expiration_minutes)
        return jwt.encode(to_encode, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> int:
        """Return the user id carried by a token.

        Raises:
            InvalidCredential: bad signature, malformed or expired token, or a
                subject that is not a user id.
        """
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError as e:
            raise InvalidCredential() from e

        subject = payload.get("sub")
        if subject is None:
            raise InvalidCredential()
        try:
            return int(subject)
        except (TypeError, ValueError):
            raise InvalidCredential() from None


class UserStore(Protocol):
    """Lookup the session boundary needs from persistence."""

    def get_by_id(self, user_id: int) -> User | None: ...


class SqlUserStore:
    """User lookups backed by a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: int) -> User | None:
        try:
            return self.db.query(User).filter(User.id == user_id).first()
        except SQLAlchemyError as e:
            raise StoreUnavailable(f"User lookup failed: {e}") from e


@dataclass(frozen=True)
class AuthContext:
    """The authenticated caller, handed to protected endpoints."""

    user: User
    token: str

    @property
    def user_id(self) -> int:
        return self.user.id


def extract_bearer_token(authorization: str | None) -> str:
    """Strip an optional ``Bearer`` scheme prefix from an Authorization header.

    Raises:
        MissingCredential: header absent or nothing left after the prefix.
    """
    if authorization is None:
        raise MissingCredential("No Authorization header found")

    token = authorization.strip()
    scheme, _, rest = token.partition(" ")
    if scheme.lower() == BEARER_PREFIX:
        token = rest.strip()

    if not token:
        raise MissingCredential()
    return token


class SessionBoundary:
    """Gate in front of protected endpoints.

    Verification is local; a successful verification costs exactly one
    lookup against the user store. Nothing is retried.
    """

    def __init__(self, codec: TokenCodec):
        self.codec = codec

    def authenticate(self, authorization: str | None, users: UserStore) -> AuthContext:
        token = extract_bearer_token(authorization)
        user_id = self.codec.verify(token)

        user = users.get_by_id(user_id)
        if user is None:
            logger.info(f"Rejected token for unknown user {user_id}")
            raise UnknownSubject()

        return AuthContext(user=user, token=token)


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    """Authenticate a user by email and password."""
    user = get_user_by_email(db, email)
    if not user:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email."""
    return db.query(User).filter(User.email == email).first()


def find_conflicting_user(db: Session, email: str, username: str) -> User | None:
    """Get a user that already holds this email or username."""
    return db.query(User).filter(or_(User.email == email, User.username == username)).first()


def create_user(db: Session, username: str, email: str, password: str) -> User:
    """Create a new user."""
    hashed_password = get_password_hash(password)
    user = User(username=username, email=email, password_hash=hashed_password)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user
