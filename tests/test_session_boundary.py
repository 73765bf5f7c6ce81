"""Tests for the credential and session boundary."""

import logging
from typing import Annotated
from unittest.mock import MagicMock

import pytest
from fastapi import Depends
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from src.api.dependencies import get_auth_context, get_user_store
from src.config import Settings
from src.main import create_app
from src.models.user import User
from src.services.auth import (
    AuthContext,
    InvalidCredential,
    MissingCredential,
    SessionBoundary,
    SqlUserStore,
    StoreUnavailable,
    TokenCodec,
    UnknownSubject,
    extract_bearer_token,
)

SECRET = "boundary-test-secret"


class FakeUserStore:
    """In-memory user store that records every lookup."""

    def __init__(self, *users: User):
        self.users = {user.id: user for user in users}
        self.lookups: list[int] = []

    def get_by_id(self, user_id: int) -> User | None:
        self.lookups.append(user_id)
        return self.users.get(user_id)


class FailingUserStore:
    """User store whose backing database is down."""

    def get_by_id(self, user_id: int) -> User | None:
        raise StoreUnavailable("connection refused")


@pytest.fixture
def codec():
    return TokenCodec(SECRET, expiration_minutes=60)


@pytest.fixture
def boundary(codec):
    return SessionBoundary(codec)


@pytest.fixture
def alice():
    return User(id=7, username="alice", email="alice@example.com", password_hash="x")


class TestExtractBearerToken:
    """Tests for Authorization header parsing."""

    def test_strips_bearer_prefix(self):
        assert extract_bearer_token("Bearer abc.def.ghi") == "abc.def.ghi"

    def test_prefix_is_case_insensitive(self):
        assert extract_bearer_token("bearer abc") == "abc"

    def test_accepts_bare_token(self):
        assert extract_bearer_token("abc.def.ghi") == "abc.def.ghi"

    def test_missing_header(self):
        with pytest.raises(MissingCredential):
            extract_bearer_token(None)

    @pytest.mark.parametrize("header", ["", "   ", "Bearer", "Bearer    "])
    def test_no_usable_token(self, header):
        with pytest.raises(MissingCredential):
            extract_bearer_token(header)


class TestTokenCodec:
    """Tests for issuing and verifying tokens."""

    def test_issued_token_verifies(self, codec):
        assert codec.verify(codec.issue(42)) == 42

    def test_token_from_other_key_rejected(self, codec):
        foreign = TokenCodec("some-other-secret").issue(42)
        with pytest.raises(InvalidCredential):
            codec.verify(foreign)

    def test_malformed_token_rejected(self, codec):
        with pytest.raises(InvalidCredential):
            codec.verify("garbage")

    def test_expired_token_rejected(self):
        expired = TokenCodec(SECRET, expiration_minutes=-5)
        with pytest.raises(InvalidCredential):
            expired.verify(expired.issue(42))

    def test_no_expiration_configured(self):
        codec = TokenCodec(SECRET, expiration_minutes=None)
        assert codec.verify(codec.issue(3)) == 3

    def test_non_numeric_subject_rejected(self, codec):
        from jose import jwt

        token = jwt.encode({"sub": "not-a-user-id"}, SECRET, algorithm="HS256")
        with pytest.raises(InvalidCredential):
            codec.verify(token)

    def test_missing_subject_rejected(self, codec):
        from jose import jwt

        token = jwt.encode({"email": "alice@example.com"}, SECRET, algorithm="HS256")
        with pytest.raises(InvalidCredential):
            codec.verify(token)

    def test_from_settings(self):
        settings = Settings(_env_file=None, jwt_secret=SECRET, jwt_expiration_minutes=None)
        codec = TokenCodec.from_settings(settings)
        assert codec.secret == SECRET
        assert codec.algorithm == "HS256"
        assert codec.expiration_minutes is None


class TestSessionBoundary:
    """Tests for SessionBoundary.authenticate."""

    def test_missing_header_never_touches_store(self, boundary):
        store = FakeUserStore()
        with pytest.raises(MissingCredential):
            boundary.authenticate(None, store)
        assert store.lookups == []

    def test_bad_signature_never_touches_store(self, boundary, alice):
        store = FakeUserStore(alice)
        token = TokenCodec("wrong-key").issue(alice.id)
        with pytest.raises(InvalidCredential):
            boundary.authenticate(f"Bearer {token}", store)
        assert store.lookups == []

    def test_unknown_subject(self, boundary, codec):
        store = FakeUserStore()
        with pytest.raises(UnknownSubject):
            boundary.authenticate(f"Bearer {codec.issue(99)}", store)
        assert store.lookups == [99]

    def test_resolves_existing_user(self, boundary, codec, alice):
        store = FakeUserStore(alice)
        token = codec.issue(alice.id)

        context = boundary.authenticate(f"Bearer {token}", store)

        assert isinstance(context, AuthContext)
        assert context.user is alice
        assert context.user_id == 7
        assert context.token == token
        assert store.lookups == [7]

    def test_store_fault_propagates(self, boundary, codec):
        with pytest.raises(StoreUnavailable):
            boundary.authenticate(f"Bearer {codec.issue(1)}", FailingUserStore())

    def test_failures_share_base_class(self):
        from src.services.auth import AuthenticationError

        assert issubclass(MissingCredential, AuthenticationError)
        assert issubclass(InvalidCredential, AuthenticationError)
        assert issubclass(UnknownSubject, AuthenticationError)
        assert not issubclass(StoreUnavailable, AuthenticationError)


class TestSqlUserStore:
    """Tests for the SQLAlchemy-backed user store."""

    def test_database_error_becomes_store_unavailable(self):
        db = MagicMock()
        db.query.side_effect = OperationalError("SELECT", {}, Exception("connection refused"))

        with pytest.raises(StoreUnavailable):
            SqlUserStore(db).get_by_id(1)

    def test_lookup_existing_user(self, db):
        user = User(username="carol", email="carol@example.com", password_hash="x")
        db.add(user)
        db.commit()

        assert SqlUserStore(db).get_by_id(user.id).username == "carol"
        assert SqlUserStore(db).get_by_id(user.id + 1000) is None


class TestProtectedHandler:
    """End-to-end checks through a standalone app with its own secret."""

    @pytest.fixture
    def probe(self, alice):
        app = create_app(Settings(_env_file=None, jwt_secret=SECRET))
        calls: list[AuthContext] = []

        @app.get("/probe")
        def probe_endpoint(auth: Annotated[AuthContext, Depends(get_auth_context)]):
            calls.append(auth)
            return {"username": auth.user.username}

        store = FakeUserStore(alice)
        app.dependency_overrides[get_user_store] = lambda: store
        with TestClient(app) as client:
            yield client, app, store, calls

    def test_handler_invoked_once_with_user(self, probe, alice):
        client, app, store, calls = probe
        token = app.state.token_codec.issue(alice.id)

        response = client.get("/probe", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200
        assert response.json() == {"username": "alice"}
        assert len(calls) == 1
        assert calls[0].user is alice

    def test_missing_header_rejected_before_lookup(self, probe):
        client, _, store, calls = probe

        response = client.get("/probe")

        assert response.status_code == 401
        assert store.lookups == []
        assert calls == []

    def test_token_signed_by_other_app_rejected(self, probe, alice):
        client, _, store, calls = probe
        token = TokenCodec("another-deployment").issue(alice.id)

        response = client.get("/probe", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert calls == []

    def test_store_fault_is_500(self, probe, alice, caplog):
        client, app, _, calls = probe
        caplog.set_level(logging.ERROR, logger="src.main")
        app.dependency_overrides[get_user_store] = lambda: FailingUserStore()
        token = app.state.token_codec.issue(alice.id)

        response = client.get("/probe", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 500
        assert response.json()["detail"] == "Server error during authentication"
        assert calls == []

        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert len(errors) == 1
        assert errors[0].exc_info is not None
        assert errors[0].exc_info[0] is StoreUnavailable
