"""Unit tests for password hashing and tokens."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from backend.app.core.config import settings
from backend.app.core.exceptions import AuthenticationError
from backend.app.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from backend.app.models.user import User


def _user() -> User:
    return User(id=42, email="ada@example.com", name="Ada", role="moderator")


class TestPasswords:
    def test_hash_and_verify(self):
        hashed = hash_password("secret123")

        assert hashed != "secret123"
        assert verify_password("secret123", hashed)
        assert not verify_password("wrong", hashed)


class TestTokens:
    def test_round_trip_claims(self):
        payload = decode_access_token(create_access_token(_user()))

        assert payload["sub"] == "42"
        assert payload["email"] == "ada@example.com"
        assert payload["role"] == "moderator"
        assert payload["iss"] == settings.jwt_issuer

    def test_expired_token(self):
        past = datetime.now(timezone.utc) - timedelta(hours=1)
        token = jwt.encode(
            {"sub": "42", "exp": past, "iss": settings.jwt_issuer, "aud": settings.jwt_audience},
            settings.secret_key,
            algorithm=settings.jwt_algorithm,
        )

        with pytest.raises(AuthenticationError, match="Token expired"):
            decode_access_token(token)

    def test_wrong_audience(self):
        token = jwt.encode(
            {"sub": "42", "iss": settings.jwt_issuer, "aud": "someone-else"},
            settings.secret_key,
            algorithm=settings.jwt_algorithm,
        )

        with pytest.raises(AuthenticationError, match="Invalid token"):
            decode_access_token(token)

    def test_tampered_token(self):
        token = create_access_token(_user())

        with pytest.raises(AuthenticationError):
            decode_access_token(token[:-2] + ("A" if token[-2] != "A" else "B") + token[-1])
