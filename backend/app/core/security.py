"""Password hashing and bearer token helpers."""

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from passlib.hash import pbkdf2_sha256

from backend.app.core.config import settings
from backend.app.core.exceptions import AuthenticationError
from backend.app.models.user import User


def hash_password(raw: str) -> str:
    return pbkdf2_sha256.hash(raw)


def verify_password(raw: str, hashed: str) -> bool:
    return pbkdf2_sha256.verify(raw, hashed)


def create_access_token(user: User) -> str:
    """
    Issue a signed access token for a user.

    The subject is the user id as a string; email and role are carried for
    clients but never trusted by the server, which reloads the user.
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user.id),
        "email": user.email,
        "role": user.role,
        "iat": now,
        "exp": now + timedelta(hours=settings.jwt_expiration_hours),
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Verify a token's signature, expiry, issuer and audience.

    Raises:
        AuthenticationError: If the token is expired or invalid
    """
    try:
        return jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
        )
    except jwt.ExpiredSignatureError as e:
        raise AuthenticationError("Token expired") from e
    except jwt.InvalidTokenError as e:
        raise AuthenticationError("Invalid token") from e
