"""Account registration, sign-in and profile edits."""

import logging
from datetime import datetime

from backend.app.core.config import settings
from backend.app.core.exceptions import (
    AccountInactiveError,
    AuthenticationError,
    EmailAlreadyRegisteredError,
    UserNotFoundError,
)
from backend.app.core.security import create_access_token, hash_password, verify_password
from backend.app.models.user import User, UserRole, UserStatus
from backend.app.repositories.base import Store
from backend.app.schemas.auth import AuthResponse, LoginRequest, ProfileUpdate, RegisterRequest, UserResponse

logger = logging.getLogger(__name__)


def _auth_response(user: User) -> AuthResponse:
    return AuthResponse(
        user=UserResponse.model_validate(user),
        token=create_access_token(user),
        expires_in=settings.jwt_expiration_hours * 3600,
    )


async def register_user(store: Store, data: RegisterRequest) -> AuthResponse:
    """
    Create a citizen account and sign it in.

    Raises:
        EmailAlreadyRegisteredError: If the e-mail address is taken (case-insensitive)
    """
    email = data.email.strip().lower()
    async with store.unit_of_work() as repos:
        if await repos.users.get_by_email(email) is not None:
            raise EmailAlreadyRegisteredError(email)

        now = datetime.utcnow()
        user = await repos.users.add(User(
            email=email,
            password_hash=hash_password(data.password),
            name=data.name.strip(),
            location=data.location,
            role=UserRole.CITIZEN.value,
            status=UserStatus.ACTIVE.value,
            email_verified=False,
            login_count=1,
            last_login_at=now,
        ))
    logger.info(f"[AUTH] Registered user {user.id}")
    return _auth_response(user)


async def login_user(store: Store, data: LoginRequest) -> AuthResponse:
    """
    Verify credentials and issue a token.

    Raises:
        AuthenticationError: Unknown e-mail or wrong password
        AccountInactiveError: The account is suspended, banned or deleted
    """
    async with store.unit_of_work() as repos:
        user = await repos.users.get_by_email(data.email)
        if user is None or not verify_password(data.password, user.password_hash):
            logger.info("[AUTH] Failed sign-in attempt")
            raise AuthenticationError("Invalid email or password")
        if not user.is_active:
            raise AccountInactiveError(user.status)

        user.login_count += 1
        user.last_login_at = datetime.utcnow()
        await repos.users.save(user)
    logger.info(f"[AUTH] User {user.id} signed in")
    return _auth_response(user)


async def update_profile(store: Store, user: User, data: ProfileUpdate) -> UserResponse:
    """Apply the provided profile fields to the caller's account."""
    async with store.unit_of_work() as repos:
        account = await repos.users.get(user.id)
        if account is None:
            raise UserNotFoundError(user.id)

        for attr, value in data.model_dump(exclude_unset=True).items():
            if isinstance(value, str):
                value = value.strip() or None
            if attr == "name" and value is None:
                continue
            setattr(account, attr, value)
        account.updated_at = datetime.utcnow()

        await repos.users.save(account)
        return UserResponse.model_validate(account)
