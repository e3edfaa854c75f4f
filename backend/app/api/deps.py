"""Shared FastAPI dependencies: store access and caller identity."""

import logging
from typing import Callable

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from backend.app.core.exceptions import (
    AccountInactiveError,
    AuthenticationError,
    PermissionDeniedError,
)
from backend.app.core.security import decode_access_token
from backend.app.models.user import User
from backend.app.repositories.base import Store

logger = logging.getLogger(__name__)

bearer = HTTPBearer(auto_error=False)


def get_store(request: Request) -> Store:
    """Return the store created at startup."""
    return request.app.state.store


async def _load_user(store: Store, token: str) -> User:
    payload = decode_access_token(token)
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError) as e:
        raise AuthenticationError("Invalid token payload") from e

    async with store.unit_of_work() as repos:
        user = await repos.users.get(user_id)
    if user is None:
        raise AuthenticationError("User not found")
    if not user.is_active:
        raise AccountInactiveError(user.status)
    return user


async def get_current_user(
    creds: HTTPAuthorizationCredentials | None = Depends(bearer),
    store: Store = Depends(get_store),
) -> User:
    """
    Resolve the authenticated caller.

    Raises:
        AuthenticationError: Missing, invalid or expired token, or unknown user
        AccountInactiveError: The account is not active
    """
    if creds is None:
        raise AuthenticationError()
    return await _load_user(store, creds.credentials)


async def get_optional_user(
    creds: HTTPAuthorizationCredentials | None = Depends(bearer),
    store: Store = Depends(get_store),
) -> User | None:
    """Resolve the caller if a usable token is present, otherwise None."""
    if creds is None:
        return None
    try:
        return await _load_user(store, creds.credentials)
    except (AuthenticationError, AccountInactiveError) as e:
        logger.debug(f"[AUTH] Ignoring unusable optional token: {e.message}")
        return None


def require_roles(*roles: str) -> Callable:
    """Dependency factory admitting only callers whose role is in roles."""

    async def _dep(user: User = Depends(get_current_user)) -> User:
        if user.role not in roles:
            raise PermissionDeniedError()
        return user

    return _dep
