"""Authentication endpoints."""

import logging

from fastapi import APIRouter, Depends, status

from backend.app.api.deps import get_current_user, get_store
from backend.app.models.user import User
from backend.app.repositories.base import Store
from backend.app.schemas.auth import (
    AuthResponse,
    LoginRequest,
    ProfileUpdate,
    RegisterRequest,
    UserResponse,
)
from backend.app.schemas.common import MessageResponse
from backend.app.services import auth as auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    body: RegisterRequest,
    store: Store = Depends(get_store),
):
    """
    Create a citizen account.

    Returns the new user and a bearer token, so the client is signed in
    immediately.
    """
    return await auth_service.register_user(store, body)


@router.post("/login", response_model=AuthResponse)
async def login(
    body: LoginRequest,
    store: Store = Depends(get_store),
):
    """Sign in with e-mail and password."""
    return await auth_service.login_user(store, body)


@router.get("/me", response_model=UserResponse)
async def me(user: User = Depends(get_current_user)):
    """Return the signed-in user."""
    return UserResponse.model_validate(user)


@router.patch("/profile", response_model=UserResponse)
async def update_profile(
    body: ProfileUpdate,
    user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """Edit the signed-in user's profile."""
    return await auth_service.update_profile(store, user, body)


@router.post("/logout", response_model=MessageResponse)
async def logout(user: User = Depends(get_current_user)):
    """
    Acknowledge a sign-out.

    Tokens are stateless; the client discards its token.
    """
    logger.info(f"[AUTH] User {user.id} signed out")
    return MessageResponse(message="Logged out successfully")
