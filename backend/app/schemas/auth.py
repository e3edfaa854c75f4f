"""Authentication and profile schemas."""

from datetime import datetime

from pydantic import EmailStr, Field

from backend.app.schemas.common import CamelModel


class RegisterRequest(CamelModel):
    """Schema for signing up."""

    email: EmailStr = Field(..., description="Login e-mail address")
    password: str = Field(..., min_length=6, max_length=512, description="Plain-text password")
    name: str = Field(..., min_length=1, max_length=120, description="Display name")
    location: str | None = Field(default=None, max_length=255, description="Home location")


class LoginRequest(CamelModel):
    """Schema for signing in."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=512)


class ProfileUpdate(CamelModel):
    """Schema for editing one's own profile; omitted fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=120)
    bio: str | None = Field(default=None, max_length=1000)
    location: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=30)
    avatar_url: str | None = Field(default=None, max_length=500)


class UserResponse(CamelModel):
    """Schema for user data in responses. Never carries the password hash."""

    id: int
    email: str
    name: str
    location: str | None = None
    bio: str | None = None
    phone: str | None = None
    avatar_url: str | None = None
    role: str
    status: str
    email_verified: bool
    login_count: int
    last_login_at: datetime | None = None
    created_at: datetime


class AuthResponse(CamelModel):
    """Signed-in user and bearer token."""

    user: UserResponse
    token: str = Field(..., description="Bearer access token")
    token_type: str = Field(default="bearer")
    expires_in: int = Field(..., description="Token lifetime in seconds")
