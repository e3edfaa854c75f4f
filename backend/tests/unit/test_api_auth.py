"""Unit tests for auth API endpoints."""

import pytest

from backend.app.models.user import UserStatus


class TestAuthAPI:
    """Test cases for auth API endpoints."""

    @pytest.mark.asyncio
    async def test_register_success(self, client):
        """Test registering returns the user and a token."""
        response = await client.post(
            "/api/auth/register",
            json={"email": "Ada@Example.com", "password": "secret123", "name": "Ada", "location": "Springfield"},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["user"]["email"] == "ada@example.com"
        assert data["user"]["role"] == "citizen"
        assert data["user"]["loginCount"] == 1
        assert data["token"]
        assert "passwordHash" not in data["user"]

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, client):
        """Test e-mail addresses are unique regardless of case."""
        body = {"email": "ada@example.com", "password": "secret123", "name": "Ada"}
        await client.post("/api/auth/register", json=body)

        response = await client.post("/api/auth/register", json={**body, "email": "ADA@example.com"})

        assert response.status_code == 409
        assert response.json()["type"] == "EmailAlreadyRegisteredError"

    @pytest.mark.asyncio
    async def test_register_short_password(self, client):
        response = await client.post(
            "/api/auth/register",
            json={"email": "ada@example.com", "password": "123", "name": "Ada"},
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_login_success(self, client, create_user):
        user = await create_user(email="bob@example.com")

        response = await client.post(
            "/api/auth/login",
            json={"email": "bob@example.com", "password": "secret123"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["user"]["id"] == user.id
        assert data["user"]["loginCount"] == 1
        assert data["user"]["lastLoginAt"] is not None

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, client, create_user):
        await create_user(email="bob@example.com")

        response = await client.post(
            "/api/auth/login",
            json={"email": "bob@example.com", "password": "not-it"},
        )

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_login_suspended_account(self, client, create_user):
        await create_user(email="bob@example.com", status=UserStatus.SUSPENDED.value)

        response = await client.post(
            "/api/auth/login",
            json={"email": "bob@example.com", "password": "secret123"},
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_me_requires_token(self, client):
        response = await client.get("/api/auth/me")

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_me_with_garbage_token(self, client):
        response = await client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid token"

    @pytest.mark.asyncio
    async def test_banned_user_token_rejected(self, client, create_user, auth_headers):
        user = await create_user(status=UserStatus.BANNED.value)

        response = await client.get("/api/auth/me", headers=auth_headers(user))

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_token_from_register_works(self, client):
        register = await client.post(
            "/api/auth/register",
            json={"email": "ada@example.com", "password": "secret123", "name": "Ada"},
        )
        token = register.json()["token"]

        response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200
        assert response.json()["email"] == "ada@example.com"

    @pytest.mark.asyncio
    async def test_update_profile(self, client, create_user, auth_headers):
        user = await create_user()

        response = await client.patch(
            "/api/auth/profile",
            json={"bio": "Cyclist", "avatarUrl": "https://example.com/a.png"},
            headers=auth_headers(user),
        )
        me = await client.get("/api/auth/me", headers=auth_headers(user))

        assert response.status_code == 200
        assert response.json()["bio"] == "Cyclist"
        assert me.json()["avatarUrl"] == "https://example.com/a.png"
        assert me.json()["name"] == user.name

    @pytest.mark.asyncio
    async def test_logout(self, client, create_user, auth_headers):
        user = await create_user()

        response = await client.post("/api/auth/logout", headers=auth_headers(user))

        assert response.status_code == 200
        assert response.json()["message"] == "Logged out successfully"
