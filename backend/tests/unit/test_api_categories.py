"""Unit tests for category API endpoints."""

import pytest

from backend.app.models.user import UserRole


class TestCategoryAPI:
    """Test cases for category API endpoints."""

    @pytest.mark.asyncio
    async def test_admin_creates_category(self, client, create_user, auth_headers):
        admin = await create_user(role=UserRole.ADMIN.value)

        response = await client.post(
            "/api/categories",
            json={"name": "Snow Removal", "iconName": "snowflake", "colorHex": "#AABBCC", "displayOrder": 2},
            headers=auth_headers(admin),
        )

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Snow Removal"
        assert data["colorHex"] == "#AABBCC"
        assert data["isActive"] is True

    @pytest.mark.asyncio
    async def test_moderator_cannot_create_category(self, client, create_user, auth_headers):
        moderator = await create_user(role=UserRole.MODERATOR.value)

        response = await client.post(
            "/api/categories", json={"name": "Snow Removal"}, headers=auth_headers(moderator),
        )

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_bad_color_rejected(self, client, create_user, auth_headers):
        admin = await create_user(role=UserRole.ADMIN.value)

        response = await client.post(
            "/api/categories", json={"name": "Snow", "colorHex": "blue"}, headers=auth_headers(admin),
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_duplicate_category(self, client, create_user, auth_headers):
        admin = await create_user(role=UserRole.ADMIN.value)
        headers = auth_headers(admin)

        await client.post("/api/categories", json={"name": "Parks"}, headers=headers)
        response = await client.post("/api/categories", json={"name": "parks"}, headers=headers)

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_deactivated_category_hidden_by_default(self, client, create_user, auth_headers):
        admin = await create_user(role=UserRole.ADMIN.value)
        headers = auth_headers(admin)
        created = await client.post("/api/categories", json={"name": "Parks"}, headers=headers)

        deleted = await client.delete(f"/api/categories/{created.json()['id']}", headers=headers)
        active = await client.get("/api/categories")
        everything = await client.get("/api/categories", params={"includeInactive": "true"})

        assert deleted.status_code == 204
        assert active.json() == []
        assert [c["name"] for c in everything.json()] == ["Parks"]

    @pytest.mark.asyncio
    async def test_missing_category(self, client):
        response = await client.get("/api/categories/77")

        assert response.status_code == 404
