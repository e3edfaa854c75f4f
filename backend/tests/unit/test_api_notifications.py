"""Unit tests for notification API endpoints."""

import pytest

from backend.app.models.user import UserRole


async def _upvote(client, headers, issue_id):
    response = await client.post(f"/api/issues/{issue_id}/vote", json={"voteType": "upvote"}, headers=headers)
    assert response.status_code == 200


class TestNotificationAPI:
    """Test cases for notification API endpoints."""

    @pytest.mark.asyncio
    async def test_vote_notifies_reporter(self, client, create_user, create_issue, auth_headers):
        reporter = await create_user()
        voter = await create_user()
        issue = await create_issue(reporter)
        await _upvote(client, auth_headers(voter), issue.id)

        response = await client.get("/api/notifications", headers=auth_headers(reporter))

        assert response.status_code == 200
        data = response.json()
        assert data["unreadCount"] == 1
        notification = data["notifications"][0]
        assert notification["type"] == "upvote"
        assert notification["issueId"] == issue.id
        assert notification["actionUrl"] == f"/issues/{issue.id}"
        assert notification["read"] is False

    @pytest.mark.asyncio
    async def test_status_update_carries_metadata(self, client, create_user, create_issue, auth_headers):
        reporter = await create_user()
        moderator = await create_user(role=UserRole.MODERATOR.value)
        issue = await create_issue(reporter)
        await client.patch(
            f"/api/issues/{issue.id}/status", json={"status": "approved"}, headers=auth_headers(moderator),
        )

        response = await client.get("/api/notifications", headers=auth_headers(reporter))

        notification = response.json()["notifications"][0]
        assert notification["type"] == "status_update"
        assert notification["metadata"] == {"previousStatus": "pending", "newStatus": "approved"}

    @pytest.mark.asyncio
    async def test_mark_read_and_read_all(self, client, create_user, create_issue, auth_headers):
        reporter = await create_user()
        issue = await create_issue(reporter)
        for _ in range(3):
            await _upvote(client, auth_headers(await create_user()), issue.id)
        headers = auth_headers(reporter)

        listing = await client.get("/api/notifications", headers=headers)
        first_id = listing.json()["notifications"][0]["id"]
        marked = await client.patch(f"/api/notifications/{first_id}/read", headers=headers)
        unread = await client.get("/api/notifications", params={"unreadOnly": "true"}, headers=headers)
        read_all = await client.patch("/api/notifications/read-all", headers=headers)
        after = await client.get("/api/notifications", headers=headers)

        assert marked.status_code == 200
        assert marked.json()["read"] is True
        assert len(unread.json()["notifications"]) == 2
        assert read_all.json()["updated"] == 2
        assert after.json()["unreadCount"] == 0

    @pytest.mark.asyncio
    async def test_cannot_touch_other_users_notification(self, client, create_user, create_issue, auth_headers):
        reporter = await create_user()
        voter = await create_user()
        issue = await create_issue(reporter)
        await _upvote(client, auth_headers(voter), issue.id)
        listing = await client.get("/api/notifications", headers=auth_headers(reporter))
        notification_id = listing.json()["notifications"][0]["id"]

        marked = await client.patch(f"/api/notifications/{notification_id}/read", headers=auth_headers(voter))
        deleted = await client.delete(f"/api/notifications/{notification_id}", headers=auth_headers(voter))

        assert marked.status_code == 404
        assert deleted.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_notification(self, client, create_user, create_issue, auth_headers):
        reporter = await create_user()
        issue = await create_issue(reporter)
        await _upvote(client, auth_headers(await create_user()), issue.id)
        headers = auth_headers(reporter)
        listing = await client.get("/api/notifications", headers=headers)
        notification_id = listing.json()["notifications"][0]["id"]

        response = await client.delete(f"/api/notifications/{notification_id}", headers=headers)
        after = await client.get("/api/notifications", headers=headers)

        assert response.status_code == 204
        assert after.json()["notifications"] == []
