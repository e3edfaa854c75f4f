"""Notification schemas."""

from datetime import datetime
from typing import Any

from pydantic import Field

from backend.app.schemas.common import CamelModel, Pagination


class NotificationResponse(CamelModel):
    """Schema for notification data in responses."""

    id: int
    type: str
    title: str
    message: str
    read: bool
    action_url: str | None = None
    issue_id: int | None = None
    comment_id: int | None = None
    related_user_id: int | None = None
    metadata: dict[str, Any] | None = Field(default=None, validation_alias="details")
    created_at: datetime


class NotificationListResponse(CamelModel):
    """One page of the caller's notifications."""

    notifications: list[NotificationResponse]
    pagination: Pagination
    unread_count: int


class MarkAllReadResponse(CamelModel):
    updated: int = Field(..., description="Number of notifications marked as read")
