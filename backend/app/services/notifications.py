"""
Notification records.

Notifications are stored for the recipient to read through the API; nothing
is delivered by e-mail or push. Producers (voting, workflow, comments) call
notify() inside their own unit of work so the record commits with the change
that caused it.
"""

import logging
import math
from typing import Any

from backend.app.core.exceptions import NotificationNotFoundError
from backend.app.models.notification import Notification
from backend.app.repositories.base import Repositories, Store
from backend.app.schemas.common import Pagination
from backend.app.schemas.notification import NotificationListResponse, NotificationResponse

logger = logging.getLogger(__name__)


async def notify(
    repos: Repositories,
    user_id: int,
    type: str,
    title: str,
    message: str,
    issue_id: int | None = None,
    comment_id: int | None = None,
    related_user_id: int | None = None,
    details: dict[str, Any] | None = None,
) -> Notification:
    """Record a notification for user_id."""
    notification = await repos.notifications.add(Notification(
        user_id=user_id,
        type=type,
        title=title,
        message=message,
        action_url=f"/issues/{issue_id}" if issue_id is not None else None,
        issue_id=issue_id,
        comment_id=comment_id,
        related_user_id=related_user_id,
        details=details,
    ))
    logger.debug(f"[NOTIFY] {type} for user {user_id} (issue {issue_id})")
    return notification


async def list_notifications(
    store: Store,
    user_id: int,
    page: int,
    limit: int,
    unread_only: bool = False,
) -> NotificationListResponse:
    async with store.unit_of_work() as repos:
        items, total = await repos.notifications.list_for_user(
            user_id,
            unread_only=unread_only,
            skip=(page - 1) * limit,
            limit=limit,
        )
        unread = await repos.notifications.count_unread(user_id)

    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n) for n in items],
        pagination=Pagination(page=page, limit=limit, total=total, pages=math.ceil(total / limit)),
        unread_count=unread,
    )


async def mark_read(store: Store, user_id: int, notification_id: int) -> NotificationResponse:
    """
    Mark one of the caller's notifications as read.

    Raises:
        NotificationNotFoundError: If it does not exist or belongs to someone else
    """
    async with store.unit_of_work() as repos:
        notification = await repos.notifications.get_for_user(notification_id, user_id)
        if notification is None:
            raise NotificationNotFoundError(notification_id)
        notification.read = True
        await repos.notifications.save(notification)
        return NotificationResponse.model_validate(notification)


async def mark_all_read(store: Store, user_id: int) -> int:
    async with store.unit_of_work() as repos:
        updated = await repos.notifications.mark_all_read(user_id)
    logger.info(f"[NOTIFY] Marked {updated} notifications read for user {user_id}")
    return updated


async def delete_notification(store: Store, user_id: int, notification_id: int) -> None:
    async with store.unit_of_work() as repos:
        notification = await repos.notifications.get_for_user(notification_id, user_id)
        if notification is None:
            raise NotificationNotFoundError(notification_id)
        await repos.notifications.delete(notification)
