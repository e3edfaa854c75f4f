"""Notification endpoints. Callers only ever see their own notifications."""

from fastapi import APIRouter, Depends, Query, Response, status

from backend.app.api.deps import get_current_user, get_store
from backend.app.core.config import settings
from backend.app.models.user import User
from backend.app.repositories.base import Store
from backend.app.schemas.notification import (
    MarkAllReadResponse,
    NotificationListResponse,
    NotificationResponse,
)
from backend.app.services import notifications as notification_service

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_comment_page_size, ge=1, le=settings.max_page_size),
    unread_only: bool = Query(False, alias="unreadOnly"),
    user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """List the caller's notifications, newest first, with the unread count."""
    return await notification_service.list_notifications(store, user.id, page, limit, unread_only)


@router.patch("/read-all", response_model=MarkAllReadResponse)
async def mark_all_read(
    user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    updated = await notification_service.mark_all_read(store, user.id)
    return MarkAllReadResponse(updated=updated)


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: int,
    user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    return await notification_service.mark_read(store, user.id, notification_id)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: int,
    user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    await notification_service.delete_notification(store, user.id, notification_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
