"""Comment endpoints."""

from fastapi import APIRouter, Depends, Query, status

from backend.app.api.deps import get_current_user, get_store
from backend.app.core.config import settings
from backend.app.models.user import User
from backend.app.repositories.base import Store
from backend.app.schemas.comment import CommentCreate, CommentListResponse, CommentResponse
from backend.app.services.comments import add_comment, list_comments

router = APIRouter(prefix="/issues", tags=["comments"])


@router.get("/{issue_id}/comments", response_model=CommentListResponse)
async def get_comments(
    issue_id: int,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_comment_page_size, ge=1, le=settings.max_page_size),
    store: Store = Depends(get_store),
):
    """List an issue's comments, newest first, with replies nested."""
    return await list_comments(store, issue_id, page, limit)


@router.post("/{issue_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def post_comment(
    issue_id: int,
    body: CommentCreate,
    user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """Comment on an issue, or reply to a top-level comment."""
    return await add_comment(store, user, issue_id, body)
