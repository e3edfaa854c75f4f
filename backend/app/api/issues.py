"""Issue endpoints: listing, reporting, editing and the status workflow."""

from fastapi import APIRouter, Depends, Query, Response, status

from backend.app.api.deps import get_current_user, get_optional_user, get_store, require_roles
from backend.app.core.config import settings
from backend.app.models.issue import IssuePriority, IssueStatus
from backend.app.models.user import STAFF_ROLES, User
from backend.app.repositories.base import Store
from backend.app.schemas.issue import (
    IssueCreate,
    IssueListResponse,
    IssueResponse,
    IssueUpdate,
    StatusUpdate,
)
from backend.app.services import issues as issue_service
from backend.app.services.query import IssueQuery, list_user_issues, search_issues

router = APIRouter(prefix="/issues", tags=["issues"])


@router.get("", response_model=IssueListResponse)
async def list_issues(
    search: str | None = Query(None, max_length=200, description="Case-insensitive text search"),
    status_filter: IssueStatus | None = Query(None, alias="status"),
    priority: IssuePriority | None = Query(None),
    category: str | None = Query(None, description="Category id or name"),
    tags: list[str] | None = Query(None, description="Match any; repeat or comma-separate"),
    location: str | None = Query(None, max_length=200),
    reported_by: int | None = Query(None, alias="reportedBy"),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder", pattern="^(asc|desc)$"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    viewer: User | None = Depends(get_optional_user),
    store: Store = Depends(get_store),
):
    """
    List issues with filtering, sorting and pagination.

    Each issue carries the caller's current vote (``none`` when anonymous).
    """
    query = IssueQuery(
        search=search,
        status=status_filter.value if status_filter else None,
        priority=priority.value if priority else None,
        category=category,
        tags=tags or [],
        location=location,
        reported_by=reported_by,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )
    return await search_issues(store, query, viewer)


@router.get("/user", response_model=IssueListResponse)
async def list_my_issues(
    status_filter: IssueStatus | None = Query(None, alias="status"),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder", pattern="^(asc|desc)$"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """List the signed-in user's own reports."""
    query = IssueQuery(
        status=status_filter.value if status_filter else None,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )
    return await list_user_issues(store, user, query)


@router.get("/{issue_id}", response_model=IssueResponse)
async def get_issue(
    issue_id: int,
    viewer: User | None = Depends(get_optional_user),
    store: Store = Depends(get_store),
):
    """Get one issue; counts as a view."""
    return await issue_service.get_issue(store, issue_id, viewer)


@router.post("", response_model=IssueResponse, status_code=status.HTTP_201_CREATED)
async def create_issue(
    body: IssueCreate,
    user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """Report a new issue. It starts in ``pending``."""
    return await issue_service.create_issue(store, user, body)


@router.patch("/{issue_id}", response_model=IssueResponse)
async def update_issue(
    issue_id: int,
    body: IssueUpdate,
    user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """Edit an issue (reporter or administrator)."""
    return await issue_service.update_issue(store, user, issue_id, body)


@router.delete("/{issue_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_issue(
    issue_id: int,
    user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """Remove an issue (reporter or administrator). Votes and comments are kept."""
    await issue_service.delete_issue(store, user, issue_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{issue_id}/status", response_model=IssueResponse)
async def change_status(
    issue_id: int,
    body: StatusUpdate,
    user: User = Depends(require_roles(*STAFF_ROLES)),
    store: Store = Depends(get_store),
):
    """Move an issue through the workflow (moderators and administrators)."""
    return await issue_service.change_status(store, user, issue_id, body.status.value, body.note)
