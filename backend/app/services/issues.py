"""Issue lifecycle: reporting, reading, editing, removal and status changes."""

import logging
from datetime import datetime

from backend.app.core.exceptions import (
    InvalidCategoryError,
    InvalidStatusTransitionError,
    IssueNotFoundError,
    PermissionDeniedError,
)
from backend.app.models.category import Category
from backend.app.models.issue import Issue, IssueStatus
from backend.app.models.notification import NotificationType
from backend.app.models.user import ADMIN_ROLES, User
from backend.app.repositories.base import Repositories, Store
from backend.app.schemas.issue import (
    CategorySummary,
    IssueCreate,
    IssueResponse,
    IssueUpdate,
    ReporterSummary,
)
from backend.app.services.notifications import notify
from backend.app.services.voting import NO_VOTE
from backend.app.services.workflow import allowed_next_statuses, can_transition

logger = logging.getLogger(__name__)


async def present_issues(
    repos: Repositories,
    issues: list[Issue],
    viewer: User | None,
) -> list[IssueResponse]:
    """
    Build response objects for issues, in the given order.

    Each issue is annotated with the viewer's vote from the ledger, or
    "none" for anonymous viewers and issues they have not voted on.
    """
    issue_ids = [issue.id for issue in issues]
    directions = (
        await repos.votes.directions_for_user(viewer.id, issue_ids)
        if viewer is not None
        else {}
    )
    reporters = await repos.users.get_many([issue.reported_by_id for issue in issues])

    categories: dict[int, Category | None] = {}
    for issue in issues:
        if issue.category_id is not None and issue.category_id not in categories:
            categories[issue.category_id] = await repos.categories.get(issue.category_id)

    responses = []
    for issue in issues:
        response = IssueResponse.model_validate(issue)
        response.current_user_vote = directions.get(issue.id, NO_VOTE)

        reporter = reporters.get(issue.reported_by_id)
        if issue.is_anonymous:
            response.reported_by_id = None
        elif reporter is not None:
            response.reporter = ReporterSummary.model_validate(reporter)

        category = categories.get(issue.category_id) if issue.category_id is not None else None
        if category is not None:
            response.category = CategorySummary.model_validate(category)
        responses.append(response)
    return responses


async def present_issue(repos: Repositories, issue: Issue, viewer: User | None) -> IssueResponse:
    return (await present_issues(repos, [issue], viewer))[0]


async def _resolve_category(repos: Repositories, category_id: int | None, name: str | None) -> int | None:
    """Resolve a category by id, or else by case-insensitive name; it must be active."""
    if category_id is not None:
        category = await repos.categories.get(category_id)
        if category is None or not category.is_active:
            raise InvalidCategoryError(category_id)
        return category.id
    if name:
        category = await repos.categories.get_by_name(name)
        if category is None or not category.is_active:
            raise InvalidCategoryError(name)
        return category.id
    return None


async def _get_live_issue(repos: Repositories, issue_id: int) -> Issue:
    issue = await repos.issues.get(issue_id)
    if issue is None:
        raise IssueNotFoundError(issue_id)
    return issue


def _ensure_can_modify(issue: Issue, user: User) -> None:
    if issue.reported_by_id != user.id and user.role not in ADMIN_ROLES:
        raise PermissionDeniedError("Only the reporter or an administrator can modify this issue")


async def create_issue(store: Store, user: User, data: IssueCreate) -> IssueResponse:
    """
    Report a new issue.

    Raises:
        InvalidCategoryError: If the category is unknown or inactive
    """
    async with store.unit_of_work() as repos:
        category_id = await _resolve_category(repos, data.category_id, data.category)
        issue = Issue(
            title=data.title,
            description=data.description,
            location_address=data.location_address,
            latitude=data.latitude,
            longitude=data.longitude,
            status=IssueStatus.PENDING.value,
            priority=data.priority.value,
            images=list(data.images),
            reported_by_id=user.id,
            category_id=category_id,
            is_anonymous=data.is_anonymous,
            upvotes_count=0,
            downvotes_count=0,
            comments_count=0,
            views_count=0,
        )
        issue.set_tags(data.tags)
        issue = await repos.issues.add(issue)
        logger.info(f"[ISSUE] User {user.id} reported issue {issue.id}")
        return await present_issue(repos, issue, user)


async def get_issue(store: Store, issue_id: int, viewer: User | None) -> IssueResponse:
    """Return an issue and count the view; the response carries the incremented count."""
    async with store.unit_of_work() as repos:
        await _get_live_issue(repos, issue_id)
        issue = await repos.issues.adjust_counters(issue_id, views=1)
        return await present_issue(repos, issue, viewer)


async def update_issue(store: Store, user: User, issue_id: int, data: IssueUpdate) -> IssueResponse:
    """
    Edit an issue's content.

    Raises:
        IssueNotFoundError: If the issue does not exist or was deleted
        PermissionDeniedError: If the caller is neither the reporter nor an administrator
    """
    async with store.unit_of_work() as repos:
        issue = await _get_live_issue(repos, issue_id)
        _ensure_can_modify(issue, user)

        if data.title is not None:
            issue.title = data.title.strip()
        if data.description is not None:
            issue.description = data.description.strip()
        if data.priority is not None:
            issue.priority = data.priority.value
        if data.tags is not None:
            issue.set_tags(data.tags)
        if data.images is not None:
            issue.images = list(data.images)
        issue.updated_at = datetime.utcnow()

        issue = await repos.issues.save(issue)
        return await present_issue(repos, issue, user)


async def delete_issue(store: Store, user: User, issue_id: int) -> None:
    """Soft-delete an issue. Its votes and comments are kept."""
    async with store.unit_of_work() as repos:
        issue = await _get_live_issue(repos, issue_id)
        _ensure_can_modify(issue, user)
        issue.deleted_at = datetime.utcnow()
        issue.updated_at = issue.deleted_at
        await repos.issues.save(issue)
    logger.info(f"[ISSUE] User {user.id} deleted issue {issue_id}")


async def change_status(
    store: Store,
    user: User,
    issue_id: int,
    new_status: str,
    note: str | None = None,
) -> IssueResponse:
    """
    Move an issue through the status workflow.

    Re-submitting the current status changes nothing. Entering resolved
    stamps resolved_at unless it is already set.

    Raises:
        IssueNotFoundError: If the issue does not exist or was deleted
        InvalidStatusTransitionError: If the workflow forbids the move
    """
    async with store.unit_of_work() as repos:
        issue = await _get_live_issue(repos, issue_id)
        previous = issue.status

        if not can_transition(previous, new_status):
            raise InvalidStatusTransitionError(previous, new_status, allowed_next_statuses(previous))

        if previous != new_status:
            now = datetime.utcnow()
            issue.status = new_status
            if new_status == IssueStatus.RESOLVED.value and issue.resolved_at is None:
                issue.resolved_at = now
            issue.updated_at = now
            issue = await repos.issues.save(issue)

            if issue.reported_by_id != user.id:
                message = f'Your issue "{issue.title}" is now {new_status.replace("_", " ")}.'
                if note:
                    message = f"{message} {note}"
                await notify(
                    repos,
                    user_id=issue.reported_by_id,
                    type=NotificationType.STATUS_UPDATE.value,
                    title="Issue Status Updated",
                    message=message,
                    issue_id=issue.id,
                    related_user_id=user.id,
                    details={"previousStatus": previous, "newStatus": new_status},
                )
            logger.info(f"[ISSUE] Issue {issue_id} status {previous} -> {new_status} by user {user.id}")

        return await present_issue(repos, issue, user)
