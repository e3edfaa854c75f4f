"""Issue comments, threaded one level deep."""

import logging
import math

from backend.app.core.exceptions import InvalidParentCommentError, IssueNotFoundError
from backend.app.models.comment import Comment
from backend.app.models.notification import NotificationType
from backend.app.models.user import STAFF_ROLES, User
from backend.app.repositories.base import Repositories, Store
from backend.app.schemas.comment import (
    CommentAuthor,
    CommentCreate,
    CommentListResponse,
    CommentResponse,
)
from backend.app.schemas.common import Pagination
from backend.app.services.notifications import notify

logger = logging.getLogger(__name__)


async def _present(repos: Repositories, comments: list[Comment]) -> list[CommentResponse]:
    authors = await repos.users.get_many([c.user_id for c in comments])
    responses = []
    for comment in comments:
        response = CommentResponse.model_validate(comment)
        author = authors.get(comment.user_id)
        if author is not None:
            response.author = CommentAuthor.model_validate(author)
        responses.append(response)
    return responses


async def list_comments(store: Store, issue_id: int, page: int, limit: int) -> CommentListResponse:
    """
    Top-level comments newest first, each with its replies oldest first.

    Pagination counts top-level comments only.

    Raises:
        IssueNotFoundError: If the issue does not exist or was deleted
    """
    async with store.unit_of_work() as repos:
        if await repos.issues.get(issue_id) is None:
            raise IssueNotFoundError(issue_id)

        top_level, total = await repos.comments.list_top_level(issue_id, skip=(page - 1) * limit, limit=limit)
        replies = await repos.comments.replies_for([c.id for c in top_level])

        threads = await _present(repos, top_level)
        by_id = {thread.id: thread for thread in threads}
        for reply in await _present(repos, replies):
            by_id[reply.parent_id].replies.append(reply)

    return CommentListResponse(
        comments=threads,
        pagination=Pagination(page=page, limit=limit, total=total, pages=math.ceil(total / limit)),
    )


async def add_comment(store: Store, user: User, issue_id: int, data: CommentCreate) -> CommentResponse:
    """
    Post a comment, or a reply to a top-level comment.

    Comments by staff are marked official. The issue's reporter is notified
    unless they wrote the comment.

    Raises:
        IssueNotFoundError: If the issue does not exist or was deleted
        InvalidParentCommentError: If the parent is missing, on another issue, or itself a reply
    """
    async with store.unit_of_work() as repos:
        issue = await repos.issues.get(issue_id)
        if issue is None:
            raise IssueNotFoundError(issue_id)

        parent = None
        if data.parent_id is not None:
            parent = await repos.comments.get(data.parent_id)
            if parent is None or parent.issue_id != issue_id or parent.parent_id is not None:
                raise InvalidParentCommentError(data.parent_id)

        comment = await repos.comments.add(Comment(
            issue_id=issue_id,
            user_id=user.id,
            parent_id=data.parent_id,
            content=data.content.strip(),
            is_official=user.role in STAFF_ROLES,
        ))
        issue = await repos.issues.adjust_counters(issue_id, comments=1)

        recipients = [issue.reported_by_id]
        if parent is not None and parent.user_id not in recipients:
            recipients.append(parent.user_id)
        for recipient in recipients:
            if recipient == user.id:
                continue
            await notify(
                repos,
                user_id=recipient,
                type=NotificationType.COMMENT.value,
                title="New Comment" if recipient == issue.reported_by_id else "New Reply",
                message=f'{user.name} commented on "{issue.title}".',
                issue_id=issue_id,
                comment_id=comment.id,
                related_user_id=user.id,
            )

        logger.info(f"[COMMENT] User {user.id} commented on issue {issue_id}")
        return (await _present(repos, [comment]))[0]
