"""
Vote ledger.

Each (user, issue) pair has zero or one vote. Casting a vote is a tri-state
toggle resolved from (existing direction, requested direction):

    none      + requested  -> create  (requested +1)
    same      + requested  -> remove  (requested -1)
    opposite  + requested  -> switch  (old -1, requested +1)

The ledger change and the single counter adjustment it implies run in one
unit of work, so Issue.upvotes_count and Issue.downvotes_count always equal
the ledger tallies.
"""

import logging
from enum import Enum

from backend.app.core.config import settings
from backend.app.core.exceptions import (
    InvalidVoteTypeError,
    IssueNotFoundError,
    VoteConflictError,
)
from backend.app.models.notification import NotificationType
from backend.app.models.user import User
from backend.app.models.vote import VoteType
from backend.app.repositories.base import Store
from backend.app.schemas.vote import VoteResponse
from backend.app.services.notifications import notify

logger = logging.getLogger(__name__)

NO_VOTE = "none"
VOTE_TYPES = frozenset(v.value for v in VoteType)


class VoteAction(str, Enum):
    CREATE = "create"
    REMOVE = "remove"
    SWITCH = "switch"


_ACTIONS: dict[tuple[str | None, str], VoteAction] = {
    (None, VoteType.UPVOTE.value): VoteAction.CREATE,
    (None, VoteType.DOWNVOTE.value): VoteAction.CREATE,
    (VoteType.UPVOTE.value, VoteType.UPVOTE.value): VoteAction.REMOVE,
    (VoteType.DOWNVOTE.value, VoteType.DOWNVOTE.value): VoteAction.REMOVE,
    (VoteType.UPVOTE.value, VoteType.DOWNVOTE.value): VoteAction.SWITCH,
    (VoteType.DOWNVOTE.value, VoteType.UPVOTE.value): VoteAction.SWITCH,
}


def resolve_vote_action(existing: str | None, requested: str) -> VoteAction:
    """Pick the ledger action for a vote request."""
    return _ACTIONS[(existing, requested)]


def counter_deltas(action: VoteAction, existing: str | None, requested: str) -> dict[str, int]:
    """Counter changes implied by an action, keyed by vote type."""
    deltas = {VoteType.UPVOTE.value: 0, VoteType.DOWNVOTE.value: 0}
    if action is VoteAction.CREATE:
        deltas[requested] += 1
    elif action is VoteAction.REMOVE:
        deltas[requested] -= 1
    else:
        deltas[existing] -= 1
        deltas[requested] += 1
    return deltas


async def _apply_vote(store: Store, user: User, issue_id: int, vote_type: str) -> VoteResponse:
    async with store.unit_of_work() as repos:
        issue = await repos.issues.get(issue_id)
        if issue is None:
            raise IssueNotFoundError(issue_id)

        existing = await repos.votes.find_one(user.id, issue_id)
        previous = existing.vote_type if existing is not None else None
        action = resolve_vote_action(previous, vote_type)

        if action is VoteAction.CREATE:
            await repos.votes.create(user.id, issue_id, vote_type)
        elif action is VoteAction.REMOVE:
            await repos.votes.delete(existing)
        else:
            await repos.votes.update(existing, vote_type)

        deltas = counter_deltas(action, previous, vote_type)
        issue = await repos.issues.adjust_counters(
            issue_id,
            upvotes=deltas[VoteType.UPVOTE.value],
            downvotes=deltas[VoteType.DOWNVOTE.value],
        )
        current = NO_VOTE if action is VoteAction.REMOVE else vote_type

        if action is not VoteAction.REMOVE and issue.reported_by_id != user.id:
            upvoted = vote_type == VoteType.UPVOTE.value
            await notify(
                repos,
                user_id=issue.reported_by_id,
                type=NotificationType.UPVOTE.value if upvoted else NotificationType.DOWNVOTE.value,
                title="Your Report Got Upvoted" if upvoted else "Your Report Got Downvoted",
                message=(
                    f'"{issue.title}" now has {issue.upvotes_count} upvotes '
                    f'and {issue.downvotes_count} downvotes.'
                ),
                issue_id=issue.id,
                related_user_id=user.id,
                details={
                    "upvoteCount": issue.upvotes_count,
                    "downvoteCount": issue.downvotes_count,
                },
            )

        logger.info(f"[VOTE] User {user.id} {action.value} {vote_type} on issue {issue_id}")
        return VoteResponse(
            upvotes_count=issue.upvotes_count,
            downvotes_count=issue.downvotes_count,
            current_user_vote=current,
        )


async def cast_vote(
    store: Store,
    user: User,
    issue_id: int,
    vote_type: str,
    max_attempts: int | None = None,
) -> VoteResponse:
    """
    Cast, switch or withdraw the caller's vote on an issue.

    A ledger conflict means a concurrent request from the same user created,
    switched or withdrew the vote after it was read; the whole unit of work
    is re-run so the toggle is applied to the vote as it now stands.

    Raises:
        InvalidVoteTypeError: If vote_type is neither upvote nor downvote
        IssueNotFoundError: If the issue does not exist or was deleted
        VoteConflictError: If conflicts persist after all attempts
    """
    if vote_type not in VOTE_TYPES:
        raise InvalidVoteTypeError(vote_type)

    attempts = max_attempts or settings.vote_conflict_retries
    for attempt in range(1, attempts + 1):
        try:
            return await _apply_vote(store, user, issue_id, vote_type)
        except VoteConflictError:
            if attempt == attempts:
                logger.error(f"[VOTE] Giving up on user {user.id} issue {issue_id} after {attempts} attempts")
                raise
            logger.warning(f"[VOTE] Vote conflict for user {user.id} on issue {issue_id}, retrying ({attempt}/{attempts})")


async def recount_votes(store: Store, user: User, issue_id: int) -> VoteResponse:
    """
    Rebuild an issue's vote counters from a full scan of the ledger.

    Raises:
        IssueNotFoundError: If the issue does not exist or was deleted
    """
    async with store.unit_of_work() as repos:
        issue = await repos.issues.get(issue_id)
        if issue is None:
            raise IssueNotFoundError(issue_id)

        upvotes, downvotes = await repos.votes.tally(issue_id)
        if (upvotes, downvotes) != (issue.upvotes_count, issue.downvotes_count):
            logger.warning(
                f"[VOTE] Counter drift on issue {issue_id}: "
                f"stored ({issue.upvotes_count}, {issue.downvotes_count}), ledger ({upvotes}, {downvotes})"
            )
        issue = await repos.issues.set_vote_counters(issue_id, upvotes, downvotes)
        vote = await repos.votes.find_one(user.id, issue_id)

        return VoteResponse(
            upvotes_count=issue.upvotes_count,
            downvotes_count=issue.downvotes_count,
            current_user_vote=vote.vote_type if vote is not None else NO_VOTE,
        )
