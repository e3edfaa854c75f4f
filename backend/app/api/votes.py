"""Vote endpoints."""

from fastapi import APIRouter, Depends

from backend.app.api.deps import get_current_user, get_store, require_roles
from backend.app.models.user import STAFF_ROLES, User
from backend.app.repositories.base import Store
from backend.app.schemas.vote import VoteRequest, VoteResponse
from backend.app.services.voting import cast_vote, recount_votes

router = APIRouter(prefix="/issues", tags=["votes"])


@router.post("/{issue_id}/vote", response_model=VoteResponse)
async def vote_issue(
    issue_id: int,
    body: VoteRequest,
    user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """
    Toggle the caller's vote on an issue.

    Voting the same direction twice withdraws the vote; voting the other
    direction switches it.
    """
    return await cast_vote(store, user, issue_id, body.vote_type)


@router.post("/{issue_id}/votes/recount", response_model=VoteResponse)
async def recount_issue_votes(
    issue_id: int,
    user: User = Depends(require_roles(*STAFF_ROLES)),
    store: Store = Depends(get_store),
):
    """Rebuild an issue's vote counters from the ledger (moderators and administrators)."""
    return await recount_votes(store, user, issue_id)
