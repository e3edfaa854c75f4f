"""Vote schemas."""

from pydantic import Field

from backend.app.schemas.common import CamelModel


class VoteRequest(CamelModel):
    """Schema for casting a vote. The direction is checked by the voting service."""

    vote_type: str = Field(..., description="upvote or downvote")


class VoteResponse(CamelModel):
    """Counters after the vote and the caller's resulting vote state."""

    upvotes_count: int
    downvotes_count: int
    current_user_vote: str = Field(..., description="upvote, downvote or none")
