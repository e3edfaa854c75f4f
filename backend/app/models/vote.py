"""Vote model."""

from datetime import datetime
from enum import Enum
from sqlalchemy import String, Integer, DateTime, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column

from backend.app.db.base import Base


class VoteType(str, Enum):
    """Vote direction enum."""
    UPVOTE = "upvote"
    DOWNVOTE = "downvote"


class Vote(Base):
    """
    Vote model: one ledger entry per (user, issue) pair.

    The ledger is authoritative; Issue.upvotes_count and
    Issue.downvotes_count are derived from it.

    Attributes:
        id: Unique vote identifier
        issue_id: Associated issue ID
        user_id: Voting user ID
        vote_type: upvote or downvote
        created_at: Creation timestamp
        updated_at: Timestamp of the last direction change
    """

    __tablename__ = "votes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    issue_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("issues.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    vote_type: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
    )

    # Unique constraint: one vote per user per issue
    __table_args__ = (
        Index("idx_vote_unique", "issue_id", "user_id", unique=True),
    )

    def __repr__(self) -> str:
        return f"<Vote(id={self.id}, issue_id={self.issue_id}, user_id={self.user_id}, type={self.vote_type})>"
