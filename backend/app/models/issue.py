"""Issue model."""

from datetime import datetime
from enum import Enum
from sqlalchemy import String, Text, Float, Integer, DateTime, Boolean, ForeignKey, JSON, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.db.base import Base


class IssueStatus(str, Enum):
    """Issue workflow status enum."""
    PENDING = "pending"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    REJECTED = "rejected"
    DUPLICATE = "duplicate"


class IssuePriority(str, Enum):
    """Issue priority enum."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class Issue(Base):
    """
    Issue model representing a reported civic problem.

    Attributes:
        id: Unique issue identifier (allocation order = creation order)
        title: Short summary
        description: Full description
        location_address: Free-text location
        status: Workflow status (see IssueStatus)
        priority: low/medium/high/critical
        reported_by_id: Reporter user ID
        category_id: Optional category ID
        upvotes_count: Cached number of upvotes in the vote ledger
        downvotes_count: Cached number of downvotes in the vote ledger
        comments_count: Number of comments
        views_count: Number of detail views
        resolved_at: Stamped once, on first entry into resolved
        deleted_at: Soft-delete marker
    """

    __tablename__ = "issues"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    location_address: Mapped[str] = mapped_column(String(500), nullable=False)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=IssueStatus.PENDING.value,
        index=True,
    )
    priority: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=IssuePriority.MEDIUM.value,
        index=True,
    )
    images: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    reported_by_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    category_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("categories.id"),
        nullable=True,
        index=True,
    )
    is_anonymous: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    upvotes_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    downvotes_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    comments_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    views_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=datetime.utcnow,
    )

    # Relationships
    tag_links: Mapped[list["IssueTag"]] = relationship(
        "IssueTag",
        back_populates="issue",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="IssueTag.id",
    )

    @property
    def tags(self) -> list[str]:
        return [link.tag for link in self.tag_links]

    def set_tags(self, tags: list[str]) -> None:
        """Replace the tag set; links for tags that stay are reused, not re-inserted."""
        existing = {link.tag: link for link in self.tag_links}
        self.tag_links = [existing.get(tag) or IssueTag(tag=tag) for tag in tags]

    @property
    def vote_score(self) -> int:
        return self.upvotes_count - self.downvotes_count

    def __repr__(self) -> str:
        return f"<Issue(id={self.id}, title={self.title[:50]}, status={self.status})>"


class IssueTag(Base):
    """One tag attached to an issue; kept in its own table for match-any filtering."""

    __tablename__ = "issue_tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    issue_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("issues.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    tag: Mapped[str] = mapped_column(String(50), nullable=False, index=True)

    issue: Mapped["Issue"] = relationship("Issue", back_populates="tag_links")

    __table_args__ = (
        Index("idx_issue_tag_unique", "issue_id", "tag", unique=True),
    )

    def __repr__(self) -> str:
        return f"<IssueTag(issue_id={self.issue_id}, tag={self.tag})>"
