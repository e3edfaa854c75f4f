"""Issue schemas."""

from datetime import datetime

from pydantic import Field, field_validator

from backend.app.models.issue import IssuePriority, IssueStatus
from backend.app.schemas.common import CamelModel, Pagination


def _clean_tags(tags: list[str] | None) -> list[str] | None:
    """Trim tags, drop empties and duplicates, keep first-seen order."""
    if tags is None:
        return None
    cleaned: list[str] = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in cleaned:
            cleaned.append(tag)
    return cleaned


class IssueCreate(CamelModel):
    """Schema for reporting a new issue."""

    title: str = Field(..., min_length=1, max_length=255, description="Short summary")
    description: str = Field(..., min_length=1, max_length=5000, description="Full description")
    location_address: str = Field(..., min_length=1, max_length=500, description="Free-text location")
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)
    priority: IssuePriority = Field(default=IssuePriority.MEDIUM)
    category_id: int | None = Field(default=None, description="Category by id")
    category: str | None = Field(default=None, description="Category by name, used when no id is given")
    tags: list[str] = Field(default_factory=list, max_length=20)
    images: list[str] = Field(default_factory=list, max_length=10, description="Image URLs")
    is_anonymous: bool = False

    @field_validator("title", "description", "location_address")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v: list[str]) -> list[str]:
        return _clean_tags(v)


class IssueUpdate(CamelModel):
    """Schema for editing an issue; omitted fields are left unchanged."""

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None, min_length=1, max_length=5000)
    priority: IssuePriority | None = None
    tags: list[str] | None = Field(default=None, max_length=20)
    images: list[str] | None = Field(default=None, max_length=10)

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v: list[str] | None) -> list[str] | None:
        return _clean_tags(v)


class StatusUpdate(CamelModel):
    """Schema for a workflow transition."""

    status: IssueStatus
    note: str | None = Field(default=None, max_length=1000, description="Optional note for the reporter")


class ReporterSummary(CamelModel):
    id: int
    name: str
    avatar_url: str | None = None


class CategorySummary(CamelModel):
    id: int
    name: str
    icon_name: str | None = None
    color_hex: str | None = None


class IssueResponse(CamelModel):
    """Schema for issue data in responses."""

    id: int
    title: str
    description: str
    location_address: str
    latitude: float | None = None
    longitude: float | None = None
    status: str
    priority: str
    tags: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)
    reported_by_id: int | None = Field(default=None, description="Hidden for anonymous reports")
    reporter: ReporterSummary | None = None
    category_id: int | None = None
    category: CategorySummary | None = None
    is_anonymous: bool
    upvotes_count: int
    downvotes_count: int
    comments_count: int
    views_count: int
    vote_score: int
    current_user_vote: str = Field(default="none", description="upvote, downvote or none")
    resolved_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class IssueListResponse(CamelModel):
    """One page of issues."""

    issues: list[IssueResponse]
    pagination: Pagination
