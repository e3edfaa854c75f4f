"""Comment schemas."""

from datetime import datetime

from pydantic import Field, field_validator

from backend.app.schemas.common import CamelModel, Pagination


class CommentCreate(CamelModel):
    """Schema for posting a comment or a reply."""

    content: str = Field(..., min_length=1, max_length=2000)
    parent_id: int | None = Field(default=None, description="Top-level comment being replied to")

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class CommentAuthor(CamelModel):
    id: int
    name: str
    avatar_url: str | None = None
    role: str


class CommentResponse(CamelModel):
    """Schema for comment data in responses."""

    id: int
    issue_id: int
    parent_id: int | None = None
    content: str
    is_official: bool
    author: CommentAuthor | None = None
    replies: list["CommentResponse"] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class CommentListResponse(CamelModel):
    """One page of top-level comments with their replies."""

    comments: list[CommentResponse]
    pagination: Pagination
