"""Pydantic schemas for API request/response validation."""

from backend.app.schemas.common import CamelModel, Pagination, MessageResponse
from backend.app.schemas.auth import (
    RegisterRequest,
    LoginRequest,
    ProfileUpdate,
    UserResponse,
    AuthResponse,
)
from backend.app.schemas.issue import (
    IssueCreate,
    IssueUpdate,
    StatusUpdate,
    IssueResponse,
    IssueListResponse,
)
from backend.app.schemas.vote import VoteRequest, VoteResponse
from backend.app.schemas.comment import CommentCreate, CommentResponse, CommentListResponse
from backend.app.schemas.category import CategoryCreate, CategoryUpdate, CategoryResponse
from backend.app.schemas.notification import (
    NotificationResponse,
    NotificationListResponse,
    MarkAllReadResponse,
)

__all__ = [
    "CamelModel",
    "Pagination",
    "MessageResponse",
    "RegisterRequest",
    "LoginRequest",
    "ProfileUpdate",
    "UserResponse",
    "AuthResponse",
    "IssueCreate",
    "IssueUpdate",
    "StatusUpdate",
    "IssueResponse",
    "IssueListResponse",
    "VoteRequest",
    "VoteResponse",
    "CommentCreate",
    "CommentResponse",
    "CommentListResponse",
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryResponse",
    "NotificationResponse",
    "NotificationListResponse",
    "MarkAllReadResponse",
]
