"""Database models."""

from backend.app.models.user import User
from backend.app.models.category import Category
from backend.app.models.issue import Issue, IssueTag
from backend.app.models.vote import Vote
from backend.app.models.comment import Comment
from backend.app.models.notification import Notification

__all__ = ["User", "Category", "Issue", "IssueTag", "Vote", "Comment", "Notification"]
