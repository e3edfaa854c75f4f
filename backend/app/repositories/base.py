"""
Persistence interface shared by the SQL and in-memory stores.

Services only talk to these abstract repositories, obtained from
Store.unit_of_work(), so every business rule is written once and runs
unchanged against either backend.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass, field

from backend.app.models.category import Category
from backend.app.models.comment import Comment
from backend.app.models.issue import Issue
from backend.app.models.notification import Notification
from backend.app.models.user import User
from backend.app.models.vote import Vote


# Wire sort key -> Issue attribute
SORT_FIELDS: dict[str, str] = {
    "createdAt": "created_at",
    "upvotesCount": "upvotes_count",
    "downvotesCount": "downvotes_count",
    "viewsCount": "views_count",
    "commentsCount": "comments_count",
    "location": "location_address",
}


@dataclass
class IssueCriteria:
    """
    Filter, sort and window for an issue listing.

    Ordering is always (sort_field, id ascending) so that ties keep
    creation order and pages never overlap.
    """

    search: str | None = None
    status: str | None = None
    priority: str | None = None
    category_id: int | None = None
    tags: list[str] = field(default_factory=list)
    location: str | None = None
    reported_by_id: int | None = None
    sort_field: str = "created_at"
    descending: bool = True
    skip: int = 0
    limit: int = 10


class UserRepository(ABC):
    @abstractmethod
    async def get(self, user_id: int) -> User | None: ...

    @abstractmethod
    async def get_by_email(self, email: str) -> User | None: ...

    @abstractmethod
    async def get_many(self, user_ids: list[int]) -> dict[int, User]: ...

    @abstractmethod
    async def add(self, user: User) -> User: ...

    @abstractmethod
    async def save(self, user: User) -> User: ...


class CategoryRepository(ABC):
    @abstractmethod
    async def get(self, category_id: int) -> Category | None: ...

    @abstractmethod
    async def get_by_name(self, name: str) -> Category | None:
        """Case-insensitive exact name match."""

    @abstractmethod
    async def list_all(self, include_inactive: bool = False) -> list[Category]:
        """Categories ordered by display_order, then name."""

    @abstractmethod
    async def count(self) -> int: ...

    @abstractmethod
    async def add(self, category: Category) -> Category: ...

    @abstractmethod
    async def save(self, category: Category) -> Category: ...


class IssueRepository(ABC):
    @abstractmethod
    async def get(self, issue_id: int) -> Issue | None:
        """Return the issue unless it does not exist or is soft-deleted."""

    @abstractmethod
    async def find(self, criteria: IssueCriteria) -> tuple[list[Issue], int]:
        """Return one page of matching issues and the total match count."""

    @abstractmethod
    async def add(self, issue: Issue) -> Issue: ...

    @abstractmethod
    async def save(self, issue: Issue) -> Issue: ...

    @abstractmethod
    async def adjust_counters(
        self,
        issue_id: int,
        upvotes: int = 0,
        downvotes: int = 0,
        comments: int = 0,
        views: int = 0,
    ) -> Issue:
        """Apply counter deltas as one atomic increment and return the fresh issue."""

    @abstractmethod
    async def set_vote_counters(self, issue_id: int, upvotes: int, downvotes: int) -> Issue: ...


class VoteRepository(ABC):
    @abstractmethod
    async def find_one(self, user_id: int, issue_id: int) -> Vote | None: ...

    @abstractmethod
    async def create(self, user_id: int, issue_id: int, vote_type: str) -> Vote:
        """Insert a ledger entry; raises VoteConflictError if the pair already has one."""

    @abstractmethod
    async def update(self, vote: Vote, vote_type: str) -> Vote:
        """
        Change a ledger entry's direction.

        Applies only while the stored row still holds vote.vote_type;
        otherwise raises VoteConflictError.
        """

    @abstractmethod
    async def delete(self, vote: Vote) -> None:
        """Remove a ledger entry; raises VoteConflictError if it already changed or is gone."""

    @abstractmethod
    async def directions_for_user(self, user_id: int, issue_ids: list[int]) -> dict[int, str]: ...

    @abstractmethod
    async def tally(self, issue_id: int) -> tuple[int, int]:
        """Full aggregation of the ledger: (upvotes, downvotes)."""


class CommentRepository(ABC):
    @abstractmethod
    async def get(self, comment_id: int) -> Comment | None: ...

    @abstractmethod
    async def add(self, comment: Comment) -> Comment: ...

    @abstractmethod
    async def list_top_level(self, issue_id: int, skip: int, limit: int) -> tuple[list[Comment], int]:
        """Top-level comments, newest first."""

    @abstractmethod
    async def replies_for(self, parent_ids: list[int]) -> list[Comment]:
        """Replies to the given comments, oldest first."""


class NotificationRepository(ABC):
    @abstractmethod
    async def add(self, notification: Notification) -> Notification: ...

    @abstractmethod
    async def get_for_user(self, notification_id: int, user_id: int) -> Notification | None: ...

    @abstractmethod
    async def list_for_user(
        self,
        user_id: int,
        unread_only: bool,
        skip: int,
        limit: int,
    ) -> tuple[list[Notification], int]:
        """Notifications newest first."""

    @abstractmethod
    async def count_unread(self, user_id: int) -> int: ...

    @abstractmethod
    async def save(self, notification: Notification) -> Notification: ...

    @abstractmethod
    async def mark_all_read(self, user_id: int) -> int: ...

    @abstractmethod
    async def delete(self, notification: Notification) -> None: ...


@dataclass
class Repositories:
    """Repositories bound to one unit of work."""

    users: UserRepository
    categories: CategoryRepository
    issues: IssueRepository
    votes: VoteRepository
    comments: CommentRepository
    notifications: NotificationRepository


class Store(ABC):
    """A persistence backend."""

    name: str = "store"

    @abstractmethod
    def unit_of_work(self) -> AbstractAsyncContextManager[Repositories]:
        """
        Open a unit of work.

        Changes made through the yielded repositories are committed when the
        block exits normally. The SQL store rolls back when the block raises;
        the in-memory store applies changes immediately and keeps them.
        """

    async def initialize(self) -> None:
        """Prepare the backend (create tables, warm connections)."""

    async def close(self) -> None:
        """Release backend resources."""
