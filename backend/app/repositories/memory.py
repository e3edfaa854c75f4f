"""
In-memory store.

Rows are transient ORM instances kept in per-table dicts keyed by a
monotonically allocated integer id. Units of work are serialised by one
asyncio.Lock, so every read-modify-write inside a unit of work is atomic.
Changes are applied as they are made; there is no rollback.
"""

import asyncio
import logging
from collections import defaultdict
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, TypeVar

from sqlalchemy import inspect

from backend.app.core.exceptions import VoteConflictError
from backend.app.db.base import Base
from backend.app.models.category import Category
from backend.app.models.comment import Comment
from backend.app.models.issue import Issue
from backend.app.models.notification import Notification
from backend.app.models.user import User
from backend.app.models.vote import Vote, VoteType
from backend.app.repositories.base import (
    CategoryRepository,
    CommentRepository,
    IssueCriteria,
    IssueRepository,
    NotificationRepository,
    Repositories,
    Store,
    UserRepository,
    VoteRepository,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class _Tables:
    """Row storage and id allocation for every table."""

    def __init__(self):
        self.rows: dict[str, dict[int, Base]] = defaultdict(dict)
        self._next_ids: dict[str, int] = defaultdict(int)

    def insert(self, obj: ModelT) -> ModelT:
        table = obj.__tablename__
        self._next_ids[table] += 1
        obj.id = self._next_ids[table]
        _apply_column_defaults(obj)
        self.rows[table][obj.id] = obj
        return obj

    def get(self, model: type[ModelT], row_id: int) -> ModelT | None:
        return self.rows[model.__tablename__].get(row_id)

    def all(self, model: type[ModelT]) -> list[ModelT]:
        """All rows of a table in id order."""
        table = self.rows[model.__tablename__]
        return [table[row_id] for row_id in sorted(table)]

    def remove(self, obj: Base) -> None:
        self.rows[obj.__tablename__].pop(obj.id, None)


def _apply_column_defaults(obj: Base) -> None:
    """Fill unset columns from their Python-side defaults, as an INSERT would."""
    mapper = inspect(type(obj))
    for attr in mapper.column_attrs:
        if getattr(obj, attr.key) is not None:
            continue
        default = attr.columns[0].default
        if default is None:
            continue
        if default.is_callable:
            setattr(obj, attr.key, default.arg(None))
        elif default.is_scalar:
            setattr(obj, attr.key, default.arg)


class MemoryUserRepository(UserRepository):
    def __init__(self, tables: _Tables):
        self.tables = tables

    async def get(self, user_id: int) -> User | None:
        return self.tables.get(User, user_id)

    async def get_by_email(self, email: str) -> User | None:
        wanted = email.strip().lower()
        return next((u for u in self.tables.all(User) if u.email == wanted), None)

    async def get_many(self, user_ids: list[int]) -> dict[int, User]:
        found = {}
        for user_id in set(user_ids):
            user = self.tables.get(User, user_id)
            if user is not None:
                found[user_id] = user
        return found

    async def add(self, user: User) -> User:
        return self.tables.insert(user)

    async def save(self, user: User) -> User:
        return user


class MemoryCategoryRepository(CategoryRepository):
    def __init__(self, tables: _Tables):
        self.tables = tables

    async def get(self, category_id: int) -> Category | None:
        return self.tables.get(Category, category_id)

    async def get_by_name(self, name: str) -> Category | None:
        wanted = name.strip().lower()
        return next((c for c in self.tables.all(Category) if c.name.lower() == wanted), None)

    async def list_all(self, include_inactive: bool = False) -> list[Category]:
        categories = [c for c in self.tables.all(Category) if include_inactive or c.is_active]
        return sorted(categories, key=lambda c: (c.display_order, c.name))

    async def count(self) -> int:
        return len(self.tables.rows[Category.__tablename__])

    async def add(self, category: Category) -> Category:
        return self.tables.insert(category)

    async def save(self, category: Category) -> Category:
        return category


class MemoryIssueRepository(IssueRepository):
    def __init__(self, tables: _Tables):
        self.tables = tables

    async def get(self, issue_id: int) -> Issue | None:
        issue = self.tables.get(Issue, issue_id)
        if issue is None or issue.deleted_at is not None:
            return None
        return issue

    @staticmethod
    def _matches(issue: Issue, criteria: IssueCriteria) -> bool:
        if issue.deleted_at is not None:
            return False
        if criteria.status and issue.status != criteria.status:
            return False
        if criteria.priority and issue.priority != criteria.priority:
            return False
        if criteria.category_id is not None and issue.category_id != criteria.category_id:
            return False
        if criteria.reported_by_id is not None and issue.reported_by_id != criteria.reported_by_id:
            return False
        if criteria.tags and not set(criteria.tags) & set(issue.tags):
            return False
        if criteria.search:
            needle = criteria.search.lower()
            haystacks = (issue.title, issue.description, issue.location_address)
            if not any(needle in (text or "").lower() for text in haystacks):
                return False
        if criteria.location and criteria.location.lower() not in (issue.location_address or "").lower():
            return False
        return True

    async def find(self, criteria: IssueCriteria) -> tuple[list[Issue], int]:
        matched = [i for i in self.tables.all(Issue) if self._matches(i, criteria)]
        # all() is in id order and sorted() is stable, so ties stay id-ascending
        matched = sorted(
            matched,
            key=lambda i: getattr(i, criteria.sort_field),
            reverse=criteria.descending,
        )
        window = matched[criteria.skip:criteria.skip + criteria.limit]
        return window, len(matched)

    async def add(self, issue: Issue) -> Issue:
        return self.tables.insert(issue)

    async def save(self, issue: Issue) -> Issue:
        return issue

    async def adjust_counters(
        self,
        issue_id: int,
        upvotes: int = 0,
        downvotes: int = 0,
        comments: int = 0,
        views: int = 0,
    ) -> Issue:
        issue = self.tables.get(Issue, issue_id)
        issue.upvotes_count += upvotes
        issue.downvotes_count += downvotes
        issue.comments_count += comments
        issue.views_count += views
        return issue

    async def set_vote_counters(self, issue_id: int, upvotes: int, downvotes: int) -> Issue:
        issue = self.tables.get(Issue, issue_id)
        issue.upvotes_count = upvotes
        issue.downvotes_count = downvotes
        return issue


class MemoryVoteRepository(VoteRepository):
    def __init__(self, tables: _Tables):
        self.tables = tables

    def _ledger(self, issue_id: int) -> list[Vote]:
        return [v for v in self.tables.all(Vote) if v.issue_id == issue_id]

    async def find_one(self, user_id: int, issue_id: int) -> Vote | None:
        return next((v for v in self._ledger(issue_id) if v.user_id == user_id), None)

    async def create(self, user_id: int, issue_id: int, vote_type: str) -> Vote:
        if await self.find_one(user_id, issue_id) is not None:
            raise VoteConflictError(user_id, issue_id)
        return self.tables.insert(Vote(user_id=user_id, issue_id=issue_id, vote_type=vote_type))

    async def update(self, vote: Vote, vote_type: str) -> Vote:
        if self.tables.get(Vote, vote.id) is not vote:
            raise VoteConflictError(vote.user_id, vote.issue_id)
        vote.vote_type = vote_type
        vote.updated_at = datetime.utcnow()
        return vote

    async def delete(self, vote: Vote) -> None:
        if self.tables.get(Vote, vote.id) is not vote:
            raise VoteConflictError(vote.user_id, vote.issue_id)
        self.tables.remove(vote)

    async def directions_for_user(self, user_id: int, issue_ids: list[int]) -> dict[int, str]:
        wanted = set(issue_ids)
        return {
            v.issue_id: v.vote_type
            for v in self.tables.all(Vote)
            if v.user_id == user_id and v.issue_id in wanted
        }

    async def tally(self, issue_id: int) -> tuple[int, int]:
        ledger = self._ledger(issue_id)
        upvotes = sum(1 for v in ledger if v.vote_type == VoteType.UPVOTE.value)
        downvotes = sum(1 for v in ledger if v.vote_type == VoteType.DOWNVOTE.value)
        return upvotes, downvotes


class MemoryCommentRepository(CommentRepository):
    def __init__(self, tables: _Tables):
        self.tables = tables

    async def get(self, comment_id: int) -> Comment | None:
        return self.tables.get(Comment, comment_id)

    async def add(self, comment: Comment) -> Comment:
        return self.tables.insert(comment)

    async def list_top_level(self, issue_id: int, skip: int, limit: int) -> tuple[list[Comment], int]:
        top_level = [
            c for c in self.tables.all(Comment)
            if c.issue_id == issue_id and c.parent_id is None
        ]
        top_level.sort(key=lambda c: (c.created_at, c.id), reverse=True)
        return top_level[skip:skip + limit], len(top_level)

    async def replies_for(self, parent_ids: list[int]) -> list[Comment]:
        wanted = set(parent_ids)
        replies = [c for c in self.tables.all(Comment) if c.parent_id in wanted]
        replies.sort(key=lambda c: (c.created_at, c.id))
        return replies


class MemoryNotificationRepository(NotificationRepository):
    def __init__(self, tables: _Tables):
        self.tables = tables

    def _for_user(self, user_id: int) -> list[Notification]:
        return [n for n in self.tables.all(Notification) if n.user_id == user_id]

    async def add(self, notification: Notification) -> Notification:
        return self.tables.insert(notification)

    async def get_for_user(self, notification_id: int, user_id: int) -> Notification | None:
        notification = self.tables.get(Notification, notification_id)
        if notification is None or notification.user_id != user_id:
            return None
        return notification

    async def list_for_user(
        self,
        user_id: int,
        unread_only: bool,
        skip: int,
        limit: int,
    ) -> tuple[list[Notification], int]:
        notifications = [n for n in self._for_user(user_id) if not (unread_only and n.read)]
        notifications.sort(key=lambda n: (n.created_at, n.id), reverse=True)
        return notifications[skip:skip + limit], len(notifications)

    async def count_unread(self, user_id: int) -> int:
        return sum(1 for n in self._for_user(user_id) if not n.read)

    async def save(self, notification: Notification) -> Notification:
        return notification

    async def mark_all_read(self, user_id: int) -> int:
        updated = 0
        for notification in self._for_user(user_id):
            if not notification.read:
                notification.read = True
                updated += 1
        return updated

    async def delete(self, notification: Notification) -> None:
        self.tables.remove(notification)


class MemoryStore(Store):
    """Process-local store used for tests and as a fallback when no database is reachable."""

    name = "memory"

    def __init__(self):
        self.tables = _Tables()
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        logger.info("[STORE] Using in-memory store")

    @asynccontextmanager
    async def unit_of_work(self) -> AsyncIterator[Repositories]:
        async with self._lock:
            yield Repositories(
                users=MemoryUserRepository(self.tables),
                categories=MemoryCategoryRepository(self.tables),
                issues=MemoryIssueRepository(self.tables),
                votes=MemoryVoteRepository(self.tables),
                comments=MemoryCommentRepository(self.tables),
                notifications=MemoryNotificationRepository(self.tables),
            )
