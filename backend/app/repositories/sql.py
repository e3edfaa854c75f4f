"""SQLAlchemy-backed store."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from backend.app.core.exceptions import StorageUnavailableError, VoteConflictError
from backend.app.db.base import Base, build_engine, build_session_factory
from backend.app.models.category import Category
from backend.app.models.comment import Comment
from backend.app.models.issue import Issue, IssueTag
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


def _like_pattern(text: str) -> str:
    """Build a substring LIKE pattern with wildcards in the input escaped."""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class SqlUserRepository(UserRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, user_id: int) -> User | None:
        return await self.session.get(User, user_id)

    async def get_by_email(self, email: str) -> User | None:
        result = await self.session.execute(
            select(User).where(User.email == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def get_many(self, user_ids: list[int]) -> dict[int, User]:
        if not user_ids:
            return {}
        result = await self.session.execute(select(User).where(User.id.in_(set(user_ids))))
        return {user.id: user for user in result.scalars().all()}

    async def add(self, user: User) -> User:
        self.session.add(user)
        await self.session.flush()
        return user

    async def save(self, user: User) -> User:
        await self.session.flush()
        return user


class SqlCategoryRepository(CategoryRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, category_id: int) -> Category | None:
        return await self.session.get(Category, category_id)

    async def get_by_name(self, name: str) -> Category | None:
        result = await self.session.execute(
            select(Category).where(func.lower(Category.name) == name.strip().lower())
        )
        return result.scalars().first()

    async def list_all(self, include_inactive: bool = False) -> list[Category]:
        query = select(Category)
        if not include_inactive:
            query = query.where(Category.is_active.is_(True))
        query = query.order_by(Category.display_order, Category.name)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(Category))
        return result.scalar_one()

    async def add(self, category: Category) -> Category:
        self.session.add(category)
        await self.session.flush()
        return category

    async def save(self, category: Category) -> Category:
        await self.session.flush()
        return category


class SqlIssueRepository(IssueRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, issue_id: int) -> Issue | None:
        result = await self.session.execute(
            select(Issue).where(Issue.id == issue_id, Issue.deleted_at.is_(None))
        )
        return result.scalar_one_or_none()

    @staticmethod
    def _conditions(criteria: IssueCriteria) -> list:
        conditions = [Issue.deleted_at.is_(None)]

        if criteria.status:
            conditions.append(Issue.status == criteria.status)
        if criteria.priority:
            conditions.append(Issue.priority == criteria.priority)
        if criteria.category_id is not None:
            conditions.append(Issue.category_id == criteria.category_id)
        if criteria.reported_by_id is not None:
            conditions.append(Issue.reported_by_id == criteria.reported_by_id)
        if criteria.tags:
            conditions.append(
                Issue.id.in_(select(IssueTag.issue_id).where(IssueTag.tag.in_(criteria.tags)))
            )
        if criteria.search:
            pattern = _like_pattern(criteria.search)
            conditions.append(or_(
                Issue.title.ilike(pattern, escape="\\"),
                Issue.description.ilike(pattern, escape="\\"),
                Issue.location_address.ilike(pattern, escape="\\"),
            ))
        if criteria.location:
            conditions.append(
                Issue.location_address.ilike(_like_pattern(criteria.location), escape="\\")
            )
        return conditions

    async def find(self, criteria: IssueCriteria) -> tuple[list[Issue], int]:
        conditions = self._conditions(criteria)

        total_result = await self.session.execute(
            select(func.count()).select_from(Issue).where(*conditions)
        )
        total = total_result.scalar_one()

        sort_column = getattr(Issue, criteria.sort_field)
        query = (
            select(Issue)
            .where(*conditions)
            .order_by(
                sort_column.desc() if criteria.descending else sort_column.asc(),
                Issue.id.asc(),
            )
            .offset(criteria.skip)
            .limit(criteria.limit)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all()), total

    async def add(self, issue: Issue) -> Issue:
        self.session.add(issue)
        await self.session.flush()
        return issue

    async def save(self, issue: Issue) -> Issue:
        await self.session.flush()
        return issue

    async def adjust_counters(
        self,
        issue_id: int,
        upvotes: int = 0,
        downvotes: int = 0,
        comments: int = 0,
        views: int = 0,
    ) -> Issue:
        values = {}
        if upvotes:
            values["upvotes_count"] = Issue.upvotes_count + upvotes
        if downvotes:
            values["downvotes_count"] = Issue.downvotes_count + downvotes
        if comments:
            values["comments_count"] = Issue.comments_count + comments
        if views:
            values["views_count"] = Issue.views_count + views

        if values:
            # In-storage increment: UPDATE ... SET c = c + :delta
            await self.session.execute(
                update(Issue)
                .where(Issue.id == issue_id)
                .values(**values)
                .execution_options(synchronize_session=False)
            )
        return await self.session.get(Issue, issue_id, populate_existing=True)

    async def set_vote_counters(self, issue_id: int, upvotes: int, downvotes: int) -> Issue:
        await self.session.execute(
            update(Issue)
            .where(Issue.id == issue_id)
            .values(upvotes_count=upvotes, downvotes_count=downvotes)
            .execution_options(synchronize_session=False)
        )
        return await self.session.get(Issue, issue_id, populate_existing=True)


class SqlVoteRepository(VoteRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_one(self, user_id: int, issue_id: int) -> Vote | None:
        result = await self.session.execute(
            select(Vote).where(Vote.user_id == user_id, Vote.issue_id == issue_id)
        )
        return result.scalar_one_or_none()

    async def create(self, user_id: int, issue_id: int, vote_type: str) -> Vote:
        vote = Vote(user_id=user_id, issue_id=issue_id, vote_type=vote_type)
        self.session.add(vote)
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise VoteConflictError(user_id, issue_id) from e
        return vote

    async def update(self, vote: Vote, vote_type: str) -> Vote:
        now = datetime.utcnow()
        result = await self.session.execute(
            update(Vote)
            .where(Vote.id == vote.id, Vote.vote_type == vote.vote_type)
            .values(vote_type=vote_type, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise VoteConflictError(vote.user_id, vote.issue_id)
        set_committed_value(vote, "vote_type", vote_type)
        set_committed_value(vote, "updated_at", now)
        return vote

    async def delete(self, vote: Vote) -> None:
        result = await self.session.execute(
            delete(Vote)
            .where(Vote.id == vote.id, Vote.vote_type == vote.vote_type)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise VoteConflictError(vote.user_id, vote.issue_id)
        self.session.expunge(vote)

    async def directions_for_user(self, user_id: int, issue_ids: list[int]) -> dict[int, str]:
        if not issue_ids:
            return {}
        result = await self.session.execute(
            select(Vote.issue_id, Vote.vote_type).where(
                Vote.user_id == user_id,
                Vote.issue_id.in_(issue_ids),
            )
        )
        return {issue_id: vote_type for issue_id, vote_type in result.all()}

    async def tally(self, issue_id: int) -> tuple[int, int]:
        result = await self.session.execute(
            select(Vote.vote_type, func.count())
            .where(Vote.issue_id == issue_id)
            .group_by(Vote.vote_type)
        )
        counts = dict(result.all())
        return counts.get(VoteType.UPVOTE.value, 0), counts.get(VoteType.DOWNVOTE.value, 0)


class SqlCommentRepository(CommentRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, comment_id: int) -> Comment | None:
        return await self.session.get(Comment, comment_id)

    async def add(self, comment: Comment) -> Comment:
        self.session.add(comment)
        await self.session.flush()
        return comment

    async def list_top_level(self, issue_id: int, skip: int, limit: int) -> tuple[list[Comment], int]:
        conditions = [Comment.issue_id == issue_id, Comment.parent_id.is_(None)]
        total_result = await self.session.execute(
            select(func.count()).select_from(Comment).where(*conditions)
        )
        result = await self.session.execute(
            select(Comment)
            .where(*conditions)
            .order_by(Comment.created_at.desc(), Comment.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all()), total_result.scalar_one()

    async def replies_for(self, parent_ids: list[int]) -> list[Comment]:
        if not parent_ids:
            return []
        result = await self.session.execute(
            select(Comment)
            .where(Comment.parent_id.in_(parent_ids))
            .order_by(Comment.created_at.asc(), Comment.id.asc())
        )
        return list(result.scalars().all())


class SqlNotificationRepository(NotificationRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def add(self, notification: Notification) -> Notification:
        self.session.add(notification)
        await self.session.flush()
        return notification

    async def get_for_user(self, notification_id: int, user_id: int) -> Notification | None:
        result = await self.session.execute(
            select(Notification).where(
                Notification.id == notification_id,
                Notification.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_for_user(
        self,
        user_id: int,
        unread_only: bool,
        skip: int,
        limit: int,
    ) -> tuple[list[Notification], int]:
        conditions = [Notification.user_id == user_id]
        if unread_only:
            conditions.append(Notification.read.is_(False))
        total_result = await self.session.execute(
            select(func.count()).select_from(Notification).where(*conditions)
        )
        result = await self.session.execute(
            select(Notification)
            .where(*conditions)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all()), total_result.scalar_one()

    async def count_unread(self, user_id: int) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(Notification).where(
                Notification.user_id == user_id,
                Notification.read.is_(False),
            )
        )
        return result.scalar_one()

    async def save(self, notification: Notification) -> Notification:
        await self.session.flush()
        return notification

    async def mark_all_read(self, user_id: int) -> int:
        result = await self.session.execute(
            update(Notification)
            .where(Notification.user_id == user_id, Notification.read.is_(False))
            .values(read=True)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def delete(self, notification: Notification) -> None:
        await self.session.execute(delete(Notification).where(Notification.id == notification.id))


class SqlStore(Store):
    """Store backed by an async SQLAlchemy engine."""

    name = "sql"

    def __init__(self, database_url: str, echo: bool = False):
        self.database_url = database_url
        self.engine = build_engine(database_url, echo=echo)
        self.session_factory = build_session_factory(self.engine)

    async def initialize(self) -> None:
        """Create all tables."""
        # Import all models to register them with SQLAlchemy
        from backend.app import models  # noqa: F401

        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except OperationalError as e:
            raise StorageUnavailableError("initialize", e) from e
        logger.info("[STORE] SQL tables ensured")

    async def close(self) -> None:
        await self.engine.dispose()
        logger.info("[STORE] Database engine closed")

    @asynccontextmanager
    async def unit_of_work(self) -> AsyncIterator[Repositories]:
        async with self.session_factory() as session:
            try:
                yield Repositories(
                    users=SqlUserRepository(session),
                    categories=SqlCategoryRepository(session),
                    issues=SqlIssueRepository(session),
                    votes=SqlVoteRepository(session),
                    comments=SqlCommentRepository(session),
                    notifications=SqlNotificationRepository(session),
                )
                await session.commit()
            except OperationalError as e:
                await session.rollback()
                logger.error(f"[STORE] Database error: {e}")
                raise StorageUnavailableError("unit of work", e) from e
            except Exception:
                await session.rollback()
                raise
