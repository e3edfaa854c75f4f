"""Unit tests for comments."""

import pytest

from backend.app.core.exceptions import InvalidParentCommentError, IssueNotFoundError
from backend.app.models.user import UserRole
from backend.app.schemas.comment import CommentCreate
from backend.app.services import issues as issue_service
from backend.app.services.comments import add_comment, list_comments


class TestComments:
    """Test cases for the comment service against both stores."""

    @pytest.mark.asyncio
    async def test_add_comment_increments_count(self, store, create_user, create_issue):
        reporter = await create_user()
        commenter = await create_user(name="Dana")
        issue = await create_issue(reporter)

        comment = await add_comment(store, commenter, issue.id, CommentCreate(content="  Seen it too  "))
        await add_comment(store, reporter, issue.id, CommentCreate(content="Thanks"))

        assert comment.content == "Seen it too"
        assert comment.author.name == "Dana"
        assert comment.is_official is False
        refreshed = await issue_service.get_issue(store, issue.id, None)
        assert refreshed.comments_count == 2

    @pytest.mark.asyncio
    async def test_staff_comments_are_official(self, store, create_user, create_issue):
        reporter = await create_user()
        moderator = await create_user(role=UserRole.MODERATOR.value)
        issue = await create_issue(reporter)

        comment = await add_comment(store, moderator, issue.id, CommentCreate(content="Crew scheduled"))

        assert comment.is_official is True

    @pytest.mark.asyncio
    async def test_replies_nest_under_parent(self, store, create_user, create_issue):
        reporter = await create_user()
        other = await create_user()
        issue = await create_issue(reporter)

        first = await add_comment(store, other, issue.id, CommentCreate(content="first"))
        second = await add_comment(store, other, issue.id, CommentCreate(content="second"))
        reply_a = await add_comment(store, reporter, issue.id, CommentCreate(content="reply a", parent_id=first.id))
        reply_b = await add_comment(store, other, issue.id, CommentCreate(content="reply b", parent_id=first.id))

        result = await list_comments(store, issue.id, page=1, limit=10)

        assert [c.id for c in result.comments] == [second.id, first.id]
        assert [r.id for r in result.comments[1].replies] == [reply_a.id, reply_b.id]
        assert result.pagination.total == 2
        assert result.pagination.pages == 1

    @pytest.mark.asyncio
    async def test_reply_to_reply_rejected(self, store, create_user, create_issue):
        reporter = await create_user()
        issue = await create_issue(reporter)
        top = await add_comment(store, reporter, issue.id, CommentCreate(content="top"))
        reply = await add_comment(store, reporter, issue.id, CommentCreate(content="reply", parent_id=top.id))

        with pytest.raises(InvalidParentCommentError):
            await add_comment(store, reporter, issue.id, CommentCreate(content="deeper", parent_id=reply.id))

    @pytest.mark.asyncio
    async def test_missing_parent_rejected(self, store, create_user, create_issue):
        reporter = await create_user()
        issue = await create_issue(reporter)

        with pytest.raises(InvalidParentCommentError) as exc_info:
            await add_comment(store, reporter, issue.id, CommentCreate(content="hello", parent_id=9999))

        assert exc_info.value.parent_id == 9999
        result = await list_comments(store, issue.id, page=1, limit=10)
        assert result.comments == []

    @pytest.mark.asyncio
    async def test_parent_from_other_issue_rejected(self, store, create_user, create_issue):
        reporter = await create_user()
        issue = await create_issue(reporter)
        other_issue = await create_issue(reporter)
        foreign = await add_comment(store, reporter, other_issue.id, CommentCreate(content="elsewhere"))

        with pytest.raises(InvalidParentCommentError):
            await add_comment(store, reporter, issue.id, CommentCreate(content="x", parent_id=foreign.id))

    @pytest.mark.asyncio
    async def test_comment_on_deleted_issue(self, store, create_user, create_issue):
        reporter = await create_user()
        issue = await create_issue(reporter)
        await issue_service.delete_issue(store, reporter, issue.id)

        with pytest.raises(IssueNotFoundError):
            await add_comment(store, reporter, issue.id, CommentCreate(content="hello"))
        with pytest.raises(IssueNotFoundError):
            await list_comments(store, issue.id, page=1, limit=10)

    @pytest.mark.asyncio
    async def test_reporter_and_parent_author_notified(self, store, create_user, create_issue):
        reporter = await create_user()
        parent_author = await create_user()
        replier = await create_user()
        issue = await create_issue(reporter)
        parent = await add_comment(store, parent_author, issue.id, CommentCreate(content="question"))

        await add_comment(store, replier, issue.id, CommentCreate(content="answer", parent_id=parent.id))

        async with store.unit_of_work() as repos:
            assert await repos.notifications.count_unread(reporter.id) == 2
            assert await repos.notifications.count_unread(parent_author.id) == 1
            assert await repos.notifications.count_unread(replier.id) == 0
