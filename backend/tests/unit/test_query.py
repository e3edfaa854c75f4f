"""Unit tests for issue listing: filters, ordering and pagination."""

import pytest

from backend.app.core.exceptions import InvalidSortFieldError
from backend.app.models.category import Category
from backend.app.models.user import UserRole
from backend.app.services import issues as issue_service
from backend.app.services.query import IssueQuery, build_criteria, search_issues, split_tags
from backend.app.services.voting import cast_vote


class TestBuildCriteria:
    """Test cases for translating listing parameters."""

    def test_defaults(self):
        criteria = build_criteria(IssueQuery())

        assert criteria.sort_field == "created_at"
        assert criteria.descending is True
        assert criteria.skip == 0
        assert criteria.limit == 10

    def test_page_to_skip(self):
        criteria = build_criteria(IssueQuery(page=3, limit=5, sort_by="upvotesCount", sort_order="asc"))

        assert criteria.skip == 10
        assert criteria.limit == 5
        assert criteria.sort_field == "upvotes_count"
        assert criteria.descending is False

    def test_unknown_sort_field(self):
        with pytest.raises(InvalidSortFieldError):
            build_criteria(IssueQuery(sort_by="title"))

    def test_split_tags(self):
        assert split_tags(["a,b", " c ", "a", ","]) == ["a", "b", "c"]
        assert split_tags(None) == []


class TestSearchIssues:
    """Test cases for search_issues against both stores."""

    @pytest.mark.asyncio
    async def test_empty_result(self, store):
        result = await search_issues(store, IssueQuery(), None)

        assert result.issues == []
        assert result.pagination.total == 0
        assert result.pagination.pages == 0

    @pytest.mark.asyncio
    async def test_resolved_top_two_by_upvotes(self, store, create_user, create_issue):
        """Five resolved issues, sorted by upvotes desc, two per page."""
        reporter = await create_user()
        moderator = await create_user(role=UserRole.MODERATOR.value)
        voters = [await create_user() for _ in range(5)]

        issues = [await create_issue(reporter) for _ in range(5)]
        await create_issue(reporter)  # still pending
        upvotes = [2, 5, 0, 4, 1]
        for issue, count in zip(issues, upvotes):
            for voter in voters[:count]:
                await cast_vote(store, voter, issue.id, "upvote")
            await issue_service.change_status(store, moderator, issue.id, "resolved")

        result = await search_issues(
            store,
            IssueQuery(status="resolved", sort_by="upvotesCount", sort_order="desc", page=1, limit=2),
            None,
        )

        assert [i.id for i in result.issues] == [issues[1].id, issues[3].id]
        assert [i.upvotes_count for i in result.issues] == [5, 4]
        assert result.pagination.total == 5
        assert result.pagination.pages == 3

    @pytest.mark.asyncio
    async def test_pagination_is_complete_and_stable(self, store, create_user, create_issue):
        """Concatenated pages hold every match once; ties keep creation order."""
        reporter = await create_user()
        voter = await create_user()
        created = [await create_issue(reporter) for _ in range(7)]
        await cast_vote(store, voter, created[4].id, "upvote")
        await cast_vote(store, voter, created[2].id, "upvote")

        collected = []
        for page in range(1, 5):
            result = await search_issues(
                store, IssueQuery(sort_by="upvotesCount", sort_order="desc", page=page, limit=3), None,
            )
            collected.extend(i.id for i in result.issues)

        tied = [i.id for i in created if i.id not in (created[2].id, created[4].id)]
        assert collected == [created[2].id, created[4].id] + tied

        again = []
        for page in range(1, 4):
            result = await search_issues(
                store, IssueQuery(sort_by="upvotesCount", sort_order="desc", page=page, limit=3), None,
            )
            again.extend(i.id for i in result.issues)
        assert again == collected

    @pytest.mark.asyncio
    async def test_ascending_ties_keep_creation_order(self, store, create_user, create_issue):
        reporter = await create_user()
        created = [await create_issue(reporter) for _ in range(4)]

        result = await search_issues(store, IssueQuery(sort_by="viewsCount", sort_order="asc"), None)

        assert [i.id for i in result.issues] == [i.id for i in created]

    @pytest.mark.asyncio
    async def test_out_of_range_page(self, store, create_user, create_issue):
        reporter = await create_user()
        for _ in range(3):
            await create_issue(reporter)

        result = await search_issues(store, IssueQuery(page=5, limit=2), None)

        assert result.issues == []
        assert result.pagination.total == 3
        assert result.pagination.pages == 2

    @pytest.mark.asyncio
    async def test_search_is_case_insensitive(self, store, create_user, create_issue):
        reporter = await create_user()
        pothole = await create_issue(reporter, title="Deep POTHOLE on bridge")
        by_location = await create_issue(reporter, location_address="Pothole Lane")
        await create_issue(reporter, title="Graffiti")

        result = await search_issues(store, IssueQuery(search="pothole", sort_order="asc"), None)

        assert {i.id for i in result.issues} == {pothole.id, by_location.id}

    @pytest.mark.asyncio
    async def test_search_treats_wildcards_literally(self, store, create_user, create_issue):
        reporter = await create_user()
        await create_issue(reporter, title="Half done")
        percent = await create_issue(reporter, title="50% of lights out")

        result = await search_issues(store, IssueQuery(search="%"), None)

        assert [i.id for i in result.issues] == [percent.id]

    @pytest.mark.asyncio
    async def test_tags_match_any(self, store, create_user, create_issue):
        reporter = await create_user()
        road = await create_issue(reporter, tags=["road"])
        light = await create_issue(reporter, tags=["light", "night"])
        await create_issue(reporter, tags=["park"])

        result = await search_issues(store, IssueQuery(tags=["road,light"]), None)

        assert {i.id for i in result.issues} == {road.id, light.id}

    @pytest.mark.asyncio
    async def test_filter_by_category_id_and_name(self, store, create_user, create_issue):
        async with store.unit_of_work() as repos:
            category = await repos.categories.add(Category(name="Environment", is_active=True))
        reporter = await create_user()
        tagged = await create_issue(reporter, category_id=category.id)
        await create_issue(reporter)

        by_id = await search_issues(store, IssueQuery(category=str(category.id)), None)
        by_name = await search_issues(store, IssueQuery(category="environment"), None)
        unknown = await search_issues(store, IssueQuery(category="Nope"), None)

        assert [i.id for i in by_id.issues] == [tagged.id]
        assert [i.id for i in by_name.issues] == [tagged.id]
        assert unknown.issues == []
        assert unknown.pagination.total == 0

    @pytest.mark.asyncio
    async def test_filter_by_priority_and_location(self, store, create_user, create_issue):
        reporter = await create_user()
        target = await create_issue(reporter, priority="critical", location_address="North Park, Gate 2")
        await create_issue(reporter, priority="critical", location_address="South Park")
        await create_issue(reporter, priority="low", location_address="North Park")

        result = await search_issues(store, IssueQuery(priority="critical", location="north"), None)

        assert [i.id for i in result.issues] == [target.id]

    @pytest.mark.asyncio
    async def test_deleted_issues_are_hidden(self, store, create_user, create_issue):
        reporter = await create_user()
        kept = await create_issue(reporter)
        removed = await create_issue(reporter)
        await issue_service.delete_issue(store, reporter, removed.id)

        result = await search_issues(store, IssueQuery(), None)

        assert [i.id for i in result.issues] == [kept.id]

    @pytest.mark.asyncio
    async def test_viewer_vote_annotation(self, store, create_user, create_issue):
        reporter = await create_user()
        voter = await create_user()
        voted = await create_issue(reporter)
        await create_issue(reporter)
        await cast_vote(store, voter, voted.id, "downvote")

        as_voter = await search_issues(store, IssueQuery(sort_order="asc"), voter)
        anonymous = await search_issues(store, IssueQuery(sort_order="asc"), None)

        votes = {i.id: i.current_user_vote for i in as_voter.issues}
        assert votes[voted.id] == "downvote"
        assert list(votes.values()).count("none") == 1
        assert all(i.current_user_vote == "none" for i in anonymous.issues)
