"""
Issue listing: filter, sort and paginate.

Results are ordered by (sort key, id ascending), so equal sort keys keep
creation order in both directions and consecutive pages never overlap or
skip items.
"""

import logging
import math
from dataclasses import dataclass, field

from backend.app.core.config import settings
from backend.app.core.exceptions import InvalidSortFieldError
from backend.app.models.user import User
from backend.app.repositories.base import SORT_FIELDS, IssueCriteria, Repositories, Store
from backend.app.schemas.common import Pagination
from backend.app.schemas.issue import IssueListResponse
from backend.app.services.issues import present_issues

logger = logging.getLogger(__name__)


@dataclass
class IssueQuery:
    """Raw listing parameters as received from the client."""

    search: str | None = None
    status: str | None = None
    priority: str | None = None
    category: str | None = None
    tags: list[str] = field(default_factory=list)
    location: str | None = None
    reported_by: int | None = None
    sort_by: str = "createdAt"
    sort_order: str = "desc"
    page: int = 1
    limit: int | None = None


def split_tags(raw: list[str] | None) -> list[str]:
    """Accept repeated and comma-separated tag parameters; drop blanks and duplicates."""
    tags: list[str] = []
    for value in raw or []:
        for tag in value.split(","):
            tag = tag.strip()
            if tag and tag not in tags:
                tags.append(tag)
    return tags


def page_count(total: int, limit: int) -> int:
    return math.ceil(total / limit)


def build_criteria(query: IssueQuery) -> IssueCriteria:
    """
    Translate listing parameters into repository criteria.

    Raises:
        InvalidSortFieldError: If sort_by is not a sortable field
    """
    if query.sort_by not in SORT_FIELDS:
        raise InvalidSortFieldError(query.sort_by, list(SORT_FIELDS))

    limit = min(query.limit or settings.default_page_size, settings.max_page_size)
    page = max(query.page, 1)

    return IssueCriteria(
        search=query.search.strip() if query.search and query.search.strip() else None,
        status=query.status or None,
        priority=query.priority or None,
        tags=split_tags(query.tags),
        location=query.location.strip() if query.location and query.location.strip() else None,
        reported_by_id=query.reported_by,
        sort_field=SORT_FIELDS[query.sort_by],
        descending=query.sort_order.lower() != "asc",
        skip=(page - 1) * limit,
        limit=limit,
    )


async def _resolve_category_filter(repos: Repositories, category: str | None) -> tuple[bool, int | None]:
    """
    Resolve the category filter to an id.

    Returns (matchable, category_id); an unknown category name matches nothing.
    """
    if not category:
        return True, None
    if category.isdigit():
        return True, int(category)
    found = await repos.categories.get_by_name(category)
    if found is None:
        return False, None
    return True, found.id


async def search_issues(store: Store, query: IssueQuery, viewer: User | None) -> IssueListResponse:
    """
    Run a listing query.

    An empty result or a page past the end yields an empty list with the
    correct total and page count; neither is an error.
    """
    criteria = build_criteria(query)

    async with store.unit_of_work() as repos:
        matchable, category_id = await _resolve_category_filter(repos, query.category)
        if matchable:
            criteria.category_id = category_id
            issues, total = await repos.issues.find(criteria)
        else:
            issues, total = [], 0
        items = await present_issues(repos, issues, viewer)

    page = criteria.skip // criteria.limit + 1
    logger.debug(f"[QUERY] {total} matches, page {page} of {page_count(total, criteria.limit)}")
    return IssueListResponse(
        issues=items,
        pagination=Pagination(
            page=page,
            limit=criteria.limit,
            total=total,
            pages=page_count(total, criteria.limit),
        ),
    )


async def list_user_issues(store: Store, user: User, query: IssueQuery) -> IssueListResponse:
    """List the caller's own issues, with the same filtering, sorting and paging."""
    query.reported_by = user.id
    return await search_issues(store, query, user)
