"""Pytest configuration and fixtures."""

import itertools
from typing import AsyncGenerator

import pytest
from httpx import AsyncClient, ASGITransport

from backend.app.api.deps import get_store
from backend.app.core.security import create_access_token, hash_password
from backend.app.main import app
from backend.app.models.user import User, UserRole, UserStatus
from backend.app.repositories.base import Store
from backend.app.repositories.memory import MemoryStore
from backend.app.repositories.sql import SqlStore
from backend.app.schemas.issue import IssueCreate, IssueResponse
from backend.app.services import issues as issue_service

TEST_PASSWORD = "secret123"


@pytest.fixture(params=["memory", "sqlite"])
async def store(request) -> AsyncGenerator[Store, None]:
    """
    A fresh, empty store.

    Parametrised so every test using it runs against both the in-memory
    store and an in-memory SQLite database.
    """
    if request.param == "memory":
        test_store = MemoryStore()
    else:
        test_store = SqlStore("sqlite+aiosqlite:///:memory:")
    await test_store.initialize()
    yield test_store
    await test_store.close()


@pytest.fixture
async def memory_store() -> AsyncGenerator[MemoryStore, None]:
    """An in-memory store, for tests that drive concurrent units of work."""
    test_store = MemoryStore()
    await test_store.initialize()
    yield test_store
    await test_store.close()


@pytest.fixture
async def file_store(tmp_path) -> AsyncGenerator[SqlStore, None]:
    """
    An SQL store on a SQLite file.

    Each unit of work gets its own pooled connection, so concurrent
    requests really interleave, unlike the single shared :memory: connection.
    """
    test_store = SqlStore(f"sqlite+aiosqlite:///{tmp_path / 'civicfix.db'}")
    await test_store.initialize()
    yield test_store
    await test_store.close()


@pytest.fixture
async def client(store: Store) -> AsyncGenerator[AsyncClient, None]:
    """
    Test client bound to the store fixture.

    The app's store dependency is overridden, so the lifespan (and the
    configured database) is never used.
    """
    app.dependency_overrides[get_store] = lambda: store

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def create_user(store: Store):
    """Factory inserting users directly into the store."""
    counter = itertools.count(1)

    async def _create(
        role: str = UserRole.CITIZEN.value,
        status: str = UserStatus.ACTIVE.value,
        name: str | None = None,
        email: str | None = None,
        password: str = TEST_PASSWORD,
    ) -> User:
        n = next(counter)
        async with store.unit_of_work() as repos:
            return await repos.users.add(User(
                email=email or f"user{n}@example.com",
                password_hash=hash_password(password),
                name=name or f"User {n}",
                role=role,
                status=status,
            ))

    return _create


@pytest.fixture
def create_issue(store: Store):
    """Factory reporting issues through the issue service."""
    counter = itertools.count(1)

    async def _create(reporter: User, **fields) -> IssueResponse:
        n = next(counter)
        data = {
            "title": f"Issue {n}",
            "description": f"Description of issue {n}",
            "location_address": f"{n} Main Street",
        }
        data.update(fields)
        return await issue_service.create_issue(store, reporter, IssueCreate(**data))

    return _create


@pytest.fixture
def auth_headers():
    """Build a bearer header for a user."""

    def _headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user)}"}

    return _headers
