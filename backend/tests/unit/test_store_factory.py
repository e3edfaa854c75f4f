"""Unit tests for store selection."""

import pytest

from backend.app.core.config import Settings
from backend.app.core.exceptions import StorageUnavailableError
from backend.app.repositories.factory import build_store
from backend.app.repositories.memory import MemoryStore
from backend.app.repositories.sql import SqlStore

UNREACHABLE = "sqlite+aiosqlite:////nonexistent-dir/for/civicfix/test.db"


class TestBuildStore:
    @pytest.mark.asyncio
    async def test_no_url_selects_memory(self):
        store = await build_store(Settings(database_url=None))

        assert isinstance(store, MemoryStore)

    @pytest.mark.asyncio
    async def test_sqlite_url_selects_sql(self):
        store = await build_store(Settings(database_url="sqlite+aiosqlite:///:memory:"))
        try:
            assert isinstance(store, SqlStore)
            async with store.unit_of_work() as repos:
                assert await repos.categories.count() == 0
        finally:
            await store.close()

    @pytest.mark.asyncio
    async def test_unreachable_database_falls_back(self):
        store = await build_store(Settings(database_url=UNREACHABLE, database_fallback_to_memory=True))

        assert isinstance(store, MemoryStore)

    @pytest.mark.asyncio
    async def test_unreachable_database_without_fallback(self):
        with pytest.raises(StorageUnavailableError):
            await build_store(Settings(database_url=UNREACHABLE, database_fallback_to_memory=False))
