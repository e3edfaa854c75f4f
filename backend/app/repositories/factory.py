"""Store selection."""

import logging

from backend.app.core.config import Settings
from backend.app.core.exceptions import StorageUnavailableError
from backend.app.repositories.base import Store
from backend.app.repositories.memory import MemoryStore
from backend.app.repositories.sql import SqlStore

logger = logging.getLogger(__name__)


async def build_store(settings: Settings) -> Store:
    """
    Create and initialize the configured store.

    A database URL selects the SQL store. When the database cannot be
    initialized and fallback is enabled, the in-memory store is used instead.

    Raises:
        StorageUnavailableError: If the database is unreachable and fallback is disabled
    """
    if not settings.database_url:
        store = MemoryStore()
        await store.initialize()
        return store

    store = SqlStore(settings.database_url, echo=settings.database_echo)
    try:
        await store.initialize()
    except StorageUnavailableError as e:
        await store.close()
        if not settings.database_fallback_to_memory:
            raise
        logger.warning(f"[STORE] Database unavailable, falling back to in-memory store: {e.message}")
        store = MemoryStore()
        await store.initialize()
    return store
