"""
Initialize the CivicFix database: create tables and seed default categories.

Pass --reset to drop every table first.

WARNING: --reset deletes all existing data!
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add repository root to Python path
backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir.parent))


async def init_db(reset: bool = False):
    """Create all tables, optionally dropping them first, then seed categories."""
    from backend.app.core.config import settings
    from backend.app.db.base import Base
    from backend.app.repositories.sql import SqlStore
    from backend.app.services.categories import seed_default_categories

    if not settings.database_url:
        print("DATABASE_URL is not set; nothing to initialize (the in-memory store needs no setup)")
        return

    store = SqlStore(settings.database_url, echo=settings.database_echo)
    try:
        if reset:
            from backend.app import models  # noqa: F401

            print("Dropping all tables...")
            async with store.engine.begin() as conn:
                await conn.run_sync(Base.metadata.drop_all)

        await store.initialize()
        print("✓ Database schema created")

        created = await seed_default_categories(store)
        print(f"✓ Seeded {created} categories")
    finally:
        await store.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--reset", action="store_true", help="Drop all tables before creating them")
    args = parser.parse_args()
    asyncio.run(init_db(reset=args.reset))
