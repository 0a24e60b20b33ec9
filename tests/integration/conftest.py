"""Shared fixtures for integration tests requiring live infrastructure."""

from __future__ import annotations

from collections.abc import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine

from study_tracker.config import get_settings

# ── Engine (module-scoped, shared across test module) ──────────────


@pytest.fixture(scope="module")
async def async_engine() -> AsyncGenerator[AsyncEngine]:
    """Create an async engine from settings (module-scoped)."""
    engine = create_async_engine(
        get_settings().database_url,
        pool_size=5,
        max_overflow=0,
    )
    yield engine
    await engine.dispose()


# ── Session with rollback ─────────────────────────────────────────


@pytest.fixture()
async def db_session(
    async_engine: AsyncEngine,
) -> AsyncGenerator[AsyncSession]:
    """Provide a session wrapped in a transaction, rolled back after test.

    ``commit()`` inside the test only releases a savepoint, so the
    outer transaction still discards every write.
    """
    async with async_engine.connect() as conn:
        trans = await conn.begin()
        session = AsyncSession(
            bind=conn,
            expire_on_commit=False,
            join_transaction_mode="create_savepoint",
        )

        yield session

        await session.close()
        await trans.rollback()
