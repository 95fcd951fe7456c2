"""Async engine lifecycle and per-request sessions for asset metadata."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from resume_assets.core.config import DatabaseSettings, get_settings
from resume_assets.infrastructure.database.base import Base

logger = logging.getLogger(__name__)

_engine: AsyncEngine | None = None
AsyncSessionFactory: async_sessionmaker[AsyncSession] | None = None


def _is_memory_sqlite(url: str) -> bool:
    parsed = make_url(url)
    return parsed.get_backend_name() == "sqlite" and parsed.database in (None, "", ":memory:")


def _engine_options(database: DatabaseSettings, *, debug: bool) -> dict[str, Any]:
    options: dict[str, Any] = {"echo": database.echo or debug}
    if _is_memory_sqlite(database.url):
        # Every connection to :memory: is a separate database; share one.
        options["poolclass"] = StaticPool
        return options
    if database.pool_size is not None:
        options["pool_size"] = database.pool_size
    if database.max_overflow is not None:
        options["max_overflow"] = database.max_overflow
    return options


def get_engine() -> AsyncEngine:
    global _engine, AsyncSessionFactory
    if _engine is None:
        settings = get_settings()
        _engine = create_async_engine(
            settings.database_url,
            **_engine_options(settings.database, debug=settings.debug),
        )
        AsyncSessionFactory = async_sessionmaker(bind=_engine, expire_on_commit=False)
    return _engine


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session; commit when the request succeeds, roll back otherwise."""
    get_engine()
    async with AsyncSessionFactory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        await session.commit()


async def init_db() -> None:
    """Create the ``assets`` and ``resumes`` tables if they are missing."""
    from resume_assets.infrastructure.database import models  # noqa: F401

    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema ready")


async def dispose_engine() -> None:
    global _engine, AsyncSessionFactory
    if _engine is None:
        return
    await _engine.dispose()
    _engine = None
    AsyncSessionFactory = None
