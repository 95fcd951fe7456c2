from __future__ import annotations

import asyncio

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from resume_assets.core.config import SecuritySettings, Settings, UploadSettings, get_settings
from resume_assets.infrastructure.database import models as orm
from resume_assets.infrastructure.database.base import Base
from resume_assets.interfaces.http.deps import (
    get_db_session,
    get_malware_scanner,
    get_object_store,
    get_rate_counter,
)
from resume_assets.main import app
from resume_assets.modules.assets.models import UploadLimits
from support import (
    INTERNAL_SECRET,
    SECRET_KEY,
    FakeObjectStore,
    FakeRateCounter,
    FakeScanner,
    InMemoryAssetRepository,
    default_limits,
)


@pytest.fixture()
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture()
def object_store() -> FakeObjectStore:
    return FakeObjectStore()


@pytest.fixture()
def rate_counter() -> FakeRateCounter:
    return FakeRateCounter()


@pytest.fixture()
def scanner() -> FakeScanner:
    return FakeScanner()


@pytest.fixture()
def asset_repository() -> InMemoryAssetRepository:
    return InMemoryAssetRepository()


@pytest.fixture()
def upload_limits() -> UploadLimits:
    return default_limits()


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        security=SecuritySettings(secret_key=SECRET_KEY, internal_api_secret=INTERNAL_SECRET),
        uploads=UploadSettings(max_bytes=64 * 1024, max_assets_per_user=3, max_uploads_per_day=5),
    )


@pytest.fixture()
def session_factory(tmp_path) -> async_sessionmaker[AsyncSession]:
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'assets.db'}", poolclass=NullPool)

    async def _create_tables() -> None:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(_create_tables())
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture()
def db(session_factory):
    """Run a coroutine function against a fresh session from the test database."""

    def _run(work):
        async def _go():
            async with session_factory() as session:
                result = await work(session)
                await session.commit()
                return result

        return asyncio.run(_go())

    return _run


@pytest.fixture()
def seed_asset(db):
    def _seed(user_id: int, object_key: str, size: int = 10) -> None:
        async def _work(session):
            session.add(orm.Asset(user_id=user_id, object_key=object_key, content_type="image/png", size=size))

        db(_work)

    return _seed


@pytest.fixture()
def seed_resume(db):
    def _seed(user_id: int, content: str) -> int:
        async def _work(session):
            resume = orm.Resume(user_id=user_id, title="resume", content=content)
            session.add(resume)
            await session.flush()
            return resume.id

        return db(_work)

    return _seed


@pytest.fixture()
def client(settings, session_factory, object_store, rate_counter, scanner):
    async def _session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_db_session] = _session
    app.dependency_overrides[get_object_store] = lambda: object_store
    app.dependency_overrides[get_rate_counter] = lambda: rate_counter
    app.dependency_overrides[get_malware_scanner] = lambda: scanner
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
