"""Simple dependency container for wiring core services."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from resume_assets.core.config import Settings, get_settings
from resume_assets.infrastructure.cache import RedisRateCounter
from resume_assets.infrastructure.database.session import get_engine
from resume_assets.infrastructure.scanning import ClamdScanner
from resume_assets.infrastructure.storage import MinioObjectStore


@dataclass(slots=True)
class ApplicationContainer:
    settings: Settings
    object_store: MinioObjectStore
    rate_counter: RedisRateCounter
    scanner: ClamdScanner

    @classmethod
    def from_settings(cls, settings: Settings) -> "ApplicationContainer":
        return cls(
            settings=settings,
            object_store=MinioObjectStore(settings.minio),
            rate_counter=RedisRateCounter(settings.redis_url),
            scanner=ClamdScanner(settings.clamav),
        )

    def init_infrastructure(self) -> None:
        """Ensure infrastructure singletons (database engine, etc.) are initialised."""
        get_engine()

    async def startup(self) -> None:
        await self.object_store.ensure_bucket()

    async def shutdown(self) -> None:
        await self.rate_counter.close()


@lru_cache()
def get_container() -> ApplicationContainer:
    container = ApplicationContainer.from_settings(get_settings())
    container.init_infrastructure()
    return container


__all__ = ["ApplicationContainer", "get_container"]
