"""Asset related dependency providers."""

from datetime import timedelta

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from resume_assets.core.config import Settings, get_settings
from resume_assets.core.container import get_container
from resume_assets.infrastructure.database.repositories import SqlAssetRepository
from resume_assets.modules.assets import AssetService, QuotaGuard, UploadLimits, UploadPipeline
from resume_assets.modules.assets.repository import MalwareScanner, ObjectStore, RateCounter

from .database import get_db_session


def get_object_store() -> ObjectStore:
    return get_container().object_store


def get_rate_counter() -> RateCounter:
    return get_container().rate_counter


def get_malware_scanner() -> MalwareScanner:
    return get_container().scanner


def get_upload_limits(settings: Settings = Depends(get_settings)) -> UploadLimits:
    uploads = settings.uploads
    return UploadLimits(
        max_bytes=uploads.max_bytes,
        mime_whitelist=tuple(uploads.mime_whitelist),
        max_assets_per_user=uploads.max_assets_per_user,
        max_uploads_per_day=uploads.max_uploads_per_day,
    )


def get_asset_repository(db: AsyncSession = Depends(get_db_session)) -> SqlAssetRepository:
    return SqlAssetRepository(db)


def get_quota_guard(
    repository: SqlAssetRepository = Depends(get_asset_repository),
    counter: RateCounter = Depends(get_rate_counter),
) -> QuotaGuard:
    return QuotaGuard(repository, counter)


def get_upload_pipeline(
    quota: QuotaGuard = Depends(get_quota_guard),
    repository: SqlAssetRepository = Depends(get_asset_repository),
    store: ObjectStore = Depends(get_object_store),
    scanner: MalwareScanner = Depends(get_malware_scanner),
    limits: UploadLimits = Depends(get_upload_limits),
) -> UploadPipeline:
    return UploadPipeline(quota=quota, assets=repository, store=store, scanner=scanner, limits=limits)


def get_asset_service(
    repository: SqlAssetRepository = Depends(get_asset_repository),
    store: ObjectStore = Depends(get_object_store),
    quota: QuotaGuard = Depends(get_quota_guard),
    limits: UploadLimits = Depends(get_upload_limits),
    settings: Settings = Depends(get_settings),
) -> AssetService:
    return AssetService(
        repository=repository,
        store=store,
        quota=quota,
        limits=limits,
        preview_ttl=timedelta(seconds=settings.uploads.preview_url_ttl_seconds),
        view_ttl=timedelta(seconds=settings.uploads.view_url_ttl_seconds),
    )


__all__ = [
    "get_asset_repository",
    "get_asset_service",
    "get_malware_scanner",
    "get_object_store",
    "get_quota_guard",
    "get_rate_counter",
    "get_upload_limits",
    "get_upload_pipeline",
]
