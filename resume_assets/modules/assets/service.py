"""Asset service handling listing, temporary links and deletion."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import timedelta

from .exceptions import (
    AccessDeniedError,
    AssetValidationError,
    CollaboratorError,
    InternalAssetError,
    ObjectStoreError,
)
from .keys import ObjectKeyAuthorizer
from .models import Asset, AssetListing, AssetListItem, AssetStats, UploadLimits
from .quota import QuotaGuard
from .repository import AssetRepository, ObjectStore

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class AssetService:
    repository: AssetRepository
    store: ObjectStore
    quota: QuotaGuard
    limits: UploadLimits
    preview_ttl: timedelta = timedelta(minutes=10)
    view_ttl: timedelta = timedelta(minutes=15)
    authorizer: ObjectKeyAuthorizer = field(default_factory=ObjectKeyAuthorizer)

    async def list_assets(self, user_id: int, limit: int) -> AssetListing:
        try:
            assets = await self.repository.list_by_user(user_id, limit)
        except CollaboratorError as exc:
            logger.error("List assets failed for user %s: %s", user_id, exc)
            raise InternalAssetError("failed to list assets") from exc

        items: list[AssetListItem] = []
        for asset in assets:
            try:
                url = await self.store.presigned_url(asset.object_key, self.preview_ttl)
            except ObjectStoreError as exc:
                logger.error("Generate asset url failed for %s: %s", asset.object_key, exc)
                continue
            items.append(
                AssetListItem(
                    object_key=asset.object_key,
                    preview_url=url,
                    size=asset.size,
                    last_modified=asset.created_at,
                )
            )

        stats = AssetStats(
            asset_count=len(assets),
            max_assets=self.limits.max_assets_per_user,
            today_uploads=await self.quota.daily_uploads(user_id),
            max_uploads_per_day=self.limits.max_uploads_per_day,
        )
        return AssetListing(items=items, stats=stats)

    async def view_url(self, user_id: int, object_key: str | None) -> str:
        asset = await self._owned_asset(user_id, object_key)
        try:
            return await self.store.presigned_url(asset.object_key, self.view_ttl)
        except ObjectStoreError as exc:
            logger.error("Generate presigned url failed for %s: %s", asset.object_key, exc)
            raise InternalAssetError("failed to generate url") from exc

    async def delete_asset(self, user_id: int, object_key: str | None) -> None:
        asset = await self._owned_asset(user_id, object_key)
        try:
            await self.store.delete(asset.object_key)
        except ObjectStoreError as exc:
            logger.error("Delete object %s failed: %s", asset.object_key, exc)
            raise InternalAssetError("failed to delete asset") from exc

        try:
            await self.repository.delete_by_id(asset.id)
        except CollaboratorError as exc:
            logger.error("Delete asset record %s failed: %s", asset.object_key, exc)
            raise InternalAssetError("failed to delete asset") from exc
        logger.info("User %s deleted asset %s", user_id, asset.object_key)

    async def _owned_asset(self, user_id: int, object_key: str | None) -> Asset:
        key = (object_key or "").strip()
        if not key:
            raise AssetValidationError("missing key")
        if not self.authorizer.validate(user_id, key):
            raise AccessDeniedError()
        try:
            asset = await self.repository.find_by_user_and_key(user_id, key)
        except CollaboratorError as exc:
            logger.error("Lookup asset %s failed: %s", key, exc)
            raise AccessDeniedError() from exc
        if asset is None:
            raise AccessDeniedError()
        return asset
