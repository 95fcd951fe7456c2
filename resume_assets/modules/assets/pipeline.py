"""Upload pipeline turning a received file into a committed asset.

Stages run strictly in order::

    Received -> QuotaChecked -> RateChecked -> SizeChecked -> Scanned
             -> TypeSniffed -> Stored -> Persisted -> Committed

Cheap checks come first so that rejected requests never reach the scanner or
the object store. Nothing is written before the scan passes. Once the object
is written, a compensating delete is registered and runs on every failure
path that follows, so a failed metadata insert never leaves a referenced
object behind. Delete failures during compensation are logged only; the
orphaned object is left for reconciliation.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import AsyncExitStack
from dataclasses import dataclass
from typing import Optional

import filetype

from .exceptions import (
    AssetValidationError,
    CollaboratorError,
    InternalAssetError,
    MaliciousContentError,
    ObjectStoreError,
    PayloadTooLargeError,
    QuotaExceededError,
    RateLimitedError,
    ScannerError,
    StorageFaultError,
    UnsupportedMediaTypeError,
    is_no_such_bucket,
)
from .keys import build_object_key
from .models import Asset, IncomingFile, UploadLimits
from .quota import QuotaGuard
from .repository import AssetRepository, MalwareScanner, ObjectStore

logger = logging.getLogger(__name__)

SNIFF_BYTES = 512
UNKNOWN_MIME = "application/octet-stream"


@dataclass(slots=True)
class UploadResult:
    object_key: str
    content_type: str
    size: int
    asset: Asset


def sniff_content_type(head: bytes) -> str:
    """Infer a MIME type from leading file bytes, ignoring any declared type."""
    if not head:
        return UNKNOWN_MIME
    return filetype.guess_mime(head) or UNKNOWN_MIME


class UploadPipeline:
    def __init__(
        self,
        *,
        quota: QuotaGuard,
        assets: AssetRepository,
        store: ObjectStore,
        scanner: MalwareScanner,
        limits: UploadLimits,
    ) -> None:
        self._quota = quota
        self._assets = assets
        self._store = store
        self._scanner = scanner
        self._limits = limits

    async def run(self, user_id: int, incoming: Optional[IncomingFile]) -> UploadResult:
        if incoming is None:
            raise AssetValidationError("missing file")

        await self._check_quota(user_id)
        await self._check_rate(user_id)

        if incoming.size > self._limits.max_bytes:
            raise PayloadTooLargeError()

        await self._scan(user_id, incoming)
        content_type = self._sniff(incoming)

        object_key = build_object_key(user_id, content_type)
        async with AsyncExitStack() as compensations:
            await self._write_object(object_key, incoming, content_type)
            compensations.push_async_callback(self._compensate_delete, object_key)

            asset = await self._persist(
                Asset(
                    user_id=user_id,
                    object_key=object_key,
                    content_type=content_type,
                    size=incoming.size,
                )
            )
            compensations.pop_all()

        logger.info("User %s committed asset %s (%s, %d bytes)", user_id, object_key, content_type, incoming.size)
        return UploadResult(
            object_key=object_key,
            content_type=content_type,
            size=incoming.size,
            asset=asset,
        )

    async def _check_quota(self, user_id: int) -> None:
        try:
            existing = await self._quota.check_asset_count(user_id)
        except CollaboratorError as exc:
            logger.error("Count assets failed for user %s: %s", user_id, exc)
            raise InternalAssetError("failed to count assets") from exc
        limit = self._limits.max_assets_per_user
        if limit > 0 and existing >= limit:
            raise QuotaExceededError()

    async def _check_rate(self, user_id: int) -> None:
        try:
            count = await self._quota.increment_daily_upload(user_id)
        except CollaboratorError as exc:
            logger.error("Upload counter unavailable for user %s: %s", user_id, exc)
            raise InternalAssetError("failed to check upload rate") from exc
        limit = self._limits.max_uploads_per_day
        if limit > 0 and count > limit:
            raise RateLimitedError()

    async def _scan(self, user_id: int, incoming: IncomingFile) -> None:
        abort = asyncio.Event()
        reader = incoming.open()
        try:
            async for result in self._scanner.scan_stream(reader, abort):
                if not result.is_clean:
                    logger.warning(
                        "Upload from user %s rejected by scanner: %s %s",
                        user_id,
                        result.status,
                        result.signature,
                    )
                    raise MaliciousContentError()
        except ScannerError as exc:
            logger.error("Scan file failed for user %s: %s", user_id, exc)
            raise InternalAssetError("failed to scan file") from exc
        finally:
            # Stops a scan still in flight when we leave early or are cancelled.
            abort.set()
            reader.close()

    def _sniff(self, incoming: IncomingFile) -> str:
        reader = incoming.open()
        try:
            head = reader.read(SNIFF_BYTES)
        finally:
            reader.close()
        sniffed = sniff_content_type(head)
        if sniffed not in self._limits.mime_whitelist:
            raise UnsupportedMediaTypeError()
        return sniffed

    async def _write_object(self, object_key: str, incoming: IncomingFile, content_type: str) -> None:
        reader = incoming.open()
        try:
            await self._store.upload(object_key, reader, incoming.size, content_type)
        except ObjectStoreError as exc:
            if is_no_such_bucket(exc):
                logger.error("Upload of %s failed, bucket is missing: %s", object_key, exc)
                raise StorageFaultError("failed to upload file") from exc
            logger.error("Upload file failed for %s: %s", object_key, exc)
            raise InternalAssetError("failed to upload file") from exc
        finally:
            reader.close()

    async def _persist(self, asset: Asset) -> Asset:
        try:
            return await self._assets.create(asset)
        except CollaboratorError as exc:
            logger.error("Create asset record failed for %s: %s", asset.object_key, exc)
            raise InternalAssetError("failed to upload file") from exc

    async def _compensate_delete(self, object_key: str) -> None:
        try:
            await self._store.delete(object_key)
        except ObjectStoreError as exc:
            logger.error("Rollback delete of %s failed: %s", object_key, exc)
        else:
            logger.info("Rolled back object %s", object_key)


__all__ = ["SNIFF_BYTES", "UploadPipeline", "UploadResult", "sniff_content_type"]
