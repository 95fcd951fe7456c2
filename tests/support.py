"""In-memory collaborators and request helpers shared by the test suite."""

from __future__ import annotations

import asyncio
import io
from datetime import timedelta
from typing import AsyncIterator, BinaryIO, Optional

from jose import jwt

from resume_assets.modules.assets.exceptions import (
    MetadataStoreError,
    ObjectErrorKind,
    ObjectStoreError,
    RateCounterError,
    ScannerError,
)
from resume_assets.modules.assets.models import Asset, IncomingFile, ScanResult, StoredObject, UploadLimits

SECRET_KEY = "test-secret-key"
INTERNAL_SECRET = "worker-secret"

PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n"
    b"\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01\x08\x06\x00\x00\x00\x1f\x15\xc4\x89"
    b"\x00\x00\x00\x00IEND\xaeB`\x82"
)
JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00" + b"\x00" * 32
WEBP_BYTES = b"RIFF\x24\x00\x00\x00WEBPVP8 \x18\x00\x00\x00" + b"\x00" * 32
HTML_BYTES = b"<!DOCTYPE html><html><body>not an image</body></html>"


class FakeObjectStore:
    def __init__(self) -> None:
        self.objects: dict[str, tuple[bytes, Optional[str]]] = {}
        self.uploads: list[str] = []
        self.deleted: list[str] = []
        self.fetched: list[str] = []
        self.upload_error: Optional[ObjectStoreError] = None
        self.delete_error: Optional[ObjectStoreError] = None
        self.get_errors: dict[str, BaseException] = {}
        self.bucket_missing = False

    def put(self, key: str, data: bytes, content_type: Optional[str] = "image/png") -> None:
        self.objects[key] = (data, content_type)

    async def upload(self, key: str, reader: BinaryIO, size: int, content_type: str) -> None:
        if self.upload_error is not None:
            raise self.upload_error
        self.uploads.append(key)
        self.objects[key] = (reader.read(), content_type)

    async def get(self, key: str) -> StoredObject:
        self.fetched.append(key)
        if self.bucket_missing:
            raise ObjectStoreError("bucket does not exist", kind=ObjectErrorKind.NO_SUCH_BUCKET)
        if key in self.get_errors:
            raise self.get_errors[key]
        if key not in self.objects:
            raise ObjectStoreError(f"{key} does not exist", kind=ObjectErrorKind.NOT_FOUND)
        data, content_type = self.objects[key]
        return StoredObject(key=key, data=data, content_type=content_type, size=len(data))

    async def delete(self, key: str) -> None:
        if self.delete_error is not None:
            raise self.delete_error
        self.deleted.append(key)
        self.objects.pop(key, None)

    async def presigned_url(self, key: str, expires: timedelta) -> str:
        return f"https://assets.example.test/{key}?expires={int(expires.total_seconds())}"


class FakeRateCounter:
    def __init__(self) -> None:
        self.values: dict[str, int] = {}
        self.ttls: dict[str, timedelta] = {}
        self.expire_calls = 0
        self.fail = False

    async def incr(self, key: str) -> int:
        if self.fail:
            raise RateCounterError("counter unavailable")
        self.values[key] = self.values.get(key, 0) + 1
        return self.values[key]

    async def expire(self, key: str, ttl: timedelta) -> bool:
        self.expire_calls += 1
        self.ttls[key] = ttl
        return key in self.values

    async def get(self, key: str) -> Optional[str]:
        if self.fail:
            raise RateCounterError("counter unavailable")
        value = self.values.get(key)
        return None if value is None else str(value)


class FakeScanner:
    def __init__(self) -> None:
        self.status = "OK"
        self.signature: Optional[str] = None
        self.error: Optional[ScannerError] = None
        self.scanned: list[bytes] = []

    async def scan_stream(self, reader: BinaryIO, abort: asyncio.Event) -> AsyncIterator[ScanResult]:
        if self.error is not None:
            raise self.error
        self.scanned.append(reader.read())
        yield ScanResult(status=self.status, signature=self.signature)


class InMemoryAssetRepository:
    def __init__(self) -> None:
        self.rows: list[Asset] = []
        self.create_error: Optional[MetadataStoreError] = None
        self.count_error: Optional[MetadataStoreError] = None

    async def count_by_user(self, user_id: int) -> int:
        if self.count_error is not None:
            raise self.count_error
        return sum(1 for row in self.rows if row.user_id == user_id)

    async def list_by_user(self, user_id: int, limit: int) -> list[Asset]:
        return [row for row in reversed(self.rows) if row.user_id == user_id][:limit]

    async def create(self, asset: Asset) -> Asset:
        if self.create_error is not None:
            raise self.create_error
        asset.id = len(self.rows) + 1
        self.rows.append(asset)
        return asset

    async def find_by_user_and_key(self, user_id: int, object_key: str) -> Asset | None:
        for row in self.rows:
            if row.user_id == user_id and row.object_key == object_key:
                return row
        return None

    async def delete_by_id(self, asset_id: int) -> None:
        self.rows = [row for row in self.rows if row.id != asset_id]


def make_incoming(data: bytes, declared: str = "image/png", filename: str = "upload.png") -> IncomingFile:
    return IncomingFile(
        filename=filename,
        declared_content_type=declared,
        size=len(data),
        opener=lambda: io.BytesIO(data),
    )


def auth_headers(user_id: int) -> dict[str, str]:
    token = jwt.encode({"sub": str(user_id)}, SECRET_KEY, algorithm="HS256")
    return {"Authorization": f"Bearer {token}"}


def default_limits() -> UploadLimits:
    return UploadLimits(
        max_bytes=64 * 1024,
        mime_whitelist=("image/png", "image/jpeg", "image/webp"),
        max_assets_per_user=3,
        max_uploads_per_day=5,
    )
