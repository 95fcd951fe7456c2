"""Protocols for the collaborators consumed by the asset domain."""

from __future__ import annotations

import asyncio
from datetime import timedelta
from typing import AsyncIterator, BinaryIO, Protocol, Sequence

from .models import Asset, ScanResult, StoredObject


class AssetRepository(Protocol):
    """Metadata store for asset rows."""

    async def count_by_user(self, user_id: int) -> int:
        ...

    async def list_by_user(self, user_id: int, limit: int) -> Sequence[Asset]:
        ...

    async def create(self, asset: Asset) -> Asset:
        ...

    async def find_by_user_and_key(self, user_id: int, object_key: str) -> Asset | None:
        ...

    async def delete_by_id(self, asset_id: int) -> None:
        ...


class ObjectStore(Protocol):
    """Blob storage. Failures are raised as ``ObjectStoreError``."""

    async def upload(self, key: str, reader: BinaryIO, size: int, content_type: str) -> None:
        ...

    async def get(self, key: str) -> StoredObject:
        ...

    async def delete(self, key: str) -> None:
        """Remove ``key``; removing a missing key succeeds."""
        ...

    async def presigned_url(self, key: str, expires: timedelta) -> str:
        ...


class RateCounter(Protocol):
    async def incr(self, key: str) -> int:
        ...

    async def expire(self, key: str, ttl: timedelta) -> bool:
        ...

    async def get(self, key: str) -> str | None:
        ...


class MalwareScanner(Protocol):
    def scan_stream(self, reader: BinaryIO, abort: asyncio.Event) -> AsyncIterator[ScanResult]:
        ...
