"""Domain models for user image assets."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import BinaryIO, Callable, Optional


@dataclass(slots=True)
class Asset:
    user_id: int
    object_key: str
    content_type: str
    size: int
    id: Optional[int] = None
    created_at: Optional[datetime] = None


@dataclass(slots=True)
class StoredObject:
    """An object read back from the object store, body included."""

    key: str
    data: bytes
    content_type: Optional[str] = None
    size: int = 0


@dataclass(slots=True)
class ScanResult:
    status: str
    signature: Optional[str] = None

    @property
    def is_clean(self) -> bool:
        return self.status == "OK"


@dataclass(slots=True)
class IncomingFile:
    """A received upload.

    ``open`` returns a new, independent reader positioned at the start of the
    file on every call, so each pipeline stage reads from its own stream.
    """

    filename: Optional[str]
    declared_content_type: Optional[str]
    size: int
    opener: Callable[[], BinaryIO] = field(repr=False)

    def open(self) -> BinaryIO:
        return self.opener()


@dataclass(slots=True)
class UploadLimits:
    max_bytes: int
    mime_whitelist: tuple[str, ...]
    max_assets_per_user: int
    max_uploads_per_day: int


@dataclass(slots=True)
class AssetListItem:
    object_key: str
    preview_url: str
    size: int
    last_modified: Optional[datetime]


@dataclass(slots=True)
class AssetStats:
    asset_count: int
    max_assets: int
    today_uploads: int
    max_uploads_per_day: int


@dataclass(slots=True)
class AssetListing:
    items: list[AssetListItem]
    stats: AssetStats
