"""Pydantic schemas used across the project."""
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AssetUploadResponse(CamelModel):
    object_key: str


class AssetItemResponse(CamelModel):
    object_key: str
    preview_url: str
    size: int
    last_modified: Optional[datetime] = None


class AssetStatsResponse(CamelModel):
    asset_count: int
    max_assets: int
    today_uploads: int
    max_uploads_per_day: int


class AssetListResponse(BaseModel):
    items: list[AssetItemResponse]
    stats: AssetStatsResponse


class AssetUrlResponse(BaseModel):
    url: str


class MessageResponse(BaseModel):
    message: str


class PrintWarningResponse(BaseModel):
    code: int
    message: str
    missing_keys: list[str] = Field(default_factory=list)


class PrintDataResponse(BaseModel):
    layout_settings: dict[str, Any] = Field(default_factory=dict)
    items: list[dict[str, Any]] = Field(default_factory=list)
    warnings: list[PrintWarningResponse] = Field(default_factory=list)


class HealthResponse(BaseModel):
    status: str
    version: str


__all__ = [
    "AssetItemResponse",
    "AssetListResponse",
    "AssetStatsResponse",
    "AssetUploadResponse",
    "AssetUrlResponse",
    "HealthResponse",
    "MessageResponse",
    "PrintDataResponse",
    "PrintWarningResponse",
]
