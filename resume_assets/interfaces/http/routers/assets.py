"""User asset endpoints: upload, listing, temporary links and deletion."""
from __future__ import annotations

import io
import os
from typing import BinaryIO, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile, status

from resume_assets.core.config import Settings, get_settings
from resume_assets.core.security import get_current_user_id
from resume_assets.interfaces.http.deps import get_asset_service, get_upload_pipeline
from resume_assets.modules.assets import AssetService, IncomingFile, UploadPipeline
from resume_assets.schemas import (
    AssetItemResponse,
    AssetListResponse,
    AssetStatsResponse,
    AssetUploadResponse,
    AssetUrlResponse,
    MessageResponse,
)

router = APIRouter()


def _measure(stream: BinaryIO) -> int:
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(0)
    return size


def incoming_file(upload: Optional[UploadFile]) -> Optional[IncomingFile]:
    """Wrap a multipart upload so every ``open()`` yields an independent stream."""
    if upload is None:
        return None
    source = upload.file
    size = upload.size if upload.size is not None else _measure(source)

    def opener() -> BinaryIO:
        source.seek(0)
        return io.BytesIO(source.read())

    return IncomingFile(
        filename=upload.filename,
        declared_content_type=upload.content_type,
        size=size,
        opener=opener,
    )


def _clamp_limit(raw: Optional[str], settings: Settings) -> int:
    default = settings.uploads.list_default_limit
    try:
        limit = int(raw) if raw is not None else default
    except ValueError:
        limit = default
    if limit <= 0:
        limit = default
    return min(limit, settings.uploads.list_max_limit)


@router.post(
    "/upload",
    response_model=AssetUploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload an image asset",
)
async def upload_asset(
    file: Optional[UploadFile] = File(default=None),
    user_id: int = Depends(get_current_user_id),
    pipeline: UploadPipeline = Depends(get_upload_pipeline),
) -> AssetUploadResponse:
    try:
        result = await pipeline.run(user_id, incoming_file(file))
    finally:
        if file is not None:
            await file.close()
    return AssetUploadResponse(object_key=result.object_key)


@router.get("", response_model=AssetListResponse, summary="List the caller's assets")
async def list_assets(
    limit: Optional[str] = Query(default=None),
    user_id: int = Depends(get_current_user_id),
    service: AssetService = Depends(get_asset_service),
    settings: Settings = Depends(get_settings),
) -> AssetListResponse:
    listing = await service.list_assets(user_id, _clamp_limit(limit, settings))
    return AssetListResponse(
        items=[
            AssetItemResponse(
                object_key=item.object_key,
                preview_url=item.preview_url,
                size=item.size,
                last_modified=item.last_modified,
            )
            for item in listing.items
        ],
        stats=AssetStatsResponse(
            asset_count=listing.stats.asset_count,
            max_assets=listing.stats.max_assets,
            today_uploads=listing.stats.today_uploads,
            max_uploads_per_day=listing.stats.max_uploads_per_day,
        ),
    )


@router.get("/view", response_model=AssetUrlResponse, summary="Get a temporary link to an asset")
async def view_asset(
    key: Optional[str] = Query(default=None),
    user_id: int = Depends(get_current_user_id),
    service: AssetService = Depends(get_asset_service),
) -> AssetUrlResponse:
    url = await service.view_url(user_id, key)
    return AssetUrlResponse(url=url)


@router.delete("", response_model=MessageResponse, summary="Delete an asset")
async def delete_asset(
    key: Optional[str] = Query(default=None),
    user_id: int = Depends(get_current_user_id),
    service: AssetService = Depends(get_asset_service),
) -> MessageResponse:
    await service.delete_asset(user_id, key)
    return MessageResponse(message="asset deleted")
