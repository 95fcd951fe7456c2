"""Resolve image references in resume content into inline data URIs.

Image items hold object keys while a resume is edited. Before rendering, each
key is fetched and replaced with a ``data:`` URI. Per-item faults (empty or
malformed content, a key the owner may not use, an object that no longer
exists) drop that item and are reported through a single ``PrintWarning``.
A missing bucket or any other storage failure aborts the whole assembly:
those are infrastructure faults, not data issues, and must not be masked as a
few missing images.
"""

from __future__ import annotations

import base64
import json
import logging
from typing import Any, Iterable

from resume_assets.core import errcodes
from resume_assets.modules.assets.exceptions import ObjectStoreError, is_no_such_bucket, is_no_such_key
from resume_assets.modules.assets.keys import ObjectKeyAuthorizer
from resume_assets.modules.assets.repository import ObjectStore

from .exceptions import BucketMissingError, PrintAssemblyError
from .models import AssemblyResult, PrintData, PrintWarning, RemovedImageItem

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_CONTENT_TYPE = "image/png"
MISSING_IMAGES_MESSAGE = "Some images are missing or invalid and were skipped."

REASON_EMPTY_CONTENT = "empty content"
REASON_INVALID_CONTENT = "invalid content type"
REASON_INVALID_KEY = "invalid object key format"
REASON_NOT_FOUND = "object not found"


def _item_string(item: dict[str, Any], field: str) -> str:
    value = item.get(field)
    return value if isinstance(value, str) else ""


def _normalize_content(item: dict[str, Any]) -> None:
    raw = item.get("content")
    if raw is None:
        item["content"] = ""
    elif not isinstance(raw, str):
        item["content"] = json.dumps(raw) if isinstance(raw, (dict, list, bool)) else str(raw)


def _unique_keys(removed: Iterable[RemovedImageItem]) -> list[str]:
    seen: set[str] = set()
    keys: list[str] = []
    for entry in removed:
        key = (entry.key or "").strip()
        if not key or key in seen:
            continue
        seen.add(key)
        keys.append(key)
    return keys


def decode_content(raw: str | bytes | dict[str, Any]) -> tuple[dict[str, Any], list[dict[str, Any]]]:
    """Split stored resume content into layout settings and item objects."""
    if isinstance(raw, dict):
        document = raw
    else:
        try:
            document = json.loads(raw or "{}")
        except (TypeError, ValueError) as exc:
            raise PrintAssemblyError(f"failed to decode print data: {exc}") from exc
    if not isinstance(document, dict):
        raise PrintAssemblyError("failed to decode print data: document is not an object")

    layout = document.get("layout_settings", document.get("layoutSettings")) or {}
    items = document.get("items") or []
    if not isinstance(layout, dict) or not isinstance(items, list):
        raise PrintAssemblyError("failed to decode print data: unexpected layout or items")
    if any(not isinstance(item, dict) for item in items):
        raise PrintAssemblyError("failed to decode print data: items must be objects")
    return layout, items


class PrintAssembler:
    """Builds render-ready print data for a resume owned by ``owner_id``.

    Images are resolved one at a time. A cancelled request propagates out of
    the current fetch and no partial result is returned.
    """

    def __init__(self, store: ObjectStore, authorizer: ObjectKeyAuthorizer | None = None) -> None:
        self._store = store
        self._authorizer = authorizer or ObjectKeyAuthorizer()

    async def assemble(self, raw: str | bytes | dict[str, Any], owner_id: int) -> AssemblyResult:
        layout, items = decode_content(raw)

        filtered: list[dict[str, Any]] = []
        removed: list[RemovedImageItem] = []

        for item in items:
            item_type = _item_string(item, "type").strip()
            item_id = _item_string(item, "id").strip()

            if item_type != "image":
                _normalize_content(item)
                filtered.append(item)
                continue

            raw_content = item.get("content")
            if raw_content is None:
                removed.append(RemovedImageItem(item_id=item_id, reason=REASON_EMPTY_CONTENT))
                continue
            if not isinstance(raw_content, str):
                removed.append(RemovedImageItem(item_id=item_id, reason=REASON_INVALID_CONTENT))
                continue

            object_key = raw_content.strip()
            if not object_key:
                removed.append(RemovedImageItem(item_id=item_id, reason=REASON_EMPTY_CONTENT))
                continue

            if not self._authorizer.validate(owner_id, object_key):
                removed.append(
                    RemovedImageItem(item_id=item_id, key=object_key, reason=REASON_INVALID_KEY)
                )
                continue

            try:
                stored = await self._store.get(object_key)
            except ObjectStoreError as exc:
                if is_no_such_bucket(exc):
                    logger.error("Object store bucket is missing while fetching %s: %s", object_key, exc)
                    raise BucketMissingError(f"bucket does not exist: {exc}") from exc
                if is_no_such_key(exc):
                    removed.append(
                        RemovedImageItem(item_id=item_id, key=object_key, reason=REASON_NOT_FOUND)
                    )
                    continue
                raise PrintAssemblyError(f"failed to fetch image {object_key}: {exc}") from exc

            content_type = (stored.content_type or "").strip() or DEFAULT_IMAGE_CONTENT_TYPE
            encoded = base64.b64encode(stored.data).decode("ascii")
            item["content"] = f"data:{content_type};base64,{encoded}"
            filtered.append(item)

        data = PrintData(layout_settings=layout, items=filtered)
        if removed:
            data.warnings.append(
                PrintWarning(
                    code=errcodes.RESOURCE_MISSING,
                    message=MISSING_IMAGES_MESSAGE,
                    missing_keys=_unique_keys(removed),
                )
            )
        return AssemblyResult(data=data, removed=removed)


def log_removed_items(removed: Iterable[RemovedImageItem], *, resume_id: Any = None) -> None:
    for entry in removed:
        logger.warning(
            "Print image item removed: resume=%s item=%s key=%s reason=%s",
            resume_id,
            entry.item_id,
            entry.key,
            entry.reason,
        )


__all__ = [
    "DEFAULT_IMAGE_CONTENT_TYPE",
    "PrintAssembler",
    "decode_content",
    "log_removed_items",
]
