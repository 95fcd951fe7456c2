"""MinIO backed object store for user assets."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import BinaryIO
from urllib.parse import urlparse

import urllib3
from minio import Minio
from minio.error import MinioException, S3Error
from starlette.concurrency import run_in_threadpool

from resume_assets.core.config import MinioSettings
from resume_assets.modules.assets.exceptions import ObjectErrorKind, ObjectStoreError, is_no_such_key
from resume_assets.modules.assets.models import StoredObject

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {"nosuchkey", "notfound", "nosuchobject"}
_NO_SUCH_BUCKET_CODES = {"nosuchbucket"}
_TRANSPORT_ERRORS = (MinioException, urllib3.exceptions.HTTPError, OSError)


def classify_s3_error(exc: S3Error) -> ObjectErrorKind:
    code = (exc.code or "").strip().lower()
    if code in _NO_SUCH_BUCKET_CODES:
        return ObjectErrorKind.NO_SUCH_BUCKET
    if code in _NOT_FOUND_CODES:
        return ObjectErrorKind.NOT_FOUND
    return ObjectErrorKind.OTHER


def _wrap(action: str, key: str, exc: Exception) -> ObjectStoreError:
    kind = classify_s3_error(exc) if isinstance(exc, S3Error) else ObjectErrorKind.OTHER
    return ObjectStoreError(f"{action} {key!r}: {exc}", kind=kind)


class MinioObjectStore:
    """Private bucket access through an internal client.

    Presigned links are signed by a second client bound to the public
    endpoint so that browsers receive URLs they can actually reach.
    """

    def __init__(self, settings: MinioSettings) -> None:
        self.bucket_name = settings.bucket
        self.region = settings.region
        self.auto_create_bucket = settings.auto_create_bucket
        self.client = Minio(
            settings.endpoint,
            access_key=settings.access_key,
            secret_key=settings.secret_key,
            secure=settings.use_ssl,
            region=settings.region,
        )
        public = urlparse(settings.public_endpoint)
        if not public.netloc:
            raise ValueError("invalid minio public endpoint, host missing")
        self.public_client = Minio(
            public.netloc,
            access_key=settings.access_key,
            secret_key=settings.secret_key,
            secure=public.scheme == "https",
            region=settings.region,
        )

    async def ensure_bucket(self) -> None:
        await run_in_threadpool(self._ensure_bucket)

    def _ensure_bucket(self) -> None:
        try:
            if self.client.bucket_exists(self.bucket_name):
                return
            if not self.auto_create_bucket:
                raise ObjectStoreError(
                    f"bucket {self.bucket_name!r} does not exist (auto create disabled)",
                    kind=ObjectErrorKind.NO_SUCH_BUCKET,
                )
            self.client.make_bucket(self.bucket_name, location=self.region)
            logger.info("Created bucket %s", self.bucket_name)
        except _TRANSPORT_ERRORS as exc:
            raise _wrap("ensure bucket", self.bucket_name, exc) from exc

    async def upload(self, key: str, reader: BinaryIO, size: int, content_type: str) -> None:
        await run_in_threadpool(self._upload, key, reader, size, content_type)

    def _upload(self, key: str, reader: BinaryIO, size: int, content_type: str) -> None:
        try:
            self.client.put_object(self.bucket_name, key, reader, size, content_type=content_type)
        except _TRANSPORT_ERRORS as exc:
            raise _wrap("put object", key, exc) from exc

    async def get(self, key: str) -> StoredObject:
        return await run_in_threadpool(self._get, key)

    def _get(self, key: str) -> StoredObject:
        response = None
        try:
            response = self.client.get_object(self.bucket_name, key)
            data = response.read()
            content_type = response.headers.get("Content-Type")
        except _TRANSPORT_ERRORS as exc:
            raise _wrap("get object", key, exc) from exc
        finally:
            if response is not None:
                response.close()
                response.release_conn()
        return StoredObject(key=key, data=data, content_type=content_type, size=len(data))

    async def delete(self, key: str) -> None:
        await run_in_threadpool(self._delete, key)

    def _delete(self, key: str) -> None:
        key = key.strip()
        if not key:
            return
        try:
            self.client.remove_object(self.bucket_name, key)
        except _TRANSPORT_ERRORS as exc:
            error = _wrap("remove object", key, exc)
            if is_no_such_key(error):
                return
            raise error from exc

    async def presigned_url(self, key: str, expires: timedelta) -> str:
        return await run_in_threadpool(self._presigned_url, key, expires)

    def _presigned_url(self, key: str, expires: timedelta) -> str:
        try:
            return self.public_client.presigned_get_object(self.bucket_name, key, expires=expires)
        except _TRANSPORT_ERRORS as exc:
            raise _wrap("presign", key, exc) from exc


__all__ = ["MinioObjectStore", "classify_s3_error"]
