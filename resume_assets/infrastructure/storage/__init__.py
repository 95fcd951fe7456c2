"""Object storage adapters."""

from .minio_store import MinioObjectStore, classify_s3_error

__all__ = ["MinioObjectStore", "classify_s3_error"]
