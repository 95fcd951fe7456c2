"""Asset domain specific exceptions."""

from __future__ import annotations

import enum


class AssetError(Exception):
    """Base class for asset errors surfaced to HTTP callers.

    ``detail`` is the user-facing message; anything more specific belongs in
    the server log.
    """

    status_code = 500
    default_detail = "internal error"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class AssetValidationError(AssetError):
    """Raised when the request is malformed (missing file, missing key)."""

    status_code = 400
    default_detail = "invalid request"


class QuotaExceededError(AssetError):
    """Raised when the user already owns the maximum number of assets."""

    status_code = 403
    default_detail = "asset limit reached"


class RateLimitedError(AssetError):
    """Raised when the daily upload counter is over its limit."""

    status_code = 429
    default_detail = "rate limit exceeded"


class PayloadTooLargeError(AssetError):
    status_code = 413
    default_detail = "payload too large"


class MaliciousContentError(AssetError):
    """Raised on any non-clean scan verdict. Never carries scan internals."""

    status_code = 400
    default_detail = "malicious file detected"


class UnsupportedMediaTypeError(AssetError):
    status_code = 400
    default_detail = "unsupported media type"


class AccessDeniedError(AssetError):
    """Raised for invalid, foreign or unknown object keys alike."""

    status_code = 403
    default_detail = "access denied"


class StorageFaultError(AssetError):
    """Infrastructure misconfiguration, e.g. the bucket does not exist."""

    status_code = 500
    default_detail = "storage unavailable"


class InternalAssetError(AssetError):
    status_code = 500
    default_detail = "internal error"


class CollaboratorError(Exception):
    """Base class for failures reported by external collaborators."""


class MetadataStoreError(CollaboratorError):
    """Raised by metadata repositories when the database call fails."""


class RateCounterError(CollaboratorError):
    """Raised when the rate counter store cannot be reached."""


class ScannerError(CollaboratorError):
    """Raised when the malware scanner cannot produce a verdict."""


class ScanAborted(ScannerError):
    """Raised when a scan is stopped through its abort signal."""


class ObjectErrorKind(enum.Enum):
    NOT_FOUND = "not_found"
    NO_SUCH_BUCKET = "no_such_bucket"
    OTHER = "other"


class ObjectStoreError(CollaboratorError):
    """Typed object store failure; adapters classify backend errors into ``kind``."""

    def __init__(self, message: str, kind: ObjectErrorKind = ObjectErrorKind.OTHER) -> None:
        super().__init__(message)
        self.kind = kind

    @property
    def is_not_found(self) -> bool:
        return self.kind is ObjectErrorKind.NOT_FOUND

    @property
    def is_no_such_bucket(self) -> bool:
        return self.kind is ObjectErrorKind.NO_SUCH_BUCKET


def is_no_such_key(exc: BaseException | None) -> bool:
    return isinstance(exc, ObjectStoreError) and exc.is_not_found


def is_no_such_bucket(exc: BaseException | None) -> bool:
    return isinstance(exc, ObjectStoreError) and exc.is_no_such_bucket


__all__ = [
    "AccessDeniedError",
    "AssetError",
    "AssetValidationError",
    "CollaboratorError",
    "InternalAssetError",
    "MaliciousContentError",
    "MetadataStoreError",
    "ObjectErrorKind",
    "ObjectStoreError",
    "PayloadTooLargeError",
    "QuotaExceededError",
    "RateCounterError",
    "RateLimitedError",
    "ScanAborted",
    "ScannerError",
    "StorageFaultError",
    "UnsupportedMediaTypeError",
    "is_no_such_bucket",
    "is_no_such_key",
]
