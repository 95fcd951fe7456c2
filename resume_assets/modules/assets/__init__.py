"""User image asset domain exports."""

from .keys import ObjectKeyAuthorizer
from .models import Asset, IncomingFile, StoredObject, UploadLimits
from .pipeline import UploadPipeline, UploadResult
from .quota import QuotaGuard
from .service import AssetService

__all__ = [
    "Asset",
    "AssetService",
    "IncomingFile",
    "ObjectKeyAuthorizer",
    "QuotaGuard",
    "StoredObject",
    "UploadLimits",
    "UploadPipeline",
    "UploadResult",
]
