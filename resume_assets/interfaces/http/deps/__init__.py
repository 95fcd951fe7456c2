"""Reusable FastAPI dependencies."""

from .assets import (
    get_asset_repository,
    get_asset_service,
    get_malware_scanner,
    get_object_store,
    get_quota_guard,
    get_rate_counter,
    get_upload_limits,
    get_upload_pipeline,
)
from .database import get_db_session
from .printing import get_print_assembler, get_print_service

__all__ = [
    "get_asset_repository",
    "get_asset_service",
    "get_db_session",
    "get_malware_scanner",
    "get_object_store",
    "get_print_assembler",
    "get_print_service",
    "get_quota_guard",
    "get_rate_counter",
    "get_upload_limits",
    "get_upload_pipeline",
]
