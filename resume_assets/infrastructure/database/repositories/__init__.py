"""SQLAlchemy repository implementations."""

from .asset_repository import SqlAssetRepository
from .resume_repository import SqlResumeRepository

__all__ = ["SqlAssetRepository", "SqlResumeRepository"]
