"""SQLAlchemy powered repository for asset metadata."""

from __future__ import annotations

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from resume_assets.infrastructure.database.models import Asset as AssetModel
from resume_assets.modules.assets.exceptions import MetadataStoreError
from resume_assets.modules.assets.models import Asset


class SqlAssetRepository:
    """Asset rows keyed by owner and object key.

    ``create`` and ``delete_by_id`` commit immediately: each is a single-row
    write that must be durable before the caller moves on.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def count_by_user(self, user_id: int) -> int:
        stmt = select(func.count(AssetModel.id)).where(AssetModel.user_id == user_id)
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            raise MetadataStoreError(f"count assets: {exc}") from exc
        return int(result.scalar() or 0)

    async def list_by_user(self, user_id: int, limit: int) -> list[Asset]:
        stmt = (
            select(AssetModel)
            .where(AssetModel.user_id == user_id)
            .order_by(AssetModel.created_at.desc(), AssetModel.id.desc())
            .limit(limit)
        )
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            raise MetadataStoreError(f"list assets: {exc}") from exc
        return [self._to_domain(model) for model in result.scalars().all()]

    async def create(self, asset: Asset) -> Asset:
        model = AssetModel(
            user_id=asset.user_id,
            object_key=asset.object_key,
            content_type=asset.content_type,
            size=asset.size,
        )
        try:
            self._session.add(model)
            await self._session.flush()
            await self._session.refresh(model)
            created = self._to_domain(model)
            # Nothing may fail after the commit: callers compensate on error.
            await self._session.commit()
        except SQLAlchemyError as exc:
            await self._session.rollback()
            raise MetadataStoreError(f"create asset {asset.object_key}: {exc}") from exc
        return created

    async def find_by_user_and_key(self, user_id: int, object_key: str) -> Asset | None:
        stmt = select(AssetModel).where(
            AssetModel.user_id == user_id,
            AssetModel.object_key == object_key,
        )
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            raise MetadataStoreError(f"find asset {object_key}: {exc}") from exc
        model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    async def delete_by_id(self, asset_id: int) -> None:
        stmt = delete(AssetModel).where(AssetModel.id == asset_id)
        try:
            await self._session.execute(stmt)
            await self._session.commit()
        except SQLAlchemyError as exc:
            await self._session.rollback()
            raise MetadataStoreError(f"delete asset {asset_id}: {exc}") from exc

    @staticmethod
    def _to_domain(model: AssetModel) -> Asset:
        return Asset(
            id=model.id,
            user_id=model.user_id,
            object_key=model.object_key,
            content_type=model.content_type,
            size=model.size,
            created_at=model.created_at,
        )
