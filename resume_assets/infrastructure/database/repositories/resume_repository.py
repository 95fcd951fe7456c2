"""SQLAlchemy powered read access to resumes."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from resume_assets.infrastructure.database.models import Resume as ResumeModel
from resume_assets.modules.resumes.models import Resume


class SqlResumeRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, resume_id: int) -> Resume | None:
        stmt = select(ResumeModel).where(ResumeModel.id == resume_id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if model is None:
            return None
        return Resume(
            id=model.id,
            user_id=model.user_id,
            title=model.title or "",
            content=model.content or "",
            updated_at=model.updated_at,
        )
