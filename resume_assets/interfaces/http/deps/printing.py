"""Print data dependency providers."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from resume_assets.infrastructure.database.repositories import SqlResumeRepository
from resume_assets.modules.assets.repository import ObjectStore
from resume_assets.modules.printing import PrintAssembler, PrintService

from .assets import get_object_store
from .database import get_db_session


def get_print_assembler(store: ObjectStore = Depends(get_object_store)) -> PrintAssembler:
    return PrintAssembler(store)


def get_print_service(
    db: AsyncSession = Depends(get_db_session),
    assembler: PrintAssembler = Depends(get_print_assembler),
) -> PrintService:
    return PrintService(resumes=SqlResumeRepository(db), assembler=assembler)


__all__ = ["get_print_assembler", "get_print_service"]
