"""Application service producing print data for the render worker."""

from __future__ import annotations

from dataclasses import dataclass

from resume_assets.modules.resumes import ResumeRepository

from .assembler import PrintAssembler, log_removed_items
from .exceptions import ResumeNotFoundError
from .models import PrintData


@dataclass(slots=True)
class PrintService:
    resumes: ResumeRepository
    assembler: PrintAssembler

    async def resume_print_data(self, resume_id: int) -> PrintData:
        resume = await self.resumes.get_by_id(resume_id)
        if resume is None:
            raise ResumeNotFoundError(f"resume {resume_id} not found")

        result = await self.assembler.assemble(resume.content, resume.user_id)
        if result.removed:
            log_removed_items(result.removed, resume_id=resume_id)
        return result.data
