"""Repository protocol for resumes."""

from __future__ import annotations

from typing import Protocol

from .models import Resume


class ResumeRepository(Protocol):
    """Read-only access; resume persistence is owned elsewhere."""

    async def get_by_id(self, resume_id: int) -> Resume | None:
        ...
