"""Domain models for resumes as seen by the print endpoint."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(slots=True)
class Resume:
    id: int
    user_id: int
    title: str
    content: str
    updated_at: Optional[datetime] = None
