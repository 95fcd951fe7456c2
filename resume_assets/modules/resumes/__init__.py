"""Resume domain exports."""

from .models import Resume
from .repository import ResumeRepository

__all__ = ["Resume", "ResumeRepository"]
