"""Print data assembly exports."""

from .assembler import PrintAssembler
from .exceptions import BucketMissingError, PrintAssemblyError, PrintError, ResumeNotFoundError
from .models import AssemblyResult, PrintData, PrintWarning, RemovedImageItem
from .service import PrintService

__all__ = [
    "AssemblyResult",
    "BucketMissingError",
    "PrintAssembler",
    "PrintAssemblyError",
    "PrintData",
    "PrintError",
    "PrintService",
    "PrintWarning",
    "RemovedImageItem",
    "ResumeNotFoundError",
]
