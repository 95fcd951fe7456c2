"""Data handed to the PDF render worker."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Optional


@dataclass(slots=True)
class PrintWarning:
    code: int
    message: str
    missing_keys: list[str] = field(default_factory=list)


@dataclass(slots=True)
class PrintData:
    # layout_settings and items stay top-level; the print view reads them directly.
    layout_settings: dict[str, Any] = field(default_factory=dict)
    items: list[dict[str, Any]] = field(default_factory=list)
    warnings: list[PrintWarning] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "layout_settings": self.layout_settings,
            "items": self.items,
            "warnings": [asdict(warning) for warning in self.warnings],
        }


@dataclass(slots=True)
class RemovedImageItem:
    item_id: str
    reason: str
    key: Optional[str] = None


@dataclass(slots=True)
class AssemblyResult:
    data: PrintData
    removed: list[RemovedImageItem] = field(default_factory=list)
