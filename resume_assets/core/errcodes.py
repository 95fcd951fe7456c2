"""Stable error codes shared with the render worker and the editor UI.

``4xxx`` codes mark recoverable business faults: the flow continues, degraded.
"""

RESOURCE_MISSING = 4004

__all__ = ["RESOURCE_MISSING"]
