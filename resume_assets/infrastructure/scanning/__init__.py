"""Malware scanner adapters."""

from .clamav import ClamdScanner

__all__ = ["ClamdScanner"]
