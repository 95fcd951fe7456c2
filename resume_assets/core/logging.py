"""Logging setup with per-request correlation ids."""

from __future__ import annotations

import logging
from contextvars import ContextVar

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="-")

LOG_FORMAT = "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s"


def get_correlation_id() -> str:
    return _correlation_id.get()


def set_correlation_id(value: str):
    """Bind ``value`` to the current context; returns the token for ``reset``."""
    return _correlation_id.set(value)


def reset_correlation_id(token) -> None:
    _correlation_id.reset(token)


class CorrelationIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id()
        return True


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    for handler in root.handlers:
        if any(isinstance(f, CorrelationIdFilter) for f in handler.filters):
            root.setLevel(level.upper())
            return

    handler = logging.StreamHandler()
    handler.addFilter(CorrelationIdFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(level.upper())


__all__ = [
    "CorrelationIdFilter",
    "configure_logging",
    "get_correlation_id",
    "reset_correlation_id",
    "set_correlation_id",
]
