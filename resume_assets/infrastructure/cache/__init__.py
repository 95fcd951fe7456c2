"""Counter store adapters."""

from .redis_counter import RedisRateCounter

__all__ = ["RedisRateCounter"]
