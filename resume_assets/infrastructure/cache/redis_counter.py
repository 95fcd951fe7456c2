"""Redis backed counters used for upload rate limiting."""

from __future__ import annotations

from datetime import timedelta
from typing import Optional

from redis import asyncio as redis_async
from redis.exceptions import RedisError

from resume_assets.modules.assets.exceptions import RateCounterError


class RedisRateCounter:
    """Thin async wrapper around Redis ``INCR``/``EXPIRE``/``GET``."""

    def __init__(self, url: str, client: Optional[redis_async.Redis] = None) -> None:
        self._redis = client or redis_async.from_url(
            url,
            encoding="utf-8",
            decode_responses=True,
        )

    async def incr(self, key: str) -> int:
        try:
            return int(await self._redis.incr(key))
        except RedisError as exc:
            raise RateCounterError(f"incr {key}: {exc}") from exc

    async def expire(self, key: str, ttl: timedelta) -> bool:
        try:
            return bool(await self._redis.expire(key, ttl))
        except RedisError as exc:
            raise RateCounterError(f"expire {key}: {exc}") from exc

    async def get(self, key: str) -> Optional[str]:
        try:
            return await self._redis.get(key)
        except RedisError as exc:
            raise RateCounterError(f"get {key}: {exc}") from exc

    async def close(self) -> None:
        await self._redis.aclose()
