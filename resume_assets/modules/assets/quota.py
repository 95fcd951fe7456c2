"""Per-user asset count and daily upload counters."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta, timezone

from .exceptions import RateCounterError
from .repository import AssetRepository, RateCounter

logger = logging.getLogger(__name__)

DAILY_COUNTER_TTL = timedelta(hours=24)


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def daily_upload_key(user_id: int, day: date) -> str:
    return f"rate:upload:day:{user_id}:{day.strftime('%Y%m%d')}"


class QuotaGuard:
    """Reads asset counts and bumps the daily upload counter.

    Both operations return raw numbers; comparing them against the configured
    limits is the caller's job. Collaborator failures propagate unchanged.
    """

    def __init__(
        self,
        assets: AssetRepository,
        counter: RateCounter,
        *,
        counter_ttl: timedelta = DAILY_COUNTER_TTL,
    ) -> None:
        self._assets = assets
        self._counter = counter
        self._counter_ttl = counter_ttl

    async def check_asset_count(self, user_id: int) -> int:
        return await self._assets.count_by_user(user_id)

    async def increment_daily_upload(self, user_id: int, day: date | None = None) -> int:
        """Increment today's counter and return the post-increment value.

        The increment is unconditional: an attempt that ends up rejected for
        being over the limit still consumes one unit.
        """
        key = daily_upload_key(user_id, day or utc_today())
        count = await self._counter.incr(key)
        if count == 1:
            # A crash before this line leaves a key without TTL; the next
            # day uses a fresh key.
            try:
                await self._counter.expire(key, self._counter_ttl)
            except RateCounterError as exc:
                logger.warning("Failed to set TTL on %s: %s", key, exc)
        return count

    async def daily_uploads(self, user_id: int, day: date | None = None) -> int:
        """Current value of the daily counter, ``0`` when absent or unreadable."""
        key = daily_upload_key(user_id, day or utc_today())
        try:
            raw = await self._counter.get(key)
        except RateCounterError as exc:
            logger.warning("Failed to read upload counter %s: %s", key, exc)
            return 0
        if raw is None:
            return 0
        try:
            return int(str(raw).strip())
        except ValueError:
            return 0


__all__ = ["DAILY_COUNTER_TTL", "QuotaGuard", "daily_upload_key", "utc_today"]
