"""Shared Redis cache for exchange-rate tables, so workers reuse one lookup per base currency."""

import json
import logging

import redis.asyncio as redis
from redis.exceptions import RedisError

from tripquote.config import settings

logger = logging.getLogger(__name__)

RateTable = dict[str, float]


class CacheService:
    """Stores whole ``{code: rate}`` tables under ``rates:{BASE}``.

    An empty ``redis_url`` turns the cache off. The first connection failure
    also turns it off for the life of the process; callers then always miss.
    """

    def __init__(self, redis_url: str | None = None, ttl_seconds: int | None = None):
        self._url = settings.redis_url if redis_url is None else redis_url
        self._ttl = ttl_seconds or settings.rate_table_cache_ttl
        self._client: redis.Redis | None = None
        self.enabled = bool(self._url)

    async def _connect(self) -> redis.Redis | None:
        if not self.enabled:
            return None
        if self._client is not None:
            return self._client
        client = redis.from_url(self._url, encoding="utf-8", decode_responses=True)
        try:
            await client.ping()
        except (RedisError, OSError) as e:
            logger.warning(f"Redis at {self._url} unreachable, rate-table cache off: {e}")
            self.enabled = False
            await client.aclose()
            return None
        self._client = client
        return client

    @staticmethod
    def rates_key(base_currency: str) -> str:
        return f"rates:{base_currency.upper()}"

    async def get_rates(self, base_currency: str) -> RateTable | None:
        client = await self._connect()
        if client is None:
            return None
        try:
            raw = await client.get(self.rates_key(base_currency))
        except RedisError as e:
            logger.warning(f"Rate-table read failed for {base_currency}: {e}")
            return None
        if raw is None:
            return None
        try:
            table = json.loads(raw)
        except ValueError:
            logger.warning(f"Discarding corrupt rate table for {base_currency}")
            return None
        return table if isinstance(table, dict) else None

    async def set_rates(self, base_currency: str, rates: RateTable) -> bool:
        """Store a rate table; False when the cache is off or the write failed."""
        client = await self._connect()
        if client is None:
            return False
        try:
            await client.set(self.rates_key(base_currency), json.dumps(rates), ex=self._ttl)
        except RedisError as e:
            logger.warning(f"Rate-table write failed for {base_currency}: {e}")
            return False
        return True

    async def close(self):
        if self._client is not None:
            await self._client.aclose()
            self._client = None


cache_service = CacheService()
