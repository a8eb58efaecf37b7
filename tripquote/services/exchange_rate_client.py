"""Exchange-rate API client: live rate tables with a shared Redis cache in front."""

import logging
from typing import Protocol

import httpx

from tripquote.config import settings
from tripquote.services.cache_service import CacheService, cache_service
from tripquote.services.errors import RateSourceError

logger = logging.getLogger(__name__)


class RateSource(Protocol):
    """Anything that can return ``{currency_code: rate}`` for a base currency."""

    async def fetch_rates(self, base_currency: str) -> dict[str, float]:
        ...


class ExchangeRateApiClient:
    """Adapter for the exchangerate-api.com ``/latest/{base}`` endpoint."""

    def __init__(
        self,
        base_url: str | None = None,
        cache: CacheService | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = base_url or settings.exchange_rate_api_base_url
        self._cache = cache or cache_service
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=settings.exchange_rate_timeout_seconds,
                transport=self._transport,
            )
        return self._client

    async def fetch_rates(self, base_currency: str) -> dict[str, float]:
        """Fetch the rate table for a base currency. Raises RateSourceError on failure."""
        base = base_currency.upper()

        cached = await self._cache.get_rates(base)
        if cached:
            logger.debug(f"Rate table cache hit for {base}")
            return cached

        try:
            client = await self._get_client()
            resp = await client.get(f"/{base}")
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise RateSourceError(f"Rate lookup for {base} failed: {e}") from e

        rates = data.get("rates") if isinstance(data, dict) else None
        if not isinstance(rates, dict) or not rates:
            raise RateSourceError(f"Rate payload for {base} has no rates")

        await self._cache.set_rates(base, rates)
        logger.info(f"Fetched {len(rates)} exchange rates for {base}")
        return rates

    async def close(self):
        if self._client:
            await self._client.aclose()
            self._client = None


class DisabledRateSource:
    """Rate source used when live lookups are switched off; always falls back."""

    async def fetch_rates(self, base_currency: str) -> dict[str, float]:
        raise RateSourceError("Live exchange rates are disabled")


def build_rate_source() -> RateSource:
    if settings.exchange_rate_api_enabled:
        return ExchangeRateApiClient()
    return DisabledRateSource()
