"""Tests for the live exchange-rate client and its Redis cache."""

import httpx
import pytest

from tripquote.services.cache_service import CacheService
from tripquote.services.errors import RateSourceError
from tripquote.services.exchange_rate_client import DisabledRateSource, ExchangeRateApiClient

pytestmark = pytest.mark.asyncio

BASE_URL = "https://rates.test/v4/latest"


class MemoryCache:
    def __init__(self, tables=None):
        self.tables = dict(tables or {})

    async def get_rates(self, base_currency):
        return self.tables.get(base_currency)

    async def set_rates(self, base_currency, rates):
        self.tables[base_currency] = rates


def _client(handler, cache=None) -> ExchangeRateApiClient:
    return ExchangeRateApiClient(
        base_url=BASE_URL,
        cache=cache or MemoryCache(),
        transport=httpx.MockTransport(handler),
    )


async def test_fetch_rates_reads_rate_table():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        return httpx.Response(200, json={"base": "GBP", "rates": {"USD": 1.27, "EUR": 1.17}})

    cache = MemoryCache()
    client = _client(handler, cache)
    rates = await client.fetch_rates("gbp")
    await client.close()

    assert rates == {"USD": 1.27, "EUR": 1.17}
    assert seen == ["/v4/latest/GBP"]
    assert cache.tables["GBP"] == rates


async def test_cached_table_skips_http():
    def handler(request):
        raise AssertionError("should not be called")

    client = _client(handler, MemoryCache({"USD": {"GBP": 0.79}}))
    assert await client.fetch_rates("USD") == {"GBP": 0.79}


async def test_http_error_becomes_rate_source_error():
    client = _client(lambda request: httpx.Response(503))
    with pytest.raises(RateSourceError):
        await client.fetch_rates("GBP")


async def test_transport_failure_becomes_rate_source_error():
    def handler(request):
        raise httpx.ConnectError("boom", request=request)

    with pytest.raises(RateSourceError):
        await _client(handler).fetch_rates("GBP")


@pytest.mark.parametrize("body", [{"result": "error"}, {"rates": {}}, ["not", "a", "table"]])
async def test_payload_without_rates_is_rejected(body):
    client = _client(lambda request: httpx.Response(200, json=body))
    with pytest.raises(RateSourceError):
        await client.fetch_rates("GBP")


async def test_non_json_payload_is_rejected():
    client = _client(lambda request: httpx.Response(200, text="<html>"))
    with pytest.raises(RateSourceError):
        await client.fetch_rates("GBP")


async def test_disabled_source_always_fails():
    with pytest.raises(RateSourceError):
        await DisabledRateSource().fetch_rates("GBP")


async def test_cache_without_redis_url_is_a_no_op():
    cache = CacheService(redis_url="")
    assert not cache.enabled
    assert await cache.set_rates("GBP", {"USD": 1.27}) is False
    assert await cache.get_rates("GBP") is None
    assert cache.rates_key("gbp") == "rates:GBP"
