"""Test fixtures for the quote engine."""
from __future__ import annotations

import itertools
import os
from datetime import date
from decimal import Decimal

import pytest

os.environ.setdefault("EXCHANGE_RATE_API_ENABLED", "false")
os.environ.setdefault("REDIS_URL", "")

from tripquote.schemas.composition import ClientInfo, Preferences, TripDetails
from tripquote.schemas.money import ConvertedMoney
from tripquote.schemas.travelers import TripParty
from tripquote.services.currency_service import CurrencyService
from tripquote.services.errors import RateSourceError
from tripquote.services.quote_composition import QuoteComposition


class FakeRateSource:
    """Rate source returning fixed tables, optionally failing every call."""

    def __init__(self, tables: dict[str, dict[str, float]] | None = None, fail: bool = False):
        self.tables = tables or {}
        self.fail = fail
        self.calls: list[str] = []

    async def fetch_rates(self, base_currency: str) -> dict[str, float]:
        self.calls.append(base_currency)
        if self.fail:
            raise RateSourceError("source down")
        return self.tables.get(base_currency, {})


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture()
def rate_source() -> FakeRateSource:
    return FakeRateSource({
        "GBP": {"USD": 1.25, "EUR": 1.16},
        "USD": {"GBP": 0.79, "EUR": 0.92},
        "EUR": {"GBP": 0.86, "USD": 1.08},
    })


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def currency(rate_source: FakeRateSource, clock: FakeClock) -> CurrencyService:
    return CurrencyService(rate_source=rate_source, cache_ttl_seconds=300, default_spread=0.02, clock=clock)


@pytest.fixture()
def id_factory():
    counter = itertools.count(1)
    return lambda: f"g{next(counter)}"


@pytest.fixture()
def composition(id_factory) -> QuoteComposition:
    """A complete composition with no service categories enabled."""
    return QuoteComposition(
        client=ClientInfo(first_name="Ada", last_name="Lovelace", email="ada@example.com"),
        trip=TripDetails(
            primary_destination="Monaco",
            start_date=date(2025, 5, 22),
            end_date=date(2025, 5, 26),
            party=TripParty(total_adults=2, total_children=0),
        ),
        preferences=Preferences(tone="luxury", currency="GBP"),
        id_factory=id_factory,
    )


def gbp(amount: str) -> ConvertedMoney:
    value = Decimal(amount)
    return ConvertedMoney(
        amount=value,
        currency_code="GBP",
        original_amount=value,
        original_currency_code="GBP",
    )
