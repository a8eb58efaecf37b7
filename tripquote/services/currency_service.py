"""Currency conversion service: cached live rates, static fallback, FX spread."""

import logging
import time
from decimal import Decimal
from typing import Callable

from tripquote.config import settings
from tripquote.data.currency import fallback_rate, round2
from tripquote.schemas.money import ConvertedMoney, Money
from tripquote.services.errors import RateSourceError
from tripquote.services.exchange_rate_client import RateSource, build_rate_source

logger = logging.getLogger(__name__)


def _as_decimal(value: Decimal | float | int | str) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class CurrencyService:
    """Converts amounts between currencies with a configurable spread.

    Rates come from an injected async ``RateSource`` and are cached per
    ``(from, to)`` pair. When the source fails the static fallback table is
    consulted; when that has no entry either, the amount is returned
    unconverted rather than raising.
    """

    def __init__(
        self,
        rate_source: RateSource | None = None,
        cache_ttl_seconds: float | None = None,
        default_spread: float | Decimal | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._source = rate_source or build_rate_source()
        self._ttl = settings.rate_cache_ttl_seconds if cache_ttl_seconds is None else cache_ttl_seconds
        self._default_spread = _as_decimal(settings.fx_spread if default_spread is None else default_spread)
        self._clock = clock
        self._cache: dict[tuple[str, str], tuple[Decimal, float]] = {}

    @property
    def default_spread(self) -> Decimal:
        return self._default_spread

    def _spread(self, spread: float | Decimal | None) -> Decimal:
        value = self._default_spread if spread is None else _as_decimal(spread)
        if value < 0:
            raise ValueError("Spread must not be negative")
        return value

    async def get_rate(self, from_currency: str, to_currency: str) -> Decimal | None:
        """Rate for one unit of ``from_currency`` in ``to_currency``, or None if unknown."""
        pair = (from_currency.upper(), to_currency.upper())
        if pair[0] == pair[1]:
            return Decimal("1")

        cached = self._cache.get(pair)
        if cached and self._clock() - cached[1] < self._ttl:
            return cached[0]

        rate: Decimal | None = None
        try:
            rates = await self._source.fetch_rates(pair[0])
            raw = rates.get(pair[1])
            if raw is not None:
                rate = _as_decimal(raw)
        except RateSourceError as e:
            logger.warning(f"Rate source failed for {pair[0]}->{pair[1]}: {e}")
        except Exception as e:
            logger.warning(f"Unusable rate from source for {pair[0]}->{pair[1]}: {e!r}")

        if rate is not None and not (rate.is_finite() and rate > 0):
            logger.warning(f"Ignoring invalid rate {rate} for {pair[0]}->{pair[1]}")
            rate = None

        if rate is None:
            rate = fallback_rate(*pair)
            if rate is None:
                return None
            logger.info(f"Using static fallback rate for {pair[0]}->{pair[1]}")

        self._cache[pair] = (rate, self._clock())
        return rate

    async def convert(
        self,
        amount: Decimal | float | int | str,
        from_currency: str,
        to_currency: str,
        spread: float | Decimal | None = None,
    ) -> Decimal:
        """Convert an amount, rounded to 2 decimals. Identity when currencies match."""
        if from_currency.upper() == to_currency.upper():
            return amount
        converted = await self.convert_money(
            Money(amount=_as_decimal(amount), currency_code=from_currency),
            to_currency,
            spread,
        )
        return converted.amount

    async def convert_money(
        self,
        money: Money,
        to_currency: str,
        spread: float | Decimal | None = None,
    ) -> ConvertedMoney:
        """Convert ``money`` into a snapshot carrying the original price."""
        target = to_currency.upper()
        if money.currency_code == target:
            return ConvertedMoney.identity(money)

        applied_spread = self._spread(spread)
        rate = await self.get_rate(money.currency_code, target)
        if rate is None:
            logger.warning(
                f"No rate for {money.currency_code}->{target}; price left unconverted"
            )
            return ConvertedMoney(
                amount=money.amount,
                currency_code=money.currency_code,
                original_amount=money.amount,
                original_currency_code=money.currency_code,
                unconverted=True,
            )

        return ConvertedMoney(
            amount=round2(money.amount * rate * (1 + applied_spread)),
            currency_code=target,
            original_amount=money.amount,
            original_currency_code=money.currency_code,
            spread_applied=applied_spread,
        )

    def clear_cache(self):
        self._cache.clear()

    async def close(self):
        close = getattr(self._source, "close", None)
        if close:
            await close()


currency_service = CurrencyService()
