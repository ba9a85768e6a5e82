"""Price and exchange-rate lookups with per-feed fallbacks."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Awaitable, Callable, Sequence

from app.config import AppSettings
from app.providers.base import QuoteClient
from app.providers.exchange_rate import ExchangeRateClient, ExchangeRateError
from app.providers.naver import NaverQuoteClient
from app.providers.yahoo import YahooChartClient
from portfolio_dashboard.config import get_fallback_exchange_rate
from portfolio_dashboard.models import Currency, PriceMap, RawHolding

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExchangeRateQuote:
    rate: float
    timestamp: datetime
    fallback: bool = False


def partition_identifiers(holdings: Sequence[RawHolding]) -> dict[Currency, list[str]]:
    """Split instrument identifiers by native currency, de-duplicated in first-seen order."""

    partitions: dict[Currency, list[str]] = {currency: [] for currency in Currency}
    for holding in holdings:
        bucket = partitions[holding.currency]
        if holding.identifier not in bucket:
            bucket.append(holding.identifier)
    return partitions


class PriceService:
    """Resolve quotes for a set of holdings plus the current USD/KRW rate."""

    def __init__(
        self,
        domestic: QuoteClient,
        foreign: QuoteClient,
        rates: ExchangeRateClient,
        *,
        fallback_rate: float | None = None,
        cache_ttl_seconds: float = 0.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.domestic = domestic
        self.foreign = foreign
        self.rates = rates
        self.fallback_rate = fallback_rate if fallback_rate is not None else get_fallback_exchange_rate()
        self._cache_ttl = cache_ttl_seconds
        self._clock = clock
        self._cached_rate: tuple[float, ExchangeRateQuote] | None = None

    async def aclose(self) -> None:
        await asyncio.gather(self.domestic.aclose(), self.foreign.aclose(), self.rates.aclose())

    async def fetch_prices(self, holdings: Sequence[RawHolding]) -> PriceMap:
        """Return a quote (or ``None``) for every identifier in ``holdings``."""

        partitions = partition_identifiers(holdings)
        lookups: list[tuple[str, Awaitable[PriceMap]]] = []
        if partitions[Currency.KRW]:
            lookups.append(("domestic", self.domestic.fetch_quotes(partitions[Currency.KRW])))
        if partitions[Currency.USD]:
            lookups.append(("foreign", self.foreign.fetch_quotes(partitions[Currency.USD])))

        results = await asyncio.gather(*(lookup for _, lookup in lookups), return_exceptions=True)
        price_map: PriceMap = {}
        for (label, _), result in zip(lookups, results):
            if isinstance(result, Exception):
                logger.error("Failed to resolve %s quotes: %s", label, result)
                continue
            if isinstance(result, BaseException):
                raise result
            price_map.update(result)
        missing = [key for key, quote in price_map.items() if quote is None]
        if missing:
            logger.warning("Quotes unavailable for %s", ", ".join(missing))
        return price_map

    async def fetch_exchange_rate(self) -> ExchangeRateQuote:
        """Return the live rate, or the fallback rate when the lookup fails."""

        now = self._clock()
        if self._cached_rate is not None and self._cache_ttl > 0:
            fetched_at, cached = self._cached_rate
            if now - fetched_at < self._cache_ttl:
                return cached

        try:
            rate = await self.rates.latest_rate()
        except ExchangeRateError as exc:
            logger.warning("Exchange rate lookup failed, using fallback %s: %s", self.fallback_rate, exc)
            return ExchangeRateQuote(
                rate=self.fallback_rate,
                timestamp=datetime.now(timezone.utc),
                fallback=True,
            )

        quote = ExchangeRateQuote(rate=rate, timestamp=datetime.now(timezone.utc))
        self._cached_rate = (now, quote)
        return quote


def build_price_service(settings: AppSettings) -> PriceService:
    """Create a :class:`PriceService` wired to the configured endpoints."""

    quote_options = {"timeout": settings.quote_timeout_seconds, "user_agent": settings.user_agent}
    return PriceService(
        domestic=NaverQuoteClient(settings.domestic_quote_url, **quote_options),
        foreign=YahooChartClient(settings.foreign_quote_url, **quote_options),
        rates=ExchangeRateClient(
            settings.exchange_rate_url,
            target_currency=settings.reporting_currency,
            timeout=settings.exchange_rate_timeout_seconds,
        ),
        fallback_rate=settings.fallback_exchange_rate,
        cache_ttl_seconds=settings.exchange_rate_cache_ttl_seconds,
    )


__all__ = ["ExchangeRateQuote", "PriceService", "build_price_service", "partition_identifiers"]
