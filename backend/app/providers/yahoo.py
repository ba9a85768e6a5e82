"""Foreign (USD) quotes from the Yahoo Finance chart endpoint."""

from __future__ import annotations

from typing import Any

from portfolio_dashboard.models import PriceQuote

from .base import QuoteClient, QuoteProviderError, parse_number

BASE_URL = "https://query1.finance.yahoo.com/v8/finance/chart"


class YahooChartClient(QuoteClient):
    """Read the latest and previous-close price from a two-day daily chart."""

    provider_name = "yahoo"

    def __init__(self, base_url: str = BASE_URL, **kwargs: Any) -> None:
        super().__init__(base_url, **kwargs)

    def _request_params(self, identifier: str) -> dict[str, str]:
        return {"interval": "1d", "range": "2d"}

    def _parse(self, identifier: str, payload: Any) -> PriceQuote:
        results = payload["chart"]["result"]
        if not results:
            raise QuoteProviderError(f"yahoo chart for {identifier} is empty")
        meta = results[0]["meta"]

        current = meta.get("regularMarketPrice")
        if current is None:
            current = meta.get("chartPreviousClose")
        if current is None:
            raise QuoteProviderError(f"yahoo chart for {identifier} has no price")

        prev_close = meta.get("previousClose")
        if prev_close is None:
            prev_close = meta.get("chartPreviousClose")
        if prev_close is None:
            prev_close = current
        return PriceQuote(current_price=parse_number(current), prev_close=parse_number(prev_close))


__all__ = ["YahooChartClient", "BASE_URL"]
