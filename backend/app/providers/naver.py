"""Domestic (KRW) quotes from the Naver Finance polling API."""

from __future__ import annotations

from typing import Any

from portfolio_dashboard.models import PriceQuote

from .base import QuoteClient, QuoteProviderError, parse_number

BASE_URL = "https://polling.finance.naver.com/api/realtime/domestic/stock"


class NaverQuoteClient(QuoteClient):
    """Look up realtime prices by six-digit domestic instrument code.

    The payload carries ``closePriceRaw`` (latest price) and
    ``compareToPreviousClosePriceRaw`` (change against the previous close),
    both as plain numeric strings.
    """

    provider_name = "naver"

    def __init__(self, base_url: str = BASE_URL, **kwargs: Any) -> None:
        super().__init__(base_url, **kwargs)

    def _parse(self, identifier: str, payload: Any) -> PriceQuote:
        datas = payload.get("datas") if isinstance(payload, dict) else None
        stock = datas[0] if isinstance(datas, list) and datas else payload
        raw_price = stock.get("closePriceRaw")
        if raw_price is None or raw_price == "":
            raise QuoteProviderError(f"naver payload for {identifier} has no price")
        current = parse_number(raw_price)
        raw_diff = stock.get("compareToPreviousClosePriceRaw")
        diff = parse_number(raw_diff) if raw_diff not in (None, "") else 0.0
        return PriceQuote(current_price=current, prev_close=current - diff)


__all__ = ["NaverQuoteClient", "BASE_URL"]
