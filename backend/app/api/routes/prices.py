"""Quote and exchange-rate lookup endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.dependencies.dashboard import get_price_service
from app.schemas import ExchangeRateResponse, PriceQuoteSchema
from app.services.prices import PriceService

router = APIRouter()


def _split_identifiers(raw: str | None, name: str) -> list[str]:
    identifiers = [item.strip() for item in (raw or "").split(",") if item.strip()]
    if not identifiers:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"{name} parameter is required")
    return identifiers


@router.get("/prices/domestic", response_model=dict[str, PriceQuoteSchema | None])
async def get_domestic_prices(
    codes: str | None = Query(default=None, description="Comma-separated domestic codes"),
    prices: PriceService = Depends(get_price_service),
) -> dict[str, PriceQuoteSchema | None]:
    quotes = await prices.domestic.fetch_quotes(_split_identifiers(codes, "codes"))
    return {code: PriceQuoteSchema.from_quote(quote) for code, quote in quotes.items()}


@router.get("/prices/us", response_model=dict[str, PriceQuoteSchema | None])
async def get_us_prices(
    tickers: str | None = Query(default=None, description="Comma-separated US tickers"),
    prices: PriceService = Depends(get_price_service),
) -> dict[str, PriceQuoteSchema | None]:
    quotes = await prices.foreign.fetch_quotes(_split_identifiers(tickers, "tickers"))
    return {ticker: PriceQuoteSchema.from_quote(quote) for ticker, quote in quotes.items()}


@router.get("/exchange-rate", response_model=ExchangeRateResponse)
async def get_exchange_rate(prices: PriceService = Depends(get_price_service)) -> ExchangeRateResponse:
    quote = await prices.fetch_exchange_rate()
    return ExchangeRateResponse(rate=quote.rate, timestamp=quote.timestamp, fallback=quote.fallback)


__all__ = ["router"]
