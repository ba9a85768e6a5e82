"""USD/KRW exchange rate client."""

from __future__ import annotations

from typing import Any

import httpx

BASE_URL = "https://open.er-api.com/v6/latest/USD"


class ExchangeRateError(RuntimeError):
    """Raised when the exchange-rate service cannot supply a usable rate."""


class ExchangeRateClient:
    """Fetch the number of KRW per one USD."""

    def __init__(
        self,
        url: str = BASE_URL,
        *,
        target_currency: str = "KRW",
        timeout: float = 5.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.url = url
        self.target_currency = target_currency
        self._timeout = timeout
        self._client = client or httpx.AsyncClient()
        self._owns_client = client is None

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def latest_rate(self) -> float:
        try:
            response = await self._client.get(self.url, timeout=self._timeout)
        except httpx.HTTPError as exc:
            raise ExchangeRateError(f"Exchange rate request failed: {exc}") from exc
        if response.status_code >= 400:
            raise ExchangeRateError(f"Exchange rate service returned {response.status_code}")
        try:
            payload: Any = response.json()
        except ValueError as exc:
            raise ExchangeRateError("Exchange rate service returned invalid JSON") from exc

        rates = payload.get("rates") if isinstance(payload, dict) else None
        raw = rates.get(self.target_currency) if isinstance(rates, dict) else None
        if raw is None:
            raise ExchangeRateError(f"No {self.target_currency} rate in exchange rate payload")
        try:
            rate = float(raw)
        except (TypeError, ValueError) as exc:
            raise ExchangeRateError(f"Non-numeric {self.target_currency} rate: {raw!r}") from exc
        if not rate > 0:
            raise ExchangeRateError(f"Non-positive {self.target_currency} rate: {rate}")
        return rate


__all__ = ["ExchangeRateClient", "ExchangeRateError", "BASE_URL"]
