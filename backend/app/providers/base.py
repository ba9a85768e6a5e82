"""Shared plumbing for the per-instrument quote clients."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Iterable

import httpx

from portfolio_dashboard.models import PriceMap, PriceQuote

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "Mozilla/5.0"


class QuoteProviderError(RuntimeError):
    """Raised when a quote service returns an unusable response."""


class QuoteClient:
    """Fetch one quote per HTTP request and resolve batches concurrently."""

    provider_name = "quote"

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 5.0,
        user_agent: str = DEFAULT_USER_AGENT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._headers = {"User-Agent": user_agent}
        self._client = client or httpx.AsyncClient()
        self._owns_client = client is None

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _request_url(self, identifier: str) -> str:
        return f"{self.base_url}/{identifier}"

    def _request_params(self, identifier: str) -> dict[str, str] | None:
        return None

    def _parse(self, identifier: str, payload: Any) -> PriceQuote:
        raise NotImplementedError

    async def fetch_quote(self, identifier: str) -> PriceQuote:
        """Return the quote for ``identifier`` or raise :class:`QuoteProviderError`."""

        try:
            response = await self._client.get(
                self._request_url(identifier),
                params=self._request_params(identifier),
                headers=self._headers,
                timeout=self._timeout,
            )
        except httpx.HTTPError as exc:
            raise QuoteProviderError(f"{self.provider_name} request failed for {identifier}: {exc}") from exc
        if response.status_code >= 400:
            raise QuoteProviderError(
                f"{self.provider_name} returned {response.status_code} for {identifier}"
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise QuoteProviderError(f"{self.provider_name} returned invalid JSON for {identifier}") from exc
        try:
            return self._parse(identifier, payload)
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise QuoteProviderError(
                f"Unexpected {self.provider_name} payload for {identifier}: {exc!r}"
            ) from exc

    async def fetch_quotes(self, identifiers: Iterable[str]) -> PriceMap:
        """Resolve every identifier; a failed lookup maps to ``None`` without affecting the rest."""

        unique = list(dict.fromkeys(i for i in identifiers if i))
        results = await asyncio.gather(
            *(self.fetch_quote(identifier) for identifier in unique),
            return_exceptions=True,
        )
        quotes: PriceMap = {}
        for identifier, result in zip(unique, results):
            if isinstance(result, Exception):
                logger.warning("No %s quote for %s: %s", self.provider_name, identifier, result)
                quotes[identifier] = None
            elif isinstance(result, BaseException):
                raise result
            else:
                quotes[identifier] = result
        return quotes


def parse_number(raw: Any) -> float:
    """Parse a numeric field that may arrive as a string with thousands separators."""

    if isinstance(raw, str):
        raw = raw.replace(",", "").strip()
    value = float(raw)
    if value != value:
        raise ValueError("NaN price")
    return value


__all__ = ["DEFAULT_USER_AGENT", "QuoteClient", "QuoteProviderError", "parse_number"]
