"""Refresh orchestration for the in-memory portfolio dashboard."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Sequence
from zoneinfo import ZoneInfo

from portfolio_dashboard import Dashboard, RawHolding, build_dashboard
from portfolio_dashboard.config import DEFAULT_ACCOUNT_ORDER

from .prices import PriceService

logger = logging.getLogger(__name__)


class DashboardRefresher:
    """Hold the current holdings and recompute the dashboard on demand.

    Every refresh recomputes the full derived set. A refresh that finishes
    after a newer refresh has started (or after the holdings were replaced)
    still returns its result but does not become :attr:`latest`.
    """

    def __init__(
        self,
        prices: PriceService,
        *,
        account_order: Sequence[str] = DEFAULT_ACCOUNT_ORDER,
        timezone: str | None = None,
    ) -> None:
        self.prices = prices
        self.account_order = tuple(account_order)
        self._tz = ZoneInfo(timezone) if timezone else None
        self._holdings: list[RawHolding] = []
        self._latest: Dashboard | None = None
        self._generation = 0

    @property
    def holdings(self) -> list[RawHolding]:
        return list(self._holdings)

    @property
    def latest(self) -> Dashboard | None:
        return self._latest

    def replace_holdings(self, holdings: Sequence[RawHolding]) -> None:
        self._holdings = list(holdings)
        self._generation += 1
        self._latest = None

    async def refresh(self) -> Dashboard:
        self._generation += 1
        generation = self._generation
        holdings = list(self._holdings)

        price_map, fx = await asyncio.gather(
            self.prices.fetch_prices(holdings),
            self.prices.fetch_exchange_rate(),
        )
        dashboard = build_dashboard(
            holdings,
            price_map,
            fx.rate,
            account_order=self.account_order,
            as_of=datetime.now(self._tz),
        )
        if generation == self._generation:
            self._latest = dashboard
        else:
            logger.info("Refresh %d superseded by %d; result not stored", generation, self._generation)
        return dashboard

    async def load(self, holdings: Sequence[RawHolding]) -> Dashboard:
        """Replace the holdings and refresh straight away."""

        self.replace_holdings(holdings)
        return await self.refresh()


__all__ = ["DashboardRefresher"]
