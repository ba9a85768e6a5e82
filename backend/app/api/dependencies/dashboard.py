"""Shared service instances for API routes."""

from __future__ import annotations

from functools import lru_cache

from app.config import get_settings
from app.services.dashboard import DashboardRefresher
from app.services.prices import PriceService, build_price_service


@lru_cache(maxsize=1)
def get_dashboard_refresher() -> DashboardRefresher:
    """Return the process-wide refresher; holdings live in memory only."""

    settings = get_settings()
    return DashboardRefresher(
        build_price_service(settings),
        account_order=settings.account_order,
        timezone=settings.timezone,
    )


def get_price_service() -> PriceService:
    return get_dashboard_refresher().prices


__all__ = ["get_dashboard_refresher", "get_price_service"]
