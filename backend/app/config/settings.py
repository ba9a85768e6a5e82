"""Application configuration and environment helpers."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from portfolio_dashboard.config import DEFAULT_ACCOUNT_ORDER, DEFAULT_FALLBACK_EXCHANGE_RATE

DEFAULT_TIMEZONE = "Asia/Seoul"
DEFAULT_REPORTING_CURRENCY = "KRW"


class AppSettings(BaseSettings):
    """Configuration options for the portfolio dashboard service."""

    app_name: str = Field(default="Portfolio Dashboard")
    timezone: str = Field(default=DEFAULT_TIMEZONE)
    reporting_currency: str = Field(default=DEFAULT_REPORTING_CURRENCY)

    domestic_quote_url: str = Field(
        default="https://polling.finance.naver.com/api/realtime/domestic/stock",
        description="Base URL for domestic (KRW) realtime quotes.",
    )
    foreign_quote_url: str = Field(
        default="https://query1.finance.yahoo.com/v8/finance/chart",
        description="Base URL for foreign (USD) chart quotes.",
    )
    exchange_rate_url: str = Field(
        default="https://open.er-api.com/v6/latest/USD",
        description="Endpoint returning USD-based exchange rates.",
    )
    quote_timeout_seconds: float = Field(default=5.0, gt=0)
    exchange_rate_timeout_seconds: float = Field(default=5.0, gt=0)
    exchange_rate_cache_ttl_seconds: float = Field(default=3600.0, ge=0)
    fallback_exchange_rate: float = Field(
        default=DEFAULT_FALLBACK_EXCHANGE_RATE,
        gt=0,
        description="KRW per USD used whenever the live rate is unavailable.",
    )
    user_agent: str = Field(default="Mozilla/5.0")

    account_order: list[str] = Field(default_factory=lambda: list(DEFAULT_ACCOUNT_ORDER))

    telemetry_enabled: bool = Field(default=False)
    telemetry_service_name: str = Field(default="portfolio-dashboard")
    telemetry_otlp_endpoint: str | None = Field(default=None)
    telemetry_otlp_insecure: bool = Field(default=True)
    telemetry_sample_ratio: float = Field(default=1.0, ge=0.0, le=1.0)

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    def dict_for_logging(self) -> dict[str, Any]:
        """Return a dict suitable for logging at startup."""

        return self.model_dump()


@lru_cache(maxsize=1)
def get_settings(**overrides: Any) -> AppSettings:
    """Return cached application settings with optional overrides."""

    if overrides:
        return AppSettings(**overrides)
    return AppSettings()


__all__ = [
    "AppSettings",
    "DEFAULT_TIMEZONE",
    "DEFAULT_REPORTING_CURRENCY",
    "get_settings",
]
