"""Pydantic schema exports."""

from .portfolio import (
    AccountShareSchema,
    AccountSummarySchema,
    ConsolidatedHoldingSchema,
    DashboardResponse,
    EnrichedHoldingSchema,
    ExchangeRateResponse,
    HoldingSchema,
    PortfolioSummarySchema,
    PriceQuoteSchema,
    SectorAllocationSchema,
)

__all__ = [
    "AccountShareSchema",
    "AccountSummarySchema",
    "ConsolidatedHoldingSchema",
    "DashboardResponse",
    "EnrichedHoldingSchema",
    "ExchangeRateResponse",
    "HoldingSchema",
    "PortfolioSummarySchema",
    "PriceQuoteSchema",
    "SectorAllocationSchema",
]
