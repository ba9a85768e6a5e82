"""Core package for the portfolio valuation and aggregation pipeline."""

from .models import (
    AccountShare,
    AccountSummary,
    ConsolidatedHolding,
    Currency,
    Dashboard,
    EnrichedHolding,
    PortfolioSummary,
    PriceMap,
    PriceQuote,
    RawHolding,
    Sector,
    SectorAllocation,
)
from .pipeline import (
    allocate_sectors,
    build_dashboard,
    consolidate_holdings,
    enrich_holdings,
    summarize_accounts,
    summarize_portfolio,
)

__all__ = [
    "AccountShare",
    "AccountSummary",
    "ConsolidatedHolding",
    "Currency",
    "Dashboard",
    "EnrichedHolding",
    "PortfolioSummary",
    "PriceMap",
    "PriceQuote",
    "RawHolding",
    "Sector",
    "SectorAllocation",
    "allocate_sectors",
    "build_dashboard",
    "consolidate_holdings",
    "enrich_holdings",
    "summarize_accounts",
    "summarize_portfolio",
]
