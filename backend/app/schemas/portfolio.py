"""Pydantic schemas for holdings, quotes and the valuation dashboard."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from portfolio_dashboard import Currency, Dashboard, PriceQuote, RawHolding, Sector


class HoldingSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    account: str = Field(..., examples=["ISA"])
    name: str = Field(..., examples=["KODEX 200"])
    identifier: str = Field(..., description="Domestic code or foreign ticker", examples=["069500"])
    quantity: float = Field(..., ge=0, allow_inf_nan=False)
    avg_cost: float = Field(..., ge=0, allow_inf_nan=False, description="Average cost per unit in the native currency")
    currency: Currency = Currency.KRW

    def to_domain(self) -> RawHolding:
        return RawHolding(
            account=self.account.strip(),
            name=self.name.strip(),
            identifier=self.identifier.strip(),
            quantity=self.quantity,
            avg_cost=self.avg_cost,
            currency=self.currency,
        )


class PriceQuoteSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    current_price: float
    prev_close: float

    @classmethod
    def from_quote(cls, quote: PriceQuote | None) -> PriceQuoteSchema | None:
        return None if quote is None else cls.model_validate(quote)


class EnrichedHoldingSchema(HoldingSchema):
    sector: Sector
    current_price: float
    current_price_reporting: float
    eval_amount: float
    gain_amount: float
    gain_rate: float
    today_gain_amount: float
    today_gain_rate: float
    prev_close: float
    fx_rate: float
    price_unavailable: bool = False


class AccountShareSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    account: str
    quantity: float
    eval_amount: float
    ratio: float


class ConsolidatedHoldingSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    identifier: str
    name: str
    currency: Currency
    sector: Sector
    total_qty: float
    avg_cost: float
    current_price: float
    eval_amount: float
    gain_amount: float
    gain_rate: float
    today_gain_amount: float
    today_gain_rate: float
    price_unavailable: bool = False
    by_account: list[AccountShareSchema] = Field(default_factory=list)


class AccountSummarySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    account: str
    eval_amount: float
    today_gain_amount: float
    today_gain_rate: float


class SectorAllocationSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    sector: Sector
    amount: float
    ratio: float
    color: str


class PortfolioSummarySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_eval: float
    total_cost: float
    total_gain_amount: float
    total_gain_rate: float
    today_gain_amount: float
    today_gain_rate: float
    exchange_rate: float
    updated_at: str


class DashboardResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    holdings: list[EnrichedHoldingSchema]
    consolidated: list[ConsolidatedHoldingSchema]
    accounts: list[AccountSummarySchema]
    sectors: list[SectorAllocationSchema]
    summary: PortfolioSummarySchema

    @classmethod
    def from_dashboard(cls, dashboard: Dashboard) -> DashboardResponse:
        return cls.model_validate(dashboard)


class ExchangeRateResponse(BaseModel):
    rate: float
    timestamp: datetime
    fallback: bool = False


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
