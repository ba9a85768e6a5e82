"""Domain models used by the portfolio valuation pipeline."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class Currency(str, Enum):
    """Native currency of a holding. KRW is the reporting currency."""

    KRW = "KRW"
    USD = "USD"

    @property
    def is_foreign(self) -> bool:
        return self is not Currency.KRW


class Sector(str, Enum):
    US_INDEX = "미국지수"
    DOMESTIC_INDEX = "국내지수"
    GOLD = "금"
    DEFENSE_THEME = "방산/테마"
    BOND_MIXED = "채권/혼합"
    OVERSEAS_OTHER = "해외기타"
    INDIVIDUAL_STOCK = "개별주"
    OTHER = "기타"


@dataclass(frozen=True)
class RawHolding:
    """One line item as entered by the user."""

    account: str
    name: str
    identifier: str
    quantity: float
    avg_cost: float
    currency: Currency = Currency.KRW

    def __post_init__(self) -> None:
        object.__setattr__(self, "currency", Currency(self.currency))


@dataclass(frozen=True)
class PriceQuote:
    """Latest and previous-close price in the instrument's native currency."""

    current_price: float
    prev_close: float


PriceMap = Dict[str, Optional[PriceQuote]]


@dataclass(frozen=True)
class EnrichedHolding:
    """A raw holding valued against one quote and the exchange rate."""

    holding: RawHolding
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

    @property
    def account(self) -> str:
        return self.holding.account

    @property
    def identifier(self) -> str:
        return self.holding.identifier

    @property
    def name(self) -> str:
        return self.holding.name

    @property
    def quantity(self) -> float:
        return self.holding.quantity

    @property
    def avg_cost(self) -> float:
        return self.holding.avg_cost

    @property
    def currency(self) -> Currency:
        return self.holding.currency

    @property
    def avg_cost_reporting(self) -> float:
        return self.holding.avg_cost * self.fx_rate

    @property
    def prev_close_reporting(self) -> float:
        return self.prev_close * self.fx_rate


@dataclass(frozen=True)
class AccountShare:
    """Slice of a consolidated holding held in one account."""

    account: str
    quantity: float
    eval_amount: float
    ratio: float


@dataclass(frozen=True)
class ConsolidatedHolding:
    """All positions in one instrument, merged across accounts."""

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
    by_account: List[AccountShare] = field(default_factory=list)


@dataclass(frozen=True)
class AccountSummary:
    account: str
    eval_amount: float
    today_gain_amount: float
    today_gain_rate: float


@dataclass(frozen=True)
class SectorAllocation:
    sector: Sector
    amount: float
    ratio: float
    color: str


@dataclass(frozen=True)
class PortfolioSummary:
    """Whole-portfolio totals in the reporting currency."""

    total_eval: float
    total_cost: float
    total_gain_amount: float
    total_gain_rate: float
    today_gain_amount: float
    today_gain_rate: float
    exchange_rate: float
    updated_at: str


@dataclass(frozen=True)
class Dashboard:
    """Everything derived from one refresh of prices and exchange rate."""

    holdings: List[EnrichedHolding]
    consolidated: List[ConsolidatedHolding]
    accounts: List[AccountSummary]
    sectors: List[SectorAllocation]
    summary: PortfolioSummary
