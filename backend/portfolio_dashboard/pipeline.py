"""Pipeline functions for valuing and aggregating portfolio holdings.

Every stage is a pure function over its inputs. ``enrich_holdings`` must run
first; the four aggregation stages only read its output and can run in any
order.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Sequence, Tuple, TypeVar
from zoneinfo import ZoneInfo

from .config import DEFAULT_ACCOUNT_ORDER, DEFAULT_TIMEZONE
from .fx import conversion_ratio, safe_rate, to_reporting
from .models import (
    AccountShare,
    AccountSummary,
    ConsolidatedHolding,
    Dashboard,
    EnrichedHolding,
    PortfolioSummary,
    PriceMap,
    RawHolding,
    Sector,
    SectorAllocation,
)
from .sectors import sector_color, tag_sector

logger = logging.getLogger(__name__)

T = TypeVar("T")

SectorClassifier = Callable[[RawHolding], Sector]


def _group_by(items: Iterable[T], key: Callable[[T], str]) -> List[Tuple[str, List[T]]]:
    """Group ``items`` by ``key``; groups are returned in first-seen order."""

    first_seen: Dict[str, int] = {}
    groups: List[Tuple[str, List[T]]] = []
    for item in items:
        k = key(item)
        if k not in first_seen:
            first_seen[k] = len(groups)
            groups.append((k, []))
        groups[first_seen[k]][1].append(item)
    return groups


def _enrich_one(
    holding: RawHolding,
    price_map: PriceMap,
    exchange_rate: float,
    classifier: SectorClassifier,
) -> EnrichedHolding:
    quote = price_map.get(holding.identifier)
    price_unavailable = quote is None
    if quote is None:
        current_price = holding.avg_cost
        prev_close = holding.avg_cost
    else:
        current_price = quote.current_price
        prev_close = quote.prev_close

    rate = conversion_ratio(holding.currency, exchange_rate)
    current_price_reporting = current_price * rate
    avg_cost_reporting = holding.avg_cost * rate
    prev_close_reporting = prev_close * rate

    qty = holding.quantity
    return EnrichedHolding(
        holding=holding,
        sector=classifier(holding),
        current_price=current_price,
        current_price_reporting=current_price_reporting,
        eval_amount=current_price_reporting * qty,
        gain_amount=(current_price_reporting - avg_cost_reporting) * qty,
        gain_rate=safe_rate(current_price_reporting - avg_cost_reporting, avg_cost_reporting),
        today_gain_amount=(current_price_reporting - prev_close_reporting) * qty,
        today_gain_rate=safe_rate(current_price_reporting - prev_close_reporting, prev_close_reporting),
        prev_close=prev_close,
        fx_rate=rate,
        price_unavailable=price_unavailable,
    )


def enrich_holdings(
    holdings: Sequence[RawHolding],
    price_map: PriceMap,
    exchange_rate: float,
    *,
    classifier: SectorClassifier = tag_sector,
) -> List[EnrichedHolding]:
    """Value each holding against its quote, converting everything to KRW.

    A missing quote never raises: the holding's own average cost stands in for
    both the current price and the previous close, so its gains come out as
    exactly zero and ``price_unavailable`` is set.
    """

    enriched = [_enrich_one(h, price_map, exchange_rate, classifier) for h in holdings]
    missing = sum(1 for h in enriched if h.price_unavailable)
    if missing:
        logger.debug("Valued %d holdings, %d without a quote", len(enriched), missing)
    return enriched


def _representative_ratio(first: EnrichedHolding) -> float:
    if first.current_price > 0:
        return first.current_price_reporting / first.current_price
    return first.fx_rate


def _consolidate_group(identifier: str, group: List[EnrichedHolding]) -> ConsolidatedHolding:
    first = group[0]
    ratio = _representative_ratio(first)

    total_qty = sum(h.quantity for h in group)
    total_eval = sum(h.eval_amount for h in group)
    total_gain = sum(h.gain_amount for h in group)
    total_today_gain = sum(h.today_gain_amount for h in group)

    # Foreign members are normalised with the representative's price ratio,
    # not with each member's own exchange rate.
    total_cost = 0.0
    prev_eval = 0.0
    for h in group:
        member_ratio = ratio if h.currency.is_foreign else 1.0
        total_cost += h.avg_cost * member_ratio * h.quantity
        prev_eval += h.prev_close * member_ratio * h.quantity
    avg_cost = total_cost / total_qty if total_qty > 0 else 0.0

    by_account = [
        AccountShare(
            account=h.account,
            quantity=h.quantity,
            eval_amount=h.eval_amount,
            ratio=safe_rate(h.eval_amount, total_eval),
        )
        for h in group
    ]

    return ConsolidatedHolding(
        identifier=identifier,
        name=first.name,
        currency=first.currency,
        sector=first.sector,
        total_qty=total_qty,
        avg_cost=avg_cost,
        current_price=first.current_price,
        eval_amount=total_eval,
        gain_amount=total_gain,
        gain_rate=safe_rate(total_gain, avg_cost * total_qty),
        today_gain_amount=total_today_gain,
        today_gain_rate=safe_rate(total_today_gain, prev_eval),
        price_unavailable=first.price_unavailable,
        by_account=by_account,
    )


def consolidate_holdings(holdings: Sequence[EnrichedHolding]) -> List[ConsolidatedHolding]:
    """Merge positions in the same instrument held across several accounts.

    Groups keep the order in which each identifier first appears. The
    ``price_unavailable`` flag is taken from the first member of each group.
    """

    return [
        _consolidate_group(identifier, group)
        for identifier, group in _group_by(holdings, lambda h: h.identifier)
    ]


def summarize_accounts(
    holdings: Sequence[EnrichedHolding],
    account_order: Sequence[str] = DEFAULT_ACCOUNT_ORDER,
) -> List[AccountSummary]:
    """Return one summary per known account, in ``account_order``.

    Accounts not listed in ``account_order`` are dropped.
    """

    grouped = dict(_group_by(holdings, lambda h: h.account))
    summaries: List[AccountSummary] = []
    for account in account_order:
        group = grouped.get(account)
        if not group:
            continue
        eval_amount = sum(h.eval_amount for h in group)
        today_gain = sum(h.today_gain_amount for h in group)
        prev_eval = sum(h.prev_close_reporting * h.quantity for h in group)
        summaries.append(
            AccountSummary(
                account=account,
                eval_amount=eval_amount,
                today_gain_amount=today_gain,
                today_gain_rate=safe_rate(today_gain, prev_eval),
            )
        )
    skipped = [name for name in grouped if name not in account_order]
    if skipped:
        logger.debug("Accounts outside the canonical order left out: %s", ", ".join(skipped))
    return summaries


def allocate_sectors(holdings: Sequence[EnrichedHolding]) -> List[SectorAllocation]:
    """Return sector allocations sorted by descending evaluation amount."""

    amounts = [
        (Sector(sector), sum(h.eval_amount for h in group))
        for sector, group in _group_by(holdings, lambda h: h.sector.value)
    ]
    total = sum(amount for _, amount in amounts)
    allocations = [
        SectorAllocation(
            sector=sector,
            amount=amount,
            ratio=safe_rate(amount, total),
            color=sector_color(sector),
        )
        for sector, amount in amounts
    ]
    # sorted() is stable, so equal amounts keep their grouping order
    return sorted(allocations, key=lambda a: a.amount, reverse=True)


def summarize_portfolio(
    holdings: Sequence[EnrichedHolding],
    exchange_rate: float,
    *,
    as_of: datetime | None = None,
) -> PortfolioSummary:
    """Reduce all holdings into one whole-portfolio summary.

    Cost basis and previous-close value are converted at the live
    ``exchange_rate`` rather than any historical rate.
    Without ``as_of`` the timestamp is the current time in Asia/Seoul.
    """

    total_eval = sum(h.eval_amount for h in holdings)
    total_cost = sum(
        to_reporting(h.avg_cost, h.currency, exchange_rate) * h.quantity for h in holdings
    )
    total_gain = total_eval - total_cost
    today_gain = sum(h.today_gain_amount for h in holdings)
    prev_eval = sum(
        to_reporting(h.prev_close, h.currency, exchange_rate) * h.quantity for h in holdings
    )
    stamp = as_of or datetime.now(ZoneInfo(DEFAULT_TIMEZONE))
    return PortfolioSummary(
        total_eval=total_eval,
        total_cost=total_cost,
        total_gain_amount=total_gain,
        total_gain_rate=safe_rate(total_gain, total_cost),
        today_gain_amount=today_gain,
        today_gain_rate=safe_rate(today_gain, prev_eval),
        exchange_rate=exchange_rate,
        updated_at=stamp.strftime("%H:%M"),
    )


def build_dashboard(
    holdings: Sequence[RawHolding],
    price_map: PriceMap,
    exchange_rate: float,
    *,
    account_order: Sequence[str] = DEFAULT_ACCOUNT_ORDER,
    classifier: SectorClassifier = tag_sector,
    as_of: datetime | None = None,
) -> Dashboard:
    """Run enrichment followed by every aggregation stage on one snapshot."""

    enriched = enrich_holdings(holdings, price_map, exchange_rate, classifier=classifier)
    return Dashboard(
        holdings=enriched,
        consolidated=consolidate_holdings(enriched),
        accounts=summarize_accounts(enriched, account_order),
        sectors=allocate_sectors(enriched),
        summary=summarize_portfolio(enriched, exchange_rate, as_of=as_of),
    )


__all__ = [
    "enrich_holdings",
    "consolidate_holdings",
    "summarize_accounts",
    "allocate_sectors",
    "summarize_portfolio",
    "build_dashboard",
]
