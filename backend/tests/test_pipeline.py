from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from portfolio_dashboard import (
    Currency,
    PriceQuote,
    RawHolding,
    Sector,
    allocate_sectors,
    build_dashboard,
    consolidate_holdings,
    enrich_holdings,
    summarize_accounts,
    summarize_portfolio,
)
from portfolio_dashboard.sectors import SECTOR_COLORS

RATE = 1300.0


def _holding(
    account="ISA",
    name="삼성전자",
    identifier="005930",
    quantity=10,
    avg_cost=100.0,
    currency=Currency.KRW,
):
    return RawHolding(
        account=account,
        name=name,
        identifier=identifier,
        quantity=quantity,
        avg_cost=avg_cost,
        currency=currency,
    )


def _make_holdings():
    return [
        _holding(account="ISA", name="KODEX 200", identifier="069500", quantity=10, avg_cost=30000),
        _holding(account="IRP", name="KODEX 200", identifier="069500", quantity=5, avg_cost=36000),
        _holding(account="CMA", name="SPY", identifier="SPY", quantity=2, avg_cost=400, currency=Currency.USD),
        _holding(account="연금저축A", name="KRX금현물", identifier="M04020000", quantity=3, avg_cost=90000),
        _holding(account="해외계좌", name="Apple", identifier="AAPL", quantity=1, avg_cost=150, currency=Currency.USD),
    ]


def _make_prices():
    return {
        "069500": PriceQuote(current_price=33000, prev_close=32000),
        "SPY": PriceQuote(current_price=500, prev_close=490),
        "M04020000": None,
        "AAPL": PriceQuote(current_price=200, prev_close=210),
    }


def test_example_day_matches_expected_gains():
    [enriched] = enrich_holdings(
        [_holding(quantity=10, avg_cost=100)],
        {"005930": PriceQuote(current_price=120, prev_close=110)},
        exchange_rate=9999,
    )
    assert enriched.eval_amount == pytest.approx(1200)
    assert enriched.gain_amount == pytest.approx(200)
    assert enriched.gain_rate == pytest.approx(20)
    assert enriched.today_gain_amount == pytest.approx(100)
    assert enriched.today_gain_rate == pytest.approx(9.0909, rel=1e-4)
    assert enriched.price_unavailable is False
    assert enriched.fx_rate == 1.0


def test_missing_quote_falls_back_to_average_cost():
    [enriched] = enrich_holdings([_holding(quantity=10, avg_cost=100)], {}, exchange_rate=RATE)
    assert enriched.price_unavailable is True
    assert enriched.current_price == 100
    assert enriched.prev_close == 100
    assert enriched.eval_amount == pytest.approx(1000)
    assert enriched.gain_amount == 0
    assert enriched.today_gain_amount == 0
    assert enriched.gain_rate == 0
    assert enriched.today_gain_rate == 0


def test_explicit_none_quote_counts_as_missing():
    [enriched] = enrich_holdings(
        [_holding(identifier="AAPL", avg_cost=150, quantity=2, currency=Currency.USD)],
        {"AAPL": None},
        exchange_rate=RATE,
    )
    assert enriched.price_unavailable is True
    assert enriched.eval_amount == pytest.approx(150 * RATE * 2)
    assert enriched.gain_amount == 0
    assert enriched.today_gain_amount == 0


def test_foreign_holding_is_converted_to_reporting_currency():
    [enriched] = enrich_holdings(
        [_holding(identifier="SPY", name="SPY", quantity=2, avg_cost=400, currency=Currency.USD)],
        {"SPY": PriceQuote(current_price=500, prev_close=490)},
        exchange_rate=RATE,
    )
    assert enriched.current_price == 500
    assert enriched.current_price_reporting == pytest.approx(500 * RATE)
    assert enriched.eval_amount == pytest.approx(1000 * RATE)
    assert enriched.gain_amount == pytest.approx(200 * RATE)
    assert enriched.gain_rate == pytest.approx(25)
    assert enriched.today_gain_amount == pytest.approx(20 * RATE)
    assert enriched.avg_cost_reporting == pytest.approx(400 * RATE)
    assert enriched.prev_close_reporting == pytest.approx(490 * RATE)
    assert enriched.sector == Sector.US_INDEX


def test_zero_cost_and_zero_previous_close_give_zero_rates():
    [enriched] = enrich_holdings(
        [_holding(avg_cost=0)],
        {"005930": PriceQuote(current_price=50, prev_close=0)},
        exchange_rate=RATE,
    )
    assert enriched.gain_amount == pytest.approx(500)
    assert enriched.gain_rate == 0
    assert enriched.today_gain_rate == 0


def test_enrichment_preserves_length_and_order():
    holdings = _make_holdings()
    enriched = enrich_holdings(holdings, _make_prices(), RATE)
    assert [e.holding for e in enriched] == holdings


def test_consolidated_weighted_average_cost():
    holdings = [
        _holding(account="ISA", quantity=10, avg_cost=100),
        _holding(account="IRP", quantity=5, avg_cost=200),
    ]
    enriched = enrich_holdings(holdings, {"005930": PriceQuote(150, 140)}, RATE)
    [merged] = consolidate_holdings(enriched)
    assert merged.total_qty == 15
    assert merged.avg_cost == pytest.approx((10 * 100 + 5 * 200) / 15)
    assert merged.eval_amount == pytest.approx(15 * 150)
    assert merged.gain_amount == pytest.approx(10 * 50 + 5 * -50)
    assert merged.gain_rate == pytest.approx(250 / 2000 * 100)
    assert merged.today_gain_rate == pytest.approx(150 / (15 * 140) * 100)
    assert [share.account for share in merged.by_account] == ["ISA", "IRP"]
    assert merged.by_account[0].ratio == pytest.approx(100 * 10 / 15)
    assert merged.by_account[1].ratio == pytest.approx(100 * 5 / 15)


def test_consolidation_uses_representative_price_ratio():
    first = enrich_holdings(
        [_holding(account="CMA", identifier="SPY", quantity=1, avg_cost=400, currency=Currency.USD)],
        {"SPY": PriceQuote(500, 490)},
        exchange_rate=1000,
    )
    second = enrich_holdings(
        [_holding(account="ISA", identifier="SPY", quantity=1, avg_cost=300, currency=Currency.USD)],
        {"SPY": PriceQuote(500, 490)},
        exchange_rate=1500,
    )
    [merged] = consolidate_holdings(first + second)
    # Both members use the first member's ratio of 1000 KRW per USD
    assert merged.avg_cost == pytest.approx((400 * 1000 + 300 * 1000) / 2)
    assert merged.today_gain_rate == pytest.approx(
        merged.today_gain_amount / (490 * 1000 * 2) * 100
    )
    assert merged.current_price == 500


def test_consolidation_keeps_first_seen_order_and_representative_flag():
    holdings = [
        _holding(account="ISA", identifier="B", name="B"),
        _holding(account="ISA", identifier="A", name="A"),
        _holding(account="IRP", identifier="B", name="B"),
    ]
    enriched = enrich_holdings(holdings, {"A": PriceQuote(1, 1), "B": PriceQuote(110, 100)}, RATE)
    enriched[2] = enrich_holdings([holdings[2]], {}, RATE)[0]
    merged = consolidate_holdings(enriched)
    assert [m.identifier for m in merged] == ["B", "A"]
    assert merged[0].price_unavailable is False

    flipped = consolidate_holdings([enriched[2], enriched[0]])
    assert flipped[0].price_unavailable is True


def test_consolidation_preserves_totals():
    enriched = enrich_holdings(_make_holdings(), _make_prices(), RATE)
    merged = consolidate_holdings(enriched)
    assert sum(m.eval_amount for m in merged) == pytest.approx(sum(e.eval_amount for e in enriched))
    assert sum(m.gain_amount for m in merged) == pytest.approx(sum(e.gain_amount for e in enriched))
    assert sum(m.today_gain_amount for m in merged) == pytest.approx(
        sum(e.today_gain_amount for e in enriched)
    )
    for holding in merged:
        assert sum(share.ratio for share in holding.by_account) == pytest.approx(100)


def test_consolidation_with_zero_quantity_and_value():
    enriched = enrich_holdings([_holding(quantity=0, avg_cost=0)], {}, RATE)
    [merged] = consolidate_holdings(enriched)
    assert merged.avg_cost == 0
    assert merged.gain_rate == 0
    assert merged.today_gain_rate == 0
    assert merged.by_account[0].ratio == 0


def test_account_summaries_follow_canonical_order():
    enriched = enrich_holdings(_make_holdings(), _make_prices(), RATE)
    summaries = summarize_accounts(enriched)
    assert [s.account for s in summaries] == ["ISA", "연금저축A", "CMA", "IRP"]

    cma = summaries[2]
    assert cma.eval_amount == pytest.approx(2 * 500 * RATE)
    assert cma.today_gain_amount == pytest.approx(2 * 10 * RATE)
    assert cma.today_gain_rate == pytest.approx(10 / 490 * 100)

    gold = summaries[1]
    assert gold.today_gain_amount == 0
    assert gold.today_gain_rate == 0


def test_account_summaries_accept_custom_order():
    enriched = enrich_holdings(_make_holdings(), _make_prices(), RATE)
    summaries = summarize_accounts(enriched, account_order=["해외계좌", "ISA"])
    assert [s.account for s in summaries] == ["해외계좌", "ISA"]


def test_sector_allocations_sorted_with_ratios():
    enriched = enrich_holdings(_make_holdings(), _make_prices(), RATE)
    sectors = allocate_sectors(enriched)
    amounts = [s.amount for s in sectors]
    assert amounts == sorted(amounts, reverse=True)
    assert sum(s.ratio for s in sectors) == pytest.approx(100)
    assert all(0 <= s.ratio <= 100 for s in sectors)
    assert {s.sector for s in sectors} == {Sector.DOMESTIC_INDEX, Sector.US_INDEX, Sector.GOLD}
    for allocation in sectors:
        assert allocation.color == SECTOR_COLORS[allocation.sector]


def test_sector_ties_keep_grouping_order_and_zero_total_gives_zero_ratio():
    holdings = [
        _holding(name="KB금융", identifier="105560", quantity=0),
        _holding(name="KODEX 200", identifier="069500", quantity=0),
    ]
    sectors = allocate_sectors(enrich_holdings(holdings, {}, RATE))
    assert [s.sector for s in sectors] == [Sector.INDIVIDUAL_STOCK, Sector.DOMESTIC_INDEX]
    assert all(s.ratio == 0 for s in sectors)


def test_portfolio_summary_uses_live_rate_for_cost_basis():
    holdings = _make_holdings()
    enriched = enrich_holdings(holdings, _make_prices(), RATE)
    summary = summarize_portfolio(enriched, RATE, as_of=datetime(2024, 5, 2, 9, 5))

    expected_cost = (
        10 * 30000 + 5 * 36000 + 2 * 400 * RATE + 3 * 90000 + 1 * 150 * RATE
    )
    expected_eval = 15 * 33000 + 2 * 500 * RATE + 3 * 90000 + 200 * RATE
    expected_prev = 15 * 32000 + 2 * 490 * RATE + 3 * 90000 + 210 * RATE
    assert summary.total_cost == pytest.approx(expected_cost)
    assert summary.total_eval == pytest.approx(expected_eval)
    assert summary.total_gain_amount == pytest.approx(expected_eval - expected_cost)
    assert summary.total_gain_rate == pytest.approx((expected_eval - expected_cost) / expected_cost * 100)
    assert summary.today_gain_amount == pytest.approx(expected_eval - expected_prev)
    assert summary.today_gain_rate == pytest.approx((expected_eval - expected_prev) / expected_prev * 100)
    assert summary.exchange_rate == RATE
    assert summary.updated_at == "09:05"


def test_empty_portfolio_is_all_zero():
    dashboard = build_dashboard([], {}, RATE)
    assert dashboard.holdings == []
    assert dashboard.consolidated == []
    assert dashboard.accounts == []
    assert dashboard.sectors == []
    summary = dashboard.summary
    assert summary.total_eval == 0
    assert summary.total_gain_rate == 0
    assert summary.today_gain_rate == 0
    assert summary.exchange_rate == RATE


def test_build_dashboard_runs_every_stage():
    dashboard = build_dashboard(
        _make_holdings(),
        _make_prices(),
        RATE,
        account_order=["CMA"],
        classifier=lambda holding: Sector.OTHER,
    )
    assert len(dashboard.holdings) == 5
    assert len(dashboard.consolidated) == 4
    assert [a.account for a in dashboard.accounts] == ["CMA"]
    assert [s.sector for s in dashboard.sectors] == [Sector.OTHER]
    assert dashboard.sectors[0].ratio == pytest.approx(100)


def test_string_currency_is_normalised():
    holding = RawHolding("CMA", "SPY", "SPY", 1, 400, "USD")
    assert holding.currency is Currency.USD


def test_default_timestamp_is_seoul_time():
    seoul = ZoneInfo("Asia/Seoul")
    before = datetime.now(seoul).strftime("%H:%M")
    summary = summarize_portfolio([], RATE)
    after = datetime.now(seoul).strftime("%H:%M")
    assert summary.updated_at in {before, after}
