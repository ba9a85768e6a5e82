"""CLI report: value a holdings CSV against live prices."""

from __future__ import annotations

import argparse
import asyncio
import json
from dataclasses import asdict

from app.config import get_settings
from app.core.logging import setup_logging
from app.services.dashboard import DashboardRefresher
from app.services.formatting import format_amount, format_krw, format_rate
from app.services.holdings_csv import HoldingsCSVError, load_holdings_csv
from app.services.prices import build_price_service
from portfolio_dashboard import Dashboard


def _print_report(dashboard: Dashboard) -> None:
    summary = dashboard.summary
    print(f"Updated {summary.updated_at}  USD/KRW {summary.exchange_rate:,.2f}")
    print(
        f"Total {format_krw(summary.total_eval)}  "
        f"today {format_amount(summary.today_gain_amount)} ({format_rate(summary.today_gain_rate)})  "
        f"overall {format_amount(summary.total_gain_amount)} ({format_rate(summary.total_gain_rate)})"
    )

    print("\nAccounts")
    for account in dashboard.accounts:
        print(
            f"  {account.account:<10} {format_krw(account.eval_amount):>10}  "
            f"{format_amount(account.today_gain_amount)} ({format_rate(account.today_gain_rate)})"
        )

    print("\nSectors")
    for sector in dashboard.sectors:
        print(f"  {sector.sector.value:<10} {format_krw(sector.amount):>10}  {sector.ratio:5.1f}%")

    print("\nHoldings")
    for holding in sorted(dashboard.consolidated, key=lambda h: h.eval_amount, reverse=True):
        marker = " (no quote)" if holding.price_unavailable else ""
        print(
            f"  {holding.name:<24} {format_krw(holding.eval_amount):>10}  "
            f"{format_rate(holding.gain_rate)}{marker}"
        )


async def _run(path: str, as_json: bool) -> int:
    settings = get_settings()
    try:
        holdings = load_holdings_csv(path)
    except HoldingsCSVError as exc:
        print(f"error: {exc}")
        return 1

    refresher = DashboardRefresher(
        build_price_service(settings),
        account_order=settings.account_order,
        timezone=settings.timezone,
    )
    try:
        dashboard = await refresher.load(holdings)
    finally:
        await refresher.prices.aclose()

    if as_json:
        print(json.dumps(asdict(dashboard), ensure_ascii=False, indent=2, default=str))
    else:
        _print_report(dashboard)
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Value a holdings CSV against live prices")
    parser.add_argument("csv_path", help="CSV with 계좌,종목명,종목번호,수량,평균단가,단위 columns")
    parser.add_argument("--json", action="store_true", help="Print the full dashboard as JSON")
    parser.add_argument("--verbose", action="store_true", help="Log lookups and skipped rows")
    args = parser.parse_args()
    if args.verbose:
        setup_logging()
    raise SystemExit(asyncio.run(_run(args.csv_path, args.json)))


if __name__ == "__main__":
    main()
