"""Display formatting for KRW amounts and percentage rates."""

from __future__ import annotations

_EOK = 100_000_000
_MAN = 10_000


def format_krw(amount: float) -> str:
    """Abbreviate a KRW amount using 억 (1e8) and 만 (1e4) units."""

    magnitude = abs(amount)
    if magnitude >= _EOK:
        return f"{amount / _EOK:.1f}억"
    if magnitude >= _MAN:
        return f"{round(amount / _MAN):,}만"
    return f"{round(amount):,}"


def format_rate(rate: float) -> str:
    sign = "+" if rate >= 0 else ""
    return f"{sign}{rate:.2f}%"


def format_amount(amount: float) -> str:
    # The sign goes in front of the currency symbol: +₩1,200 / -₩1,200
    sign = "+" if amount >= 0 else "-"
    return f"{sign}₩{round(abs(amount)):,}"


__all__ = ["format_krw", "format_rate", "format_amount"]
