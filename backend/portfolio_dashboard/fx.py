"""FX conversion helpers."""
from __future__ import annotations

from .models import Currency


def conversion_ratio(currency: Currency, exchange_rate: float) -> float:
    """Return the multiplier that turns ``currency`` amounts into KRW."""

    if Currency(currency).is_foreign:
        return exchange_rate
    return 1.0


def to_reporting(amount: float, currency: Currency, exchange_rate: float) -> float:
    """Convert a native-currency ``amount`` into the reporting currency."""

    return amount * conversion_ratio(currency, exchange_rate)


def safe_rate(numerator: float, denominator: float) -> float:
    """Return ``numerator / denominator`` as a percentage, 0 for a non-positive denominator."""

    if denominator <= 0:
        return 0.0
    return numerator / denominator * 100


__all__ = ["conversion_ratio", "to_reporting", "safe_rate"]
