"""Configuration defaults for the valuation core."""

from __future__ import annotations

import logging
import math
import os
from functools import lru_cache
from typing import Tuple

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK_EXCHANGE_RATE = 1370.0

# Timestamps on portfolio summaries are rendered in this zone unless told otherwise.
DEFAULT_TIMEZONE = "Asia/Seoul"

# Accounts outside this tuple are left out of the per-account summaries.
DEFAULT_ACCOUNT_ORDER: Tuple[str, ...] = ("ISA", "연금저축A", "연금저축B", "CMA", "IRP")


@lru_cache()
def get_fallback_exchange_rate() -> float:
    """Return the KRW-per-USD rate used when the live rate cannot be fetched.

    ``PORTFOLIO_FALLBACK_EXCHANGE_RATE`` overrides the default. A value that
    is not a finite positive number is ignored with a warning.
    """

    raw = os.getenv("PORTFOLIO_FALLBACK_EXCHANGE_RATE")
    if not raw:
        return DEFAULT_FALLBACK_EXCHANGE_RATE
    try:
        value = float(raw)
    except ValueError:
        value = math.nan
    if not math.isfinite(value) or value <= 0:
        logger.warning(
            "Ignoring PORTFOLIO_FALLBACK_EXCHANGE_RATE=%r; using %s",
            raw,
            DEFAULT_FALLBACK_EXCHANGE_RATE,
        )
        return DEFAULT_FALLBACK_EXCHANGE_RATE
    return value


__all__ = [
    "DEFAULT_ACCOUNT_ORDER",
    "DEFAULT_FALLBACK_EXCHANGE_RATE",
    "DEFAULT_TIMEZONE",
    "get_fallback_exchange_rate",
]
