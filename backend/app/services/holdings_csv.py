"""Holdings CSV ingestion and export.

The CSV uses Korean column headers: 계좌 (account), 종목명 (instrument name),
종목번호 (instrument code or ticker), 수량 (quantity), 평균단가 (average cost)
and 단위 (currency unit, KRW or USD).
"""

from __future__ import annotations

import io
import logging
import math
from pathlib import Path
from typing import Any, Sequence

import pandas as pd

from portfolio_dashboard.models import Currency, RawHolding

logger = logging.getLogger(__name__)

COL_ACCOUNT = "계좌"
COL_NAME = "종목명"
COL_IDENTIFIER = "종목번호"
COL_QUANTITY = "수량"
COL_AVG_COST = "평균단가"
COL_CURRENCY = "단위"

REQUIRED_COLUMNS = (COL_ACCOUNT, COL_NAME, COL_IDENTIFIER, COL_QUANTITY, COL_AVG_COST, COL_CURRENCY)

BOM = "\ufeff"


class HoldingsCSVError(ValueError):
    """Raised when a holdings CSV cannot be accepted at all."""


def _parse_amount(raw: str) -> float:
    value = float(raw.replace(",", ""))
    if not math.isfinite(value) or value < 0:
        raise ValueError(f"expected a non-negative number, got {raw!r}")
    return value


def _row_to_holding(row: dict[str, str]) -> RawHolding | None:
    unit = row[COL_CURRENCY].upper()
    if unit not in {c.value for c in Currency}:
        logger.warning("Skipping %s: unsupported currency unit %r", row[COL_NAME], row[COL_CURRENCY])
        return None
    try:
        quantity = _parse_amount(row[COL_QUANTITY])
        avg_cost = _parse_amount(row[COL_AVG_COST])
    except ValueError as exc:
        logger.warning("Skipping %s: %s", row[COL_NAME], exc)
        return None
    return RawHolding(
        account=row[COL_ACCOUNT],
        name=row[COL_NAME],
        identifier=row[COL_IDENTIFIER],
        quantity=quantity,
        avg_cost=avg_cost,
        currency=Currency(unit),
    )


def parse_holdings_csv(text: str | bytes) -> list[RawHolding]:
    """Parse holdings CSV content into :class:`RawHolding` rows.

    Missing required columns reject the whole input. Rows with an unknown
    currency unit or unusable numbers are skipped and logged.
    """

    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise HoldingsCSVError(
                f"Invalid holdings CSV: not UTF-8 encoded ({exc.reason} at byte {exc.start})"
            ) from exc
    text = text.lstrip(BOM)
    if not text.strip():
        raise HoldingsCSVError("Invalid holdings CSV: file is empty")

    try:
        frame = pd.read_csv(
            io.StringIO(text),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except (pd.errors.EmptyDataError, pd.errors.ParserError) as exc:
        raise HoldingsCSVError(f"Invalid holdings CSV: {exc}") from exc

    frame.columns = [str(column).strip() for column in frame.columns]
    missing = [column for column in REQUIRED_COLUMNS if column not in frame.columns]
    if missing:
        raise HoldingsCSVError(
            f"Invalid holdings CSV: missing required columns - {', '.join(missing)}"
        )

    records: list[dict[str, Any]] = frame[list(REQUIRED_COLUMNS)].to_dict(orient="records")
    holdings: list[RawHolding] = []
    for record in records:
        row = {key: str(value).strip() for key, value in record.items()}
        holding = _row_to_holding(row)
        if holding is not None:
            holdings.append(holding)
    logger.info("Parsed %d holdings from %d CSV rows", len(holdings), len(records))
    return holdings


def load_holdings_csv(path: str | Path) -> list[RawHolding]:
    return parse_holdings_csv(Path(path).read_bytes())


def _plain_number(value: float) -> int | float:
    return int(value) if float(value).is_integer() else value


def write_holdings_csv(holdings: Sequence[RawHolding], *, bom: bool = False) -> str:
    """Serialise holdings back into the CSV layout accepted by :func:`parse_holdings_csv`."""

    frame = pd.DataFrame(
        [
            {
                COL_ACCOUNT: h.account,
                COL_NAME: h.name,
                COL_IDENTIFIER: h.identifier,
                COL_QUANTITY: _plain_number(h.quantity),
                COL_AVG_COST: _plain_number(h.avg_cost),
                COL_CURRENCY: Currency(h.currency).value,
            }
            for h in holdings
        ],
        columns=list(REQUIRED_COLUMNS),
        dtype=object,
    )
    body = frame.to_csv(index=False, lineterminator="\n")
    return f"{BOM}{body}" if bom else body


__all__ = [
    "HoldingsCSVError",
    "REQUIRED_COLUMNS",
    "load_holdings_csv",
    "parse_holdings_csv",
    "write_holdings_csv",
]
