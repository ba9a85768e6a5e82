"""Keyword-based sector classification."""
from __future__ import annotations

from typing import Dict, List, Tuple

from .models import Currency, RawHolding, Sector

SECTOR_COLORS: Dict[Sector, str] = {
    Sector.US_INDEX: "#3B82F6",
    Sector.DOMESTIC_INDEX: "#10B981",
    Sector.GOLD: "#F59E0B",
    Sector.DEFENSE_THEME: "#EF4444",
    Sector.BOND_MIXED: "#8B5CF6",
    Sector.OVERSEAS_OTHER: "#06B6D4",
    Sector.INDIVIDUAL_STOCK: "#F97316",
    Sector.OTHER: "#6B7280",
}

# Checked in order; the first rule with a matching keyword wins.
SECTOR_RULES: List[Tuple[Sector, Tuple[str, ...]]] = [
    (Sector.GOLD, ("금현물", "KRX금", "GOLD")),
    (Sector.BOND_MIXED, ("채권", "국채", "혼합", "금채")),
    (Sector.DEFENSE_THEME, ("방산", "조선", "2차전지", "반도체", "K방산")),
    (Sector.OVERSEAS_OTHER, ("유로", "유럽", "신흥국")),
    (
        Sector.US_INDEX,
        ("미국", "S&P", "나스닥", "NASDAQ", "QQQ", "DIA", "SPY", "다우", "1Q "),
    ),
    (
        Sector.DOMESTIC_INDEX,
        ("코스피", "코스닥", "KOSPI", " 200", "코스피50", "코스닥150"),
    ),
]


def tag_sector(holding: RawHolding) -> Sector:
    """Classify ``holding`` by matching keywords against its instrument name."""

    name = holding.name.lower()
    for sector, keywords in SECTOR_RULES:
        if any(keyword.lower() in name for keyword in keywords):
            return sector
    if holding.currency == Currency.USD:
        return Sector.US_INDEX
    return Sector.INDIVIDUAL_STOCK


def sector_color(sector: Sector) -> str:
    return SECTOR_COLORS.get(sector, SECTOR_COLORS[Sector.OTHER])


__all__ = ["SECTOR_COLORS", "SECTOR_RULES", "tag_sector", "sector_color"]
