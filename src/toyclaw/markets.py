# src/toyclaw/markets.py
"""Target markets and the market tags used to scope retrieval."""

from __future__ import annotations

from enum import Enum

GLOBAL_MARKET = "Global"


class TargetMarket(str, Enum):
    """Export markets a product can be assessed for."""

    US = "US"
    EUROPE = "EUROPE"
    MIDDLE_EAST = "MIDDLE_EAST"
    SOUTHEAST_ASIA = "SOUTHEAST_ASIA"
    JAPAN_KOREA = "JAPAN_KOREA"


# Source-document folder name -> market tag written into the index.
MARKET_DIRS: dict[str, str] = {
    "US美国标准": TargetMarket.US.value,
    "Europe欧洲标准": TargetMarket.EUROPE.value,
    "MiddleEast中东标准": TargetMarket.MIDDLE_EAST.value,
    "SoutheastAsia东南亚标准": TargetMarket.SOUTHEAST_ASIA.value,
    "JapanKorea日韩标准": TargetMarket.JAPAN_KOREA.value,
}

# Target market -> chunk market tags that satisfy it.
MARKET_ALIASES: dict[str, list[str]] = {
    TargetMarket.US.value: ["US", "US美国标准", GLOBAL_MARKET],
    TargetMarket.EUROPE.value: ["EUROPE", "Europe欧洲标准", GLOBAL_MARKET],
    TargetMarket.MIDDLE_EAST.value: ["MIDDLE_EAST", "MiddleEast中东标准", GLOBAL_MARKET],
    TargetMarket.SOUTHEAST_ASIA.value: [
        "SOUTHEAST_ASIA",
        "SoutheastAsia东南亚标准",
        GLOBAL_MARKET,
    ],
    TargetMarket.JAPAN_KOREA.value: ["JAPAN_KOREA", "JapanKorea日韩标准", GLOBAL_MARKET],
}


def market_key(market: TargetMarket | str) -> str:
    """Return the plain string tag for a market."""
    if isinstance(market, TargetMarket):
        return market.value
    return market


def resolve_market_filter(market: TargetMarket | str) -> list[str]:
    """Return the chunk market tags allowed for a target market.

    Markets missing from MARKET_ALIASES fall back to [market, "Global"].
    """
    key = market_key(market)
    return list(MARKET_ALIASES.get(key, [key, GLOBAL_MARKET]))


def market_for_folder(folder_name: str, market_dirs: dict[str, str] | None = None) -> str | None:
    """Map a source-document folder to its market tag.

    Accepts both the localized folder names and the bare market keys.
    """
    market_dirs = MARKET_DIRS if market_dirs is None else market_dirs
    if folder_name in market_dirs:
        return market_dirs[folder_name]
    if folder_name in TargetMarket._value2member_map_:
        return folder_name
    return None


def find_alias_drift(
    market_dirs: dict[str, str] | None = None,
    aliases: dict[str, list[str]] | None = None,
) -> list[str]:
    """List inconsistencies between the ingestion folder map and the alias table.

    Returns:
        Human-readable problems; empty when both tables agree.
    """
    market_dirs = MARKET_DIRS if market_dirs is None else market_dirs
    aliases = MARKET_ALIASES if aliases is None else aliases

    problems = []
    for market in TargetMarket:
        if market.value not in aliases:
            problems.append(f"Market {market.value} has no alias entry")
    for folder, market in market_dirs.items():
        allowed = aliases.get(market)
        if allowed is None:
            continue
        if market not in allowed:
            problems.append(f"Alias entry for {market} does not include its own tag")
        if folder not in allowed:
            problems.append(f"Folder '{folder}' is not an alias of {market}")
    return problems
