"""Event tier classification and affected-asset inference.

Keyword-driven, total function over a free-text event name. Tier and
category are computed independently: a tier-1 keyword can land in the
``other`` category and vice versa.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class ExpectedVolatility(str, Enum):
    """Expected market volatility around an event."""

    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    EXTREME = "extreme"


class EventCategory(str, Enum):
    """Macro category inferred from the event name."""

    EMPLOYMENT = "employment"
    INFLATION = "inflation"
    CENTRAL_BANK = "central_bank"
    GROWTH = "growth"
    HOUSING = "housing"
    SENTIMENT = "sentiment"
    EARNINGS = "earnings"
    CRYPTO = "crypto"
    OTHER = "other"


TIER_1_KEYWORDS: tuple[str, ...] = (
    "fomc", "fed rate", "federal reserve",
    "non-farm", "nfp", "payrolls",
    "cpi", "consumer price",
    "ecb rate", "ecb decision",
    "boj rate", "boj decision", "boj policy",
    "boe rate", "boe decision",
    "gdp advance", "gdp preliminary",
    "halving", "etf approval", "etf decision",
)

TIER_2_KEYWORDS: tuple[str, ...] = (
    "pce", "ppi", "producer price",
    "retail sales",
    "pmi", "ism manufacturing", "ism services",
    "jobless claims", "unemployment claims",
    "earnings aapl", "earnings nvda", "earnings msft",
    "earnings googl", "earnings amzn", "earnings tsla",
    "token unlock", "major unlock",
)

TIER_3_KEYWORDS: tuple[str, ...] = (
    "housing", "building permits", "home sales",
    "consumer confidence", "sentiment",
    "trade balance",
    "factory orders",
    "durables", "durable goods",
)

_TIERS: tuple[tuple[int, tuple[str, ...], ExpectedVolatility], ...] = (
    (1, TIER_1_KEYWORDS, ExpectedVolatility.HIGH),
    (2, TIER_2_KEYWORDS, ExpectedVolatility.MODERATE),
    (3, TIER_3_KEYWORDS, ExpectedVolatility.LOW),
)

# Checked in order, first hit wins
_CATEGORY_KEYWORDS: tuple[tuple[EventCategory, tuple[str, ...]], ...] = (
    (EventCategory.EMPLOYMENT, ("payroll", "employment", "jobless", "unemployment")),
    (EventCategory.INFLATION, ("cpi", "ppi", "pce", "inflation")),
    (EventCategory.CENTRAL_BANK, ("fomc", "fed", "ecb", "boj", "boe", "rate decision")),
    (EventCategory.GROWTH, ("gdp", "pmi", "retail", "sales")),
    (EventCategory.HOUSING, ("housing", "home", "building")),
    (EventCategory.SENTIMENT, ("confidence", "sentiment")),
    (EventCategory.EARNINGS, ("earnings", "eps")),
    (EventCategory.CRYPTO, ("unlock", "halving", "etf")),
)

_PRIMARY_ASSETS: tuple[tuple[tuple[str, ...], tuple[str, ...]], ...] = (
    (("jpy", "boj", "japan"), ("USDJPY", "Nikkei")),
    (("eur", "ecb", "euro"), ("EURUSD", "DAX")),
    (("gbp", "boe", "uk", "britain"), ("GBPUSD", "FTSE")),
    (("bitcoin", "btc", "crypto", "halving", "etf"), ("BTC", "ETH")),
)

DEFAULT_PRIMARY_ASSETS: tuple[str, ...] = ("DXY", "SPX", "TLT")

_SECONDARY_ASSETS: dict[EventCategory, tuple[str, ...]] = {
    EventCategory.INFLATION: ("XAUUSD", "TLT", "BTC"),
    EventCategory.CENTRAL_BANK: ("XAUUSD", "TLT", "BTC"),
    EventCategory.EMPLOYMENT: ("USDJPY", "XAUUSD"),
    EventCategory.GROWTH: ("USDJPY", "XAUUSD"),
    EventCategory.CRYPTO: ("SPX", "DXY"),
}

DEFAULT_SECONDARY_ASSETS: tuple[str, ...] = ("XAUUSD",)


@dataclass(frozen=True)
class EventClassification:
    """Derived importance profile of a scheduled event."""

    tier: int
    expected_volatility: ExpectedVolatility
    category: EventCategory
    primary_assets: list[str] = field(default_factory=list)
    secondary_assets: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "tier": self.tier,
            "expected_volatility": self.expected_volatility.value,
            "category": self.category.value,
            "primary_assets": list(self.primary_assets),
            "secondary_assets": list(self.secondary_assets),
        }


def _contains_any(text: str, keywords: tuple[str, ...]) -> bool:
    return any(k in text for k in keywords)


def infer_category(event_name: str) -> EventCategory:
    """Map an event name to its macro category (``other`` when unknown)."""
    name = (event_name or "").lower()
    for category, keywords in _CATEGORY_KEYWORDS:
        if _contains_any(name, keywords):
            return category
    return EventCategory.OTHER


def infer_primary_assets(event_name: str) -> list[str]:
    """Instruments most directly moved by the event."""
    name = (event_name or "").lower()
    for tokens, assets in _PRIMARY_ASSETS:
        if _contains_any(name, tokens):
            return list(assets)
    return list(DEFAULT_PRIMARY_ASSETS)


def secondary_assets_for(category: EventCategory) -> list[str]:
    """Cross-asset spillover instruments, derived from the category only."""
    return list(_SECONDARY_ASSETS.get(category, DEFAULT_SECONDARY_ASSETS))


def classify_event(event_name: str) -> EventClassification:
    """Classify an event by name into tier, volatility, category and assets.

    Args:
        event_name: Provider-supplied event name, any case or punctuation

    Returns:
        EventClassification; unknown names fall back to tier 3 / ``other``
        with the default US instrument set
    """
    name = (event_name or "").lower()

    for tier, keywords, volatility in _TIERS:
        if _contains_any(name, keywords):
            category = infer_category(name)
            return EventClassification(
                tier=tier,
                expected_volatility=volatility,
                category=category,
                primary_assets=infer_primary_assets(name),
                secondary_assets=secondary_assets_for(category),
            )

    return EventClassification(
        tier=3,
        expected_volatility=ExpectedVolatility.LOW,
        category=EventCategory.OTHER,
        primary_assets=list(DEFAULT_PRIMARY_ASSETS),
        secondary_assets=list(DEFAULT_SECONDARY_ASSETS),
    )
