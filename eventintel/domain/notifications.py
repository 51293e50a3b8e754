"""Notification targeting domain models.

User preferences, the items that can trigger a notification (news and
trading signals) and the persisted notification record.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from eventintel.core.data_helpers import safe_bool, safe_datetime, safe_str


class SignalType(str, Enum):
    """Trading signal attached to a news item or emitted on its own."""

    STRONG_BUY = "STRONG_BUY"
    BUY = "BUY"
    SELL = "SELL"
    STRONG_SELL = "STRONG_SELL"

    @classmethod
    def parse(cls, value: Any) -> SignalType | None:
        """Case-insensitive parse; ``NO_TRADE`` and unknown values give None."""
        if isinstance(value, cls):
            return value
        text = safe_str(value).upper().replace(" ", "_")
        try:
            return cls(text)
        except ValueError:
            return None


class NotificationCategory(str, Enum):
    """News categories a user can toggle."""

    CRYPTO = "crypto"
    FOREX = "forex"
    STOCKS = "stocks"
    COMMODITIES = "commodities"
    INDICES = "indices"
    ECONOMIC = "economic"
    CENTRAL_BANK = "central_bank"
    GEOPOLITICAL = "geopolitical"


# Provider category labels -> toggle category. Unlisted labels are not filtered.
CATEGORY_SYNONYMS: dict[str, NotificationCategory] = {
    "crypto": NotificationCategory.CRYPTO,
    "cryptocurrency": NotificationCategory.CRYPTO,
    "cryptocurrencies": NotificationCategory.CRYPTO,
    "bitcoin": NotificationCategory.CRYPTO,
    "defi": NotificationCategory.CRYPTO,
    "forex": NotificationCategory.FOREX,
    "fx": NotificationCategory.FOREX,
    "currency": NotificationCategory.FOREX,
    "currencies": NotificationCategory.FOREX,
    "stocks": NotificationCategory.STOCKS,
    "stock": NotificationCategory.STOCKS,
    "equities": NotificationCategory.STOCKS,
    "equity": NotificationCategory.STOCKS,
    "commodities": NotificationCategory.COMMODITIES,
    "commodity": NotificationCategory.COMMODITIES,
    "metals": NotificationCategory.COMMODITIES,
    "energy": NotificationCategory.COMMODITIES,
    "indices": NotificationCategory.INDICES,
    "index": NotificationCategory.INDICES,
    "economic": NotificationCategory.ECONOMIC,
    "economy": NotificationCategory.ECONOMIC,
    "macro": NotificationCategory.ECONOMIC,
    "central_bank": NotificationCategory.CENTRAL_BANK,
    "central bank": NotificationCategory.CENTRAL_BANK,
    "central_banks": NotificationCategory.CENTRAL_BANK,
    "fed": NotificationCategory.CENTRAL_BANK,
    "ecb": NotificationCategory.CENTRAL_BANK,
    "boj": NotificationCategory.CENTRAL_BANK,
    "boe": NotificationCategory.CENTRAL_BANK,
    "geopolitical": NotificationCategory.GEOPOLITICAL,
    "geopolitics": NotificationCategory.GEOPOLITICAL,
    "politics": NotificationCategory.GEOPOLITICAL,
}


def category_for(label: str | None) -> NotificationCategory | None:
    """Resolve a free-text news category to its toggle (None if unmapped)."""
    key = safe_str(label).lower()
    if not key:
        return None
    return CATEGORY_SYNONYMS.get(key)


class UserNotificationPreference(BaseModel):
    """Per-user notification settings. Read-only to the engine."""

    user_id: str

    notifications_enabled: bool = False
    email_notifications: bool = False
    push_notifications: bool = False

    news_breaking: bool = True
    news_high_impact: bool = True
    news_medium_impact: bool = True
    news_low_impact: bool = False

    news_crypto: bool = True
    news_forex: bool = True
    news_stocks: bool = True
    news_commodities: bool = True
    news_indices: bool = True
    news_economic: bool = True
    news_central_bank: bool = True
    news_geopolitical: bool = True

    signal_strong_buy: bool = True
    signal_buy: bool = True
    signal_sell: bool = True
    signal_strong_sell: bool = True

    calendar_enabled: bool = True
    calendar_high_impact: bool = True
    calendar_medium_impact: bool = False
    calendar_low_impact: bool = False

    quiet_hours_enabled: bool = False
    quiet_hours_start: str = Field(default="22:00", description="Local HH:MM")
    quiet_hours_end: str = Field(default="08:00", description="Local HH:MM")
    timezone: str = Field(default="UTC", description="IANA zone name")

    def category_enabled(self, category: NotificationCategory) -> bool:
        toggles = {
            NotificationCategory.CRYPTO: self.news_crypto,
            NotificationCategory.FOREX: self.news_forex,
            NotificationCategory.STOCKS: self.news_stocks,
            NotificationCategory.COMMODITIES: self.news_commodities,
            NotificationCategory.INDICES: self.news_indices,
            NotificationCategory.ECONOMIC: self.news_economic,
            NotificationCategory.CENTRAL_BANK: self.news_central_bank,
            NotificationCategory.GEOPOLITICAL: self.news_geopolitical,
        }
        return toggles[category]

    def signal_enabled(self, signal: SignalType) -> bool:
        toggles = {
            SignalType.STRONG_BUY: self.signal_strong_buy,
            SignalType.BUY: self.signal_buy,
            SignalType.SELL: self.signal_sell,
            SignalType.STRONG_SELL: self.signal_strong_sell,
        }
        return toggles[signal]

    def news_impact_enabled(self, impact: str) -> bool:
        """Impact toggle for news; unknown impact levels are not filtered."""
        toggles = {
            "high": self.news_high_impact,
            "medium": self.news_medium_impact,
            "low": self.news_low_impact,
        }
        return toggles.get(impact, True)

    def calendar_impact_enabled(self, impact: str) -> bool:
        toggles = {
            "high": self.calendar_high_impact,
            "medium": self.calendar_medium_impact,
            "low": self.calendar_low_impact,
        }
        return toggles.get(impact, True)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> UserNotificationPreference:
        """Parse a preference store row, falling back to field defaults."""
        data: dict[str, Any] = {"user_id": safe_str(row.get("user_id"))}
        for name, info in cls.model_fields.items():
            if name == "user_id" or name not in row:
                continue
            if info.annotation is bool:
                data[name] = safe_bool(row.get(name), info.default)
            else:
                data[name] = safe_str(row.get(name), info.default) or info.default
        return cls(**data)


def default_preferences(user_id: str) -> UserNotificationPreference:
    """Onboarding defaults: everything off until the user opts in."""
    return UserNotificationPreference(
        user_id=user_id,
        notifications_enabled=False,
        quiet_hours_enabled=False,
        quiet_hours_start="22:00",
        quiet_hours_end="08:00",
        timezone="UTC",
    )


class NewsItem(BaseModel):
    """A market news item that may trigger notifications."""

    id: str | None = None
    title: str = ""
    category: str | None = None
    is_breaking: bool = False
    impact: str | None = None
    sentiment: str | None = None
    trading_pairs: list[str] = Field(default_factory=list)
    signal: SignalType | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> NewsItem:
        pairs = row.get("trading_pairs") or []
        if isinstance(pairs, str):
            pairs = [p.strip() for p in pairs.split(",") if p.strip()]
        return cls(
            id=safe_str(row.get("id")) or None,
            title=safe_str(row.get("title")),
            category=safe_str(row.get("category")) or None,
            is_breaking=safe_bool(row.get("is_breaking")),
            impact=safe_str(row.get("impact")) or None,
            sentiment=safe_str(row.get("sentiment")) or None,
            trading_pairs=[str(p) for p in pairs],
            signal=SignalType.parse(row.get("signal")),
        )


class SignalEvent(BaseModel):
    """A standalone trading signal for one symbol."""

    related_id: str
    signal: SignalType
    symbol: str
    summary: str = ""


class NotificationRecord(BaseModel):
    """A notification persisted to a user's history."""

    user_id: str
    type: str = Field(..., description="news or signal")
    title: str
    message: str
    icon: str | None = None
    action_url: str | None = None
    related_id: str | None = None
    related_type: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> NotificationRecord:
        metadata = row.get("metadata")
        return cls(
            user_id=safe_str(row.get("user_id")),
            type=safe_str(row.get("type"), "news"),
            title=safe_str(row.get("title")),
            message=safe_str(row.get("message")),
            icon=safe_str(row.get("icon")) or None,
            action_url=safe_str(row.get("action_url")) or None,
            related_id=safe_str(row.get("related_id")) or None,
            related_type=safe_str(row.get("related_type")) or None,
            metadata=dict(metadata) if isinstance(metadata, Mapping) else {},
            created_at=safe_datetime(row.get("created_at")),
        )
