"""Render notifications for storage and delivery.

Builds the title/message/icon triple plus the action URL and tag used by
push and email transports.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

from eventintel.core.text import truncate
from eventintel.domain.notifications import (
    NewsItem,
    NotificationRecord,
    SignalEvent,
    SignalType,
)


TITLE_SOURCE_CHARS = 50
MESSAGE_MAX_CHARS = 150

BREAKING_ICON = "🚨"
DEFAULT_NEWS_ICON = "📰"

SIGNAL_ICONS: dict[SignalType, str] = {
    SignalType.STRONG_BUY: "🟢",
    SignalType.BUY: "📈",
    SignalType.SELL: "📉",
    SignalType.STRONG_SELL: "🔴",
}

SIGNAL_LABELS: dict[SignalType, str] = {
    SignalType.STRONG_BUY: "Strong Buy",
    SignalType.BUY: "Buy",
    SignalType.SELL: "Sell",
    SignalType.STRONG_SELL: "Strong Sell",
}

SENTIMENT_ICONS = {
    "bullish": "📈",
    "bearish": "📉",
}

STRONG_SIGNALS = frozenset({SignalType.STRONG_BUY, SignalType.STRONG_SELL})


@dataclass(frozen=True)
class DeliveryPayload:
    """What push and email transports receive."""

    title: str
    message: str
    icon: str
    url: str
    tag: str
    require_interaction: bool = False


@dataclass
class RenderedNotification:
    """A notification rendered once per item and stamped per user."""

    type: str
    title: str
    message: str
    icon: str
    action_url: str
    tag: str
    related_id: str | None
    related_type: str
    require_interaction: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_record(self, user_id: str) -> NotificationRecord:
        return NotificationRecord(
            user_id=user_id,
            type=self.type,
            title=self.title,
            message=self.message,
            icon=self.icon,
            action_url=self.action_url,
            related_id=self.related_id,
            related_type=self.related_type,
            metadata=dict(self.metadata),
        )

    def to_payload(self) -> DeliveryPayload:
        return DeliveryPayload(
            title=self.title,
            message=self.message,
            icon=self.icon,
            url=self.action_url,
            tag=self.tag,
            require_interaction=self.require_interaction,
        )


def get_notification_icon(news: NewsItem) -> str:
    """Breaking beats signal, signal beats sentiment, else the newspaper."""
    if news.is_breaking:
        return BREAKING_ICON
    if news.signal is not None:
        return SIGNAL_ICONS[news.signal]
    sentiment = (news.sentiment or "").lower()
    return SENTIMENT_ICONS.get(sentiment, DEFAULT_NEWS_ICON)


def build_news_notification(news: NewsItem) -> RenderedNotification:
    """Render a news item.

    Breaking items get the headline in the title (50 chars, then "...");
    others get a generic "<category>: New Update" title. The message is the
    headline capped at 150 characters.
    """
    raw_title = news.title or ""
    icon = get_notification_icon(news)

    if news.is_breaking:
        title = f"{BREAKING_ICON} Breaking: {truncate(raw_title, TITLE_SOURCE_CHARS, keep=TITLE_SOURCE_CHARS)}"
    else:
        title = f"{icon} {news.category or 'news'}: New Update"

    message = truncate(raw_title, MESSAGE_MAX_CHARS) or "New market update"

    if news.id:
        url = f"/terminal/news?newsId={quote(news.id, safe='')}"
        tag = f"news-{news.id}"
    else:
        url = "/terminal/news"
        tag = "news"

    return RenderedNotification(
        type="news",
        title=title,
        message=message,
        icon=icon,
        action_url=url,
        tag=tag,
        related_id=news.id,
        related_type="news",
        require_interaction=news.is_breaking,
        metadata={
            "category": news.category,
            "is_breaking": news.is_breaking,
            "impact": news.impact,
            "sentiment": news.sentiment,
            "signal": news.signal.value if news.signal else None,
            "trading_pairs": list(news.trading_pairs),
        },
    )


def build_signal_notification(event: SignalEvent) -> RenderedNotification:
    """Render a standalone trading signal for one symbol."""
    icon = SIGNAL_ICONS[event.signal]
    return RenderedNotification(
        type="signal",
        title=f"{icon} {SIGNAL_LABELS[event.signal]} Signal: {event.symbol}",
        message=truncate(event.summary, MESSAGE_MAX_CHARS) or "New signal",
        icon=icon,
        action_url=f"/terminal/chart?symbol={quote(event.symbol, safe='')}",
        tag=f"signal-{event.related_id}",
        related_id=event.related_id,
        related_type="signal",
        require_interaction=event.signal in STRONG_SIGNALS,
        metadata={"signal": event.signal.value, "symbol": event.symbol},
    )
