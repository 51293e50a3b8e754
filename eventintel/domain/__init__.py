"""Domain models for events, analyses and notification targeting.

Typed representations built from raw provider and store rows at the
boundary; the calendar and notification components only ever see these.
"""

from .events import (
    Event,
    ExternalEvent,
    PostEventAnalysis,
    PreEventAnalysis,
    TradeSetup,
    event_from_row,
    external_event_from_row,
    post_analysis_from_row,
    pre_analysis_from_row,
)
from .notifications import (
    NewsItem,
    NotificationCategory,
    NotificationRecord,
    SignalEvent,
    SignalType,
    UserNotificationPreference,
    category_for,
    default_preferences,
)

__all__ = [
    "Event",
    "ExternalEvent",
    "PostEventAnalysis",
    "PreEventAnalysis",
    "TradeSetup",
    "event_from_row",
    "external_event_from_row",
    "post_analysis_from_row",
    "pre_analysis_from_row",
    "NewsItem",
    "NotificationCategory",
    "NotificationRecord",
    "SignalEvent",
    "SignalType",
    "UserNotificationPreference",
    "category_for",
    "default_preferences",
]
