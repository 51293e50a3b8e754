"""
Notification targeting package.

Decides per user whether a news item or trading signal should notify them,
renders the notification, stores it and keeps each user's history bounded.

Usage:
    from eventintel.services.notifications import (
        # Batch entry points
        create_news_notifications,
        create_signal_notifications,

        # Eligibility rules
        should_notify_news,
        should_notify_signal,
        should_notify_calendar,
        is_in_quiet_hours,
    )
"""

from eventintel.services.notifications.dispatcher import (
    create_news_notifications,
    create_signal_notifications,
)
from eventintel.services.notifications.eligibility import (
    should_notify_calendar,
    should_notify_news,
    should_notify_signal,
)
from eventintel.services.notifications.message_builder import (
    DeliveryPayload,
    RenderedNotification,
    build_news_notification,
    build_signal_notification,
    get_notification_icon,
)
from eventintel.services.notifications.quiet_hours import is_in_quiet_hours
from eventintel.services.notifications.retention import (
    KeyedLock,
    cleanup_old_notifications,
)
from eventintel.services.notifications.store import DeliveryTransport, NotificationStore


__all__ = [
    "create_news_notifications",
    "create_signal_notifications",
    "should_notify_calendar",
    "should_notify_news",
    "should_notify_signal",
    "is_in_quiet_hours",
    "DeliveryPayload",
    "RenderedNotification",
    "build_news_notification",
    "build_signal_notification",
    "get_notification_icon",
    "KeyedLock",
    "cleanup_old_notifications",
    "DeliveryTransport",
    "NotificationStore",
]
