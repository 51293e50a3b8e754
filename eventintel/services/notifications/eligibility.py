"""Per-user eligibility rules for news, signals and calendar reminders.

Each check short-circuits in a fixed order: master toggle, quiet hours,
then the item-specific toggles.
"""

from __future__ import annotations

from datetime import datetime

from eventintel.domain.notifications import (
    NewsItem,
    SignalType,
    UserNotificationPreference,
    category_for,
)
from eventintel.services.notifications.quiet_hours import is_in_quiet_hours


DEFAULT_IMPACT = "medium"


def _normalize_impact(impact: str | None) -> str:
    return (impact or "").strip().lower() or DEFAULT_IMPACT


def _base_checks(prefs: UserNotificationPreference, now: datetime) -> bool:
    if not prefs.notifications_enabled:
        return False
    return not is_in_quiet_hours(prefs, now)


def should_notify_news(
    prefs: UserNotificationPreference,
    news: NewsItem,
    now: datetime,
) -> bool:
    """Decide whether a news item reaches this user."""
    if not _base_checks(prefs, now):
        return False

    if news.is_breaking and not prefs.news_breaking:
        return False

    if not prefs.news_impact_enabled(_normalize_impact(news.impact)):
        return False

    category = category_for(news.category)
    if category is not None and not prefs.category_enabled(category):
        return False

    if news.signal is not None and not prefs.signal_enabled(news.signal):
        return False

    return True


def should_notify_signal(
    prefs: UserNotificationPreference,
    signal: SignalType,
    now: datetime,
) -> bool:
    """Decide whether a standalone trading signal reaches this user."""
    if not _base_checks(prefs, now):
        return False
    return prefs.signal_enabled(signal)


def should_notify_calendar(
    prefs: UserNotificationPreference,
    impact: str | None,
    now: datetime,
) -> bool:
    """Decide whether an upcoming calendar event reminder reaches this user."""
    if not _base_checks(prefs, now):
        return False
    if not prefs.calendar_enabled:
        return False
    return prefs.calendar_impact_enabled(_normalize_impact(impact))
