"""Tests for quiet hours and per-user notification eligibility."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from eventintel.domain.notifications import (
    NewsItem,
    NotificationCategory,
    SignalType,
    UserNotificationPreference,
    category_for,
    default_preferences,
)
from eventintel.services.notifications.eligibility import (
    should_notify_calendar,
    should_notify_news,
    should_notify_signal,
)
from eventintel.services.notifications.quiet_hours import is_in_quiet_hours, parse_time_of_day


AT_23_UTC = datetime(2025, 1, 10, 23, 0, tzinfo=UTC)
AT_NOON_UTC = datetime(2025, 1, 10, 12, 0, tzinfo=UTC)


class TestQuietHours:
    """Quiet-hours window arithmetic."""

    def test_disabled(self, make_prefs):
        """Disabled quiet hours never block."""
        assert is_in_quiet_hours(make_prefs(), AT_23_UTC) is False

    @pytest.mark.parametrize(
        ("hour", "minute", "expected"),
        [(23, 0, True), (22, 0, True), (3, 0, True), (8, 0, True), (8, 1, False), (12, 0, False), (21, 59, False)],
    )
    def test_overnight_window(self, make_prefs, hour, minute, expected):
        """22:00-08:00 wraps midnight with inclusive bounds."""
        prefs = make_prefs(quiet_hours_enabled=True, quiet_hours_start="22:00", quiet_hours_end="08:00")
        now = datetime(2025, 1, 10, hour, minute, tzinfo=UTC)
        assert is_in_quiet_hours(prefs, now) is expected

    def test_same_day_window(self, make_prefs):
        """A 12:00-14:00 window blocks only inside it."""
        prefs = make_prefs(quiet_hours_enabled=True, quiet_hours_start="12:00", quiet_hours_end="14:00")
        assert is_in_quiet_hours(prefs, AT_NOON_UTC) is True
        assert is_in_quiet_hours(prefs, AT_23_UTC) is False

    def test_uses_user_timezone(self, make_prefs):
        """Local time is computed in the user's zone."""
        prefs = make_prefs(
            quiet_hours_enabled=True, quiet_hours_start="22:00", quiet_hours_end="08:00",
            timezone="Asia/Tokyo",
        )
        # 12:00 UTC is 21:00 in Tokyo, 14:00 UTC is 23:00
        assert is_in_quiet_hours(prefs, AT_NOON_UTC) is False
        assert is_in_quiet_hours(prefs, datetime(2025, 1, 10, 14, 0, tzinfo=UTC)) is True

    @pytest.mark.parametrize("tz", ["Not/AZone", "../etc"])
    def test_unknown_timezone_fails_open(self, make_prefs, tz):
        """A zone that cannot be resolved is treated as not quiet."""
        prefs = make_prefs(quiet_hours_enabled=True, timezone=tz)
        assert is_in_quiet_hours(prefs, AT_23_UTC) is False

    def test_malformed_time_fails_open(self, make_prefs):
        """Unparseable HH:MM is treated as not quiet."""
        prefs = make_prefs(quiet_hours_enabled=True, quiet_hours_start="late")
        assert is_in_quiet_hours(prefs, AT_23_UTC) is False

    def test_parse_time_of_day(self):
        """HH:MM becomes minutes since midnight."""
        assert parse_time_of_day("08:30") == 510
        with pytest.raises(ValueError):
            parse_time_of_day("25:00")


class TestNewsEligibility:
    """News item pipeline."""

    def test_master_toggle(self, make_prefs):
        """Master toggle off blocks everything."""
        prefs = make_prefs(notifications_enabled=False)
        assert should_notify_news(prefs, NewsItem(title="x"), AT_NOON_UTC) is False

    def test_default_preferences_are_silent(self):
        """Onboarding defaults never notify."""
        prefs = default_preferences("new-user")
        assert prefs.notifications_enabled is False
        assert prefs.quiet_hours_enabled is False
        assert (prefs.quiet_hours_start, prefs.quiet_hours_end, prefs.timezone) == ("22:00", "08:00", "UTC")
        assert should_notify_news(prefs, NewsItem(title="x", is_breaking=True), AT_NOON_UTC) is False

    def test_category_toggle_off(self, make_prefs):
        """Crypto off blocks crypto news."""
        prefs = make_prefs(news_crypto=False)
        assert should_notify_news(prefs, NewsItem(title="BTC", category="crypto"), AT_NOON_UTC) is False

    def test_quiet_hours_block_regardless_of_category(self, make_prefs):
        """23:00 inside 22:00-08:00 blocks even enabled categories."""
        prefs = make_prefs(quiet_hours_enabled=True, quiet_hours_start="22:00", quiet_hours_end="08:00")
        item = NewsItem(title="Stocks rally", category="stocks", is_breaking=True)
        assert should_notify_news(prefs, item, AT_23_UTC) is False

    def test_breaking_toggle(self, make_prefs):
        """Breaking items need the breaking toggle."""
        item = NewsItem(title="Flash", is_breaking=True)
        assert should_notify_news(make_prefs(news_breaking=False), item, AT_NOON_UTC) is False
        assert should_notify_news(make_prefs(), item, AT_NOON_UTC) is True

    def test_impact_defaults_to_medium(self, make_prefs):
        """Missing impact is treated as medium."""
        prefs = make_prefs(news_medium_impact=False)
        assert should_notify_news(prefs, NewsItem(title="x"), AT_NOON_UTC) is False
        assert should_notify_news(prefs, NewsItem(title="x", impact="HIGH"), AT_NOON_UTC) is True

    def test_low_impact_toggle(self, make_prefs):
        """Low-impact items need the low toggle."""
        prefs = make_prefs(news_low_impact=False)
        assert should_notify_news(prefs, NewsItem(title="x", impact="low"), AT_NOON_UTC) is False

    @pytest.mark.parametrize(
        ("label", "toggle"),
        [
            ("cryptocurrency", "news_crypto"),
            ("Equities", "news_stocks"),
            ("fed", "news_central_bank"),
            ("ecb", "news_central_bank"),
            ("politics", "news_geopolitical"),
            ("forex", "news_forex"),
        ],
    )
    def test_category_synonyms(self, make_prefs, label, toggle):
        """Synonyms map onto the matching toggle."""
        prefs = make_prefs(**{toggle: False})
        assert should_notify_news(prefs, NewsItem(title="x", category=label), AT_NOON_UTC) is False

    def test_unmapped_category_passes(self, make_prefs):
        """Unknown categories are not filtered."""
        prefs = make_prefs(**{f"news_{c.value}": False for c in NotificationCategory})
        assert should_notify_news(prefs, NewsItem(title="x", category="weather"), AT_NOON_UTC) is True

    def test_attached_signal_toggle(self, make_prefs):
        """A news item carrying a signal needs that signal toggle."""
        item = NewsItem(title="x", signal=SignalType.STRONG_SELL)
        assert should_notify_news(make_prefs(signal_strong_sell=False), item, AT_NOON_UTC) is False
        assert should_notify_news(make_prefs(signal_buy=False), item, AT_NOON_UTC) is True


class TestSignalEligibility:
    """Standalone signal pipeline."""

    def test_only_signal_toggle_applies(self, make_prefs):
        """News toggles do not affect signals."""
        prefs = make_prefs(news_crypto=False, news_medium_impact=False, signal_buy=True, signal_sell=False)
        assert should_notify_signal(prefs, SignalType.BUY, AT_NOON_UTC) is True
        assert should_notify_signal(prefs, SignalType.SELL, AT_NOON_UTC) is False

    def test_quiet_hours_apply(self, make_prefs):
        """Quiet hours block signals too."""
        prefs = make_prefs(quiet_hours_enabled=True)
        assert should_notify_signal(prefs, SignalType.BUY, AT_23_UTC) is False


class TestCalendarEligibility:
    """Calendar reminder pipeline."""

    def test_impact_toggles(self, make_prefs):
        """Calendar impact toggles gate reminders; default impact is medium."""
        prefs = make_prefs(calendar_high_impact=True, calendar_medium_impact=False)
        assert should_notify_calendar(prefs, "High", AT_NOON_UTC) is True
        assert should_notify_calendar(prefs, None, AT_NOON_UTC) is False

    def test_calendar_disabled(self, make_prefs):
        """Calendar master toggle off blocks reminders."""
        prefs = make_prefs(calendar_enabled=False)
        assert should_notify_calendar(prefs, "high", AT_NOON_UTC) is False


class TestPreferenceParsing:
    """Boundary parsing of store rows."""

    def test_from_row_coerces(self):
        """Loose row values become typed fields; missing keys keep defaults."""
        prefs = UserNotificationPreference.from_row({
            "user_id": 7,
            "notifications_enabled": "true",
            "news_crypto": 0,
            "timezone": None,
            "quiet_hours_start": "23:30",
        })
        assert prefs.user_id == "7"
        assert prefs.notifications_enabled is True
        assert prefs.news_crypto is False
        assert prefs.timezone == "UTC"
        assert prefs.quiet_hours_start == "23:30"
        assert prefs.news_forex is True

    def test_category_for(self):
        """Category labels resolve case-insensitively."""
        assert category_for("Central Bank") == NotificationCategory.CENTRAL_BANK
        assert category_for("") is None
        assert category_for("sports") is None

    def test_signal_parse(self):
        """Signals parse loosely; NO_TRADE is no signal."""
        assert SignalType.parse("strong buy") == SignalType.STRONG_BUY
        assert SignalType.parse("NO_TRADE") is None
        assert SignalType.parse(None) is None
