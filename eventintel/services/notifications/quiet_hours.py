"""Per-user quiet hours in the user's own timezone."""

from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from eventintel.core.data_helpers import safe_datetime
from eventintel.core.logging import get_logger
from eventintel.domain.notifications import UserNotificationPreference


logger = get_logger("notifications.quiet_hours")


def parse_time_of_day(value: str) -> int:
    """Convert ``HH:MM`` to minutes since midnight (raises ValueError)."""
    hours, minutes = value.strip().split(":")[:2]
    total = int(hours) * 60 + int(minutes)
    if not 0 <= total < 24 * 60:
        raise ValueError(f"time of day out of range: {value}")
    return total


def is_in_quiet_hours(prefs: UserNotificationPreference, now: datetime) -> bool:
    """Check whether ``now`` falls inside the user's quiet window.

    Windows where start > end wrap past midnight (22:00-08:00). Both bounds
    are inclusive. An unknown timezone or malformed time fails open and is
    treated as outside quiet hours.
    """
    if not prefs.quiet_hours_enabled:
        return False

    try:
        zone = ZoneInfo(prefs.timezone or "UTC")
        local = safe_datetime(now).astimezone(zone)
        current = local.hour * 60 + local.minute
        start = parse_time_of_day(prefs.quiet_hours_start)
        end = parse_time_of_day(prefs.quiet_hours_end)
    except (ZoneInfoNotFoundError, ValueError, TypeError, AttributeError) as e:
        logger.debug(
            f"Quiet hours check skipped: {e}",
            extra={"user_id": prefs.user_id, "timezone": prefs.timezone},
        )
        return False

    if start > end:
        return current >= start or current <= end
    return start <= current <= end
