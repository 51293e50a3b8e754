"""Time-window classification of events relative to a reference instant.

All functions take ``now`` explicitly. Hour and minute differences are
rounded half-up, so an event 30 minutes out already counts as "1 hour".
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any

from eventintel.core.data_helpers import safe_datetime


PRE_EVENT_MIN_HOURS = 1
PRE_EVENT_MAX_HOURS = 24
POST_EVENT_MAX_HOURS = 2
LIVE_WINDOW = timedelta(hours=24)


class DisplayBucket(str, Enum):
    UPCOMING = "upcoming"
    LIVE = "live"
    NONE = "none"


@dataclass(frozen=True)
class EventTiming:
    """Signed distance from ``now`` to an event (positive means future)."""

    hours: int
    minutes: int
    is_upcoming: bool
    label: str
    exact_hours: float


def round_half_up(value: float) -> int:
    """Round halves toward positive infinity (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(value + 0.5)


def get_time_until_event(event_date: Any, now: datetime) -> EventTiming | None:
    """Describe how far ``event_date`` is from ``now``.

    Returns None when the event date cannot be parsed.
    """
    event = safe_datetime(event_date)
    now = safe_datetime(now)
    if event is None or now is None:
        return None

    diff_seconds = (event - now).total_seconds()
    diff_hours = diff_seconds / 3600
    # Minute component within the hour, sign follows the difference
    diff_minutes = math.fmod(diff_seconds / 60, 60)
    is_upcoming = diff_seconds > 0

    if not is_upcoming:
        hours_ago = abs(diff_hours)
        if hours_ago < 1:
            label = f"{abs(round_half_up(diff_minutes))} minutes ago"
        else:
            label = f"{round_half_up(hours_ago)} hours ago"
    elif diff_hours < 1:
        label = f"In {round_half_up(diff_minutes)} minutes"
    elif diff_hours < 24:
        label = f"In {round_half_up(diff_hours)} hours"
    else:
        label = f"In {round_half_up(diff_hours / 24)} days"

    return EventTiming(
        hours=round_half_up(diff_hours),
        minutes=round_half_up(diff_minutes),
        is_upcoming=is_upcoming,
        label=label,
        exact_hours=diff_hours,
    )


def should_analyze_pre_event(event_date: Any, now: datetime) -> bool:
    """True when the event is 1 to 24 hours away."""
    timing = get_time_until_event(event_date, now)
    if timing is None:
        return False
    return timing.is_upcoming and PRE_EVENT_MIN_HOURS <= timing.hours <= PRE_EVENT_MAX_HOURS


def should_analyze_post_event(event_date: Any, now: datetime) -> bool:
    """True when the event was released within the last 2 hours."""
    timing = get_time_until_event(event_date, now)
    if timing is None:
        return False
    return not timing.is_upcoming and abs(timing.hours) <= POST_EVENT_MAX_HOURS


def display_bucket(event_date: Any, now: datetime) -> DisplayBucket:
    """Where a pre-analysis belongs in the calendar view.

    Future events are upcoming; events released in the trailing 24 hours are
    live; anything older is not shown.
    """
    event = safe_datetime(event_date)
    now = safe_datetime(now)
    if event is None or now is None:
        return DisplayBucket.NONE
    if event > now:
        return DisplayBucket.UPCOMING
    if event >= now - LIVE_WINDOW:
        return DisplayBucket.LIVE
    return DisplayBucket.NONE
