"""Upcoming and live event buckets for the calendar view.

Pairs stored pre-event analyses with post-event analyses and with the
external feed so that events released in the last 24 hours show their
actual value as soon as either source has it.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

import httpx

from eventintel.calendar.matching import find_best_match
from eventintel.calendar.surprise import has_value
from eventintel.calendar.timing import DisplayBucket, display_bucket, round_half_up
from eventintel.core.data_helpers import safe_datetime
from eventintel.core.logging import batch_context, get_logger
from eventintel.domain.events import ExternalEvent, PostEventAnalysis, PreEventAnalysis
from eventintel.services.calendar_provider import fetch_external_events


logger = get_logger("services.live_events")

NAME_PREFIX_LEN = 20
RELEASED_WINDOW_MINUTES = 24 * 60


@dataclass
class UpcomingEvent:
    """Pre-analysed event that has not been released yet."""

    analysis: PreEventAnalysis
    hours_until: float

    def to_dict(self) -> dict[str, Any]:
        a = self.analysis
        return {
            "id": a.id,
            "name": a.event_name,
            "date": a.event_date.date().isoformat() if a.event_date else None,
            "time": a.event_date.isoformat() if a.event_date else None,
            "country": a.country,
            "forecast": a.forecast,
            "previous": a.previous,
            "hours_until": self.hours_until,
        }


@dataclass
class LiveEvent:
    """Event released within the trailing 24 hours."""

    id: str | None
    name: str
    time: datetime | None
    country: str
    minutes_ago: int
    has_actual: bool
    actual: Any = None
    forecast: Any = None
    previous: Any = None
    analysis: PreEventAnalysis | PostEventAnalysis | None = None
    post_analysis: PostEventAnalysis | None = None
    external: ExternalEvent | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "date": self.time.date().isoformat() if self.time else None,
            "time": self.time.isoformat() if self.time else None,
            "country": self.country,
            "actual": self.actual,
            "forecast": self.forecast,
            "previous": self.previous,
            "minutes_ago": self.minutes_ago,
            "has_actual": self.has_actual,
        }


@dataclass
class EventBuckets:
    upcoming: list[UpcomingEvent] = field(default_factory=list)
    live: list[LiveEvent] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "upcoming": [e.to_dict() for e in self.upcoming],
            "live": [e.to_dict() for e in self.live],
        }


def _names_overlap(full_name: str, other_name: str) -> bool:
    """True when ``full_name`` contains the first 20 chars of ``other_name``."""
    prefix = other_name.lower()[:NAME_PREFIX_LEN]
    return bool(prefix) and prefix in full_name.lower()


def _find_post(
    pre: PreEventAnalysis, posts: Sequence[PostEventAnalysis]
) -> PostEventAnalysis | None:
    for post in posts:
        if _names_overlap(post.event_name, pre.event_name) or _names_overlap(
            pre.event_name, post.event_name
        ):
            return post
    return None


def build_event_buckets(
    pre_analyses: Sequence[PreEventAnalysis],
    post_analyses: Sequence[PostEventAnalysis],
    external_events: Sequence[ExternalEvent],
    now: datetime,
) -> EventBuckets:
    """Split analyses into upcoming and live buckets.

    Standalone post-analyses released in the last 24 hours that no live
    entry already covers are listed first in ``live``.
    """
    now = safe_datetime(now)
    upcoming: list[UpcomingEvent] = []
    live: list[LiveEvent] = []

    for pre in pre_analyses:
        if pre.event_date is None:
            continue

        bucket = display_bucket(pre.event_date, now)
        if bucket is DisplayBucket.UPCOMING:
            hours_until = (pre.event_date - now).total_seconds() / 3600
            upcoming.append(UpcomingEvent(pre, round_half_up(hours_until * 10) / 10))
            continue
        if bucket is not DisplayBucket.LIVE:
            continue

        post = _find_post(pre, post_analyses)
        match = find_best_match(external_events, pre.event_name, pre.event_date, pre.country)
        external = match.event if match else None

        post_has_actual = post is not None and has_value(post.actual)
        external_has_actual = external is not None and has_value(external.actual)
        if post_has_actual:
            actual = post.actual
        elif external_has_actual:
            actual = external.actual
        else:
            actual = None

        minutes_ago = (now - pre.event_date).total_seconds() / 60
        live.append(
            LiveEvent(
                id=pre.id,
                name=pre.event_name,
                time=pre.event_date,
                country=pre.country,
                minutes_ago=round_half_up(minutes_ago),
                has_actual=post_has_actual or external_has_actual,
                actual=actual,
                forecast=external.forecast if external and external.forecast is not None else pre.forecast,
                previous=external.previous if external and external.previous is not None else pre.previous,
                analysis=pre,
                post_analysis=post,
                external=external,
            )
        )

    released: list[LiveEvent] = []
    for post in post_analyses:
        if post.event_date is None:
            continue
        minutes_ago = (now - post.event_date).total_seconds() / 60
        if not 0 < minutes_ago <= RELEASED_WINDOW_MINUTES:
            continue

        already_included = any(
            (entry.post_analysis is not None and post.id is not None and entry.post_analysis.id == post.id)
            or _names_overlap(entry.name, post.event_name)
            for entry in live
        )
        if already_included:
            continue

        released.append(
            LiveEvent(
                id=post.id,
                name=post.event_name,
                time=post.event_date,
                country=post.country,
                minutes_ago=round_half_up(minutes_ago),
                has_actual=True,
                actual=post.actual,
                forecast=post.forecast,
                previous=post.previous,
                analysis=post,
            )
        )

    return EventBuckets(upcoming=upcoming, live=released + live)


async def load_event_buckets(
    pre_analyses: Sequence[PreEventAnalysis],
    post_analyses: Sequence[PostEventAnalysis],
    from_date: date | str,
    to_date: date | str,
    now: datetime,
    *,
    client: httpx.AsyncClient | None = None,
) -> EventBuckets:
    """Fetch the external feed once for the range and build the buckets."""
    with batch_context():
        external = await fetch_external_events(from_date, to_date, client=client)
        buckets = build_event_buckets(pre_analyses, post_analyses, external, now)
        logger.info(
            "Built event buckets",
            extra={
                "upcoming": len(buckets.upcoming),
                "live": len(buckets.live),
                "external_events": len(external),
            },
        )
    return buckets
