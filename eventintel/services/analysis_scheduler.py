"""Scheduler sweep deciding which events need automated analysis.

The scheduler itself and the generation step live elsewhere; this module
only selects events by time window and reviews generated analyses.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

from eventintel.calendar.timing import should_analyze_post_event, should_analyze_pre_event
from eventintel.calendar.validation import (
    ValidationFinding,
    validate_post_event_analysis,
    validate_pre_event_analysis,
)
from eventintel.core.logging import batch_context, get_logger
from eventintel.domain.events import Event, PostEventAnalysis, PreEventAnalysis


logger = get_logger("services.analysis_scheduler")


@dataclass
class AnalysisPlan:
    """Events due for pre- and post-event analysis in this sweep."""

    pre_event: list[Event] = field(default_factory=list)
    post_event: list[Event] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "pre_event": [e.name for e in self.pre_event],
            "post_event": [e.name for e in self.post_event],
        }


def select_events_for_analysis(events: Iterable[Event], now: datetime) -> AnalysisPlan:
    """Pick events 1-24h ahead for pre-analysis and <=2h past for post-analysis."""
    with batch_context():
        plan = AnalysisPlan()
        skipped = 0
        for event in events:
            if event.date is None:
                skipped += 1
                continue
            if should_analyze_pre_event(event.date, now):
                plan.pre_event.append(event)
            elif should_analyze_post_event(event.date, now):
                plan.post_event.append(event)

        logger.info(
            "Selected events for analysis",
            extra={
                "pre_event": len(plan.pre_event),
                "post_event": len(plan.post_event),
                "skipped_undated": skipped,
            },
        )
    return plan


def review_analysis(
    kind: Literal["pre", "post"],
    analysis: PreEventAnalysis | PostEventAnalysis | Mapping[str, Any],
) -> list[ValidationFinding]:
    """Validate a generated analysis and log what was found.

    Findings are advisory; the caller decides what to do with them.
    """
    if kind == "pre":
        findings = validate_pre_event_analysis(analysis)
    else:
        findings = validate_post_event_analysis(analysis)

    name = (
        analysis.get("event_name") if isinstance(analysis, Mapping) else analysis.event_name
    )
    for finding in findings:
        logger.warning(
            f"Analysis finding {finding.code}: {finding.message}",
            extra={
                "analysis_kind": kind,
                "event_name": name,
                "code": finding.code,
                "severity": finding.severity.value,
            },
        )
    return findings
