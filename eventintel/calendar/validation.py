"""Consistency checks for generated pre- and post-event analyses.

Advisory only: every applicable rule runs and findings accumulate. Findings
are returned as data and never raised.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from eventintel.domain.events import (
    PostEventAnalysis,
    PreEventAnalysis,
    post_analysis_from_row,
    pre_analysis_from_row,
)


class Severity(str, Enum):
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class ValidationFinding:
    """One consistency problem found in an analysis."""

    code: str
    message: str
    severity: Severity

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "severity": self.severity.value}


REQUIRED_SCENARIOS: tuple[str, ...] = ("bigBeat", "smallBeat", "inline", "smallMiss", "bigMiss")
VALID_APPROACHES = frozenset({"position_before", "wait_and_react", "fade_move", "no_trade"})
VALID_URGENCIES = frozenset({"immediate", "soon", "patient"})
VALID_ACTIONS = frozenset({"trade_continuation", "fade_move", "wait_confirmation", "no_trade"})
BIG_SURPRISES = frozenset({"big_beat", "big_miss"})


def _warning(code: str, message: str) -> ValidationFinding:
    return ValidationFinding(code, message, Severity.WARNING)


def _error(code: str, message: str) -> ValidationFinding:
    return ValidationFinding(code, message, Severity.ERROR)


def validate_pre_event_analysis(
    analysis: PreEventAnalysis | Mapping[str, Any],
) -> list[ValidationFinding]:
    """Check a pre-event analysis for internal inconsistencies.

    Args:
        analysis: Parsed analysis, or a raw store row (parsed here)

    Returns:
        Findings in rule order; empty when the analysis is consistent
    """
    if not isinstance(analysis, PreEventAnalysis):
        analysis = pre_analysis_from_row(analysis)

    findings: list[ValidationFinding] = []
    conviction = analysis.conviction
    setup = analysis.trade_setup

    if conviction is not None and conviction >= 7 and not analysis.has_trade:
        findings.append(_warning(
            "HIGH_CONVICTION_NO_TRADE",
            "High conviction (7+) but no trade recommended - inconsistent",
        ))

    if analysis.has_trade and not setup.entry_condition:
        findings.append(_error(
            "TRADE_WITHOUT_ENTRY_CONDITION",
            "Trade recommended but no entry condition specified",
        ))

    missing = [name for name in REQUIRED_SCENARIOS if name not in analysis.scenarios]
    if missing:
        findings.append(_error("MISSING_SCENARIOS", f"Missing scenarios: {', '.join(missing)}"))

    if analysis.has_trade and not setup.stop_loss:
        findings.append(_error(
            "TRADE_WITHOUT_STOP_LOSS",
            "Trade recommended but no stop loss specified",
        ))

    if conviction is not None and not 1 <= conviction <= 10:
        findings.append(_error(
            "INVALID_CONVICTION",
            f"Conviction {conviction} is outside valid range (1-10)",
        ))

    approach = analysis.recommended_approach
    if approach and approach not in VALID_APPROACHES:
        findings.append(_error("INVALID_APPROACH", f"Invalid recommended approach: {approach}"))

    return findings


def validate_post_event_analysis(
    analysis: PostEventAnalysis | Mapping[str, Any],
) -> list[ValidationFinding]:
    """Check a post-event analysis for internal inconsistencies.

    Args:
        analysis: Parsed analysis, or a raw store row (parsed here)

    Returns:
        Findings in rule order; empty when the analysis is consistent
    """
    if not isinstance(analysis, PostEventAnalysis):
        analysis = post_analysis_from_row(analysis)

    findings: list[ValidationFinding] = []
    conviction = analysis.conviction
    setup = analysis.trade_setup

    if analysis.surprise_category in BIG_SURPRISES and conviction is not None and conviction < 5:
        findings.append(_warning(
            "BIG_SURPRISE_LOW_CONVICTION",
            "Big surprise but low conviction - may be missing an opportunity",
        ))

    if analysis.urgency == "immediate" and not analysis.has_trade:
        findings.append(_warning(
            "IMMEDIATE_URGENCY_NO_TRADE",
            "Immediate urgency but no trade recommended - inconsistent",
        ))

    if analysis.has_trade and setup.risk_reward == "poor":
        findings.append(_warning(
            "TRADE_WITH_POOR_RR",
            "Trade recommended with poor risk/reward - should reconsider",
        ))

    if conviction is not None and conviction >= 8 and not analysis.has_trade:
        findings.append(_warning(
            "HIGH_CONVICTION_NO_TRADE",
            "Very high conviction (8+) but no trade - inconsistent",
        ))

    if analysis.has_trade and not setup.stop_loss:
        findings.append(_error(
            "TRADE_WITHOUT_STOP_LOSS",
            "Trade recommended but no stop loss specified",
        ))

    if analysis.urgency and analysis.urgency not in VALID_URGENCIES:
        findings.append(_error("INVALID_URGENCY", f"Invalid urgency: {analysis.urgency}"))

    if analysis.action and analysis.action not in VALID_ACTIONS:
        findings.append(_error("INVALID_ACTION", f"Invalid trade action: {analysis.action}"))

    return findings
