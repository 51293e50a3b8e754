"""Tests for pre/post-event analysis consistency validation."""

from __future__ import annotations

from eventintel.calendar.validation import (
    Severity,
    validate_post_event_analysis,
    validate_pre_event_analysis,
)
from eventintel.domain.events import PostEventAnalysis, PreEventAnalysis, TradeSetup
from eventintel.services.analysis_scheduler import review_analysis


ALL_SCENARIOS = {
    "bigBeat": {}, "smallBeat": {}, "inline": {}, "smallMiss": {}, "bigMiss": {},
}


def _pre(**overrides) -> PreEventAnalysis:
    data = {
        "event_name": "Nonfarm Payrolls",
        "scenarios": dict(ALL_SCENARIOS),
        "conviction": 5,
        "recommended_approach": "wait_and_react",
        "trade_setup": TradeSetup(has_trade=False),
    }
    data.update(overrides)
    return PreEventAnalysis(**data)


def _post(**overrides) -> PostEventAnalysis:
    data = {
        "event_name": "Nonfarm Payrolls",
        "surprise_category": "small_beat",
        "conviction": 6,
        "urgency": "soon",
        "action": "wait_confirmation",
        "trade_setup": TradeSetup(has_trade=False),
    }
    data.update(overrides)
    return PostEventAnalysis(**data)


def _codes(findings):
    return [f.code for f in findings]


class TestPreEventValidation:
    """Pre-event rule set."""

    def test_valid_record_has_no_findings(self):
        """A consistent analysis yields nothing."""
        assert validate_pre_event_analysis(_pre()) == []

    def test_high_conviction_without_trade(self):
        """Conviction 8 with no trade is exactly one warning."""
        findings = validate_pre_event_analysis(_pre(conviction=8))
        assert len(findings) == 1
        assert findings[0].code == "HIGH_CONVICTION_NO_TRADE"
        assert findings[0].severity == Severity.WARNING

    def test_missing_scenarios_named(self):
        """Two missing scenarios give one error naming both."""
        scenarios = {k: v for k, v in ALL_SCENARIOS.items() if k not in ("inline", "bigMiss")}
        findings = validate_pre_event_analysis(_pre(scenarios=scenarios))
        assert _codes(findings) == ["MISSING_SCENARIOS"]
        assert findings[0].severity == Severity.ERROR
        assert findings[0].message == "Missing scenarios: inline, bigMiss"

    def test_trade_without_entry_or_stop(self):
        """A trade missing entry and stop gets both errors, in rule order."""
        findings = validate_pre_event_analysis(_pre(trade_setup=TradeSetup(has_trade=True)))
        assert _codes(findings) == ["TRADE_WITHOUT_ENTRY_CONDITION", "TRADE_WITHOUT_STOP_LOSS"]

    def test_complete_trade_passes(self):
        """A trade with entry and stop loss is fine even at high conviction."""
        setup = TradeSetup(has_trade=True, entry_condition="break above 1.10", stop_loss="1.095")
        assert validate_pre_event_analysis(_pre(conviction=9, trade_setup=setup)) == []

    def test_conviction_out_of_range(self):
        """Conviction 11 is invalid and also high-conviction-no-trade."""
        findings = validate_pre_event_analysis(_pre(conviction=11))
        assert _codes(findings) == ["HIGH_CONVICTION_NO_TRADE", "INVALID_CONVICTION"]
        assert findings[1].message == "Conviction 11 is outside valid range (1-10)"

    def test_zero_conviction_invalid(self):
        """Conviction 0 is below the range."""
        assert _codes(validate_pre_event_analysis(_pre(conviction=0))) == ["INVALID_CONVICTION"]

    def test_invalid_approach(self):
        """Unknown approaches are errors."""
        findings = validate_pre_event_analysis(_pre(recommended_approach="yolo"))
        assert _codes(findings) == ["INVALID_APPROACH"]
        assert findings[0].message == "Invalid recommended approach: yolo"

    def test_findings_accumulate(self):
        """All applicable rules fire together."""
        findings = validate_pre_event_analysis(
            _pre(scenarios={}, conviction=12, recommended_approach="bad")
        )
        assert _codes(findings) == [
            "HIGH_CONVICTION_NO_TRADE",
            "MISSING_SCENARIOS",
            "INVALID_CONVICTION",
            "INVALID_APPROACH",
        ]

    def test_raw_row_is_parsed(self):
        """A raw camelCase row is parsed at the boundary."""
        row = {
            "event_name": "CPI",
            "analysis": {
                "scenarios": dict(ALL_SCENARIOS),
                "preEventStrategy": {"conviction": "8", "recommendedApproach": "no_trade"},
                "tradeSetup": {"hasTrade": False},
            },
        }
        assert _codes(validate_pre_event_analysis(row)) == ["HIGH_CONVICTION_NO_TRADE"]


class TestPostEventValidation:
    """Post-event rule set."""

    def test_valid_record_has_no_findings(self):
        """A consistent analysis yields nothing."""
        assert validate_post_event_analysis(_post()) == []

    def test_big_surprise_low_conviction(self):
        """Big miss with conviction 3 is a warning."""
        findings = validate_post_event_analysis(_post(surprise_category="big_miss", conviction=3))
        assert _codes(findings) == ["BIG_SURPRISE_LOW_CONVICTION"]

    def test_immediate_without_trade(self):
        """Immediate urgency with no trade is a warning."""
        assert _codes(validate_post_event_analysis(_post(urgency="immediate"))) == [
            "IMMEDIATE_URGENCY_NO_TRADE"
        ]

    def test_poor_risk_reward(self):
        """A trade with poor R/R is a warning."""
        setup = TradeSetup(has_trade=True, stop_loss="1.0", risk_reward="poor")
        assert _codes(validate_post_event_analysis(_post(trade_setup=setup))) == ["TRADE_WITH_POOR_RR"]

    def test_very_high_conviction_without_trade(self):
        """Conviction 8 with no trade is a warning with the 8+ message."""
        findings = validate_post_event_analysis(_post(conviction=8))
        assert _codes(findings) == ["HIGH_CONVICTION_NO_TRADE"]
        assert "8+" in findings[0].message

    def test_trade_without_stop(self):
        """A trade without a stop loss is an error."""
        findings = validate_post_event_analysis(_post(trade_setup=TradeSetup(has_trade=True)))
        assert _codes(findings) == ["TRADE_WITHOUT_STOP_LOSS"]
        assert findings[0].severity == Severity.ERROR

    def test_invalid_enums(self):
        """Unknown urgency and action are both errors."""
        findings = validate_post_event_analysis(_post(urgency="whenever", action="hodl"))
        assert _codes(findings) == ["INVALID_URGENCY", "INVALID_ACTION"]
        assert findings[1].message == "Invalid trade action: hodl"


class TestReviewAnalysis:
    """Scheduler-side review logs findings."""

    def test_logs_each_finding(self, caplog):
        """Each finding is logged at WARNING and returned."""
        with caplog.at_level("WARNING", logger="eventintel.services.analysis_scheduler"):
            findings = review_analysis("pre", _pre(conviction=8))
        assert _codes(findings) == ["HIGH_CONVICTION_NO_TRADE"]
        assert "HIGH_CONVICTION_NO_TRADE" in caplog.text
