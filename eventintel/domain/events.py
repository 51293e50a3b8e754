"""Scheduled event and analysis domain models.

Rows from the external calendar provider and the analysis store are loosely
typed (camelCase or snake_case keys, numbers as strings, "N/A" placeholders).
The ``*_from_row`` parsers normalize them into these models and never raise.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, Field

from eventintel.calendar.classification import EventClassification, classify_event
from eventintel.core.data_helpers import day_key, safe_bool, safe_datetime, safe_float, safe_str


# Raw released/forecast values keep their provider form; presence is decided
# by ``has_value`` and numbers are coerced only when scoring.
RawValue = float | int | str | None

# Scored 1-10; fractional values are kept so the range check can flag them
Conviction = int | float | None


def _as_utc(value: datetime | None) -> datetime | None:
    """Naive timestamps are provider UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


class Event(BaseModel):
    """A scheduled market event.

    Classification is derived from ``name`` on every read and never stored.
    """

    name: str = Field(..., description="Provider-supplied event name")
    date: UtcDatetime | None = Field(None, description="Scheduled release time (UTC)")
    country: str = Field(default="", description="2-letter country code or empty")
    forecast: RawValue = Field(None, description="Consensus forecast")
    previous: RawValue = Field(None, description="Previous release")
    actual: RawValue = Field(None, description="Released value")

    @property
    def classification(self) -> EventClassification:
        return classify_event(self.name)


class ExternalEvent(BaseModel):
    """One row of the external economic calendar feed."""

    name: str
    date: str = Field(default="", description="Release day as YYYY-MM-DD")
    country: str = ""
    actual: RawValue = None
    forecast: RawValue = None
    previous: RawValue = None


class TradeSetup(BaseModel):
    """Optional trade attached to an analysis."""

    has_trade: bool = False
    entry_condition: str | None = None
    stop_loss: str | None = None
    take_profit: str | None = None
    risk_reward: str | None = None


class PreEventAnalysis(BaseModel):
    """Forward-looking assessment of one event, produced before release."""

    id: str | None = None
    event_name: str
    event_date: UtcDatetime | None = None
    country: str = ""
    impact: str | None = None
    scenarios: dict[str, Any] = Field(default_factory=dict)
    conviction: Conviction = None
    recommended_approach: str | None = None
    trade_setup: TradeSetup | None = None
    forecast: RawValue = None
    previous: RawValue = None

    @property
    def has_trade(self) -> bool:
        return bool(self.trade_setup and self.trade_setup.has_trade)


class PostEventAnalysis(BaseModel):
    """Backward-looking assessment of one event, produced after release."""

    id: str | None = None
    event_name: str
    event_date: UtcDatetime | None = None
    country: str = ""
    actual: RawValue = None
    forecast: RawValue = None
    previous: RawValue = None
    surprise_category: str | None = None
    conviction: Conviction = None
    urgency: str | None = None
    action: str | None = None
    trade_setup: TradeSetup | None = None
    created_at: UtcDatetime | None = None

    @property
    def has_trade(self) -> bool:
        return bool(self.trade_setup and self.trade_setup.has_trade)


# =============================================================================
# Row parsers
# =============================================================================


def _pick(row: Mapping[str, Any], *keys: str) -> Any:
    """First non-empty value among ``keys``."""
    for key in keys:
        value = row.get(key)
        if value is not None and value != "":
            return value
    return None


def _raw_value(value: Any) -> RawValue:
    if value is None or isinstance(value, (int, float, str)):
        return value
    return str(value)


def _optional_text(value: Any) -> str | None:
    text = safe_str(value)
    return text or None


def _section(row: Mapping[str, Any], *keys: str) -> Mapping[str, Any]:
    value = _pick(row, *keys)
    return value if isinstance(value, Mapping) else {}


def _pick_in(sections: Sequence[Mapping[str, Any]], *keys: str) -> Any:
    """First non-empty value among ``keys``, searching ``sections`` in order."""
    for section in sections:
        value = _pick(section, *keys)
        if value is not None:
            return value
    return None


def _conviction(value: Any) -> Conviction:
    number = safe_float(value)
    if number is None:
        return None
    return int(number) if number.is_integer() else number


# Flat store columns of a trade setup
_TRADE_COLUMNS = ("has_trade", "hasTrade", "entry_condition", "stop_loss", "take_profit", "risk_reward")


def _trade_setup(*sections: Mapping[str, Any]) -> TradeSetup | None:
    """Nested ``tradeSetup`` when present, else the flat trade columns."""
    nested = _pick_in(sections, "tradeSetup", "trade_setup")
    if isinstance(nested, Mapping):
        return trade_setup_from_row(nested)
    for section in sections:
        if any(column in section for column in _TRADE_COLUMNS):
            return trade_setup_from_row(section)
    return None


def trade_setup_from_row(row: Any) -> TradeSetup | None:
    """Parse a nested trade setup mapping (None when absent)."""
    if not isinstance(row, Mapping):
        return None
    return TradeSetup(
        has_trade=safe_bool(_pick(row, "hasTrade", "has_trade")),
        entry_condition=_optional_text(_pick(row, "entryCondition", "entry_condition", "trigger")),
        stop_loss=_optional_text(_pick(row, "stopLoss", "stop_loss")),
        take_profit=_optional_text(_pick(row, "takeProfit", "take_profit")),
        risk_reward=_optional_text(_pick(row, "riskReward", "risk_reward")),
    )


def event_from_row(row: Mapping[str, Any]) -> Event:
    """Build an Event from a loosely typed calendar row."""
    return Event(
        name=safe_str(_pick(row, "name", "event", "title", "event_name")),
        date=safe_datetime(_pick(row, "date", "event_date", "datetime")),
        country=safe_str(row.get("country")).upper(),
        forecast=_raw_value(_pick(row, "forecast", "estimate")),
        previous=_raw_value(row.get("previous")),
        actual=_raw_value(row.get("actual")),
    )


def external_event_from_row(row: Mapping[str, Any]) -> ExternalEvent:
    """Normalize one external provider row.

    Name is the first of ``event``/``title``/``name``; forecast prefers the
    provider's ``estimate`` field over ``forecast``.
    """
    return ExternalEvent(
        name=safe_str(_pick(row, "event", "title", "name")),
        date=day_key(row.get("date")),
        country=safe_str(row.get("country")).upper(),
        actual=_raw_value(row.get("actual")),
        forecast=_raw_value(_pick(row, "estimate", "forecast")),
        previous=_raw_value(row.get("previous")),
    )


def pre_analysis_from_row(row: Mapping[str, Any]) -> PreEventAnalysis:
    """Parse a stored pre-event analysis row.

    Accepts the flat store columns with the generated analysis body either
    nested under ``analysis`` or merged into the row itself.
    Strategy and trade fields are read from their nested sections first,
    then from the flat store columns (``conviction``, ``has_trade``, ...).
    """
    body = _section(row, "analysis") or row
    strategy = _section(body, "preEventStrategy", "pre_event_strategy")
    scenarios = _pick(body, "scenarios")
    return PreEventAnalysis(
        id=_optional_text(row.get("id")),
        event_name=safe_str(_pick(row, "event_name", "eventName", "name")),
        event_date=safe_datetime(_pick(row, "event_date", "eventDate", "date")),
        country=safe_str(row.get("country")).upper(),
        impact=_optional_text(row.get("impact")),
        scenarios=dict(scenarios) if isinstance(scenarios, Mapping) else {},
        conviction=_conviction(_pick_in((strategy, body, row), "conviction")),
        recommended_approach=_optional_text(
            _pick_in((strategy, body, row), "recommendedApproach", "recommended_approach")
        ),
        trade_setup=_trade_setup(body, row),
        forecast=_raw_value(row.get("forecast")),
        previous=_raw_value(row.get("previous")),
    )


def post_analysis_from_row(row: Mapping[str, Any]) -> PostEventAnalysis:
    """Parse a stored post-event analysis row."""
    body = _section(row, "analysis") or row
    result = _section(body, "resultAnalysis", "result_analysis")
    recommendation = _section(body, "tradeRecommendation", "trade_recommendation")
    return PostEventAnalysis(
        id=_optional_text(row.get("id")),
        event_name=safe_str(_pick(row, "event_name", "eventName", "name")),
        event_date=safe_datetime(_pick(row, "event_date", "eventDate", "date")),
        country=safe_str(row.get("country")).upper(),
        actual=_raw_value(row.get("actual")),
        forecast=_raw_value(row.get("forecast")),
        previous=_raw_value(row.get("previous")),
        surprise_category=_optional_text(
            _pick(result, "surpriseCategory", "surprise_category")
            or _pick(row, "surprise_category")
        ),
        conviction=_conviction(_pick_in((recommendation, body, row), "conviction")),
        urgency=_optional_text(_pick_in((recommendation, body, row), "urgency")),
        action=_optional_text(_pick_in((recommendation, body, row), "action")),
        trade_setup=_trade_setup(body, row),
        created_at=safe_datetime(row.get("created_at")),
    )


__all__ = [
    "Event",
    "ExternalEvent",
    "TradeSetup",
    "PreEventAnalysis",
    "PostEventAnalysis",
    "event_from_row",
    "external_event_from_row",
    "pre_analysis_from_row",
    "post_analysis_from_row",
    "trade_setup_from_row",
]
