"""Surprise scoring of released values against their forecast.

Also hosts the presence predicate used everywhere an externally supplied
value may be a placeholder rather than a real number.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any

from eventintel.core.data_helpers import safe_float


BIG_SURPRISE_PCT = 15.0
SMALL_SURPRISE_PCT = 5.0

# Provider placeholders meaning "not released yet" (compared lowercased)
MISSING_VALUE_MARKERS = frozenset({"n/a", "na", "-", "—", "–"})


class SurpriseCategory(str, Enum):
    """Bucketed size of a release surprise."""

    BIG_BEAT = "big_beat"
    SMALL_BEAT = "small_beat"
    INLINE = "inline"
    SMALL_MISS = "small_miss"
    BIG_MISS = "big_miss"
    UNKNOWN = "unknown"


class SurpriseDirection(str, Enum):
    """Sign of a release surprise."""

    BEAT = "beat"
    MISS = "miss"
    INLINE = "inline"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class SurpriseResult:
    """Outcome of scoring an actual value against its forecast."""

    category: SurpriseCategory
    percent: float
    direction: SurpriseDirection
    description: str

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "category": self.category.value,
            "percent": self.percent,
            "direction": self.direction.value,
            "description": self.description,
        }


UNKNOWN_SURPRISE = SurpriseResult(
    category=SurpriseCategory.UNKNOWN,
    percent=0.0,
    direction=SurpriseDirection.UNKNOWN,
    description="Unable to calculate surprise",
)


def has_value(value: Any) -> bool:
    """Return True if ``value`` is a real data point rather than a placeholder.

    Numeric zero counts as present; None, NaN, empty strings and the usual
    "not available" markers do not.
    """
    if value is None:
        return False
    if isinstance(value, (int, float)):
        return not (isinstance(value, float) and math.isnan(value))
    text = str(value).strip()
    if not text:
        return False
    return text.lower() not in MISSING_VALUE_MARKERS


def _format_percent(value: float) -> str:
    if value == int(value):
        return str(int(value))
    return str(value)


def calculate_surprise(actual: Any, forecast: Any) -> SurpriseResult:
    """Score a release against its consensus forecast.

    ``percent = (actual - forecast) / |forecast| * 100`` rounded to two
    decimals. Buckets: > 15 big beat, > 5 small beat, >= -5 inline,
    >= -15 small miss, otherwise big miss.

    Args:
        actual: Released value (number or numeric string)
        forecast: Consensus forecast (number or numeric string)

    Returns:
        SurpriseResult; ``unknown`` when the forecast is missing or zero or
        the actual is missing
    """
    actual_f = safe_float(actual) if has_value(actual) else None
    forecast_f = safe_float(forecast) if has_value(forecast) else None

    if actual_f is None or not forecast_f:
        return UNKNOWN_SURPRISE

    percent = (actual_f - forecast_f) / abs(forecast_f) * 100
    rounded = round(percent, 2)
    shown = _format_percent(rounded)

    if percent > BIG_SURPRISE_PCT:
        return SurpriseResult(
            SurpriseCategory.BIG_BEAT,
            rounded,
            SurpriseDirection.BEAT,
            f"Strong beat: +{shown}% vs forecast",
        )
    if percent > SMALL_SURPRISE_PCT:
        return SurpriseResult(
            SurpriseCategory.SMALL_BEAT,
            rounded,
            SurpriseDirection.BEAT,
            f"Modest beat: +{shown}% vs forecast",
        )
    if percent >= -SMALL_SURPRISE_PCT:
        sign = "+" if rounded > 0 else ""
        return SurpriseResult(
            SurpriseCategory.INLINE,
            rounded,
            SurpriseDirection.INLINE,
            f"Inline with expectations: {sign}{shown}%",
        )
    if percent >= -BIG_SURPRISE_PCT:
        return SurpriseResult(
            SurpriseCategory.SMALL_MISS,
            rounded,
            SurpriseDirection.MISS,
            f"Modest miss: {shown}% vs forecast",
        )
    return SurpriseResult(
        SurpriseCategory.BIG_MISS,
        rounded,
        SurpriseDirection.MISS,
        f"Strong miss: {shown}% vs forecast",
    )
