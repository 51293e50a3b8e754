"""
Centralized Data Conversion Helpers.

Safe type conversion for loosely-typed rows coming from the external
calendar provider and the record store. Every helper returns a default
instead of raising, so one malformed row never halts a scheduled batch.

Usage:
    from eventintel.core.data_helpers import safe_float, safe_int, safe_datetime
"""

from __future__ import annotations

import math
from datetime import UTC, date, datetime
from typing import Any


def safe_float(value: Any, default: float | None = None) -> float | None:
    """
    Safely convert value to float.

    Handles None, NaN, Inf, numeric strings and conversion errors gracefully.

    Args:
        value: Any value to convert
        default: Default to return if conversion fails

    Returns:
        Float value or default if conversion fails
    """
    if value is None or isinstance(value, bool):
        return default
    try:
        f = float(str(value).strip().replace(",", "")) if isinstance(value, str) else float(value)
    except (ValueError, TypeError):
        return default
    if math.isnan(f) or math.isinf(f):
        return default
    return f


def safe_int(value: Any, default: int | None = None) -> int | None:
    """
    Safely convert value to int.

    Args:
        value: Any value to convert
        default: Default to return if conversion fails

    Returns:
        Int value or default if conversion fails
    """
    f = safe_float(value)
    if f is None:
        return default
    # Handle float strings like "7.0"
    return int(f)


def safe_bool(value: Any, default: bool = False) -> bool:
    """Interpret booleans stored as bools, ints, or strings."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"1", "true", "yes", "on", "t", "y"}:
            return True
        if lowered in {"0", "false", "no", "off", "f", "n", ""}:
            return False
    return default


def safe_str(value: Any, default: str = "") -> str:
    """Convert to a stripped string, treating None as ``default``."""
    if value is None:
        return default
    return str(value).strip()


def safe_datetime(value: Any) -> datetime | None:
    """
    Safely convert value to a timezone-aware UTC datetime.

    Accepts datetime, date (midnight UTC), ISO strings (with or without time,
    with a trailing ``Z``) and POSIX timestamps. Naive values are assumed UTC.

    Args:
        value: Any value to convert

    Returns:
        Aware datetime or None if conversion fails
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=UTC)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=UTC)
    try:
        if isinstance(value, str):
            text = value.strip()
            if not text:
                return None
            # "2025-01-10 13:30:00" style provider timestamps
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
            return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return datetime.fromtimestamp(value, tz=UTC)
    except (ValueError, TypeError, OSError, OverflowError):
        pass
    return None


def day_key(value: Any) -> str:
    """Calendar day of a date-like value as ``YYYY-MM-DD`` ('' if unparseable).

    Strings are truncated to their first ten characters without timezone
    conversion, so a provider's local-date string keeps its own day.
    """
    if isinstance(value, str):
        return value.strip()[:10]
    parsed = safe_datetime(value)
    return parsed.date().isoformat() if parsed else ""


__all__ = [
    "safe_float",
    "safe_int",
    "safe_bool",
    "safe_str",
    "safe_datetime",
    "day_key",
]
