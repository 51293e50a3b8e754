"""External economic calendar client.

Fetches released actual/forecast/previous values for a date range. The feed
is best effort: any failure yields an empty candidate list so the live view
and the matcher keep working without actual values.
"""

from __future__ import annotations

from datetime import date
from typing import Any

import httpx

from eventintel.calendar.surprise import has_value
from eventintel.core.config import settings
from eventintel.core.exceptions import ExternalServiceError
from eventintel.core.logging import get_logger
from eventintel.domain.events import ExternalEvent, external_event_from_row


logger = get_logger("services.calendar_provider")


def normalize_provider_response(data: Any) -> list[dict[str, Any]]:
    """Accept a bare list or an object wrapping the list under ``data``."""
    if isinstance(data, list):
        rows = data
    elif isinstance(data, dict) and isinstance(data.get("data"), list):
        rows = data["data"]
    else:
        return []
    return [row for row in rows if isinstance(row, dict)]


def _day(value: date | str) -> str:
    return value.isoformat() if isinstance(value, date) else str(value)[:10]


async def _request_calendar(
    client: httpx.AsyncClient,
    from_date: str,
    to_date: str,
) -> Any:
    """GET the calendar endpoint, raising ExternalServiceError on failure."""
    url = f"{settings.calendar_api_base_url.rstrip('/')}/economic-calendar"
    params = {"from": from_date, "to": to_date, "apikey": settings.calendar_api_key}

    try:
        response = await client.get(url, params=params)
        response.raise_for_status()
        return response.json()
    except httpx.TimeoutException as exc:
        raise ExternalServiceError(
            message="Calendar provider timed out",
            details={"from": from_date, "to": to_date},
        ) from exc
    except httpx.HTTPStatusError as exc:
        raise ExternalServiceError(
            message="Calendar provider returned an error",
            details={"status_code": exc.response.status_code},
        ) from exc
    except httpx.HTTPError as exc:
        raise ExternalServiceError(message="Calendar provider unavailable") from exc
    except ValueError as exc:
        raise ExternalServiceError(message="Calendar provider returned invalid JSON") from exc


async def fetch_external_events(
    from_date: date | str,
    to_date: date | str,
    *,
    client: httpx.AsyncClient | None = None,
    only_with_actual: bool = True,
) -> list[ExternalEvent]:
    """Fetch and normalize external calendar rows for a date range.

    Args:
        from_date: First day (inclusive)
        to_date: Last day (inclusive)
        client: Optional shared client; a short-lived one is created otherwise
        only_with_actual: Keep only rows that already carry a released value

    Returns:
        Normalized events in provider order; empty when the provider is not
        configured or the request fails
    """
    if not settings.calendar_enabled:
        logger.debug("Calendar API key not configured, skipping external fetch")
        return []

    start, end = _day(from_date), _day(to_date)

    try:
        if client is not None:
            raw = await _request_calendar(client, start, end)
        else:
            async with httpx.AsyncClient(timeout=settings.external_api_timeout) as own_client:
                raw = await _request_calendar(own_client, start, end)
    except ExternalServiceError as exc:
        logger.warning(
            f"External calendar fetch failed: {exc.message}",
            extra={"from": start, "to": end, **exc.details},
        )
        return []

    rows = normalize_provider_response(raw)
    events = [external_event_from_row(row) for row in rows]
    if only_with_actual:
        events = [e for e in events if has_value(e.actual)]

    logger.info(
        "Fetched external calendar",
        extra={"from": start, "to": end, "rows": len(rows), "returned": len(events)},
    )
    return events
