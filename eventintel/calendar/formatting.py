"""Plain-text context blocks describing past releases, assets and components.

Used when assembling the context handed to the analysis generation step.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from eventintel.core.data_helpers import day_key, safe_float


def _or_na(value: Any) -> Any:
    return "N/A" if value is None else value


def _truthy_or(value: Any, fallback: str) -> Any:
    return value if value else fallback


def format_historical_data_block(history: Sequence[Mapping[str, Any]] | None) -> str:
    """Summarize previous releases of the same event, one paragraph each."""
    if not history:
        return "No historical data available for this event."

    blocks = []
    for h in history:
        reaction = h.get("market_reaction")
        if reaction:
            reactions = ", ".join(f"{asset} {change}" for asset, change in reaction.items())
        else:
            reactions = "No reaction data"

        pct = safe_float(h.get("surprise_percent"))
        surprise = f"{'+' if pct > 0 else ''}{pct:.1f}%" if pct else "N/A"

        blocks.append(
            f"[{day_key(h.get('event_date'))}] Forecast: {_or_na(h.get('forecast'))} | "
            f"Actual: {_or_na(h.get('actual'))} | Surprise: {surprise}\n"
            f"             Reaction: {reactions}\n"
            f"             Duration: {_truthy_or(h.get('reaction_duration'), 'N/A')}"
        )
    return "\n\n".join(blocks)


def format_affected_assets_block(assets: Mapping[str, Mapping[str, Any]] | None) -> str:
    """Describe current price and positioning of each affected instrument."""
    if not assets:
        return "No asset data available."

    blocks = []
    for symbol, data in assets.items():
        change = data.get("change24h")
        blocks.append(
            f"{symbol}:\n"
            f"- Price: ${_or_na(data.get('price'))}\n"
            f"- 24h Change: {0 if change is None else change}%\n"
            f"- Current Positioning: {_truthy_or(data.get('positioning'), 'neutral')}\n"
            f"- Key Levels: Support {_truthy_or(data.get('support'), 'N/A')} | "
            f"Resistance {_truthy_or(data.get('resistance'), 'N/A')}"
        )
    return "\n\n".join(blocks)


def _nfp_lines(c: Mapping[str, Any]) -> list[str]:
    lines = ["NFP Components:"]
    if "headline" in c:
        forecast = c.get("headlineForecast")
        beat = (safe_float(c["headline"], 0.0) or 0.0) > (safe_float(forecast, 0.0) or 0.0)
        lines.append(
            f"- Headline: {c['headline']}K (vs {_truthy_or(forecast, 'N/A')}K forecast) "
            f"{'✅ BEAT' if beat else '❌ MISS'}"
        )
    if "unemployment" in c:
        forecast = c.get("unemploymentForecast")
        actual = safe_float(c["unemployment"])
        better = actual is not None and actual <= (safe_float(forecast) or 100.0)
        lines.append(
            f"- Unemployment: {c['unemployment']}% (vs {_truthy_or(forecast, 'N/A')}% forecast) "
            f"{'✅ BETTER' if better else '⚠️ WORSE'}"
        )
    if "wageGrowth" in c:
        forecast = c.get("wageForecast")
        actual = safe_float(c["wageGrowth"])
        hot = actual is not None and actual > (safe_float(forecast) or 0.0)
        lines.append(
            f"- Avg Hourly Earnings: {c['wageGrowth']}% MoM (vs {_truthy_or(forecast, 'N/A')}% forecast) "
            f"{'⚠️ HOT' if hot else '✅ COOL'}"
        )
    if "participation" in c:
        change = c.get("participationChange")
        lines.append(f"- Participation Rate: {c['participation']}% {f'({change})' if change else ''}")
    if "revision" in c:
        revision = safe_float(c["revision"], 0.0) or 0.0
        lines.append(
            f"- Prior Revision: {'+' if revision > 0 else ''}{c['revision']}K "
            f"{'✅ BULLISH' if revision > 0 else '❌ BEARISH'}"
        )
    return lines


def _cpi_lines(c: Mapping[str, Any]) -> list[str]:
    lines = ["CPI Components:"]
    if "headline" in c:
        lines.append(f"- Headline CPI: {c['headline']}% YoY {'✅' if c.get('headlineBeat') else '❌'}")
    if "core" in c:
        lines.append(f"- Core CPI: {c['core']}% YoY {'✅' if c.get('coreBeat') else '❌'}")
    for key, label in (("mom", "MoM"), ("shelter", "Shelter"), ("energy", "Energy"), ("services", "Services")):
        if key in c:
            lines.append(f"- {label}: {c[key]}%")
    return lines


def format_component_breakdown(components: Mapping[str, Any] | None, event_type: str) -> str:
    """Break a release into its components.

    NFP and CPI get dedicated layouts with beat/miss markers; any other
    event type lists the components as given.
    """
    if not components:
        return "No component breakdown available."

    if event_type in ("employment", "nfp"):
        lines = _nfp_lines(components)
    elif event_type in ("inflation", "cpi"):
        lines = _cpi_lines(components)
    else:
        lines = [f"- {key}: {value}" for key, value in components.items()]
    return "\n".join(lines)
