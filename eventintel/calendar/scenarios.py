"""Historical reaction templates per surprise bucket.

Reference playbooks for the two most traded US releases. Values are
descriptive text, not model output.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .surprise import SurpriseCategory


@dataclass(frozen=True)
class ScenarioTemplate:
    """Typical market behaviour for one surprise bucket."""

    threshold: str
    typical_probability: str
    typical_reaction: dict[str, str] = field(default_factory=dict)
    typical_duration: str = "N/A"


_UNKNOWN = ScenarioTemplate(threshold="N/A", typical_probability="0%")

NFP_TEMPLATE: dict[SurpriseCategory, ScenarioTemplate] = {
    SurpriseCategory.BIG_BEAT: ScenarioTemplate(
        threshold="> +20% (e.g., 216K vs 180K forecast)",
        typical_probability="15%",
        typical_reaction={"DXY": "+0.8%", "SPX": "+0.5%", "XAUUSD": "-1.0%", "TLT": "-1.5%"},
        typical_duration="4-6 hours",
    ),
    SurpriseCategory.SMALL_BEAT: ScenarioTemplate(
        threshold="+5% to +20% vs forecast",
        typical_probability="25%",
        typical_reaction={"DXY": "+0.4%", "SPX": "+0.3%", "XAUUSD": "-0.4%", "TLT": "-0.5%"},
        typical_duration="2-4 hours",
    ),
    SurpriseCategory.INLINE: ScenarioTemplate(
        threshold="-5% to +5% vs forecast",
        typical_probability="30%",
        typical_reaction={"DXY": "±0.2%", "SPX": "±0.1%", "XAUUSD": "±0.2%", "TLT": "±0.2%"},
        typical_duration="1-2 hours",
    ),
    SurpriseCategory.SMALL_MISS: ScenarioTemplate(
        threshold="-5% to -20% vs forecast",
        typical_probability="20%",
        typical_reaction={"DXY": "-0.4%", "SPX": "-0.3%", "XAUUSD": "+0.5%", "TLT": "+0.5%"},
        typical_duration="2-4 hours",
    ),
    SurpriseCategory.BIG_MISS: ScenarioTemplate(
        threshold="< -20% vs forecast",
        typical_probability="10%",
        typical_reaction={"DXY": "-0.8%", "SPX": "-0.6%", "XAUUSD": "+1.2%", "TLT": "+1.5%"},
        typical_duration="4-8 hours",
    ),
    SurpriseCategory.UNKNOWN: _UNKNOWN,
}

CPI_TEMPLATE: dict[SurpriseCategory, ScenarioTemplate] = {
    SurpriseCategory.BIG_BEAT: ScenarioTemplate(
        threshold="> +0.2% above forecast (hot inflation)",
        typical_probability="15%",
        typical_reaction={"DXY": "+0.6%", "TLT": "-1.5%", "SPX": "-0.8%", "XAUUSD": "-0.5%"},
        typical_duration="4-8 hours",
    ),
    SurpriseCategory.SMALL_BEAT: ScenarioTemplate(
        threshold="+0.1% above forecast",
        typical_probability="25%",
        typical_reaction={"DXY": "+0.3%", "TLT": "-0.5%", "SPX": "-0.3%", "XAUUSD": "-0.2%"},
        typical_duration="2-4 hours",
    ),
    SurpriseCategory.INLINE: ScenarioTemplate(
        threshold="Within ±0.1% of forecast",
        typical_probability="35%",
        typical_reaction={"DXY": "±0.1%", "TLT": "±0.2%", "SPX": "±0.2%", "XAUUSD": "±0.1%"},
        typical_duration="1-2 hours",
    ),
    SurpriseCategory.SMALL_MISS: ScenarioTemplate(
        threshold="-0.1% below forecast (cool inflation)",
        typical_probability="20%",
        typical_reaction={"DXY": "-0.3%", "TLT": "+0.8%", "SPX": "+0.5%", "XAUUSD": "+0.3%"},
        typical_duration="2-4 hours",
    ),
    SurpriseCategory.BIG_MISS: ScenarioTemplate(
        threshold="> -0.2% below forecast",
        typical_probability="5%",
        typical_reaction={"DXY": "-0.6%", "TLT": "+1.5%", "SPX": "+1.0%", "XAUUSD": "+0.8%"},
        typical_duration="4-8 hours",
    ),
    SurpriseCategory.UNKNOWN: _UNKNOWN,
}

SCENARIO_TEMPLATES: dict[str, dict[SurpriseCategory, ScenarioTemplate]] = {
    "nfp": NFP_TEMPLATE,
    "cpi": CPI_TEMPLATE,
}


def get_scenario_template(event_type: str) -> dict[SurpriseCategory, ScenarioTemplate] | None:
    """Look up the reaction playbook for an event type or name.

    Matches payroll names and the ``employment`` category to NFP, CPI names
    and the ``inflation`` category to CPI. Anything else has no template.
    """
    kind = (event_type or "").lower()
    if "nfp" in kind or "payroll" in kind or kind == "employment":
        return SCENARIO_TEMPLATES["nfp"]
    if "cpi" in kind or kind == "inflation":
        return SCENARIO_TEMPLATES["cpi"]
    return None
