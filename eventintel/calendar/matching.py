"""Cross-source event matching.

Reconciles an internally tracked event with the external calendar feed for
the same day, where the two sources name events differently ("Nonfarm
Payrolls (Jan)" vs "NFP Employment Change").
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from eventintel.core.data_helpers import day_key
from eventintel.core.logging import get_logger
from eventintel.domain.events import ExternalEvent


logger = get_logger("calendar.matching")

MIN_MATCH_SCORE = 40
COUNTRY_SCORE = 50
EXACT_NAME_SCORE = 100
CONTAINS_NAME_SCORE = 70
TOKEN_OVERLAP_BASE = 40
TOKEN_OVERLAP_PER_TOKEN = 10
SINGLE_TOKEN_SCORE = 30

_MONTH_SUFFIX_RE = re.compile(r"\((?:jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)\)", re.IGNORECASE)
_QUARTER_SUFFIX_RE = re.compile(r"\(q[1-4]\)", re.IGNORECASE)
_MONTH_NAME_RE = re.compile(
    r"january|february|march|april|may|june|july|august|september|october|november|december",
    re.IGNORECASE,
)
# Statistics bureaus, index providers and bank brands used as PMI prefixes
_SOURCE_TOKEN_RE = re.compile(r"nbs|caixin|s&p global|hcob|hsbc|jibun bank", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_event_name(name: str | None) -> str:
    """Lowercase and strip period suffixes, month names and source brands."""
    text = (name or "").lower()
    text = _MONTH_SUFFIX_RE.sub("", text)
    text = _QUARTER_SUFFIX_RE.sub("", text)
    text = _MONTH_NAME_RE.sub("", text)
    text = _SOURCE_TOKEN_RE.sub("", text)
    text = _WHITESPACE_RE.sub(" ", text)
    return text.strip()


def _tokens(normalized: str) -> list[str]:
    return [w for w in normalized.split(" ") if len(w) > 2]


def name_score(internal: str, external: str) -> int:
    """Score two already-normalized names; only the first matching rule counts."""
    if not internal or not external:
        return 0
    if internal == external:
        return EXACT_NAME_SCORE
    if internal in external or external in internal:
        return CONTAINS_NAME_SCORE

    internal_tokens = _tokens(internal)
    common = [w for w in _tokens(external) if w in internal_tokens]
    if len(common) >= 2:
        return TOKEN_OVERLAP_BASE + len(common) * TOKEN_OVERLAP_PER_TOKEN
    if len(common) == 1 and len(common[0]) > 4:
        return SINGLE_TOKEN_SCORE
    return 0


def score_candidate(
    event_name: str,
    event_country: str | None,
    candidate: ExternalEvent,
) -> int:
    """Similarity score of one external candidate (date filtering excluded)."""
    score = 0
    country = (event_country or "").upper()
    candidate_country = (candidate.country or "").upper()
    if country and candidate_country and country == candidate_country:
        score += COUNTRY_SCORE
    score += name_score(normalize_event_name(event_name), normalize_event_name(candidate.name))
    return score


@dataclass(frozen=True)
class MatchResult:
    """Accepted external match and its score."""

    event: ExternalEvent
    score: int


def find_best_match(
    candidates: Iterable[ExternalEvent],
    event_name: str,
    event_date: Any,
    event_country: str | None = None,
) -> MatchResult | None:
    """Find the external record describing the same real-world event.

    Candidates on a different calendar day are never considered. Among the
    rest the highest score wins; ties keep the first candidate in feed order.

    Args:
        candidates: External feed rows, in provider order
        event_name: Internal event name
        event_date: Internal event date (datetime, date or ISO string)
        event_country: Internal country code

    Returns:
        MatchResult when the best score reaches the acceptance bar, else None
    """
    target_day = day_key(event_date)
    if not target_day:
        return None

    best: ExternalEvent | None = None
    best_score = 0

    for candidate in candidates:
        if day_key(candidate.date) != target_day:
            continue
        score = score_candidate(event_name, event_country, candidate)
        if score > best_score:
            best_score = score
            best = candidate

    if best is None or best_score < MIN_MATCH_SCORE:
        return None

    logger.info(
        "Matched external event",
        extra={
            "event_name": event_name,
            "country": event_country,
            "external_name": best.name,
            "external_country": best.country,
            "score": best_score,
            "actual": best.actual,
        },
    )
    return MatchResult(event=best, score=best_score)
