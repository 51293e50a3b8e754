"""Tests for event tier classification and asset inference."""

from __future__ import annotations

import pytest

from eventintel.calendar.classification import (
    DEFAULT_PRIMARY_ASSETS,
    TIER_1_KEYWORDS,
    TIER_2_KEYWORDS,
    EventCategory,
    ExpectedVolatility,
    classify_event,
    infer_category,
    infer_primary_assets,
    secondary_assets_for,
)
from eventintel.domain.events import Event


class TestTiers:
    """Keyword tiering."""

    @pytest.mark.parametrize("keyword", TIER_1_KEYWORDS)
    def test_every_tier1_keyword_is_high_volatility(self, keyword):
        """Any name containing a tier-1 keyword is tier 1 / high."""
        result = classify_event(f"US {keyword.upper()} (Jan)")
        assert result.tier == 1
        assert result.expected_volatility == ExpectedVolatility.HIGH

    def test_tier2_is_moderate(self):
        """PPI is tier 2 with moderate volatility."""
        result = classify_event("Producer Price Index MoM")
        assert result.tier == 2
        assert result.expected_volatility == ExpectedVolatility.MODERATE

    def test_tier3_keyword_is_low(self):
        """Housing data is tier 3."""
        result = classify_event("Existing Home Sales")
        assert result.tier == 3
        assert result.expected_volatility == ExpectedVolatility.LOW
        assert result.category == EventCategory.GROWTH

    def test_tier1_checked_before_tier2(self):
        """A name with both tier-1 and tier-2 keywords is tier 1."""
        assert classify_event("CPI and PPI combined release").tier == 1

    def test_unknown_name_falls_back(self):
        """Unmatched names get tier 3, other, and the default instruments."""
        result = classify_event("Some Obscure Speech")
        assert result.tier == 3
        assert result.category == EventCategory.OTHER
        assert result.primary_assets == list(DEFAULT_PRIMARY_ASSETS) == ["DXY", "SPX", "TLT"]
        assert result.secondary_assets == ["XAUUSD"]

    def test_empty_name_is_total(self):
        """Empty or None names still classify."""
        assert classify_event("").tier == 3
        assert classify_event(None).category == EventCategory.OTHER

    @pytest.mark.parametrize("keyword", TIER_2_KEYWORDS[:4])
    def test_tier2_keywords(self, keyword):
        """Tier-2 keywords give tier 2."""
        assert classify_event(keyword).tier == 2


class TestCategory:
    """Category inference is independent of tier."""

    def test_payrolls_is_employment(self):
        """Nonfarm payrolls is employment."""
        assert infer_category("Nonfarm Payrolls") == EventCategory.EMPLOYMENT

    def test_tier_and_category_can_disagree(self):
        """'consumer price' is tier 1 but has no category keyword."""
        result = classify_event("Consumer Price Expectations")
        assert result.tier == 1
        assert result.category == EventCategory.OTHER

    def test_crypto_catalyst(self):
        """Halving is a crypto event touching BTC/ETH."""
        result = classify_event("Bitcoin Halving")
        assert result.category == EventCategory.CRYPTO
        assert result.primary_assets == ["BTC", "ETH"]
        assert result.secondary_assets == ["SPX", "DXY"]


class TestAssets:
    """Affected instrument inference."""

    def test_boj_maps_to_yen(self):
        """BoJ decisions move USDJPY and the Nikkei."""
        assert infer_primary_assets("BoJ Rate Decision") == ["USDJPY", "Nikkei"]

    def test_ecb_maps_to_euro(self):
        """ECB decisions move EURUSD and the DAX."""
        assert infer_primary_assets("ECB Rate Decision") == ["EURUSD", "DAX"]

    def test_secondary_from_category_only(self):
        """Secondary assets depend on category alone."""
        assert secondary_assets_for(EventCategory.INFLATION) == ["XAUUSD", "TLT", "BTC"]
        assert secondary_assets_for(EventCategory.EMPLOYMENT) == ["USDJPY", "XAUUSD"]
        assert secondary_assets_for(EventCategory.HOUSING) == ["XAUUSD"]

    def test_event_classification_is_derived_on_read(self):
        """Event.classification recomputes from the current name."""
        event = Event(name="US CPI YoY")
        assert event.classification.tier == 1
        event.name = "Trade Balance"
        assert event.classification.tier == 3

    def test_to_dict(self):
        """Serialized classification uses plain values."""
        data = classify_event("FOMC Statement").to_dict()
        assert data["tier"] == 1
        assert data["expected_volatility"] == "high"
        assert data["category"] == "central_bank"
