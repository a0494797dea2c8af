"""
Unit Tests for the Opportunity Detector

These tests verify that:
- Spot-futures basis is computed against the spot price and thresholded at 0.1%
- Cross-exchange spreads are reported from the cheaper venue's side
- Tiers and directions follow spread sign and magnitude
- Detection is pure and visits every venue pair once

Run with:
    pytest tests/unit/test_opportunity_detector.py -v
"""

import pytest

from core.schemas import Direction, NormalizedQuote, OpportunityKind, Tier, VenueSnapshot
from services.opportunity_detector import (
    annualized_return,
    classify_tier,
    detect_all,
    detect_cross_exchange,
    detect_spot_futures,
)


# ============================================
# Helpers
# ============================================

def quote(symbol, spot, futures=0.0, funding=0.0):
    return NormalizedQuote(symbol=symbol, spot_price=spot, futures_price=futures, funding_rate=funding)


def snapshot(venue, *quotes):
    return VenueSnapshot(venue=venue, quotes={q.symbol: q for q in quotes})


# ============================================
# Tests for spot-futures detection
# ============================================

class TestSpotFutures:
    """Tests for detect_spot_futures"""

    def test_futures_premium(self):
        result = detect_spot_futures(snapshot("binance", quote("BTCUSDT", 100.0, 101.0, 0.0001)))

        assert len(result) == 1
        opp = result[0]
        assert opp.kind == OpportunityKind.SPOT_FUTURES
        assert opp.spread_percent == pytest.approx(1.0)
        assert opp.spread_value == pytest.approx(1.0)
        assert opp.price_a == 100.0
        assert opp.price_b == 101.0
        assert opp.venue_a == "binance"
        assert opp.venue_b is None
        assert opp.direction == Direction.LONG_SPOT_SHORT_FUTURES
        assert opp.tier == Tier.MEDIUM
        assert opp.funding_rate == 0.0001

    def test_futures_discount(self):
        result = detect_spot_futures(snapshot("okx", quote("ETHUSDT", 100.0, 98.0)))

        assert result[0].spread_percent == pytest.approx(-2.0)
        assert result[0].direction == Direction.SHORT_SPOT_LONG_FUTURES
        assert result[0].tier == Tier.HIGH

    def test_spread_at_threshold_is_excluded(self):
        assert detect_spot_futures(snapshot("bybit", quote("BTCUSDT", 1000.0, 1001.0))) == []

    def test_small_spread_is_low_tier(self):
        result = detect_spot_futures(snapshot("bybit", quote("BTCUSDT", 100.0, 100.3)))
        assert result[0].tier == Tier.LOW

    @pytest.mark.parametrize("spot, futures", [(0.0, 101.0), (100.0, 0.0), (0.0, 0.0)])
    def test_missing_price_is_skipped(self, spot, futures):
        assert detect_spot_futures(snapshot("binance", quote("BTCUSDT", spot, futures))) == []

    def test_annualized_return_includes_funding(self):
        result = detect_spot_futures(snapshot("binance", quote("BTCUSDT", 100.0, 101.0, 0.0001)))
        assert result[0].annualized_return == pytest.approx(1.0 + 0.0001 * 100 * 365 * 3)


# ============================================
# Tests for cross-exchange detection
# ============================================

class TestCrossExchange:
    """Tests for detect_cross_exchange"""

    def test_cheaper_venue_is_venue_a(self):
        first = snapshot("binance", quote("BTCUSDT", 100.0))
        second = snapshot("okx", quote("BTCUSDT", 99.0))

        result = detect_cross_exchange(first, second)

        assert len(result) == 1
        opp = result[0]
        assert opp.kind == OpportunityKind.CROSS_EXCHANGE
        assert opp.spread_percent == pytest.approx(1.0101, abs=1e-4)
        assert opp.spread_value == pytest.approx(1.0)
        assert opp.venue_a == "okx"
        assert opp.venue_b == "binance"
        assert opp.price_a == 99.0
        assert opp.price_b == 100.0
        assert opp.direction == Direction.BUY_VENUE_A_SELL_VENUE_B
        assert opp.tier == Tier.HIGH
        assert opp.annualized_return is None

    def test_first_venue_cheaper(self):
        first = snapshot("binance", quote("ETHUSDT", 99.0))
        second = snapshot("bybit", quote("ETHUSDT", 100.0))

        opp = detect_cross_exchange(first, second)[0]

        assert opp.venue_a == "binance"
        assert opp.venue_b == "bybit"
        assert opp.spread_percent == pytest.approx(1.0)
        assert opp.spread_percent > 0

    def test_below_threshold_is_excluded(self):
        first = snapshot("binance", quote("BTCUSDT", 100.0))
        second = snapshot("okx", quote("BTCUSDT", 100.1))
        assert detect_cross_exchange(first, second) == []

    def test_only_common_symbols_are_compared(self):
        first = snapshot("binance", quote("BTCUSDT", 100.0), quote("SOLUSDT", 10.0))
        second = snapshot("okx", quote("BTCUSDT", 95.0), quote("DOGEUSDT", 0.1))

        result = detect_cross_exchange(first, second)

        assert [o.symbol for o in result] == ["BTCUSDT"]

    def test_non_positive_price_is_skipped(self):
        first = snapshot("binance", quote("BTCUSDT", 0.0))
        second = snapshot("okx", quote("BTCUSDT", 99.0))
        assert detect_cross_exchange(first, second) == []

    def test_empty_snapshot_contributes_nothing(self):
        assert detect_cross_exchange(VenueSnapshot.empty("okx"), snapshot("bybit", quote("BTCUSDT", 1.0))) == []


# ============================================
# Tests for detect_all
# ============================================

class TestDetectAll:
    """Tests for detect_all"""

    def test_three_venues_give_three_pairs(self):
        snapshots = [
            snapshot("binance", quote("BTCUSDT", 100.0)),
            snapshot("okx", quote("BTCUSDT", 101.0)),
            snapshot("bybit", quote("BTCUSDT", 102.0)),
        ]

        spot_futures, cross = detect_all(snapshots)

        assert spot_futures == []
        pairs = [(o.venue_a, o.venue_b) for o in cross]
        assert pairs == [("binance", "okx"), ("binance", "bybit"), ("okx", "bybit")]

    def test_is_deterministic(self):
        snapshots = [
            snapshot("binance", quote("BTCUSDT", 100.0, 101.0), quote("ETHUSDT", 50.0, 49.0)),
            snapshot("okx", quote("BTCUSDT", 98.0, 98.5)),
        ]
        assert detect_all(snapshots) == detect_all(snapshots)

    def test_no_snapshots(self):
        assert detect_all([]) == ([], [])


class TestHelpers:
    """Tests for classify_tier and annualized_return"""

    @pytest.mark.parametrize("spread, expected", [
        (1.5, Tier.HIGH),
        (-1.5, Tier.HIGH),
        (1.0, Tier.MEDIUM),
        (0.6, Tier.MEDIUM),
        (0.5, Tier.LOW),
        (0.2, Tier.LOW),
    ])
    def test_classify_tier_spot_futures_thresholds(self, spread, expected):
        assert classify_tier(spread, 1.0, 0.5) == expected

    def test_annualized_return_uses_spread_magnitude(self):
        assert annualized_return(-2.0, 0.0) == pytest.approx(2.0)
        assert annualized_return(1.0, -0.0001) == pytest.approx(1.0 - 10.95)
