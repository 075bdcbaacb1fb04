"""Test trend, support/resistance and price-action features."""

import numpy as np
import pytest

from confluence_engine.features.levels import (
    SupportResistance,
    cluster_levels,
    find_pivots,
    find_support_resistance,
)
from confluence_engine.features.price_action import detect_engulfing
from confluence_engine.features.trend import Trend, detect_trend


def _zigzag(start: float, steps, n: int) -> np.ndarray:
    closes = [start]
    for i in range(n):
        closes.append(closes[-1] + steps[i % len(steps)])
    return np.array(closes)


class TestTrend:
    """Test trend classification."""

    def test_strong_bullish(self):
        assert detect_trend(np.arange(100.0, 160.0)) == Trend.STRONG_BULLISH

    def test_strong_bearish(self):
        assert detect_trend(np.arange(200.0, 140.0, -1.0)) == Trend.STRONG_BEARISH

    def test_choppy_rise_is_weak_bullish(self):
        """Half the closes falling keeps the trend below strong."""
        trend = detect_trend(_zigzag(100.0, [2.0, -1.0], 60))

        assert trend == Trend.BULLISH
        assert not trend.is_strong

    def test_choppy_fall_is_weak_bearish(self):
        assert detect_trend(_zigzag(200.0, [-2.0, 1.0], 60)) == Trend.BEARISH

    def test_flat_is_sideways(self):
        assert detect_trend(np.full(60, 100.0)) == Trend.SIDEWAYS

    def test_short_history_is_sideways(self):
        assert detect_trend(np.arange(100.0, 130.0)) == Trend.SIDEWAYS

    def test_is_strong(self):
        assert Trend.STRONG_BEARISH.is_strong
        assert not Trend.SIDEWAYS.is_strong


class TestLevels:
    """Test support and resistance detection."""

    def test_find_pivots_strict(self):
        highs = np.array([1.0, 2.0, 5.0, 2.0, 1.0, 3.0, 3.0, 3.0, 3.0])
        lows = np.array([0.5, 1.5, 4.0, 1.5, 0.5, 2.5, 2.5, 2.5, 2.5])

        pivot_highs, pivot_lows = find_pivots(highs, lows, pivot_len=2)

        # Equal neighbours (the 3.0 / 2.5 plateau) never form a pivot
        assert pivot_highs == [5.0]
        assert pivot_lows == [0.5]

    def test_cluster_levels(self):
        levels = cluster_levels([105.0, 100.0, 100.1], tolerance=0.002)

        assert levels == pytest.approx([100.05, 105.0])

    def test_support_and_resistance(self):
        high = np.full(15, 100.0)
        low = np.full(15, 99.0)
        close = np.full(15, 99.5)
        high[5] = 110.0
        low[10] = 90.0

        levels = find_support_resistance(high, low, close)

        assert levels.supports == (90.0,)
        assert levels.resistances == (110.0,)
        assert levels.nearest_support == 90.0
        assert levels.nearest_resistance == 110.0

    def test_levels_ordered_nearest_first(self):
        high = np.full(30, 100.0)
        low = np.full(30, 99.0)
        close = np.full(30, 99.5)
        high[5], high[15] = 120.0, 105.0
        low[10], low[20] = 80.0, 95.0

        levels = find_support_resistance(high, low, close)

        assert levels.supports == (95.0, 80.0)
        assert levels.resistances == (105.0, 120.0)

    def test_flat_series_has_no_levels(self):
        flat = np.full(40, 100.0)

        assert find_support_resistance(flat, flat, flat) == SupportResistance()

    def test_short_history(self):
        levels = find_support_resistance([1.0, 2.0], [0.5, 1.5], [0.8, 1.8])

        assert levels.nearest_support is None
        assert levels.nearest_resistance is None


class TestEngulfing:
    """Test engulfing pattern detection."""

    def test_bullish(self):
        assert detect_engulfing(99.0, 102.0, 101.0, 100.0) == (True, False)

    def test_bearish(self):
        assert detect_engulfing(101.0, 98.0, 99.0, 100.0) == (False, True)

    def test_inside_bar_is_not_engulfing(self):
        assert detect_engulfing(100.2, 100.8, 101.0, 100.0) == (False, False)

    def test_same_direction_is_not_engulfing(self):
        assert detect_engulfing(100.0, 103.0, 99.0, 101.0) == (False, False)
