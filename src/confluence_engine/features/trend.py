"""Trend classification from moving-average structure.

Combines three observations into a five-state trend:

- separation of a fast EMA above/below a slow EMA (relative to price)
- slope of the fast EMA over a short lookback
- directional persistence (share of up or down closes recently)

The thresholds are policy, not law; they are module constants and are
overridable through ``TrendConfig``.
"""

from enum import Enum
from typing import Sequence

import numpy as np

from .indicators import ema

TREND_FAST_PERIOD = 20
TREND_SLOW_PERIOD = 50
TREND_SLOPE_LOOKBACK = 5
TREND_PERSISTENCE_LOOKBACK = 10

# |separation| below this is sideways regardless of slope
SIDEWAYS_SEPARATION = 0.002
STRONG_SEPARATION = 0.01
STRONG_PERSISTENCE = 0.6
MIN_SLOPE = 0.0


class Trend(str, Enum):
    """Five-state trend classification."""

    STRONG_BULLISH = "STRONG_BULLISH"
    BULLISH = "BULLISH"
    SIDEWAYS = "SIDEWAYS"
    BEARISH = "BEARISH"
    STRONG_BEARISH = "STRONG_BEARISH"

    @property
    def is_strong(self) -> bool:
        return self in (Trend.STRONG_BULLISH, Trend.STRONG_BEARISH)


def _persistence(closes: np.ndarray, lookback: int) -> tuple[float, float]:
    """Share of up and down closes over the last ``lookback`` changes."""
    changes = np.diff(closes[-(lookback + 1):])
    if len(changes) == 0:
        return 0.0, 0.0
    return (
        float(np.count_nonzero(changes > 0)) / len(changes),
        float(np.count_nonzero(changes < 0)) / len(changes),
    )


def detect_trend(
    closes: Sequence[float] | np.ndarray,
    fast_period: int = TREND_FAST_PERIOD,
    slow_period: int = TREND_SLOW_PERIOD,
    slope_lookback: int = TREND_SLOPE_LOOKBACK,
    persistence_lookback: int = TREND_PERSISTENCE_LOOKBACK,
    sideways_separation: float = SIDEWAYS_SEPARATION,
    strong_separation: float = STRONG_SEPARATION,
    strong_persistence: float = STRONG_PERSISTENCE,
    min_slope: float = MIN_SLOPE,
) -> Trend:
    """Classify the prevailing trend.

    Args:
        closes: Close prices, oldest first.
        fast_period: Fast EMA period.
        slow_period: Slow EMA period.
        slope_lookback: Bars over which the fast EMA slope is measured.
        persistence_lookback: Bars over which up/down closes are counted.
        sideways_separation: Relative EMA separation under which the market
            is sideways.
        strong_separation: Relative EMA separation required for a strong trend.
        strong_persistence: Share of closes in the trend direction required
            for a strong trend.
        min_slope: Relative fast-EMA slope the trend direction must exceed.

    Returns:
        Trend. SIDEWAYS when fewer than ``slow_period`` closes are given.

    Examples:
        >>> detect_trend([100.0 + i for i in range(60)])
        <Trend.STRONG_BULLISH: 'STRONG_BULLISH'>
    """
    closes = np.asarray(closes, dtype=np.float64)

    if len(closes) < max(fast_period, slow_period):
        return Trend.SIDEWAYS

    fast = ema(closes, fast_period)
    slow = ema(closes, slow_period)

    if slow[-1] == 0:
        return Trend.SIDEWAYS

    separation = (fast[-1] - slow[-1]) / slow[-1]
    if abs(separation) < sideways_separation:
        return Trend.SIDEWAYS

    slope = 0.0
    anchor = len(closes) - 1 - slope_lookback
    if anchor >= fast_period - 1 and fast[anchor] != 0:
        slope = (fast[-1] - fast[anchor]) / fast[anchor]

    up_share, down_share = _persistence(closes, persistence_lookback)

    if separation > 0 and slope > min_slope:
        if separation >= strong_separation and up_share >= strong_persistence:
            return Trend.STRONG_BULLISH
        return Trend.BULLISH

    if separation < 0 and slope < -min_slope:
        if -separation >= strong_separation and down_share >= strong_persistence:
            return Trend.STRONG_BEARISH
        return Trend.BEARISH

    # Averages and slope disagree
    return Trend.SIDEWAYS
