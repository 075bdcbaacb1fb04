"""Support and resistance detection from pivot extrema.

Pivot highs/lows inside a lookback window are clustered by relative price
tolerance. Cluster levels below the current close are supports, levels above
are resistances, both ordered nearest-first.
"""

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

import numpy as np

LEVELS_LOOKBACK = 100
PIVOT_LEN = 2
CLUSTER_TOLERANCE = 0.002
MAX_LEVELS = 3


@dataclass(frozen=True)
class SupportResistance:
    """Support and resistance levels, nearest to current price first."""

    supports: Tuple[float, ...] = field(default_factory=tuple)
    resistances: Tuple[float, ...] = field(default_factory=tuple)

    @property
    def nearest_support(self) -> float | None:
        return self.supports[0] if self.supports else None

    @property
    def nearest_resistance(self) -> float | None:
        return self.resistances[0] if self.resistances else None


def find_pivots(
    high: np.ndarray,
    low: np.ndarray,
    pivot_len: int = PIVOT_LEN,
) -> Tuple[List[float], List[float]]:
    """Find pivot highs and lows.

    A pivot high is a bar whose high is strictly above the ``pivot_len`` bars
    on each side of it; pivot lows are symmetric.

    Examples:
        >>> import numpy as np
        >>> highs = np.array([1.0, 2.0, 5.0, 2.0, 1.0])
        >>> lows = np.array([0.5, 1.5, 4.0, 1.5, 0.5])
        >>> find_pivots(highs, lows, pivot_len=2)
        ([5.0], [])
    """
    pivot_highs: List[float] = []
    pivot_lows: List[float] = []

    for i in range(pivot_len, len(high) - pivot_len):
        left = slice(i - pivot_len, i)
        right = slice(i + 1, i + pivot_len + 1)
        if high[i] > max(np.max(high[left]), np.max(high[right])):
            pivot_highs.append(float(high[i]))
        if low[i] < min(np.min(low[left]), np.min(low[right])):
            pivot_lows.append(float(low[i]))

    return pivot_highs, pivot_lows


def cluster_levels(levels: Sequence[float], tolerance: float = CLUSTER_TOLERANCE) -> List[float]:
    """Merge levels within ``tolerance`` (relative) of a running cluster mean."""
    clusters: List[List[float]] = []

    for level in sorted(levels):
        if clusters:
            mean = float(np.mean(clusters[-1]))
            if mean != 0 and abs(level - mean) / abs(mean) <= tolerance:
                clusters[-1].append(level)
                continue
        clusters.append([level])

    return [float(np.mean(cluster)) for cluster in clusters]


def find_support_resistance(
    high: Sequence[float] | np.ndarray,
    low: Sequence[float] | np.ndarray,
    close: Sequence[float] | np.ndarray,
    lookback: int = LEVELS_LOOKBACK,
    pivot_len: int = PIVOT_LEN,
    tolerance: float = CLUSTER_TOLERANCE,
    max_levels: int = MAX_LEVELS,
) -> SupportResistance:
    """Detect support and resistance levels.

    Args:
        high: High prices.
        low: Low prices.
        close: Close prices.
        lookback: Number of most recent bars searched for pivots.
        pivot_len: Bars on each side a pivot must dominate.
        tolerance: Relative distance under which pivots merge into one level.
        max_levels: Maximum levels returned per side.

    Returns:
        SupportResistance (empty when no pivots are found).
    """
    high = np.asarray(high, dtype=np.float64)[-lookback:]
    low = np.asarray(low, dtype=np.float64)[-lookback:]
    close = np.asarray(close, dtype=np.float64)

    if len(close) == 0 or len(high) < 2 * pivot_len + 1:
        return SupportResistance()

    pivot_highs, pivot_lows = find_pivots(high, low, pivot_len)
    levels = cluster_levels(pivot_highs + pivot_lows, tolerance)

    price = float(close[-1])
    supports = sorted((lvl for lvl in levels if lvl < price), reverse=True)
    resistances = sorted(lvl for lvl in levels if lvl > price)

    return SupportResistance(
        supports=tuple(supports[:max_levels]),
        resistances=tuple(resistances[:max_levels]),
    )
