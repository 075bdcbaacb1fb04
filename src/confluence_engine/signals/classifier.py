"""Per-indicator signal classification.

Maps each indicator reading (and, for crossing indicators, the reading as of
the previous bar) to a directional vote with a strength in [0, 1]. The vote's
contribution to the confluence score is ``strength * weight``.
"""

from dataclasses import dataclass
from enum import Enum

from ..features.indicators import (
    BollingerReading,
    EMACrossReading,
    MACDReading,
    StochasticReading,
)
from ..features.trend import Trend

RSI_OVERSOLD = 30.0
RSI_OVERBOUGHT = 70.0

# Histogram swing (fraction of price) that earns a full-strength cross
MACD_CROSS_FULL_SCALE = 0.001
MACD_TREND_STRENGTH = 0.6
MACD_TREND_MIN_LEVEL = 0.001
MACD_TREND_FULL_LEVEL = 0.005

BOLLINGER_TOUCH_STRENGTH = 0.7

EMA_CROSS_STRENGTH = 1.0
EMA_TREND_STRENGTH = 0.6
EMA_TREND_MIN_SEPARATION = 0.002
EMA_TREND_FULL_SEPARATION = 0.01

STOCHASTIC_OVERSOLD = 20.0
STOCHASTIC_OVERBOUGHT = 80.0
STOCHASTIC_MIN_STRENGTH = 0.5

TREND_STRONG_STRENGTH = 1.0
TREND_WEAK_STRENGTH = 0.7

CROSS_TOLERANCE = 1e-9


class Direction(str, Enum):
    """Signal direction."""

    CALL = "CALL"
    PUT = "PUT"
    NEUTRAL = "NEUTRAL"


@dataclass(frozen=True)
class DirectionalVote:
    """One indicator's verdict."""

    direction: Direction
    strength: float = 0.0

    def __post_init__(self) -> None:
        if not 0.0 <= self.strength <= 1.0:
            raise ValueError(f"Vote strength must be in [0, 1], got {self.strength}")

    @classmethod
    def neutral(cls) -> "DirectionalVote":
        return cls(Direction.NEUTRAL, 0.0)

    @classmethod
    def call(cls, strength: float) -> "DirectionalVote":
        return cls(Direction.CALL, _clamp_unit(strength))

    @classmethod
    def put(cls, strength: float) -> "DirectionalVote":
        return cls(Direction.PUT, _clamp_unit(strength))

    def score(self, weight: float) -> float:
        """Weighted contribution of this vote."""
        return self.strength * weight


def _clamp_unit(value: float) -> float:
    return min(max(float(value), 0.0), 1.0)


def _tolerance(*values: float) -> float:
    return CROSS_TOLERANCE * max(1.0, *(abs(v) for v in values))


def crossed_above(prev_a: float, prev_b: float, curr_a: float, curr_b: float) -> bool:
    """``a`` was below ``b`` on the previous bar and is now above or equal.

    Examples:
        >>> crossed_above(1.0, 2.0, 2.5, 2.0)
        True
        >>> crossed_above(2.0, 2.0, 2.5, 2.0)
        False
    """
    tol = _tolerance(prev_a, prev_b, curr_a, curr_b)
    return prev_a < prev_b - tol and curr_a >= curr_b - tol


def crossed_below(prev_a: float, prev_b: float, curr_a: float, curr_b: float) -> bool:
    """``a`` was above ``b`` on the previous bar and is now below or equal."""
    tol = _tolerance(prev_a, prev_b, curr_a, curr_b)
    return prev_a > prev_b + tol and curr_a <= curr_b + tol


def classify_rsi(
    rsi: float,
    oversold: float = RSI_OVERSOLD,
    overbought: float = RSI_OVERBOUGHT,
) -> DirectionalVote:
    """CALL below ``oversold``, PUT above ``overbought``.

    Strength grows linearly with the distance past the threshold and reaches
    1.0 at the scale end (0 or 100).

    Examples:
        >>> classify_rsi(15.0)
        DirectionalVote(direction=<Direction.CALL: 'CALL'>, strength=0.5)
    """
    if rsi < oversold:
        return DirectionalVote.call((oversold - rsi) / oversold)
    if rsi > overbought:
        return DirectionalVote.put((rsi - overbought) / (100.0 - overbought))
    return DirectionalVote.neutral()


def classify_macd(
    current: MACDReading,
    previous: MACDReading,
    price: float,
    cross_full_scale: float = MACD_CROSS_FULL_SCALE,
    trend_strength: float = MACD_TREND_STRENGTH,
    trend_min_level: float = MACD_TREND_MIN_LEVEL,
    trend_full_level: float = MACD_TREND_FULL_LEVEL,
    continuation: bool = True,
) -> DirectionalVote:
    """Vote on a fresh main/signal crossing, else on the main line's side of zero.

    A fresh cross votes in proportion to the histogram swing relative to
    price, reaching full strength at ``cross_full_scale``. Without a cross, a
    main line clear of zero by ``trend_min_level`` (relative to price) and not
    contradicted by the histogram casts a reduced continuation vote. Pass
    ``continuation=False`` to silence it outside an established trend.
    """
    if price <= 0:
        return DirectionalVote.neutral()

    # Main crossing signal is the histogram passing through zero
    bullish_cross = crossed_above(
        previous.main_line, previous.signal_line, current.main_line, current.signal_line
    )
    bearish_cross = crossed_below(
        previous.main_line, previous.signal_line, current.main_line, current.signal_line
    )

    if bullish_cross or bearish_cross:
        swing = abs(current.histogram - previous.histogram) / (price * cross_full_scale)
        strength = min(1.0, swing)
        return DirectionalVote.call(strength) if bullish_cross else DirectionalVote.put(strength)

    level = abs(current.main_line) / price
    if not continuation or level < trend_min_level:
        return DirectionalVote.neutral()

    strength = trend_strength * min(1.0, level / trend_full_level)
    tol = _tolerance(current.main_line, current.signal_line)

    if current.main_line > 0 and current.histogram >= -tol:
        return DirectionalVote.call(strength)
    if current.main_line < 0 and current.histogram <= tol:
        return DirectionalVote.put(strength)
    return DirectionalVote.neutral()


def classify_bollinger(
    price: float,
    bands: BollingerReading,
    touch_strength: float = BOLLINGER_TOUCH_STRENGTH,
) -> DirectionalVote:
    """CALL at or below the lower band, PUT at or above the upper band.

    Penetration beyond the band, measured against the half band width, adds
    to ``touch_strength``. Collapsed bands never vote.
    """
    half_width = bands.upper - bands.middle
    if half_width <= 0:
        return DirectionalVote.neutral()

    if price <= bands.lower:
        return DirectionalVote.call(touch_strength + (bands.lower - price) / half_width)
    if price >= bands.upper:
        return DirectionalVote.put(touch_strength + (price - bands.upper) / half_width)
    return DirectionalVote.neutral()


def classify_ema_cross(
    current: EMACrossReading,
    previous: EMACrossReading,
    cross_strength: float = EMA_CROSS_STRENGTH,
    trend_strength: float = EMA_TREND_STRENGTH,
    trend_min_separation: float = EMA_TREND_MIN_SEPARATION,
    trend_full_separation: float = EMA_TREND_FULL_SEPARATION,
    continuation: bool = True,
) -> DirectionalVote:
    """Vote on a fresh fast/slow cross against the previous bar's ordering.

    An ordering that was already established casts a reduced continuation
    vote once the separation clears ``trend_min_separation``, unless
    ``continuation`` is off.
    """
    if crossed_above(previous.fast, previous.slow, current.fast, current.slow):
        return DirectionalVote.call(cross_strength)
    if crossed_below(previous.fast, previous.slow, current.fast, current.slow):
        return DirectionalVote.put(cross_strength)

    separation = current.separation
    if not continuation or abs(separation) < trend_min_separation:
        return DirectionalVote.neutral()

    strength = trend_strength * min(1.0, abs(separation) / trend_full_separation)
    return DirectionalVote.call(strength) if separation > 0 else DirectionalVote.put(strength)


def classify_stochastic(
    current: StochasticReading,
    previous: StochasticReading,
    oversold: float = STOCHASTIC_OVERSOLD,
    overbought: float = STOCHASTIC_OVERBOUGHT,
    min_strength: float = STOCHASTIC_MIN_STRENGTH,
) -> DirectionalVote:
    """CALL when %K crosses above %D below ``oversold``; PUT symmetric above ``overbought``."""
    if (
        crossed_above(previous.k_line, previous.d_line, current.k_line, current.d_line)
        and current.k_line < oversold
    ):
        depth = (oversold - current.k_line) / oversold
        return DirectionalVote.call(min_strength + (1.0 - min_strength) * depth)

    if (
        crossed_below(previous.k_line, previous.d_line, current.k_line, current.d_line)
        and current.k_line > overbought
    ):
        depth = (current.k_line - overbought) / (100.0 - overbought)
        return DirectionalVote.put(min_strength + (1.0 - min_strength) * depth)

    return DirectionalVote.neutral()


def classify_trend(
    trend: Trend,
    strong_strength: float = TREND_STRONG_STRENGTH,
    weak_strength: float = TREND_WEAK_STRENGTH,
) -> DirectionalVote:
    """Bullish trends vote CALL, bearish PUT; strong trends at full strength."""
    if trend == Trend.STRONG_BULLISH:
        return DirectionalVote.call(strong_strength)
    if trend == Trend.BULLISH:
        return DirectionalVote.call(weak_strength)
    if trend == Trend.STRONG_BEARISH:
        return DirectionalVote.put(strong_strength)
    if trend == Trend.BEARISH:
        return DirectionalVote.put(weak_strength)
    return DirectionalVote.neutral()
