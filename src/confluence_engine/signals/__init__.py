"""Signal generation: per-indicator classification and confluence scoring."""

from .classifier import (
    Direction,
    DirectionalVote,
    classify_bollinger,
    classify_ema_cross,
    classify_macd,
    classify_rsi,
    classify_stochastic,
    classify_trend,
    crossed_above,
    crossed_below,
)
from .scorer import (
    INDICATOR_WEIGHTS,
    ConfluenceScore,
    ConfluenceScorer,
    IndicatorSignal,
    compute_confidence,
)

__all__ = [
    "Direction",
    "DirectionalVote",
    "classify_bollinger",
    "classify_ema_cross",
    "classify_macd",
    "classify_rsi",
    "classify_stochastic",
    "classify_trend",
    "crossed_above",
    "crossed_below",
    "INDICATOR_WEIGHTS",
    "ConfluenceScore",
    "ConfluenceScorer",
    "IndicatorSignal",
    "compute_confidence",
]
