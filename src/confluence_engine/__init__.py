"""Technical-analysis confluence engine.

Turns an ordered candle sequence into a CALL / PUT / NEUTRAL signal with a
score, a confidence, ATR-based risk levels and a short rationale.
"""

__version__ = "0.1.0"

from .analysis import (
    AnalysisResult,
    ConfluenceAnalyzer,
    LightweightAnalyzer,
    LightweightResult,
    analyze,
    analyze_lightweight,
    is_signal_strong,
)
from .config import EngineConfig, load_config
from .data import Candle
from .signals import Direction

__all__ = [
    "__version__",
    "AnalysisResult",
    "ConfluenceAnalyzer",
    "LightweightAnalyzer",
    "LightweightResult",
    "analyze",
    "analyze_lightweight",
    "is_signal_strong",
    "EngineConfig",
    "load_config",
    "Candle",
    "Direction",
]
