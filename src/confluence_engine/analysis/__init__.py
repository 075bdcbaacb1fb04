"""Analysis orchestrators: full confluence engine and lightweight engine."""

from .engine import ConfluenceAnalyzer, analyze, build_rationale, is_signal_strong
from .lightweight import LightweightAnalyzer, analyze_lightweight
from .models import (
    AnalysisFactor,
    AnalysisResult,
    FactorStatus,
    IndicatorBreakdown,
    IndicatorSnapshot,
    LightDirection,
    LightweightResult,
)

__all__ = [
    "ConfluenceAnalyzer",
    "analyze",
    "build_rationale",
    "is_signal_strong",
    "LightweightAnalyzer",
    "analyze_lightweight",
    "AnalysisFactor",
    "AnalysisResult",
    "FactorStatus",
    "IndicatorBreakdown",
    "IndicatorSnapshot",
    "LightDirection",
    "LightweightResult",
]
