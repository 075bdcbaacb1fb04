"""Analysis result types for the full and lightweight engines."""

from dataclasses import asdict, dataclass, is_dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ..features.indicators import (
    BollingerReading,
    EMACrossReading,
    MACDReading,
    StochasticReading,
)
from ..features.levels import SupportResistance
from ..features.trend import Trend
from ..signals.classifier import Direction
from ..signals.scorer import IndicatorSignal

INSUFFICIENT_DATA_RATIONALE = ("Insufficient data for analysis", "Waiting for more candles")
NO_DIRECTION_RATIONALE = ("No clear market direction", "Waiting for indicator confluence")


def _plain(value: Any) -> Any:
    """Convert readings, enums and tuples into JSON-friendly values."""
    if isinstance(value, Enum):
        return value.value
    if is_dataclass(value):
        return {key: _plain(val) for key, val in asdict(value).items()}
    if isinstance(value, (list, tuple)):
        return [_plain(val) for val in value]
    if isinstance(value, datetime):
        return value.isoformat()
    return value


@dataclass(frozen=True)
class IndicatorSnapshot:
    """Every indicator reading as of one bar."""

    rsi: float
    macd: MACDReading
    bollinger: BollingerReading
    ema: EMACrossReading
    stochastic: StochasticReading
    trend: Trend


@dataclass(frozen=True)
class IndicatorBreakdown:
    """Per-indicator readings and votes, in rationale priority order."""

    rsi: IndicatorSignal
    macd: IndicatorSignal
    bollinger: IndicatorSignal
    ema: IndicatorSignal
    stochastic: IndicatorSignal
    trend: IndicatorSignal

    def as_list(self) -> List[IndicatorSignal]:
        return [self.rsi, self.macd, self.bollinger, self.ema, self.stochastic, self.trend]

    def to_dict(self) -> Dict[str, Any]:
        return {
            signal.name: {
                "reading": _plain(signal.reading),
                "direction": signal.direction.value,
                "strength": signal.vote.strength,
                "weight": signal.weight,
                "score": signal.score,
            }
            for signal in self.as_list()
        }


@dataclass(frozen=True)
class AnalysisResult:
    """Full-engine analysis of one candle snapshot."""

    direction: Direction
    score: float
    confidence: int

    indicators: IndicatorBreakdown
    trend: Trend
    support_resistance: SupportResistance
    volatility: float

    entry_price: float
    stop_loss: Optional[float]
    take_profit: Optional[float]

    rationale: Tuple[str, ...]
    timestamp: datetime
    candle_count: int

    @property
    def is_neutral(self) -> bool:
        return self.direction == Direction.NEUTRAL

    def to_dict(self) -> Dict[str, Any]:
        """Plain-dict view for the decision layer (JSON serializable)."""
        return {
            "direction": self.direction.value,
            "score": self.score,
            "confidence": self.confidence,
            "indicators": self.indicators.to_dict(),
            "trend": self.trend.value,
            "support_resistance": _plain(self.support_resistance),
            "volatility": self.volatility,
            "entry_price": self.entry_price,
            "stop_loss": self.stop_loss,
            "take_profit": self.take_profit,
            "rationale": list(self.rationale),
            "timestamp": self.timestamp.isoformat(),
            "candle_count": self.candle_count,
        }


class LightDirection(str, Enum):
    """Lightweight engine direction."""

    CALL = "CALL"
    PUT = "PUT"
    NEUTRO = "NEUTRO"


class FactorStatus(str, Enum):
    """Effect of one lightweight factor."""

    POSITIVE = "POSITIVE"
    NEGATIVE = "NEGATIVE"
    NEUTRAL = "NEUTRAL"


@dataclass(frozen=True)
class AnalysisFactor:
    """One lightweight-engine factor and the points it contributed."""

    label: str
    weight: float
    status: FactorStatus
    value: Optional[float] = None


@dataclass(frozen=True)
class LightweightResult:
    """Lightweight-engine analysis."""

    direction: LightDirection
    score: float
    factors: Tuple[AnalysisFactor, ...]
    timestamp: datetime
    probability: float = 50.0
    ready: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "direction": self.direction.value,
            "score": self.score,
            "factors": _plain(self.factors),
            "timestamp": self.timestamp.isoformat(),
            "probability": self.probability,
            "ready": self.ready,
        }
