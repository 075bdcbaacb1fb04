"""Pydantic configuration schemas for engine parameters.

Every tunable policy constant of the analysis engines is defined here with its
default and validated on load. YAML configs are deserialized into these
models.
"""

from typing import Dict, Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from ..features import indicators, levels, trend
from ..risk import levels as risk_levels
from ..signals import classifier, scorer

MIN_CANDLES = 50

LIGHTWEIGHT_MIN_CANDLES = 20
LIGHTWEIGHT_EMA_FAST = 9
LIGHTWEIGHT_EMA_SLOW = 21
LIGHTWEIGHT_EMA_WEIGHT = 30.0
LIGHTWEIGHT_RSI_WEIGHT = 25.0
LIGHTWEIGHT_ENGULFING_WEIGHT = 20.0
LIGHTWEIGHT_SIGNAL_THRESHOLD = 50.0
LIGHTWEIGHT_DISPLAY_CAP = 99.0
LIGHTWEIGHT_SQUEEZE_BANDWIDTH = 0.0008

GATE_MIN_SCORE = 60.0
GATE_MIN_CONFIDENCE = 66.0


class WeightsConfig(BaseModel):
    """Indicator weights for the full engine (must sum to 100)."""

    rsi: float = Field(scorer.INDICATOR_WEIGHTS["rsi"], ge=0.0)
    macd: float = Field(scorer.INDICATOR_WEIGHTS["macd"], ge=0.0)
    bollinger: float = Field(scorer.INDICATOR_WEIGHTS["bollinger"], ge=0.0)
    ema: float = Field(scorer.INDICATOR_WEIGHTS["ema"], ge=0.0)
    stochastic: float = Field(scorer.INDICATOR_WEIGHTS["stochastic"], ge=0.0)
    trend: float = Field(scorer.INDICATOR_WEIGHTS["trend"], ge=0.0)

    @model_validator(mode="after")
    def validate_total(self) -> "WeightsConfig":
        """Ensure weights sum to exactly 100."""
        total = sum(self.as_dict().values())
        if abs(total - 100.0) > 1e-9:
            raise ValueError(f"Indicator weights must sum to 100, got {total}")
        return self

    def as_dict(self) -> Dict[str, float]:
        return {
            "rsi": self.rsi,
            "macd": self.macd,
            "bollinger": self.bollinger,
            "ema": self.ema,
            "stochastic": self.stochastic,
            "trend": self.trend,
        }


class IndicatorConfig(BaseModel):
    """Indicator periods."""

    rsi_period: int = Field(indicators.RSI_PERIOD, ge=2, le=200)
    macd_fast: int = Field(indicators.MACD_FAST_PERIOD, ge=2, le=200)
    macd_slow: int = Field(indicators.MACD_SLOW_PERIOD, ge=2, le=200)
    macd_signal: int = Field(indicators.MACD_SIGNAL_PERIOD, ge=2, le=200)
    bollinger_period: int = Field(indicators.BOLLINGER_PERIOD, ge=2, le=200)
    bollinger_std_mult: float = Field(indicators.BOLLINGER_STD_MULT, gt=0.0)
    stochastic_period: int = Field(indicators.STOCHASTIC_PERIOD, ge=2, le=200)
    stochastic_smoothing: int = Field(indicators.STOCHASTIC_SMOOTHING, ge=1, le=20)
    atr_period: int = Field(indicators.ATR_PERIOD, ge=1, le=200)
    atr_wilder: bool = Field(False, description="Wilder-smoothed ATR instead of a plain mean")
    ema_fast: int = Field(indicators.EMA_FAST_PERIOD, ge=2, le=400)
    ema_slow: int = Field(indicators.EMA_SLOW_PERIOD, ge=2, le=400)

    @model_validator(mode="after")
    def validate_periods(self) -> "IndicatorConfig":
        """Ensure fast periods are shorter than slow periods."""
        if self.macd_fast >= self.macd_slow:
            raise ValueError("macd_fast must be < macd_slow")
        if self.ema_fast >= self.ema_slow:
            raise ValueError("ema_fast must be < ema_slow")
        return self


class ClassifierConfig(BaseModel):
    """Vote thresholds and strengths."""

    rsi_oversold: float = Field(classifier.RSI_OVERSOLD, gt=0.0, lt=100.0)
    rsi_overbought: float = Field(classifier.RSI_OVERBOUGHT, gt=0.0, lt=100.0)

    macd_cross_full_scale: float = Field(classifier.MACD_CROSS_FULL_SCALE, gt=0.0)
    macd_trend_strength: float = Field(classifier.MACD_TREND_STRENGTH, ge=0.0, le=1.0)
    macd_trend_min_level: float = Field(classifier.MACD_TREND_MIN_LEVEL, ge=0.0)
    macd_trend_full_level: float = Field(classifier.MACD_TREND_FULL_LEVEL, gt=0.0)

    bollinger_touch_strength: float = Field(classifier.BOLLINGER_TOUCH_STRENGTH, ge=0.0, le=1.0)

    ema_cross_strength: float = Field(classifier.EMA_CROSS_STRENGTH, ge=0.0, le=1.0)
    ema_trend_strength: float = Field(classifier.EMA_TREND_STRENGTH, ge=0.0, le=1.0)
    ema_trend_min_separation: float = Field(classifier.EMA_TREND_MIN_SEPARATION, ge=0.0)
    ema_trend_full_separation: float = Field(classifier.EMA_TREND_FULL_SEPARATION, gt=0.0)

    stochastic_oversold: float = Field(classifier.STOCHASTIC_OVERSOLD, gt=0.0, lt=100.0)
    stochastic_overbought: float = Field(classifier.STOCHASTIC_OVERBOUGHT, gt=0.0, lt=100.0)
    stochastic_min_strength: float = Field(classifier.STOCHASTIC_MIN_STRENGTH, ge=0.0, le=1.0)

    trend_strong_strength: float = Field(classifier.TREND_STRONG_STRENGTH, ge=0.0, le=1.0)
    trend_weak_strength: float = Field(classifier.TREND_WEAK_STRENGTH, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def validate_thresholds(self) -> "ClassifierConfig":
        """Ensure oversold levels sit below overbought levels."""
        if self.rsi_oversold >= self.rsi_overbought:
            raise ValueError("rsi_oversold must be < rsi_overbought")
        if self.stochastic_oversold >= self.stochastic_overbought:
            raise ValueError("stochastic_oversold must be < stochastic_overbought")
        return self


class TrendConfig(BaseModel):
    """Trend classification policy."""

    fast_period: int = Field(trend.TREND_FAST_PERIOD, ge=2, le=400)
    slow_period: int = Field(trend.TREND_SLOW_PERIOD, ge=2, le=400)
    slope_lookback: int = Field(trend.TREND_SLOPE_LOOKBACK, ge=1, le=100)
    persistence_lookback: int = Field(trend.TREND_PERSISTENCE_LOOKBACK, ge=1, le=100)
    sideways_separation: float = Field(trend.SIDEWAYS_SEPARATION, ge=0.0)
    strong_separation: float = Field(trend.STRONG_SEPARATION, ge=0.0)
    strong_persistence: float = Field(trend.STRONG_PERSISTENCE, ge=0.0, le=1.0)
    min_slope: float = Field(trend.MIN_SLOPE, ge=0.0)

    @model_validator(mode="after")
    def validate_trend(self) -> "TrendConfig":
        """Ensure the trend thresholds are ordered."""
        if self.fast_period >= self.slow_period:
            raise ValueError("fast_period must be < slow_period")
        if self.sideways_separation > self.strong_separation:
            raise ValueError("sideways_separation must be <= strong_separation")
        return self


class LevelsConfig(BaseModel):
    """Support/resistance detection."""

    lookback: int = Field(levels.LEVELS_LOOKBACK, ge=5)
    pivot_len: int = Field(levels.PIVOT_LEN, ge=1, le=20)
    tolerance: float = Field(levels.CLUSTER_TOLERANCE, ge=0.0, le=0.1)
    max_levels: int = Field(levels.MAX_LEVELS, ge=1, le=20)


class ScoringConfig(BaseModel):
    """Confluence decision policy."""

    neutral_vote_limit: int = Field(scorer.NEUTRAL_VOTE_LIMIT, ge=1, le=6)
    min_margin: float = Field(scorer.MIN_SCORE_MARGIN, ge=0.0, le=100.0)
    max_score: float = Field(scorer.MAX_SCORE, gt=0.0, le=100.0)


class RiskConfig(BaseModel):
    """ATR multiples for stop and target placement."""

    stop_atr_mult: float = Field(risk_levels.STOP_ATR_MULT, gt=0.0)
    target_atr_mult: float = Field(risk_levels.TARGET_ATR_MULT, gt=0.0)


class GateConfig(BaseModel):
    """Admission thresholds for ``is_signal_strong``."""

    min_score: float = Field(GATE_MIN_SCORE, ge=0.0, le=100.0)
    min_confidence: float = Field(GATE_MIN_CONFIDENCE, ge=0.0, le=100.0)


class LightweightConfig(BaseModel):
    """Short-history engine parameters."""

    min_candles: int = Field(LIGHTWEIGHT_MIN_CANDLES, ge=2)
    ema_fast: int = Field(LIGHTWEIGHT_EMA_FAST, ge=2, le=200)
    ema_slow: int = Field(LIGHTWEIGHT_EMA_SLOW, ge=2, le=200)
    rsi_period: int = Field(indicators.RSI_PERIOD, ge=2, le=200)
    rsi_oversold: float = Field(classifier.RSI_OVERSOLD, gt=0.0, lt=100.0)
    rsi_overbought: float = Field(classifier.RSI_OVERBOUGHT, gt=0.0, lt=100.0)

    ema_weight: float = Field(LIGHTWEIGHT_EMA_WEIGHT, ge=0.0)
    rsi_weight: float = Field(LIGHTWEIGHT_RSI_WEIGHT, ge=0.0)
    engulfing_weight: float = Field(LIGHTWEIGHT_ENGULFING_WEIGHT, ge=0.0)
    signal_threshold: float = Field(LIGHTWEIGHT_SIGNAL_THRESHOLD, ge=0.0)
    display_cap: float = Field(LIGHTWEIGHT_DISPLAY_CAP, gt=0.0)

    squeeze_filter: bool = Field(True, description="Force NEUTRO in a Bollinger squeeze")
    squeeze_bandwidth: float = Field(LIGHTWEIGHT_SQUEEZE_BANDWIDTH, ge=0.0)
    bollinger_period: int = Field(indicators.BOLLINGER_PERIOD, ge=2, le=200)
    bollinger_std_mult: float = Field(indicators.BOLLINGER_STD_MULT, gt=0.0)

    probability_base: float = Field(50.0, ge=0.0, le=100.0)
    probability_per_point: float = Field(0.5, ge=0.0)
    probability_cap: float = Field(95.0, ge=0.0, le=100.0)
    ready_probability: float = Field(75.0, ge=0.0, le=100.0)

    @model_validator(mode="after")
    def validate_lightweight(self) -> "LightweightConfig":
        """Ensure EMA ordering and RSI thresholds are sensible."""
        if self.ema_fast >= self.ema_slow:
            raise ValueError("ema_fast must be < ema_slow")
        if self.rsi_oversold >= self.rsi_overbought:
            raise ValueError("rsi_oversold must be < rsi_overbought")
        return self


class EngineConfig(BaseModel):
    """Root engine configuration."""

    name: str = Field("Confluence_Engine", description="Configuration name")
    version: str = Field("1.0", description="Configuration version")

    min_candles: int = Field(MIN_CANDLES, ge=2, description="Full-engine minimum history")

    weights: WeightsConfig = Field(default_factory=WeightsConfig)
    indicators: IndicatorConfig = Field(default_factory=IndicatorConfig)
    classifier: ClassifierConfig = Field(default_factory=ClassifierConfig)
    trend: TrendConfig = Field(default_factory=TrendConfig)
    levels: LevelsConfig = Field(default_factory=LevelsConfig)
    scoring: ScoringConfig = Field(default_factory=ScoringConfig)
    risk: RiskConfig = Field(default_factory=RiskConfig)
    gate: GateConfig = Field(default_factory=GateConfig)
    lightweight: LightweightConfig = Field(default_factory=LightweightConfig)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        "INFO", description="Logging level"
    )
    log_to_file: bool = Field(False, description="Write logs to file")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Ensure name is non-empty."""
        if not v or not v.strip():
            raise ValueError("Config name cannot be empty")
        return v.strip()
