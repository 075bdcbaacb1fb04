"""Full confluence analysis engine.

Runs the indicator set over a candle snapshot, classifies each indicator
against its previous-bar reading, aggregates the weighted votes, annotates
ATR-based risk levels and explains the decision in up to three rationale
strings.
"""

from datetime import datetime, timezone
from typing import List, Optional, Tuple

from loguru import logger

from ..config.schema import GATE_MIN_CONFIDENCE, GATE_MIN_SCORE, EngineConfig
from ..data.base import CandleInput, OHLCArrays, to_arrays
from ..features.indicators import (
    NEUTRAL_RSI,
    NEUTRAL_STOCHASTIC,
    BollingerReading,
    EMACrossReading,
    MACDReading,
    StochasticReading,
    compute_atr,
    compute_bollinger,
    compute_ema_cross,
    compute_macd,
    compute_rsi,
    compute_stochastic,
)
from ..features.levels import SupportResistance, find_support_resistance
from ..features.trend import Trend, detect_trend
from ..risk.levels import compute_risk_levels
from ..signals.classifier import (
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
from ..signals.scorer import ConfluenceScorer, IndicatorSignal
from .models import (
    INSUFFICIENT_DATA_RATIONALE,
    NO_DIRECTION_RATIONALE,
    AnalysisResult,
    IndicatorBreakdown,
    IndicatorSnapshot,
)

MAX_RATIONALE = 3


class ConfluenceAnalyzer:
    """Multi-indicator confluence analyzer.

    Stateless apart from its configuration: every ``analyze`` call is a full
    recomputation over the candles it is given, so one instance may serve
    many instruments.

    Examples:
        >>> analyzer = ConfluenceAnalyzer()
        >>> analyzer.analyze([]).direction
        <Direction.NEUTRAL: 'NEUTRAL'>
    """

    def __init__(self, config: Optional[EngineConfig] = None) -> None:
        """Initialize analyzer.

        Args:
            config: Engine configuration (defaults when None).
        """
        self.config = config or EngineConfig()
        self.weights = self.config.weights.as_dict()
        self.scorer = ConfluenceScorer(
            neutral_vote_limit=self.config.scoring.neutral_vote_limit,
            min_margin=self.config.scoring.min_margin,
            max_score=self.config.scoring.max_score,
        )

    def analyze(self, candles: CandleInput) -> AnalysisResult:
        """Analyze a candle snapshot.

        Args:
            candles: Candles ordered oldest first, or a candle DataFrame.

        Returns:
            AnalysisResult. NEUTRAL with default fields when fewer than
            ``config.min_candles`` candles are given.
        """
        data = to_arrays(candles)

        if len(data) < self.config.min_candles:
            logger.debug(
                f"Insufficient history: {len(data)} < {self.config.min_candles} candles"
            )
            return self._insufficient_result(data)

        current = self.snapshot(data)
        previous = self.snapshot(data.drop_last())
        price = float(data.close[-1])

        indicators = self.classify(current, previous, price)
        decision = self.scorer.aggregate(indicators.as_list())

        ind_cfg = self.config.indicators
        atr = compute_atr(
            data.high, data.low, data.close, ind_cfg.atr_period, wilder=ind_cfg.atr_wilder
        )
        risk = compute_risk_levels(
            price,
            decision.direction,
            atr,
            stop_mult=self.config.risk.stop_atr_mult,
            target_mult=self.config.risk.target_atr_mult,
        )

        lvl_cfg = self.config.levels
        support_resistance = find_support_resistance(
            data.high,
            data.low,
            data.close,
            lookback=lvl_cfg.lookback,
            pivot_len=lvl_cfg.pivot_len,
            tolerance=lvl_cfg.tolerance,
            max_levels=lvl_cfg.max_levels,
        )

        rationale = build_rationale(
            indicators,
            decision.direction,
            fast_period=ind_cfg.ema_fast,
            slow_period=ind_cfg.ema_slow,
        )

        logger.debug(
            f"Analysis: {decision.direction.value} score={decision.score:.1f} "
            f"confidence={decision.confidence} trend={current.trend.value} "
            f"price={price:.5f}"
        )

        return AnalysisResult(
            direction=decision.direction,
            score=decision.score,
            confidence=decision.confidence,
            indicators=indicators,
            trend=current.trend,
            support_resistance=support_resistance,
            volatility=atr,
            entry_price=price,
            stop_loss=risk.stop_loss,
            take_profit=risk.take_profit,
            rationale=rationale,
            timestamp=datetime.now(timezone.utc),
            candle_count=len(data),
        )

    def snapshot(self, data: OHLCArrays) -> IndicatorSnapshot:
        """Compute every indicator reading as of the last bar of ``data``."""
        ind = self.config.indicators
        trend_cfg = self.config.trend

        return IndicatorSnapshot(
            rsi=compute_rsi(data.close, ind.rsi_period),
            macd=compute_macd(data.close, ind.macd_fast, ind.macd_slow, ind.macd_signal),
            bollinger=compute_bollinger(data.close, ind.bollinger_period, ind.bollinger_std_mult),
            ema=compute_ema_cross(data.close, ind.ema_fast, ind.ema_slow),
            stochastic=compute_stochastic(
                data.high,
                data.low,
                data.close,
                ind.stochastic_period,
                ind.stochastic_smoothing,
            ),
            trend=detect_trend(
                data.close,
                fast_period=trend_cfg.fast_period,
                slow_period=trend_cfg.slow_period,
                slope_lookback=trend_cfg.slope_lookback,
                persistence_lookback=trend_cfg.persistence_lookback,
                sideways_separation=trend_cfg.sideways_separation,
                strong_separation=trend_cfg.strong_separation,
                strong_persistence=trend_cfg.strong_persistence,
                min_slope=trend_cfg.min_slope,
            ),
        )

    def classify(
        self,
        current: IndicatorSnapshot,
        previous: IndicatorSnapshot,
        price: float,
    ) -> IndicatorBreakdown:
        """Vote on every indicator given current and previous-bar readings."""
        cls = self.config.classifier
        w = self.weights
        # Continuation votes only count inside an established trend
        trending = current.trend.is_strong

        return IndicatorBreakdown(
            rsi=IndicatorSignal(
                "rsi",
                current.rsi,
                classify_rsi(current.rsi, cls.rsi_oversold, cls.rsi_overbought),
                w["rsi"],
            ),
            macd=IndicatorSignal(
                "macd",
                current.macd,
                classify_macd(
                    current.macd,
                    previous.macd,
                    price,
                    cross_full_scale=cls.macd_cross_full_scale,
                    trend_strength=cls.macd_trend_strength,
                    trend_min_level=cls.macd_trend_min_level,
                    trend_full_level=cls.macd_trend_full_level,
                    continuation=trending,
                ),
                w["macd"],
                previous=previous.macd,
            ),
            bollinger=IndicatorSignal(
                "bollinger",
                current.bollinger,
                classify_bollinger(price, current.bollinger, cls.bollinger_touch_strength),
                w["bollinger"],
            ),
            ema=IndicatorSignal(
                "ema",
                current.ema,
                classify_ema_cross(
                    current.ema,
                    previous.ema,
                    cross_strength=cls.ema_cross_strength,
                    trend_strength=cls.ema_trend_strength,
                    trend_min_separation=cls.ema_trend_min_separation,
                    trend_full_separation=cls.ema_trend_full_separation,
                    continuation=trending,
                ),
                w["ema"],
                previous=previous.ema,
            ),
            stochastic=IndicatorSignal(
                "stochastic",
                current.stochastic,
                classify_stochastic(
                    current.stochastic,
                    previous.stochastic,
                    oversold=cls.stochastic_oversold,
                    overbought=cls.stochastic_overbought,
                    min_strength=cls.stochastic_min_strength,
                ),
                w["stochastic"],
                previous=previous.stochastic,
            ),
            trend=IndicatorSignal(
                "trend",
                current.trend,
                classify_trend(current.trend, cls.trend_strong_strength, cls.trend_weak_strength),
                w["trend"],
            ),
        )

    def is_signal_strong(self, result: AnalysisResult) -> bool:
        """Gate ``result`` with the configured score/confidence thresholds."""
        return is_signal_strong(
            result,
            min_score=self.config.gate.min_score,
            min_confidence=self.config.gate.min_confidence,
        )

    def _insufficient_result(self, data: OHLCArrays) -> AnalysisResult:
        price = float(data.close[-1]) if len(data) else 0.0
        neutral = DirectionalVote.neutral()
        w = self.weights

        indicators = IndicatorBreakdown(
            rsi=IndicatorSignal("rsi", NEUTRAL_RSI, neutral, w["rsi"]),
            macd=IndicatorSignal("macd", MACDReading(0.0, 0.0, 0.0), neutral, w["macd"]),
            bollinger=IndicatorSignal(
                "bollinger", BollingerReading(price, price, price, 0.0), neutral, w["bollinger"]
            ),
            ema=IndicatorSignal("ema", EMACrossReading(price, price), neutral, w["ema"]),
            stochastic=IndicatorSignal(
                "stochastic",
                StochasticReading(NEUTRAL_STOCHASTIC, NEUTRAL_STOCHASTIC),
                neutral,
                w["stochastic"],
            ),
            trend=IndicatorSignal("trend", Trend.SIDEWAYS, neutral, w["trend"]),
        )

        return AnalysisResult(
            direction=Direction.NEUTRAL,
            score=0.0,
            confidence=0,
            indicators=indicators,
            trend=Trend.SIDEWAYS,
            support_resistance=SupportResistance(),
            volatility=0.0,
            entry_price=price,
            stop_loss=None,
            take_profit=None,
            rationale=INSUFFICIENT_DATA_RATIONALE,
            timestamp=datetime.now(timezone.utc),
            candle_count=len(data),
        )


def _fresh_cross(signal: IndicatorSignal, direction: Direction) -> bool:
    """Whether a two-line reading crossed in ``direction`` since the previous bar."""
    prev, curr = signal.previous, signal.reading
    if prev is None:
        return False

    if isinstance(curr, MACDReading):
        lines = (prev.main_line, prev.signal_line, curr.main_line, curr.signal_line)
    elif isinstance(curr, EMACrossReading):
        lines = (prev.fast, prev.slow, curr.fast, curr.slow)
    else:
        return False

    if direction == Direction.CALL:
        return crossed_above(*lines)
    return crossed_below(*lines)


def build_rationale(
    indicators: IndicatorBreakdown,
    direction: Direction,
    fast_period: int = 20,
    slow_period: int = 50,
    max_reasons: int = MAX_RATIONALE,
) -> Tuple[str, ...]:
    """Explain a decision with the indicators that agree with it.

    Reasons are collected in priority order RSI, MACD, Bollinger, EMA cross,
    Trend and truncated to ``max_reasons``. NEUTRAL decisions get a fixed
    explanation.

    Args:
        indicators: Classified indicator signals.
        direction: Final decision.
        fast_period: Fast EMA period (for labels).
        slow_period: Slow EMA period (for labels).
        max_reasons: Maximum number of reasons.

    Returns:
        Tuple of human-readable reasons.
    """
    if direction == Direction.NEUTRAL:
        return NO_DIRECTION_RATIONALE

    bullish = direction == Direction.CALL
    reasons: List[str] = []

    if indicators.rsi.direction == direction:
        state = "oversold" if bullish else "overbought"
        reasons.append(f"RSI {state} ({indicators.rsi.reading:.1f})")

    if indicators.macd.direction == direction:
        if _fresh_cross(indicators.macd, direction):
            side = "above" if bullish else "below"
            reasons.append(f"MACD crossed {side} signal line")
        else:
            reasons.append(f"MACD momentum {'bullish' if bullish else 'bearish'}")

    if indicators.bollinger.direction == direction:
        band = "lower" if bullish else "upper"
        reasons.append(f"Price at {band} Bollinger band")

    if indicators.ema.direction == direction:
        side = "above" if bullish else "below"
        if _fresh_cross(indicators.ema, direction):
            reasons.append(f"EMA{fast_period} crossed {side} EMA{slow_period}")
        else:
            bias = "bullish" if bullish else "bearish"
            reasons.append(f"EMA{fast_period} {side} EMA{slow_period} ({bias})")

    if indicators.trend.direction == direction:
        label = indicators.trend.reading.value.replace("_", " ").lower()
        reasons.append(f"Trend {label}")

    return tuple(reasons[:max_reasons])


def analyze(candles: CandleInput, config: Optional[EngineConfig] = None) -> AnalysisResult:
    """Run the full engine once over ``candles``."""
    return ConfluenceAnalyzer(config).analyze(candles)


def is_signal_strong(
    result: AnalysisResult,
    min_score: float = GATE_MIN_SCORE,
    min_confidence: float = GATE_MIN_CONFIDENCE,
) -> bool:
    """Whether a directional result clears both admission thresholds.

    Examples:
        >>> is_signal_strong(analyze([]))
        False
    """
    return (
        result.direction != Direction.NEUTRAL
        and result.score >= min_score
        and result.confidence >= min_confidence
    )
