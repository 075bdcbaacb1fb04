"""Lightweight confluence engine for short candle histories.

Three additive factors (EMA ordering, RSI extremes, engulfing pattern) plus
an optional Bollinger squeeze filter that vetoes any signal in a flat,
range-bound market.
"""

from datetime import datetime, timezone
from typing import List, Optional

from loguru import logger

from ..config.schema import LightweightConfig
from ..data.base import CandleInput, to_arrays
from ..features.indicators import (
    compute_bollinger,
    compute_ema_cross,
    compute_rsi,
    compute_rsi_averages,
)
from ..features.price_action import detect_engulfing
from .models import AnalysisFactor, FactorStatus, LightDirection, LightweightResult


class LightweightAnalyzer:
    """Reduced factor-sum analyzer usable from 20 candles."""

    def __init__(self, config: Optional[LightweightConfig] = None) -> None:
        self.config = config or LightweightConfig()

    def analyze(self, candles: CandleInput) -> LightweightResult:
        """Analyze a candle snapshot.

        Args:
            candles: Candles ordered oldest first, or a candle DataFrame.

        Returns:
            LightweightResult. NEUTRO with no factors when fewer than
            ``config.min_candles`` candles are given.
        """
        cfg = self.config
        data = to_arrays(candles)

        if len(data) < cfg.min_candles:
            logger.debug(f"Lightweight: insufficient history ({len(data)} candles)")
            return LightweightResult(
                direction=LightDirection.NEUTRO,
                score=0.0,
                factors=(),
                timestamp=datetime.now(timezone.utc),
                probability=cfg.probability_base,
                ready=False,
            )

        closes = data.close
        factors: List[AnalysisFactor] = []
        call_score = 0.0
        put_score = 0.0

        # EMA ordering
        pair = compute_ema_cross(closes, cfg.ema_fast, cfg.ema_slow)
        ema_label = f"EMA {cfg.ema_fast}/{cfg.ema_slow}"
        if pair.fast > pair.slow:
            call_score += cfg.ema_weight
            factors.append(
                AnalysisFactor(
                    f"{ema_label} bullish", cfg.ema_weight, FactorStatus.POSITIVE, pair.fast - pair.slow
                )
            )
        elif pair.fast < pair.slow:
            put_score += cfg.ema_weight
            factors.append(
                AnalysisFactor(
                    f"{ema_label} bearish", cfg.ema_weight, FactorStatus.NEGATIVE, pair.fast - pair.slow
                )
            )
        else:
            factors.append(AnalysisFactor(f"{ema_label} flat", 0.0, FactorStatus.NEUTRAL, 0.0))

        # RSI extremes
        rsi = compute_rsi(closes, cfg.rsi_period)
        avg_gain, avg_loss = compute_rsi_averages(closes, cfg.rsi_period)
        if avg_gain == 0 and avg_loss == 0:
            factors.append(AnalysisFactor("RSI flat (no momentum)", 0.0, FactorStatus.NEUTRAL, rsi))
        elif rsi < cfg.rsi_oversold:
            call_score += cfg.rsi_weight
            factors.append(AnalysisFactor("RSI oversold", cfg.rsi_weight, FactorStatus.POSITIVE, rsi))
        elif rsi > cfg.rsi_overbought:
            put_score += cfg.rsi_weight
            factors.append(
                AnalysisFactor("RSI overbought", cfg.rsi_weight, FactorStatus.NEGATIVE, rsi)
            )
        else:
            factors.append(AnalysisFactor("RSI neutral", 0.0, FactorStatus.NEUTRAL, rsi))

        # Engulfing
        bullish, bearish = detect_engulfing(
            data.open[-1], data.close[-1], data.open[-2], data.close[-2]
        )
        if bullish:
            call_score += cfg.engulfing_weight
            factors.append(
                AnalysisFactor("Bullish engulfing", cfg.engulfing_weight, FactorStatus.POSITIVE)
            )
        elif bearish:
            put_score += cfg.engulfing_weight
            factors.append(
                AnalysisFactor("Bearish engulfing", cfg.engulfing_weight, FactorStatus.NEGATIVE)
            )

        # Squeeze filter
        squeezed = False
        if cfg.squeeze_filter and len(closes) >= cfg.bollinger_period:
            bands = compute_bollinger(closes, cfg.bollinger_period, cfg.bollinger_std_mult)
            if bands.bandwidth < cfg.squeeze_bandwidth:
                squeezed = True
                factors.append(
                    AnalysisFactor(
                        "Sideways market (Bollinger squeeze)",
                        0.0,
                        FactorStatus.NEUTRAL,
                        bands.bandwidth,
                    )
                )

        direction = LightDirection.NEUTRO
        score = 0.0
        if squeezed:
            logger.debug("Lightweight: squeeze filter vetoed signal")
        elif call_score >= cfg.signal_threshold and call_score > put_score:
            direction = LightDirection.CALL
            score = call_score
        elif put_score >= cfg.signal_threshold and put_score > call_score:
            direction = LightDirection.PUT
            score = put_score

        score = min(score, cfg.display_cap)

        if direction == LightDirection.NEUTRO:
            probability = cfg.probability_base
        else:
            probability = min(
                cfg.probability_cap, cfg.probability_base + score * cfg.probability_per_point
            )
        probability = float(round(probability))

        logger.debug(
            f"Lightweight: call={call_score:.0f} put={put_score:.0f} -> "
            f"{direction.value} score={score:.0f} probability={probability:.0f}"
        )

        return LightweightResult(
            direction=direction,
            score=score,
            factors=tuple(factors),
            timestamp=datetime.now(timezone.utc),
            probability=probability,
            ready=probability >= cfg.ready_probability,
        )


def analyze_lightweight(
    candles: CandleInput, config: Optional[LightweightConfig] = None
) -> LightweightResult:
    """Run the lightweight engine once over ``candles``."""
    return LightweightAnalyzer(config).analyze(candles)
