"""Test the lightweight engine."""

import json

import pytest

from confluence_engine.analysis import (
    FactorStatus,
    LightDirection,
    LightweightAnalyzer,
    analyze_lightweight,
)
from confluence_engine.config import LightweightConfig


def _zigzag(start, steps, n, tail=()):
    closes = [start]
    for i in range(n):
        closes.append(closes[-1] + steps[i % len(steps)])
    for step in tail:
        closes.append(closes[-1] + step)
    return closes


def _factor(result, prefix):
    return next(f for f in result.factors if f.label.startswith(prefix))


class TestLightweightEngine:
    """Test factor-sum analysis."""

    def test_short_history_is_neutro(self, uptrend_candles):
        result = analyze_lightweight(uptrend_candles[:19])

        assert result.direction == LightDirection.NEUTRO
        assert result.score == 0.0
        assert result.factors == ()
        assert result.probability == 50.0
        assert not result.ready

    def test_flat_candles(self, flat_candles):
        """Twenty equal closes: RSI factor neutral, direction NEUTRO."""
        result = analyze_lightweight(flat_candles)

        assert result.direction == LightDirection.NEUTRO
        assert result.score == 0.0
        assert _factor(result, "RSI").status == FactorStatus.NEUTRAL
        assert _factor(result, "EMA").status == FactorStatus.NEUTRAL
        assert _factor(result, "Sideways market").status == FactorStatus.NEUTRAL

    def test_flat_candles_without_squeeze_filter(self, flat_candles):
        result = LightweightAnalyzer(LightweightConfig(squeeze_filter=False)).analyze(flat_candles)

        assert result.direction == LightDirection.NEUTRO
        assert all(f.status == FactorStatus.NEUTRAL for f in result.factors)
        assert not any(f.label.startswith("Sideways") for f in result.factors)

    def test_bullish_engulf_in_uptrend_is_call(self, make_candles):
        """EMA ordering (30) plus a bullish engulfing candle (20) reaches 50."""
        candles = make_candles(_zigzag(100.0, [1.5, -1.0], 30, tail=[1.5]))

        result = analyze_lightweight(candles)

        assert result.direction == LightDirection.CALL
        assert result.score == 50.0
        assert result.probability == 75.0
        assert result.ready
        assert _factor(result, "EMA 9/21").status == FactorStatus.POSITIVE
        assert _factor(result, "Bullish engulfing").weight == 20.0
        assert _factor(result, "RSI").status == FactorStatus.NEUTRAL

    def test_bearish_engulf_in_downtrend_is_put(self, make_candles):
        candles = make_candles(_zigzag(100.0, [-1.5, 1.0], 30, tail=[-1.5]))

        result = analyze_lightweight(candles)

        assert result.direction == LightDirection.PUT
        assert result.score == 50.0
        assert _factor(result, "EMA 9/21").status == FactorStatus.NEGATIVE
        assert _factor(result, "Bearish engulfing").status == FactorStatus.NEGATIVE

    def test_opposing_factors_stay_below_threshold(self, make_candles):
        """A steady rise: bullish EMAs (30) against overbought RSI (25)."""
        candles = make_candles([100.0 + i for i in range(30)])

        result = analyze_lightweight(candles)

        assert result.direction == LightDirection.NEUTRO
        assert result.score == 0.0
        assert result.probability == 50.0
        assert _factor(result, "RSI").status == FactorStatus.NEGATIVE

    def test_score_display_cap(self, make_candles):
        config = LightweightConfig(ema_weight=80.0, engulfing_weight=40.0, display_cap=99.0)
        candles = make_candles(_zigzag(100.0, [1.5, -1.0], 30, tail=[1.5]))

        result = LightweightAnalyzer(config).analyze(candles)

        assert result.direction == LightDirection.CALL
        assert result.score == 99.0
        assert result.probability == 95.0

    def test_to_dict(self, flat_candles):
        payload = json.loads(json.dumps(analyze_lightweight(flat_candles).to_dict()))

        assert payload["direction"] == "NEUTRO"
        assert payload["ready"] is False
        assert {"label", "weight", "status", "value"} <= set(payload["factors"][0])

    @pytest.mark.parametrize("n_candles", [0, 1, 10, 19])
    def test_below_minimum(self, generator, n_candles):
        result = analyze_lightweight(generator.generate(n_candles, "bullish"))

        assert result.direction == LightDirection.NEUTRO
        assert result.factors == ()
