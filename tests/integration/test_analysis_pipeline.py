"""Integration test for the full analysis pipeline."""

from pathlib import Path

import pytest

from confluence_engine import (
    ConfluenceAnalyzer,
    Direction,
    LightweightAnalyzer,
    is_signal_strong,
    load_config,
)
from confluence_engine.data import SyntheticCandleGenerator, candles_to_frame, load_candles
from confluence_engine.streaming import CandleWindow


@pytest.mark.integration
def test_config_to_decision(tmp_path: Path):
    """Test complete flow from YAML config and CSV candles to a gated decision."""
    config_yaml = """
name: Integration_Test
version: "1.0"

gate:
  min_score: 30
  min_confidence: 50

risk:
  stop_atr_mult: 1.0
  target_atr_mult: 2.0
"""
    config_file = tmp_path / "engine.yaml"
    config_file.write_text(config_yaml)
    config = load_config(config_file)

    candles_file = tmp_path / "candles.csv"
    generated = SyntheticCandleGenerator(seed=11).generate(60, "bullish")
    candles_to_frame(generated).to_csv(candles_file, index=False)
    candles = load_candles(candles_file)

    analyzer = ConfluenceAnalyzer(config)
    result = analyzer.analyze(candles)

    assert result.direction == Direction.CALL
    assert analyzer.is_signal_strong(result)
    assert not is_signal_strong(result)

    # Risk uses the configured multipliers
    assert result.entry_price - result.stop_loss == pytest.approx(result.volatility)
    assert result.take_profit - result.entry_price == pytest.approx(2 * result.volatility)


@pytest.mark.integration
def test_streaming_replay():
    """Replaying candles through a window matches one-shot analysis at every step."""
    candles = SyntheticCandleGenerator(seed=5).generate(80, "bearish", noise_pct=0.001)
    analyzer = ConfluenceAnalyzer()
    window = CandleWindow(maxlen=200)

    directions = []
    for i, candle in enumerate(candles):
        window.push(candle)
        streamed = window.analyze(analyzer)
        one_shot = analyzer.analyze(candles[: i + 1])

        assert streamed.direction == one_shot.direction
        assert streamed.score == one_shot.score
        directions.append(streamed.direction)

    assert all(d == Direction.NEUTRAL for d in directions[:49])


@pytest.mark.integration
def test_both_engines_on_same_snapshot():
    candles = SyntheticCandleGenerator(seed=9).generate(120, "mean_reverting")

    full = ConfluenceAnalyzer().analyze(candles)
    light = LightweightAnalyzer().analyze(candles)

    assert full.candle_count == 120
    assert 0.0 <= full.score <= 100.0
    assert 0.0 <= light.score <= 99.0
    assert full.to_dict()["candle_count"] == 120
    assert light.to_dict()["direction"] in {"CALL", "PUT", "NEUTRO"}
