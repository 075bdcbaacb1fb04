"""Test the streaming candle window."""

import pytest

from confluence_engine.analysis import ConfluenceAnalyzer, LightweightAnalyzer
from confluence_engine.data import Candle
from confluence_engine.signals import Direction
from confluence_engine.streaming import CandleWindow


def _candle(time, close):
    return Candle(time=time, open=close, high=close, low=close, close=close)


class TestCandleWindow:
    """Test push, replacement and eviction."""

    def test_push_appends(self):
        window = CandleWindow()
        window.push(_candle(0, 1.0))
        window.push(_candle(60, 2.0))

        assert len(window) == 2
        assert window.last.close == 2.0

    def test_same_time_replaces_last(self):
        window = CandleWindow()
        window.push(_candle(0, 1.0))
        window.push(_candle(0, 1.5))

        assert len(window) == 1
        assert window.last.close == 1.5

    def test_out_of_order_rejected(self):
        window = CandleWindow()
        window.push(_candle(60, 1.0))

        with pytest.raises(ValueError, match="Out-of-order"):
            window.push(_candle(0, 1.0))

    def test_maxlen_evicts_oldest(self):
        window = CandleWindow(maxlen=3)
        window.extend([_candle(i * 60, float(i)) for i in range(5)])

        assert [c.close for c in window.candles] == [2.0, 3.0, 4.0]

    def test_invalid_arguments(self):
        with pytest.raises(ValueError):
            CandleWindow(maxlen=0)
        with pytest.raises(ValueError):
            CandleWindow(granularity=0)

    def test_is_ready(self):
        window = CandleWindow()
        window.push(_candle(0, 1.0))

        assert window.is_ready(1)
        assert not window.is_ready(2)


class TestTickAggregation:
    """Test tick-to-candle aggregation."""

    def test_ticks_fold_into_candle(self):
        window = CandleWindow(granularity=60)
        window.apply_tick(120, 1.0)
        window.apply_tick(130, 1.4)
        window.apply_tick(150, 0.8)
        candle = window.apply_tick(179, 1.1)

        assert len(window) == 1
        assert candle.time == 120
        assert (candle.open, candle.high, candle.low, candle.close) == (1.0, 1.4, 0.8, 1.1)

    def test_new_bucket_opens_candle(self):
        window = CandleWindow(granularity=60)
        window.apply_tick(125, 1.0)
        candle = window.apply_tick(181.5, 2.0)

        assert len(window) == 2
        assert candle.time == 180
        assert candle.open == 2.0

    def test_requires_granularity(self):
        with pytest.raises(ValueError, match="granularity"):
            CandleWindow().apply_tick(0, 1.0)

    def test_stale_tick_rejected(self):
        window = CandleWindow(granularity=60)
        window.apply_tick(180, 1.0)

        with pytest.raises(ValueError):
            window.apply_tick(60, 1.0)


class TestWindowAnalysis:
    """Test re-running analyzers over the window."""

    def test_analyze_full(self, uptrend_candles):
        window = CandleWindow(maxlen=200)
        window.extend(uptrend_candles)

        result = window.analyze(ConfluenceAnalyzer())

        assert result.direction == Direction.CALL
        assert result.candle_count == 60

    def test_analyze_bounded_history(self, uptrend_candles):
        window = CandleWindow(maxlen=40)
        window.extend(uptrend_candles)

        result = window.analyze(ConfluenceAnalyzer())

        assert result.direction == Direction.NEUTRAL
        assert result.candle_count == 40

    def test_analyze_lightweight(self, flat_candles):
        window = CandleWindow()
        window.extend(flat_candles)

        assert window.analyze(LightweightAnalyzer()).score == 0.0
