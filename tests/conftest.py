"""Pytest configuration and fixtures."""

from typing import Callable, List, Sequence

import pytest

from confluence_engine.data import Candle, SyntheticCandleGenerator


def _make_candles(
    closes: Sequence[float],
    start_time: int = 1_700_000_000,
    interval: int = 60,
    wick: float = 0.0,
) -> List[Candle]:
    """Candles whose open is the previous close."""
    candles = []
    prev = closes[0] if closes else 0.0
    for i, close in enumerate(closes):
        candles.append(
            Candle(
                time=start_time + i * interval,
                open=prev,
                high=max(prev, close) + wick,
                low=min(prev, close) - wick,
                close=close,
            )
        )
        prev = close
    return candles


@pytest.fixture
def make_candles() -> Callable[..., List[Candle]]:
    """Factory building candles from a close series."""
    return _make_candles


@pytest.fixture
def generator():
    return SyntheticCandleGenerator(seed=42)


@pytest.fixture
def uptrend_candles(generator):
    """60 candles, closes rising linearly from 100 to 160."""
    return generator.generate(60, "bullish")


@pytest.fixture
def downtrend_candles(generator):
    """60 candles, closes falling linearly from 100 to 40."""
    return generator.generate(60, "bearish")


@pytest.fixture
def sideways_candles(generator):
    """60 candles oscillating inside a +/-0.4% band."""
    return generator.generate(60, "sideways")


@pytest.fixture
def flat_candles(generator):
    """20 candles with identical closes."""
    return generator.generate(20, "flat")
