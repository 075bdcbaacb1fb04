"""Candle model, conversion helpers and candle sources."""

from .base import (
    Candle,
    CandleInput,
    OHLCArrays,
    candles_from_frame,
    candles_to_frame,
    to_arrays,
)
from .loader import load_candles
from .synthetic import SyntheticCandleGenerator, TrendType

__all__ = [
    "Candle",
    "CandleInput",
    "OHLCArrays",
    "candles_from_frame",
    "candles_to_frame",
    "to_arrays",
    "load_candles",
    "SyntheticCandleGenerator",
    "TrendType",
]
