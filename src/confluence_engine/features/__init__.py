"""Feature engineering: technical indicators, trend, levels and candle patterns."""

from .indicators import (
    BollingerReading,
    EMACrossReading,
    MACDReading,
    StochasticReading,
    compute_atr,
    compute_bollinger,
    compute_ema_cross,
    compute_macd,
    compute_rsi,
    compute_rsi_averages,
    compute_stochastic,
    ema,
    macd_series,
    rolling_std,
    sma,
)
from .levels import SupportResistance, find_support_resistance
from .price_action import detect_engulfing
from .trend import Trend, detect_trend

__all__ = [
    "BollingerReading",
    "EMACrossReading",
    "MACDReading",
    "StochasticReading",
    "compute_atr",
    "compute_bollinger",
    "compute_ema_cross",
    "compute_macd",
    "compute_rsi",
    "compute_rsi_averages",
    "compute_stochastic",
    "ema",
    "macd_series",
    "rolling_std",
    "sma",
    "SupportResistance",
    "find_support_resistance",
    "detect_engulfing",
    "Trend",
    "detect_trend",
]
