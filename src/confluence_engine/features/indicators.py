"""Core technical indicators implemented from scratch.

Manual implementations of EMA, RSI, MACD, Bollinger Bands, Stochastic and ATR
so that smoothing and window semantics stay under full control. Array
functions return one value per input point (``NaN`` where history is too
short); ``compute_*`` functions return the latest reading and fail closed with
a neutral sentinel instead of raising when the input is too short.
"""

from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np
import pandas as pd
from numba import jit

RSI_PERIOD = 14
MACD_FAST_PERIOD = 12
MACD_SLOW_PERIOD = 26
MACD_SIGNAL_PERIOD = 9
BOLLINGER_PERIOD = 20
BOLLINGER_STD_MULT = 2.0
STOCHASTIC_PERIOD = 14
STOCHASTIC_SMOOTHING = 3
ATR_PERIOD = 14
EMA_FAST_PERIOD = 20
EMA_SLOW_PERIOD = 50

# Sentinels returned when history is too short
NEUTRAL_RSI = 50.0
NEUTRAL_STOCHASTIC = 50.0


@dataclass(frozen=True)
class MACDReading:
    """Latest MACD values."""

    main_line: float
    signal_line: float
    histogram: float


@dataclass(frozen=True)
class BollingerReading:
    """Latest Bollinger band values."""

    upper: float
    middle: float
    lower: float
    bandwidth: float


@dataclass(frozen=True)
class StochasticReading:
    """Latest stochastic oscillator values."""

    k_line: float
    d_line: float


@dataclass(frozen=True)
class EMACrossReading:
    """Latest fast/slow EMA pair."""

    fast: float
    slow: float

    @property
    def separation(self) -> float:
        """Fast minus slow, relative to the slow average."""
        if self.slow == 0:
            return 0.0
        return (self.fast - self.slow) / self.slow


def _as_array(values: Sequence[float] | np.ndarray) -> np.ndarray:
    return np.asarray(values, dtype=np.float64)


def _check_period(name: str, period: int) -> None:
    if period < 1:
        raise ValueError(f"{name} period must be >= 1, got {period}")


def _last_or_zero(values: np.ndarray) -> float:
    return float(values[-1]) if len(values) else 0.0


@jit(nopython=True)
def _ema_kernel(values: np.ndarray, period: int) -> np.ndarray:
    """EMA seeded with the SMA of the first ``period`` values.

    EMA(i) = alpha * value(i) + (1 - alpha) * EMA(i-1), alpha = 2 / (period + 1)
    """
    n = len(values)
    ema = np.full(n, np.nan)

    if n < period:
        return ema

    seed = 0.0
    for i in range(period):
        seed += values[i]
    ema[period - 1] = seed / period

    alpha = 2.0 / (period + 1.0)
    for i in range(period, n):
        ema[i] = alpha * values[i] + (1.0 - alpha) * ema[i - 1]

    return ema


@jit(nopython=True)
def _wilder_averages(closes: np.ndarray, period: int) -> Tuple[float, float]:
    """Wilder-smoothed average gain and loss over the whole series."""
    avg_gain = 0.0
    avg_loss = 0.0

    for i in range(1, period + 1):
        change = closes[i] - closes[i - 1]
        if change > 0:
            avg_gain += change
        else:
            avg_loss -= change

    avg_gain /= period
    avg_loss /= period

    for i in range(period + 1, len(closes)):
        change = closes[i] - closes[i - 1]
        gain = change if change > 0 else 0.0
        loss = -change if change < 0 else 0.0
        avg_gain = (avg_gain * (period - 1) + gain) / period
        avg_loss = (avg_loss * (period - 1) + loss) / period

    return avg_gain, avg_loss


@jit(nopython=True)
def _stochastic_k_kernel(
    high: np.ndarray,
    low: np.ndarray,
    close: np.ndarray,
    period: int,
) -> np.ndarray:
    """Raw %K; a zero-range window repeats the last valid %K (50 initially)."""
    n = len(close)
    k_line = np.full(n, np.nan)
    last_k = 50.0

    for i in range(period - 1, n):
        highest = high[i - period + 1]
        lowest = low[i - period + 1]
        for j in range(i - period + 2, i + 1):
            highest = max(highest, high[j])
            lowest = min(lowest, low[j])

        price_range = highest - lowest
        if price_range > 0:
            last_k = 100.0 * (close[i] - lowest) / price_range
        k_line[i] = last_k

    return k_line


@jit(nopython=True)
def _true_range(
    high: np.ndarray,
    low: np.ndarray,
    close: np.ndarray,
) -> np.ndarray:
    """Calculate True Range.

    TR = max(high - low, abs(high - prev_close), abs(low - prev_close))
    """
    n = len(high)
    tr = np.zeros(n, dtype=np.float64)

    # First bar: just high - low
    tr[0] = high[0] - low[0]

    for i in range(1, n):
        hl = high[i] - low[i]
        hc = np.abs(high[i] - close[i - 1])
        lc = np.abs(low[i] - close[i - 1])
        tr[i] = max(hl, hc, lc)

    return tr


@jit(nopython=True)
def _wilder_smooth(values: np.ndarray, period: int) -> np.ndarray:
    """Apply Wilder's smoothing (RMA).

    RMA(i) = (RMA(i-1) * (period - 1) + value(i)) / period
    """
    n = len(values)
    smoothed = np.full(n, np.nan)

    if n >= period:
        smoothed[period - 1] = np.mean(values[:period])
        for i in range(period, n):
            smoothed[i] = (smoothed[i - 1] * (period - 1) + values[i]) / period

    return smoothed


def ema(values: Sequence[float] | np.ndarray, period: int) -> np.ndarray:
    """Exponential moving average.

    Args:
        values: Input series (typically closes).
        period: Smoothing period.

    Returns:
        Array the same length as ``values``; ``NaN`` before index ``period - 1``.

    Raises:
        ValueError: If period < 1.

    Examples:
        >>> ema([2.0] * 10, 5)[-1]
        2.0
    """
    _check_period("EMA", period)
    return _ema_kernel(_as_array(values), period)


def sma(values: Sequence[float] | np.ndarray, period: int) -> np.ndarray:
    """Simple moving average (``NaN`` before index ``period - 1``)."""
    _check_period("SMA", period)
    return pd.Series(_as_array(values)).rolling(period).mean().to_numpy()


def rolling_std(values: Sequence[float] | np.ndarray, period: int) -> np.ndarray:
    """Population standard deviation over a rolling window."""
    _check_period("StdDev", period)
    return pd.Series(_as_array(values)).rolling(period).std(ddof=0).to_numpy()


def compute_rsi_averages(
    closes: Sequence[float] | np.ndarray,
    period: int = RSI_PERIOD,
) -> Tuple[float, float]:
    """Wilder average gain and average loss, or ``(0.0, 0.0)`` if too short."""
    _check_period("RSI", period)
    closes = _as_array(closes)

    if len(closes) < period + 1:
        return 0.0, 0.0

    avg_gain, avg_loss = _wilder_averages(closes, period)
    return float(avg_gain), float(avg_loss)


def compute_rsi(
    closes: Sequence[float] | np.ndarray,
    period: int = RSI_PERIOD,
) -> float:
    """Relative Strength Index with Wilder smoothing.

    Args:
        closes: Close prices.
        period: RSI period.

    Returns:
        RSI in [0, 100]. 50 when fewer than ``period + 1`` closes are given,
        100 when the average loss is zero.
    """
    _check_period("RSI", period)
    closes = _as_array(closes)

    if len(closes) < period + 1:
        return NEUTRAL_RSI

    avg_gain, avg_loss = _wilder_averages(closes, period)

    if avg_loss == 0:
        return 100.0

    rs = avg_gain / avg_loss
    rsi = 100.0 - 100.0 / (1.0 + rs)
    return float(min(max(rsi, 0.0), 100.0))


def macd_series(
    closes: Sequence[float] | np.ndarray,
    fast_period: int = MACD_FAST_PERIOD,
    slow_period: int = MACD_SLOW_PERIOD,
    signal_period: int = MACD_SIGNAL_PERIOD,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Full MACD main, signal and histogram series.

    Raises:
        ValueError: If fast_period >= slow_period.
    """
    if fast_period >= slow_period:
        raise ValueError(
            f"MACD fast period must be < slow period, got {fast_period} >= {slow_period}"
        )
    _check_period("MACD signal", signal_period)

    closes = _as_array(closes)
    main_line = ema(closes, fast_period) - ema(closes, slow_period)

    signal_line = np.full(len(closes), np.nan)
    start = slow_period - 1
    if len(closes) - start >= signal_period:
        signal_line[start:] = _ema_kernel(main_line[start:], signal_period)

    return main_line, signal_line, main_line - signal_line


def compute_macd(
    closes: Sequence[float] | np.ndarray,
    fast_period: int = MACD_FAST_PERIOD,
    slow_period: int = MACD_SLOW_PERIOD,
    signal_period: int = MACD_SIGNAL_PERIOD,
) -> MACDReading:
    """Latest MACD reading; all zeros until the signal line exists."""
    main_line, signal_line, histogram = macd_series(
        closes, fast_period, slow_period, signal_period
    )

    if len(histogram) == 0 or np.isnan(histogram[-1]):
        return MACDReading(main_line=0.0, signal_line=0.0, histogram=0.0)

    return MACDReading(
        main_line=float(main_line[-1]),
        signal_line=float(signal_line[-1]),
        histogram=float(histogram[-1]),
    )


def compute_bollinger(
    closes: Sequence[float] | np.ndarray,
    period: int = BOLLINGER_PERIOD,
    std_mult: float = BOLLINGER_STD_MULT,
) -> BollingerReading:
    """Latest Bollinger Bands.

    Bands collapse to the last close (bandwidth 0) when history is too short.
    """
    _check_period("Bollinger", period)
    closes = _as_array(closes)

    if len(closes) < period:
        last = _last_or_zero(closes)
        return BollingerReading(upper=last, middle=last, lower=last, bandwidth=0.0)

    window = closes[-period:]
    middle = float(sma(window, period)[-1])
    deviation = float(rolling_std(window, period)[-1])

    upper = middle + std_mult * deviation
    lower = middle - std_mult * deviation
    bandwidth = (upper - lower) / middle if middle != 0 else 0.0

    return BollingerReading(upper=upper, middle=middle, lower=lower, bandwidth=bandwidth)


def compute_stochastic(
    high: Sequence[float] | np.ndarray,
    low: Sequence[float] | np.ndarray,
    close: Sequence[float] | np.ndarray,
    period: int = STOCHASTIC_PERIOD,
    smoothing: int = STOCHASTIC_SMOOTHING,
) -> StochasticReading:
    """Latest %K / %D, with %D the SMA of the last ``smoothing`` %K values."""
    _check_period("Stochastic", period)
    _check_period("Stochastic smoothing", smoothing)
    high, low, close = _as_array(high), _as_array(low), _as_array(close)

    if not len(high) == len(low) == len(close):
        raise ValueError("high, low, close must have same length")

    if len(close) < period + smoothing - 1:
        return StochasticReading(k_line=NEUTRAL_STOCHASTIC, d_line=NEUTRAL_STOCHASTIC)

    k_line = _stochastic_k_kernel(high, low, close, period)

    return StochasticReading(
        k_line=float(k_line[-1]),
        d_line=float(np.mean(k_line[-smoothing:])),
    )


def compute_atr(
    high: Sequence[float] | np.ndarray,
    low: Sequence[float] | np.ndarray,
    close: Sequence[float] | np.ndarray,
    period: int = ATR_PERIOD,
    wilder: bool = False,
) -> float:
    """Average True Range.

    Args:
        high: High prices.
        low: Low prices.
        close: Close prices.
        period: Lookback period.
        wilder: Use Wilder's smoothing instead of a plain mean of the last
            ``period`` true ranges.

    Returns:
        Latest ATR, or 0.0 when fewer than ``period`` bars are given.

    Raises:
        ValueError: If period < 1 or the arrays differ in length.
    """
    _check_period("ATR", period)
    high, low, close = _as_array(high), _as_array(low), _as_array(close)

    if len(high) != len(low) or len(high) != len(close):
        raise ValueError("high, low, close must have same length")

    if len(close) < period:
        return 0.0

    tr = _true_range(high, low, close)

    if wilder:
        return float(_wilder_smooth(tr, period)[-1])

    return float(np.mean(tr[-period:]))


def compute_ema_cross(
    closes: Sequence[float] | np.ndarray,
    fast_period: int = EMA_FAST_PERIOD,
    slow_period: int = EMA_SLOW_PERIOD,
) -> EMACrossReading:
    """Latest fast/slow EMA pair; both collapse to the last close if too short."""
    closes = _as_array(closes)

    if len(closes) < max(fast_period, slow_period):
        last = _last_or_zero(closes)
        return EMACrossReading(fast=last, slow=last)

    return EMACrossReading(
        fast=float(ema(closes, fast_period)[-1]),
        slow=float(ema(closes, slow_period)[-1]),
    )
