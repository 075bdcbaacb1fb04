"""Test technical indicators."""

import numpy as np
import pytest

from confluence_engine.features.indicators import (
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


class TestEMA:
    """Test exponential moving average."""

    def test_constant_series_equals_constant(self):
        """EMA of a constant series is that constant."""
        result = ema(np.full(30, 7.5), 10)

        assert result[-1] == pytest.approx(7.5)
        assert np.allclose(result[9:], 7.5)

    def test_nan_before_seed(self):
        result = ema(np.arange(20, dtype=float), 5)

        assert np.isnan(result[:4]).all()
        assert result[4] == pytest.approx(2.0)  # SMA of 0..4

    def test_short_series_all_nan(self):
        assert np.isnan(ema([1.0, 2.0], 5)).all()

    def test_invalid_period(self):
        with pytest.raises(ValueError, match="period must be >= 1"):
            ema([1.0, 2.0, 3.0], 0)

    def test_sma(self):
        result = sma([1.0, 2.0, 3.0, 4.0], 2)

        assert np.isnan(result[0])
        assert result[-1] == pytest.approx(3.5)


class TestRSI:
    """Test Relative Strength Index."""

    def test_rising_series_reaches_100(self):
        assert compute_rsi(np.arange(100.0, 120.0)) == pytest.approx(100.0)

    def test_falling_series_reaches_0(self):
        assert compute_rsi(np.arange(120.0, 100.0, -1.0)) == pytest.approx(0.0)

    def test_mostly_rising_is_overbought(self):
        closes = list(np.arange(100.0, 130.0))
        closes[-5] -= 3.0

        rsi = compute_rsi(closes)

        assert 70.0 < rsi < 100.0

    def test_short_history_is_neutral(self):
        assert compute_rsi([1.0, 2.0, 3.0]) == 50.0

    def test_flat_series_guard(self):
        """Zero average loss yields 100, including flat series."""
        assert compute_rsi(np.full(20, 5.0)) == 100.0
        assert compute_rsi_averages(np.full(20, 5.0)) == (0.0, 0.0)

    def test_balanced_series_near_50(self):
        closes = 100.0 + np.tile([1.0, -1.0], 20)

        assert 40.0 < compute_rsi(closes) < 60.0


class TestMACD:
    """Test MACD."""

    def test_short_history_returns_zeros(self):
        reading = compute_macd(np.arange(20, dtype=float))

        assert (reading.main_line, reading.signal_line, reading.histogram) == (0.0, 0.0, 0.0)

    def test_rising_series_positive_main_line(self):
        reading = compute_macd(np.linspace(100.0, 160.0, 60))

        assert reading.main_line > 0
        assert reading.histogram == pytest.approx(reading.main_line - reading.signal_line)

    def test_series_lengths(self):
        main_line, signal_line, histogram = macd_series(np.linspace(1.0, 2.0, 50))

        assert len(main_line) == len(signal_line) == len(histogram) == 50
        assert np.isnan(signal_line[32])
        assert not np.isnan(signal_line[33])

    def test_fast_must_be_below_slow(self):
        with pytest.raises(ValueError, match="fast period must be < slow period"):
            compute_macd(np.arange(60, dtype=float), fast_period=26, slow_period=12)


class TestBollinger:
    """Test Bollinger Bands."""

    def test_known_values(self):
        closes = np.arange(1.0, 21.0)
        bands = compute_bollinger(closes, period=20, std_mult=2.0)

        std = np.sqrt((20**2 - 1) / 12.0)
        assert bands.middle == pytest.approx(10.5)
        assert bands.upper == pytest.approx(10.5 + 2 * std)
        assert bands.lower == pytest.approx(10.5 - 2 * std)
        assert bands.bandwidth == pytest.approx(4 * std / 10.5)

    def test_bands_built_on_rolling_stats(self):
        closes = 100.0 + np.cumsum(np.random.default_rng(7).normal(0, 0.5, 60))
        bands = compute_bollinger(closes, period=20, std_mult=2.0)

        middle = sma(closes, 20)[-1]
        deviation = rolling_std(closes, 20)[-1]
        assert bands.middle == pytest.approx(middle)
        assert bands.upper == pytest.approx(middle + 2 * deviation)
        assert bands.lower == pytest.approx(middle - 2 * deviation)

    def test_short_history_collapses_to_last(self):
        bands = compute_bollinger([1.0, 2.0, 3.0])

        assert bands.upper == bands.middle == bands.lower == 3.0
        assert bands.bandwidth == 0.0

    def test_flat_series_zero_bandwidth(self):
        bands = compute_bollinger(np.full(25, 50.0))

        assert bands.upper == bands.lower == 50.0
        assert bands.bandwidth == 0.0


class TestStochastic:
    """Test Stochastic oscillator."""

    def test_close_at_top_of_range(self):
        closes = np.arange(100.0, 130.0)
        lows = closes - 1.0

        reading = compute_stochastic(closes, lows, closes)

        assert reading.k_line == pytest.approx(100.0)
        assert reading.d_line == pytest.approx(100.0)

    def test_zero_range_holds_neutral(self):
        flat = np.full(20, 10.0)

        reading = compute_stochastic(flat, flat, flat)

        assert reading.k_line == 50.0
        assert reading.d_line == 50.0

    def test_short_history_is_neutral(self):
        reading = compute_stochastic([2.0] * 5, [1.0] * 5, [1.5] * 5)

        assert (reading.k_line, reading.d_line) == (50.0, 50.0)

    def test_mismatched_lengths(self):
        with pytest.raises(ValueError, match="same length"):
            compute_stochastic([1.0] * 20, [1.0] * 19, [1.0] * 20)


class TestATR:
    """Test Average True Range."""

    def test_atr_calculation(self):
        i = np.arange(10, dtype=float)
        high, low, close = 102.0 + i, 98.0 + i, 100.0 + i

        assert compute_atr(high, low, close, period=3) == pytest.approx(4.0)
        assert compute_atr(high, low, close, period=3, wilder=True) == pytest.approx(4.0)

    def test_atr_with_gaps(self):
        """Gaps widen the true range beyond high - low."""
        high = np.array([100.0, 110.0, 105.0, 103.0, 102.0])
        low = np.array([95.0, 105.0, 100.0, 98.0, 97.0])
        close = np.array([98.0, 108.0, 102.0, 100.0, 99.0])

        # TR: 5, 12, 8, 5, 5
        assert compute_atr(high, low, close, period=3) == pytest.approx(6.0)
        assert compute_atr(high, low, close, period=5) == pytest.approx(7.0)

    def test_atr_zero_range(self):
        flat = np.full(20, 100.0)

        assert compute_atr(flat, flat, flat) == 0.0

    def test_short_history_returns_zero(self):
        assert compute_atr([1.0], [0.5], [0.8], period=14) == 0.0

    def test_mismatched_lengths(self):
        with pytest.raises(ValueError, match="same length"):
            compute_atr([1.0, 2.0], [1.0], [1.0, 2.0], period=1)


class TestEMACross:
    """Test fast/slow EMA pair."""

    def test_rising_series_fast_above_slow(self):
        reading = compute_ema_cross(np.linspace(100.0, 160.0, 60))

        assert reading.fast > reading.slow
        assert reading.separation > 0

    def test_short_history_collapses(self):
        reading = compute_ema_cross([1.0, 2.0, 3.0])

        assert reading.fast == reading.slow == 3.0
        assert reading.separation == 0.0

    def test_empty_input(self):
        reading = compute_ema_cross([])

        assert (reading.fast, reading.slow) == (0.0, 0.0)
