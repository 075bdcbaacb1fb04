"""Synthetic candle generator for demos, testing and stress scenarios."""

from enum import Enum
from typing import List, Optional

import numpy as np
from loguru import logger

from .base import Candle


class TrendType(str, Enum):
    """Price path shapes."""

    BULLISH = "bullish"
    BEARISH = "bearish"
    SIDEWAYS = "sideways"
    MEAN_REVERTING = "mean_reverting"
    FLAT = "flat"


class SyntheticCandleGenerator:
    """Generates candle series with a controlled shape.

    Bullish/bearish paths are linear ramps, sideways paths oscillate inside a
    narrow band, mean-reverting paths are noisy walks pulled back towards the
    base price. Optional gaussian noise (relative to price) is seeded for
    reproducibility.
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        base_price: float = 100.0,
        interval_seconds: int = 60,
        start_time: int = 1_700_000_000,
    ) -> None:
        """Initialize generator.

        Args:
            seed: Random seed for reproducibility.
            base_price: First close.
            interval_seconds: Spacing of candle timestamps.
            start_time: Epoch timestamp of the first candle.

        Raises:
            ValueError: If base_price or interval_seconds is not positive.
        """
        if base_price <= 0:
            raise ValueError(f"base_price must be > 0, got {base_price}")
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be > 0, got {interval_seconds}")

        self.seed = seed
        self.base_price = base_price
        self.interval_seconds = interval_seconds
        self.start_time = start_time
        self._rng = np.random.default_rng(seed)

    def generate(
        self,
        n_candles: int,
        trend: TrendType | str = TrendType.BULLISH,
        total_move: float = 0.6,
        band_pct: float = 0.004,
        noise_pct: float = 0.0,
        wick_pct: float = 0.0005,
    ) -> List[Candle]:
        """Generate a candle series.

        Args:
            n_candles: Number of candles.
            trend: Path shape.
            total_move: Relative move over the series for bullish/bearish paths
                (0.6 takes 100 to 160).
            band_pct: Oscillation amplitude for sideways paths.
            noise_pct: Gaussian close noise as a fraction of price.
            wick_pct: Wick size beyond the candle body as a fraction of price.

        Returns:
            List of candles, oldest first.
        """
        if n_candles < 0:
            raise ValueError(f"n_candles must be >= 0, got {n_candles}")

        trend = TrendType(trend)
        closes = self._generate_closes(n_candles, trend, total_move, band_pct)

        if noise_pct > 0 and n_candles:
            closes = closes * (1 + self._rng.normal(0, noise_pct, n_candles))

        logger.debug(f"Generated {n_candles} synthetic {trend.value} candles")
        return self._build_candles(closes, wick_pct)

    def _generate_closes(
        self,
        n_candles: int,
        trend: TrendType,
        total_move: float,
        band_pct: float,
    ) -> np.ndarray:
        base = self.base_price

        if trend == TrendType.BULLISH:
            return np.linspace(base, base * (1 + total_move), n_candles)

        if trend == TrendType.BEARISH:
            return np.linspace(base, base * (1 - total_move), n_candles)

        if trend == TrendType.SIDEWAYS:
            phase = np.arange(n_candles) * (2 * np.pi / 4)
            return base * (1 + band_pct * np.sin(phase))

        if trend == TrendType.MEAN_REVERTING:
            prices = np.empty(n_candles)
            price = base
            for i in range(n_candles):
                price += -0.2 * (price - base) + self._rng.normal(0, base * 0.002)
                prices[i] = price
            return prices

        return np.full(n_candles, base)

    def _build_candles(self, closes: np.ndarray, wick_pct: float) -> List[Candle]:
        """Build OHLC candles; each open is the previous close."""
        if len(closes) == 0:
            return []

        opens = np.concatenate([[closes[0]], closes[:-1]])
        highs = np.maximum(opens, closes) * (1 + wick_pct)
        lows = np.minimum(opens, closes) * (1 - wick_pct)

        return [
            Candle(
                time=self.start_time + i * self.interval_seconds,
                open=float(opens[i]),
                high=float(highs[i]),
                low=float(lows[i]),
                close=float(closes[i]),
                volume=1000.0,
            )
            for i in range(len(closes))
        ]
