"""Bounded sliding candle window for live use.

The engines are stateless; a caller streaming candles or ticks keeps the most
recent history here and re-runs an analyzer over it on each update.
"""

from collections import deque
from typing import Any, Deque, List, Optional, Protocol

from loguru import logger

from ..data.base import Candle, CandleInput

DEFAULT_MAXLEN = 200


class Analyzer(Protocol):
    """Anything with an ``analyze(candles)`` method."""

    def analyze(self, candles: CandleInput) -> Any:
        ...


class CandleWindow:
    """Most recent candles, oldest first, capped at ``maxlen``.

    A candle pushed with the same ``time`` as the last one replaces it (the
    still-forming candle); older timestamps are rejected.

    Examples:
        >>> window = CandleWindow(maxlen=2, granularity=60)
        >>> _ = window.apply_tick(120, 1.0)
        >>> _ = window.apply_tick(150, 1.2)
        >>> window.candles[-1].high
        1.2
    """

    def __init__(self, maxlen: int = DEFAULT_MAXLEN, granularity: Optional[int] = None) -> None:
        """Initialize window.

        Args:
            maxlen: Maximum number of candles retained.
            granularity: Candle length in seconds, required for ``apply_tick``.

        Raises:
            ValueError: If maxlen or granularity is not positive.
        """
        if maxlen < 1:
            raise ValueError(f"maxlen must be >= 1, got {maxlen}")
        if granularity is not None and granularity < 1:
            raise ValueError(f"granularity must be >= 1, got {granularity}")

        self.maxlen = maxlen
        self.granularity = granularity
        self._candles: Deque[Candle] = deque(maxlen=maxlen)

    def __len__(self) -> int:
        return len(self._candles)

    @property
    def candles(self) -> List[Candle]:
        return list(self._candles)

    @property
    def last(self) -> Optional[Candle]:
        return self._candles[-1] if self._candles else None

    def push(self, candle: Candle) -> None:
        """Append a candle, or replace the last one if it shares its time.

        Raises:
            ValueError: If the candle is older than the last one.
        """
        last = self.last
        if last is not None:
            if candle.time == last.time:
                self._candles[-1] = candle
                return
            if candle.time < last.time:
                raise ValueError(
                    f"Out-of-order candle: time {candle.time} < last {last.time}"
                )
        self._candles.append(candle)

    def extend(self, candles: CandleInput) -> None:
        for candle in candles:
            self.push(candle)

    def apply_tick(self, epoch: float, price: float) -> Candle:
        """Fold a price tick into the candle covering ``epoch``.

        Returns:
            The updated (or newly opened) candle.

        Raises:
            ValueError: If the window has no granularity or the tick precedes
                the current candle.
        """
        if self.granularity is None:
            raise ValueError("apply_tick requires a window granularity")

        bucket = int(epoch) - int(epoch) % self.granularity
        last = self.last

        if last is not None and last.time == bucket:
            candle = last.model_copy(
                update={
                    "high": max(last.high, price),
                    "low": min(last.low, price),
                    "close": price,
                }
            )
        else:
            candle = Candle(time=bucket, open=price, high=price, low=price, close=price)
            logger.debug(f"Opened candle at {bucket}")

        self.push(candle)
        return candle

    def is_ready(self, min_candles: int) -> bool:
        return len(self._candles) >= min_candles

    def analyze(self, analyzer: Analyzer) -> Any:
        """Run ``analyzer`` over the current window."""
        return analyzer.analyze(self.candles)

    def clear(self) -> None:
        self._candles.clear()
