"""Candle schema and conversion to the array form used by the indicators."""

from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd
from pydantic import BaseModel, ConfigDict, Field

REQUIRED_COLUMNS = ("time", "open", "high", "low", "close")


class Candle(BaseModel):
    """Standardized OHLC(V) candle."""

    model_config = ConfigDict(frozen=True)

    time: int = Field(..., description="Candle open time (epoch timestamp)")
    open: float = Field(..., description="Opening price")
    high: float = Field(..., description="High price")
    low: float = Field(..., description="Low price")
    close: float = Field(..., description="Closing price")
    volume: Optional[float] = Field(None, description="Volume, when the feed provides it")

    @property
    def is_bullish(self) -> bool:
        return self.close > self.open

    @property
    def is_bearish(self) -> bool:
        return self.close < self.open


@dataclass(frozen=True)
class OHLCArrays:
    """Column arrays for a candle sequence, oldest first."""

    time: np.ndarray
    open: np.ndarray
    high: np.ndarray
    low: np.ndarray
    close: np.ndarray

    def __len__(self) -> int:
        return len(self.close)

    def drop_last(self) -> "OHLCArrays":
        """The same history as of the previous bar."""
        return OHLCArrays(
            time=self.time[:-1],
            open=self.open[:-1],
            high=self.high[:-1],
            low=self.low[:-1],
            close=self.close[:-1],
        )


CandleInput = Sequence[Candle] | pd.DataFrame


def candles_from_frame(df: pd.DataFrame) -> List[Candle]:
    """Convert a DataFrame with time/open/high/low/close[/volume] columns.

    Raises:
        ValueError: If a required column is missing.
    """
    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        raise ValueError(f"Candle frame missing columns: {missing}")

    has_volume = "volume" in df.columns
    candles = []
    for row in df.itertuples(index=False):
        volume = getattr(row, "volume") if has_volume else None
        candles.append(
            Candle(
                time=int(row.time),
                open=float(row.open),
                high=float(row.high),
                low=float(row.low),
                close=float(row.close),
                volume=None if volume is None or pd.isna(volume) else float(volume),
            )
        )
    return candles


def candles_to_frame(candles: Sequence[Candle]) -> pd.DataFrame:
    """Convert candles to a DataFrame with one column per field."""
    return pd.DataFrame(
        [candle.model_dump() for candle in candles],
        columns=list(REQUIRED_COLUMNS) + ["volume"],
    )


def to_arrays(candles: CandleInput) -> OHLCArrays:
    """Build column arrays from candles or a candle DataFrame."""
    if isinstance(candles, pd.DataFrame):
        missing = [col for col in REQUIRED_COLUMNS if col not in candles.columns]
        if missing:
            raise ValueError(f"Candle frame missing columns: {missing}")
        return OHLCArrays(
            time=candles["time"].to_numpy(dtype=np.int64),
            open=candles["open"].to_numpy(dtype=np.float64),
            high=candles["high"].to_numpy(dtype=np.float64),
            low=candles["low"].to_numpy(dtype=np.float64),
            close=candles["close"].to_numpy(dtype=np.float64),
        )

    return OHLCArrays(
        time=np.array([c.time for c in candles], dtype=np.int64),
        open=np.array([c.open for c in candles], dtype=np.float64),
        high=np.array([c.high for c in candles], dtype=np.float64),
        low=np.array([c.low for c in candles], dtype=np.float64),
        close=np.array([c.close for c in candles], dtype=np.float64),
    )
