"""Candle file loading."""

from pathlib import Path
from typing import List

import pandas as pd
from loguru import logger

from .base import Candle, candles_from_frame


def load_candles(path: Path | str) -> List[Candle]:
    """Load candles from a CSV file.

    The file needs ``time, open, high, low, close`` columns and may carry
    ``volume``. Rows are returned in file order; sorting is the caller's
    responsibility.

    Args:
        path: Path to CSV file.

    Returns:
        List of candles.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If required columns are missing.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Candle file not found: {path}")

    df = pd.read_csv(path)
    df.columns = [str(col).strip().lower() for col in df.columns]

    candles = candles_from_frame(df)
    logger.info(f"Loaded {len(candles)} candles from {path}")
    return candles
