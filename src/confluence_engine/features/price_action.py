"""Two-candle engulfing pattern detection."""

from typing import Tuple


def detect_engulfing(
    open_curr: float,
    close_curr: float,
    open_prev: float,
    close_prev: float,
) -> Tuple[bool, bool]:
    """Detect bullish or bearish engulfing pattern.

    Args:
        open_curr, close_curr: Current candle body.
        open_prev, close_prev: Previous candle body.

    Returns:
        Tuple of (bullish_engulfing, bearish_engulfing).

    Bullish Engulfing:
    - Previous candle is bearish (close < open)
    - Current candle is bullish and opens at or below the previous close
    - Current candle closes above the previous open

    Bearish Engulfing is symmetric.

    Examples:
        >>> detect_engulfing(99.0, 102.0, 101.0, 100.0)
        (True, False)

        >>> detect_engulfing(101.0, 98.0, 99.0, 100.0)
        (False, True)
    """
    prev_bullish = close_prev > open_prev
    prev_bearish = close_prev < open_prev
    curr_bullish = close_curr > open_curr
    curr_bearish = close_curr < open_curr

    if prev_bearish and curr_bullish:
        if open_curr <= close_prev and close_curr > open_prev:
            return True, False

    if prev_bullish and curr_bearish:
        if open_curr >= close_prev and close_curr < open_prev:
            return False, True

    return False, False
