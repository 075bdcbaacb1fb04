"""ATR-based stop-loss and take-profit placement.

Stops sit ``stop_mult`` ATRs against the trade and targets ``target_mult``
ATRs with it, a fixed 1.67:1 reward-to-risk with the default multipliers.
"""

from dataclasses import dataclass
from typing import Optional

from loguru import logger

from ..signals.classifier import Direction

STOP_ATR_MULT = 1.5
TARGET_ATR_MULT = 2.5


@dataclass(frozen=True)
class RiskLevels:
    """Stop and target prices; both ``None`` for a neutral signal."""

    stop_loss: Optional[float] = None
    take_profit: Optional[float] = None


def compute_risk_levels(
    entry_price: float,
    direction: Direction,
    atr: float,
    stop_mult: float = STOP_ATR_MULT,
    target_mult: float = TARGET_ATR_MULT,
) -> RiskLevels:
    """Compute stop-loss and take-profit for a signal.

    Args:
        entry_price: Expected entry (current close).
        direction: Signal direction.
        atr: Average True Range at entry.
        stop_mult: ATR multiple for the stop.
        target_mult: ATR multiple for the target.

    Returns:
        RiskLevels. Empty for NEUTRAL. A zero ``atr`` collapses both levels onto
        ``entry_price``.

    Raises:
        ValueError: If a multiplier is not positive.

    Examples:
        >>> levels = compute_risk_levels(100.0, Direction.CALL, 2.0)
        >>> (levels.stop_loss, levels.take_profit)
        (97.0, 105.0)
    """
    if stop_mult <= 0 or target_mult <= 0:
        raise ValueError(
            f"ATR multipliers must be > 0, got stop={stop_mult}, target={target_mult}"
        )

    if direction == Direction.CALL:
        levels = RiskLevels(
            stop_loss=entry_price - atr * stop_mult,
            take_profit=entry_price + atr * target_mult,
        )
    elif direction == Direction.PUT:
        levels = RiskLevels(
            stop_loss=entry_price + atr * stop_mult,
            take_profit=entry_price - atr * target_mult,
        )
    else:
        return RiskLevels()

    logger.debug(
        f"{direction.value} risk: entry={entry_price:.5f} stop={levels.stop_loss:.5f} "
        f"target={levels.take_profit:.5f} atr={atr:.5f}"
    )
    return levels
