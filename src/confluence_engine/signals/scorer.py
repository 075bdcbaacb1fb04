"""Confluence scoring engine.

Aggregates weighted per-indicator votes into one direction, score and
confidence. Decision policy, applied in order:

1. Too many neutral votes -> NEUTRAL, score 0.
2. Call/put totals within the conviction margin -> NEUTRAL, score 0.
3. Otherwise the larger side wins with its total (capped) as the score.
"""

import math
from dataclasses import dataclass
from typing import Dict, Optional, Sequence

from loguru import logger

from ..features.indicators import (
    BollingerReading,
    EMACrossReading,
    MACDReading,
    StochasticReading,
)
from ..features.trend import Trend
from .classifier import Direction, DirectionalVote

INDICATOR_WEIGHTS: Dict[str, float] = {
    "rsi": 20.0,
    "macd": 20.0,
    "bollinger": 15.0,
    "ema": 15.0,
    "stochastic": 15.0,
    "trend": 15.0,
}

NEUTRAL_VOTE_LIMIT = 4
MIN_SCORE_MARGIN = 10.0
MAX_SCORE = 100.0

IndicatorReading = (
    float | MACDReading | BollingerReading | StochasticReading | EMACrossReading | Trend
)


@dataclass(frozen=True)
class IndicatorSignal:
    """An indicator's reading, its vote and the vote's weighted score.

    ``previous`` holds the previous-bar reading for crossing indicators.
    """

    name: str
    reading: IndicatorReading
    vote: DirectionalVote
    weight: float
    previous: Optional[IndicatorReading] = None

    @property
    def direction(self) -> Direction:
        return self.vote.direction

    @property
    def score(self) -> float:
        return self.vote.score(self.weight)


@dataclass(frozen=True)
class ConfluenceScore:
    """Aggregated decision."""

    direction: Direction
    score: float
    confidence: int

    call_score: float
    put_score: float
    neutral_count: int
    total_count: int


def compute_confidence(signals: Sequence[IndicatorSignal], direction: Direction) -> int:
    """Percentage of indicators voting with ``direction`` (0 for NEUTRAL).

    Examples:
        >>> compute_confidence([], Direction.CALL)
        0
    """
    if direction == Direction.NEUTRAL or not signals:
        return 0

    agreeing = sum(1 for signal in signals if signal.direction == direction)
    # Round half up
    return int(math.floor(agreeing / len(signals) * 100 + 0.5))


class ConfluenceScorer:
    """Combines indicator votes into a single scored decision."""

    def __init__(
        self,
        neutral_vote_limit: int = NEUTRAL_VOTE_LIMIT,
        min_margin: float = MIN_SCORE_MARGIN,
        max_score: float = MAX_SCORE,
    ) -> None:
        """Initialize confluence scorer.

        Args:
            neutral_vote_limit: Neutral votes at or above which the decision
                is NEUTRAL.
            min_margin: Minimum call/put score gap for a directional decision.
            max_score: Ceiling applied to the winning score.
        """
        self.neutral_vote_limit = neutral_vote_limit
        self.min_margin = min_margin
        self.max_score = max_score

    def aggregate(self, signals: Sequence[IndicatorSignal]) -> ConfluenceScore:
        """Aggregate indicator signals.

        Args:
            signals: One signal per indicator.

        Returns:
            ConfluenceScore with direction, score in [0, max_score] and
            confidence in [0, 100].
        """
        call_score = 0.0
        put_score = 0.0
        neutral_count = 0

        for signal in signals:
            if signal.direction == Direction.CALL:
                call_score += signal.score
            elif signal.direction == Direction.PUT:
                put_score += signal.score
            else:
                neutral_count += 1

        direction = Direction.NEUTRAL
        score = 0.0

        if neutral_count >= self.neutral_vote_limit:
            logger.debug(f"Neutral: {neutral_count} neutral votes")
        elif abs(call_score - put_score) < self.min_margin:
            logger.debug(
                f"Neutral: margin {abs(call_score - put_score):.1f} < {self.min_margin:.1f}"
            )
        elif call_score > put_score:
            direction = Direction.CALL
            score = call_score
        elif put_score > call_score:
            direction = Direction.PUT
            score = put_score

        score = min(max(score, 0.0), self.max_score)
        confidence = compute_confidence(signals, direction)

        logger.debug(
            f"Confluence: call={call_score:.1f} put={put_score:.1f} "
            f"neutral={neutral_count} -> {direction.value} score={score:.1f} "
            f"confidence={confidence}"
        )

        return ConfluenceScore(
            direction=direction,
            score=score,
            confidence=confidence,
            call_score=call_score,
            put_score=put_score,
            neutral_count=neutral_count,
            total_count=len(signals),
        )
