"""Summarized rating from a score breakdown and a signal list."""

import logging
from collections.abc import Sequence

from stock_rating.models import (
    NEUTRAL_SCORE,
    Rating,
    Recommendation,
    ScoreBreakdown,
    Signal,
    SignalType,
)
from stock_rating.utils.validators import round_half_up

logger = logging.getLogger(__name__)


def signal_score(signals: Sequence[Signal]) -> int:
    """Number of bullish signals minus number of bearish signals."""
    bullish = sum(1 for s in signals if s.type is SignalType.BULLISH)
    bearish = sum(1 for s in signals if s.type is SignalType.BEARISH)
    return bullish - bearish


def choose_rating(overall: int, net_signals: int) -> tuple[Rating, str]:
    """
    Ordered cascade; the first matching branch wins.

    Branches overlap: a Strong Sell needs overall < 30 and net < -1, but
    anything that qualifies already matched Sell (overall < 40, net <= 0)
    one branch earlier.
    """
    if overall >= 70 and net_signals >= 2:
        return Rating.STRONG_BUY, "Excellent fundamentals with bullish technical signals"
    if overall >= 60 and net_signals >= 0:
        return Rating.BUY, "Good fundamentals, favorable technical setup"
    if 40 <= overall < 60:
        return Rating.HOLD, "Mixed signals, monitor for changes"
    if overall < 40 and net_signals <= 0:
        return Rating.SELL, "Weak fundamentals with bearish signals"
    if overall < 30 and net_signals < -1:
        return Rating.STRONG_SELL, "Poor fundamentals and bearish momentum"
    return Rating.HOLD, "Neutral outlook"


def confidence(scores: ScoreBreakdown, net_signals: int) -> int:
    """Confidence grows with non-neutral categories and signal agreement, capped at 100."""
    informative = sum(1 for value in scores.categories().values() if value != NEUTRAL_SCORE)
    raw = min(100, (informative / 4) * 50 + abs(net_signals) * 10 + 30)
    return round_half_up(raw)


class RecommendationEngine:
    def recommend(self, scores: ScoreBreakdown, signals: Sequence[Signal]) -> Recommendation:
        net = signal_score(signals)
        rating, summary = choose_rating(scores.overall, net)
        result = Recommendation(rating=rating, confidence=confidence(scores, net), summary=summary)
        logger.debug(
            "Recommendation %s (overall=%d, signal_score=%d, confidence=%d)",
            rating.value,
            scores.overall,
            net,
            result.confidence,
        )
        return result


def get_recommendation(scores: ScoreBreakdown, signals: Sequence[Signal]) -> Recommendation:
    """Shortcut for RecommendationEngine().recommend(...)."""
    return RecommendationEngine().recommend(scores, signals)
