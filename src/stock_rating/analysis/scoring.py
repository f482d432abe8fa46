"""Multi-factor scoring: valuation, quality, growth and momentum on a 0-100 scale."""

import logging
import operator
from collections.abc import Callable, Sequence

from stock_rating.models import (
    NEUTRAL_SCORE,
    FundamentalsSnapshot,
    ScoreBreakdown,
    TechnicalIndicatorSet,
)
from stock_rating.utils.validators import check_between, check_rule, round_half_up

logger = logging.getLogger(__name__)

# A band is (comparator, threshold, points). Bands for one metric are checked
# in order and only the first match applies.
Band = tuple[Callable[[float, float], bool], float, int]

PE_BANDS: list[Band] = [
    (operator.lt, 0, -10),
    (operator.lt, 10, 15),
    (operator.lt, 15, 10),
    (operator.lt, 20, 5),
    (operator.lt, 30, -5),
    (operator.ge, 30, -10),
]

PEG_BANDS: list[Band] = [
    (operator.lt, 0, -5),
    (operator.lt, 1, 15),
    (operator.lt, 1.5, 10),
    (operator.lt, 2, 5),
    (operator.gt, 3, -10),
]

# Percent values (fcf_yield * 100)
FCF_YIELD_BANDS: list[Band] = [
    (operator.gt, 10, 15),
    (operator.gt, 5, 10),
    (operator.gt, 3, 5),
    (operator.lt, 0, -10),
]

ROE_BANDS: list[Band] = [
    (operator.gt, 25, 15),
    (operator.gt, 15, 10),
    (operator.gt, 10, 5),
    (operator.lt, 0, -15),
    (operator.lt, 5, -5),
]

OPERATING_MARGIN_BANDS: list[Band] = [
    (operator.gt, 25, 10),
    (operator.gt, 15, 5),
    (operator.lt, 0, -10),
    (operator.lt, 5, -5),
]

GROSS_MARGIN_BANDS: list[Band] = [
    (operator.gt, 50, 10),
    (operator.gt, 30, 5),
    (operator.lt, 20, -5),
]

DEBT_TO_EQUITY_BANDS: list[Band] = [
    (operator.lt, 0.3, 15),
    (operator.lt, 0.5, 10),
    (operator.lt, 1, 5),
    (operator.gt, 2, -10),
    (operator.gt, 1.5, -5),
]

CURRENT_RATIO_BANDS: list[Band] = [
    (operator.ge, 2, 10),
    (operator.ge, 1.5, 5),
    (operator.lt, 1, -10),
    (operator.lt, 1.2, -5),
]

REVENUE_CAGR_BANDS: list[Band] = [
    (operator.gt, 20, 20),
    (operator.gt, 15, 15),
    (operator.gt, 10, 10),
    (operator.gt, 5, 5),
    (operator.lt, 0, -15),
    (operator.lt, 5, -5),
]

# Same as revenue but no penalty for 0-5% EPS growth
EPS_CAGR_BANDS: list[Band] = REVENUE_CAGR_BANDS[:-1]

MACD_HISTOGRAM_BANDS: list[Band] = [
    (operator.gt, 0, 10),
    (operator.le, 0, -5),
]

PRICE_CHANGE_20D_BANDS: list[Band] = [
    (operator.gt, 5, 5),
    (operator.lt, -5, -5),
]

VOLUME_RATIO_BANDS: list[Band] = [
    (operator.gt, 1.5, 5),
]


def band_points(value: float | None, bands: Sequence[Band]) -> int:
    """Points from the first matching band; 0 if the value is absent or no band matches."""
    for comparator, threshold, points in bands:
        if check_rule(value, threshold, comparator):
            return points
    return 0


def _pct(value: float | None) -> float | None:
    return value * 100 if value is not None else None


def _clamp(score: float) -> int:
    return round_half_up(max(0, min(100, score)))


def valuation_score(f: FundamentalsSnapshot) -> int:
    """Valuation from P/E, PEG and FCF yield."""
    score = NEUTRAL_SCORE
    score += band_points(f.pe, PE_BANDS)
    score += band_points(f.peg, PEG_BANDS)
    score += band_points(_pct(f.fcf_yield), FCF_YIELD_BANDS)
    return _clamp(score)


def quality_score(f: FundamentalsSnapshot) -> int:
    """Quality from ROE, margins, leverage and liquidity."""
    score = NEUTRAL_SCORE
    score += band_points(_pct(f.roe), ROE_BANDS)
    score += band_points(_pct(f.operating_margin), OPERATING_MARGIN_BANDS)
    score += band_points(_pct(f.gross_margin), GROSS_MARGIN_BANDS)
    score += band_points(f.debt_to_equity, DEBT_TO_EQUITY_BANDS)
    score += band_points(f.current_ratio, CURRENT_RATIO_BANDS)
    return _clamp(score)


def growth_score(f: FundamentalsSnapshot) -> int:
    """
    Growth from 5-year revenue and EPS CAGR.

    Exactly neutral when neither CAGR is known, unlike the other categories
    which just accumulate nothing for missing metrics.
    """
    if f.revenue_cagr_5y is None and f.eps_cagr_5y is None:
        return NEUTRAL_SCORE

    score = NEUTRAL_SCORE
    score += band_points(_pct(f.revenue_cagr_5y), REVENUE_CAGR_BANDS)
    score += band_points(_pct(f.eps_cagr_5y), EPS_CAGR_BANDS)
    return _clamp(score)


def momentum_score(t: TechnicalIndicatorSet | None) -> int:
    """Momentum from RSI zone, MACD histogram, 20-day change and volume spikes."""
    if t is None:
        return NEUTRAL_SCORE

    score = NEUTRAL_SCORE

    # Neutral RSI zone scores best; oversold is treated as an opportunity
    if check_between(t.rsi_14, 40, 60):
        score += 10
    elif check_between(t.rsi_14, 30, 70):
        score += 5
    elif check_rule(t.rsi_14, 30, operator.lt):
        score += 5
    elif check_rule(t.rsi_14, 70, operator.gt):
        score -= 5

    score += band_points(t.macd_histogram, MACD_HISTOGRAM_BANDS)
    score += band_points(t.price_change_20d, PRICE_CHANGE_20D_BANDS)
    score += band_points(t.volume_ratio, VOLUME_RATIO_BANDS)
    return _clamp(score)


class ScoringEngine:
    """Maps fundamentals (and optional technicals) to a ScoreBreakdown."""

    def score(
        self,
        fundamentals: FundamentalsSnapshot,
        technicals: TechnicalIndicatorSet | None = None,
    ) -> ScoreBreakdown:
        scores = ScoreBreakdown(
            valuation=valuation_score(fundamentals),
            quality=quality_score(fundamentals),
            growth=growth_score(fundamentals),
            momentum=momentum_score(technicals),
        )
        logger.debug("Scores: %s", scores.to_dict())
        return scores


def calculate_scores(
    fundamentals: FundamentalsSnapshot,
    technicals: TechnicalIndicatorSet | None = None,
) -> ScoreBreakdown:
    """Shortcut for ScoringEngine().score(...)."""
    return ScoringEngine().score(fundamentals, technicals)
