"""End-to-end analysis for one instrument.

    PriceSeries -> indicators
    (fundamentals, indicators) -> scores
    (fundamentals, indicators) -> signals
    (scores, signals) -> recommendation
"""

import logging

from stock_rating.analysis.recommendation import RecommendationEngine
from stock_rating.analysis.scoring import ScoringEngine
from stock_rating.analysis.signals import SignalGenerator
from stock_rating.analysis.technical import TechnicalIndicatorEngine
from stock_rating.config import Settings
from stock_rating.models import AnalysisResult, FundamentalsSnapshot, PriceSeries

logger = logging.getLogger(__name__)


def analyze(
    series: PriceSeries | None,
    fundamentals: FundamentalsSnapshot,
    settings: Settings | None = None,
) -> AnalysisResult:
    """
    Run all four engines over one instrument's inputs.

    Args:
        series: Daily bars ascending by date, or None to score fundamentals only
        fundamentals: Fundamentals snapshot (any field may be absent)
        settings: Indicator parameters (defaults when omitted)

    Returns:
        AnalysisResult with indicators (None when no series), scores, signals
        and recommendation
    """
    technicals = (
        TechnicalIndicatorEngine(settings).compute(series) if series is not None else None
    )
    scores = ScoringEngine().score(fundamentals, technicals)
    signals = SignalGenerator().generate(fundamentals, technicals)
    recommendation = RecommendationEngine().recommend(scores, signals)

    logger.debug(
        "Analysis complete: overall=%d rating=%s signals=%d",
        scores.overall,
        recommendation.rating.value,
        len(signals),
    )

    return AnalysisResult(
        technicals=technicals,
        scores=scores,
        signals=tuple(signals),
        recommendation=recommendation,
    )
