"""Full analysis tool: indicators, scores, signals and recommendation."""

import logging
from collections.abc import Mapping, Sequence
from time import perf_counter
from typing import Any

from stock_rating.analysis.pipeline import analyze
from stock_rating.config import Settings
from stock_rating.models import FundamentalsSnapshot, PriceSeries
from stock_rating.utils.provenance import build_error_response, build_meta, build_provenance
from stock_rating.utils.validators import normalize_symbol

logger = logging.getLogger(__name__)


def analyze_stock(
    symbol: str,
    bars: Sequence[Mapping[str, Any]] | None,
    fundamentals: Mapping[str, Any] | None,
    settings: Settings | None = None,
) -> dict[str, Any]:
    """
    Analyze one stock from caller-supplied bars and fundamentals.

    Args:
        symbol: Stock ticker symbol
        bars: OHLCV bars ascending by date (None to skip technicals)
        fundamentals: Fundamentals mapping (None or {} when unknown)
        settings: Indicator parameters

    Returns:
        Dict with technicals, scores, signals, recommendation and provenance
    """
    start_time = perf_counter()
    normalized_symbol = normalize_symbol(symbol)

    if normalized_symbol is None:
        return build_error_response(error_type="invalid_input", message="Symbol is required")

    try:
        series = PriceSeries.from_bars(bars) if bars is not None else None
        snapshot = FundamentalsSnapshot.from_mapping(fundamentals)
    except ValueError as e:
        logger.warning(f"analyze_stock({normalized_symbol}): rejected input: {e}")
        return build_error_response(
            error_type="invalid_input",
            message=str(e),
            symbol=normalized_symbol,
        )

    result = analyze(series, snapshot, settings)

    duration_ms = (perf_counter() - start_time) * 1000
    logger.info(
        f"analyze_stock({normalized_symbol}): {result.recommendation.rating.value} "
        f"(overall={result.scores.overall}, {duration_ms:.1f}ms)"
    )

    return {
        "meta": build_meta("analyze_stock", duration_ms),
        "data_provenance": build_provenance(series, snapshot),
        "symbol": normalized_symbol,
        **result.to_dict(),
    }
