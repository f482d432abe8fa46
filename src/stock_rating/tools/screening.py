"""Screening tool: does one stock pass a preset or custom filter set."""

import logging
from collections.abc import Mapping, Sequence
from time import perf_counter
from typing import Any

from stock_rating.analysis.pipeline import analyze
from stock_rating.analysis.screening import FilterCriteria, apply_filters, get_preset
from stock_rating.config import Settings
from stock_rating.models import FundamentalsSnapshot, PriceSeries
from stock_rating.utils.provenance import build_error_response, build_meta, build_provenance
from stock_rating.utils.validators import normalize_symbol

logger = logging.getLogger(__name__)


def screen_stock(
    symbol: str,
    fundamentals: Mapping[str, Any] | None,
    bars: Sequence[Mapping[str, Any]] | None = None,
    preset: str | None = None,
    filters: Mapping[str, Any] | None = None,
    settings: Settings | None = None,
) -> dict[str, Any]:
    """
    Screen one stock against a named preset or explicit filters.

    Args:
        symbol: Stock ticker symbol
        fundamentals: Fundamentals mapping (None or {} when unknown)
        bars: Optional OHLCV bars; RSI filters are skipped without them
        preset: One of value, quality, growth-tech, dividend-safe, oversold
        filters: Explicit criteria (min_score, max_pe, min_roe, ...);
            mutually exclusive with preset

    Returns:
        Dict with passes, matched_filters, the criteria used, scores and rating
    """
    start_time = perf_counter()
    normalized_symbol = normalize_symbol(symbol)

    if normalized_symbol is None:
        return build_error_response(error_type="invalid_input", message="Symbol is required")

    try:
        if preset is not None and filters is not None:
            raise ValueError("Pass either a preset or filters, not both")
        if preset is None and filters is None:
            raise ValueError("A preset or filters are required")
        criteria = get_preset(preset) if preset is not None else FilterCriteria.from_mapping(filters)
        series = PriceSeries.from_bars(bars) if bars is not None else None
        snapshot = FundamentalsSnapshot.from_mapping(fundamentals)
    except ValueError as e:
        logger.warning(f"screen_stock({normalized_symbol}): rejected input: {e}")
        return build_error_response(
            error_type="invalid_input",
            message=str(e),
            symbol=normalized_symbol,
        )

    result = analyze(series, snapshot, settings)
    passes, matched = apply_filters(criteria, snapshot, result.technicals, result.scores)

    duration_ms = (perf_counter() - start_time) * 1000
    logger.info(
        f"screen_stock({normalized_symbol}): {'pass' if passes else 'fail'} "
        f"({len(matched)} matched, {duration_ms:.1f}ms)"
    )

    return {
        "meta": build_meta("screen_stock", duration_ms),
        "data_provenance": build_provenance(series, snapshot),
        "symbol": normalized_symbol,
        "preset": preset.strip().lower() if preset is not None else None,
        "criteria": criteria.to_dict(),
        "passes": passes,
        "matched_filters": matched,
        "price": snapshot.price,
        "market_cap": snapshot.market_cap,
        "scores": result.scores.to_dict(),
        "recommendation": result.recommendation.to_dict(),
    }
