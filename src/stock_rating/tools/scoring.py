"""Score and signal tool."""

from collections.abc import Mapping, Sequence
from time import perf_counter
from typing import Any

from stock_rating.analysis.scoring import ScoringEngine
from stock_rating.analysis.signals import SignalGenerator
from stock_rating.analysis.technical import TechnicalIndicatorEngine
from stock_rating.config import Settings
from stock_rating.models import FundamentalsSnapshot, PriceSeries
from stock_rating.utils.provenance import build_error_response, build_meta, build_provenance
from stock_rating.utils.validators import normalize_symbol


def score_stock(
    fundamentals: Mapping[str, Any],
    bars: Sequence[Mapping[str, Any]] | None = None,
    symbol: str | None = None,
    settings: Settings | None = None,
) -> dict[str, Any]:
    """
    Score a stock and list its signals.

    Args:
        fundamentals: Fundamentals mapping (pe, peg, roe, ...); unknown keys ignored
        bars: Optional OHLCV bars; without them momentum stays neutral
        symbol: Optional ticker, echoed back
        settings: Indicator parameters

    Returns:
        Dict with score breakdown and ordered signals
    """
    start_time = perf_counter()
    symbol = normalize_symbol(symbol)

    try:
        series = PriceSeries.from_bars(bars) if bars is not None else None
        snapshot = FundamentalsSnapshot.from_mapping(fundamentals)
    except ValueError as e:
        return build_error_response(error_type="invalid_input", message=str(e), symbol=symbol)

    indicators = TechnicalIndicatorEngine(settings).compute(series) if series is not None else None

    scores = ScoringEngine().score(snapshot, indicators)
    signals = SignalGenerator().generate(snapshot, indicators)

    duration_ms = (perf_counter() - start_time) * 1000

    return {
        "meta": build_meta("score_stock", duration_ms),
        "data_provenance": build_provenance(series, snapshot),
        "symbol": symbol,
        "scores": scores.to_dict(),
        "signals": [s.to_dict() for s in signals],
    }
