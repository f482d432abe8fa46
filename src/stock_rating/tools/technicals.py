"""Technical analysis tool."""

import operator
from collections.abc import Mapping, Sequence
from time import perf_counter
from typing import Any

from stock_rating.analysis.technical import TechnicalIndicatorEngine
from stock_rating.config import Settings
from stock_rating.models import PriceSeries, TechnicalIndicatorSet
from stock_rating.utils.provenance import build_error_response, build_meta, build_provenance
from stock_rating.utils.validators import check_rule, check_rule_expr, normalize_symbol


def technicals(
    bars: Sequence[Mapping[str, Any]],
    symbol: str | None = None,
    settings: Settings | None = None,
) -> dict[str, Any]:
    """
    Calculate technical indicators from caller-supplied daily bars.

    Args:
        bars: OHLCV bars ({date, open, high, low, close, volume}) ascending by date
        symbol: Optional ticker, echoed back
        settings: Indicator parameters

    Returns:
        Dict with raw indicator values and threshold rules
    """
    start_time = perf_counter()
    symbol = normalize_symbol(symbol)

    try:
        series = PriceSeries.from_bars(bars)
    except ValueError as e:
        return build_error_response(error_type="invalid_input", message=str(e), symbol=symbol)

    indicators = TechnicalIndicatorEngine(settings).compute(series)
    current_price = series[-1].close if len(series) else None

    duration_ms = (perf_counter() - start_time) * 1000

    return {
        "meta": build_meta("technicals", duration_ms),
        "data_provenance": build_provenance(series),
        "symbol": symbol,
        "current_price": current_price,
        "indicators": indicators.to_dict(),
        "rules": build_rules(indicators, current_price),
    }


def build_rules(indicators: TechnicalIndicatorSet, current_price: float | None) -> dict[str, Any]:
    """Threshold checks with nullable semantics (None = not enough history)."""
    return {
        "rsi_overbought": {
            "triggered": check_rule(indicators.rsi_14, 70, operator.gt),
            "threshold": 70,
        },
        "rsi_oversold": {
            "triggered": check_rule(indicators.rsi_14, 30, operator.lt),
            "threshold": 30,
        },
        "macd_bullish": {
            "triggered": check_rule(indicators.macd_histogram, 0, operator.gt),
            "threshold": "histogram > 0",
        },
        "above_sma50": {
            "triggered": check_rule_expr(current_price, indicators.sma_50, operator.gt),
            "threshold": "price > sma50",
        },
        "above_sma200": {
            "triggered": check_rule_expr(current_price, indicators.sma_200, operator.gt),
            "threshold": "price > sma200",
        },
        "golden_cross": {
            "triggered": check_rule_expr(indicators.sma_50, indicators.sma_200, operator.gt),
            "threshold": "sma50 > sma200",
        },
        "above_upper_band": {
            "triggered": check_rule_expr(current_price, indicators.bollinger_upper, operator.gt),
            "threshold": "price > bollinger_upper",
        },
        "below_lower_band": {
            "triggered": check_rule_expr(current_price, indicators.bollinger_lower, operator.lt),
            "threshold": "price < bollinger_lower",
        },
        "volume_spike": {
            "triggered": check_rule(indicators.volume_ratio, 1.5, operator.gt),
            "threshold": 1.5,
        },
    }
