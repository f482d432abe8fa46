"""Utility modules.

``stock_rating.utils.ohlcv`` depends on ``stock_rating.models`` and is
imported by path rather than re-exported here.
"""

from stock_rating.utils.indicators import (
    calculate_52_week_position,
    calculate_atr,
    calculate_bollinger_bands,
    calculate_cagr,
    calculate_ema,
    calculate_macd,
    calculate_price_change,
    calculate_rsi,
    calculate_sma,
    calculate_volume_ratio,
)
from stock_rating.utils.validators import (
    check_between,
    check_rule,
    check_rule_expr,
    round_half_up,
    safe_float,
)

__all__ = [
    "calculate_52_week_position",
    "calculate_atr",
    "calculate_bollinger_bands",
    "calculate_cagr",
    "calculate_ema",
    "calculate_macd",
    "calculate_price_change",
    "calculate_rsi",
    "calculate_sma",
    "calculate_volume_ratio",
    "check_between",
    "check_rule",
    "check_rule_expr",
    "round_half_up",
    "safe_float",
]
