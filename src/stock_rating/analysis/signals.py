"""Discrete trading signals from fundamentals and technicals.

Signals are derived directly from the inputs, not from the score breakdown,
so a poorly scored stock can still carry a bullish signal. Rules run in a
fixed order and each appends at most one signal.
"""

import logging
import operator

from stock_rating.models import FundamentalsSnapshot, Signal, SignalType, TechnicalIndicatorSet
from stock_rating.utils.validators import check_rule

logger = logging.getLogger(__name__)

RSI_OVERSOLD = 30
RSI_OVERBOUGHT = 70
MOMENTUM_THRESHOLD_PCT = 10


def _rsi_signal(rsi: float | None) -> Signal | None:
    if check_rule(rsi, RSI_OVERSOLD, operator.lt):
        return Signal(
            type=SignalType.BULLISH,
            indicator="RSI",
            message=f"RSI at {rsi:.1f} - Oversold",
            strength=3 if rsi < 20 else 2,
        )
    if check_rule(rsi, RSI_OVERBOUGHT, operator.gt):
        return Signal(
            type=SignalType.BEARISH,
            indicator="RSI",
            message=f"RSI at {rsi:.1f} - Overbought",
            strength=3 if rsi > 80 else 2,
        )
    return None


def _macd_signal(histogram: float | None) -> Signal | None:
    if histogram is None:
        return None
    # A flat histogram counts as bearish
    if histogram > 0:
        return Signal(
            type=SignalType.BULLISH,
            indicator="MACD",
            message="MACD above signal line - Bullish momentum",
            strength=2,
        )
    return Signal(
        type=SignalType.BEARISH,
        indicator="MACD",
        message="MACD below signal line - Bearish momentum",
        strength=2,
    )


def _valuation_signal(pe: float | None) -> Signal | None:
    if pe is None or not 0 < pe < 15:
        return None
    return Signal(
        type=SignalType.BULLISH,
        indicator="Valuation",
        message=f"Low P/E ratio ({pe:.1f}) - Potentially undervalued",
        strength=3 if pe < 10 else 2,
    )


def _quality_signal(roe: float | None) -> Signal | None:
    if not check_rule(roe, 0.20, operator.gt):
        return None
    return Signal(
        type=SignalType.BULLISH,
        indicator="Quality",
        message=f"High ROE ({roe * 100:.1f}%) - Strong returns",
        strength=3 if roe > 0.30 else 2,
    )


def _balance_sheet_signal(debt_to_equity: float | None) -> Signal | None:
    if check_rule(debt_to_equity, 0.3, operator.lt):
        return Signal(
            type=SignalType.BULLISH,
            indicator="Balance Sheet",
            message=f"Low debt (D/E: {debt_to_equity:.2f}) - Strong balance sheet",
            strength=2,
        )
    if check_rule(debt_to_equity, 2, operator.gt):
        return Signal(
            type=SignalType.BEARISH,
            indicator="Balance Sheet",
            message=f"High debt (D/E: {debt_to_equity:.2f}) - Leverage risk",
            strength=3 if debt_to_equity > 3 else 2,
        )
    return None


def _growth_signal(revenue_cagr: float | None) -> Signal | None:
    if not check_rule(revenue_cagr, 0.15, operator.gt):
        return None
    return Signal(
        type=SignalType.BULLISH,
        indicator="Growth",
        message=f"Strong revenue growth ({revenue_cagr * 100:.1f}% CAGR)",
        strength=3 if revenue_cagr > 0.25 else 2,
    )


def _momentum_signal(change_20d: float | None) -> Signal | None:
    if check_rule(change_20d, MOMENTUM_THRESHOLD_PCT, operator.gt):
        return Signal(
            type=SignalType.BULLISH,
            indicator="Momentum",
            message=f"Strong 20-day momentum (+{change_20d:.1f}%)",
            strength=2,
        )
    if check_rule(change_20d, -MOMENTUM_THRESHOLD_PCT, operator.lt):
        return Signal(
            type=SignalType.BEARISH,
            indicator="Momentum",
            message=f"Weak 20-day momentum ({change_20d:.1f}%)",
            strength=2,
        )
    return None


class SignalGenerator:
    """Emits signals in rule order: RSI, MACD, valuation, quality, balance sheet, growth, momentum."""

    def generate(
        self,
        fundamentals: FundamentalsSnapshot,
        technicals: TechnicalIndicatorSet | None = None,
    ) -> list[Signal]:
        rsi = technicals.rsi_14 if technicals is not None else None
        histogram = technicals.macd_histogram if technicals is not None else None
        change_20d = technicals.price_change_20d if technicals is not None else None

        candidates = [
            _rsi_signal(rsi),
            _macd_signal(histogram),
            _valuation_signal(fundamentals.pe),
            _quality_signal(fundamentals.roe),
            _balance_sheet_signal(fundamentals.debt_to_equity),
            _growth_signal(fundamentals.revenue_cagr_5y),
            _momentum_signal(change_20d),
        ]
        signals = [s for s in candidates if s is not None]

        logger.debug("Generated %d signals: %s", len(signals), [s.indicator for s in signals])
        return signals


def generate_signals(
    fundamentals: FundamentalsSnapshot,
    technicals: TechnicalIndicatorSet | None = None,
) -> list[Signal]:
    """Shortcut for SignalGenerator().generate(...)."""
    return SignalGenerator().generate(fundamentals, technicals)
