"""Technical indicator engine: one PriceSeries in, one TechnicalIndicatorSet out."""

import logging

import pandas as pd

from stock_rating.config import DEFAULT_SETTINGS, Settings
from stock_rating.models import FiftyTwoWeekPosition, PriceSeries, TechnicalIndicatorSet
from stock_rating.utils.indicators import (
    calculate_52_week_position,
    calculate_atr,
    calculate_bollinger_bands,
    calculate_ema,
    calculate_macd,
    calculate_price_change,
    calculate_rsi,
    calculate_sma,
    calculate_volume_ratio,
)

logger = logging.getLogger(__name__)

RSI_PERIOD = 14
ATR_PERIOD = 14


class TechnicalIndicatorEngine:
    """
    Computes every indicator as of the last bar of the series it is given.

    Each indicator is independent: one lacking history comes back as None
    while the others are still computed. Never raises for short series.
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or DEFAULT_SETTINGS

    def compute(self, series: PriceSeries) -> TechnicalIndicatorSet:
        s = self.settings
        close = series.closes
        high = series.highs
        low = series.lows
        volume = series.volumes

        macd = calculate_macd(close, s.macd_fast, s.macd_slow, s.macd_signal)
        bands = calculate_bollinger_bands(close, s.bollinger_period, s.bollinger_num_std)
        position = calculate_52_week_position(close, s.week_52_window)

        indicators = TechnicalIndicatorSet(
            rsi_14=calculate_rsi(close, RSI_PERIOD),
            macd=macd["macd_line"],
            macd_signal=macd["signal_line"],
            macd_histogram=macd["histogram"],
            sma_20=calculate_sma(close, 20),
            sma_50=calculate_sma(close, 50),
            sma_200=calculate_sma(close, 200),
            ema_20=_last_ema(close, 20),
            ema_50=_last_ema(close, 50),
            bollinger_upper=bands["upper"],
            bollinger_middle=bands["middle"],
            bollinger_lower=bands["lower"],
            atr_14=calculate_atr(high, low, close, ATR_PERIOD),
            price_change_1d=calculate_price_change(close, 1),
            price_change_5d=calculate_price_change(close, 5),
            price_change_20d=calculate_price_change(close, 20),
            volume_ratio=calculate_volume_ratio(volume, s.volume_period),
            week_52=FiftyTwoWeekPosition(**position) if position is not None else None,
        )

        logger.debug(
            "Computed indicators over %d bars (last=%s): %d available",
            len(series),
            series.last_date,
            len(indicators.available()),
        )
        return indicators


def _last_ema(close: pd.Series, period: int) -> float | None:
    """Latest EMA value, or None with fewer than `period` bars."""
    if len(close) < period:
        return None
    return float(calculate_ema(close, period).iloc[-1])


def compute_indicators(
    series: PriceSeries,
    settings: Settings | None = None,
) -> TechnicalIndicatorSet:
    """Shortcut for TechnicalIndicatorEngine(settings).compute(series)."""
    return TechnicalIndicatorEngine(settings).compute(series)
