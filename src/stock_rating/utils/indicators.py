"""Technical indicator calculations.

Every function reads "as of the last element" of the series it is given and
returns None when there is not enough history, instead of raising.
"""

import numpy as np
import pandas as pd


def calculate_sma(prices: pd.Series, period: int) -> float | None:
    """
    Calculate Simple Moving Average of the last `period` values.

    Args:
        prices: Price series (typically close prices)
        period: Number of periods for the average

    Returns:
        SMA value, or None if fewer than `period` values
    """
    if len(prices) < period:
        return None
    return float(prices.iloc[-period:].mean())


def calculate_ema(prices: pd.Series, period: int) -> pd.Series:
    """
    Calculate Exponential Moving Average, seeded with a simple average.

    The seed is the mean of the first `period` values, placed at position
    period-1; after that ema[i] = (x[i] - ema[i-1]) * 2/(period+1) + ema[i-1].
    Works on any numeric series (closes, or a MACD line).

    Args:
        prices: Numeric series
        period: Number of periods for the average

    Returns:
        EMA series aligned with `prices`, NaN before position period-1
    """
    ema = pd.Series(np.nan, index=prices.index, dtype="float64")
    if len(prices) < period:
        return ema

    values = prices.astype("float64")
    seeded = values.iloc[period - 1 :].copy()
    seeded.iloc[0] = values.iloc[:period].mean()

    # adjust=False gives exactly the recursive form with alpha = 2/(span+1)
    ema.iloc[period - 1 :] = seeded.ewm(span=period, adjust=False).mean().to_numpy()
    return ema


def calculate_rsi(prices: pd.Series, period: int = 14) -> float | None:
    """
    Calculate Relative Strength Index over the last `period` price changes.

    Simple windowed averages, not Wilder's smoothing: gains and losses are
    summed across the trailing window and divided by `period`.

    Args:
        prices: Price series (typically close prices)
        period: RSI period (default: 14)

    Returns:
        RSI (0-100 scale), or None if fewer than period+1 values
    """
    if len(prices) < period + 1:
        return None

    delta = prices.iloc[-(period + 1) :].diff().iloc[1:]

    gains = float(delta[delta > 0].sum())
    losses = float(-delta[delta < 0].sum())

    avg_gain = gains / period
    avg_loss = losses / period

    # No losses in the window (includes a flat window)
    if avg_loss == 0:
        return 100.0

    rs = avg_gain / avg_loss
    return 100 - (100 / (1 + rs))


def calculate_macd(
    prices: pd.Series,
    fast: int = 12,
    slow: int = 26,
    signal: int = 9,
) -> dict[str, float | None]:
    """
    Calculate MACD (Moving Average Convergence Divergence) as of the last bar.

    Args:
        prices: Price series (typically close prices)
        fast: Fast EMA period (default: 12)
        slow: Slow EMA period (default: 26)
        signal: Signal line period (default: 9)

    Returns:
        Dict with 'macd_line', 'signal_line', 'histogram' values (None when unavailable)
    """
    result: dict[str, float | None] = {
        "macd_line": None,
        "signal_line": None,
        "histogram": None,
    }
    if len(prices) < slow + signal:
        return result

    ema_fast = calculate_ema(prices, fast)
    ema_slow = calculate_ema(prices, slow)

    # MACD line starts where the slow EMA does
    macd_line = (ema_fast - ema_slow).iloc[slow - 1 :]
    result["macd_line"] = float(macd_line.iloc[-1])

    signal_line = calculate_ema(macd_line, signal)
    if pd.isna(signal_line.iloc[-1]):
        return result

    result["signal_line"] = float(signal_line.iloc[-1])
    result["histogram"] = result["macd_line"] - result["signal_line"]
    return result


def calculate_bollinger_bands(
    prices: pd.Series,
    period: int = 20,
    num_std: float = 2.0,
) -> dict[str, float | None]:
    """
    Calculate Bollinger Bands over the last `period` prices.

    Uses the population standard deviation (divide by `period`).

    Returns:
        Dict with 'upper', 'middle', 'lower' (all None if fewer than `period` values)
    """
    middle = calculate_sma(prices, period)
    if middle is None:
        return {"upper": None, "middle": None, "lower": None}

    std = float(prices.iloc[-period:].std(ddof=0))

    return {
        "upper": middle + num_std * std,
        "middle": middle,
        "lower": middle - num_std * std,
    }


def calculate_atr(
    high: pd.Series,
    low: pd.Series,
    close: pd.Series,
    period: int = 14,
) -> float | None:
    """
    Calculate Average True Range.

    Simple mean of the last `period` true ranges (not Wilder-smoothed).

    Args:
        high: High price series
        low: Low price series
        close: Close price series
        period: ATR period (default: 14)

    Returns:
        ATR value, or None if fewer than period+1 bars
    """
    if len(close) < period + 1:
        return None

    prev_close = close.shift(1)

    tr1 = high - low
    tr2 = (high - prev_close).abs()
    tr3 = (low - prev_close).abs()

    # First bar has no previous close
    true_range = pd.concat([tr1, tr2, tr3], axis=1).max(axis=1).iloc[1:]

    return float(true_range.iloc[-period:].mean())


def calculate_price_change(prices: pd.Series, periods: int) -> float | None:
    """
    Calculate percentage change over a specific number of bars.

    Args:
        prices: Price series
        periods: Number of bars to look back

    Returns:
        Change in percent (15.0 = +15%), or None if insufficient data
    """
    if len(prices) <= periods:
        return None

    current = prices.iloc[-1]
    past = prices.iloc[-periods - 1]

    if pd.isna(current) or pd.isna(past) or past == 0:
        return None

    return float((current - past) / past * 100)


def calculate_volume_ratio(volume: pd.Series, period: int = 20) -> float | None:
    """
    Calculate current volume relative to the average of the last `period` volumes.

    Returns:
        Ratio (1.5 = 50% above average), or None if insufficient data or zero average
    """
    if len(volume) < period:
        return None

    avg_volume = float(volume.iloc[-period:].mean())
    if avg_volume == 0:
        return None

    return float(volume.iloc[-1]) / avg_volume


def calculate_52_week_position(
    prices: pd.Series,
    window: int = 252,
) -> dict[str, float | None] | None:
    """
    Calculate where the latest close sits within the trailing `window` range.

    Returns:
        Dict with 'pct_from_high' ((high - close) / high * 100) and
        'pct_from_low' ((close - low) / low * 100), or None if fewer than
        `window` values
    """
    if len(prices) < window:
        return None

    year = prices.iloc[-window:]
    high = float(year.max())
    low = float(year.min())
    current = float(prices.iloc[-1])

    return {
        "pct_from_high": (high - current) / high * 100 if high != 0 else None,
        "pct_from_low": (current - low) / low * 100 if low != 0 else None,
    }


def calculate_cagr(
    start_value: float | None,
    end_value: float | None,
    years: float,
) -> float | None:
    """
    Calculate compound annual growth rate: (end / start) ** (1 / years) - 1.

    Args:
        start_value: Value at the beginning of the period
        end_value: Value at the end of the period
        years: Length of the period in years

    Returns:
        CAGR as decimal (0.15 = 15%), or None if either value is missing or non-positive
    """
    if start_value is None or end_value is None or years <= 0:
        return None
    if start_value <= 0 or end_value <= 0:
        return None
    return (end_value / start_value) ** (1 / years) - 1
