"""OHLCV DataFrame standardization and conversion to/from PriceSeries."""

import pandas as pd

from stock_rating.models import PriceBar, PriceSeries

CANONICAL_COLUMNS = ["date", "open", "high", "low", "close", "volume"]


def standardize_ohlcv(df: pd.DataFrame) -> pd.DataFrame:
    """
    Standardize OHLCV to consistent schema.

    Output columns (always, in this order): date, open, high, low, close, volume
    All lowercase, sorted ascending by date, numeric price/volume columns.
    Missing columns are filled with NaN; duplicate dates keep the last row.

    Args:
        df: DataFrame with a date index or date column and OHLCV columns
            (any capitalization; 'Adj Close' is ignored)

    Returns:
        Standardized DataFrame with consistent schema
    """
    df = df.copy()

    # Handle multi-index columns (e.g. ("Close", "AAPL"))
    if isinstance(df.columns, pd.MultiIndex):
        df.columns = df.columns.get_level_values(0)

    if "Adj Close" in df.columns:
        df = df.drop(columns=["Adj Close"])

    df.columns = [str(c).lower() for c in df.columns]

    # Make date a column if it lives in the index
    if "date" not in df.columns:
        df = df.reset_index()
        date_cols = [c for c in df.columns if str(c).lower() in ("date", "datetime", "index")]
        if date_cols:
            df = df.rename(columns={date_cols[0]: "date"})

    for col in CANONICAL_COLUMNS:
        if col not in df.columns:
            df[col] = pd.NA

    df = df[CANONICAL_COLUMNS].copy()

    df["date"] = pd.to_datetime(df["date"], errors="coerce")
    for col in CANONICAL_COLUMNS[1:]:
        df[col] = pd.to_numeric(df[col], errors="coerce")

    df = (
        df.dropna(subset=["date"])
        .drop_duplicates(subset=["date"], keep="last")
        .sort_values("date")
        .reset_index(drop=True)
    )

    return df


def series_from_frame(df: pd.DataFrame) -> PriceSeries:
    """
    Build a PriceSeries from an OHLCV DataFrame.

    Rows with a missing price or volume are dropped rather than filled,
    so windows simply skip them.
    """
    standardized = standardize_ohlcv(df).dropna(subset=CANONICAL_COLUMNS[1:])
    bars = [
        PriceBar(
            date=row.date.date(),
            open=float(row.open),
            high=float(row.high),
            low=float(row.low),
            close=float(row.close),
            volume=float(row.volume),
        )
        for row in standardized.itertuples(index=False)
    ]
    return PriceSeries(tuple(bars))


def series_to_frame(series: PriceSeries) -> pd.DataFrame:
    """Convert a PriceSeries to a lowercase OHLCV DataFrame with ISO date strings."""
    return pd.DataFrame(df_to_rows(series), columns=CANONICAL_COLUMNS)


def df_to_rows(series: PriceSeries) -> list[dict]:
    """Convert to list of dicts for inline preview. Lowercase keys."""
    return [bar.to_dict() for bar in series]
