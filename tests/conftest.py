"""Pytest configuration and fixtures."""

from collections.abc import Callable, Sequence
from datetime import date, timedelta

import pandas as pd
import pytest

from stock_rating.models import FundamentalsSnapshot, PriceBar, PriceSeries


def build_series(
    closes: Sequence[float],
    volumes: Sequence[float] | None = None,
    spread: float = 0.0,
    start: date = date(2024, 1, 1),
) -> PriceSeries:
    """Bars on consecutive days; high/low sit `spread` above/below the close."""
    if volumes is None:
        volumes = [1000.0] * len(closes)
    return PriceSeries(
        tuple(
            PriceBar(
                date=start + timedelta(days=i),
                open=close,
                high=close + spread,
                low=close - spread,
                close=close,
                volume=volume,
            )
            for i, (close, volume) in enumerate(zip(closes, volumes))
        )
    )


@pytest.fixture
def make_series() -> Callable[..., PriceSeries]:
    """Factory for synthetic price series."""
    return build_series


@pytest.fixture
def flat_series() -> PriceSeries:
    """25 flat bars: close 100.0, volume 1000."""
    return build_series([100.0] * 25)


@pytest.fixture
def sample_price_series() -> pd.Series:
    """Sample price series for indicator testing."""
    return pd.Series(
        [100.0, 101.0, 102.0, 101.5, 103.0, 104.0, 103.5, 105.0, 106.0, 105.5,
         107.0, 108.0, 107.5, 109.0, 110.0, 109.5, 111.0, 112.0, 111.5, 113.0,
         114.0, 113.5, 115.0, 116.0, 115.5, 117.0, 118.0, 117.5, 119.0, 120.0,
         119.0, 121.0, 122.5, 121.0, 123.0, 124.0, 123.5, 125.0, 126.0, 125.0]
    )


@pytest.fixture
def sample_ohlcv_df() -> pd.DataFrame:
    """Sample OHLCV DataFrame for testing."""
    return pd.DataFrame(
        {
            "Date": pd.date_range("2024-01-01", periods=10, freq="D"),
            "Open": [100.0, 101.0, 102.0, 101.5, 103.0, 104.0, 103.5, 105.0, 106.0, 105.5],
            "High": [101.0, 102.5, 103.0, 102.5, 104.5, 105.5, 105.0, 106.5, 107.0, 106.5],
            "Low": [99.5, 100.5, 101.0, 100.5, 102.0, 103.0, 102.5, 104.0, 105.0, 104.5],
            "Close": [100.5, 102.0, 101.5, 102.0, 104.0, 103.5, 104.5, 106.0, 105.5, 106.0],
            "Volume": [1000000] * 10,
        }
    ).set_index("Date")


@pytest.fixture
def strong_fundamentals() -> FundamentalsSnapshot:
    """Cheap, profitable, low-debt, fast-growing company."""
    return FundamentalsSnapshot(
        pe=8,
        peg=0.8,
        roe=0.28,
        debt_to_equity=0.2,
        revenue_cagr_5y=0.22,
    )


@pytest.fixture
def weak_fundamentals() -> FundamentalsSnapshot:
    """Expensive, unprofitable, highly leveraged, shrinking company."""
    return FundamentalsSnapshot(
        pe=-5,
        peg=4.0,
        fcf_yield=-0.02,
        roe=-0.10,
        operating_margin=-0.05,
        gross_margin=0.15,
        debt_to_equity=3.5,
        current_ratio=0.8,
        revenue_cagr_5y=-0.05,
        eps_cagr_5y=-0.10,
    )
