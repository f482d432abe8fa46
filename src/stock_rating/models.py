"""Value types shared by the indicator, scoring, signal and recommendation engines.

All types are frozen dataclasses. Nothing here holds a reference back to the
inputs it was computed from, and every ``to_dict()`` yields JSON-safe plain
values with ``None`` standing in for "unknown".
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field, fields
from datetime import date, datetime
from enum import Enum
from typing import Any

import pandas as pd

from stock_rating.utils.validators import round_half_up, safe_float

# Overall = weighted combination of the rounded category scores
OVERALL_WEIGHTS: dict[str, float] = {
    "valuation": 0.25,
    "quality": 0.30,
    "growth": 0.25,
    "momentum": 0.20,
}

NEUTRAL_SCORE = 50


def _parse_date(value: Any) -> date:
    """Accept date, datetime, pandas Timestamp or ISO string."""
    if isinstance(value, pd.Timestamp):
        return value.date()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError as e:
            raise ValueError(f"Invalid bar date '{value}'. Expected YYYY-MM-DD") from e
    raise ValueError(f"Invalid bar date '{value!r}'")


# ============================================================================
# PRICE DATA
# ============================================================================


@dataclass(frozen=True)
class PriceBar:
    """One daily open/high/low/close/volume observation."""

    date: date
    open: float
    high: float
    low: float
    close: float
    volume: float

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> PriceBar:
        """Build a bar from a dict with lowercase or capitalized OHLCV keys."""
        if not isinstance(raw, Mapping):
            raise ValueError(f"Price bar must be a mapping, got {type(raw).__name__}")
        values: dict[str, Any] = {}
        lowered = {str(k).lower(): v for k, v in raw.items()}
        for name in ("date", "open", "high", "low", "close", "volume"):
            if name not in lowered:
                raise ValueError(f"Price bar is missing '{name}'")
            values[name] = lowered[name]

        numbers: dict[str, float] = {}
        for name in ("open", "high", "low", "close", "volume"):
            number = safe_float(values[name])
            if number is None:
                raise ValueError(f"Price bar field '{name}' is not numeric: {values[name]!r}")
            numbers[name] = number

        return cls(date=_parse_date(values["date"]), **numbers)

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
            "volume": self.volume,
        }


@dataclass(frozen=True)
class PriceSeries:
    """
    Read-only view over price bars, ascending by date.

    No gap filling: missing trading days are simply absent, and indicator
    windows count bars, not calendar days.
    """

    bars: tuple[PriceBar, ...] = ()

    def __post_init__(self) -> None:
        bars = tuple(self.bars)
        for prev, curr in zip(bars, bars[1:]):
            if curr.date <= prev.date:
                raise ValueError(
                    f"Price bars must be strictly ascending by date: {curr.date} follows {prev.date}"
                )
        object.__setattr__(self, "bars", bars)

    @classmethod
    def from_bars(cls, bars: Iterable[PriceBar | Mapping[str, Any]]) -> PriceSeries:
        """Build a series from bars or bar mappings, in the order given."""
        if isinstance(bars, (str, bytes, Mapping)) or not isinstance(bars, Iterable):
            raise ValueError(f"Price bars must be a list of bars, got {type(bars).__name__}")
        return cls(
            tuple(b if isinstance(b, PriceBar) else PriceBar.from_mapping(b) for b in bars)
        )

    def __len__(self) -> int:
        return len(self.bars)

    def __iter__(self) -> Iterator[PriceBar]:
        return iter(self.bars)

    def __getitem__(self, index: int) -> PriceBar:
        return self.bars[index]

    def _column(self, name: str) -> pd.Series:
        return pd.Series([getattr(b, name) for b in self.bars], dtype="float64")

    @property
    def highs(self) -> pd.Series:
        return self._column("high")

    @property
    def lows(self) -> pd.Series:
        return self._column("low")

    @property
    def closes(self) -> pd.Series:
        return self._column("close")

    @property
    def volumes(self) -> pd.Series:
        return self._column("volume")

    @property
    def last_date(self) -> date | None:
        return self.bars[-1].date if self.bars else None


# ============================================================================
# FUNDAMENTALS
# ============================================================================


@dataclass(frozen=True)
class FundamentalsSnapshot:
    """
    Point-in-time fundamentals. Every field is optional.

    Ratios (roe, margins, CAGRs, fcf_yield) are decimals: 0.25 means 25%.
    An absent metric is None, never 0.0, because zero carries scoring meaning.
    """

    pe: float | None = None
    peg: float | None = None
    roe: float | None = None
    roic: float | None = None
    gross_margin: float | None = None
    operating_margin: float | None = None
    debt_to_equity: float | None = None
    current_ratio: float | None = None
    free_cash_flow: float | None = None
    revenue_cagr_5y: float | None = None
    eps_cagr_5y: float | None = None
    fcf_yield: float | None = None
    price: float | None = None
    market_cap: float | None = None

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any] | None) -> FundamentalsSnapshot:
        """Coerce known keys to floats; NaN, inf and junk become None. Unknown keys are ignored."""
        if raw is None:
            return cls()
        if not isinstance(raw, Mapping):
            raise ValueError(f"Fundamentals must be a mapping, got {type(raw).__name__}")
        known = {f.name for f in fields(cls)}
        return cls(**{k: safe_float(v) for k, v in raw.items() if k in known})

    def to_dict(self) -> dict[str, float | None]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def present_fields(self) -> list[str]:
        """Names of metrics that are present."""
        return [f.name for f in fields(self) if getattr(self, f.name) is not None]


# ============================================================================
# INDICATORS
# ============================================================================


@dataclass(frozen=True)
class FiftyTwoWeekPosition:
    """Distance of the latest close from the trailing 252-bar high and low, in percent."""

    pct_from_high: float | None
    pct_from_low: float | None

    def to_dict(self) -> dict[str, float | None]:
        return {"pct_from_high": self.pct_from_high, "pct_from_low": self.pct_from_low}


@dataclass(frozen=True)
class TechnicalIndicatorSet:
    """Indicators as of the last bar. Each field is None when history is insufficient."""

    rsi_14: float | None = None
    macd: float | None = None
    macd_signal: float | None = None
    macd_histogram: float | None = None
    sma_20: float | None = None
    sma_50: float | None = None
    sma_200: float | None = None
    ema_20: float | None = None
    ema_50: float | None = None
    bollinger_upper: float | None = None
    bollinger_middle: float | None = None
    bollinger_lower: float | None = None
    atr_14: float | None = None
    price_change_1d: float | None = None
    price_change_5d: float | None = None
    price_change_20d: float | None = None
    volume_ratio: float | None = None
    week_52: FiftyTwoWeekPosition | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            data[f.name] = value.to_dict() if isinstance(value, FiftyTwoWeekPosition) else value
        return data

    def available(self) -> list[str]:
        """Names of indicators that could be computed."""
        return [f.name for f in fields(self) if getattr(self, f.name) is not None]


# ============================================================================
# SCORES, SIGNALS, RECOMMENDATION
# ============================================================================


@dataclass(frozen=True)
class ScoreBreakdown:
    """
    Four category scores in [0, 100] plus the weighted overall score.

    ``overall`` is derived from the (already rounded) category scores and
    cannot be passed in.
    """

    valuation: int
    quality: int
    growth: int
    momentum: int
    overall: int = field(init=False)

    def __post_init__(self) -> None:
        for name in OVERALL_WEIGHTS:
            value = getattr(self, name)
            if not 0 <= value <= 100:
                raise ValueError(f"Score '{name}' must be within [0, 100], got {value}")
        weighted = sum(getattr(self, name) * weight for name, weight in OVERALL_WEIGHTS.items())
        object.__setattr__(self, "overall", round_half_up(weighted))

    def categories(self) -> dict[str, int]:
        return {name: getattr(self, name) for name in OVERALL_WEIGHTS}

    def to_dict(self) -> dict[str, int]:
        return {**self.categories(), "overall": self.overall}


class SignalType(str, Enum):
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class Signal:
    """A discrete, thresholded reading of one indicator or fundamental metric."""

    type: SignalType
    indicator: str
    message: str
    strength: int

    def __post_init__(self) -> None:
        # Accept the plain string form ("bullish") as well as the enum
        try:
            object.__setattr__(self, "type", SignalType(self.type))
        except ValueError as e:
            raise ValueError(
                f"Invalid signal type '{self.type}'. Must be one of: {[t.value for t in SignalType]}"
            ) from e
        if self.strength not in (1, 2, 3):
            raise ValueError(f"Invalid signal strength '{self.strength}'. Must be 1, 2 or 3")

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "indicator": self.indicator,
            "message": self.message,
            "strength": self.strength,
        }


class Rating(str, Enum):
    STRONG_BUY = "Strong Buy"
    BUY = "Buy"
    HOLD = "Hold"
    SELL = "Sell"
    STRONG_SELL = "Strong Sell"


@dataclass(frozen=True)
class Recommendation:
    rating: Rating
    confidence: int
    summary: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "rating": self.rating.value,
            "confidence": self.confidence,
            "summary": self.summary,
        }


@dataclass(frozen=True)
class AnalysisResult:
    """Everything produced for one instrument in one invocation."""

    technicals: TechnicalIndicatorSet | None
    scores: ScoreBreakdown
    signals: tuple[Signal, ...]
    recommendation: Recommendation

    def to_dict(self) -> dict[str, Any]:
        return {
            "technicals": self.technicals.to_dict() if self.technicals is not None else None,
            "scores": self.scores.to_dict(),
            "signals": [s.to_dict() for s in self.signals],
            "recommendation": self.recommendation.to_dict(),
        }
