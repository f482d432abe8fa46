"""Screening filters for a single instrument.

Each filter is skipped when the metric it reads is unknown, so a stock with
no market cap neither passes nor fails a market-cap filter. Filters that
run either match (adding a label) or fail the screen; every filter is still
evaluated after a failure so the labels show what did match.
"""

from __future__ import annotations

import logging
import operator
from collections.abc import Callable, Mapping
from dataclasses import dataclass, fields
from typing import Any

from stock_rating.models import FundamentalsSnapshot, ScoreBreakdown, TechnicalIndicatorSet
from stock_rating.utils.validators import check_rule, safe_float

logger = logging.getLogger(__name__)

RSI_OVERSOLD = 30
RSI_OVERBOUGHT = 70


@dataclass(frozen=True)
class FilterCriteria:
    """
    Screen thresholds. None (or False for the RSI flags) disables a filter.

    ``min_roe`` is a decimal like the fundamentals it is compared with
    (0.15 means 15%); ``min_market_cap`` is in currency units.
    """

    min_score: float | None = None
    max_pe: float | None = None
    min_roe: float | None = None
    min_market_cap: float | None = None
    max_debt_to_equity: float | None = None
    min_current_ratio: float | None = None
    rsi_oversold: bool = False
    rsi_overbought: bool = False

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any] | None) -> FilterCriteria:
        """Parse caller-supplied criteria. Unknown keys and non-numeric thresholds are rejected."""
        if raw is None:
            return cls()
        if not isinstance(raw, Mapping):
            raise ValueError(f"Filters must be a mapping, got {type(raw).__name__}")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(raw) - known)
        if unknown:
            raise ValueError(f"Unknown filter(s) {unknown}. Must be one of: {sorted(known)}")

        values: dict[str, Any] = {}
        for name, value in raw.items():
            if name in ("rsi_oversold", "rsi_overbought"):
                value = False if value is None else value
                if not isinstance(value, bool):
                    raise ValueError(f"Filter '{name}' must be true or false, got {value!r}")
                values[name] = value
            elif value is None:
                values[name] = None
            else:
                number = safe_float(value)
                if number is None:
                    raise ValueError(f"Filter '{name}' is not numeric: {value!r}")
                values[name] = number
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


PRESETS: dict[str, FilterCriteria] = {
    "value": FilterCriteria(max_pe=20, min_roe=0.10, max_debt_to_equity=1.0),
    "quality": FilterCriteria(min_score=60, min_roe=0.15, min_current_ratio=1.5),
    "growth-tech": FilterCriteria(min_score=55, min_market_cap=50e9),
    "dividend-safe": FilterCriteria(max_debt_to_equity=0.5, min_current_ratio=1.2),
    "oversold": FilterCriteria(rsi_oversold=True),
}


def get_preset(name: str) -> FilterCriteria:
    """Look up a preset by name (case-insensitive)."""
    if not isinstance(name, str):
        raise ValueError(f"Preset must be a name, got {type(name).__name__}")
    key = name.strip().lower()
    if key not in PRESETS:
        raise ValueError(f"Unknown preset '{name}'. Must be one of: {list(PRESETS)}")
    return PRESETS[key]


def _num(value: float) -> str:
    """Threshold as written: 20 not 20.0, 1.5 stays 1.5."""
    return f"{value:g}"


def _pe_within(pe: float, limit: float) -> bool:
    # Negative or zero earnings never pass a P/E ceiling
    return 0 < pe <= limit


def apply_filters(
    criteria: FilterCriteria,
    fundamentals: FundamentalsSnapshot,
    technicals: TechnicalIndicatorSet | None,
    scores: ScoreBreakdown,
) -> tuple[bool, list[str]]:
    """
    Run every enabled filter against one instrument.

    Returns:
        (passes, matched_filters) where matched_filters lists the labels of
        the filters that ran and matched, in filter order
    """
    rsi = technicals.rsi_14 if technicals is not None else None
    c = criteria

    checks: list[tuple[float | None, float, Callable[[float, float], bool], str]] = []
    if c.min_score is not None:
        checks.append((scores.overall, c.min_score, operator.ge, f"Score >= {_num(c.min_score)}"))
    if c.max_pe is not None:
        checks.append((fundamentals.pe, c.max_pe, _pe_within, f"P/E <= {_num(c.max_pe)}"))
    if c.min_roe is not None:
        checks.append((fundamentals.roe, c.min_roe, operator.ge, f"ROE >= {c.min_roe * 100:.0f}%"))
    if c.min_market_cap is not None:
        label = f"Market Cap >= ${c.min_market_cap / 1e9:.0f}B"
        checks.append((fundamentals.market_cap, c.min_market_cap, operator.ge, label))
    if c.max_debt_to_equity is not None:
        label = f"D/E <= {_num(c.max_debt_to_equity)}"
        checks.append((fundamentals.debt_to_equity, c.max_debt_to_equity, operator.le, label))
    if c.min_current_ratio is not None:
        label = f"Current Ratio >= {_num(c.min_current_ratio)}"
        checks.append((fundamentals.current_ratio, c.min_current_ratio, operator.ge, label))
    if c.rsi_oversold:
        checks.append((rsi, RSI_OVERSOLD, operator.lt, f"RSI Oversold (<{RSI_OVERSOLD})"))
    if c.rsi_overbought:
        checks.append((rsi, RSI_OVERBOUGHT, operator.gt, f"RSI Overbought (>{RSI_OVERBOUGHT})"))

    passes = True
    matched: list[str] = []
    for value, threshold, comparator, label in checks:
        outcome = check_rule(value, threshold, comparator)
        if outcome is None:
            continue
        if outcome:
            matched.append(label)
        else:
            passes = False

    logger.debug("Screen %s: matched %s", "passed" if passes else "failed", matched)
    return passes, matched
