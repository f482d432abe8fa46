"""Stock Rating MCP Server using FastMCP.

Every tool works on data passed in by the client; the server never fetches
prices or fundamentals itself and keeps no state between calls.
"""

import json
import logging
from typing import Any

from fastmcp import FastMCP

from stock_rating import SCHEMA_VERSION, SERVER_VERSION
from stock_rating.config import load_settings
from stock_rating.tools import analyze_stock, score_stock, screen_stock, technicals

settings = load_settings()

# Configure logging
logging.basicConfig(level=settings.log_level_value)
logger = logging.getLogger(__name__)

# Create FastMCP server instance
mcp = FastMCP(
    name="stock-rating",
)


# ============================================================================
# TOOLS
# ============================================================================


@mcp.tool
def get_technicals(bars: list[dict[str, Any]], symbol: str | None = None) -> str:
    """
    Calculate technical indicators from daily price bars.

    Includes RSI(14), MACD(12/26/9), SMA 20/50/200, EMA 20/50,
    Bollinger Bands(20, 2), ATR(14), 1/5/20-day price change,
    volume ratio and 52-week position.

    Args:
        bars: Daily bars ascending by date, each {date, open, high, low, close, volume}
        symbol: Optional ticker symbol for labelling

    Returns:
        JSON with indicator values (null when history is too short) and rules
    """
    result = technicals(bars=bars, symbol=symbol, settings=settings)
    return json.dumps(result, indent=2, default=str)


@mcp.tool
def get_scores(
    fundamentals: dict[str, Any],
    bars: list[dict[str, Any]] | None = None,
    symbol: str | None = None,
) -> str:
    """
    Score a stock on valuation, quality, growth and momentum (0-100 each).

    Args:
        fundamentals: pe, peg, roe, roic, gross_margin, operating_margin,
            debt_to_equity, current_ratio, free_cash_flow, revenue_cagr_5y,
            eps_cagr_5y, fcf_yield, price, market_cap (ratios as decimals)
        bars: Optional daily bars; momentum is neutral (50) without them
        symbol: Optional ticker symbol for labelling

    Returns:
        JSON with score breakdown and trading signals
    """
    result = score_stock(fundamentals=fundamentals, bars=bars, symbol=symbol, settings=settings)
    return json.dumps(result, indent=2, default=str)


@mcp.tool
def analyze(
    symbol: str,
    fundamentals: dict[str, Any] | None = None,
    bars: list[dict[str, Any]] | None = None,
) -> str:
    """
    Full analysis: indicators, scores, signals and a Strong Buy..Strong Sell rating.

    Args:
        symbol: Stock ticker symbol
        fundamentals: Fundamentals snapshot (see get_scores)
        bars: Daily bars ascending by date

    Returns:
        JSON with technicals, scores, signals, recommendation and provenance
    """
    result = analyze_stock(symbol=symbol, bars=bars, fundamentals=fundamentals, settings=settings)
    return json.dumps(result, indent=2, default=str)


@mcp.tool
def screen(
    symbol: str,
    fundamentals: dict[str, Any] | None = None,
    bars: list[dict[str, Any]] | None = None,
    preset: str | None = None,
    filters: dict[str, Any] | None = None,
) -> str:
    """
    Check whether a stock passes a screen.

    Presets: value (P/E <= 20, ROE >= 10%, D/E <= 1), quality (score >= 60,
    ROE >= 15%, current ratio >= 1.5), growth-tech (score >= 55, market cap
    >= $50B), dividend-safe (D/E <= 0.5, current ratio >= 1.2), oversold
    (RSI < 30). A filter whose metric is unknown is skipped.

    Args:
        symbol: Stock ticker symbol
        fundamentals: Fundamentals snapshot (see get_scores)
        bars: Daily bars ascending by date (needed for RSI filters)
        preset: Preset name
        filters: Custom criteria instead of a preset: min_score, max_pe, min_roe,
            min_market_cap, max_debt_to_equity, min_current_ratio,
            rsi_oversold, rsi_overbought

    Returns:
        JSON with pass/fail, matched filter labels, scores and rating
    """
    result = screen_stock(
        symbol=symbol,
        fundamentals=fundamentals,
        bars=bars,
        preset=preset,
        filters=filters,
        settings=settings,
    )
    return json.dumps(result, indent=2, default=str)


# ============================================================================
# ENTRY POINT
# ============================================================================


def main() -> None:
    """Run the MCP server."""
    logger.info(f"Starting Stock Rating MCP Server v{SERVER_VERSION} (schema v{SCHEMA_VERSION})")
    mcp.run()


if __name__ == "__main__":
    main()
