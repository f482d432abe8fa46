"""Stock rating tools."""

from stock_rating.tools.analyze import analyze_stock
from stock_rating.tools.scoring import score_stock
from stock_rating.tools.screening import screen_stock
from stock_rating.tools.technicals import technicals

__all__ = [
    "analyze_stock",
    "score_stock",
    "screen_stock",
    "technicals",
]
