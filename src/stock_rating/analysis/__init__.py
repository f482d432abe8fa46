"""Indicator, scoring, signal, recommendation and screening engines."""

from stock_rating.analysis.pipeline import analyze
from stock_rating.analysis.recommendation import RecommendationEngine, get_recommendation
from stock_rating.analysis.scoring import ScoringEngine, calculate_scores
from stock_rating.analysis.screening import PRESETS, FilterCriteria, apply_filters, get_preset
from stock_rating.analysis.signals import SignalGenerator, generate_signals
from stock_rating.analysis.technical import TechnicalIndicatorEngine, compute_indicators

__all__ = [
    "analyze",
    "RecommendationEngine",
    "get_recommendation",
    "ScoringEngine",
    "calculate_scores",
    "PRESETS",
    "FilterCriteria",
    "apply_filters",
    "get_preset",
    "SignalGenerator",
    "generate_signals",
    "TechnicalIndicatorEngine",
    "compute_indicators",
]
