"""Tests for the multi-factor scoring engine."""

import pytest

from stock_rating.analysis.scoring import (
    PE_BANDS,
    ScoringEngine,
    band_points,
    calculate_scores,
    growth_score,
    momentum_score,
    quality_score,
    valuation_score,
)
from stock_rating.models import FundamentalsSnapshot, ScoreBreakdown, TechnicalIndicatorSet
from stock_rating.utils.validators import round_half_up


class TestValuation:
    """Tests for valuation score."""

    @pytest.mark.parametrize(
        ("pe", "expected"),
        [(-3, 40), (0, 65), (9.9, 65), (10, 60), (14, 60), (19, 55), (25, 45), (30, 40), (80, 40)],
    )
    def test_pe_bands(self, pe: float, expected: int) -> None:
        """P/E bands, first match wins."""
        assert valuation_score(FundamentalsSnapshot(pe=pe)) == expected

    @pytest.mark.parametrize(
        ("peg", "expected"),
        [(-1, 45), (0.5, 65), (1.2, 60), (1.8, 55), (2.5, 50), (3.5, 40)],
    )
    def test_peg_bands(self, peg: float, expected: int) -> None:
        """PEG between 2 and 3 is neutral."""
        assert valuation_score(FundamentalsSnapshot(peg=peg)) == expected

    @pytest.mark.parametrize(
        ("fcf_yield", "expected"),
        [(0.12, 65), (0.07, 60), (0.04, 55), (0.02, 50), (-0.01, 40)],
    )
    def test_fcf_yield_bands(self, fcf_yield: float, expected: int) -> None:
        """FCF yield is compared as a percentage."""
        assert valuation_score(FundamentalsSnapshot(fcf_yield=fcf_yield)) == expected

    def test_rules_are_additive(self) -> None:
        """Each metric adds independently."""
        f = FundamentalsSnapshot(pe=8, peg=0.8, fcf_yield=0.12)
        assert valuation_score(f) == 95

    def test_missing_metrics_are_neutral(self) -> None:
        """Absent metrics contribute nothing."""
        assert valuation_score(FundamentalsSnapshot()) == 50


class TestQuality:
    """Tests for quality score."""

    def test_maximum_is_clamped(self) -> None:
        """All best bands add +60 but the score caps at 100."""
        f = FundamentalsSnapshot(
            roe=0.30,
            operating_margin=0.30,
            gross_margin=0.60,
            debt_to_equity=0.1,
            current_ratio=3.0,
        )
        assert quality_score(f) == 100

    def test_minimum_is_clamped(self, weak_fundamentals: FundamentalsSnapshot) -> None:
        """All worst bands floor at zero."""
        assert quality_score(weak_fundamentals) == 0

    @pytest.mark.parametrize(
        ("roe", "expected"),
        [(0.30, 65), (0.20, 60), (0.12, 55), (0.07, 50), (0.03, 45), (-0.02, 35)],
    )
    def test_roe_bands(self, roe: float, expected: int) -> None:
        """ROE bands on percentage values."""
        assert quality_score(FundamentalsSnapshot(roe=roe)) == expected

    @pytest.mark.parametrize(
        ("debt_to_equity", "expected"),
        [(0.1, 65), (0.4, 60), (0.8, 55), (1.2, 50), (1.8, 45), (2.5, 40)],
    )
    def test_debt_to_equity_bands(self, debt_to_equity: float, expected: int) -> None:
        """Lower leverage is better."""
        assert quality_score(FundamentalsSnapshot(debt_to_equity=debt_to_equity)) == expected

    @pytest.mark.parametrize(
        ("current_ratio", "expected"),
        [(2.0, 60), (1.5, 55), (1.3, 50), (1.1, 45), (0.9, 40)],
    )
    def test_current_ratio_bands(self, current_ratio: float, expected: int) -> None:
        """Higher liquidity is better; 2.0 and 1.5 are inclusive."""
        assert quality_score(FundamentalsSnapshot(current_ratio=current_ratio)) == expected

    def test_zero_is_not_missing(self) -> None:
        """A zero operating margin scores (penalty), unlike an absent one."""
        assert quality_score(FundamentalsSnapshot(operating_margin=0.0)) == 45
        assert quality_score(FundamentalsSnapshot(operating_margin=None)) == 50


class TestGrowth:
    """Tests for growth score."""

    def test_neutral_without_cagr(self) -> None:
        """Exactly 50 when both CAGRs are absent, whatever else is known."""
        f = FundamentalsSnapshot(pe=8, roe=0.4, debt_to_equity=5.0, fcf_yield=0.2)
        assert growth_score(f) == 50

    def test_revenue_penalty_for_slow_growth(self) -> None:
        """Revenue growth between 0 and 5% is penalized."""
        assert growth_score(FundamentalsSnapshot(revenue_cagr_5y=0.03)) == 45

    def test_eps_no_penalty_for_slow_growth(self) -> None:
        """EPS growth between 0 and 5% is neutral."""
        assert growth_score(FundamentalsSnapshot(eps_cagr_5y=0.03)) == 50

    def test_both_cagrs_add(self) -> None:
        """Revenue and EPS bands add up to +40."""
        f = FundamentalsSnapshot(revenue_cagr_5y=0.25, eps_cagr_5y=0.30)
        assert growth_score(f) == 90

    def test_shrinking(self) -> None:
        """Negative growth on both."""
        f = FundamentalsSnapshot(revenue_cagr_5y=-0.05, eps_cagr_5y=-0.10)
        assert growth_score(f) == 20


class TestMomentum:
    """Tests for momentum score."""

    def test_neutral_without_technicals(self) -> None:
        """No indicator set means exactly 50."""
        assert momentum_score(None) == 50

    def test_bullish_setup(self) -> None:
        """Neutral RSI, positive MACD, rising price, volume spike."""
        t = TechnicalIndicatorSet(
            rsi_14=50, macd_histogram=0.5, price_change_20d=6.0, volume_ratio=2.0
        )
        assert momentum_score(t) == 80

    def test_bearish_setup(self) -> None:
        """Overbought RSI, negative MACD, falling price."""
        t = TechnicalIndicatorSet(rsi_14=75, macd_histogram=-0.1, price_change_20d=-6.0)
        assert momentum_score(t) == 35

    @pytest.mark.parametrize(
        ("rsi", "expected"),
        [(50, 60), (40, 60), (35, 55), (65, 55), (25, 55), (70, 55), (71, 45)],
    )
    def test_rsi_zones(self, rsi: float, expected: int) -> None:
        """Neutral zone best, oversold mildly positive, overbought negative."""
        assert momentum_score(TechnicalIndicatorSet(rsi_14=rsi)) == expected

    def test_flat_histogram_penalized(self) -> None:
        """A zero MACD histogram counts as negative."""
        assert momentum_score(TechnicalIndicatorSet(macd_histogram=0.0)) == 45

    def test_empty_indicator_set(self) -> None:
        """An all-None set adds nothing."""
        assert momentum_score(TechnicalIndicatorSet()) == 50


class TestScoreBreakdown:
    """Tests for overall score."""

    def test_strong_fundamentals_scenario(self, strong_fundamentals: FundamentalsSnapshot) -> None:
        """Low P/E, high ROE, low debt, high growth, no technicals."""
        scores = calculate_scores(strong_fundamentals)

        assert scores.valuation == 80
        assert scores.quality == 80
        assert scores.growth == 70
        assert scores.momentum == 50
        # 20 + 24 + 17.5 + 10
        assert scores.overall == 72
        assert scores.momentum < scores.overall < min(scores.valuation, scores.quality)

    def test_overall_recomputed_from_categories(
        self,
        strong_fundamentals: FundamentalsSnapshot,
        weak_fundamentals: FundamentalsSnapshot,
    ) -> None:
        """Overall is the weighted sum of the returned category scores."""
        technicals = TechnicalIndicatorSet(rsi_14=45, macd_histogram=1.0)
        for f in (strong_fundamentals, weak_fundamentals, FundamentalsSnapshot()):
            for t in (None, technicals):
                s = ScoringEngine().score(f, t)
                expected = round_half_up(
                    s.valuation * 0.25 + s.quality * 0.30 + s.growth * 0.25 + s.momentum * 0.20
                )
                assert s.overall == expected

    def test_extreme_inputs_stay_in_range(self) -> None:
        """Absurd fundamentals still give integers in [0, 100]."""
        f = FundamentalsSnapshot(
            pe=1e12,
            peg=-1e9,
            fcf_yield=1e6,
            roe=-1e6,
            operating_margin=1e9,
            gross_margin=-1e9,
            debt_to_equity=1e9,
            current_ratio=-1e9,
            revenue_cagr_5y=1e9,
            eps_cagr_5y=-1e9,
        )
        t = TechnicalIndicatorSet(rsi_14=100, macd_histogram=-1e9, price_change_20d=-1e9)
        scores = calculate_scores(f, t)

        for value in scores.to_dict().values():
            assert isinstance(value, int)
            assert 0 <= value <= 100

    def test_half_rounds_up(self) -> None:
        """A weighted sum ending in .5 rounds up."""
        # 12.5 + 13.5 + 12.5 + 10 = 48.5
        assert ScoreBreakdown(valuation=50, quality=45, growth=50, momentum=50).overall == 49

    def test_overall_not_settable(self) -> None:
        """Overall cannot be passed in."""
        with pytest.raises(TypeError):
            ScoreBreakdown(valuation=50, quality=50, growth=50, momentum=50, overall=99)

    def test_out_of_range_rejected(self) -> None:
        """Category scores outside [0, 100] are rejected."""
        with pytest.raises(ValueError, match="valuation"):
            ScoreBreakdown(valuation=101, quality=50, growth=50, momentum=50)

    def test_idempotent(self, strong_fundamentals: FundamentalsSnapshot) -> None:
        """Same inputs, same scores."""
        assert calculate_scores(strong_fundamentals) == calculate_scores(strong_fundamentals)


class TestBandPoints:
    """Tests for the band helper."""

    def test_first_match_wins(self) -> None:
        """8 is below 10, 15, 20 and 30 but only the first band counts."""
        assert band_points(8, PE_BANDS) == 15

    def test_absent_value(self) -> None:
        """None scores zero."""
        assert band_points(None, PE_BANDS) == 0
