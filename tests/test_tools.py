"""Tests for the tool layer: response shape, provenance and input errors."""

import json
import logging

from stock_rating.tools import analyze_stock, score_stock, screen_stock, technicals
from stock_rating.utils.ohlcv import df_to_rows


def _bars(series) -> list[dict]:
    return df_to_rows(series)


class TestTechnicalsTool:
    """Tests for technicals()."""

    def test_response_shape(self, flat_series) -> None:
        """Indicators, rules and metadata are present."""
        result = technicals(_bars(flat_series), symbol="AAPL")

        assert result["meta"]["tool"] == "technicals"
        assert result["symbol"] == "AAPL"
        assert result["current_price"] == 100.0
        assert result["indicators"]["rsi_14"] == 100.0
        assert result["data_provenance"]["price"] == {
            "bars": 25,
            "first_bar_date": "2024-01-01",
            "last_bar_date": "2024-01-25",
        }

    def test_rules_nullable(self, flat_series) -> None:
        """Rules without enough history are None, not False."""
        rules = technicals(_bars(flat_series))["rules"]

        assert rules["rsi_overbought"]["triggered"] is True
        assert rules["rsi_oversold"]["triggered"] is False
        assert rules["macd_bullish"]["triggered"] is None
        assert rules["golden_cross"]["triggered"] is None
        assert rules["above_upper_band"]["triggered"] is False
        assert rules["volume_spike"]["triggered"] is False

    def test_empty_bars(self) -> None:
        """No bars is not an error; everything is unavailable."""
        result = technicals([])

        assert result["current_price"] is None
        assert all(v is None for v in result["indicators"].values())
        assert "empty_price_history" in result["data_provenance"]["warnings"]

    def test_unsorted_bars_rejected(self, make_series) -> None:
        """Out-of-order bars give an invalid_input error."""
        rows = _bars(make_series([1.0, 2.0]))[::-1]
        result = technicals(rows, symbol="AAPL")

        assert result["error"] is True
        assert result["error_type"] == "invalid_input"
        assert result["symbol"] == "AAPL"

    def test_json_serializable(self, make_series) -> None:
        """The response is plain JSON."""
        series = make_series([100.0 + (i % 5) for i in range(60)], spread=1.0)
        json.dumps(technicals(_bars(series)))


class TestScoreTool:
    """Tests for score_stock()."""

    def test_without_bars(self) -> None:
        """Momentum stays neutral and provenance warns."""
        fundamentals = {"pe": 8, "peg": 0.8, "roe": 0.28, "debt_to_equity": 0.2, "revenue_cagr_5y": 0.22}
        result = score_stock(fundamentals)

        assert result["scores"] == {
            "valuation": 80,
            "quality": 80,
            "growth": 70,
            "momentum": 50,
            "overall": 72,
        }
        assert [s["indicator"] for s in result["signals"]] == [
            "Valuation",
            "Quality",
            "Balance Sheet",
            "Growth",
        ]
        assert "no_price_history" in result["data_provenance"]["warnings"]

    def test_junk_values_ignored(self) -> None:
        """Non-numeric metrics are treated as absent."""
        result = score_stock({"pe": "n/a", "roe": None, "unknown": 5})

        assert result["scores"]["overall"] == 50
        assert result["data_provenance"]["fundamentals"]["fields_present"] == []
        assert "no_fundamentals" in result["data_provenance"]["warnings"]

    def test_bad_bar(self) -> None:
        """A bar missing a field is rejected."""
        result = score_stock({}, bars=[{"date": "2024-01-01", "close": 1.0}])

        assert result["error"] is True
        assert "missing" in result["message"]


class TestAnalyzeTool:
    """Tests for analyze_stock()."""

    def test_response_keys(self, make_series) -> None:
        """Full analysis payload."""
        series = make_series([100.0 + (i % 7) * 0.5 for i in range(60)], spread=1.0)
        result = analyze_stock(" aapl ", _bars(series), {"pe": 12})

        assert result["symbol"] == "AAPL"
        assert set(result) == {
            "meta",
            "data_provenance",
            "symbol",
            "technicals",
            "scores",
            "signals",
            "recommendation",
        }
        assert result["recommendation"]["rating"] in {
            "Strong Buy",
            "Buy",
            "Hold",
            "Sell",
            "Strong Sell",
        }
        assert 0 <= result["recommendation"]["confidence"] <= 100

    def test_fundamentals_only(self) -> None:
        """No bars means no technicals."""
        result = analyze_stock("MSFT", None, {"pe": 12})

        assert result["technicals"] is None
        assert result["scores"]["momentum"] == 50

    def test_blank_symbol(self) -> None:
        """Blank symbols are rejected."""
        result = analyze_stock("  ", None, None)

        assert result["error"] is True
        assert result["error_type"] == "invalid_input"

    def test_invalid_bars_logged(self, caplog) -> None:
        """Rejected bars are logged as a warning."""
        bars = [{"date": "not-a-date", "open": 1, "high": 1, "low": 1, "close": 1, "volume": 1}]
        with caplog.at_level(logging.WARNING, logger="stock_rating.tools.analyze"):
            result = analyze_stock("AAPL", bars, {})

        assert result["error"] is True
        assert result["symbol"] == "AAPL"
        assert "rejected input" in caplog.text


class TestMalformedInput:
    """Wrong container types are reported, not raised."""

    def test_bar_not_a_mapping(self) -> None:
        """A list where a bar dict belongs."""
        result = technicals([[1, 2, 3]])

        assert result["error"] is True
        assert result["error_type"] == "invalid_input"
        assert "mapping" in result["message"]

    def test_bars_not_a_list(self) -> None:
        """A string is not a list of bars."""
        result = technicals("AAPL")
        assert result["error_type"] == "invalid_input"

    def test_fundamentals_not_a_mapping(self) -> None:
        """A list where the fundamentals dict belongs."""
        result = score_stock([1, 2])

        assert result["error"] is True
        assert "mapping" in result["message"]

    def test_analyze_fundamentals_not_a_mapping(self) -> None:
        """Same for the full analysis."""
        result = analyze_stock("AAPL", None, [("pe", 12)])
        assert result["error_type"] == "invalid_input"


class TestSymbolNormalization:
    """All tools clean the symbol the same way."""

    def test_technicals(self, flat_series) -> None:
        """Lowercase and padded symbols are normalized."""
        assert technicals(_bars(flat_series), symbol=" aapl ")["symbol"] == "AAPL"

    def test_score(self) -> None:
        """Same for scoring."""
        assert score_stock({}, symbol="msft\n")["symbol"] == "MSFT"

    def test_optional_blank_symbol(self) -> None:
        """A blank optional symbol becomes None."""
        assert score_stock({}, symbol="   ")["symbol"] is None


class TestScreenTool:
    """Tests for screen_stock()."""

    def test_value_preset(self) -> None:
        """Cheap, profitable, low-debt stock passes the value screen."""
        fundamentals = {"pe": 8, "roe": 0.28, "debt_to_equity": 0.2, "market_cap": 3e11}
        result = screen_stock(" ko ", fundamentals, preset="Value")

        assert result["symbol"] == "KO"
        assert result["preset"] == "value"
        assert result["passes"] is True
        assert result["matched_filters"] == ["P/E <= 20", "ROE >= 10%", "D/E <= 1"]
        assert result["market_cap"] == 3e11
        assert result["criteria"]["max_pe"] == 20
        assert set(result["recommendation"]) == {"rating", "confidence", "summary"}

    def test_custom_filters(self) -> None:
        """Explicit filters instead of a preset."""
        result = screen_stock("XOM", {"debt_to_equity": 2.5}, filters={"max_debt_to_equity": 1.0})

        assert result["preset"] is None
        assert result["passes"] is False
        assert result["matched_filters"] == []

    def test_oversold_needs_prices(self, make_series) -> None:
        """Without bars the RSI filter is skipped; with a falling series it matches."""
        assert screen_stock("T", {}, preset="oversold")["matched_filters"] == []

        falling = make_series([100.0 - i for i in range(30)])
        result = screen_stock("T", {}, bars=_bars(falling), preset="oversold")
        assert result["passes"] is True
        assert result["matched_filters"] == ["RSI Oversold (<30)"]

    def test_preset_and_filters_conflict(self) -> None:
        """Only one source of criteria is allowed."""
        result = screen_stock("AAPL", {}, preset="value", filters={"max_pe": 10})
        assert result["error_type"] == "invalid_input"

    def test_no_criteria(self) -> None:
        """A preset or filters are required."""
        assert screen_stock("AAPL", {})["error"] is True

    def test_unknown_preset(self) -> None:
        """Unknown preset names are invalid input."""
        result = screen_stock("AAPL", {}, preset="momentum")

        assert result["error"] is True
        assert "Unknown preset" in result["message"]

    def test_blank_symbol(self) -> None:
        """Symbol is required."""
        assert screen_stock("", {}, preset="value")["error"] is True
