"""Response metadata, input provenance and error responses."""

from typing import Any

from stock_rating import SCHEMA_VERSION, SERVER_VERSION
from stock_rating.models import FundamentalsSnapshot, PriceSeries


def build_meta(tool: str, duration_ms: float | None = None) -> dict[str, Any]:
    """
    Build standard metadata block for responses.

    Args:
        tool: Name of the tool producing this response
        duration_ms: Execution time in milliseconds (optional)

    Returns:
        Metadata dict with version info
    """
    meta: dict[str, Any] = {
        "server_version": SERVER_VERSION,
        "schema_version": SCHEMA_VERSION,
        "tool": tool,
    }
    if duration_ms is not None:
        meta["duration_ms"] = round(duration_ms, 1)
    return meta


def build_provenance(
    series: PriceSeries | None,
    fundamentals: FundamentalsSnapshot | None = None,
) -> dict[str, Any]:
    """
    Describe what the caller supplied, so consumers can tell which
    indicators were starved of history and which metrics were missing.
    """
    prov: dict[str, Any] = {"source": "caller", "warnings": []}

    if series is None:
        prov["price"] = None
        prov["warnings"].append("no_price_history")
    else:
        prov["price"] = {
            "bars": len(series),
            "first_bar_date": series[0].date.isoformat() if len(series) else None,
            "last_bar_date": series.last_date.isoformat() if len(series) else None,
        }
        if len(series) == 0:
            prov["warnings"].append("empty_price_history")

    if fundamentals is not None:
        present = fundamentals.present_fields()
        prov["fundamentals"] = {"fields_present": present}
        if not present:
            prov["warnings"].append("no_fundamentals")

    return prov


def build_error_response(
    error_type: str,
    message: str,
    symbol: str | None = None,
) -> dict[str, Any]:
    """
    Build standardized error response.

    Args:
        error_type: Type of error (invalid_input)
        message: Human-readable error message
        symbol: Symbol that caused the error (if applicable)

    Returns:
        Error response dict
    """
    response: dict[str, Any] = {
        "error": True,
        "error_type": error_type,
        "message": message,
        "meta": build_meta("error"),
    }

    if symbol is not None:
        response["symbol"] = symbol

    return response
