"""Validation utilities: nullable rule checks and numeric coercion."""

import math
import operator
import re
from collections.abc import Callable
from typing import Any


def check_rule(
    value: float | None,
    threshold: float,
    comparator: Callable[[float, float], bool] = operator.gt,
) -> bool | None:
    """
    Check a rule with nullable boolean semantics.

    If value is None, returns None (not False).

    Args:
        value: The value to check (may be None)
        threshold: The threshold to compare against
        comparator: Comparison function (default: operator.gt)

    Returns:
        True/False if value is not None, None otherwise
    """
    if value is None:
        return None
    return comparator(value, threshold)


def check_rule_expr(
    value1: float | None,
    value2: float | None,
    comparator: Callable[[float, float], bool] = operator.gt,
) -> bool | None:
    """
    Check a rule comparing two values with nullable boolean semantics.

    If either value is None, returns None (not False).
    """
    if value1 is None or value2 is None:
        return None
    return comparator(value1, value2)


def check_between(value: float | None, low: float, high: float) -> bool | None:
    """Inclusive range check with nullable semantics."""
    if value is None:
        return None
    return low <= value <= high


def safe_float(value: Any) -> float | None:
    """
    Coerce a raw value to float.

    None, booleans, non-numeric strings, NaN and +/-inf all become None so
    that a missing metric is never mistaken for zero.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer with halves going up (2.5 -> 3, -2.5 -> -2).

    Float noise from weighted sums (71.49999999999999) is squashed first.
    """
    return int(math.floor(round(value, 9) + 0.5))


def normalize_symbol(symbol: str | None) -> str | None:
    """Uppercase and strip a ticker; blank becomes None."""
    if symbol is None:
        return None
    # Drop control characters from untrusted input
    cleaned = re.sub(r"[\x00-\x1f\x7f-\x9f]", "", symbol).upper().strip()
    return cleaned or None
