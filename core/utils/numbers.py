"""
Numeric Parsing Utilities

Exchanges return prices and rates as strings ("67012.5", "0.0001", "") and
occasionally omit them. Normalization never fails on a bad number: the field
falls back to a default and is reported as degraded so callers can tell a
real zero from a value that could not be read.
"""

import math
from typing import Any, NamedTuple


class ParsedFloat(NamedTuple):
    """Result of a best-effort float parse."""

    value: float
    degraded: bool


def safe_float(raw: Any, default: float = 0.0) -> ParsedFloat:
    """
    Parse a venue numeric field without raising.

    Args:
        raw: String, int, float or None as found in the payload
        default: Value used when the field is missing or unparseable

    Returns:
        ParsedFloat: (value, degraded). degraded is True when the default was used.

    Examples:
        >>> safe_float("101.5")
        ParsedFloat(value=101.5, degraded=False)
        >>> safe_float("abc")
        ParsedFloat(value=0.0, degraded=True)
        >>> safe_float(None)
        ParsedFloat(value=0.0, degraded=True)

    Notes:
        - Booleans are rejected (JSON true/false is never a price)
        - NaN and infinity count as parse failures
    """
    if raw is None or isinstance(raw, bool):
        return ParsedFloat(default, True)

    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return ParsedFloat(default, True)

    try:
        value = float(raw)
    except (TypeError, ValueError):
        return ParsedFloat(default, True)

    if not math.isfinite(value):
        return ParsedFloat(default, True)

    return ParsedFloat(value, False)


def safe_price(raw: Any) -> ParsedFloat:
    """
    Parse a price field. Negative prices are treated as unreadable.

    Example:
        >>> safe_price("-3")
        ParsedFloat(value=0.0, degraded=True)
    """
    parsed = safe_float(raw)
    if parsed.value < 0:
        return ParsedFloat(0.0, True)
    return parsed
