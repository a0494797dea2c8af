"""
Core Utilities Package

This package contains utility functions and helpers used throughout the application.

Modules:
    - time: Timestamp conversion and normalization utilities
    - numbers: Best-effort numeric parsing for venue payloads
"""

from core.utils.numbers import ParsedFloat, safe_float, safe_price
from core.utils.time import to_utc_datetime, parse_settlement_time

__all__ = ["ParsedFloat", "safe_float", "safe_price", "to_utc_datetime", "parse_settlement_time"]
