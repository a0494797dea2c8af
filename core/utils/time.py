"""
Time Utilities

This module provides utilities for handling timestamps from different exchanges.

Different exchanges return timestamps in different formats:
- Binance: milliseconds since epoch as a JSON number (e.g., 1704110400000)
- OKX / Bybit: milliseconds since epoch as a string (e.g., "1704110400000")
- We need: Python datetime objects in UTC

The utilities in this module normalize all timestamp formats into
consistent UTC datetime objects for use in our Pydantic schemas.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Union

# Perpetual funding settles every 8 hours on all supported venues
FUNDING_INTERVAL = timedelta(hours=8)


def to_utc_datetime(timestamp: Union[int, float]) -> datetime:
    """
    Convert a timestamp (seconds or milliseconds) to UTC datetime.

    Detection Logic:
        - If timestamp > 1e12 (1 trillion): Assumed to be milliseconds
        - Otherwise: Assumed to be seconds

    Args:
        timestamp: Unix timestamp in seconds or milliseconds

    Returns:
        datetime: Timezone-aware datetime object in UTC

    Raises:
        ValueError: If timestamp is negative or invalid

    Examples:
        >>> to_utc_datetime(1704110400000)
        datetime.datetime(2024, 1, 1, 12, 0, tzinfo=datetime.timezone.utc)

        >>> to_utc_datetime(1704110400)
        datetime.datetime(2024, 1, 1, 12, 0, tzinfo=datetime.timezone.utc)
    """
    if timestamp < 0:
        raise ValueError(f"Timestamp cannot be negative: {timestamp}")

    # Current time in seconds: ~1.7 billion, in milliseconds: ~1.7 trillion
    if timestamp > 1e12:
        timestamp = timestamp / 1000.0

    try:
        return datetime.fromtimestamp(timestamp, tz=timezone.utc)
    except (OSError, OverflowError, ValueError) as e:
        raise ValueError(f"Invalid timestamp: {timestamp}. Error: {e}")


def parse_settlement_time(raw: Any) -> datetime:
    """
    Parse a venue's next-funding timestamp, falling back to now + 8h.

    Args:
        raw: Millisecond timestamp as int or numeric string, or None

    Returns:
        datetime: Next settlement time in UTC

    Example:
        >>> parse_settlement_time("1704110400000")
        datetime.datetime(2024, 1, 1, 12, 0, tzinfo=datetime.timezone.utc)
        >>> parse_settlement_time(None)  # now + 8h
    """
    try:
        timestamp = int(raw)
        if timestamp > 0:
            return to_utc_datetime(timestamp)
    except (TypeError, ValueError):
        pass

    return current_utc_datetime() + FUNDING_INTERVAL


def datetime_to_timestamp(dt: datetime, milliseconds: bool = False) -> int:
    """
    Convert a datetime object to Unix timestamp.

    Args:
        dt: Datetime object (can be naive or timezone-aware)
        milliseconds: If True, return milliseconds; if False, return seconds

    Returns:
        int: Unix timestamp in seconds or milliseconds

    Notes:
        - If datetime is naive (no timezone), UTC is assumed
        - Result is always an integer (fractional seconds are truncated)
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)

    timestamp = int(dt.timestamp())

    if milliseconds:
        timestamp *= 1000

    return timestamp


def current_utc_timestamp(milliseconds: bool = False) -> int:
    """
    Get current UTC timestamp.

    Examples:
        >>> current_utc_timestamp()
        1704110400

        >>> current_utc_timestamp(milliseconds=True)
        1704110400000
    """
    return datetime_to_timestamp(datetime.now(timezone.utc), milliseconds)


def current_utc_datetime() -> datetime:
    """Get current time as a timezone-aware datetime in UTC."""
    return datetime.now(timezone.utc)
