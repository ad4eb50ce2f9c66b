"""
Time Utilities

This module provides utilities for handling exchange timestamps.

LATOKEN reports timestamps in different units depending on the endpoint:
- Trade history: milliseconds since epoch (e.g., 1586301661310)
- Some order payloads: seconds since epoch
- Order book: milliseconds as a string (e.g., "1566359163123")

Canonical entities carry integer milliseconds plus an ISO 8601 string.
"""

import threading
import time
from datetime import datetime, timezone
from typing import Optional, Union


# 03 Jan 2009 (first bitcoin block). Anything earlier is assumed to be seconds.
FIRST_BLOCK_MS = 1230940800000


def to_utc_datetime(timestamp: Union[int, float]) -> datetime:
    """
    Convert a millisecond timestamp to a timezone-aware UTC datetime.

    Raises:
        ValueError: If timestamp is negative or invalid

    Example:
        >>> to_utc_datetime(1704110400000)
        datetime.datetime(2024, 1, 1, 12, 0, tzinfo=datetime.timezone.utc)
    """
    if timestamp < 0:
        raise ValueError(f"Timestamp cannot be negative: {timestamp}")

    try:
        return datetime.fromtimestamp(timestamp / 1000.0, tz=timezone.utc)
    except (OSError, OverflowError, ValueError) as e:
        raise ValueError(f"Invalid timestamp: {timestamp}. Error: {e}")


def normalize_milliseconds(timestamp: Optional[int]) -> Optional[int]:
    """
    Rescale a timestamp that predates 2009-01-03 from seconds to milliseconds.

    Examples:
        >>> normalize_milliseconds(1000000)
        1000000000
        >>> normalize_milliseconds(1586301661310)
        1586301661310
        >>> normalize_milliseconds(None) is None
        True
    """
    if timestamp is None:
        return None
    if timestamp < FIRST_BLOCK_MS:
        return timestamp * 1000
    return timestamp


def iso8601(timestamp: Optional[int]) -> Optional[str]:
    """
    Format a millisecond timestamp as ISO 8601 with millisecond precision.

    Example:
        >>> iso8601(1586301661310)
        '2020-04-07T23:21:01.310Z'
    """
    if timestamp is None:
        return None
    try:
        dt = to_utc_datetime(timestamp)
    except ValueError:
        return None
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{int(timestamp) % 1000:03d}Z"


def current_utc_timestamp(milliseconds: bool = False) -> int:
    """
    Get current UTC timestamp.

    Args:
        milliseconds: If True, return milliseconds; if False, return seconds
    """
    now = time.time()
    if milliseconds:
        return int(now * 1000)
    return int(now)


class NonceGenerator:
    """
    Millisecond clock that never goes backwards.

    Two calls inside the same millisecond, or a wall clock stepped back by NTP,
    return the previous value again instead of a smaller one.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._last = 0

    def __call__(self) -> int:
        with self._lock:
            now = current_utc_timestamp(milliseconds=True)
            if now < self._last:
                now = self._last
            self._last = now
            return now
