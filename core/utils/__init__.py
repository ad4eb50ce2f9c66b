"""
Core Utilities Package

This package contains utility functions and helpers used throughout the application.

Modules:
    - time: Timestamp conversion, ISO formatting and nonce generation
    - parsing: Lenient readers for exchange JSON fields
    - precision: Decimal-place rounding for prices and amounts
"""

from core.utils.time import to_utc_datetime, iso8601, NonceGenerator

__all__ = ["to_utc_datetime", "iso8601", "NonceGenerator"]
