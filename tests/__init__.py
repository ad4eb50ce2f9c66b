"""
Test Suite

Contains unit tests for the LATOKEN connector.

Structure:
- tests/unit/: Tests for individual components (signing, error mapping,
  normalization, transport, connector methods, HTTP surface)

Uses pytest with pytest-asyncio for testing async functionality.
All HTTP traffic is faked; no test talks to the real exchange.
"""
