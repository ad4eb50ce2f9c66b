"""
Core Package

Contains the exchange-agnostic core logic including:
- ExchangeInterface: Abstract base class defining the contract for exchange connectors,
  plus the market registry it owns
- Schemas: Pydantic models for canonical entities (Market, Ticker, Trade, Order, ...)
- Errors: Typed exception taxonomy shared by all connectors
- Config and logging used throughout the application
"""
