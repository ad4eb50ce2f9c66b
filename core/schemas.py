"""
Normalized Data Schemas

This module defines Pydantic models for all canonical trading data types.
These schemas provide a unified, exchange-agnostic data format.

Key Principle:
    Whatever shape the exchange returns, it gets normalized into these
    standardized schemas so calling code works with one set of structures.

Models:
    - Currency: Asset listed on the exchange
    - Market: Tradable pair with precision and limits
    - Ticker: Last price snapshot with 24h change
    - OrderBook: Bids and asks at a point in time
    - Trade: Executed trade (public or own)
    - Order: Order state
    - Balance: Free/used/total funds per currency

Conventions:
    - timestamp: integer milliseconds since epoch (UTC)
    - datetime: the same instant as ISO 8601 ("2020-04-07T23:21:01.310Z")
    - info: raw exchange payload the entity was built from
    - Unknown numeric values are None, never NaN
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, field_validator, ConfigDict


# ============================================
# Base Model
# ============================================

class BaseExchangeModel(BaseModel):
    """
    Base model for all canonical entities.

    Carries the source exchange and the raw payload so that every entity can
    be traced back to what the exchange actually sent.
    """

    exchange: str = Field(
        default="latoken",
        description="Source exchange identifier (lowercase)",
        examples=["latoken"]
    )

    info: Optional[Any] = Field(
        None,
        description="Raw exchange payload"
    )

    model_config = ConfigDict(populate_by_name=True)

    @field_validator('exchange')
    @classmethod
    def validate_exchange(cls, v: str) -> str:
        """Ensure exchange is lowercase"""
        return v.lower()


class MinMax(BaseModel):
    min: Optional[float] = None
    max: Optional[float] = None


# ============================================
# Currency Schema
# ============================================

class Currency(BaseExchangeModel):
    """
    Currency (asset) listed on the exchange.

    Attributes:
        id: Exchange identifier (LATOKEN tag, e.g. "LA")
        code: Canonical code after alias resolution (e.g. "LA", "Monarch")
        name: Display name
        precision: Decimal places supported for amounts
        active: True if deposits/trading are enabled
    """

    id: str = Field(..., description="Exchange currency identifier")
    code: str = Field(..., description="Canonical currency code")
    name: Optional[str] = Field(None, description="Display name")
    precision: Optional[int] = Field(None, description="Amount decimal places")
    active: bool = Field(False, description="Currency status is active")
    fee: Optional[float] = Field(None, description="Withdrawal fee (not reported)")


# ============================================
# Market Schema
# ============================================

class MarketPrecision(BaseModel):
    price: Optional[int] = Field(None, description="Price decimal places")
    amount: Optional[int] = Field(None, description="Amount decimal places")


class MarketLimits(BaseModel):
    amount: MinMax = Field(default_factory=MinMax)
    price: MinMax = Field(default_factory=MinMax)
    cost: MinMax = Field(default_factory=MinMax)


class Market(BaseExchangeModel):
    """
    Tradable pair.

    Invariants:
        symbol == base + "/" + quote
        id == (base + "_" + quote).upper()

    Attributes:
        id: Exchange market id ("ETH_USDT")
        symbol: Unified symbol ("ETH/USDT")
        base / quote: Canonical currency codes
        base_id / quote_id: Exchange currency UUIDs
        numeric_id: Always None, the exchange has no numeric market ids
        active: True when pair status is PAIR_STATUS_ACTIVE
        precision: Price/amount decimal places
        limits: Min/max for amount, price and cost (cost never reported)
        maker / taker: Fee rates as decimals (0.001 = 0.1%)
    """

    id: str = Field(..., description="Exchange market id", examples=["ETH_USDT"])
    symbol: str = Field(..., description="Unified symbol", examples=["ETH/USDT"])
    base: str
    quote: str
    base_id: str = Field(..., alias="baseId")
    quote_id: str = Field(..., alias="quoteId")
    numeric_id: Optional[int] = Field(None, alias="numericId")
    active: bool = False
    precision: MarketPrecision = Field(default_factory=MarketPrecision)
    limits: MarketLimits = Field(default_factory=MarketLimits)
    maker: float = 0.001
    taker: float = 0.001

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "exchange": "latoken",
                "id": "ETH_USDT",
                "symbol": "ETH/USDT",
                "base": "ETH",
                "quote": "USDT",
                "baseId": "620f2019-33c0-423b-8a9d-cde4d7f8ef7f",
                "quoteId": "0c3a106d-bde3-4c13-a26e-3fd2394529e5",
                "active": True,
                "precision": {"price": 2, "amount": 4},
                "limits": {
                    "amount": {"min": 0.0001, "max": None},
                    "price": {"min": 0.01, "max": None},
                    "cost": {"min": None, "max": None}
                }
            }
        }
    )


# ============================================
# Ticker Schema
# ============================================

class Ticker(BaseExchangeModel):
    """
    Last price snapshot.

    Notes:
        - timestamp is when the snapshot was captured locally; the exchange
          does not report one
        - bid is always 0 and ask mirrors the last price, the exchange only
          exposes a last price
        - change = close + close * percentage when percentage != 0, else 0
    """

    symbol: Optional[str] = None
    timestamp: int
    datetime: Optional[str] = None
    high: Optional[float] = None
    low: Optional[float] = None
    bid: float = 0.0
    bid_volume: Optional[float] = Field(None, alias="bidVolume")
    ask: float = 0.0
    ask_volume: Optional[float] = Field(None, alias="askVolume")
    vwap: Optional[float] = None
    open: Optional[float] = None
    close: float = 0.0
    last: float = 0.0
    previous_close: Optional[float] = Field(None, alias="previousClose")
    change: float = 0.0
    percentage: float = 0.0
    average: Optional[float] = None
    base_volume: Optional[float] = Field(None, alias="baseVolume")
    quote_volume: Optional[float] = Field(None, alias="quoteVolume")


# ============================================
# Order Book Schema
# ============================================

class OrderBook(BaseExchangeModel):
    """
    Order book snapshot.

    bids are sorted by price descending, asks ascending. Each level is
    [price, amount].
    """

    symbol: Optional[str] = None
    bids: List[List[float]] = Field(default_factory=list)
    asks: List[List[float]] = Field(default_factory=list)
    timestamp: Optional[int] = None
    datetime: Optional[str] = None
    nonce: Optional[int] = None


# ============================================
# Trade Schema
# ============================================

class Fee(BaseModel):
    cost: Optional[float] = None
    currency: Optional[str] = None
    rate: Optional[float] = None
    type: Optional[str] = None


class Trade(BaseExchangeModel):
    """
    Executed trade.

    Attributes:
        side: "buy" or "sell"
        taker_or_maker: "taker" or "maker"
        cost: price * amount when both are known
        fee: Fee cost with currency left unset (the exchange omits it)
    """

    id: Optional[str] = None
    order: Optional[str] = None
    timestamp: Optional[int] = None
    datetime: Optional[str] = None
    symbol: Optional[str] = None
    type: Optional[str] = None
    side: Optional[str] = None
    taker_or_maker: Optional[str] = Field(None, alias="takerOrMaker")
    price: Optional[float] = None
    amount: Optional[float] = None
    cost: Optional[float] = None
    fee: Optional[Fee] = None


# ============================================
# Order Schema
# ============================================

class Order(BaseExchangeModel):
    """
    Order state.

    Attributes:
        status: "open", "closed", "canceled", or the raw (lowercased) status
                when the exchange reports one that has no canonical mapping
        remaining: amount - filled
        cost: filled * price
    """

    id: Optional[str] = None
    client_order_id: Optional[str] = Field(None, alias="clientOrderId")
    timestamp: Optional[int] = None
    datetime: Optional[str] = None
    last_trade_timestamp: Optional[int] = Field(None, alias="lastTradeTimestamp")
    status: Optional[str] = None
    symbol: Optional[str] = None
    type: Optional[str] = None
    side: Optional[str] = None
    price: Optional[float] = None
    amount: Optional[float] = None
    filled: Optional[float] = None
    remaining: Optional[float] = None
    cost: Optional[float] = None
    average: Optional[float] = None
    fee: Optional[Fee] = None
    trades: Optional[List[Trade]] = None


# ============================================
# Balance Schema
# ============================================

class BalanceEntry(BaseModel):
    free: Optional[float] = None
    used: Optional[float] = None
    total: Optional[float] = None


class Balance(BaseExchangeModel):
    """
    Account balances keyed by canonical currency code.

    Example:
        >>> balance["ETH"].free
        898849.33
        >>> balance.total["ETH"]
        903431.281
    """

    timestamp: Optional[int] = None
    datetime: Optional[str] = None
    balances: Dict[str, BalanceEntry] = Field(default_factory=dict)

    def __getitem__(self, code: str) -> BalanceEntry:
        return self.balances[code]

    def __contains__(self, code: str) -> bool:
        return code in self.balances

    @property
    def free(self) -> Dict[str, Optional[float]]:
        return {code: entry.free for code, entry in self.balances.items()}

    @property
    def used(self) -> Dict[str, Optional[float]]:
        return {code: entry.used for code, entry in self.balances.items()}

    @property
    def total(self) -> Dict[str, Optional[float]]:
        return {code: entry.total for code, entry in self.balances.items()}
