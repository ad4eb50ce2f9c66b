"""
Exchange Interface: Abstract Contract for Spot Exchange Connectors

This module defines the abstract base class every exchange connector implements.
By enforcing a consistent interface, we ensure:
- All connectors expose the same methods and canonical entities
- Calling code works against the interface, not a specific exchange
- Graceful handling of unsupported features via the `has` dict

The base class also owns the market registry: `load_markets()` fetches the
markets once and keeps them indexed by unified symbol and by exchange id.
Connectors only read from the registry; callers that need fresh data use
`load_markets(reload=True)`.

Capabilities System:
    Each exchange declares which operations it supports via the `has` dict.

    Example:
        has = {
            "fetchTicker": True,
            "fetchOHLCV": False,  # Not supported by this exchange
        }
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from core.errors import BadSymbol
from core.schemas import Balance, Currency, Market, Order, OrderBook, Ticker, Trade


class ExchangeInterface(ABC):
    """
    Abstract Base Class for Exchange Connectors

    Class Attributes:
        id: Unique identifier for the exchange (lowercase, e.g. "latoken")
        name: Display name
        has: Dictionary indicating which operations this exchange supports

    Abstract Methods (MUST be implemented by all exchanges):
        - fetch_markets, fetch_currencies
        - fetch_ticker, fetch_tickers, fetch_order_book, fetch_trades
        - fetch_balance, create_order, cancel_order, fetch_order

    Optional Methods (can be overridden):
        - initialize, shutdown, health_check
        - fetch_time, fetch_orders, fetch_open_orders, fetch_closed_orders,
          fetch_canceled_orders, fetch_my_trades
    """

    # ============================================
    # Class Attributes (must be set by subclasses)
    # ============================================

    id: str
    """Unique exchange identifier (lowercase). Example: "latoken" """

    name: str = ""

    has: Dict[str, bool] = {
        "fetchMarkets": True,
        "fetchCurrencies": False,
        "fetchTicker": False,
        "fetchTickers": False,
        "fetchOrderBook": False,
        "fetchTrades": False,
        "fetchBalance": False,
        "createOrder": False,
        "cancelOrder": False,
        "fetchOrder": False,
    }
    """Dictionary indicating which operations this exchange supports"""

    def __init__(self):
        self.markets: Dict[str, Market] = {}
        self.markets_by_id: Dict[str, Market] = {}
        self.symbols: List[str] = []
        self._markets_lock = asyncio.Lock()

    # ============================================
    # Market Registry
    # ============================================

    async def load_markets(self, reload: bool = False) -> Dict[str, Market]:
        """
        Fetch markets once and index them by symbol and exchange id.

        Concurrent callers wait on the same fetch instead of issuing their own.

        Args:
            reload: Force a refetch even when markets are already loaded

        Returns:
            Dict mapping unified symbol -> Market
        """
        async with self._markets_lock:
            if self.markets and not reload:
                return self.markets
            markets = await self.fetch_markets()
            self.set_markets(markets)
            return self.markets

    def set_markets(self, markets: List[Market]) -> None:
        """Replace the registry with a new snapshot"""
        self.markets = {market.symbol: market for market in markets}
        self.markets_by_id = {market.id: market for market in markets}
        self.symbols = sorted(self.markets.keys())

    def market(self, symbol: str) -> Market:
        """
        Look up a loaded market by unified symbol or exchange id.

        Raises:
            BadSymbol: If markets are not loaded or the symbol is unknown
        """
        if not self.markets:
            raise BadSymbol(f"{self.id} markets not loaded")
        if symbol in self.markets:
            return self.markets[symbol]
        if symbol in self.markets_by_id:
            return self.markets_by_id[symbol]
        raise BadSymbol(f"{self.id} does not have market symbol {symbol}")

    def market_id(self, symbol: str) -> str:
        return self.market(symbol).id

    def supports(self, feature: str) -> bool:
        """
        Check if this exchange supports a specific operation.

        Example:
            >>> exchange.supports("fetchOHLCV")
            False
        """
        return self.has.get(feature, False)

    # ============================================
    # Public Market Data
    # ============================================

    @abstractmethod
    async def fetch_markets(self) -> List[Market]:
        """
        Fetch all tradable pairs normalized to Market.

        Markets whose data cannot be normalized are skipped (and logged),
        the rest of the batch is returned.
        """
        ...

    @abstractmethod
    async def fetch_currencies(self) -> Dict[str, Currency]:
        """Fetch listed currencies keyed by canonical code"""
        ...

    @abstractmethod
    async def fetch_ticker(self, symbol: str) -> Ticker:
        ...

    @abstractmethod
    async def fetch_tickers(self, symbols: Optional[List[str]] = None) -> Dict[str, Ticker]:
        ...

    @abstractmethod
    async def fetch_order_book(self, symbol: str, limit: Optional[int] = None) -> OrderBook:
        ...

    @abstractmethod
    async def fetch_trades(
        self,
        symbol: str,
        since: Optional[int] = None,
        limit: Optional[int] = None
    ) -> List[Trade]:
        """
        Fetch recent public trades.

        Args:
            symbol: Unified symbol (e.g. "ETH/USDT")
            since: Only return trades at or after this millisecond timestamp
            limit: Maximum number of trades (exchange-specific cap)
        """
        ...

    async def fetch_time(self) -> Optional[int]:
        """Exchange server time in milliseconds"""
        raise NotImplementedError(f"{self.id} does not support fetch_time")

    # ============================================
    # Private Account / Trading
    # ============================================

    @abstractmethod
    async def fetch_balance(self) -> Balance:
        ...

    @abstractmethod
    async def create_order(
        self,
        symbol: str,
        type: str,
        side: str,
        amount: float,
        price: Optional[float] = None
    ) -> Order:
        ...

    @abstractmethod
    async def cancel_order(self, id: str, symbol: Optional[str] = None) -> Order:
        ...

    @abstractmethod
    async def fetch_order(self, id: str, symbol: Optional[str] = None) -> Order:
        ...

    async def fetch_orders(
        self,
        symbol: Optional[str] = None,
        since: Optional[int] = None,
        limit: Optional[int] = None
    ) -> List[Order]:
        raise NotImplementedError(f"{self.id} does not support fetch_orders")

    async def fetch_open_orders(
        self,
        symbol: Optional[str] = None,
        since: Optional[int] = None,
        limit: Optional[int] = None
    ) -> List[Order]:
        raise NotImplementedError(f"{self.id} does not support fetch_open_orders")

    async def fetch_closed_orders(
        self,
        symbol: Optional[str] = None,
        since: Optional[int] = None,
        limit: Optional[int] = None
    ) -> List[Order]:
        raise NotImplementedError(f"{self.id} does not support fetch_closed_orders")

    async def fetch_canceled_orders(
        self,
        symbol: Optional[str] = None,
        since: Optional[int] = None,
        limit: Optional[int] = None
    ) -> List[Order]:
        raise NotImplementedError(f"{self.id} does not support fetch_canceled_orders")

    async def fetch_my_trades(
        self,
        symbol: Optional[str] = None,
        since: Optional[int] = None,
        limit: Optional[int] = None
    ) -> List[Trade]:
        raise NotImplementedError(f"{self.id} does not support fetch_my_trades")

    # ============================================
    # Optional Lifecycle Methods
    # ============================================

    async def initialize(self) -> None:
        """
        Initialize the exchange connector.

        Use it to set up HTTP sessions and preload markets. Default does nothing.
        Should be idempotent (safe to call multiple times).
        """
        pass

    async def shutdown(self) -> None:
        """
        Shutdown the exchange connector and cleanup resources.

        Should handle errors gracefully (don't raise exceptions).
        """
        pass

    async def health_check(self) -> bool:
        """
        Check if the exchange API is accessible and healthy.

        Default implementation tries fetch_time().
        """
        try:
            return await self.fetch_time() is not None
        except Exception:
            return False

    # ============================================
    # Utility Methods
    # ============================================

    def __repr__(self) -> str:
        """String representation of the exchange"""
        supported = [k for k, v in self.has.items() if v]
        return f"<{self.__class__.__name__}(id='{self.id}', supports={supported})>"
