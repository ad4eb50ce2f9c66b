"""
LATOKEN Exchange Connector

This module implements the ExchangeInterface for the LATOKEN spot exchange.

API Documentation:
    https://api.latoken.com/doc/v2/

Endpoints Used:
    Public:
        - GET /v2/time
        - GET /v2/pair, GET /v2/currency, GET /v2/currency/available
        - GET /v2/marketOverview/orderbook/{market_pair}
        - GET /v2/ticker, GET /v2/ticker/{base}/{quote}
        - GET /v2/trade/history/{currency}/{quote}

    Private (signed, see signer.py):
        - GET /v2/auth/account
        - GET /v2/auth/trade/pair/{currency}/{quote}
        - GET /v2/auth/order/pair/{currency}/{quote}[/active]
        - GET /v2/auth/order/getOrder/{id}
        - POST /v2/auth/order/place, POST /v2/auth/order/cancel

Structure:
    exchanges/latoken/
    ├── __init__.py          # This file (LatokenExchange class)
    ├── api_client.py        # aiohttp transport with retries
    ├── signer.py            # URL building and HMAC signing
    ├── error_classifier.py  # Message -> typed exception mapping
    ├── currencies.py        # Currency UUID -> code resolution
    ├── markets.py           # Pair listing -> Market registry
    └── parsers.py           # Raw payload -> canonical entities
"""

from typing import Any, Dict, List, Optional, Tuple

from core.config import settings
from core.errors import ArgumentError, BadRequest, ExchangeError
from core.exchange_interface import ExchangeInterface
from core.logging import logger
from core.schemas import Balance, Currency, Fee, Market, Order, OrderBook, Ticker, Trade
from core.utils.parsing import safe_integer, safe_string, safe_value
from core.utils.precision import ROUND, TRUNCATE, decimal_to_precision
from core.utils.time import NonceGenerator, iso8601
from .api_client import LatokenAPIClient
from .currencies import parse_currency
from .markets import build_markets
from .parsers import (
    is_success, parse_balance, parse_order, parse_order_book, parse_order_status,
    parse_orders, parse_ticker, parse_tickers_filter, parse_trades
)

MAX_ORDERBOOK_DEPTH = 500
MAX_TRADES_LIMIT = 100
DEFAULT_ORDERS_LIMIT = 100
ORDER_TYPES = ("limit", "market")
ORDER_SIDES = ("buy", "sell")


class LatokenExchange(ExchangeInterface):
    """
    LATOKEN Spot Exchange Connector

    Example:
        >>> exchange = LatokenExchange()
        >>> await exchange.initialize()
        >>> ticker = await exchange.fetch_ticker("ETH/USDT")
        >>> print(ticker.last)
        >>> await exchange.shutdown()

    Notes:
        - Markets are loaded once in initialize() and reused
        - Private methods need LATOKEN_API_KEY / LATOKEN_SECRET_KEY
        - Symbol-scoped methods validate their arguments before any request
    """

    # ============================================
    # Class Attributes
    # ============================================

    id = "latoken"
    name = "Latoken"

    has = {
        "fetchMarkets": True,
        "fetchCurrencies": True,
        "fetchTime": True,
        "fetchTicker": True,
        "fetchTickers": True,
        "fetchOrderBook": True,
        "fetchTrades": True,
        "fetchMyTrades": True,
        "fetchBalance": True,
        "createOrder": True,
        "createMarketOrder": False,
        "cancelOrder": True,
        "cancelAllOrders": False,
        "fetchOrder": True,
        "fetchOrders": True,
        "fetchOpenOrders": True,
        "fetchClosedOrders": True,
        "fetchCanceledOrders": True,
        "fetchOrdersByStatus": True,
        "fetchOHLCV": False,
    }

    # ============================================
    # Initialization
    # ============================================

    def __init__(self, client: Optional[LatokenAPIClient] = None):
        """
        Create the connector.

        Args:
            client: Pre-built API client (mostly for tests). When None, one is
                    created from settings in initialize().
        """
        super().__init__()
        self.client = client
        self._owns_client = client is None
        self.nonce = NonceGenerator()
        self.markets_by_currency_ids: Dict[Tuple[str, str], Market] = {}
        logger.debug(f"LatokenExchange created (base_url={settings.latoken_base_url})")

    async def initialize(self) -> None:
        """
        Open the HTTP session and load markets.
        """
        logger.info("Initializing LATOKEN exchange connector...")
        await self._ensure_client()
        await self.load_markets()
        logger.info(f"✓ LATOKEN exchange connector initialized ({len(self.markets)} markets)")

    async def shutdown(self) -> None:
        """
        Close the HTTP session if this connector created it.
        """
        logger.info("Shutting down LATOKEN exchange connector...")
        if self.client is not None and self._owns_client:
            try:
                await self.client.__aexit__(None, None, None)
            except Exception as e:
                logger.error(f"Error closing LATOKEN API client: {e}")
            self.client = None
        logger.info("✓ LATOKEN exchange connector shut down")

    async def _ensure_client(self) -> LatokenAPIClient:
        if self.client is None:
            self.client = LatokenAPIClient()
            self._owns_client = True
        if self.client.session is None:
            await self.client.__aenter__()
        return self.client

    async def _request(
        self,
        path: str,
        api: str = "public",
        method: str = "GET",
        params: Optional[Dict[str, Any]] = None
    ) -> Any:
        client = await self._ensure_client()
        return await client.request(path, api=api, method=method, params=params)

    # ============================================
    # Market Registry
    # ============================================

    def set_markets(self, markets: List[Market]) -> None:
        super().set_markets(markets)
        self.markets_by_currency_ids = {(m.base_id, m.quote_id): m for m in markets}

    def market_for_currencies(self, base_id: Optional[str], quote_id: Optional[str]) -> Optional[Market]:
        """Find a loaded market by its base/quote currency UUIDs"""
        return self.markets_by_currency_ids.get((base_id, quote_id))

    def _require_symbol(self, symbol: Optional[str], method: str) -> str:
        if symbol is None:
            raise ArgumentError(f"{self.id} {method} requires a symbol argument")
        return symbol

    # ============================================
    # Public Market Data
    # ============================================

    async def fetch_time(self) -> Optional[int]:
        """
        Exchange server time in milliseconds.

        Raw:
            {
              "time": "2019-04-18T9:00:00.0Z",
              "unixTimeSeconds": 1555578000,
              "unixTimeMiliseconds": 1555578000000
            }
        """
        response = await self._request("time")
        millis = safe_integer(response, "serverTime") or safe_integer(response, "unixTimeMiliseconds")
        if millis is not None:
            return millis
        seconds = safe_integer(response, "unixTimeSeconds")
        return seconds * 1000 if seconds is not None else None

    async def fetch_markets(self) -> List[Market]:
        """
        Fetch pairs and currencies, then normalize them into markets.

        Issues GET pair followed by GET currency.
        """
        pairs = await self._request("pair")
        currencies = await self._request("currency")
        markets = build_markets(pairs or [], currencies or [])
        logger.info(f"Fetched {len(markets)} LATOKEN markets")
        return markets

    async def fetch_currencies(self) -> Dict[str, Currency]:
        response = await self._request("currency/available")
        result: Dict[str, Currency] = {}
        for raw in response or []:
            currency = parse_currency(raw)
            if currency is not None:
                result[currency.code] = currency
        return result

    async def fetch_ticker(self, symbol: str) -> Ticker:
        self._require_symbol(symbol, "fetch_ticker")
        await self.load_markets()
        market = self.market(symbol)
        base, _, quote = market.id.partition("_")
        response = await self._request("ticker/{base}/{quote}", params={"base": base, "quote": quote})
        return parse_ticker(response, market.symbol, market)

    async def fetch_tickers(self, symbols: Optional[List[str]] = None) -> Dict[str, Ticker]:
        await self.load_markets()
        response = await self._request("ticker")
        result: Dict[str, Ticker] = {}
        for raw in response or []:
            ticker = parse_ticker(raw, safe_string(raw, "symbol"))
            if ticker.symbol is not None:
                result[ticker.symbol] = ticker
        return parse_tickers_filter(result, symbols)

    async def fetch_order_book(self, symbol: str, limit: Optional[int] = None) -> OrderBook:
        """
        Args:
            symbol: Unified symbol
            limit: Depth (default from settings, clamped to 1..500)
        """
        self._require_symbol(symbol, "fetch_order_book")
        await self.load_markets()
        market = self.market(symbol)
        depth = settings.orderbook_default_depth if limit is None else max(1, min(limit, MAX_ORDERBOOK_DEPTH))
        response = await self._request(
            "marketOverview/orderbook/{market_pair}",
            params={"market_pair": market.id, "depth": depth},
        )
        return parse_order_book(response, market.symbol)

    async def fetch_trades(
        self,
        symbol: str,
        since: Optional[int] = None,
        limit: Optional[int] = None
    ) -> List[Trade]:
        self._require_symbol(symbol, "fetch_trades")
        await self.load_markets()
        market = self.market(symbol)
        request: Dict[str, Any] = {
            "currency": market.base,
            "quote": market.quote,
            "limit": settings.trades_default_limit if limit is None else max(1, min(limit, MAX_TRADES_LIMIT)),
        }
        response = await self._request("trade/history/{currency}/{quote}", params=request)
        return parse_trades(response or [], market, since, limit)

    # ============================================
    # Private Account Data
    # ============================================

    async def fetch_balance(self) -> Balance:
        """
        Fetch balances: GET auth/account, then GET currency/available to
        resolve the account currency UUIDs.
        """
        accounts = await self._request("auth/account", api="private")
        currencies = await self._request("currency/available")
        return parse_balance(accounts or [], currencies or [])

    async def fetch_my_trades(
        self,
        symbol: Optional[str] = None,
        since: Optional[int] = None,
        limit: Optional[int] = None
    ) -> List[Trade]:
        self._require_symbol(symbol, "fetch_my_trades")
        await self.load_markets()
        market = self.market(symbol)
        response = await self._request(
            "auth/trade/pair/{currency}/{quote}",
            api="private",
            params={"currency": market.base, "quote": market.quote},
        )
        return parse_trades(response or [], market, since, limit)

    # ============================================
    # Orders
    # ============================================

    def _order_market(self, raw: Any, symbol: Optional[str] = None) -> Optional[Market]:
        if symbol is not None:
            return self.market(symbol)
        return self.market_for_currencies(
            safe_string(raw, "baseCurrency"),
            safe_string(raw, "quoteCurrency"),
        )

    async def fetch_order(self, id: str, symbol: Optional[str] = None) -> Order:
        """
        Fetch one order by id.

        The symbol is optional: without it, the market is found from the
        order's base/quote currency UUIDs.
        """
        if not id:
            raise ArgumentError(f"{self.id} fetch_order requires an id argument")
        await self.load_markets()
        market = self.market(symbol) if symbol is not None else None
        response = await self._request("auth/order/getOrder/{id}", api="private", params={"id": id})
        return parse_order(response, market or self._order_market(response))

    async def _fetch_pair_orders(self, market: Market, limit: Optional[int]) -> List[Dict[str, Any]]:
        request = {
            "currency": market.base_id,
            "quote": market.quote_id,
            "limit": DEFAULT_ORDERS_LIMIT if limit is None else limit,
        }
        response = await self._request("auth/order/pair/{currency}/{quote}", api="private", params=request)
        return response or []

    async def fetch_orders(
        self,
        symbol: Optional[str] = None,
        since: Optional[int] = None,
        limit: Optional[int] = None
    ) -> List[Order]:
        self._require_symbol(symbol, "fetch_orders")
        await self.load_markets()
        market = self.market(symbol)
        raw_orders = await self._fetch_pair_orders(market, limit)
        return parse_orders(raw_orders, market, since)

    async def fetch_open_orders(
        self,
        symbol: Optional[str] = None,
        since: Optional[int] = None,
        limit: Optional[int] = None
    ) -> List[Order]:
        self._require_symbol(symbol, "fetch_open_orders")
        await self.load_markets()
        market = self.market(symbol)
        response = await self._request(
            "auth/order/pair/{currency}/{quote}/active",
            api="private",
            params={"currency": market.base_id, "quote": market.quote_id},
        )
        return parse_orders(response or [], market, since, limit)

    async def fetch_orders_by_status(
        self,
        status: str,
        symbol: Optional[str] = None,
        since: Optional[int] = None,
        limit: Optional[int] = None
    ) -> List[Order]:
        """
        Fetch the pair's orders and keep those whose canonical status equals
        the canonical form of `status` (e.g. "filled" -> "closed").
        """
        self._require_symbol(symbol, "fetch_orders_by_status")
        await self.load_markets()
        market = self.market(symbol)
        wanted = parse_order_status(status)
        raw_orders = await self._fetch_pair_orders(market, limit)
        orders = parse_orders(raw_orders, market, since)
        return [order for order in orders if order.status == wanted]

    async def fetch_closed_orders(
        self,
        symbol: Optional[str] = None,
        since: Optional[int] = None,
        limit: Optional[int] = None
    ) -> List[Order]:
        return await self.fetch_orders_by_status("filled", symbol, since, limit)

    async def fetch_canceled_orders(
        self,
        symbol: Optional[str] = None,
        since: Optional[int] = None,
        limit: Optional[int] = None
    ) -> List[Order]:
        return await self.fetch_orders_by_status("cancelled", symbol, since, limit)

    async def create_order(
        self,
        symbol: str,
        type: str,
        side: str,
        amount: float,
        price: Optional[float] = None,
        params: Optional[Dict[str, Any]] = None
    ) -> Order:
        """
        Place an order.

        Payload sent to POST auth/order/place:
            {
              "type": "limit",
              "side": "buy",
              "condition": "GTC",
              "baseCurrency": "f7dac554-8139-4ff6-841f-0e586a5984a0",
              "quoteCurrency": "a5a7a7a9-e2a3-43f9-8754-29a02f6b709b",
              "price": "10103.19",
              "quantity": "3.21",
              "timestamp": 1568185507000
            }

        Args:
            params: Extra fields merged over the payload

        Raises:
            ExchangeError: If type is not "limit" or "market" (before any request)
            ArgumentError: Missing symbol, bad side, non-positive amount, or a
                           limit order without price (before any request)
            BadRequest: If the exchange does not answer with status SUCCESS
        """
        if type not in ORDER_TYPES:
            raise ExchangeError(f"{self.id} allows limit or market orders only")
        self._require_symbol(symbol, "create_order")
        if side not in ORDER_SIDES:
            raise ArgumentError(f"{self.id} create_order side must be 'buy' or 'sell', got {side!r}")
        if amount is None or amount <= 0:
            raise ArgumentError(f"{self.id} create_order requires a positive amount")
        if type == "limit" and price is None:
            raise ArgumentError(f"{self.id} create_order requires a price for limit orders")

        await self.load_markets()
        market = self.market(symbol)
        request: Dict[str, Any] = {
            "type": type,
            "side": side,
            "condition": "GTC",
            "baseCurrency": market.base_id,
            "quoteCurrency": market.quote_id,
        }
        if price is not None:
            request["price"] = self.price_to_precision(symbol, price)
        request["quantity"] = self.amount_to_precision(symbol, amount)
        request["timestamp"] = self.nonce()
        request.update(params or {})

        response = await self._request("auth/order/place", api="private", method="POST", params=request)
        if not is_success(response):
            raise BadRequest(f"{self.id} Exchange responded with: {safe_value(response, 'error')}", response)

        timestamp = request["timestamp"]
        logger.info(f"Placed {type} {side} order on {market.symbol}: {safe_string(response, 'id')}")
        return Order(
            id=safe_string(response, "id"),
            timestamp=timestamp,
            datetime=iso8601(timestamp),
            status="open",
            symbol=market.symbol,
            type=type,
            side=side,
            price=price,
            amount=amount,
            remaining=amount,
            info=response,
        )

    async def cancel_order(self, id: str, symbol: Optional[str] = None) -> Order:
        """
        Cancel an order, then fetch it again to report its final state.

        Raises:
            BadRequest: If the exchange does not answer with status SUCCESS
            OrderNotFound: If the exchange does not know the order
        """
        if not id:
            raise ArgumentError(f"{self.id} cancel_order requires an id argument")
        await self.load_markets()
        market = self.market(symbol) if symbol is not None else None

        response = await self._request("auth/order/cancel", api="private", method="POST", params={"id": id})
        if not is_success(response):
            raise BadRequest(f"{self.id} Exchange responded with: {safe_value(response, 'error')}", response)

        order_id = safe_string(response, "id", id)
        raw = await self._request("auth/order/getOrder/{id}", api="private", params={"id": order_id})
        order = parse_order(raw, market or self._order_market(raw))
        logger.info(f"Canceled order {order_id} ({order.status})")
        return order

    # ============================================
    # Precision & Fees
    # ============================================

    def price_to_precision(self, symbol: str, price: float) -> str:
        market = self.market(symbol)
        return decimal_to_precision(price, ROUND, market.precision.price)

    def amount_to_precision(self, symbol: str, amount: float) -> str:
        market = self.market(symbol)
        return decimal_to_precision(amount, TRUNCATE, market.precision.amount)

    def calculate_fee(
        self,
        symbol: str,
        type: str,
        side: str,
        amount: float,
        price: float,
        taker_or_maker: str = "taker"
    ) -> Fee:
        """
        Estimate the trading fee.

        Sells pay in the quote currency (rate * amount * price, rounded to the
        price precision); buys pay in the base currency (rate * amount,
        rounded to the amount precision).
        """
        market = self.market(symbol)
        rate = market.maker if taker_or_maker == "maker" else market.taker
        cost = amount * rate
        if side == "sell":
            cost *= price
            currency = market.quote
            precision = market.precision.price
        else:
            currency = market.base
            precision = market.precision.amount
        return Fee(
            type=taker_or_maker,
            currency=currency,
            rate=rate,
            cost=float(decimal_to_precision(cost, ROUND, precision)),
        )
