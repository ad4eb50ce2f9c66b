"""
LATOKEN Entity Parsers

Pure functions turning raw LATOKEN payloads into canonical entities
(core.schemas). None of them perform I/O; market context, when needed, is
passed in by the caller.

Field semantics worth knowing:
    - Tickers carry no exchange timestamp; the capture time is used
    - Tickers have no bid, so bid is 0 and ask mirrors the last price
    - Trade timestamps before 2009-01-03 are seconds and get rescaled to ms
    - makerBuyer=true means the buyer was the maker: side=sell, maker
    - Order statuses are mapped through ORDER_STATUSES, unknown ones pass through
"""

from typing import Any, Dict, List, Optional

from core.logging import get_logger
from core.schemas import (
    Balance, BalanceEntry, Fee, Market, Order, OrderBook, Ticker, Trade
)
from core.utils.parsing import (
    safe_bool, safe_float, safe_integer, safe_integer_2, safe_string, safe_value
)
from core.utils.time import current_utc_timestamp, iso8601, normalize_milliseconds
from .currencies import resolve_currency_code

logger = get_logger(__name__)


ORDER_STATUSES: Dict[str, str] = {
    "active": "open",
    "placed": "open",
    "filled": "closed",
    "closed": "closed",
    "cancelled": "canceled",
}

ORDER_SIDES: Dict[str, str] = {
    "buy": "buy",
    "bid": "buy",
    "order_side_buy": "buy",
    "sell": "sell",
    "ask": "sell",
    "order_side_sell": "sell",
}


def _sum(*values: Optional[float]) -> Optional[float]:
    known = [v for v in values if v is not None]
    if not known:
        return None
    return sum(known)


# ============================================
# Ticker
# ============================================

def parse_ticker(ticker: Dict[str, Any], symbol: Optional[str] = None, market: Optional[Market] = None) -> Ticker:
    """
    Normalize a ticker.

    Raw:
        {
          "symbol": "ETH/USDT",
          "baseCurrency": "23fa548b-f887-4f48-9b9b-7dd2c7de5ed0",
          "quoteCurrency": "d721fcf2-cf87-4626-916a-da50548fe5b3",
          "volume24h": "450.29",
          "volume7d": "3410.23",
          "change24h": "-5.2100",
          "change7d": "1.1491",
          "lastPrice": "10034.14"
        }
    """
    if symbol is None:
        symbol = market.symbol if market is not None else safe_string(ticker, "symbol")

    close = safe_float(ticker, "lastPrice") or 0.0
    percentage = safe_float(ticker, "change24h") or 0.0
    change = close + close * percentage if percentage != 0 else 0.0
    timestamp = current_utc_timestamp(milliseconds=True)

    return Ticker(
        symbol=symbol,
        timestamp=timestamp,
        datetime=iso8601(timestamp),
        bid=0.0,
        ask=close,
        close=close,
        last=close,
        change=change,
        percentage=percentage,
        quote_volume=safe_float(ticker, "volume24h"),
        info=ticker,
    )


def parse_tickers_filter(tickers: Dict[str, Ticker], symbols: Optional[List[str]] = None) -> Dict[str, Ticker]:
    """Restrict tickers to the requested symbols (all when symbols is None)"""
    if symbols is None:
        return tickers
    return {symbol: tickers[symbol] for symbol in symbols if symbol in tickers}


# ============================================
# Order Book
# ============================================

def _parse_levels(levels: Any, descending: bool) -> List[List[float]]:
    result = []
    for level in levels or []:
        # The exchange pads with empty levels
        if not isinstance(level, (list, tuple)) or len(level) < 2:
            continue
        try:
            result.append([float(level[0]), float(level[1])])
        except (TypeError, ValueError):
            continue
    result.sort(key=lambda entry: entry[0], reverse=descending)
    return result


def parse_order_book(orderbook: Dict[str, Any], symbol: Optional[str] = None) -> OrderBook:
    """
    Normalize an order book snapshot.

    Raw:
        {
          "bids": [["12462000", "0.04548320"], []],
          "asks": [[], []],
          "timestamp": "1566359163123"
        }
    """
    timestamp = safe_integer(orderbook, "timestamp")
    return OrderBook(
        symbol=symbol,
        bids=_parse_levels(orderbook.get("bids"), descending=True),
        asks=_parse_levels(orderbook.get("asks"), descending=False),
        timestamp=timestamp,
        datetime=iso8601(timestamp),
        info=orderbook,
    )


# ============================================
# Trades
# ============================================

def parse_trade(trade: Dict[str, Any], market: Optional[Market] = None) -> Trade:
    """
    Normalize a public or private trade.

    Raw (public):
        {
          "id": "1d6443bf-0728-4023-b1c5-1fb8f813408b",
          "isMakerBuyer": false,
          "price": "7181.43",
          "quantity": "0.0284",
          "cost": "203.952612",
          "timestamp": 1586301661310,
          "makerBuyer": false
        }

    Side and maker/taker role both come from makerBuyer alone; a private
    trade's "direction" field is ignored.
    """
    timestamp = normalize_milliseconds(safe_integer_2(trade, "timestamp", "time"))
    price = safe_float(trade, "price")
    amount = safe_float(trade, "quantity")

    maker_buyer = safe_bool(trade, "makerBuyer")
    if maker_buyer is None:
        maker_buyer = safe_bool(trade, "isMakerBuyer", False)
    if maker_buyer:
        side, taker_or_maker = "sell", "maker"
    else:
        side, taker_or_maker = "buy", "taker"

    cost = None
    if price is not None and amount is not None:
        cost = price * amount

    fee_cost = safe_float(trade, "commission")
    fee = Fee(cost=fee_cost, currency=None) if fee_cost is not None else None

    return Trade(
        id=safe_string(trade, "id"),
        order=safe_string(trade, "order"),
        timestamp=timestamp,
        datetime=iso8601(timestamp),
        symbol=market.symbol if market is not None else None,
        type=None,
        side=side,
        taker_or_maker=taker_or_maker,
        price=price,
        amount=amount,
        cost=cost,
        fee=fee,
        info=trade,
    )


def filter_by_since_limit(items: List[Any], since: Optional[int] = None, limit: Optional[int] = None) -> List[Any]:
    """Keep items with timestamp >= since, then the last `limit` of them"""
    if since is not None:
        items = [item for item in items if item.timestamp is not None and item.timestamp >= since]
    if limit is not None:
        items = items[-limit:] if limit > 0 else []
    return items


def parse_trades(
    trades: List[Dict[str, Any]],
    market: Optional[Market] = None,
    since: Optional[int] = None,
    limit: Optional[int] = None
) -> List[Trade]:
    """Parse a list of trades, sort oldest first and apply since/limit"""
    parsed = [parse_trade(trade, market) for trade in trades]
    parsed.sort(key=lambda t: t.timestamp or 0)
    return filter_by_since_limit(parsed, since, limit)


# ============================================
# Orders
# ============================================

def parse_order_status(status: Optional[str]) -> Optional[str]:
    """
    Map a raw order status to the canonical one.

    Examples:
        >>> parse_order_status("filled")
        'closed'
        >>> parse_order_status("weird")
        'weird'
    """
    if status is None:
        return None
    return ORDER_STATUSES.get(status, status)


def parse_order_side(side: Optional[str]) -> Optional[str]:
    if side is None:
        return None
    lowered = side.lower()
    return ORDER_SIDES.get(lowered, lowered)


def parse_order(order: Dict[str, Any], market: Optional[Market] = None) -> Order:
    """
    Normalize an order.

    The raw order only names its currencies by UUID. The symbol comes from
    `market` when the caller resolved it, otherwise from a `marketId` field
    ("ETH_USDT") stamped onto the raw dict by the caller.

    Raw:
        {
          "id": "12609cf4-fca5-43ed-b0ea-b40fb48d3b0d",
          "status": "CLOSED",
          "side": "BUY",
          "condition": "GTC",
          "type": "LIMIT",
          "baseCurrency": "3092b810-c39f-47ba-8c5f-a8ca3bd8902c",
          "quoteCurrency": "4092b810-c39f-47ba-8c5f-a8ca3bd0004c",
          "clientOrderId": "myOrder",
          "price": "100.0",
          "quantity": "1000.0",
          "cost": "100000.0",
          "filled": "230.0",
          "trader": "12345678-fca5-43ed-b0ea-b40fb48d3b0d",
          "timestamp": 3800014433
        }
    """
    if market is not None:
        symbol = market.symbol
    else:
        market_id = safe_string(order, "marketId")
        symbol = market_id.replace("_", "/") if market_id else None

    timestamp = normalize_milliseconds(safe_integer(order, "timestamp"))
    price = safe_float(order, "price")
    amount = safe_float(order, "quantity")
    filled = safe_float(order, "filled")

    remaining = None
    if amount is not None and filled is not None:
        remaining = amount - filled

    cost = None
    if filled is not None and price is not None:
        cost = filled * price

    raw_status = safe_string(order, "status")
    status = parse_order_status(raw_status.lower() if raw_status else None)

    last_trade_timestamp = timestamp if timestamp is not None and timestamp > 0 else None
    order_type = safe_string(order, "type")

    return Order(
        id=safe_string(order, "id"),
        client_order_id=safe_string(order, "clientOrderId"),
        timestamp=timestamp,
        datetime=iso8601(timestamp),
        last_trade_timestamp=last_trade_timestamp,
        status=status,
        symbol=symbol,
        type=order_type.lower() if order_type else None,
        side=parse_order_side(safe_string(order, "side")),
        price=price,
        amount=amount,
        filled=filled,
        remaining=remaining,
        cost=cost,
        info=order,
    )


def parse_orders(
    orders: List[Dict[str, Any]],
    market: Optional[Market] = None,
    since: Optional[int] = None,
    limit: Optional[int] = None
) -> List[Order]:
    parsed = [parse_order(order, market) for order in orders]
    parsed.sort(key=lambda o: o.timestamp or 0)
    return filter_by_since_limit(parsed, since, limit)


# ============================================
# Balance
# ============================================

def parse_balance(accounts: List[Dict[str, Any]], currencies: List[Dict[str, Any]]) -> Balance:
    """
    Normalize account balances.

    Raw accounts:
        [
          {
            "id": "1e200836-a037-4475-825e-f202dd0b0e92",
            "status": "ACCOUNT_STATUS_ACTIVE",
            "type": "ACCOUNT_TYPE_WALLET",
            "timestamp": 1566408522980,
            "currency": "6ae140a9-8e75-4413-b157-8dd95c711b23",
            "available": "898849.3300",
            "blocked": "4581.9510"
          }
        ]

    Accounts whose currency UUID is not in `currencies` are kept under the raw
    UUID (and logged) so funds never silently disappear from the result.
    Several accounts in the same currency (e.g. wallet and spot) are summed.
    """
    balances: Dict[str, BalanceEntry] = {}
    latest: Optional[int] = None

    for account in accounts:
        currency_id = safe_string(account, "currency")
        code = resolve_currency_code(currency_id, currencies)
        if code is None:
            logger.warning(f"Balance for unknown currency {currency_id}, keeping raw id")
            code = currency_id
        if code is None:
            continue

        free = safe_float(account, "available")
        used = safe_float(account, "blocked")
        entry = balances.get(code)
        if entry is None:
            entry = BalanceEntry(free=free, used=used, total=_sum(free, used))
        else:
            entry = BalanceEntry(
                free=_sum(entry.free, free),
                used=_sum(entry.used, used),
                total=_sum(entry.total, free, used),
            )
        balances[code] = entry

        account_ts = safe_integer(account, "timestamp")
        if account_ts is not None and (latest is None or account_ts > latest):
            latest = account_ts

    return Balance(
        timestamp=latest,
        datetime=iso8601(latest),
        balances=balances,
        info=accounts,
    )


def is_success(response: Any) -> bool:
    """True if a place/cancel response reports status SUCCESS"""
    return safe_value(response, "status") == "SUCCESS"
