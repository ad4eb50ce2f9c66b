"""
Unit Tests for LATOKEN Entity Parsers

These tests verify that raw LATOKEN payloads normalize correctly:
- Tickers (change, percentage, bid/ask substitutes)
- Order books (empty levels dropped, sort order)
- Trades (seconds -> milliseconds, maker/taker and side, cost)
- Orders (status mapping, remaining, symbol resolution)
- Balances (UUID resolution, unknown currencies, summing)

Run with:
    pytest tests/unit/test_parsers.py -v
"""

import pytest

from core.schemas import Balance, Order, OrderBook, Ticker, Trade
from exchanges.latoken.parsers import (
    filter_by_since_limit, is_success, parse_balance, parse_order, parse_order_book,
    parse_order_side, parse_order_status, parse_orders, parse_ticker, parse_tickers_filter,
    parse_trade, parse_trades
)

from .conftest import ETH_ID, MT_ID, UNKNOWN_ID, USDT_ID


# ============================================
# Ticker
# ============================================

class TestParseTicker:
    """Tests for parse_ticker"""

    @pytest.fixture
    def raw_ticker(self):
        return {
            "symbol": "ETH/USDT",
            "baseCurrency": ETH_ID,
            "quoteCurrency": USDT_ID,
            "volume24h": "450.29",
            "volume7d": "3410.23",
            "change24h": "-5.2100",
            "change7d": "1.1491",
            "lastPrice": "10034.14",
        }

    def test_ticker_fields(self, raw_ticker):
        ticker = parse_ticker(raw_ticker, "ETH/USDT")

        assert isinstance(ticker, Ticker)
        assert ticker.exchange == "latoken"
        assert ticker.symbol == "ETH/USDT"
        assert ticker.close == 10034.14
        assert ticker.last == 10034.14
        assert ticker.ask == 10034.14
        assert ticker.bid == 0
        assert ticker.percentage == -5.21
        assert ticker.change == pytest.approx(10034.14 + 10034.14 * -5.21)
        assert ticker.quote_volume == 450.29
        assert ticker.info == raw_ticker

    def test_timestamp_is_capture_time(self, raw_ticker):
        ticker = parse_ticker(raw_ticker)
        assert ticker.timestamp > 1_600_000_000_000
        assert ticker.datetime.endswith("Z")

    def test_zero_change_gives_zero(self, raw_ticker):
        raw_ticker["change24h"] = "0"
        ticker = parse_ticker(raw_ticker)
        assert ticker.change == 0
        assert ticker.percentage == 0

    def test_missing_price_defaults_to_zero(self):
        ticker = parse_ticker({"symbol": "ETH/USDT"})
        assert ticker.close == 0
        assert ticker.change == 0
        assert ticker.quote_volume is None

    def test_symbol_from_market(self, raw_ticker, eth_usdt):
        raw_ticker["symbol"] = "something else"
        assert parse_ticker(raw_ticker, market=eth_usdt).symbol == "ETH/USDT"

    def test_filter_tickers(self, raw_ticker):
        tickers = {"ETH/USDT": parse_ticker(raw_ticker), "BTC/USDT": parse_ticker(raw_ticker, "BTC/USDT")}
        assert set(parse_tickers_filter(tickers, None)) == {"ETH/USDT", "BTC/USDT"}
        assert list(parse_tickers_filter(tickers, ["BTC/USDT", "XXX/YYY"])) == ["BTC/USDT"]


# ============================================
# Order Book
# ============================================

class TestParseOrderBook:
    """Tests for parse_order_book"""

    def test_levels_and_timestamp(self):
        raw = {
            "bids": [["12462000", "0.04548320"], [], ["12470000", "1.5"]],
            "asks": [[], ["12480000", "2"], ["12475000", "0.3"]],
            "timestamp": "1566359163123",
        }
        book = parse_order_book(raw, "BTC/USDT")

        assert isinstance(book, OrderBook)
        assert book.symbol == "BTC/USDT"
        assert book.bids == [[12470000.0, 1.5], [12462000.0, 0.0454832]]
        assert book.asks == [[12475000.0, 0.3], [12480000.0, 2.0]]
        assert book.timestamp == 1566359163123
        assert book.datetime == "2019-08-21T03:46:03.123Z"

    def test_empty_book(self):
        book = parse_order_book({"bids": [[]], "asks": []}, "ETH/USDT")
        assert book.bids == []
        assert book.asks == []
        assert book.timestamp is None
        assert book.datetime is None


# ============================================
# Trades
# ============================================

class TestParseTrade:
    """Tests for parse_trade"""

    @pytest.fixture
    def raw_trade(self):
        return {
            "id": "1d6443bf-0728-4023-b1c5-1fb8f813408b",
            "isMakerBuyer": False,
            "price": "7181.43",
            "quantity": "0.0284",
            "cost": "203.952612",
            "timestamp": 1586301661310,
            "makerBuyer": False,
        }

    def test_millisecond_timestamp_unchanged(self, raw_trade, eth_usdt):
        trade = parse_trade(raw_trade, eth_usdt)
        assert isinstance(trade, Trade)
        assert trade.timestamp == 1586301661310
        assert trade.datetime == "2020-04-07T23:21:01.310Z"
        assert trade.symbol == "ETH/USDT"

    def test_second_timestamp_rescaled(self, raw_trade):
        raw_trade["timestamp"] = 1000000
        assert parse_trade(raw_trade).timestamp == 1000000000

    def test_time_field_fallback(self, raw_trade):
        del raw_trade["timestamp"]
        raw_trade["time"] = 1586301661
        assert parse_trade(raw_trade).timestamp == 1586301661000

    def test_taker_buy(self, raw_trade):
        trade = parse_trade(raw_trade)
        assert trade.side == "buy"
        assert trade.taker_or_maker == "taker"

    def test_maker_buyer_is_maker_sell(self, raw_trade):
        raw_trade["makerBuyer"] = True
        trade = parse_trade(raw_trade)
        assert trade.side == "sell"
        assert trade.taker_or_maker == "maker"

    def test_is_maker_buyer_fallback(self, raw_trade):
        del raw_trade["makerBuyer"]
        raw_trade["isMakerBuyer"] = True
        assert parse_trade(raw_trade).side == "sell"

    def test_string_flag(self, raw_trade):
        raw_trade["makerBuyer"] = "true"
        assert parse_trade(raw_trade).taker_or_maker == "maker"

    @pytest.mark.parametrize("maker_buyer,direction,expected", [
        (True, "TRADE_DIRECTION_BUY", ("sell", "maker")),
        (False, "TRADE_DIRECTION_SELL", ("buy", "taker")),
    ])
    def test_side_and_role_follow_maker_buyer_only(self, raw_trade, maker_buyer, direction, expected):
        raw_trade["makerBuyer"] = maker_buyer
        raw_trade["direction"] = direction
        trade = parse_trade(raw_trade)
        assert (trade.side, trade.taker_or_maker) == expected

    def test_cost_is_price_times_amount(self, raw_trade):
        trade = parse_trade(raw_trade)
        assert trade.price == 7181.43
        assert trade.amount == 0.0284
        assert trade.cost == pytest.approx(7181.43 * 0.0284)

    def test_commission_becomes_fee(self, raw_trade):
        assert parse_trade(raw_trade).fee is None
        raw_trade["commission"] = "0.2"
        fee = parse_trade(raw_trade).fee
        assert fee.cost == 0.2
        assert fee.currency is None

    def test_parse_trades_sorted_and_filtered(self, raw_trade):
        raw = [dict(raw_trade, id=str(i), timestamp=1586301661310 + i * 1000) for i in (3, 1, 2, 0)]
        trades = parse_trades(raw)
        assert [t.id for t in trades] == ["0", "1", "2", "3"]

        trades = parse_trades(raw, since=1586301662310, limit=2)
        assert [t.id for t in trades] == ["2", "3"]

    def test_filter_by_since_limit_zero(self, raw_trade):
        assert filter_by_since_limit(parse_trades([raw_trade]), limit=0) == []


# ============================================
# Orders
# ============================================

class TestParseOrder:
    """Tests for order status mapping and parse_order"""

    @pytest.fixture
    def raw_order(self):
        return {
            "id": "12609cf4-fca5-43ed-b0ea-b40fb48d3b0d",
            "status": "CLOSED",
            "side": "BUY",
            "condition": "GTC",
            "type": "LIMIT",
            "baseCurrency": ETH_ID,
            "quoteCurrency": USDT_ID,
            "clientOrderId": "myOrder",
            "price": "100.0",
            "quantity": "1000.0",
            "cost": "100000.0",
            "filled": "230.0",
            "trader": "12345678-fca5-43ed-b0ea-b40fb48d3b0d",
            "timestamp": 1568185507000,
        }

    @pytest.mark.parametrize("raw,expected", [
        ("filled", "closed"),
        ("placed", "open"),
        ("active", "open"),
        ("closed", "closed"),
        ("cancelled", "canceled"),
        ("weird", "weird"),
        (None, None),
    ])
    def test_parse_order_status(self, raw, expected):
        assert parse_order_status(raw) == expected

    @pytest.mark.parametrize("raw,expected", [
        ("BUY", "buy"), ("bid", "buy"), ("ASK", "sell"), ("sell", "sell"),
        ("ORDER_SIDE_SELL", "sell"), (None, None),
    ])
    def test_parse_order_side(self, raw, expected):
        assert parse_order_side(raw) == expected

    def test_order_fields(self, raw_order, eth_usdt):
        order = parse_order(raw_order, eth_usdt)

        assert isinstance(order, Order)
        assert order.id == "12609cf4-fca5-43ed-b0ea-b40fb48d3b0d"
        assert order.client_order_id == "myOrder"
        assert order.symbol == "ETH/USDT"
        assert order.status == "closed"
        assert order.side == "buy"
        assert order.type == "limit"
        assert order.price == 100.0
        assert order.amount == 1000.0
        assert order.filled == 230.0
        assert order.remaining == 770.0
        assert order.cost == 23000.0
        assert order.timestamp == 1568185507000
        assert order.last_trade_timestamp == 1568185507000

    def test_remaining_plus_filled_equals_amount(self, raw_order):
        order = parse_order(raw_order)
        assert order.remaining + order.filled == order.amount

    def test_symbol_from_stamped_market_id(self, raw_order):
        raw_order["marketId"] = "ETH_USDT"
        assert parse_order(raw_order).symbol == "ETH/USDT"

    def test_symbol_unknown_without_market(self, raw_order):
        assert parse_order(raw_order).symbol is None

    def test_second_timestamp_rescaled(self, raw_order):
        raw_order["timestamp"] = 1568185507
        assert parse_order(raw_order).timestamp == 1568185507000

    def test_missing_filled(self, raw_order):
        del raw_order["filled"]
        order = parse_order(raw_order)
        assert order.remaining is None
        assert order.cost is None

    def test_parse_orders_sorted(self, raw_order, eth_usdt):
        raw = [dict(raw_order, id="b", timestamp=1568185508000), dict(raw_order, id="a")]
        assert [o.id for o in parse_orders(raw, eth_usdt)] == ["a", "b"]


# ============================================
# Balance
# ============================================

class TestParseBalance:
    """Tests for parse_balance"""

    def _account(self, currency, available, blocked, timestamp=1566408522980, type="ACCOUNT_TYPE_WALLET"):
        return {
            "id": "1e200836-a037-4475-825e-f202dd0b0e92",
            "status": "ACCOUNT_STATUS_ACTIVE",
            "type": type,
            "timestamp": timestamp,
            "currency": currency,
            "available": available,
            "blocked": blocked,
        }

    def test_balance_entries(self, raw_currencies):
        accounts = [
            self._account(MT_ID, "898849.3300", "4581.9510"),
            self._account(USDT_ID, "10", "0", timestamp=1566408523000),
        ]
        balance = parse_balance(accounts, raw_currencies)

        assert isinstance(balance, Balance)
        assert "Monarch" in balance
        assert balance["Monarch"].free == 898849.33
        assert balance["Monarch"].used == 4581.951
        assert balance["Monarch"].total == pytest.approx(898849.33 + 4581.951)
        assert balance.free["USDT"] == 10.0
        assert balance.timestamp == 1566408523000
        assert balance.info == accounts

    def test_unknown_currency_kept_under_raw_id(self, raw_currencies):
        balance = parse_balance([self._account(UNKNOWN_ID, "1", "2")], raw_currencies)
        assert balance[UNKNOWN_ID].total == 3.0

    def test_accounts_in_same_currency_are_summed(self, raw_currencies):
        accounts = [
            self._account(ETH_ID, "1.5", "0.5"),
            self._account(ETH_ID, "2", "0", type="ACCOUNT_TYPE_SPOT"),
        ]
        entry = parse_balance(accounts, raw_currencies)["ETH"]
        assert entry.free == 3.5
        assert entry.used == 0.5
        assert entry.total == 4.0

    def test_empty_accounts(self, raw_currencies):
        balance = parse_balance([], raw_currencies)
        assert balance.balances == {}
        assert balance.timestamp is None


def test_is_success():
    assert is_success({"status": "SUCCESS", "id": "1"}) is True
    assert is_success({"status": "FAILURE"}) is False
    assert is_success(None) is False
