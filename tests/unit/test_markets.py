"""
Unit Tests for LATOKEN Currency Resolution and Market Normalization

These tests verify that:
- Currency UUIDs resolve to canonical codes (with aliases applied)
- Unknown UUIDs resolve to None instead of raising
- Pairs become Market objects with consistent id/symbol/base/quote
- Pairs with unresolvable currencies are skipped, the rest are kept

Run with:
    pytest tests/unit/test_markets.py -v
"""

import pytest

from core.schemas import Currency, Market
from exchanges.latoken.currencies import parse_currency, resolve_currency_code, safe_currency_code
from exchanges.latoken.markets import build_markets, parse_market

from .conftest import BTC_ID, ETH_ID, MT_ID, UNKNOWN_ID, USDT_ID


class TestCurrencyCodes:
    """Tests for tag -> code mapping"""

    def test_code_is_uppercased(self):
        assert safe_currency_code("btc") == "BTC"

    def test_common_currency_aliases(self):
        assert safe_currency_code("MT") == "Monarch"
        assert safe_currency_code("TSL") == "Treasure SL"

    def test_none_stays_none(self):
        assert safe_currency_code(None) is None


class TestResolveCurrencyCode:
    """Tests for UUID -> code resolution"""

    def test_resolves_known_ids(self, raw_currencies):
        assert resolve_currency_code(ETH_ID, raw_currencies) == "ETH"
        assert resolve_currency_code(BTC_ID, raw_currencies) == "BTC"
        assert resolve_currency_code(MT_ID, raw_currencies) == "Monarch"

    def test_unknown_id_returns_none(self, raw_currencies):
        assert resolve_currency_code(UNKNOWN_ID, raw_currencies) is None

    def test_empty_listing_returns_none(self):
        assert resolve_currency_code(ETH_ID, []) is None

    def test_first_match_wins(self):
        listing = [{"id": "x", "tag": "AAA"}, {"id": "x", "tag": "BBB"}]
        assert resolve_currency_code("x", listing) == "AAA"


class TestParseCurrency:
    """Tests for /currency/available entries"""

    def test_active_currency(self, raw_currencies):
        currency = parse_currency(raw_currencies[0])
        assert isinstance(currency, Currency)
        assert currency.id == "ETH"
        assert currency.code == "ETH"
        assert currency.name == "Ethereum"
        assert currency.precision == 8
        assert currency.active is True

    def test_inactive_aliased_currency(self, raw_currencies):
        currency = parse_currency(raw_currencies[3])
        assert currency.id == "MT"
        assert currency.code == "Monarch"
        assert currency.active is False

    def test_currency_without_tag_is_skipped(self):
        assert parse_currency({"id": UNKNOWN_ID, "status": "CURRENCY_STATUS_ACTIVE"}) is None


class TestParseMarket:
    """Tests for a single pair"""

    def test_market_fields(self, raw_pairs, raw_currencies):
        market = parse_market(raw_pairs[0], raw_currencies)

        assert isinstance(market, Market)
        assert market.id == "ETH_USDT"
        assert market.symbol == "ETH/USDT"
        assert market.base == "ETH"
        assert market.quote == "USDT"
        assert market.base_id == ETH_ID
        assert market.quote_id == USDT_ID
        assert market.active is True
        assert market.precision.price == 2
        assert market.precision.amount == 4
        assert market.limits.amount.min == 0.0001
        assert market.limits.price.min == 0.01
        assert market.limits.cost.min is None
        assert market.limits.cost.max is None
        assert market.maker == pytest.approx(0.001)
        assert market.taker == pytest.approx(0.001)
        assert market.info == raw_pairs[0]

    def test_inactive_pair(self, raw_pairs, raw_currencies):
        market = parse_market(raw_pairs[2], raw_currencies)
        assert market.active is False

    def test_aliased_base_flows_into_id_and_symbol(self, raw_pairs, raw_currencies):
        market = parse_market(raw_pairs[2], raw_currencies)
        assert market.base == "Monarch"
        assert market.symbol == "Monarch/ETH"
        assert market.id == "MONARCH_ETH"

    def test_unresolved_currency_returns_none(self, raw_pairs, raw_currencies):
        assert parse_market(raw_pairs[3], raw_currencies) is None


class TestBuildMarkets:
    """Tests for the whole pair listing"""

    def test_skips_unresolved_pair_keeps_the_rest(self, markets):
        assert [m.symbol for m in markets] == ["ETH/USDT", "BTC/USDT", "Monarch/ETH"]

    def test_id_symbol_invariants(self, markets):
        for market in markets:
            assert market.symbol == f"{market.base}/{market.quote}"
            assert market.id == f"{market.base}_{market.quote}".upper()

    def test_malformed_pair_is_skipped(self, raw_pairs, raw_currencies):
        raw_pairs.insert(0, None)
        markets = build_markets(raw_pairs, raw_currencies)
        assert len(markets) == 3

    def test_empty_listing(self, raw_currencies):
        assert build_markets([], raw_currencies) == []
