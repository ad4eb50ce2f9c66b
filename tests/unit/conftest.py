"""
Shared fixtures for LATOKEN unit tests.

Raw payloads mirror the shapes documented for the LATOKEN v2 API.
"""

import pytest

from exchanges.latoken import LatokenExchange
from exchanges.latoken.markets import build_markets


ETH_ID = "620f2019-33c0-423b-8a9d-cde4d7f8ef7f"
USDT_ID = "0c3a106d-bde3-4c13-a26e-3fd2394529e5"
BTC_ID = "92151d82-df98-4d88-9a4d-284fa9eca49f"
MT_ID = "6ae140a9-8e75-4413-b157-8dd95c711b23"
UNKNOWN_ID = "ffffffff-0000-0000-0000-000000000000"


@pytest.fixture
def raw_currencies():
    """GET /v2/currency (and /currency/available) response"""
    return [
        {"id": ETH_ID, "status": "CURRENCY_STATUS_ACTIVE", "type": "CURRENCY_TYPE_CRYPTO",
         "name": "Ethereum", "tag": "ETH", "decimals": 8, "created": 1571333563712},
        {"id": USDT_ID, "status": "CURRENCY_STATUS_ACTIVE", "type": "CURRENCY_TYPE_CRYPTO",
         "name": "Tether USD", "tag": "USDT", "decimals": 6, "created": 1571333563712},
        {"id": BTC_ID, "status": "CURRENCY_STATUS_ACTIVE", "type": "CURRENCY_TYPE_CRYPTO",
         "name": "Bitcoin", "tag": "btc", "decimals": 8, "created": 1571333563712},
        {"id": MT_ID, "status": "CURRENCY_STATUS_INACTIVE", "type": "CURRENCY_TYPE_CRYPTO",
         "name": "Monarch", "tag": "MT", "decimals": 9, "created": 1571333563712},
    ]


@pytest.fixture
def raw_pairs():
    """GET /v2/pair response (last pair references an unlisted currency)"""
    return [
        {"id": "263d5e99-1413-47e4-9215-ce4f5dec3556", "status": "PAIR_STATUS_ACTIVE",
         "baseCurrency": ETH_ID, "quoteCurrency": USDT_ID,
         "priceTick": "0.010000000", "priceDecimals": 2,
         "quantityTick": "0.000100000", "quantityDecimals": 4,
         "costDisplayDecimals": 3, "created": 1571333313871},
        {"id": "363d5e99-1413-47e4-9215-ce4f5dec3557", "status": "PAIR_STATUS_ACTIVE",
         "baseCurrency": BTC_ID, "quoteCurrency": USDT_ID,
         "priceTick": "0.100000000", "priceDecimals": 1,
         "quantityTick": "0.000010000", "quantityDecimals": 5,
         "costDisplayDecimals": 3, "created": 1571333313871},
        {"id": "463d5e99-1413-47e4-9215-ce4f5dec3558", "status": "PAIR_STATUS_INACTIVE",
         "baseCurrency": MT_ID, "quoteCurrency": ETH_ID,
         "priceTick": "0.000000010", "priceDecimals": 8,
         "quantityTick": "1.000000000", "quantityDecimals": 0,
         "costDisplayDecimals": 8, "created": 1571333313871},
        {"id": "563d5e99-1413-47e4-9215-ce4f5dec3559", "status": "PAIR_STATUS_ACTIVE",
         "baseCurrency": UNKNOWN_ID, "quoteCurrency": USDT_ID,
         "priceTick": "0.010000000", "priceDecimals": 2,
         "quantityTick": "0.010000000", "quantityDecimals": 2,
         "costDisplayDecimals": 3, "created": 1571333313871},
    ]


@pytest.fixture
def markets(raw_pairs, raw_currencies):
    return build_markets(raw_pairs, raw_currencies)


@pytest.fixture
def eth_usdt(markets):
    return next(m for m in markets if m.symbol == "ETH/USDT")


class FakeAPIClient:
    """
    Stand-in for LatokenAPIClient.

    Responses are looked up by path template; callables receive the params.
    Every call is recorded in `calls` as (path, api, method, params).
    """

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls = []
        self.session = object()

    async def request(self, path, api="public", method="GET", params=None):
        self.calls.append((path, api, method, dict(params or {})))
        if path not in self.responses:
            raise AssertionError(f"Unexpected request: {method} {path}")
        response = self.responses[path]
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(params or {})
        return response

    def paths(self):
        return [call[0] for call in self.calls]


@pytest.fixture
def fake_client(raw_pairs, raw_currencies):
    return FakeAPIClient({
        "pair": raw_pairs,
        "currency": raw_currencies,
        "currency/available": raw_currencies,
    })


@pytest.fixture
def exchange(fake_client):
    return LatokenExchange(client=fake_client)
