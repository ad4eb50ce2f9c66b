"""
LATOKEN Currency Resolution

LATOKEN identifies currencies by UUID in pairs, trades, orders and balances.
The human readable code lives in the `tag` field of the currency listing:

    GET /v2/currency
    [
      {
        "id": "d663138b-3ec1-436c-9275-b3a161761523",
        "status": "CURRENCY_STATUS_ACTIVE",
        "type": "CURRENCY_TYPE_CRYPTO",
        "name": "Latoken",
        "tag": "LA",
        "decimals": 9,
        "created": 1571333563712
      }
    ]

Tags that collide with better-known assets are renamed through
COMMON_CURRENCIES.
"""

from typing import Any, Dict, List, Optional

from core.schemas import Currency
from core.utils.parsing import safe_integer, safe_string

COMMON_CURRENCIES: Dict[str, str] = {
    "MT": "Monarch",
    "TSL": "Treasure SL",
}


def safe_currency_code(currency_id: Optional[str]) -> Optional[str]:
    """
    Map an exchange currency tag to its canonical code.

    Examples:
        >>> safe_currency_code("eth")
        'ETH'
        >>> safe_currency_code("MT")
        'Monarch'
    """
    if currency_id is None:
        return None
    code = currency_id.upper()
    return COMMON_CURRENCIES.get(code, code)


def resolve_currency_code(currency_id: Optional[str], currencies: List[Dict[str, Any]]) -> Optional[str]:
    """
    Find the canonical code for a currency UUID.

    Scans the listing for the first entry whose `id` equals currency_id.

    Args:
        currency_id: Currency UUID from a pair, trade, order or balance
        currencies: Raw currency listing ([{"id": ..., "tag": ...}, ...])

    Returns:
        Canonical code, or None when the UUID is not listed or has no tag
    """
    if currency_id is None:
        return None
    for currency in currencies:
        if currency.get("id") == currency_id:
            return safe_currency_code(safe_string(currency, "tag"))
    return None


def parse_currency(currency: Dict[str, Any]) -> Optional[Currency]:
    """Normalize one /currency/available entry; None when it has no tag"""
    tag = safe_string(currency, "tag")
    if tag is None:
        return None
    code = safe_currency_code(tag)
    return Currency(
        id=tag,
        code=code,
        name=safe_string(currency, "name", code),
        precision=safe_integer(currency, "decimals"),
        active=currency.get("status") == "CURRENCY_STATUS_ACTIVE",
        info=currency,
    )
