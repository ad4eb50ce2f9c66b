"""
LATOKEN Market Normalization

Builds the market registry from the pair listing and the currency listing.

    GET /v2/pair
    [
      {
        "id": "263d5e99-1413-47e4-9215-ce4f5dec3556",
        "status": "PAIR_STATUS_ACTIVE",
        "baseCurrency": "6ae140a9-8e75-4413-b157-8dd95c711b23",
        "quoteCurrency": "23fa548b-f887-4f48-9b9b-7dd2c7de5ed0",
        "priceTick": "0.010000000",
        "priceDecimals": 2,
        "quantityTick": "0.010000000",
        "quantityDecimals": 2,
        "costDisplayDecimals": 3,
        "created": 1571333313871
      }
    ]

Pairs only reference currency UUIDs, so each one is resolved against the
currency listing. A pair whose currencies cannot be resolved is skipped with
a warning; it never takes the rest of the batch down with it.
"""

from typing import Any, Dict, List, Optional

from core.logging import get_logger
from core.schemas import Market, MarketLimits, MarketPrecision, MinMax
from core.utils.parsing import safe_float, safe_integer, safe_string
from .currencies import resolve_currency_code

logger = get_logger(__name__)

ACTIVE_PAIR_STATUS = "PAIR_STATUS_ACTIVE"
MAKER_FEE = 0.1 / 100
TAKER_FEE = 0.1 / 100


def parse_market(pair: Dict[str, Any], currencies: List[Dict[str, Any]]) -> Optional[Market]:
    """
    Normalize one raw pair.

    Returns:
        Market, or None if either currency UUID is not in the listing
    """
    base_id = safe_string(pair, "baseCurrency")
    quote_id = safe_string(pair, "quoteCurrency")
    base = resolve_currency_code(base_id, currencies)
    quote = resolve_currency_code(quote_id, currencies)

    if base is None or quote is None:
        logger.warning(
            f"Skipping pair {pair.get('id')}: unresolved currency "
            f"(base={base_id} -> {base}, quote={quote_id} -> {quote})"
        )
        return None

    return Market(
        id=f"{base}_{quote}".upper(),
        symbol=f"{base}/{quote}",
        base=base,
        quote=quote,
        base_id=base_id,
        quote_id=quote_id,
        numeric_id=None,
        active=pair.get("status") == ACTIVE_PAIR_STATUS,
        precision=MarketPrecision(
            price=safe_integer(pair, "priceDecimals"),
            amount=safe_integer(pair, "quantityDecimals"),
        ),
        limits=MarketLimits(
            amount=MinMax(min=safe_float(pair, "quantityTick")),
            price=MinMax(min=safe_float(pair, "priceTick")),
            # Not reported by the exchange
            cost=MinMax(),
        ),
        maker=MAKER_FEE,
        taker=TAKER_FEE,
        info=pair,
    )


def build_markets(raw_pairs: List[Dict[str, Any]], raw_currencies: List[Dict[str, Any]]) -> List[Market]:
    """
    Normalize every pair, skipping the ones that fail.

    Args:
        raw_pairs: Response of GET /v2/pair
        raw_currencies: Response of GET /v2/currency

    Returns:
        Markets in listing order
    """
    markets: List[Market] = []
    for pair in raw_pairs:
        try:
            market = parse_market(pair, raw_currencies)
        except (TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Skipping malformed pair {pair!r}: {e}")
            continue
        if market is not None:
            markets.append(market)

    skipped = len(raw_pairs) - len(markets)
    if skipped:
        logger.warning(f"Built {len(markets)} markets, skipped {skipped} pair(s)")
    else:
        logger.debug(f"Built {len(markets)} markets")
    return markets
