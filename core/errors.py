"""
Exchange Error Taxonomy

Typed exceptions raised by exchange connectors. Calling code can branch on the
class instead of parsing free-text exchange messages:

    ExchangeError
    ├── ArgumentError        missing/invalid caller input, raised before any I/O
    ├── AuthFailure          bad API key or signature, missing credentials
    ├── StaleNonce           request timestamp rejected as out of time
    ├── RateLimited          exchange request limit reached
    ├── BadRequest           malformed request
    │   └── BadSymbol        symbol not in the loaded market registry
    ├── InvalidOrder         order parameters rejected
    │   └── OrderNotFound    order id unknown or no longer cancelable
    └── NetworkError         transport failure after all retries

Every message starts with the exchange id and, where one exists, the raw
response body, e.g. ``latoken {"error": {"message": "Pair 370 is not found"}}``.
"""

from typing import Any, Optional


class ExchangeError(Exception):
    """Base class for every error surfaced by an exchange connector"""

    def __init__(self, message: str, response: Optional[Any] = None):
        super().__init__(message)
        self.response = response


class ArgumentError(ExchangeError):
    """Required argument missing or invalid (raised before any request)"""
    pass


class AuthFailure(ExchangeError):
    """Authentication rejected or credentials not configured"""
    pass


class StaleNonce(ExchangeError):
    """Request timestamp/nonce rejected by the exchange"""
    pass


class RateLimited(ExchangeError):
    """Exchange request limit reached"""
    pass


class BadRequest(ExchangeError):
    pass


class BadSymbol(BadRequest):
    pass


class InvalidOrder(ExchangeError):
    pass


class OrderNotFound(InvalidOrder):
    pass


class NetworkError(ExchangeError):
    """Timeouts, connection resets and 5xx responses after all retries"""
    pass


# Names used by other connector code bases for the same conditions
ArgumentsRequired = ArgumentError
AuthenticationError = AuthFailure
InvalidNonce = StaleNonce
DDoSProtection = RateLimited
