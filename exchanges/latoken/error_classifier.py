"""
LATOKEN Error Classifier

LATOKEN reports failures as free text, either at the top level or nested
under "error":

    { "message": "Request limit reached!", "details": "Request limit reached. Maximum allowed: 1 per 1s." }
    { "error": { "message": "Pair 370 is not found", "errorType": "RequestError", "statusCode": 400 } }
    { "error": { "message": "Order 1563460289.571254.704945@0370:1 is not found", ... } }

The classifier walks an ordered rule list, exact matches first and then
substring ("broad") matches in declaration order; the first hit wins. Broad
patterns overlap ("Order" is contained in many messages), so specific
patterns are declared before generic ones.

A nested error message that matches no rule still fails the call with the
generic ExchangeError. A top-level message that matches nothing is not an
error on its own: successful place/cancel responses carry one too.
"""

import enum
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple, Type

from core.errors import (
    AuthFailure, BadRequest, ExchangeError, InvalidOrder, OrderNotFound, RateLimited, StaleNonce
)
from core.logging import get_logger

logger = get_logger(__name__)


class MatchKind(enum.Enum):
    EXACT = "exact"
    BROAD = "broad"


@dataclass(frozen=True)
class ErrorRule:
    kind: MatchKind
    pattern: str
    error: Type[ExchangeError]

    def matches(self, message: str) -> bool:
        if self.kind is MatchKind.EXACT:
            return message == self.pattern
        return self.pattern in message


EXACT_ERRORS: List[Tuple[str, Type[ExchangeError]]] = [
    ("Signature or ApiKey is not valid", AuthFailure),
    ("Request is out of time", StaleNonce),
    ("Symbol must be specified", BadRequest),
]

BROAD_ERRORS: List[Tuple[str, Type[ExchangeError]]] = [
    ("Request limit reached", RateLimited),
    ("Pair", BadRequest),
    ("Price needs to be greater than", InvalidOrder),
    ("Amount needs to be greater than", InvalidOrder),
    ("The Symbol field is required", InvalidOrder),
    ("OrderType is not valid", InvalidOrder),
    ("Side is not valid", InvalidOrder),
    ("Cancelable order whit", OrderNotFound),
    ("Order", OrderNotFound),
]

DEFAULT_RULES: List[ErrorRule] = (
    [ErrorRule(MatchKind.EXACT, pattern, error) for pattern, error in EXACT_ERRORS]
    + [ErrorRule(MatchKind.BROAD, pattern, error) for pattern, error in BROAD_ERRORS]
)


class ErrorClassifier:
    """
    Maps LATOKEN error payloads to typed exceptions.

    Example:
        >>> classifier = ErrorClassifier()
        >>> err = classifier.classify({"message": "Request limit reached!"})
        >>> type(err).__name__
        'RateLimited'
    """

    def __init__(self, exchange_id: str = "latoken", rules: Optional[List[ErrorRule]] = None):
        self.exchange_id = exchange_id
        self.rules = list(rules) if rules is not None else list(DEFAULT_RULES)

    def match(self, message: str) -> Optional[Type[ExchangeError]]:
        """First matching error class: all exact rules, then broad ones in order"""
        for kind in (MatchKind.EXACT, MatchKind.BROAD):
            for rule in self.rules:
                if rule.kind is kind and rule.matches(message):
                    return rule.error
        return None

    def classify(self, response: Any, body: Optional[str] = None) -> Optional[ExchangeError]:
        """
        Classify a decoded response.

        Args:
            response: Decoded JSON payload (dict, list, or None)
            body: Raw response text, appended to the error message

        Returns:
            Exception instance to raise, or None if the response is not an error
        """
        if not response or not isinstance(response, dict):
            return None

        feedback = f"{self.exchange_id} {body if body is not None else response}"

        message = response.get("message")
        if isinstance(message, str):
            error_class = self.match(message)
            if error_class is not None:
                return error_class(feedback, response)

        error = response.get("error")
        if isinstance(error, dict):
            error_message = error.get("message")
            if isinstance(error_message, str):
                error_class = self.match(error_message) or ExchangeError
                return error_class(feedback, response)

        return None

    def handle_errors(self, response: Any, body: Optional[str] = None) -> None:
        """
        Raise the classified error, if any.

        Raises:
            ExchangeError: Or the matching subclass
        """
        error = self.classify(response, body)
        if error is not None:
            logger.debug(f"Classified response as {type(error).__name__}: {error}")
            raise error
