"""
Logging Setup

One stdlib logger named "latoken" is configured at import time from
settings.log_level. Modules log through child loggers obtained with
get_logger(__name__), so every record carries its origin:

    2024-01-01 12:00:00 [WARNING] latoken.exchanges.latoken.markets Skipping pair ...

Transport code reports each HTTP exchange through log_api_request and
log_api_response, both at DEBUG level.
"""

import logging
import sys
from typing import Any, Dict, Optional

from core.config import settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(log_level: str = "INFO") -> logging.Logger:
    """
    Configure the root handler and return the "latoken" logger.

    Unknown level names fall back to INFO.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=DATE_FORMAT, stream=sys.stdout, force=True)

    root = logging.getLogger("latoken")
    root.setLevel(level)
    return root


logger = setup_logging(settings.log_level)


def get_logger(name: str) -> logging.Logger:
    """
    Child of the "latoken" logger.

    Example:
        >>> get_logger("exchanges.latoken.api_client").name
        'latoken.exchanges.latoken.api_client'
    """
    return logging.getLogger(f"latoken.{name}")


# ============================================
# HTTP Exchange Logging
# ============================================

def log_api_request(exchange: str, method: str, url: str, params: Optional[Dict[str, Any]] = None) -> None:
    if params:
        logger.debug(f"API Request: {exchange} {method} {url} | Params: {params}")
    else:
        logger.debug(f"API Request: {exchange} {method} {url}")


def log_api_response(exchange: str, endpoint: str, status: int, response_time: Optional[float] = None) -> None:
    """Log status and, when known, elapsed seconds of one response."""
    elapsed = f" | Time: {response_time:.3f}s" if response_time else ""
    logger.debug(f"API Response: {exchange} {endpoint} | Status: {status}{elapsed}")
