"""
LATOKEN REST API Client

This module provides an async HTTP client for the LATOKEN v2 REST API.
It handles:
- Request signing for private endpoints (see signer.py)
- Error classification of exchange responses (see error_classifier.py)
- Retries with linear backoff for timeouts, 429 and 5xx responses
- Request/response logging

API Documentation:
    https://api.latoken.com/doc/v2/

Retry Policy:
    - Typed exchange errors (bad signature, unknown order, rate limit
      message, ...) are raised immediately, never retried
    - Timeouts, connection errors and untyped 429/5xx responses are retried
      up to settings.max_retries times, sleeping retry_backoff * attempt
    - Each attempt is signed again
    - Private POSTs (order placement and cancellation) are sent once; a
      transport failure raises NetworkError straight away
    - A 2xx response whose body is not JSON raises ExchangeError

Usage:
    async with LatokenAPIClient() as client:
        pairs = await client.request("pair")
        account = await client.request("auth/account", api="private")
"""

import aiohttp
import asyncio
import json
import time
from typing import Any, Dict, Optional

from core.config import settings
from core.errors import ExchangeError, NetworkError
from core.logging import get_logger, log_api_request, log_api_response
from .error_classifier import ErrorClassifier
from .signer import RequestSigner

RETRYABLE_STATUSES = (429, 500, 502, 503, 504)


class LatokenAPIClient:
    """
    Async HTTP client for the LATOKEN REST API

    Attributes:
        signer: RequestSigner holding base URL, version and credentials
        classifier: ErrorClassifier applied to every decoded response
        session: aiohttp ClientSession for HTTP requests
        max_retries: Attempts per request for retryable failures
        retry_backoff: Seconds added to the delay on each attempt

    Example:
        >>> async with LatokenAPIClient(api_key="...", secret="...") as client:
        ...     orders = await client.request(
        ...         "auth/order/pair/{currency}/{quote}/active",
        ...         api="private",
        ...         params={"currency": base_id, "quote": quote_id},
        ...     )
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        secret: Optional[str] = None,
        base_url: Optional[str] = None,
        version: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        retry_backoff: Optional[float] = None
    ):
        """
        Initialize the LATOKEN API client.

        Arguments left as None fall back to core.config.settings.
        """
        self.signer = RequestSigner(
            base_url=base_url or settings.latoken_base_url,
            version=version or settings.latoken_api_version,
            api_key=api_key if api_key is not None else settings.latoken_api_key,
            secret=secret if secret is not None else settings.latoken_secret_key,
        )
        self.classifier = ErrorClassifier("latoken")
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.max_retries = max_retries if max_retries is not None else settings.max_retries
        self.retry_backoff = retry_backoff if retry_backoff is not None else settings.retry_backoff
        self.logger = get_logger(__name__)
        self.session: Optional[aiohttp.ClientSession] = None

    # ============================================
    # Context Manager for Session Management
    # ============================================

    async def __aenter__(self):
        """
        Enter async context - creates HTTP session.
        """
        self.session = aiohttp.ClientSession()
        self.logger.debug("LatokenAPIClient session created")
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """
        Exit async context - closes HTTP session.
        """
        if self.session:
            await self.session.close()
            self.session = None
            self.logger.debug("LatokenAPIClient session closed")

    # ============================================
    # HTTP Request Handler with Retry Logic
    # ============================================

    def _decode(self, text: str) -> Any:
        if not text:
            return None
        try:
            return json.loads(text)
        except ValueError:
            return None

    async def _send(self, method: str, url: str, headers: Dict[str, str], body: Optional[str]):
        """
        Perform one HTTP exchange.

        Returns:
            (status, raw text) tuple
        """
        async with self.session.request(
            method,
            url,
            headers=headers,
            data=body,
            timeout=aiohttp.ClientTimeout(total=self.timeout)
        ) as resp:
            return resp.status, await resp.text()

    async def request(
        self,
        path: str,
        api: str = "public",
        method: str = "GET",
        params: Optional[Dict[str, Any]] = None
    ) -> Any:
        """
        Sign, send and decode one API call.

        Args:
            path: Endpoint path template relative to /v2/ (e.g. "ticker/{base}/{quote}")
            api: "public" or "private"
            method: "GET" or "POST"
            params: Path placeholders plus query/body parameters

        Returns:
            Decoded JSON response

        Raises:
            ExchangeError: Typed error classified from the response body
            AuthFailure: Private endpoint without credentials (before any I/O)
            NetworkError: Transport failure after all retries
            RuntimeError: If the session was not opened with 'async with'
        """
        if not self.session:
            raise RuntimeError("Client session not initialized. Use 'async with' statement.")

        attempts = self.max_retries
        if api == "private" and method.upper() == "POST":
            attempts = 1

        last_error = "no attempt made"
        for attempt in range(attempts):
            # Signature must be fresh for every attempt
            signed = self.signer.sign(path, api, method, params)
            log_api_request("latoken", signed.method, signed.url)

            started = time.monotonic()
            try:
                status, text = await self._send(signed.method, signed.url, signed.headers, signed.body)
            except asyncio.TimeoutError:
                last_error = "timeout"
                self.logger.warning(f"Timeout on {path} (attempt {attempt + 1}/{attempts})")
            except aiohttp.ClientError as e:
                last_error = str(e)
                self.logger.warning(f"Request failed on {path}: {e} (attempt {attempt + 1}/{attempts})")
            else:
                log_api_response("latoken", path, status, time.monotonic() - started)
                data = self._decode(text)
                self.classifier.handle_errors(data, text)

                if 200 <= status < 300:
                    if data is None:
                        self.logger.error(f"Undecodable response on {path}: {text!r}")
                        raise ExchangeError(f"latoken {text}")
                    return data

                if status not in RETRYABLE_STATUSES:
                    self.logger.error(f"HTTP {status} on {path}: {text}")
                    raise ExchangeError(f"latoken {text}", data)

                last_error = f"HTTP {status}"
                self.logger.warning(f"HTTP {status} on {path} (attempt {attempt + 1}/{attempts})")

            if attempt < attempts - 1:
                await asyncio.sleep(self.retry_backoff * (attempt + 1))

        self.logger.error(f"Request {method} {path} failed after {attempts} attempts: {last_error}")
        raise NetworkError(f"latoken {method} {path} failed after {attempts} attempts: {last_error}")
