"""
LATOKEN Request Signer

Turns (path, api, method, params) into a ready-to-send request.

Signing scheme for private endpoints:

    message   = METHOD + "/v2/" + path_with_placeholders_filled + urlencoded_query
    signature = hex(HMAC-SHA256(secret, message))

    headers:
        X-LA-APIKEY:    <api key>
        X-LA-SIGNATURE: <signature>

For POST the HTTP body is the JSON encoding of the query parameters, but the
signature is still computed over their query-string encoding. Both encodings
come from the same dict in the same key order; the server rejects the request
if they disagree.

Example:
    >>> signer = RequestSigner("https://api.latoken.com", "v2", "key", "secret")
    >>> req = signer.sign("auth/order/getOrder/{id}", "private", "GET", {"id": "42"})
    >>> req.url
    'https://api.latoken.com/v2/auth/order/getOrder/42'
"""

import hashlib
import hmac
import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode as _urlencode

from core.errors import AuthFailure
from core.utils.parsing import omit

PLACEHOLDER = re.compile(r"\{([^}]+)\}")


@dataclass
class SignedRequest:
    url: str
    method: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[str] = None


def extract_params(path: str) -> List[str]:
    """
    Names of {placeholders} in a path template.

    Example:
        >>> extract_params("trade/history/{currency}/{quote}")
        ['currency', 'quote']
    """
    return PLACEHOLDER.findall(path)


def implode_params(path: str, params: Dict[str, Any]) -> str:
    """
    Fill {placeholders} from params; unknown placeholders are left as-is.

    Example:
        >>> implode_params("ticker/{base}/{quote}", {"base": "ETH", "quote": "USDT"})
        'ticker/ETH/USDT'
    """
    def replace(match):
        name = match.group(1)
        if name in params:
            return str(params[name])
        return match.group(0)

    return PLACEHOLDER.sub(replace, path)


def urlencode(params: Dict[str, Any]) -> str:
    """
    Query-string encode params in insertion order.

    Booleans are sent as lowercase true/false.

    Example:
        >>> urlencode({"limit": 100, "active": True})
        'limit=100&active=true'
    """
    normalized = {}
    for key, value in params.items():
        if isinstance(value, bool):
            value = "true" if value else "false"
        normalized[key] = value
    return _urlencode(normalized)


def to_json(params: Dict[str, Any]) -> str:
    return json.dumps(params, separators=(",", ":"))


def hmac_sha256_hex(message: str, secret: str) -> str:
    return hmac.new(secret.encode("utf-8"), message.encode("utf-8"), hashlib.sha256).hexdigest()


class RequestSigner:
    """
    Builds URLs, headers and bodies for LATOKEN requests.

    Attributes:
        base_url: API root, e.g. "https://api.latoken.com"
        version: Path prefix without slashes, e.g. "v2"
        api_key / secret: Credentials; only required for api="private"
    """

    def __init__(
        self,
        base_url: str,
        version: str = "v2",
        api_key: Optional[str] = None,
        secret: Optional[str] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.version = version.strip("/")
        self.api_key = api_key or ""
        self.secret = secret or ""

    def check_required_credentials(self) -> None:
        """
        Raises:
            AuthFailure: If the API key or secret is missing
        """
        if not self.api_key:
            raise AuthFailure('latoken requires "apiKey" credential')
        if not self.secret:
            raise AuthFailure('latoken requires "secret" credential')

    def sign(
        self,
        path: str,
        api: str = "public",
        method: str = "GET",
        params: Optional[Dict[str, Any]] = None
    ) -> SignedRequest:
        """
        Build a request for an endpoint path template.

        Args:
            path: Path template relative to the version prefix,
                  e.g. "auth/order/pair/{currency}/{quote}"
            api: "public" or "private"
            method: HTTP method ("GET" or "POST")
            params: Path placeholders plus query/body parameters

        Returns:
            SignedRequest with absolute url, headers and optional JSON body

        Raises:
            AuthFailure: For private endpoints without credentials
        """
        params = params or {}
        method = method.upper()

        request_path = f"/{self.version}/{implode_params(path, params)}"
        query = omit(params, *extract_params(path))
        urlencoded_query = urlencode(query)

        request = request_path
        if method == "GET" and query:
            request += "?" + urlencoded_query

        headers: Dict[str, str] = {}
        body: Optional[str] = None

        if api == "private":
            self.check_required_credentials()
            signature = hmac_sha256_hex(method + request_path + urlencoded_query, self.secret)
            headers = {
                "X-LA-APIKEY": self.api_key,
                "X-LA-SIGNATURE": signature,
            }
            if method == "POST":
                headers["Content-Type"] = "application/json"
                body = to_json(query)

        return SignedRequest(url=self.base_url + request, method=method, headers=headers, body=body)
