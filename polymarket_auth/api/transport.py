"""
HTTP transport for the CLOB API.

The clients never talk to the network directly: they hand the exact
body bytes and the freshly built auth headers to a Transport. Any object
with a matching `send` works, which keeps signing testable offline.

No retries and no rate limiting: a failed call surfaces once as an
APIError and the caller decides what to do.
"""

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol

import orjson
import requests
from requests.adapters import HTTPAdapter

from ..exceptions import APIError, AuthenticationError, TimeoutError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransportResponse:
    """Raw HTTP response: status code and undecoded body bytes."""
    status_code: int
    content: bytes


class Transport(Protocol):
    """Anything that can deliver one HTTP request."""

    def send(
        self,
        method: str,
        path: str,
        query: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        body: Optional[bytes] = None
    ) -> TransportResponse:
        ...


class RequestsTransport:
    """
    Transport backed by a pooled requests.Session.

    Thread-safe for concurrent use; the session is shared by every client
    value derived from the one that created it.
    """

    def __init__(
        self,
        base_url: str,
        connect_timeout: float = 10.0,
        request_timeout: float = 30.0,
        pool_maxsize: int = 20,
        log_requests: bool = False
    ):
        """
        Initialize transport.

        Args:
            base_url: API base URL (e.g. https://clob.polymarket.com)
            connect_timeout: Connection timeout (seconds)
            request_timeout: Read timeout (seconds)
            pool_maxsize: Max pooled connections per host
            log_requests: Debug-log every request line
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = (connect_timeout, request_timeout)
        self.log_requests = log_requests

        self.session = requests.Session()

        # Retries are the caller's decision
        adapter = HTTPAdapter(pool_maxsize=pool_maxsize, max_retries=0)
        self.session.mount("https://", adapter)
        self.session.mount("http://", adapter)

        self.session.headers.update({
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Connection": "keep-alive",
        })

    def __repr__(self) -> str:
        return f"RequestsTransport(base_url={self.base_url!r})"

    def send(
        self,
        method: str,
        path: str,
        query: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        body: Optional[bytes] = None
    ) -> TransportResponse:
        """
        Send one request.

        Raises:
            TimeoutError: Connect or read timeout
            APIError: Connection failure
        """
        url = f"{self.base_url}{path}"

        if self.log_requests:
            logger.debug(f"{method} {url} params={dict(query) if query else None}")

        try:
            response = self.session.request(
                method=method,
                url=url,
                params=query,
                headers=dict(headers) if headers else None,
                data=body,
                timeout=self.timeout
            )
        except requests.exceptions.Timeout as e:
            logger.error(f"Request timeout: {method} {path}")
            raise TimeoutError(f"Request timeout: {method} {path}") from e
        except requests.exceptions.ConnectionError as e:
            logger.error(f"Connection error: {method} {path}")
            raise APIError(f"Connection error: {method} {path}") from e

        return TransportResponse(status_code=response.status_code, content=response.content)

    def close(self) -> None:
        """Close pooled connections."""
        self.session.close()


def decode_response(method: str, path: str, response: TransportResponse) -> Any:
    """
    Turn a raw response into parsed JSON or an exception.

    Returns:
        Parsed JSON body (None for an empty body)

    Raises:
        AuthenticationError: 401/403, carrying the server's message
        APIError: Any other status >= 400, or a body that is not JSON
    """
    error_data = None
    if response.content:
        try:
            error_data = orjson.loads(response.content)
        except orjson.JSONDecodeError:
            if response.status_code < 400:
                logger.error(f"Invalid JSON response from {method} {path}")
                raise APIError(
                    f"Invalid JSON response from {method} {path}",
                    status_code=response.status_code
                )

    if response.status_code < 400:
        return error_data

    if error_data is not None:
        detail = error_data
    else:
        detail = response.content[:200].decode("utf-8", errors="replace")
    error_msg = f"{method} {path} failed with {response.status_code}: {detail}"

    if response.status_code in (401, 403):
        raise AuthenticationError(
            error_msg,
            status_code=response.status_code,
            response=error_data
        )
    raise APIError(error_msg, status_code=response.status_code, response=error_data)
