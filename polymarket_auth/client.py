"""
Polymarket CLOB clients, one class per trust level.

    UnauthenticatedClient  -- upgrade(private_key) -->  WalletClient
    WalletClient           -- derive_api_key()      -->  ApiKeyClient
                           -- with_credentials()    -->  ApiKeyClient
    ApiKeyClient           -- downgrade()           -->  WalletClient
    WalletClient           -- downgrade()           -->  UnauthenticatedClient

Capabilities come from mixins, so a privileged operation simply does not
exist on a lower-level client (AttributeError, and a type checker error).
Client values are immutable; every transition returns a new value that
shares the transport and leaves the source client usable.

Usage:
    client = UnauthenticatedClient(RequestsTransport("https://clob.polymarket.com"))
    book = client.get_order_book(token_id)

    trader = client.upgrade(private_key).derive_api_key()
    trader.create_and_post_order(OrderArgs(token_id=..., price="0.65", size="100", side=Side.BUY))
"""

import logging
from typing import Any, Callable, ClassVar, Iterable, Mapping, Optional, Sequence

import orjson

from .api.transport import RequestsTransport, Transport, decode_response
from .auth.authenticator import build_l1_headers, build_l2_headers
from .auth.signing import derive_address
from .config import PolymarketSettings, get_settings
from .constants import POLYGON, ONE_YEAR_SECONDS
from .exceptions import APIError, StateTransitionError, ValidationError
from .logging_config import LOGGER_NAME
from .metrics import configure_metrics, get_metrics
from .models import ApiCredentials, AuthLevel, OrderArgs, OrderType, Side, SignedOrder
from .trading.order_builder import OrderBuilder
from .utils.sources import Clock, RandomBytes, system_clock, system_random_bytes
from .utils.validators import validate_private_key, validate_token_id

logger = logging.getLogger(__name__)

HeaderBuilder = Callable[[str, str, str], dict[str, str]]


class _BaseClient:
    """Transport, chain and ambient sources shared by every level."""

    __slots__ = ("_transport", "_chain_id", "_clock", "_random_bytes", "_expiration_seconds")

    level: ClassVar[AuthLevel]

    def __init__(
        self,
        transport: Transport,
        chain_id: int = POLYGON,
        clock: Optional[Clock] = None,
        random_bytes: Optional[RandomBytes] = None,
        expiration_seconds: int = ONE_YEAR_SECONDS
    ):
        object.__setattr__(self, "_transport", transport)
        object.__setattr__(self, "_chain_id", chain_id)
        object.__setattr__(self, "_clock", clock or system_clock)
        object.__setattr__(self, "_random_bytes", random_bytes or system_random_bytes)
        object.__setattr__(self, "_expiration_seconds", expiration_seconds)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def chain_id(self) -> int:
        return self._chain_id

    def _ambient(self) -> dict[str, Any]:
        return {
            "chain_id": self._chain_id,
            "clock": self._clock,
            "random_bytes": self._random_bytes,
            "expiration_seconds": self._expiration_seconds,
        }

    def _send(
        self,
        method: str,
        path: str,
        *,
        query: Optional[Mapping[str, Any]] = None,
        payload: Any = None,
        auth: Optional[HeaderBuilder] = None,
        auth_level: AuthLevel = AuthLevel.UNAUTHENTICATED,
        endpoint: Optional[str] = None
    ) -> Any:
        """
        Serialize, authenticate and send one request.

        The body is serialized exactly once; those bytes are both signed
        and sent. Headers are built last so the timestamp is fresh.
        """
        body = orjson.dumps(payload) if payload is not None else None
        body_str = body.decode("utf-8") if body is not None else ""

        if query:
            query = {k: v for k, v in query.items() if v is not None}

        headers = auth(method, path, body_str) if auth else {}

        response = self._transport.send(
            method,
            path,
            query=query or None,
            headers=headers,
            body=body
        )

        metrics = get_metrics()
        metrics.track_api_request(method, endpoint or path, str(response.status_code))
        if response.status_code in (401, 403):
            metrics.track_auth_failure(auth_level)
            logger.warning(f"{method} {path} rejected at {auth_level.name} level ({response.status_code})")

        return decode_response(method, path, response)


class _PublicEndpoints(_BaseClient):
    """Market data available at every level."""

    __slots__ = ()

    def get_ok(self) -> Any:
        """Health check."""
        return self._send("GET", "/")

    def get_server_time(self) -> int:
        """Exchange clock in unix seconds."""
        return self._send("GET", "/time")

    def get_order_book(self, token_id: str) -> Any:
        """
        Get orderbook for a token.

        Returns:
            {"market", "asset_id", "bids": [...], "asks": [...], "hash", ...}
        """
        return self._send("GET", "/book", query={"token_id": validate_token_id(token_id)})

    def get_order_books(self, token_ids: Iterable[str]) -> Any:
        """Get orderbooks for several tokens in one request."""
        payload = [{"token_id": validate_token_id(t)} for t in token_ids]
        return self._send("POST", "/books", payload=payload)

    def get_price(self, token_id: str, side: Side) -> Any:
        """Best price on one side of the book."""
        return self._send(
            "GET",
            "/price",
            query={"token_id": validate_token_id(token_id), "side": Side(side).value}
        )

    def get_prices(self, params: Iterable[tuple[str, Side]]) -> Any:
        """
        Best prices for several (token_id, side) pairs.

        Example:
            >>> client.get_prices([("123", Side.BUY), ("456", Side.SELL)])
        """
        payload = [
            {"token_id": validate_token_id(token_id), "side": Side(side).value}
            for token_id, side in params
        ]
        return self._send("POST", "/prices", payload=payload)

    def get_midpoint(self, token_id: str) -> Any:
        return self._send("GET", "/midpoint", query={"token_id": validate_token_id(token_id)})

    def get_spreads(self, token_ids: Iterable[str]) -> Any:
        payload = [{"token_id": validate_token_id(t)} for t in token_ids]
        return self._send("POST", "/spreads", payload=payload)

    def get_price_history(
        self,
        market: str,
        start_ts: Optional[int] = None,
        end_ts: Optional[int] = None,
        interval: Optional[str] = None,
        fidelity: Optional[int] = None
    ) -> Any:
        """
        Price history for a token.

        Args:
            market: Token ID
            start_ts: Window start (unix seconds)
            end_ts: Window end (unix seconds)
            interval: Preset window ("1m", "1h", "6h", "1d", "1w", "max")
            fidelity: Resolution in minutes
        """
        return self._send(
            "GET",
            "/prices-history",
            query={
                "market": market,
                "startTs": start_ts,
                "endTs": end_ts,
                "interval": interval,
                "fidelity": fidelity,
            }
        )

    def get_tick_size(self, token_id: str) -> Any:
        return self._send("GET", "/tick-size", query={"token_id": validate_token_id(token_id)})

    def get_neg_risk(self, token_id: str) -> Any:
        """Whether the token trades on the neg-risk exchange."""
        return self._send("GET", "/neg-risk", query={"token_id": validate_token_id(token_id)})


class _WalletEndpoints(_BaseClient):
    """Operations that need a wallet signature (L1)."""

    __slots__ = ()

    @property
    def address(self) -> str:
        """Checksummed wallet address."""
        return self._address

    def _l1_auth(self, nonce: int) -> HeaderBuilder:
        def build(method: str, path: str, body: str) -> dict[str, str]:
            return build_l1_headers(
                self._private_key,
                self._address,
                nonce,
                chain_id=self._chain_id,
                clock=self._clock
            )
        return build

    def _request_credentials(self, method: str, path: str, nonce: int, operation: str) -> ApiCredentials:
        payload = {} if method == "POST" else None
        try:
            response = self._send(
                method,
                path,
                payload=payload,
                auth=self._l1_auth(nonce),
                auth_level=AuthLevel.WALLET
            )
            credentials = ApiCredentials.from_response(response)
        except (APIError, ValidationError) as e:
            logger.error(f"{operation} failed for {self._address}: {e}")
            raise StateTransitionError(
                f"{operation} failed: {e}",
                status_code=getattr(e, "status_code", None),
                response=getattr(e, "response", None),
                operation=operation
            ) from e

        logger.info(f"{operation} succeeded for {self._address} (nonce={nonce})")
        return credentials

    def create_api_key(self, nonce: int = 0) -> ApiCredentials:
        """
        Create new API credentials for (address, nonce).

        Returns:
            Freshly issued credentials

        Raises:
            StateTransitionError: Exchange refused or returned a malformed response
        """
        return self._request_credentials("POST", "/auth/api-key", nonce, "create_api_key")

    def derive_api_key(self, nonce: int = 0) -> "ApiKeyClient":
        """
        Derive the existing credentials for (address, nonce) and upgrade.

        Deriving twice with the same nonce yields the same credentials.

        Raises:
            StateTransitionError: Exchange refused or returned a malformed response
        """
        credentials = self._request_credentials("GET", "/auth/derive-api-key", nonce, "derive_api_key")
        return self.with_credentials(credentials)

    def with_credentials(self, credentials: ApiCredentials) -> "ApiKeyClient":
        """Upgrade with credentials obtained elsewhere (no request is made)."""
        return ApiKeyClient(
            self._transport,
            self._private_key,
            credentials,
            **self._ambient()
        )


class _TradingEndpoints(_BaseClient):
    """Operations that need API credentials (L2)."""

    __slots__ = ()

    @property
    def credentials(self) -> ApiCredentials:
        return self._credentials

    def _l2_auth(self, method: str, path: str, body: str) -> dict[str, str]:
        return build_l2_headers(
            self._credentials,
            self._address,
            method,
            path,
            body,
            clock=self._clock
        )

    def _send_l2(self, method: str, path: str, **kwargs: Any) -> Any:
        return self._send(method, path, auth=self._l2_auth, auth_level=AuthLevel.API_KEY, **kwargs)

    # ---- credential management ----

    def get_api_keys(self) -> Any:
        """List API keys owned by this address."""
        return self._send_l2("GET", "/auth/api-keys")

    def delete_api_key(self) -> Any:
        """Revoke the credentials this client holds."""
        response = self._send_l2("DELETE", "/auth/api-key")
        logger.info(f"Deleted API key for {self._address}")
        return response

    # ---- orders ----

    def create_order(
        self,
        args: OrderArgs,
        neg_risk: bool = False,
        idempotency_key: Optional[str] = None
    ) -> SignedOrder:
        """
        Sign an order without submitting it.

        Args:
            args: Order intent
            neg_risk: Sign against the neg-risk exchange
            idempotency_key: Derive the salt from this key for safe resubmission
        """
        return self._order_builder.build_order(
            args,
            idempotency_key=idempotency_key,
            neg_risk=neg_risk
        )

    def _order_envelope(self, order: SignedOrder, order_type: OrderType) -> dict[str, Any]:
        return {
            "order": order.to_wire(),
            "owner": self._credentials.api_key,
            "orderType": OrderType(order_type).value,
        }

    def post_order(self, signed_order: SignedOrder, order_type: OrderType = OrderType.GTC) -> Any:
        """
        Submit a signed order.

        Not retried: a retry must reuse the same signed order (same salt).
        """
        response = self._send_l2("POST", "/order", payload=self._order_envelope(signed_order, order_type))
        logger.info(f"Posted {OrderType(order_type).value} order for {self._address}")
        return response

    def post_orders(
        self,
        signed_orders: Sequence[SignedOrder],
        order_type: OrderType = OrderType.GTC
    ) -> Any:
        """Submit several signed orders in one request."""
        if not signed_orders:
            raise ValidationError("post_orders needs at least one order")
        payload = [self._order_envelope(order, order_type) for order in signed_orders]
        response = self._send_l2("POST", "/orders", payload=payload)
        logger.info(f"Posted batch of {len(signed_orders)} orders for {self._address}")
        return response

    def create_and_post_order(
        self,
        args: OrderArgs,
        order_type: OrderType = OrderType.GTC,
        neg_risk: bool = False,
        idempotency_key: Optional[str] = None
    ) -> Any:
        """Sign and submit in one call."""
        order = self.create_order(args, neg_risk=neg_risk, idempotency_key=idempotency_key)
        return self.post_order(order, order_type)

    def get_order(self, order_id: str) -> Any:
        return self._send_l2("GET", f"/data/order/{order_id}", endpoint="/data/order")

    def get_orders(self, market: Optional[str] = None, asset_id: Optional[str] = None) -> Any:
        """Open orders, optionally filtered by market or token."""
        return self._send_l2("GET", "/data/orders", query={"market": market, "asset_id": asset_id})

    def cancel_order(self, order_id: str) -> Any:
        return self._send_l2("DELETE", "/order", query={"orderID": order_id})

    def cancel_orders(self, order_ids: Sequence[str]) -> Any:
        if not order_ids:
            raise ValidationError("cancel_orders needs at least one order ID")
        return self._send_l2("DELETE", "/orders", query={"orderIDs": list(order_ids)})

    def cancel_all(self) -> Any:
        """Cancel every open order of this address."""
        response = self._send_l2("DELETE", "/cancel-all")
        logger.info(f"Cancel-all sent for {self._address}")
        return response

    def cancel_market_orders(self, market: Optional[str] = None, asset_id: Optional[str] = None) -> Any:
        return self._send_l2(
            "DELETE",
            "/cancel-market-orders",
            query={"market": market, "asset_id": asset_id}
        )

    # ---- trades ----

    def get_trades(
        self,
        id: Optional[str] = None,
        taker: Optional[str] = None,
        maker: Optional[str] = None,
        market: Optional[str] = None,
        before: Optional[int] = None,
        after: Optional[int] = None
    ) -> Any:
        """Trade history, filtered by any combination of the arguments."""
        return self._send_l2(
            "GET",
            "/data/trades",
            query={
                "id": id,
                "taker": taker,
                "maker": maker,
                "market": market,
                "before": before,
                "after": after,
            }
        )


# ========== Clients ==========

class UnauthenticatedClient(_PublicEndpoints):
    """Anonymous client: public market data only."""

    __slots__ = ()

    level = AuthLevel.UNAUTHENTICATED

    def __repr__(self) -> str:
        return f"UnauthenticatedClient(chain_id={self._chain_id})"

    def upgrade(self, private_key: str) -> "WalletClient":
        """
        Attach a wallet.

        Raises:
            ValidationError: If the key is malformed or out of range
        """
        return WalletClient(self._transport, private_key, **self._ambient())


class WalletClient(_PublicEndpoints, _WalletEndpoints):
    """Wallet-proven client (L1): can obtain API credentials."""

    __slots__ = ("_private_key", "_address")

    level = AuthLevel.WALLET

    def __init__(
        self,
        transport: Transport,
        private_key: str,
        chain_id: int = POLYGON,
        clock: Optional[Clock] = None,
        random_bytes: Optional[RandomBytes] = None,
        expiration_seconds: int = ONE_YEAR_SECONDS
    ):
        super().__init__(
            transport,
            chain_id=chain_id,
            clock=clock,
            random_bytes=random_bytes,
            expiration_seconds=expiration_seconds
        )
        key = validate_private_key(private_key)
        object.__setattr__(self, "_private_key", key)
        object.__setattr__(self, "_address", derive_address(key))

    def __repr__(self) -> str:
        return f"WalletClient(address={self._address}, chain_id={self._chain_id})"

    def downgrade(self) -> UnauthenticatedClient:
        """Drop the wallet."""
        return UnauthenticatedClient(self._transport, **self._ambient())


class ApiKeyClient(_PublicEndpoints, _WalletEndpoints, _TradingEndpoints):
    """API-key-proven client (L2): full trading access."""

    __slots__ = ("_private_key", "_address", "_credentials", "_order_builder")

    level = AuthLevel.API_KEY

    def __init__(
        self,
        transport: Transport,
        private_key: str,
        credentials: ApiCredentials,
        chain_id: int = POLYGON,
        clock: Optional[Clock] = None,
        random_bytes: Optional[RandomBytes] = None,
        expiration_seconds: int = ONE_YEAR_SECONDS
    ):
        super().__init__(
            transport,
            chain_id=chain_id,
            clock=clock,
            random_bytes=random_bytes,
            expiration_seconds=expiration_seconds
        )
        if not isinstance(credentials, ApiCredentials):
            raise ValidationError(f"credentials must be ApiCredentials, got {type(credentials).__name__}")

        key = validate_private_key(private_key)
        object.__setattr__(self, "_private_key", key)
        object.__setattr__(self, "_address", derive_address(key))
        object.__setattr__(self, "_credentials", credentials)
        object.__setattr__(self, "_order_builder", OrderBuilder(
            key,
            chain_id=self._chain_id,
            clock=self._clock,
            random_bytes=self._random_bytes,
            expiration_seconds=self._expiration_seconds
        ))

    def __repr__(self) -> str:
        return (
            f"ApiKeyClient(address={self._address}, api_key={self._credentials.api_key}, "
            f"chain_id={self._chain_id})"
        )

    def downgrade(self) -> WalletClient:
        """Drop the API credentials, keep the wallet."""
        return WalletClient(self._transport, self._private_key, **self._ambient())

    def to_unauthenticated(self) -> UnauthenticatedClient:
        """Drop both credentials and wallet."""
        return UnauthenticatedClient(self._transport, **self._ambient())


def client_from_settings(
    settings: Optional[PolymarketSettings] = None,
    transport: Optional[Transport] = None
) -> _PublicEndpoints:
    """
    Build the highest-level client the settings support.

    - private key and full API credentials: ApiKeyClient
    - private key only: WalletClient
    - nothing: UnauthenticatedClient

    No request is made; credentials are taken as configured. Also applies
    the configured package log level and, when enabled, installs the
    metrics collector.
    """
    settings = settings or get_settings()

    logging.getLogger(LOGGER_NAME).setLevel(settings.log_level)
    if settings.enable_metrics:
        configure_metrics(enabled=True, port=settings.metrics_port)

    transport = transport or RequestsTransport(
        settings.clob_url,
        connect_timeout=settings.connect_timeout,
        request_timeout=settings.request_timeout,
        log_requests=settings.log_requests
    )

    client = UnauthenticatedClient(
        transport,
        chain_id=settings.chain_id,
        expiration_seconds=settings.order_expiration_seconds
    )
    if settings.private_key is None:
        logger.info("No private key configured, using unauthenticated client")
        return client

    wallet = client.upgrade(settings.private_key.get_secret_value())

    credentials = settings.api_credentials()
    if credentials is None:
        logger.info(f"Wallet client ready for {wallet.address}")
        return wallet

    trader = wallet.with_credentials(credentials)
    logger.info(f"API key client ready for {trader.address}")
    return trader
