"""
Polymarket CLOB Authentication Core

Trust levels, request signing and EIP-712 order signing for the
Polymarket central limit order book.

Adapted from Polymarket's official clients (MIT License):
- https://github.com/Polymarket/py-clob-client
- https://github.com/Polymarket/python-order-utils
"""

from .client import (
    UnauthenticatedClient,
    WalletClient,
    ApiKeyClient,
    client_from_settings,
)
from .api.transport import RequestsTransport, Transport, TransportResponse
from .auth.authenticator import (
    Authenticator,
    build_l1_headers,
    build_l2_headers,
    verify_l2_signature,
)
from .auth.signing import derive_address, keccak256, recover_signer, sign_digest
from .config import PolymarketSettings, get_settings
from .constants import AMOY, POLYGON
from .models import (
    ApiCredentials,
    AuthLevel,
    OrderArgs,
    OrderType,
    Side,
    SignatureType,
    SignedOrder,
)
from .exceptions import (
    PolymarketError,
    ValidationError,
    SigningError,
    APIError,
    AuthenticationError,
    TimeoutError,
    StateTransitionError,
)
from .trading.order_builder import OrderBuilder, create_limit_order

__version__ = "0.1.0"

__all__ = [
    # Clients
    "UnauthenticatedClient",
    "WalletClient",
    "ApiKeyClient",
    "client_from_settings",

    # Transport
    "Transport",
    "TransportResponse",
    "RequestsTransport",

    # Signing
    "Authenticator",
    "build_l1_headers",
    "build_l2_headers",
    "verify_l2_signature",
    "derive_address",
    "keccak256",
    "recover_signer",
    "sign_digest",
    "OrderBuilder",
    "create_limit_order",

    # Config
    "PolymarketSettings",
    "get_settings",
    "POLYGON",
    "AMOY",

    # Types
    "ApiCredentials",
    "AuthLevel",
    "OrderArgs",
    "OrderType",
    "Side",
    "SignatureType",
    "SignedOrder",

    # Exceptions
    "PolymarketError",
    "ValidationError",
    "SigningError",
    "APIError",
    "AuthenticationError",
    "TimeoutError",
    "StateTransitionError",
]
