"""
Authentication header builders for Polymarket CLOB.

Handles L1 (wallet signature) and L2 (API key HMAC) authentication.
Adapted from Polymarket's py-clob-client (MIT License).

Headers are single-request artifacts: every call reads the clock again,
and the L2 signature covers the exact path and body bytes about to be
sent. Build them immediately before transmission, never ahead of time.
"""

import base64
import binascii
import hmac
import hashlib
import logging
from typing import Optional

from ..constants import (
    POLYGON,
    POLY_ADDRESS,
    POLY_SIGNATURE,
    POLY_TIMESTAMP,
    POLY_NONCE,
    POLY_API_KEY,
    POLY_PASSPHRASE,
)
from ..exceptions import ValidationError
from ..metrics import get_metrics
from ..models import ApiCredentials, AuthLevel
from ..utils.sources import Clock, system_clock
from ..utils.validators import validate_address, validate_uint
from .eip712_models import clob_auth_digest
from .signing import sign_digest

logger = logging.getLogger(__name__)


def build_l1_headers(
    private_key: str,
    address: str,
    nonce: int = 0,
    *,
    chain_id: int = POLYGON,
    clock: Optional[Clock] = None
) -> dict[str, str]:
    """
    Create L1 (wallet-proof) authentication headers.

    Signs the EIP-712 ClobAuth message binding {address, timestamp, nonce}.

    Args:
        private_key: Private key for signing
        address: Wallet address derived from the key
        nonce: Credential nonce (default: 0)
        chain_id: Chain ID of the ClobAuth domain
        clock: Unix-seconds clock (system clock if None)

    Returns:
        Headers POLY_ADDRESS, POLY_SIGNATURE, POLY_TIMESTAMP, POLY_NONCE

    Raises:
        ValidationError: If key, address or nonce is malformed
    """
    address = validate_address(address)
    nonce = validate_uint(nonce, "nonce")
    timestamp = str((clock or system_clock)())

    digest = clob_auth_digest(address, timestamp, nonce, chain_id)
    signature = sign_digest(private_key, digest)

    headers = {
        POLY_ADDRESS: address,
        POLY_SIGNATURE: signature,
        POLY_TIMESTAMP: timestamp,
        POLY_NONCE: str(nonce),
    }

    get_metrics().track_headers(AuthLevel.WALLET)
    logger.debug(f"Created L1 headers for {address}")
    return headers


def _hmac_signature(secret: str, message: str) -> str:
    try:
        key = base64.urlsafe_b64decode(secret)
    except (binascii.Error, ValueError, TypeError) as e:
        # SECURITY: never echo the secret
        raise ValidationError("API secret is not valid base64") from e

    digest = hmac.new(key, message.encode("utf-8"), hashlib.sha256).digest()
    return base64.urlsafe_b64encode(digest).decode("utf-8")


def l2_signing_string(timestamp: str, method: str, path: str, body: str = "") -> str:
    """timestamp || METHOD || path || body, exactly as sent on the wire."""
    return f"{timestamp}{method.upper()}{path}{body}"


def build_l2_headers(
    credentials: ApiCredentials,
    address: str,
    method: str,
    path: str,
    body: str = "",
    *,
    clock: Optional[Clock] = None
) -> dict[str, str]:
    """
    Create L2 (API key) authentication headers.

    signature = urlsafe_b64(HMAC-SHA256(urlsafe_b64decode(secret),
                                        timestamp + METHOD + path + body))

    Args:
        credentials: API key, secret and passphrase
        address: Wallet address that owns the credentials
        method: HTTP method (GET, POST, DELETE)
        path: Request path with leading slash, no query string
        body: Exact serialized request body ("" when bodyless)
        clock: Unix-seconds clock (system clock if None)

    Returns:
        Headers POLY_ADDRESS, POLY_SIGNATURE, POLY_TIMESTAMP,
        POLY_API_KEY, POLY_PASSPHRASE

    Raises:
        ValidationError: If the secret is not decodable
    """
    if not path.startswith("/"):
        raise ValidationError(f"Request path must start with '/', got {path!r}")

    timestamp = str((clock or system_clock)())
    signature = _hmac_signature(
        credentials.secret,
        l2_signing_string(timestamp, method, path, body),
    )

    headers = {
        POLY_ADDRESS: address,
        POLY_SIGNATURE: signature,
        POLY_TIMESTAMP: timestamp,
        POLY_API_KEY: credentials.api_key,
        POLY_PASSPHRASE: credentials.passphrase,
    }

    get_metrics().track_headers(AuthLevel.API_KEY)
    logger.debug(f"Created L2 headers for {method.upper()} {path}")
    return headers


def verify_l2_signature(
    secret: str,
    signature: str,
    timestamp: str,
    method: str,
    path: str,
    body: str = ""
) -> bool:
    """
    Verify an L2 HMAC signature in constant time.

    Args:
        secret: API secret (url-safe base64)
        signature: Signature to verify
        timestamp: Request timestamp as sent
        method: HTTP method
        path: Request path
        body: Request body

    Returns:
        True if signature is valid
    """
    expected = _hmac_signature(secret, l2_signing_string(str(timestamp), method, path, body))
    return hmac.compare_digest(signature, expected)


class Authenticator:
    """
    Handles L1 and L2 authentication for Polymarket CLOB.

    L1: Private key signature for wallet operations
    L2: API key HMAC signature for API requests

    Holds only the chain ID and the clock; keys and credentials are
    passed per call and never retained.
    """

    def __init__(self, chain_id: int = POLYGON, clock: Optional[Clock] = None):
        """
        Initialize authenticator.

        Args:
            chain_id: Chain ID for the ClobAuth domain (default: 137)
            clock: Unix-seconds clock (system clock if None)
        """
        self.chain_id = chain_id
        self.clock = clock or system_clock

    def create_l1_headers(
        self,
        private_key: str,
        address: str,
        nonce: int = 0
    ) -> dict[str, str]:
        """Create L1 headers on this authenticator's chain and clock."""
        return build_l1_headers(
            private_key,
            address,
            nonce,
            chain_id=self.chain_id,
            clock=self.clock
        )

    def create_l2_headers(
        self,
        credentials: ApiCredentials,
        address: str,
        method: str,
        path: str,
        body: str = ""
    ) -> dict[str, str]:
        """Create L2 headers on this authenticator's clock."""
        return build_l2_headers(
            credentials,
            address,
            method,
            path,
            body,
            clock=self.clock
        )
