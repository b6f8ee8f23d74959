"""
Type definitions for the Polymarket authentication core.

Uses Pydantic for order models and frozen dataclasses for secrets.
DECIMAL PRECISION: prices and sizes are Decimal, amounts are integer strings.
"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import ZERO_ADDRESS
from .exceptions import ValidationError


class AuthLevel(int, Enum):
    """Trust level of a client."""
    UNAUTHENTICATED = 0  # Public endpoints only
    WALLET = 1           # L1: proven by wallet signature
    API_KEY = 2          # L2: proven by API key HMAC


class Side(str, Enum):
    """Order side."""
    BUY = "BUY"
    SELL = "SELL"

    @property
    def wire_value(self) -> int:
        """uint8 value in the signed order struct."""
        return 0 if self is Side.BUY else 1


class OrderType(str, Enum):
    """Order type."""
    GTC = "GTC"  # Good-til-cancelled
    GTD = "GTD"  # Good-til-date
    FOK = "FOK"  # Fill-or-kill
    FAK = "FAK"  # Fill-and-kill


class SignatureType(int, Enum):
    """Wallet signature type."""
    EOA = 0               # Externally Owned Account (MetaMask, hardware wallet)
    POLY_PROXY = 1        # Polymarket proxy wallet (email/Magic login)
    POLY_GNOSIS_SAFE = 2  # Polymarket Gnosis Safe proxy


@dataclass(frozen=True)
class ApiCredentials:
    """
    API key credentials issued by the exchange per (address, nonce).

    SECURITY: secret and passphrase are hidden from repr to prevent leakage in logs.
    """
    api_key: str
    secret: str = field(repr=False)  # url-safe base64
    passphrase: str = field(repr=False)

    @classmethod
    def from_response(cls, data: Any) -> "ApiCredentials":
        """
        Parse credentials from a create/derive API key response.

        Raises:
            ValidationError: If any field is missing
        """
        if not isinstance(data, dict):
            raise ValidationError("API key response must be a JSON object")

        api_key = data.get("apiKey")
        secret = data.get("secret")
        passphrase = data.get("passphrase")

        if not all([api_key, secret, passphrase]):
            raise ValidationError("API key response missing apiKey, secret or passphrase")

        return cls(api_key=api_key, secret=secret, passphrase=passphrase)


class OrderArgs(BaseModel):
    """
    Limit order intent, before amounts are scaled and the order is signed.

    Constructing it directly with malformed fields raises
    pydantic.ValidationError; create_limit_order() reports the same
    failure as polymarket_auth.ValidationError. Range checks (price in
    (0, 1), positive size, token ID format) happen at signing time.
    """
    model_config = ConfigDict(frozen=True)

    token_id: str = Field(..., description="ERC1155 token ID")
    price: Decimal = Field(..., description="Price per token, strictly between 0 and 1")
    size: Decimal = Field(..., description="Number of outcome tokens")
    side: Side = Field(..., description="BUY or SELL")
    expiration: Optional[int] = Field(None, description="Unix seconds (default: now + 1 year)")
    nonce: int = Field(default=0, description="Exchange nonce for on-chain cancellation")
    fee_rate_bps: int = Field(default=0, description="Fee rate in basis points")
    taker: str = Field(default=ZERO_ADDRESS, description="Counterparty (zero address = anyone)")
    signature_type: SignatureType = Field(default=SignatureType.EOA)
    funder: Optional[str] = Field(None, description="Maker address for proxy wallets")

    @field_validator("price", "size", mode="before")
    @classmethod
    def validate_numeric(cls, v: Any) -> Decimal:
        """Convert numeric fields to Decimal."""
        try:
            if isinstance(v, Decimal):
                return v
            elif isinstance(v, str):
                return Decimal(v)
            elif isinstance(v, (int, float)) and not isinstance(v, bool):
                return Decimal(str(v))  # Via string to avoid float precision loss
        except InvalidOperation:
            raise ValueError(f"Invalid decimal value: {v!r}")
        raise ValueError(f"Cannot convert {type(v).__name__} to Decimal")


class SignedOrder(BaseModel):
    """
    EIP-712 signed order for the CTF Exchange.

    Immutable. Field names are snake_case in Python and camelCase on the wire.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    salt: str
    maker: str
    signer: str
    taker: str
    token_id: str = Field(..., alias="tokenId")
    maker_amount: str = Field(..., alias="makerAmount")
    taker_amount: str = Field(..., alias="takerAmount")
    expiration: str
    nonce: str
    fee_rate_bps: str = Field(..., alias="feeRateBps")
    side: Side
    signature_type: SignatureType = Field(..., alias="signatureType")
    signature: str

    def to_wire(self) -> dict[str, Any]:
        """JSON-ready dict with camelCase keys, side as BUY/SELL and signatureType as int."""
        return self.model_dump(by_alias=True, mode="json")
