"""
Order builder with EIP-712 signing.

Implements order construction and signing for the Polymarket CTF Exchange.
Adapted from py-clob-client and python-order-utils (MIT License).

Pipeline (order matters):
1. domain separator, constant per (chain, exchange contract)
2. struct hash of the Order fields
3. digest = keccak256(0x1901 || domain separator || struct hash), signed
"""

import hashlib
import logging
from functools import lru_cache
from typing import Any, Optional, Union

import pydantic

from ..auth.eip712_models import Order, exchange_domain
from ..auth.signing import keccak256, derive_address, sign_digest, recover_signer
from ..constants import (
    POLYGON,
    CTF_EXCHANGE_DOMAIN_NAME,
    CTF_EXCHANGE_DOMAIN_VERSION,
    ONE_YEAR_SECONDS,
    ZERO_ADDRESS,
    get_exchange_address,
)
from ..exceptions import ValidationError
from ..metrics import get_metrics
from ..models import OrderArgs, Side, SignatureType, SignedOrder
from ..utils.numeric import to_wei
from ..utils.sources import Clock, RandomBytes, system_clock, system_random_bytes
from ..utils.validators import (
    validate_address,
    validate_price,
    validate_private_key,
    validate_size,
    validate_token_id,
    validate_uint,
)

logger = logging.getLogger(__name__)


EIP712_PREFIX = b"\x19\x01"

SALT_BYTES = 32
MAX_UINT8 = 2**8 - 1


def resolve_exchange(chain_id: int, neg_risk: bool = False) -> str:
    """
    Verifying contract for a chain.

    Raises:
        ValidationError: If no exchange is deployed on the chain
    """
    try:
        return get_exchange_address(chain_id, neg_risk)
    except KeyError as e:
        raise ValidationError(f"No exchange deployment known for chain {chain_id}") from e


# ========== EIP-712 Hashing ==========

@lru_cache(maxsize=16)
def domain_separator(
    chain_id: int,
    verifying_contract: str,
    name: str = CTF_EXCHANGE_DOMAIN_NAME,
    version: str = CTF_EXCHANGE_DOMAIN_VERSION
) -> bytes:
    """
    Compute the EIP-712 domain separator for an exchange deployment.

    hashStruct(EIP712Domain(name, version, chainId, verifyingContract))
    """
    domain = exchange_domain(
        validate_uint(chain_id, "chain_id"),
        validate_address(verifying_contract),
        name,
        version,
    )
    return domain.hash_struct()


def _enum_value(value: Union[Side, SignatureType, int, str]) -> int:
    if isinstance(value, Side):
        return value.wire_value
    if isinstance(value, SignatureType):
        return value.value
    if isinstance(value, str) and value in Side.__members__:
        return Side(value).wire_value
    return value


def to_order_struct(order: dict[str, Any]) -> Order:
    """
    Build the EIP-712 Order struct from snake_case order fields.

    Numbers may be ints or decimal strings; addresses are checksummed.

    Raises:
        ValidationError: If a field is missing or out of range
    """
    try:
        return Order(
            salt=validate_uint(order["salt"], "salt"),
            maker=validate_address(order["maker"]),
            signer=validate_address(order["signer"]),
            taker=validate_address(order["taker"]),
            tokenId=validate_uint(order["token_id"], "token_id"),
            makerAmount=validate_uint(order["maker_amount"], "maker_amount"),
            takerAmount=validate_uint(order["taker_amount"], "taker_amount"),
            expiration=validate_uint(order["expiration"], "expiration"),
            nonce=validate_uint(order["nonce"], "nonce"),
            feeRateBps=validate_uint(order["fee_rate_bps"], "fee_rate_bps"),
            side=validate_uint(_enum_value(order["side"]), "side", max_value=MAX_UINT8),
            signatureType=validate_uint(
                _enum_value(order["signature_type"]), "signature_type", max_value=MAX_UINT8
            ),
        )
    except KeyError as e:
        raise ValidationError(f"Order is missing field {e.args[0]}") from e


def order_struct_hash(order: dict[str, Any]) -> bytes:
    """
    Compute hashStruct(Order) for order fields.

    Args:
        order: snake_case order fields (salt, maker, signer, taker, token_id,
               maker_amount, taker_amount, expiration, nonce, fee_rate_bps,
               side, signature_type)

    Returns:
        32-byte struct hash
    """
    return to_order_struct(order).hash_struct()


def order_digest(domain_sep: bytes, struct_hash: bytes) -> bytes:
    """Final EIP-712 digest: keccak256(0x1901 || domainSeparator || structHash)."""
    return keccak256(EIP712_PREFIX + domain_sep + struct_hash)


def hash_order(
    order: Union[SignedOrder, dict[str, Any]],
    chain_id: int = POLYGON,
    neg_risk: bool = False
) -> str:
    """
    Compute the order hash the exchange uses to identify an order.

    Returns:
        0x-prefixed hex digest

    Raises:
        ValidationError: Malformed order or unknown chain
    """
    fields = order.model_dump() if isinstance(order, SignedOrder) else order
    digest = order_digest(
        domain_separator(chain_id, resolve_exchange(chain_id, neg_risk)),
        order_struct_hash(fields),
    )
    return "0x" + digest.hex()


def verify_order_signature(
    order: SignedOrder,
    chain_id: int = POLYGON,
    neg_risk: bool = False
) -> bool:
    """Check that order.signature was produced by order.signer."""
    recovered = recover_signer(hash_order(order, chain_id, neg_risk), order.signature)
    return recovered == validate_address(order.signer)


# ========== Amounts & Salt ==========

def calculate_amounts(side: Side, price: Any, size: Any) -> tuple[str, str]:
    """
    Calculate maker and taker amounts (6-decimal fixed point).

    BUY:  maker pays price*size USDC, receives size tokens
    SELL: maker pays size tokens, receives price*size USDC

    Exact Decimal arithmetic, rounded half-up to whole units.

    Args:
        side: Order side
        price: Price per token, strictly between 0 and 1
        size: Number of tokens, strictly positive

    Returns:
        (maker_amount, taker_amount) as integer strings

    Raises:
        ValidationError: If price or size violates its bounds

    Example:
        >>> calculate_amounts(Side.BUY, "0.65", "100")
        ('65000000', '100000000')
    """
    price_dec = validate_price(price)
    size_dec = validate_size(size)

    token_amount = to_wei(size_dec)
    usdc_amount = to_wei(price_dec * size_dec)

    if token_amount == 0 or usdc_amount == 0:
        raise ValidationError(
            f"Order too small: price={price_dec} size={size_dec} rounds to zero units"
        )

    if Side(side) == Side.BUY:
        return str(usdc_amount), str(token_amount)
    return str(token_amount), str(usdc_amount)


def generate_salt(random_bytes: Optional[RandomBytes] = None) -> str:
    """
    Generate a random 256-bit salt as a decimal string.

    The salt only makes otherwise-identical orders hash-distinct;
    it is not a secret.
    """
    source = random_bytes or system_random_bytes
    return str(int.from_bytes(source(SALT_BYTES), "big"))


def salt_from_key(idempotency_key: str) -> str:
    """
    Derive a deterministic salt from an idempotency key.

    Same key gives the same salt, hence the same order hash, so a retried
    submission cannot create a duplicate order.

    Example:
        >>> salt_from_key("550e8400-e29b-41d4-a716-446655440000") == \\
        ...     salt_from_key("550e8400-e29b-41d4-a716-446655440000")
        True
    """
    hash_bytes = hashlib.sha256(idempotency_key.encode("utf-8")).digest()
    return str(int.from_bytes(hash_bytes, "big"))


# ========== Builder ==========

class OrderBuilder:
    """
    Builds and signs orders for the Polymarket CTF Exchange.

    Handles:
    - Amount scaling
    - Salt generation (random or idempotency-keyed)
    - Default expiration, nonce, fee rate and taker
    - EIP-712 signing against the standard or neg-risk exchange
    """

    def __init__(
        self,
        private_key: str,
        chain_id: int = POLYGON,
        neg_risk: bool = False,
        clock: Optional[Clock] = None,
        random_bytes: Optional[RandomBytes] = None,
        expiration_seconds: int = ONE_YEAR_SECONDS
    ):
        """
        Initialize order builder.

        Args:
            private_key: Signer private key
            chain_id: Chain ID (137 for Polygon mainnet)
            neg_risk: Sign against the neg-risk exchange by default
            clock: Unix-seconds clock for default expirations
            random_bytes: Secure random source for salts
            expiration_seconds: Default order lifetime
        """
        self._private_key = validate_private_key(private_key)
        self.address = derive_address(self._private_key)
        self.chain_id = chain_id
        self.neg_risk = neg_risk
        self.clock = clock or system_clock
        self.random_bytes = random_bytes or system_random_bytes
        self.expiration_seconds = expiration_seconds

    def __repr__(self) -> str:
        return f"OrderBuilder(address={self.address}, chain_id={self.chain_id})"

    def exchange_address(self, neg_risk: Optional[bool] = None) -> str:
        """Verifying contract for this builder's chain."""
        if neg_risk is None:
            neg_risk = self.neg_risk
        return resolve_exchange(self.chain_id, neg_risk)

    def build_order(
        self,
        args: OrderArgs,
        salt: Optional[str] = None,
        idempotency_key: Optional[str] = None,
        neg_risk: Optional[bool] = None
    ) -> SignedOrder:
        """
        Build and sign an order.

        Args:
            args: Order intent
            salt: Explicit salt (decimal string)
            idempotency_key: Derive a deterministic salt from this key
            neg_risk: Override the builder's exchange selection

        Returns:
            Signed order, ready for submission

        Raises:
            ValidationError: If order parameters are invalid
        """
        token_id = validate_token_id(args.token_id)
        maker_amount, taker_amount = calculate_amounts(args.side, args.price, args.size)

        if salt is None:
            salt = salt_from_key(idempotency_key) if idempotency_key else generate_salt(self.random_bytes)

        expiration = args.expiration
        if expiration is None:
            expiration = self.clock() + self.expiration_seconds

        fields = {
            "salt": str(validate_uint(salt, "salt")),
            "maker": validate_address(args.funder) if args.funder else self.address,
            "signer": self.address,
            "taker": validate_address(args.taker or ZERO_ADDRESS),
            "token_id": token_id,
            "maker_amount": maker_amount,
            "taker_amount": taker_amount,
            "expiration": str(validate_uint(expiration, "expiration")),
            "nonce": str(validate_uint(args.nonce, "nonce")),
            "fee_rate_bps": str(validate_uint(args.fee_rate_bps, "fee_rate_bps")),
            "side": Side(args.side),
            "signature_type": SignatureType(args.signature_type),
        }

        signature = self.sign(fields, neg_risk=neg_risk)
        order = SignedOrder(signature=signature, **fields)

        get_metrics().track_order_signed(order.side.value)
        logger.info(
            f"Built order: {order.side.value} {args.size} @ {args.price} "
            f"(token={token_id}, nonce={order.nonce})"
        )
        return order

    def sign(self, fields: dict[str, Any], neg_risk: Optional[bool] = None) -> str:
        """
        Sign order fields with EIP-712.

        Returns:
            0x-prefixed 65-byte signature
        """
        digest = order_digest(
            domain_separator(self.chain_id, self.exchange_address(neg_risk)),
            order_struct_hash(fields),
        )
        return sign_digest(self._private_key, digest)


def create_limit_order(
    private_key: str,
    token_id: str,
    side: Side,
    price: Any,
    size: Any,
    *,
    expiration: Optional[int] = None,
    nonce: int = 0,
    fee_rate_bps: int = 0,
    chain_id: int = POLYGON,
    neg_risk: bool = False,
    salt: Optional[str] = None,
    clock: Optional[Clock] = None,
    random_bytes: Optional[RandomBytes] = None
) -> SignedOrder:
    """
    Create a signed limit order without any client.

    Example:
        >>> order = create_limit_order(pk, "123", Side.BUY, "0.5", "10")
        >>> order.maker_amount, order.taker_amount
        ('5000000', '10000000')
    """
    builder = OrderBuilder(
        private_key,
        chain_id=chain_id,
        neg_risk=neg_risk,
        clock=clock,
        random_bytes=random_bytes
    )
    try:
        args = OrderArgs(
            token_id=token_id,
            price=price,
            size=size,
            side=side,
            expiration=expiration,
            nonce=nonce,
            fee_rate_bps=fee_rate_bps,
        )
    except pydantic.ValidationError as e:
        raise ValidationError(
            "Invalid order arguments: " + ", ".join(
                ".".join(str(part) for part in error["loc"]) for error in e.errors()
            )
        ) from e
    return builder.build_order(args, salt=salt)
