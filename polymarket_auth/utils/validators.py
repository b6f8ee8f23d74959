"""
Input validation utilities.

Validates keys, addresses and order inputs before anything is signed
or sent. All failures raise ValidationError and are never retried.
"""

import re
from typing import Any
from decimal import Decimal, InvalidOperation

from eth_utils import is_checksum_address, to_checksum_address

from ..exceptions import ValidationError


# secp256k1 group order
SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

MAX_UINT256 = 2**256 - 1

_HEX_KEY = re.compile(r"^[0-9a-fA-F]{64}$")
_HEX_ADDRESS = re.compile(r"^[0-9a-fA-F]{40}$")
_DECIMAL_DIGITS = re.compile(r"[0-9]+")


def validate_private_key(private_key: str) -> str:
    """
    Validate private key format and range.

    Args:
        private_key: Private key hex string (with or without 0x)

    Returns:
        Normalized private key (0x-prefixed, lowercase)

    Raises:
        ValidationError: If private key is invalid
    """
    if not isinstance(private_key, str):
        raise ValidationError(f"Private key must be string, got {type(private_key).__name__}")

    key = private_key[2:] if private_key.startswith("0x") else private_key

    # Never echo the key back in the message
    if not _HEX_KEY.match(key):
        raise ValidationError("Invalid private key format: expected 32 bytes of hex")

    if not 0 < int(key, 16) < SECP256K1_N:
        raise ValidationError("Invalid private key: scalar out of curve range")

    return f"0x{key.lower()}"


def private_key_to_bytes(private_key: str) -> bytes:
    """Validate and convert private key to its 32 raw bytes."""
    return bytes.fromhex(validate_private_key(private_key)[2:])


def validate_address(address: str) -> str:
    """
    Validate Ethereum address.

    All-lowercase and all-uppercase addresses are accepted as-is.
    Mixed-case addresses must carry a valid EIP-55 checksum.

    Args:
        address: Ethereum address

    Returns:
        Checksummed address

    Raises:
        ValidationError: If address is invalid
    """
    if not isinstance(address, str):
        raise ValidationError(f"Address must be string, got {type(address).__name__}")

    addr = address[2:] if address.startswith("0x") else address

    if not _HEX_ADDRESS.match(addr):
        raise ValidationError(f"Invalid Ethereum address: {address}")

    prefixed = f"0x{addr}"
    if addr != addr.lower() and addr != addr.upper() and not is_checksum_address(prefixed):
        raise ValidationError(f"Invalid address checksum: {address}")

    return to_checksum_address(prefixed)


def validate_token_id(token_id: Any) -> str:
    """
    Validate token ID format.

    Args:
        token_id: ERC1155 token ID (decimal string or int)

    Returns:
        Token ID as decimal string

    Raises:
        ValidationError: If token ID is invalid
    """
    if isinstance(token_id, int) and not isinstance(token_id, bool):
        token_id = str(token_id)

    if not isinstance(token_id, str):
        raise ValidationError(f"Token ID must be string, got {type(token_id).__name__}")

    if not token_id:
        raise ValidationError("Token ID cannot be empty")

    # Token IDs are large integers as strings
    if not _DECIMAL_DIGITS.fullmatch(token_id):
        raise ValidationError(f"Token ID must be numeric string, got {token_id}")

    if int(token_id) > MAX_UINT256:
        raise ValidationError(f"Token ID exceeds uint256: {token_id}")

    return token_id


def validate_uint(value: Any, field_name: str, max_value: int = MAX_UINT256) -> int:
    """
    Validate a non-negative integer field (nonce, expiration, fee rate).

    Accepts ints and decimal strings.

    Raises:
        ValidationError: If value is negative, non-integral or too large
    """
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer, got bool")

    if isinstance(value, str):
        if not _DECIMAL_DIGITS.fullmatch(value):
            raise ValidationError(f"{field_name} must be a non-negative integer, got {value!r}")
        value = int(value)

    if not isinstance(value, int):
        raise ValidationError(f"{field_name} must be an integer, got {type(value).__name__}")

    if value < 0 or value > max_value:
        raise ValidationError(f"{field_name} out of range: {value}")

    return value


def _to_decimal(value: Any, field_name: str) -> Decimal:
    try:
        if isinstance(value, Decimal):
            return value
        elif isinstance(value, str):
            return Decimal(value)
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            # Via string to avoid float precision loss
            return Decimal(str(value))
        else:
            raise ValidationError(f"{field_name} must be numeric, got {type(value).__name__}")
    except (ValueError, InvalidOperation) as e:
        raise ValidationError(f"Invalid {field_name} format: {value}") from e


def validate_price(price: Any) -> Decimal:
    """
    Validate order price.

    Prices are probabilities: strictly between 0 and 1.

    Args:
        price: Order price (float, int, str, or Decimal)

    Returns:
        Price as Decimal

    Raises:
        ValidationError: If price is invalid
    """
    price_dec = _to_decimal(price, "price")

    if not price_dec.is_finite() or not (Decimal("0") < price_dec < Decimal("1")):
        raise ValidationError(f"Price must be between 0 and 1 (exclusive), got {price}")

    return price_dec


def validate_size(size: Any) -> Decimal:
    """
    Validate order size (number of outcome tokens).

    Args:
        size: Order size (float, int, str, or Decimal)

    Returns:
        Size as Decimal

    Raises:
        ValidationError: If size is not strictly positive
    """
    size_dec = _to_decimal(size, "size")

    if not size_dec.is_finite() or size_dec <= 0:
        raise ValidationError(f"Size must be positive, got {size}")

    return size_dec
