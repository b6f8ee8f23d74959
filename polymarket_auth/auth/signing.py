"""
Signature primitives.

Keccak-256 hashing, secp256k1 ECDSA signing over 32-byte digests and
address derivation. Every other signer in the package sits on top of
these functions.
"""

import logging
from typing import Union

from eth_keys import keys
from eth_utils import keccak, to_checksum_address

from ..exceptions import SigningError, ValidationError
from ..utils.validators import SECP256K1_N, private_key_to_bytes

logger = logging.getLogger(__name__)

SIGNATURE_LENGTH = 65
# Recovery id offset used by Ethereum signatures (v = 27 | 28)
V_OFFSET = 27


def keccak256(data: bytes) -> bytes:
    """Keccak-256 of raw bytes (32-byte digest)."""
    return keccak(data)


def _to_digest(digest: Union[bytes, str]) -> bytes:
    if isinstance(digest, str):
        hex_part = digest[2:] if digest.startswith("0x") else digest
        try:
            digest = bytes.fromhex(hex_part)
        except ValueError as e:
            raise ValidationError("Digest must be hex encoded") from e

    if not isinstance(digest, (bytes, bytearray)) or len(digest) != 32:
        raise ValidationError("Digest must be exactly 32 bytes")

    return bytes(digest)


def derive_address(private_key: str) -> str:
    """
    Derive the Ethereum address for a private key.

    Keccak-256 of the 64-byte uncompressed public key (no 0x04 prefix),
    low 20 bytes, EIP-55 checksummed.

    Args:
        private_key: Private key hex string

    Returns:
        Checksummed address

    Raises:
        ValidationError: If private key is invalid
    """
    key = keys.PrivateKey(private_key_to_bytes(private_key))
    public_key = key.public_key.to_bytes()
    return to_checksum_address(keccak256(public_key)[-20:])


def sign_digest(private_key: str, digest: Union[bytes, str]) -> str:
    """
    Sign a 32-byte digest with secp256k1.

    Nonces are derived deterministically (RFC 6979), so the same
    key and digest always produce the same signature.

    Args:
        private_key: Private key hex string
        digest: 32-byte digest (bytes or hex string)

    Returns:
        0x-prefixed hex of r || s || v (65 bytes), v in {27, 28}

    Raises:
        ValidationError: If key or digest is malformed
        SigningError: If signing fails
    """
    key_bytes = private_key_to_bytes(private_key)
    digest_bytes = _to_digest(digest)

    try:
        signature = keys.PrivateKey(key_bytes).sign_msg_hash(digest_bytes)
    except Exception as e:
        # SECURITY: Sanitize error message to prevent credential leakage
        error_type = type(e).__name__
        logger.error(f"Digest signing failed: {error_type}")
        raise SigningError(f"Digest signing failed: {error_type}")

    raw = (
        signature.r.to_bytes(32, "big")
        + signature.s.to_bytes(32, "big")
        + bytes([signature.v + V_OFFSET])
    )
    return "0x" + raw.hex()


def parse_signature(signature: str) -> tuple[int, int, int]:
    """
    Parse and validate a 65-byte r || s || v signature.

    Rejects malleable (high-s) signatures and unknown recovery ids.

    Args:
        signature: 0x-prefixed hex signature

    Returns:
        Tuple of (r, s, v) with v in {27, 28}

    Raises:
        ValidationError: If signature is malformed or non-canonical
    """
    if not isinstance(signature, str):
        raise ValidationError(f"Signature must be string, got {type(signature).__name__}")

    hex_part = signature[2:] if signature.startswith("0x") else signature
    if len(hex_part) != SIGNATURE_LENGTH * 2:
        raise ValidationError(
            f"Signature must be {SIGNATURE_LENGTH} bytes, got {len(hex_part) // 2}"
        )

    try:
        raw = bytes.fromhex(hex_part)
    except ValueError as e:
        raise ValidationError("Signature must be hex encoded") from e

    r = int.from_bytes(raw[:32], "big")
    s = int.from_bytes(raw[32:64], "big")
    v = raw[64]

    if v not in (V_OFFSET, V_OFFSET + 1):
        raise ValidationError(f"Invalid recovery id: {v}")
    if not 0 < r < SECP256K1_N:
        raise ValidationError("Signature r out of range")
    if not 0 < s <= SECP256K1_N // 2:
        raise ValidationError("Non-canonical signature: s out of lower half-order")

    return r, s, v


def recover_signer(digest: Union[bytes, str], signature: str) -> str:
    """
    Recover the checksummed address that produced a signature.

    Raises:
        ValidationError: If digest or signature is malformed
    """
    digest_bytes = _to_digest(digest)
    r, s, v = parse_signature(signature)

    try:
        public_key = keys.Signature(vrs=(v - V_OFFSET, r, s)).recover_public_key_from_msg_hash(
            digest_bytes
        )
    except Exception as e:
        raise ValidationError(f"Signature recovery failed: {type(e).__name__}") from e

    return to_checksum_address(keccak256(public_key.to_bytes())[-20:])
