"""Authentication modules: signature primitives and L1/L2 header builders."""

from .authenticator import (
    Authenticator,
    build_l1_headers,
    build_l2_headers,
    verify_l2_signature,
)
from .signing import keccak256, derive_address, sign_digest, recover_signer

__all__ = [
    "Authenticator",
    "build_l1_headers",
    "build_l2_headers",
    "verify_l2_signature",
    "keccak256",
    "derive_address",
    "sign_digest",
    "recover_signer",
]
