"""Utility modules for the Polymarket authentication core."""

from .validators import (
    validate_private_key,
    validate_address,
    validate_token_id,
    validate_price,
    validate_size,
)
from .numeric import to_wei, from_wei

__all__ = [
    "validate_private_key",
    "validate_address",
    "validate_token_id",
    "validate_price",
    "validate_size",
    "to_wei",
    "from_wei",
]
