"""Order construction and EIP-712 signing."""

from .order_builder import (
    OrderBuilder,
    calculate_amounts,
    create_limit_order,
    domain_separator,
    generate_salt,
    hash_order,
    order_digest,
    order_struct_hash,
    resolve_exchange,
    salt_from_key,
    to_order_struct,
    verify_order_signature,
)

__all__ = [
    "OrderBuilder",
    "calculate_amounts",
    "create_limit_order",
    "domain_separator",
    "generate_salt",
    "hash_order",
    "order_digest",
    "order_struct_hash",
    "resolve_exchange",
    "salt_from_key",
    "to_order_struct",
    "verify_order_signature",
]
