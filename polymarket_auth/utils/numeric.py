"""
Fixed-point helpers for on-chain amounts.

USDC and conditional tokens both use 6 decimals, so every amount that
goes into a signed order is an integer count of 10^-6 units. Decimal
arithmetic is used throughout; floats never reach the scaling step.
"""

from decimal import Decimal, ROUND_HALF_UP

from ..constants import TOKEN_DECIMALS


def to_wei(amount: Decimal, decimals: int = TOKEN_DECIMALS) -> int:
    """
    Convert token amount to smallest unit.

    Rounds half-up to the nearest integer unit.

    Args:
        amount: Amount in token units (Decimal)
        decimals: Number of decimals (default: 6 for USDC/CTF)

    Returns:
        Amount in smallest units (int)

    Examples:
        >>> to_wei(Decimal("100.50"))
        100500000
        >>> to_wei(Decimal("0.0000005"))
        1
    """
    multiplier = Decimal(10) ** decimals
    wei = amount * multiplier
    return int(wei.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_wei(wei: int, decimals: int = TOKEN_DECIMALS) -> Decimal:
    """
    Convert smallest units back to a token amount.

    Examples:
        >>> from_wei(100500000)
        Decimal('100.5')
    """
    divisor = Decimal(10) ** decimals
    return Decimal(wei) / divisor
