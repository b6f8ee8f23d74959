"""
Protocol constants for Polymarket CLOB authentication and order signing.

Source: https://github.com/Polymarket/py-clob-client (config.py, signing/)
License: MIT
"""

from typing import Dict

# Chains
POLYGON = 137
AMOY = 80002

# Header names (case as expected by the CLOB)
POLY_ADDRESS = "POLY_ADDRESS"
POLY_SIGNATURE = "POLY_SIGNATURE"
POLY_TIMESTAMP = "POLY_TIMESTAMP"
POLY_NONCE = "POLY_NONCE"
POLY_API_KEY = "POLY_API_KEY"
POLY_PASSPHRASE = "POLY_PASSPHRASE"

# L1 (ClobAuth) EIP-712 domain
CLOB_DOMAIN_NAME = "ClobAuthDomain"
CLOB_DOMAIN_VERSION = "1"
MSG_TO_SIGN = "This message attests that I control the given wallet"

# Order EIP-712 domain
CTF_EXCHANGE_DOMAIN_NAME = "Polymarket CTF Exchange"
CTF_EXCHANGE_DOMAIN_VERSION = "1"

# Exchange contracts (verifying contracts for order signatures)
CTF_EXCHANGE = "0x4bFb41d5B3570DeFd03C39a9A4D8dE6Bd8B8982E"
NEG_RISK_CTF_EXCHANGE = "0xC5d563A36AE78145C45a50134d48A1215220f80a"
AMOY_CTF_EXCHANGE = "0xdFE02Eb6733538f8Ea35D585af8DE5958AD99E40"

EXCHANGE_CONTRACTS: Dict[int, Dict[bool, str]] = {
    POLYGON: {False: CTF_EXCHANGE, True: NEG_RISK_CTF_EXCHANGE},
    AMOY: {False: AMOY_CTF_EXCHANGE, True: NEG_RISK_CTF_EXCHANGE},
}

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# USDC and conditional tokens both use 6 decimals on Polygon
TOKEN_DECIMALS = 6

# Default order lifetime: 365 days
ONE_YEAR_SECONDS = 31_536_000


def get_exchange_address(chain_id: int, neg_risk: bool = False) -> str:
    """
    Get the verifying exchange contract for a chain.

    Args:
        chain_id: Chain ID (137 Polygon, 80002 Amoy)
        neg_risk: Use the neg-risk CTF exchange

    Returns:
        Exchange contract address

    Raises:
        KeyError: If chain is not supported
    """
    return EXCHANGE_CONTRACTS[chain_id][neg_risk]
