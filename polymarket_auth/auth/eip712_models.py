"""
EIP-712 structs signed by Polymarket wallets.

Uses poly_eip712_structs (Polymarket's fork of eip712-structs):
- ClobAuth: wallet proof for L1 authentication
- Order: CTF Exchange limit order
"""

from functools import lru_cache

from poly_eip712_structs import EIP712Struct, Address, String, Uint, make_domain

from ..constants import CLOB_DOMAIN_NAME, CLOB_DOMAIN_VERSION, MSG_TO_SIGN
from .signing import keccak256


class ClobAuth(EIP712Struct):
    """
    ClobAuth(address address,string timestamp,uint256 nonce,string message)

    Binds a wallet address to a timestamp and nonce for L1 authentication.
    """
    address = Address()
    timestamp = String()
    nonce = Uint()
    message = String()


class Order(EIP712Struct):
    """
    Order(uint256 salt,address maker,address signer,address taker,uint256 tokenId,
          uint256 makerAmount,uint256 takerAmount,uint256 expiration,uint256 nonce,
          uint256 feeRateBps,uint8 side,uint8 signatureType)

    Field order is part of the type hash.
    """
    salt = Uint(256)
    maker = Address()
    signer = Address()
    taker = Address()
    tokenId = Uint(256)
    makerAmount = Uint(256)
    takerAmount = Uint(256)
    expiration = Uint(256)
    nonce = Uint(256)
    feeRateBps = Uint(256)
    side = Uint(8)
    signatureType = Uint(8)


@lru_cache(maxsize=8)
def clob_auth_domain(chain_id: int):
    """ClobAuthDomain has no verifying contract: name, version and chainId only."""
    return make_domain(
        name=CLOB_DOMAIN_NAME,
        version=CLOB_DOMAIN_VERSION,
        chainId=chain_id,
    )


def exchange_domain(chain_id: int, verifying_contract: str, name: str, version: str):
    """EIP712Domain of an exchange deployment."""
    return make_domain(
        name=name,
        version=version,
        chainId=chain_id,
        verifyingContract=verifying_contract,
    )


def clob_auth_digest(address: str, timestamp: str, nonce: int, chain_id: int) -> bytes:
    """
    Compute the 32-byte EIP-712 digest a wallet signs for L1 headers.

    keccak256(0x1901 || domainSeparator || hashStruct(ClobAuth))
    """
    message = ClobAuth(
        address=address,
        timestamp=timestamp,
        nonce=nonce,
        message=MSG_TO_SIGN,
    )
    return keccak256(message.signable_bytes(clob_auth_domain(chain_id)))
