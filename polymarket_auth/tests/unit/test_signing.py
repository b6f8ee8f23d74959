"""
Tests for signature primitives.

Covers address derivation, deterministic signing, recovery and
rejection of malformed or malleable signatures.
"""

import hashlib

import pytest
from eth_account import Account

from polymarket_auth.auth.signing import (
    derive_address,
    keccak256,
    parse_signature,
    recover_signer,
    sign_digest,
)
from polymarket_auth.exceptions import ValidationError
from polymarket_auth.utils.validators import SECP256K1_N

from conftest import HARDHAT_ADDRESS, HARDHAT_KEY, SECOND_ADDRESS, SECOND_KEY


def _digest(i: int) -> bytes:
    return hashlib.sha256(f"digest-{i}".encode()).digest()


class TestKeccak:
    """Keccak-256 (not NIST SHA3-256)."""

    def test_empty_input(self):
        assert keccak256(b"").hex() == (
            "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
        )

    def test_differs_from_sha3(self):
        assert keccak256(b"abc") != hashlib.sha3_256(b"abc").digest()


class TestDeriveAddress:
    """Address derivation."""

    def test_hardhat_accounts(self):
        assert derive_address(HARDHAT_KEY) == HARDHAT_ADDRESS
        assert derive_address(SECOND_KEY) == SECOND_ADDRESS

    def test_accepts_unprefixed_and_uppercase_key(self):
        assert derive_address(HARDHAT_KEY[2:]) == HARDHAT_ADDRESS
        assert derive_address("0x" + HARDHAT_KEY[2:].upper()) == HARDHAT_ADDRESS

    def test_matches_eth_account(self):
        assert derive_address(SECOND_KEY) == Account.from_key(SECOND_KEY).address

    def test_stable_across_calls(self):
        assert len({derive_address(HARDHAT_KEY) for _ in range(50)}) == 1

    @pytest.mark.parametrize("bad_key", [
        "0x" + "00" * 32,                                   # zero scalar
        "0x" + format(SECP256K1_N, "064x"),                 # group order
        "0x" + "ff" * 32,                                   # above group order
        "0x1234",                                           # too short
        "0x" + "zz" * 32,                                   # not hex
        "",
    ])
    def test_rejects_invalid_keys(self, bad_key):
        with pytest.raises(ValidationError):
            derive_address(bad_key)

    def test_error_does_not_echo_key(self):
        bad = "0x" + "ab" * 31 + "zz"
        with pytest.raises(ValidationError) as exc_info:
            derive_address(bad)
        assert bad[2:] not in str(exc_info.value)


class TestSignDigest:
    """secp256k1 signing over 32-byte digests."""

    def test_signature_shape(self):
        signature = sign_digest(HARDHAT_KEY, _digest(0))

        assert signature.startswith("0x")
        assert len(signature) == 132
        assert int(signature[-2:], 16) in (27, 28)

    def test_deterministic_over_many_digests(self):
        """Same key and digest always give the same signature."""
        for i in range(1000):
            digest = _digest(i)
            assert sign_digest(HARDHAT_KEY, digest) == sign_digest(HARDHAT_KEY, digest)

    def test_recovers_signer(self):
        for i in range(100):
            digest = _digest(i)
            signature = sign_digest(HARDHAT_KEY, digest)
            assert recover_signer(digest, signature) == HARDHAT_ADDRESS

    def test_different_keys_different_signatures(self):
        digest = _digest(7)
        assert sign_digest(HARDHAT_KEY, digest) != sign_digest(SECOND_KEY, digest)

    def test_always_low_s(self):
        for i in range(200):
            _, s, _ = parse_signature(sign_digest(SECOND_KEY, _digest(i)))
            assert s <= SECP256K1_N // 2

    def test_accepts_hex_digest(self):
        digest = _digest(3)
        assert sign_digest(HARDHAT_KEY, "0x" + digest.hex()) == sign_digest(HARDHAT_KEY, digest)

    @pytest.mark.parametrize("bad_digest", [b"", b"\x00" * 31, b"\x00" * 33, "0xnothex"])
    def test_rejects_wrong_digest_length(self, bad_digest):
        with pytest.raises(ValidationError):
            sign_digest(HARDHAT_KEY, bad_digest)

    def test_matches_eth_account_message_signing(self):
        """eth_account signs keccak(0x19 || version || header || body); so do we."""
        from eth_account.messages import encode_typed_data

        typed = {
            "types": {
                "EIP712Domain": [
                    {"name": "name", "type": "string"},
                    {"name": "version", "type": "string"},
                    {"name": "chainId", "type": "uint256"},
                ],
                "Ping": [{"name": "value", "type": "uint256"}],
            },
            "primaryType": "Ping",
            "domain": {"name": "Test", "version": "1", "chainId": 137},
            "message": {"value": 42},
        }
        signable = encode_typed_data(full_message=typed)
        digest = keccak256(b"\x19" + signable.version + signable.header + signable.body)

        expected = Account.sign_message(signable, HARDHAT_KEY).signature
        assert sign_digest(HARDHAT_KEY, digest) == "0x" + bytes(expected).hex()


class TestParseSignature:
    """Signature parsing and canonical-form checks."""

    def _flip_to_high_s(self, signature: str) -> str:
        r, s, v = parse_signature(signature)
        high_s = SECP256K1_N - s
        flipped_v = 55 - v  # 27 <-> 28
        raw = r.to_bytes(32, "big") + high_s.to_bytes(32, "big") + bytes([flipped_v])
        return "0x" + raw.hex()

    def test_round_trip_components(self):
        signature = sign_digest(HARDHAT_KEY, _digest(1))
        r, s, v = parse_signature(signature)

        assert 0 < r < SECP256K1_N
        assert v in (27, 28)
        raw = r.to_bytes(32, "big") + s.to_bytes(32, "big") + bytes([v])
        assert "0x" + raw.hex() == signature

    def test_rejects_high_s(self):
        signature = sign_digest(HARDHAT_KEY, _digest(2))
        with pytest.raises(ValidationError, match="Non-canonical"):
            parse_signature(self._flip_to_high_s(signature))

    def test_rejects_bad_recovery_id(self):
        signature = sign_digest(HARDHAT_KEY, _digest(2))
        with pytest.raises(ValidationError, match="recovery id"):
            parse_signature(signature[:-2] + "1d")  # v = 29

    def test_rejects_zero_r(self):
        signature = sign_digest(HARDHAT_KEY, _digest(2))
        with pytest.raises(ValidationError):
            parse_signature("0x" + "00" * 32 + signature[66:])

    @pytest.mark.parametrize("bad", ["0x", "0x" + "ab" * 64, "0x" + "ab" * 66, "0x" + "zz" * 65])
    def test_rejects_malformed(self, bad):
        with pytest.raises(ValidationError):
            parse_signature(bad)

    def test_rejects_non_string(self):
        with pytest.raises(ValidationError):
            parse_signature(b"\x00" * 65)

    def test_recover_wrong_digest_gives_other_address(self):
        signature = sign_digest(HARDHAT_KEY, _digest(4))
        assert recover_signer(_digest(5), signature) != HARDHAT_ADDRESS
