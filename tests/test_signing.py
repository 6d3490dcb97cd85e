"""Tests for wallet keypairs and detached signatures."""

from unittest.mock import patch

import base58
import pytest

from plaid_coinflow_bridge.client.signing import (
    decode_signature,
    encode_signature,
    sign_message,
    verify_signature,
)
from plaid_coinflow_bridge.errors import SignatureConsistencyError
from plaid_coinflow_bridge.types import WalletKeypair


def test_generate_keypair_is_matched_pair():
    keypair = WalletKeypair.generate()

    assert len(keypair.public_key) == 32
    assert len(keypair.secret_key) == 32
    signature = sign_message("pair check", keypair)
    assert verify_signature(b"pair check", signature, keypair.public_key)


def test_keypairs_are_fresh():
    assert WalletKeypair.generate().public_key != WalletKeypair.generate().public_key


def test_secret_key_not_in_repr():
    keypair = WalletKeypair.generate()
    assert repr(keypair.secret_key) not in repr(keypair)
    assert "secret_key" not in repr(keypair)


def test_public_key_b58_is_wallet_address():
    keypair = WalletKeypair.generate()
    assert base58.b58decode(keypair.public_key_b58) == keypair.public_key


@pytest.mark.parametrize("message", ["hello", "", "Sign this: ✓ 1234", "x" * 4096])
def test_sign_then_verify(message):
    keypair = WalletKeypair.generate()

    signature = sign_message(message, keypair)

    assert len(signature) == 64
    assert verify_signature(message.encode("utf-8"), signature, keypair.public_key)


def test_signing_is_deterministic():
    keypair = WalletKeypair.generate()
    assert sign_message("hello", keypair) == sign_message("hello", keypair)


def test_signature_does_not_verify_under_other_key():
    a = WalletKeypair.generate()
    b = WalletKeypair.generate()

    sig_a = sign_message("hello", a)
    sig_b = sign_message("hello", b)

    assert sig_a != sig_b
    assert not verify_signature(b"hello", sig_a, b.public_key)
    assert not verify_signature(b"hello", sig_b, a.public_key)


def test_signature_does_not_verify_for_other_message():
    keypair = WalletKeypair.generate()
    signature = sign_message("hello", keypair)
    assert not verify_signature(b"hellp", signature, keypair.public_key)


def test_verify_rejects_malformed_signature():
    keypair = WalletKeypair.generate()
    assert not verify_signature(b"hello", b"short", keypair.public_key)


def test_local_verification_failure_raises():
    keypair = WalletKeypair.generate()
    with patch(
        "plaid_coinflow_bridge.client.signing.verify_signature", return_value=False
    ):
        with pytest.raises(SignatureConsistencyError):
            sign_message("hello", keypair)


def test_mismatched_keypair_is_caught_before_use():
    a = WalletKeypair.generate()
    b = WalletKeypair.generate()
    mixed = WalletKeypair(public_key=a.public_key, secret_key=b.secret_key)

    with pytest.raises(SignatureConsistencyError):
        sign_message("hello", mixed)


def test_base58_signature_round_trip():
    keypair = WalletKeypair.generate()
    signature = sign_message("hello", keypair)

    encoded = encode_signature(signature)

    assert isinstance(encoded, str)
    assert not set(encoded) & set("0OIl+/=")
    assert decode_signature(encoded) == signature
