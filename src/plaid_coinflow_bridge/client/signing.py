from __future__ import annotations

import base58
from nacl import signing
from nacl.encoding import RawEncoder
from nacl.exceptions import BadSignatureError

from ..errors import SignatureConsistencyError
from ..types import WalletKeypair


def verify_signature(message: bytes, signature: bytes, public_key: bytes) -> bool:
    """Check a detached Ed25519 signature over ``message``."""
    try:
        signing.VerifyKey(public_key).verify(message, signature)
    except (BadSignatureError, ValueError):
        return False
    return True


def sign_message(message: str, keypair: WalletKeypair) -> bytes:
    """Produce a detached signature over the UTF-8 bytes of ``message``.

    The signature is checked against the keypair's public key before it is
    returned; a mismatch raises ``SignatureConsistencyError``.
    """
    message_bytes = message.encode("utf-8")
    signature = (
        signing.SigningKey(keypair.secret_key).sign(message_bytes, encoder=RawEncoder).signature
    )
    if not verify_signature(message_bytes, signature, keypair.public_key):
        raise SignatureConsistencyError("signature failed local verification")
    return signature


def encode_signature(signature: bytes) -> str:
    return base58.b58encode(signature).decode("ascii")


def decode_signature(encoded: str) -> bytes:
    return base58.b58decode(encoded)
