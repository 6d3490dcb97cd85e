"""Wallet authentication against the Coinflow auth endpoint.

The handshake proves possession of a wallet key without sending it:

1. ``GET /api/auth`` with the wallet address returns a one-time ``message``.
2. The message is signed with the wallet's Ed25519 key and the signature is
   base58-encoded.
3. ``POST /api/auth`` with ``{"signedMessage": ...}`` returns a ``jwt`` scoped
   to that wallet address.
"""

from __future__ import annotations

import requests

from ..types import WalletCredential, WalletKeypair
from .http import json_body, require_field, send
from .signing import encode_signature, sign_message

AUTH_PATH = "/api/auth"


class WalletAuthenticator:
    def __init__(
        self,
        base_url: str,
        blockchain: str = "solana",
        session: requests.Session | None = None,
        timeout: float = 10,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.blockchain = blockchain
        # Without an injected session each handshake opens and closes its own.
        self._session = session
        self.timeout = timeout

    def _identity_headers(self, keypair: WalletKeypair) -> dict[str, str]:
        return {
            "accept": "application/json",
            "x-coinflow-auth-blockchain": self.blockchain,
            "x-coinflow-auth-wallet": keypair.public_key_b58,
        }

    async def request_challenge(self, session: requests.Session, keypair: WalletKeypair) -> str:
        resp = await send(
            session,
            "GET",
            f"{self.base_url}{AUTH_PATH}",
            headers=self._identity_headers(keypair),
            timeout=self.timeout,
        )
        return str(require_field(json_body(resp), "message"))

    async def exchange_signature(
        self, session: requests.Session, keypair: WalletKeypair, signature: str
    ) -> str:
        headers = self._identity_headers(keypair)
        headers["content-type"] = "application/json"
        resp = await send(
            session,
            "POST",
            f"{self.base_url}{AUTH_PATH}",
            headers=headers,
            json={"signedMessage": signature},
            timeout=self.timeout,
        )
        return str(require_field(json_body(resp), "jwt"))

    async def authenticate(self, keypair: WalletKeypair | None = None) -> WalletCredential:
        """Run the challenge/sign/exchange handshake and return the wallet credential.

        A fresh keypair is generated unless one is passed in; callers that need
        the key after the handshake should generate and keep it themselves.
        """
        keypair = keypair or WalletKeypair.generate()
        if self._session is not None:
            return await self._handshake(self._session, keypair)
        with requests.Session() as session:
            return await self._handshake(session, keypair)

    async def _handshake(
        self, session: requests.Session, keypair: WalletKeypair
    ) -> WalletCredential:
        challenge = await self.request_challenge(session, keypair)
        signature = encode_signature(sign_message(challenge, keypair))
        token = await self.exchange_signature(session, keypair, signature)
        return WalletCredential(public_key=keypair.public_key_b58, token=token)
