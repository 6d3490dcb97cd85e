"""Type definitions for the Plaid/Coinflow bridge."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar, Union

import base58
from nacl import signing
from nacl.encoding import RawEncoder

from .errors import RetryExhausted

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    delay_ms: int
    max_attempts: int

    def __post_init__(self) -> None:
        if self.delay_ms <= 0:
            raise ValueError(f"delay_ms must be positive, got {self.delay_ms}")
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")

    @property
    def delay_seconds(self) -> float:
        return self.delay_ms / 1000


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T
    ok = True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Exhausted:
    last_error: BaseException | None
    attempts: int
    reason: str = "Ran out of retries"
    ok = False

    def unwrap(self):
        raise RetryExhausted(
            self.reason, last_error=self.last_error, attempts=self.attempts
        ) from self.last_error


PollOutcome = Union[Success[T], Exhausted]


@dataclass(frozen=True)
class WalletKeypair:
    """Ed25519 keypair standing in for a Solana wallet."""

    public_key: bytes
    secret_key: bytes = field(repr=False)

    @classmethod
    def generate(cls) -> WalletKeypair:
        signer = signing.SigningKey.generate()
        return cls(
            public_key=signer.verify_key.encode(encoder=RawEncoder),
            secret_key=signer.encode(encoder=RawEncoder),
        )

    @property
    def public_key_b58(self) -> str:
        return base58.b58encode(self.public_key).decode("ascii")


@dataclass(frozen=True)
class WalletCredential:
    """Bearer token issued by the payments API for one wallet address."""

    public_key: str
    token: str = field(repr=False)

    def headers(self, blockchain: str) -> dict[str, str]:
        return {
            "Authorization": self.token,
            "accept": "application/json",
            "x-coinflow-auth-wallet": self.public_key,
            "x-coinflow-auth-blockchain": blockchain,
        }


@dataclass
class SessionContext:
    """Identifiers collected over one browser session."""

    public_token: str | None = None
    access_token: str | None = None
    item_id: str | None = None
    account_id: str | None = None
    # Only relevant for the UK/EU Payment Initiation product.
    payment_id: str | None = None
    authorization_id: str | None = None
    transfer_id: str | None = None
    wallet: WalletCredential | None = None
