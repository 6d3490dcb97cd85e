from .api import create_app
from .client import WalletAuthenticator
from .config import Settings
from .runtime import poll, poll_with_retries
from .runtime.runner import run
from .types import (
    Exhausted,
    RetryPolicy,
    SessionContext,
    Success,
    WalletCredential,
    WalletKeypair,
)

__all__ = [
    "create_app",
    "Exhausted",
    "poll",
    "poll_with_retries",
    "RetryPolicy",
    "run",
    "SessionContext",
    "Settings",
    "Success",
    "WalletAuthenticator",
    "WalletCredential",
    "WalletKeypair",
]
