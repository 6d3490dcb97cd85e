from .auth import WalletAuthenticator
from .coinflow import CoinflowClient, build_bank_account_body
from .plaid import PlaidClient
from .signing import decode_signature, encode_signature, sign_message, verify_signature

__all__ = [
    "CoinflowClient",
    "PlaidClient",
    "WalletAuthenticator",
    "build_bank_account_body",
    "decode_signature",
    "encode_signature",
    "sign_message",
    "verify_signature",
]
