"""Coinflow payments API calls made after wallet authentication."""

from __future__ import annotations

import logging
from typing import Any

import requests

from ..errors import ProtocolViolation
from ..types import WalletCredential
from .http import json_body, send

logger = logging.getLogger(__name__)

# Placeholder identity attached to sandbox bank accounts.
SANDBOX_CUSTOMER = {
    "email": "test@email.com",
    "firstName": "test",
    "lastName": "user",
    "address1": "123 Main St",
    "city": "White Plains",
    "state": "NY",
    "zip": "10601",
}


def build_bank_account_body(
    auth_data: dict[str, Any],
    access_token: str,
    wallet: str,
    blockchain: str = "solana",
) -> dict[str, Any]:
    """Map a Plaid ``/auth/get`` response onto a Coinflow bank account request.

    Only the first account and first ACH number are used.
    """
    accounts = auth_data.get("accounts") or []
    ach_numbers = (auth_data.get("numbers") or {}).get("ach") or []
    if not accounts:
        raise ProtocolViolation("accounts", "No accounts found")
    if not ach_numbers:
        raise ProtocolViolation("numbers.ach", "No ACH numbers found")
    account = accounts[0]
    ach = ach_numbers[0]
    return {
        "type": account.get("subtype"),
        "blockchain": blockchain,
        "routingNumber": ach.get("routing"),
        "account_number": ach.get("account"),
        **SANDBOX_CUSTOMER,
        "alias": account.get("name"),
        "plaidAccountId": account.get("account_id"),
        "plaidAccessToken": access_token,
        "wallet": wallet,
    }


class CoinflowClient:
    def __init__(
        self,
        base_url: str,
        api_key: str,
        blockchain: str = "solana",
        session: requests.Session | None = None,
        timeout: float = 30,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.blockchain = blockchain
        self._session = session or requests.Session()
        self.timeout = timeout

    async def add_bank_account(self, body: dict[str, Any]) -> None:
        """Register a bank account for the wallet named in ``body``."""
        resp = await send(
            self._session,
            "POST",
            f"{self.base_url}/api/customer/bankAccount/",
            headers={"Authorization": self.api_key, "content-type": "application/json"},
            json=body,
            timeout=self.timeout,
        )
        logger.debug(f"bank account added for wallet {body.get('wallet')}: {resp.status_code}")

    async def get_customer(self, credential: WalletCredential) -> dict[str, Any]:
        resp = await send(
            self._session,
            "GET",
            f"{self.base_url}/api/customer",
            headers=credential.headers(self.blockchain),
            timeout=self.timeout,
        )
        return json_body(resp)
