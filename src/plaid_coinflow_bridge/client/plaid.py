"""Thin async client for the Plaid REST API."""

from __future__ import annotations

import logging
from typing import Any

import requests

from ..config import Settings
from ..errors import PlaidApiError
from ..runtime.poller import poll_with_retries
from ..types import RetryPolicy
from .http import json_body, send

logger = logging.getLogger(__name__)

PLAID_VERSION = "2020-09-14"


class PlaidClient:
    def __init__(
        self,
        settings: Settings,
        session: requests.Session | None = None,
        timeout: float = 30,
    ) -> None:
        self.base_url = settings.plaid_base_url
        self.timeout = timeout
        self._session = session or requests.Session()
        self._headers = {
            "PLAID-CLIENT-ID": settings.plaid_client_id,
            "PLAID-SECRET": settings.plaid_secret,
            "Plaid-Version": PLAID_VERSION,
            "Content-Type": "application/json",
        }

    async def _call(self, path: str, payload: dict[str, Any]) -> requests.Response:
        resp = await send(
            self._session,
            "POST",
            f"{self.base_url}{path}",
            raise_for_status=False,
            json=payload,
            headers=self._headers,
            timeout=self.timeout,
        )
        if not 200 <= resp.status_code < 300:
            try:
                data = resp.json()
            except ValueError:
                data = {"error_message": resp.text[:200]}
            raise PlaidApiError(resp.status_code, data if isinstance(data, dict) else {})
        return resp

    async def _post(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        resp = await self._call(path, payload)
        data = json_body(resp)
        logger.debug(f"POST {path} -> {resp.status_code} request_id={data.get('request_id')}")
        return data

    async def _post_binary(self, path: str, payload: dict[str, Any]) -> bytes:
        resp = await self._call(path, payload)
        logger.debug(f"POST {path} -> {resp.status_code} ({len(resp.content)} bytes)")
        return resp.content

    async def link_token_create(self, configs: dict[str, Any]) -> dict[str, Any]:
        return await self._post("/link/token/create", configs)

    async def item_public_token_exchange(self, public_token: str) -> dict[str, Any]:
        return await self._post("/item/public_token/exchange", {"public_token": public_token})

    async def auth_get(self, access_token: str) -> dict[str, Any]:
        return await self._post("/auth/get", {"access_token": access_token})

    async def identity_get(self, access_token: str) -> dict[str, Any]:
        return await self._post("/identity/get", {"access_token": access_token})

    async def accounts_balance_get(self, access_token: str) -> dict[str, Any]:
        return await self._post("/accounts/balance/get", {"access_token": access_token})

    async def investments_holdings_get(self, access_token: str) -> dict[str, Any]:
        return await self._post("/investments/holdings/get", {"access_token": access_token})

    async def liabilities_get(self, access_token: str) -> dict[str, Any]:
        return await self._post("/liabilities/get", {"access_token": access_token})

    async def item_get(self, access_token: str) -> dict[str, Any]:
        return await self._post("/item/get", {"access_token": access_token})

    async def institutions_get_by_id(
        self, institution_id: str, country_codes: list[str]
    ) -> dict[str, Any]:
        return await self._post(
            "/institutions/get_by_id",
            {"institution_id": institution_id, "country_codes": country_codes},
        )

    async def accounts_get(self, access_token: str) -> dict[str, Any]:
        return await self._post("/accounts/get", {"access_token": access_token})

    async def asset_report_create(self, configs: dict[str, Any]) -> dict[str, Any]:
        return await self._post("/asset_report/create", configs)

    async def asset_report_get(self, asset_report_token: str) -> dict[str, Any]:
        return await self._post("/asset_report/get", {"asset_report_token": asset_report_token})

    async def asset_report_pdf_get(self, asset_report_token: str) -> bytes:
        return await self._post_binary(
            "/asset_report/pdf/get", {"asset_report_token": asset_report_token}
        )

    async def wait_for_asset_report(
        self, asset_report_token: str, policy: RetryPolicy
    ) -> dict[str, Any]:
        """Poll ``/asset_report/get`` until the report has been generated.

        Raises ``RetryExhausted`` once ``policy.max_attempts`` polls have failed.
        A webhook on ``/asset_report/create`` is the alternative to polling.
        """
        return await poll_with_retries(
            lambda: self.asset_report_get(asset_report_token),
            policy,
            reason="Ran out of retries while polling for asset report",
        )

    async def statements_list(self, access_token: str) -> dict[str, Any]:
        return await self._post("/statements/list", {"access_token": access_token})

    async def statements_download(self, access_token: str, statement_id: str) -> bytes:
        return await self._post_binary(
            "/statements/download",
            {"access_token": access_token, "statement_id": statement_id},
        )

    async def payment_initiation_payment_get(self, payment_id: str) -> dict[str, Any]:
        return await self._post("/payment_initiation/payment/get", {"payment_id": payment_id})

    async def income_verification_paystubs_get(self, access_token: str) -> dict[str, Any]:
        return await self._post(
            "/income/verification/paystubs/get", {"access_token": access_token}
        )

    async def transfer_authorization_create(self, request: dict[str, Any]) -> dict[str, Any]:
        return await self._post("/transfer/authorization/create", request)

    async def transfer_create(self, request: dict[str, Any]) -> dict[str, Any]:
        return await self._post("/transfer/create", request)

    async def signal_evaluate(self, request: dict[str, Any]) -> dict[str, Any]:
        return await self._post("/signal/evaluate", request)
