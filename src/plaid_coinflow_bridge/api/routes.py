"""REST routes consumed by the quickstart frontend.

Each route forwards to one or two upstream calls and reshapes the result.
Identifiers returned by upstream calls are kept on the ``SessionContext``.
"""

from __future__ import annotations

import base64
import logging
from datetime import date, timedelta
from typing import Any

from fastapi import APIRouter, Depends, Request

from ..client import CoinflowClient, PlaidClient, WalletAuthenticator, build_bank_account_body
from ..config import Settings
from ..types import SessionContext
from .dependencies import (
    get_authenticator,
    get_coinflow,
    get_plaid,
    get_session,
    get_settings,
    read_body,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

# Up to two years of history may be requested for an asset report.
ASSET_REPORT_DAYS_REQUESTED = 10

ASSET_REPORT_OPTIONS = {
    "client_report_id": "Custom Report ID #123",
    "user": {
        "client_user_id": "Custom User ID #456",
        "first_name": "Alice",
        "middle_name": "Bobcat",
        "last_name": "Cranberry",
        "ssn": "123-45-6789",
        "phone_number": "555-123-4567",
        "email": "alice@example.com",
    },
}

TRANSFER_USER = {
    "legal_name": "FirstName LastName",
    "email_address": "foobar@email.com",
    "address": {
        "street": "123 Main St.",
        "city": "San Francisco",
        "region": "CA",
        "postal_code": "94053",
        "country": "US",
    },
}


@router.post("/info")
async def info(
    settings: Settings = Depends(get_settings),
    session: SessionContext = Depends(get_session),
) -> dict[str, Any]:
    return {
        "item_id": session.item_id,
        "access_token": session.access_token,
        "products": settings.plaid_products,
    }


@router.post("/create_link_token")
async def create_link_token(
    settings: Settings = Depends(get_settings),
    plaid: PlaidClient = Depends(get_plaid),
) -> dict[str, Any]:
    configs: dict[str, Any] = {
        # Should be a unique id for the current user.
        "user": {"client_user_id": "user-id"},
        "client_name": "Plaid Quickstart",
        "products": settings.plaid_products,
        "country_codes": settings.plaid_country_codes,
        "language": "en",
    }
    if settings.plaid_redirect_uri:
        configs["redirect_uri"] = settings.plaid_redirect_uri
    if settings.plaid_android_package_name:
        configs["android_package_name"] = settings.plaid_android_package_name
    if "statements" in settings.plaid_products:
        today = date.today()
        configs["statements"] = {
            "end_date": today.isoformat(),
            "start_date": (today - timedelta(days=30)).isoformat(),
        }
    return await plaid.link_token_create(configs)


async def _exchange_public_token(
    request: Request, plaid: PlaidClient, session: SessionContext
) -> None:
    body = await read_body(request)
    session.public_token = body.get("public_token")
    token_response = await plaid.item_public_token_exchange(session.public_token)
    session.access_token = token_response["access_token"]
    session.item_id = token_response["item_id"]
    logger.info(f"exchanged public token for item {session.item_id}")


@router.post("/set_access_token")
async def set_access_token(
    request: Request,
    plaid: PlaidClient = Depends(get_plaid),
    session: SessionContext = Depends(get_session),
) -> dict[str, Any]:
    await _exchange_public_token(request, plaid, session)
    return {
        # Private token; a production frontend must never receive it.
        "access_token": session.access_token,
        "item_id": session.item_id,
        "error": None,
    }


@router.post("/convert_plaid_public_token_to_coinflow_token")
async def convert_plaid_public_token_to_coinflow_token(
    request: Request,
    settings: Settings = Depends(get_settings),
    plaid: PlaidClient = Depends(get_plaid),
    authenticator: WalletAuthenticator = Depends(get_authenticator),
    coinflow: CoinflowClient = Depends(get_coinflow),
    session: SessionContext = Depends(get_session),
) -> dict[str, Any]:
    """Link the Plaid item's first bank account to a freshly authenticated wallet."""
    wallet = await authenticator.authenticate()
    session.wallet = wallet
    logger.info(f"authenticated sandbox wallet {wallet.public_key}")

    await _exchange_public_token(request, plaid, session)
    auth_data = await plaid.auth_get(session.access_token)
    body = build_bank_account_body(
        auth_data,
        access_token=session.access_token,
        wallet=wallet.public_key,
        blockchain=settings.coinflow_blockchain,
    )
    session.account_id = body["plaidAccountId"]
    await coinflow.add_bank_account(body)
    customer = await coinflow.get_customer(wallet)
    return {"wallet": wallet.public_key, "customer": customer}


@router.get("/auth")
async def auth(
    plaid: PlaidClient = Depends(get_plaid),
    session: SessionContext = Depends(get_session),
) -> dict[str, Any]:
    return await plaid.auth_get(session.access_token)


@router.get("/identity")
async def identity(
    plaid: PlaidClient = Depends(get_plaid),
    session: SessionContext = Depends(get_session),
) -> dict[str, Any]:
    data = await plaid.identity_get(session.access_token)
    return {"identity": data.get("accounts")}


@router.get("/balance")
async def balance(
    plaid: PlaidClient = Depends(get_plaid),
    session: SessionContext = Depends(get_session),
) -> dict[str, Any]:
    return await plaid.accounts_balance_get(session.access_token)


@router.get("/holdings")
async def holdings(
    plaid: PlaidClient = Depends(get_plaid),
    session: SessionContext = Depends(get_session),
) -> dict[str, Any]:
    data = await plaid.investments_holdings_get(session.access_token)
    return {"error": None, "holdings": data}


@router.get("/liabilities")
async def liabilities(
    plaid: PlaidClient = Depends(get_plaid),
    session: SessionContext = Depends(get_session),
) -> dict[str, Any]:
    data = await plaid.liabilities_get(session.access_token)
    return {"error": None, "liabilities": data}


@router.get("/item")
async def item(
    settings: Settings = Depends(get_settings),
    plaid: PlaidClient = Depends(get_plaid),
    session: SessionContext = Depends(get_session),
) -> dict[str, Any]:
    item_data = (await plaid.item_get(session.access_token))["item"]
    institution = await plaid.institutions_get_by_id(
        item_data["institution_id"], settings.plaid_country_codes
    )
    return {"item": item_data, "institution": institution.get("institution")}


@router.get("/accounts")
async def accounts(
    plaid: PlaidClient = Depends(get_plaid),
    session: SessionContext = Depends(get_session),
) -> dict[str, Any]:
    return await plaid.accounts_get(session.access_token)


@router.get("/assets")
async def assets(
    settings: Settings = Depends(get_settings),
    plaid: PlaidClient = Depends(get_plaid),
    session: SessionContext = Depends(get_session),
) -> dict[str, Any]:
    created = await plaid.asset_report_create(
        {
            "access_tokens": [session.access_token],
            "days_requested": ASSET_REPORT_DAYS_REQUESTED,
            "options": ASSET_REPORT_OPTIONS,
        }
    )
    token = created["asset_report_token"]
    report = await plaid.wait_for_asset_report(token, settings.asset_report_policy)
    pdf = await plaid.asset_report_pdf_get(token)
    return {"json": report.get("report"), "pdf": base64.b64encode(pdf).decode("ascii")}


@router.get("/statements")
async def statements(
    plaid: PlaidClient = Depends(get_plaid),
    session: SessionContext = Depends(get_session),
) -> dict[str, Any]:
    listing = await plaid.statements_list(session.access_token)
    statement_id = listing["accounts"][0]["statements"][0]["statement_id"]
    pdf = await plaid.statements_download(session.access_token, statement_id)
    return {"json": listing, "pdf": base64.b64encode(pdf).decode("ascii")}


@router.get("/payment")
async def payment(
    plaid: PlaidClient = Depends(get_plaid),
    session: SessionContext = Depends(get_session),
) -> dict[str, Any]:
    data = await plaid.payment_initiation_payment_get(session.payment_id)
    return {"error": None, "payment": data}


@router.get("/income/verification/paystubs")
async def income_verification_paystubs(
    plaid: PlaidClient = Depends(get_plaid),
    session: SessionContext = Depends(get_session),
) -> dict[str, Any]:
    data = await plaid.income_verification_paystubs_get(session.access_token)
    return {"error": None, "paystubs": data}


@router.get("/transfer_authorize")
async def transfer_authorize(
    plaid: PlaidClient = Depends(get_plaid),
    session: SessionContext = Depends(get_session),
) -> dict[str, Any]:
    accounts_data = await plaid.accounts_get(session.access_token)
    session.account_id = accounts_data["accounts"][0]["account_id"]
    data = await plaid.transfer_authorization_create(
        {
            "access_token": session.access_token,
            "account_id": session.account_id,
            "type": "debit",
            "network": "ach",
            "amount": "1.00",
            "ach_class": "ppd",
            "user": TRANSFER_USER,
        }
    )
    session.authorization_id = data["authorization"]["id"]
    return data


@router.get("/transfer_create")
async def transfer_create(
    plaid: PlaidClient = Depends(get_plaid),
    session: SessionContext = Depends(get_session),
) -> dict[str, Any]:
    data = await plaid.transfer_create(
        {
            "access_token": session.access_token,
            "account_id": session.account_id,
            "authorization_id": session.authorization_id,
            "description": "Debit",
        }
    )
    session.transfer_id = data["transfer"]["id"]
    return {"error": None, "transfer": data["transfer"]}


@router.get("/signal_evaluate")
async def signal_evaluate(
    plaid: PlaidClient = Depends(get_plaid),
    session: SessionContext = Depends(get_session),
) -> dict[str, Any]:
    accounts_data = await plaid.accounts_get(session.access_token)
    session.account_id = accounts_data["accounts"][0]["account_id"]
    return await plaid.signal_evaluate(
        {
            "access_token": session.access_token,
            "account_id": session.account_id,
            "client_transaction_id": "txn1234",
            "amount": 100.0,
        }
    )
