from __future__ import annotations

from typing import Any

from fastapi import HTTPException, Request
from starlette.formparsers import MultiPartException

from ..client import CoinflowClient, PlaidClient, WalletAuthenticator
from ..config import Settings
from ..types import SessionContext


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_session(request: Request) -> SessionContext:
    return request.app.state.session


def get_plaid(request: Request) -> PlaidClient:
    return request.app.state.plaid


def get_authenticator(request: Request) -> WalletAuthenticator:
    return request.app.state.authenticator


def get_coinflow(request: Request) -> CoinflowClient:
    return request.app.state.coinflow


async def read_body(request: Request) -> dict[str, Any]:
    """Parse a JSON or form-urlencoded request body."""
    content_type = request.headers.get("content-type", "")
    try:
        if content_type.startswith("application/json"):
            body = await request.json()
            return body if isinstance(body, dict) else {}
        if content_type.startswith(
            ("application/x-www-form-urlencoded", "multipart/form-data")
        ):
            form = await request.form()
            return {key: value for key, value in form.items() if isinstance(value, str)}
    except (ValueError, MultiPartException) as err:
        raise HTTPException(status_code=400, detail="malformed request body") from err
    return {}
