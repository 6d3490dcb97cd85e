from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..client import CoinflowClient, PlaidClient, WalletAuthenticator
from ..config import Settings
from ..errors import BridgeError
from ..types import SessionContext
from .routes import router

logger = logging.getLogger(__name__)


async def bridge_error_handler(request: Request, exc: BridgeError) -> JSONResponse:
    """Render upstream and handshake failures the way the frontend expects them."""
    logger.warning(f"{request.method} {request.url.path} failed: {type(exc).__name__}: {exc}")
    return JSONResponse({"error": exc.to_payload()})


def create_app(
    settings: Settings,
    plaid: PlaidClient | None = None,
    authenticator: WalletAuthenticator | None = None,
    coinflow: CoinflowClient | None = None,
    session: SessionContext | None = None,
) -> FastAPI:
    app = FastAPI(title="Plaid Coinflow Bridge")
    app.state.settings = settings
    app.state.session = session or SessionContext()
    app.state.plaid = plaid or PlaidClient(settings)
    app.state.authenticator = authenticator or WalletAuthenticator(
        settings.coinflow_base_url, blockchain=settings.coinflow_blockchain
    )
    app.state.coinflow = coinflow or CoinflowClient(
        settings.coinflow_base_url,
        settings.coinflow_api_key,
        blockchain=settings.coinflow_blockchain,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(BridgeError, bridge_error_handler)
    app.include_router(router)
    return app
