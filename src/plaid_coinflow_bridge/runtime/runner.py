from __future__ import annotations

import asyncio
import logging

from ..config import Settings, load_settings


async def _run_async_server(settings: Settings) -> None:
    """Serve the REST API until interrupted."""
    from ..api import create_app

    app = create_app(settings)

    import uvicorn

    logger = logging.getLogger(__name__)
    logger.info(
        f"plaid-coinflow-bridge listening on {settings.app_host}:{settings.app_port} "
        f"(plaid env: {settings.plaid_env})"
    )

    config = uvicorn.Config(app, host=settings.app_host, port=settings.app_port)
    server = uvicorn.Server(config)
    await server.serve()


def run() -> None:
    """Main entry point: read settings from `.env` and the environment, then serve."""
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    asyncio.run(_run_async_server(settings))
