"""Configuration settings for the bridge server."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import find_dotenv, load_dotenv

from .types import RetryPolicy

PLAID_ENVIRONMENTS = {
    "sandbox": "https://sandbox.plaid.com",
    "development": "https://development.plaid.com",
    "production": "https://production.plaid.com",
}


def _split(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class Settings:
    """Server settings, normally read from the environment via ``from_env``."""

    plaid_client_id: str = ""
    plaid_secret: str = ""
    plaid_env: str = "sandbox"
    # Must include "assets" for the asset report routes to work.
    plaid_products: list[str] = field(default_factory=lambda: ["transactions"])
    plaid_country_codes: list[str] = field(default_factory=lambda: ["US"])
    # OAuth redirect flow; must also be registered in the Plaid dashboard.
    plaid_redirect_uri: str = ""
    plaid_android_package_name: str = ""
    coinflow_base_url: str = "https://api-sandbox.coinflow.cash"
    coinflow_api_key: str = ""
    coinflow_blockchain: str = "solana"
    asset_report_poll_delay_ms: int = 1000
    asset_report_poll_attempts: int = 20
    app_host: str = "0.0.0.0"  # noqa: S104
    app_port: int = 8000
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.plaid_env not in PLAID_ENVIRONMENTS:
            raise ValueError(
                f"unknown PLAID_ENV '{self.plaid_env}', "
                f"expected one of {sorted(PLAID_ENVIRONMENTS)}"
            )

    @property
    def plaid_base_url(self) -> str:
        return PLAID_ENVIRONMENTS[self.plaid_env]

    @property
    def asset_report_policy(self) -> RetryPolicy:
        return RetryPolicy(
            delay_ms=self.asset_report_poll_delay_ms,
            max_attempts=self.asset_report_poll_attempts,
        )

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            plaid_client_id=os.getenv("PLAID_CLIENT_ID", ""),
            plaid_secret=os.getenv("PLAID_SECRET", ""),
            plaid_env=os.getenv("PLAID_ENV", "sandbox"),
            plaid_products=_split(os.getenv("PLAID_PRODUCTS", "transactions")),
            plaid_country_codes=_split(os.getenv("PLAID_COUNTRY_CODES", "US")),
            plaid_redirect_uri=os.getenv("PLAID_REDIRECT_URI", ""),
            plaid_android_package_name=os.getenv("PLAID_ANDROID_PACKAGE_NAME", ""),
            coinflow_base_url=os.getenv("COINFLOW_BASE_URL", "https://api-sandbox.coinflow.cash"),
            coinflow_api_key=os.getenv("COINFLOW_API_KEY", ""),
            coinflow_blockchain=os.getenv("COINFLOW_BLOCKCHAIN", "solana"),
            asset_report_poll_delay_ms=int(os.getenv("ASSET_REPORT_POLL_DELAY_MS", "1000")),
            asset_report_poll_attempts=int(os.getenv("ASSET_REPORT_POLL_ATTEMPTS", "20")),
            app_host=os.getenv("APP_HOST", "0.0.0.0"),  # noqa: S104
            app_port=int(os.getenv("APP_PORT", "8000")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


def load_settings(dotenv_path: str | os.PathLike[str] | None = None) -> Settings:
    """Read settings from the environment after loading a ``.env`` file.

    Variables already set in the process environment take precedence over
    the file. Without ``dotenv_path`` the file is searched for from the
    working directory upwards.
    """
    load_dotenv(dotenv_path=dotenv_path or find_dotenv(usecwd=True))
    return Settings.from_env()
